"""
Parameter type coercion.

Converts raw request values (strings, or lists of strings when a source delivered
several values for one name) into typed values according to a declared ParamType.
Values that cannot be read as the declared type become None (absent) rather than
raising; only an unknown type raises, since that is a declaration mistake.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any

from apiverifier.core.errors import ConfigurationError


class ParamType(str, Enum):
    """Supported parameter types."""

    ANY = "any"
    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    INTEGER = "integer"

    @classmethod
    def parse(cls, token: Any) -> ParamType:
        """Resolve a type token (case-insensitive, aliases allowed) or raise ConfigurationError."""
        if isinstance(token, ParamType):
            return token
        if not isinstance(token, str):
            raise ConfigurationError(f"Invalid type defined for parameter: {token!r}")
        key = token.strip().lower()
        try:
            return _ALIASES.get(key) or cls(key)
        except ValueError as e:
            raise ConfigurationError(f"Invalid type defined for parameter: {token}") from e


_ALIASES: dict[str, ParamType] = {
    "*": ParamType.ANY,
    "bool": ParamType.BOOLEAN,
    "float": ParamType.NUMBER,
    "double": ParamType.NUMBER,
    "short": ParamType.INTEGER,
    "int": ParamType.INTEGER,
}

_TRUE_TOKENS = frozenset({"true", "t", "yes", "y", "1"})
_FALSE_TOKENS = frozenset({"false", "f", "no", "n", "0"})

# Leading numeric prefix, trailing garbage ignored ("12px" -> 12)
_INTEGER_PREFIX = re.compile(r"\s*([+-]?\d+)")
_NUMBER_PREFIX = re.compile(
    r"\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


def _coerce_text(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value):
        return None
    return value


def _coerce_boolean(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        value = str(value)
    if not isinstance(value, str):
        return None
    s = value.strip().lower()
    if s in _TRUE_TOKENS:
        return True
    if s in _FALSE_TOKENS:
        return False
    return None


def _coerce_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            # Too large for a float, saturate like any other overflowing literal
            return math.inf if value > 0 else -math.inf
    m = _NUMBER_PREFIX.match(str(value))
    if not m:
        return None
    return float(m.group(1).replace("Infinity", "inf"))


def _coerce_integer(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    m = _INTEGER_PREFIX.match(str(value))
    if not m:
        return None
    try:
        return int(m.group(1))
    except ValueError:
        # Digit count above the interpreter's int conversion limit
        return None


_COERCERS = {
    ParamType.ANY: _coerce_text,
    ParamType.STRING: _coerce_text,
    ParamType.BOOLEAN: _coerce_boolean,
    ParamType.NUMBER: _coerce_number,
    ParamType.INTEGER: _coerce_integer,
}


def coerce_value(param_type: ParamType | str, value: Any, array: bool = False) -> Any:
    """
    Coerce a raw value to param_type.

    - Lists/tuples: each entry is coerced on its own (array flag ignored).
    - array=True and a non-empty string: split on "," and coerce each part.
    - Otherwise scalar coercion; unreadable values become None.

    Raises ConfigurationError when param_type is not a known type.
    """
    ptype = ParamType.parse(param_type)
    if isinstance(value, (list, tuple)):
        return [coerce_value(ptype, entry, False) for entry in value]
    if array and value:
        if isinstance(value, str):
            return [coerce_value(ptype, entry, False) for entry in value.split(",")]
        return [coerce_value(ptype, value, False)]
    return _COERCERS[ptype](value)
