"""
Param validation.

Checks extracted params against their definitions and collects every problem into
a mapping of param name -> {type, error, [min], [max]}. Nothing is raised here; an
empty mapping means the request is acceptable.

Per param, in declaration order:

- a custom `validate(value, name, definition)` hook replaces all built-in checks;
  a truthy return value is the error.
- required params must be present (None or an empty list counts as missing).
- string length / number value is compared against `max` and then `min` for
  each truthy value (each element for arrays). Later errors overwrite earlier
  ones for the same param.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from apiverifier.core.param_spec import ParameterDefinition
from apiverifier.core.param_type import ParamType

NOT_SET = "not set"
ABOVE_MAX = "value exceeds max value"
BELOW_MIN = "value below min value"


def _measure(ptype: ParamType, value: Any) -> float | None:
    """Quantity compared against bounds; None for types that are not bounds-checked."""
    if ptype is ParamType.STRING:
        return len(value) if isinstance(value, str) else len(str(value))
    if ptype is ParamType.NUMBER:
        return value
    return None


def _error(definition: ParameterDefinition, message: Any, **bound: float) -> dict[str, Any]:
    return {"type": definition.type.value, "error": message, **bound}


def check_params(
    definitions: Mapping[str, ParameterDefinition],
    params: Mapping[str, Any],
) -> dict[str, dict[str, Any]]:
    """Return errors keyed by param name; empty when all params are valid."""
    errors: dict[str, dict[str, Any]] = {}
    for name, definition in definitions.items():
        value = params.get(name)

        if definition.validate is not None:
            message = definition.validate(value, name, definition)
            if message:
                errors[name] = _error(definition, message)
            continue

        if definition.required and (value is None or (isinstance(value, list) and not value)):
            errors[name] = _error(definition, NOT_SET)

        values = value if isinstance(value, list) else [value]
        for entry in values:
            if not entry:
                continue
            measured = _measure(definition.type, entry)
            if measured is None:
                continue
            if definition.max is not None and measured > definition.max:
                errors[name] = _error(definition, ABOVE_MAX, max=definition.max)
            if definition.min is not None and measured < definition.min:
                errors[name] = _error(definition, BELOW_MIN, min=definition.min)
    return errors
