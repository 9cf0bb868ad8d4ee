"""
Endpoint configuration builder.

Turns the `api` declaration given at route registration into an immutable
EndpointConfiguration:

    {
        "params": {"name": "string", "age": "integer(18)"},
        "param_order": ["query", "body"],   # optional, else defaults
        "param_map": "args",                # optional, else defaults
        "error": hook, "success": hook, "validate": hook,   # optional
        "description": "...",               # optional
    }

Cross-cutting hooks fall back endpoint -> process-wide defaults, and each param's
hooks fall back param -> endpoint -> process-wide defaults.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from apiverifier.core.config import Settings
from apiverifier.core.errors import ConfigurationError
from apiverifier.core.param_spec import (
    ParameterDefinition,
    RequestHook,
    ValidateHook,
    parse_param,
)

_log = logging.getLogger(__name__)

_API_KEYS = frozenset(
    {
        "params",
        "param_order",
        "param_map",
        "error",
        "success",
        "validate",
        "description",
    }
)


@dataclass(frozen=True)
class VerifierDefaults:
    """Process-wide fallbacks for endpoints that do not set their own."""

    param_order: tuple[str, ...] = ("params", "query", "body")
    param_map: str = "args"
    error: RequestHook | None = None
    success: RequestHook | None = None
    validate: ValidateHook | None = None
    # Rejections include per-param detail only in development
    development: bool = False

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        error: RequestHook | None = None,
        success: RequestHook | None = None,
        validate: ValidateHook | None = None,
    ) -> VerifierDefaults:
        return cls(
            param_order=tuple(settings.PARAM_ORDER),
            param_map=settings.PARAM_MAP,
            error=error,
            success=success,
            validate=validate,
            development=settings.is_development,
        )


@dataclass(frozen=True)
class EndpointConfiguration:
    path: str
    method: str
    version: str | None
    params: Mapping[str, ParameterDefinition]
    param_order: tuple[str, ...]
    param_map: str
    error: RequestHook | None = None
    success: RequestHook | None = None
    validate: ValidateHook | None = None
    description: str | None = None
    # Copied from defaults so request handling needs nothing else
    development: bool = field(default=False, compare=False)


def is_verified_api(api: Any, method: str) -> bool:
    """False for registrations that are plain routes (no api, a handler, or a param route)."""
    return api is not None and not callable(api) and (method or "").lower() != "param"


def build_endpoint_config(
    path: str,
    method: str,
    api: Mapping[str, Any],
    defaults: VerifierDefaults,
    version: str | None = None,
) -> EndpointConfiguration:
    """
    Normalize an endpoint declaration. Raises ConfigurationError on any malformed
    param spec so the route never registers half-configured.
    """
    if not isinstance(api, Mapping):
        raise ConfigurationError(
            f"Endpoint api for {method} {path} must be a mapping, got {type(api).__name__}"
        )
    unknown = set(api) - _API_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown endpoint api keys for {method} {path}: {', '.join(sorted(unknown))}"
        )

    error = api.get("error") or defaults.error
    success = api.get("success") or defaults.success
    validate = api.get("validate") or defaults.validate

    raw_params = api.get("params") or {}
    if not isinstance(raw_params, Mapping):
        raise ConfigurationError(f"Endpoint params for {method} {path} must be a mapping")

    params: dict[str, ParameterDefinition] = {}
    for name, spec in raw_params.items():
        try:
            parsed = parse_param(spec)
        except ConfigurationError as e:
            raise ConfigurationError(f"{method} {path}: parameter '{name}': {e}") from e
        params[name] = replace(
            parsed,
            error=parsed.error or error,
            validate=parsed.validate or validate,
            success=parsed.success or success,
        )

    param_order = api.get("param_order") or defaults.param_order
    if isinstance(param_order, str):
        param_order = [param_order]

    config = EndpointConfiguration(
        path=path,
        method=method.upper(),
        version=version or None,
        params=MappingProxyType(params),
        param_order=tuple(param_order),
        param_map=api.get("param_map") or defaults.param_map or "args",
        error=error,
        success=success,
        validate=validate,
        description=api.get("description"),
        development=defaults.development,
    )
    _log.debug(
        "Built endpoint config %s %s (version=%s) with params: %s",
        config.method,
        path,
        config.version,
        ", ".join(params) or "-",
    )
    return config
