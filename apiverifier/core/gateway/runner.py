"""
Verifier: registers endpoint configs and runs them against incoming requests.

Per request:
    lookup -> (pass through) | extract -> (422 / error hook) | check -> (422 / error hook)
           | fill defaults -> attach to request.state -> success hook or next()

Every request ends in exactly one of: next() called, a response sent, or a hook
invoked (the hook then owns the response and the chain).
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from apiverifier.core.config import settings
from apiverifier.core.errors import ConfigurationError, ExtractionError
from apiverifier.core.gateway.endpoints import (
    EndpointConfiguration,
    VerifierDefaults,
    build_endpoint_config,
    is_verified_api,
)
from apiverifier.core.gateway.registry import EndpointRegistry
from apiverifier.core.gateway.request_response import (
    InboundRequest,
    Next,
    PendingResponse,
    respond,
)
from apiverifier.core.param_type import coerce_value
from apiverifier.core.param_validate import check_params

logger = logging.getLogger(__name__)

MISSING_PARAMS_MESSAGE = "Required parameters are missing"
UNPROCESSABLE = 422

Middleware = Callable[[InboundRequest, PendingResponse, Next], Any]


def get_params(config: EndpointConfiguration, request: InboundRequest) -> dict[str, Any]:
    """
    Collect declared params from the request sources in config.param_order.
    The first source giving a usable value for a name wins; undeclared names are ignored.
    """
    params: dict[str, Any] = {}
    for source_name in config.param_order:
        source = request.source(source_name)
        if not source:
            continue
        for name, raw in source.items():
            definition = config.params.get(name)
            if definition is None or params.get(name) is not None:
                continue
            params[name] = coerce_value(definition.type, raw, definition.array)
    return params


def fill_params(config: EndpointConfiguration, params: dict[str, Any]) -> dict[str, Any]:
    """Set each missing param to its declared default. Returns params (modified in place)."""
    for name, definition in config.params.items():
        if params.get(name) is None:
            default = definition.default
            # request-local copy, handlers may mutate
            params[name] = list(default) if isinstance(default, list) else default
    return params


def _pass_through(
    request: InboundRequest,  # noqa: ARG001
    response: PendingResponse,  # noqa: ARG001
    next: Next,
) -> Any:
    return next()


class Verifier:
    """
    Holds the process-wide defaults and the endpoint registry.

    `configure` is called once per route at registration time; the middleware it
    returns is called once per request.
    """

    def __init__(
        self,
        defaults: VerifierDefaults | None = None,
        registry: EndpointRegistry | None = None,
    ) -> None:
        self.defaults = defaults if defaults is not None else VerifierDefaults.from_settings(settings)
        self.registry = registry if registry is not None else EndpointRegistry()

    def configure(
        self,
        path: str,
        method: str,
        api: Mapping[str, Any] | Callable[..., Any] | None = None,
        version: str | None = None,
    ) -> Middleware:
        """
        Build and register the endpoint config for (path, method, version).

        Plain routes (no api, a handler function, or a "param" route) are not
        registered and get a middleware that only calls next().
        Raises ConfigurationError for malformed param specs.
        """
        if not is_verified_api(api, method):
            logger.debug("No param verification for %s %s", method.upper(), path)
            return _pass_through
        config = build_endpoint_config(path, method, api, self.defaults, version=version)
        self.registry.register(path, method, version, config)
        return self.verify

    def verify(self, request: InboundRequest, response: PendingResponse, next: Next) -> Any:
        config = self.registry.lookup(request.path, request.method, request.incoming_version)
        if config is None:
            return next()

        try:
            params = get_params(config, request)
        except ConfigurationError as e:
            err = ExtractionError(str(e))
            logger.error("Param extraction failed for %r: %s", request, e)
            if config.error:
                return config.error(err, request, response, next)
            return respond(request, response, {"error": str(err), "params": {}}, UNPROCESSABLE, next)

        errors = check_params(config.params, params)
        if errors:
            logger.info("Invalid params for %r: %s", request, ", ".join(errors))
            if config.error:
                return config.error(errors, request, response, next)
            if config.development:
                body = {"error": MISSING_PARAMS_MESSAGE, "params": errors}
                return respond(request, response, body, UNPROCESSABLE, next)
            return respond(request, response, None, UNPROCESSABLE, next)

        setattr(request.state, config.param_map, fill_params(config, params))
        if config.success:
            return config.success(None, request, response, next)
        return next()
