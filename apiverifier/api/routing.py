"""
FastAPI routing with declarative param verification.

    router = VerifiedRouter(verifier=verifier)

    @router.get("/users", api={"params": {"name": "string", "age": "integer(18)"}})
    def list_users(args: VerifiedParams) -> dict: ...

Routes declared with `api` get a dependency that runs the verifier before the
endpoint. A rejected request raises RequestRejected carrying the response the
verifier (or an error hook) produced; install_verifier() registers the handler
that returns it.

Versioned routes (`version="2.0.0"`) match when the request sends no version
header or the same version. Register versioned routes before an unversioned
route on the same path, since routes match in registration order.
"""

import logging
from collections.abc import Callable, Sequence
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.routing import APIRoute
from starlette.datastructures import Headers
from starlette.responses import JSONResponse, Response
from starlette.routing import Match
from starlette.types import Scope

from apiverifier.core.config import settings
from apiverifier.core.gateway.endpoints import is_verified_api
from apiverifier.core.gateway.request_response import (
    InboundRequest,
    PendingResponse,
    read_sources,
)
from apiverifier.core.gateway.runner import Verifier

logger = logging.getLogger(__name__)

VERSION_EXTRA_KEY = "x-api-version"
_SCOPE_VERSION_KEY = "api_version"


class RequestRejected(Exception):
    """Raised from the verification dependency when the request was answered without reaching the endpoint."""

    def __init__(self, response: Response) -> None:
        super().__init__(response.status_code)
        self.response = response


def requested_version(scope: Scope) -> str | None:
    """Version asked for by the client via settings.VERSION_HEADER, if any."""
    value = Headers(scope=scope).get(settings.VERSION_HEADER)
    if value is None:
        return None
    return value.strip() or None


class VersionedRoute(APIRoute):
    """APIRoute that only matches requests for its version (read from openapi_extra)."""

    def __init__(self, path: str, endpoint: Callable[..., Any], **kwargs: Any) -> None:
        super().__init__(path, endpoint, **kwargs)
        extra = self.openapi_extra or {}
        self.api_version: str | None = extra.get(VERSION_EXTRA_KEY)

    def matches(self, scope: Scope) -> tuple[Match, Scope]:
        match, child_scope = super().matches(scope)
        if match is Match.NONE or self.api_version is None:
            return match, child_scope
        wanted = requested_version(scope)
        if wanted is not None and wanted != self.api_version:
            return Match.NONE, {}
        child_scope[_SCOPE_VERSION_KEY] = self.api_version
        return match, child_scope


def _verification_dependency(verifier: Verifier, path: str) -> Callable[..., Any]:
    async def verify_request(request: Request) -> None:
        inbound = InboundRequest(
            path,
            request.method,
            version=request.scope.get(_SCOPE_VERSION_KEY),
            sources=await read_sources(request),
            state=request.state,
        )
        pending = PendingResponse()
        continued = False

        def next_() -> None:
            nonlocal continued
            continued = True

        verifier.verify(inbound, pending, next_)
        if pending.sent:
            raise RequestRejected(pending.response)
        if not continued:
            logger.warning(
                "Verification hook for %s %s neither responded nor continued", request.method, path
            )
            raise RequestRejected(
                JSONResponse(status_code=500, content={"error": "Request was not completed", "params": {}})
            )

    return verify_request


class VerifiedRouter(APIRouter):
    """APIRouter whose route decorators accept `api=` (param declarations) and `version=`."""

    def __init__(self, *, verifier: Verifier, **kwargs: Any) -> None:
        kwargs.setdefault("route_class", VersionedRoute)
        super().__init__(**kwargs)
        self.verifier = verifier

    def add_api_route(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        api: Any = None,
        version: str | None = None,
        methods: Sequence[str] | set[str] | None = None,
        dependencies: Sequence[Any] | None = None,
        openapi_extra: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        methods = list(methods or ["GET"])
        dependencies = list(dependencies or [])
        if version:
            openapi_extra = {**(openapi_extra or {}), VERSION_EXTRA_KEY: version}

        full_path = self.prefix + path
        verified = [m for m in methods if is_verified_api(api, m)]
        for method in verified:
            # Raises ConfigurationError before the route exists
            self.verifier.configure(full_path, method, api, version=version)
        if verified:
            dependencies.insert(0, Depends(_verification_dependency(self.verifier, full_path)))

        super().add_api_route(
            path,
            endpoint,
            methods=methods,
            dependencies=dependencies,
            openapi_extra=openapi_extra,
            **kwargs,
        )

    def api_route(
        self,
        path: str,
        *,
        api: Any = None,
        version: str | None = None,
        **kwargs: Any,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.add_api_route(path, func, api=api, version=version, **kwargs)
            return func

        return decorator

    def get(self, path: str, *, api: Any = None, version: str | None = None, **kwargs: Any) -> Callable[..., Any]:
        return self.api_route(path, api=api, version=version, methods=["GET"], **kwargs)

    def post(self, path: str, *, api: Any = None, version: str | None = None, **kwargs: Any) -> Callable[..., Any]:
        return self.api_route(path, api=api, version=version, methods=["POST"], **kwargs)

    def put(self, path: str, *, api: Any = None, version: str | None = None, **kwargs: Any) -> Callable[..., Any]:
        return self.api_route(path, api=api, version=version, methods=["PUT"], **kwargs)

    def patch(self, path: str, *, api: Any = None, version: str | None = None, **kwargs: Any) -> Callable[..., Any]:
        return self.api_route(path, api=api, version=version, methods=["PATCH"], **kwargs)

    def delete(self, path: str, *, api: Any = None, version: str | None = None, **kwargs: Any) -> Callable[..., Any]:
        return self.api_route(path, api=api, version=version, methods=["DELETE"], **kwargs)
