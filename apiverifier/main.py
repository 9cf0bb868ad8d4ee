import logging

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response

from apiverifier.api.routing import RequestRejected
from apiverifier.core.config import settings
from apiverifier.core.gateway.runner import Verifier
from apiverifier.schemas import EndpointInfoList

_logger = logging.getLogger(__name__)

# Leading loc entries naming the request part rather than the field
_LOCATION_PREFIXES = frozenset({"body", "query", "path", "header", "cookie"})


async def request_rejected_handler(request: Request, exc: RequestRejected) -> Response:  # noqa: ARG001
    """Return the response produced by the verifier or its error hook, unchanged."""
    return exc.response


async def validation_exception_handler(
    request: Request, exc: RequestValidationError  # noqa: ARG001
) -> Response:
    """
    Report FastAPI's own request validation in the verifier's rejection shape.

    Field detail follows the same development-only rule as verifier rejections.
    """
    if not settings.is_development:
        return Response(status_code=422)
    params: dict[str, dict[str, str]] = {}
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        params[".".join(loc) or "request"] = {"error": err.get("msg", "Invalid value")}
    return JSONResponse(
        status_code=422,
        content={"error": "Request validation failed", "params": params},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    message = f"Internal server error: {exc}" if settings.is_development else "Internal server error"
    return JSONResponse(status_code=500, content={"error": message, "params": {}})


def install_verifier(
    app: FastAPI, verifier: Verifier, *, api_info_path: str | None = None
) -> None:
    """Register the rejection handler and, when a path is given, the endpoint info route."""
    app.add_exception_handler(RequestRejected, request_rejected_handler)
    info_path = settings.API_INFO_PATH if api_info_path is None else api_info_path
    if not info_path:
        return

    def api_info() -> EndpointInfoList:
        endpoints = verifier.registry.api_info()
        return EndpointInfoList(data=endpoints, count=len(endpoints))

    app.add_api_route(
        info_path,
        api_info,
        methods=["GET"],
        response_model=EndpointInfoList,
        include_in_schema=False,
    )


def create_app(
    verifier: Verifier,
    *routers: APIRouter,
    api_info_path: str | None = None,
) -> FastAPI:
    app = FastAPI(title=settings.PROJECT_NAME)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    install_verifier(app, verifier, api_info_path=api_info_path)
    for router in routers:
        app.include_router(router)
    return app
