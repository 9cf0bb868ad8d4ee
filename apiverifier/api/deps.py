from collections.abc import Callable
from typing import Annotated, Any

from fastapi import Depends, Request

from apiverifier.core.config import settings


def verified_params(param_map: str | None = None) -> Callable[[Request], dict[str, Any]]:
    """Dependency returning the params a verified route attached to request.state."""
    name = param_map or settings.PARAM_MAP

    def get_verified_params(request: Request) -> dict[str, Any]:
        return getattr(request.state, name, None) or {}

    return get_verified_params


VerifiedParams = Annotated[dict[str, Any], Depends(verified_params())]
