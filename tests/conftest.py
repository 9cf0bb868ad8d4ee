from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from apiverifier.api.deps import VerifiedParams
from apiverifier.api.routing import VerifiedRouter
from apiverifier.core.gateway.endpoints import VerifierDefaults
from apiverifier.core.gateway.runner import Verifier
from apiverifier.main import create_app


@pytest.fixture
def verifier() -> Verifier:
    return Verifier(VerifierDefaults(development=True))


@pytest.fixture
def router(verifier: Verifier) -> VerifiedRouter:
    router = VerifiedRouter(verifier=verifier, prefix="/api")

    @router.get("/users", api={"params": {"name": "string", "age": "integer(18)"}})
    def list_users(args: VerifiedParams) -> dict:
        return {"args": args}

    @router.post(
        "/users/{user_id}",
        api={
            "params": {
                "user_id": "integer",
                "nickname": {"type": "string", "min": 3, "max": 12},
                "tags": "string[]()",
            }
        },
    )
    def update_user(user_id: int, args: VerifiedParams) -> dict:
        return {"user_id": user_id, "args": args}

    @router.get("/health")
    def health() -> dict:
        return {"ok": True}

    return router


@pytest.fixture
def client(verifier: Verifier, router: VerifiedRouter) -> Generator[TestClient, None, None]:
    app = create_app(verifier, router, api_info_path="/api/info")
    with TestClient(app) as c:
        yield c
