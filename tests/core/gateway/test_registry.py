"""Unit tests for the endpoint registry: register, lookup, api_info."""

from apiverifier.core.gateway.endpoints import VerifierDefaults, build_endpoint_config
from apiverifier.core.gateway.registry import EndpointRegistry


def _config(path: str, method: str = "GET", version: str | None = None, **api: object):
    api.setdefault("params", {})
    return build_endpoint_config(path, method, api, VerifierDefaults(), version=version)


def test_lookup_exact() -> None:
    reg = EndpointRegistry()
    cfg = _config("/users")
    reg.register("/users", "GET", None, cfg)
    assert reg.lookup("/users", "GET") is cfg
    assert reg.lookup("/users", "get") is cfg
    assert reg.lookup("/users", "POST") is None
    assert reg.lookup("/other", "GET") is None


def test_lookup_by_version() -> None:
    reg = EndpointRegistry()
    v1 = _config("/users", version="1.0.0")
    v2 = _config("/users", version="2.0.0")
    reg.register("/users", "GET", "1.0.0", v1)
    reg.register("/users", "GET", "2.0.0", v2)
    assert reg.lookup("/users", "GET", "1.0.0") is v1
    assert reg.lookup("/users", "GET", "2.0.0") is v2
    assert reg.lookup("/users", "GET", "3.0.0") is None
    assert reg.lookup("/users", "GET") is None


def test_lookup_falls_back_to_unversioned() -> None:
    reg = EndpointRegistry()
    plain = _config("/users")
    reg.register("/users", "GET", None, plain)
    assert reg.lookup("/users", "GET", "9.9.9") is plain


def test_register_replaces_same_key() -> None:
    reg = EndpointRegistry()
    first = _config("/users")
    second = _config("/users")
    reg.register("/users", "GET", None, first)
    reg.register("/users", "GET", "", second)
    assert len(reg) == 1
    assert reg.lookup("/users", "GET") is second


def test_clear() -> None:
    reg = EndpointRegistry()
    reg.register("/a", "GET", None, _config("/a"))
    reg.clear()
    assert len(reg) == 0
    assert reg.lookup("/a", "GET") is None


def test_api_info_lists_params() -> None:
    reg = EndpointRegistry()
    reg.register(
        "/users",
        "POST",
        None,
        _config(
            "/users",
            "POST",
            description="Create a user",
            params={
                "name": {"type": "string", "min": 2, "description": "Display name"},
                "tags": "string[](a,b)",
            },
        ),
    )
    reg.register("/a", "GET", "1.0.0", _config("/a", version="1.0.0"))

    info = reg.api_info()
    assert [(e.path, e.method, e.version) for e in info] == [
        ("/a", "GET", "1.0.0"),
        ("/users", "POST", None),
    ]
    users = info[1]
    assert users.description == "Create a user"
    name, tags = users.params
    assert name.name == "name"
    assert name.type == "string"
    assert name.required is True
    assert name.min == 2
    assert name.description == "Display name"
    assert tags.array is True
    assert tags.default == ["a", "b"]
    assert tags.required is False
