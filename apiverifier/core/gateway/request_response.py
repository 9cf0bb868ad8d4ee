"""
Request/response views used by the verifier.

- InboundRequest: route path, method, negotiated version and the raw values of each
  request source ("params", "query", "body", "headers", "cookies"); verified params
  are attached to its `state`.
- PendingResponse: the single response a terminal pipeline step may send.
- respond: send a JSON error body, or an empty body, with a status code.
- read_sources: collect the raw source mappings from a Starlette request.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from starlette.datastructures import State
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

_log = logging.getLogger(__name__)

Next = Callable[[], Any]


class InboundRequest:
    """What the verifier sees of a request."""

    def __init__(
        self,
        path: str,
        method: str,
        version: str | None = None,
        sources: Mapping[str, Mapping[str, Any]] | None = None,
        state: State | None = None,
    ) -> None:
        self.path = path
        self.method = (method or "GET").upper()
        self.incoming_version = version or None
        self.sources: dict[str, Mapping[str, Any]] = dict(sources or {})
        self.state = state if state is not None else State()

    def source(self, name: str) -> Mapping[str, Any] | None:
        return self.sources.get(name)

    def __repr__(self) -> str:
        return f"InboundRequest({self.method} {self.path}, version={self.incoming_version!r})"


class PendingResponse:
    """Holds at most one response; sending twice is a programming error."""

    def __init__(self) -> None:
        self.response: Response | None = None

    @property
    def sent(self) -> bool:
        return self.response is not None

    def send(self, body: Any, status_code: int = 200) -> Response:
        if self.response is not None:
            raise RuntimeError("Response already sent for this request")
        if body is None:
            self.response = Response(status_code=status_code)
        else:
            self.response = JSONResponse(status_code=status_code, content=body)
        return self.response


def respond(
    request: InboundRequest,
    response: PendingResponse,
    body: dict[str, Any] | None,
    status_code: int,
    next: Next | None = None,  # noqa: ARG001 terminal: never continues the chain
) -> Response:
    """Send `{error, params}` (or no body) with status_code. The request chain stops here."""
    _log.info(
        "Rejected %s %s with %s%s",
        request.method,
        request.path,
        status_code,
        "" if body is not None else " (no body)",
    )
    return response.send(body, status_code)


async def _read_body(request: Request) -> dict[str, Any]:
    """Read JSON or form body; return {} on no body or unsupported type."""
    ct = (request.headers.get("content-type") or "").split(";")[0].strip().lower()
    if ct == "application/json":
        try:
            raw = await request.json()
        except Exception:
            return {}
        return raw if isinstance(raw, dict) else {}
    if ct in ("application/x-www-form-urlencoded", "multipart/form-data"):
        try:
            form = await request.form()
        except Exception:
            return {}
        return _multi_dict(form)
    return {}


def _multi_dict(items: Any) -> dict[str, Any]:
    """Flatten a multi-dict: repeated keys become lists, single keys stay scalar."""
    out: dict[str, Any] = {}
    for key in items.keys():
        values = items.getlist(key)
        out[key] = values if len(values) > 1 else values[0]
    return out


async def read_sources(request: Request) -> dict[str, Mapping[str, Any]]:
    """
    Raw values per source name:
      params: path params, query: query string (repeated keys -> list),
      body: JSON object or form fields, headers: lower-cased names, cookies.
    """
    return {
        "params": dict(request.path_params),
        "query": _multi_dict(request.query_params),
        "body": await _read_body(request),
        "headers": {k.lower(): v for k, v in request.headers.items()},
        "cookies": dict(request.cookies),
    }
