"""
Endpoint registry.

In-process table of EndpointConfiguration keyed by (path, METHOD, version).
Filled at route registration, read on every verified request.

Version policy: exact version match first, then an unversioned registration of
the same path and method.
"""

import logging
import threading

from apiverifier.core.gateway.endpoints import EndpointConfiguration
from apiverifier.schemas import EndpointInfo, ParamInfo

_log = logging.getLogger(__name__)

_Key = tuple[str, str, str | None]


def _key(path: str, method: str, version: str | None) -> _Key:
    return (path, (method or "GET").upper(), version or None)


class EndpointRegistry:
    """Registration store for verified endpoints. Writes are locked; lookups are plain dict reads."""

    def __init__(self) -> None:
        self._endpoints: dict[_Key, EndpointConfiguration] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._endpoints)

    def register(
        self,
        path: str,
        method: str,
        version: str | None,
        config: EndpointConfiguration,
    ) -> None:
        key = _key(path, method, version)
        with self._lock:
            if key in self._endpoints:
                _log.warning(
                    "Replacing endpoint config for %s %s (version=%s)", key[1], path, key[2]
                )
            self._endpoints[key] = config

    def lookup(
        self, path: str, method: str, version: str | None = None
    ) -> EndpointConfiguration | None:
        key = _key(path, method, version)
        config = self._endpoints.get(key)
        if config is None and key[2] is not None:
            config = self._endpoints.get((key[0], key[1], None))
        return config

    def clear(self) -> None:
        with self._lock:
            self._endpoints.clear()

    def api_info(self) -> list[EndpointInfo]:
        """Describe every registered endpoint and its params, sorted by path, method, version."""
        out: list[EndpointInfo] = []
        for (path, method, version), config in sorted(
            self._endpoints.items(), key=lambda kv: (kv[0][0], kv[0][1], kv[0][2] or "")
        ):
            params = [
                ParamInfo(
                    name=name,
                    type=d.type.value,
                    array=d.array,
                    required=d.required,
                    default=d.default,
                    min=d.min,
                    max=d.max,
                    description=d.description,
                )
                for name, d in config.params.items()
            ]
            out.append(
                EndpointInfo(
                    path=path,
                    method=method,
                    version=version,
                    description=config.description,
                    params=params,
                )
            )
        return out
