"""
Gateway: endpoint configs, registry, request/response views, verifier.
"""

from apiverifier.core.gateway.endpoints import (
    EndpointConfiguration,
    VerifierDefaults,
    build_endpoint_config,
    is_verified_api,
)
from apiverifier.core.gateway.registry import EndpointRegistry
from apiverifier.core.gateway.request_response import (
    InboundRequest,
    PendingResponse,
    read_sources,
    respond,
)
from apiverifier.core.gateway.runner import Verifier, fill_params, get_params

__all__ = [
    "EndpointConfiguration",
    "EndpointRegistry",
    "InboundRequest",
    "PendingResponse",
    "Verifier",
    "VerifierDefaults",
    "build_endpoint_config",
    "fill_params",
    "get_params",
    "is_verified_api",
    "read_sources",
    "respond",
]
