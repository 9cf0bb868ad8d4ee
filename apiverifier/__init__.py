"""
apiverifier: declarative request parameter specs for FastAPI routes.
"""

from apiverifier.api.deps import VerifiedParams, verified_params
from apiverifier.api.routing import RequestRejected, VerifiedRouter
from apiverifier.core.errors import ConfigurationError, ExtractionError
from apiverifier.core.gateway.endpoints import VerifierDefaults
from apiverifier.core.gateway.runner import Verifier
from apiverifier.main import create_app, install_verifier

__all__ = [
    "ConfigurationError",
    "ExtractionError",
    "RequestRejected",
    "VerifiedParams",
    "VerifiedRouter",
    "Verifier",
    "VerifierDefaults",
    "create_app",
    "install_verifier",
    "verified_params",
]
