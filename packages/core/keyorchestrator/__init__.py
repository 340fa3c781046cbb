"""Typed client for the Unified Key Orchestrator REST API."""

from keyorchestrator.client import KeyOrchestratorClient
from keyorchestrator.domain.components.pager import Pager
from keyorchestrator.domain.components.polymorphic_decoder import VariantRegistry
from keyorchestrator.domain.models import *  # noqa: F403
from keyorchestrator.domain.models import __all__ as _models_all
from keyorchestrator.domain.models.options import *  # noqa: F403
from keyorchestrator.domain.models.options import __all__ as _options_all
from keyorchestrator.infrastructure.adapters.httpx_transport import HttpxTransport
from keyorchestrator.infrastructure.auth.authenticators import (
    BearerTokenAuthenticator,
    IamAuthenticator,
    NoAuthAuthenticator,
)
from keyorchestrator.infrastructure.config import (
    ClientSettings,
    ConfigurationError,
    ConfigurationFileLoader,
)
from keyorchestrator.infrastructure.utils.validation import ValidationError
from keyorchestrator.version import __version__

__all__ = [
    "BearerTokenAuthenticator",
    "ClientSettings",
    "ConfigurationError",
    "ConfigurationFileLoader",
    "HttpxTransport",
    "IamAuthenticator",
    "KeyOrchestratorClient",
    "NoAuthAuthenticator",
    "Pager",
    "ValidationError",
    "VariantRegistry",
    "__version__",
    *_models_all,
    *_options_all,
]
