"""Domain interfaces for dependency injection."""

from keyorchestrator.domain.interfaces.authenticator import Authenticator
from keyorchestrator.domain.interfaces.observability_manager import (
    ObservabilityError,
    ObservabilityManager,
)
from keyorchestrator.domain.interfaces.transport import Transport

__all__ = [
    "Authenticator",
    "ObservabilityError",
    "ObservabilityManager",
    "Transport",
]
