"""Configuration infrastructure module."""

from keyorchestrator.infrastructure.config.file_loader import (
    ConfigurationError,
    ConfigurationFileLoader,
)
from keyorchestrator.infrastructure.config.settings import ClientSettings

__all__ = [
    "ClientSettings",
    "ConfigurationFileLoader",
    "ConfigurationError",
]
