"""Authenticators."""

from keyorchestrator.infrastructure.auth.authenticators import (
    BearerTokenAuthenticator,
    IamAuthenticator,
    NoAuthAuthenticator,
    get_authenticator_from_settings,
)

__all__ = [
    "BearerTokenAuthenticator",
    "IamAuthenticator",
    "NoAuthAuthenticator",
    "get_authenticator_from_settings",
]
