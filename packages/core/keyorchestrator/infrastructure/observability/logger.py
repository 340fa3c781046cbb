"""structlog-backed ObservabilityManager with credential redaction."""

import logging
from typing import Any

import structlog

from keyorchestrator.domain.interfaces.observability_manager import (
    ObservabilityError,
    ObservabilityManager,
)

LOGGER_NAME = "keyorchestrator"
REDACTED = "[REDACTED]"

SENSITIVE_KEYS = frozenset(
    {
        "apikey",
        "api_key",
        "bearer_token",
        "access_token",
        "refresh_token",
        "authorization",
        "aws_secret_access_key",
        "azure_service_principal_password",
        "ibm_api_key",
        "google_credentials",
        "client_secret",
    }
)
"""Field and header names whose values are never logged."""

_BEARER_PREFIX = "Bearer "


def _is_sensitive(key: Any) -> bool:
    return isinstance(key, str) and key.lower() in SENSITIVE_KEYS


def sanitize_for_logging(data: Any) -> Any:
    """Redact credentials from a log payload.

    Values under credential keys (keystore secrets, API keys, the
    Authorization header) are replaced at any depth, and so are bare bearer
    strings. Tuples come back as lists.

    Args:
        data: Mapping, sequence or scalar to sanitize.

    Returns:
        A sanitized copy; the input is not modified.
    """
    if isinstance(data, dict):
        return {
            key: REDACTED if _is_sensitive(key) else sanitize_for_logging(value)
            for key, value in data.items()
        }
    if isinstance(data, list | tuple):
        return [sanitize_for_logging(item) for item in data]
    if isinstance(data, str) and data.startswith(_BEARER_PREFIX) and len(data) > 20:
        return REDACTED
    return data


def configure_logging(log_level: str = "INFO", json_format: bool = True) -> None:
    """Route structlog through stdlib logging under the ``keyorchestrator`` logger.

    Args:
        log_level: Threshold of the ``keyorchestrator`` logger.
        json_format: JSON lines when True, colored console output otherwise.
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    renderer: Any = (
        structlog.processors.JSONRenderer() if json_format else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Leave handlers alone when the application has configured logging.
    if not logging.getLogger().handlers:
        logging.basicConfig(
            format="%(message)s" if json_format else "%(asctime)s %(name)s %(levelname)s %(message)s"
        )
    logging.getLogger(LOGGER_NAME).setLevel(level)


class DefaultObservabilityManager(ObservabilityManager):
    """Writes client events as structured log lines through structlog.

    Output is JSON by default; pass ``json_format=False`` for console output
    while developing. Every context passes through
    :func:`sanitize_for_logging` first.
    """

    def __init__(self, log_level: str = "INFO", json_format: bool = True) -> None:
        configure_logging(log_level, json_format)
        self._logger = structlog.get_logger(LOGGER_NAME)

    def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        method = getattr(self._logger, level.lower(), self._logger.info)
        try:
            method(message, **sanitize_for_logging(context or {}))
        except Exception as e:
            raise ObservabilityError(f"Failed to log message: {e}") from e
