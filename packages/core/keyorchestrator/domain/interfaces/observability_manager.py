"""ObservabilityManager interface for structured logging."""

from abc import ABC, abstractmethod
from typing import Any


class ObservabilityError(Exception):
    """Raised when the logging sink itself fails."""


class ObservabilityManager(ABC):
    """Sink for the structured log events of the client.

    The transport reports ``request_sent``, ``request_completed``,
    ``request_retry`` and ``request_failed``; pagers report
    ``page_fetched``. Context values are plain JSON-compatible data and may
    contain credentials, so implementations redact before writing.
    """

    @abstractmethod
    def log(
        self,
        level: str,
        message: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        """Record one event.

        Args:
            level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
            message: Event name, e.g. "request_retry".
            context: Event fields such as operation_id, status_code or attempt.

        Raises:
            ObservabilityError: If the sink fails.
        """
