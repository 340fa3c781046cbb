"""Exception taxonomy for the key orchestrator client."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from keyorchestrator.domain.models.common import ApiError


class ErrorCategory(str, Enum):
    """Categories of transport errors."""

    Authentication = "authentication"
    """Credentials missing, invalid or expired (401)."""

    Authorization = "authorization"
    """Caller is not allowed to perform the operation (403)."""

    NotFound = "not_found"
    """Resource does not exist (404)."""

    Conflict = "conflict"
    """Resource state conflicts with the request (409)."""

    PreconditionFailed = "precondition_failed"
    """If-Match did not match the current ETag (412)."""

    RateLimit = "rate_limit"
    """Too many requests (429)."""

    Validation = "validation"
    """Request rejected by the service (400, 422)."""

    ServerError = "server_error"
    """Service-side failure (5xx)."""

    Timeout = "timeout"
    """Request timed out."""

    Network = "network"
    """Connection could not be established."""

    Unknown = "unknown"
    """Unclassified failure."""


class KeyOrchestratorError(Exception):
    """Base class for every error raised by this package.

    When raised out of ``Pager.get_all``, ``partial_results`` holds the items
    collected before the failing page.
    """

    def __init__(self, message: str) -> None:
        """Initialize KeyOrchestratorError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        self.partial_results: list[Any] = []
        super().__init__(self.message)

    def __str__(self) -> str:
        """Human-readable error message."""
        return self.message


class TransportError(KeyOrchestratorError):
    """Network or HTTP-layer failure.

    Raised for connection errors, timeouts and non-2xx responses. When the
    service answered with its error envelope, the parsed envelope is
    available as ``api_error``.

    Example:
        ```python
        try:
            client.get_vault(GetVaultOptions(id="missing"))
        except TransportError as e:
            if e.category == ErrorCategory.NotFound:
                ...
        ```
    """

    def __init__(
        self,
        category: ErrorCategory | str,
        message: str,
        status_code: int | None = None,
        api_error: ApiError | None = None,
        body: str | None = None,
        retryable: bool = False,
        retry_after: int | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Initialize TransportError.

        Args:
            category: Error category (ErrorCategory enum or string).
            message: Human-readable error message.
            status_code: HTTP status code, None for connection-level failures.
            api_error: Parsed service error envelope if the body was one.
            body: Raw response body text.
            retryable: Whether the request may succeed if retried.
            retry_after: Retry after this many seconds (from Retry-After header).
            headers: Response headers.
        """
        self.category = ErrorCategory(category) if isinstance(category, str) else category
        self.status_code = status_code
        self.api_error = api_error
        self.body = body
        self.retryable = retryable
        self.retry_after = retry_after
        self.headers = headers or {}
        super().__init__(message)

    @property
    def trace(self) -> str | None:
        """Service trace identifier from the error envelope."""
        return self.api_error.trace if self.api_error else None

    def __repr__(self) -> str:
        """String representation of the error."""
        return (
            f"TransportError(category={self.category.value}, "
            f"status_code={self.status_code}, message={self.message!r})"
        )

    def __str__(self) -> str:
        """Human-readable error message."""
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message


class AuthenticationError(TransportError):
    """Raised when an authenticator cannot obtain or apply credentials."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None) -> None:
        super().__init__(
            category=ErrorCategory.Authentication,
            message=message,
            status_code=status_code,
            body=body,
        )


class DecodeError(KeyOrchestratorError):
    """Base class for failures turning a JSON payload into a model."""


class MissingDiscriminatorError(DecodeError):
    """The discriminator field is absent or empty."""

    def __init__(self, family: str, field: str) -> None:
        self.family = family
        self.field = field
        super().__init__(f"Missing discriminator '{field}' while decoding {family}")

    def __repr__(self) -> str:
        return f"MissingDiscriminatorError(family={self.family!r}, field={self.field!r})"


class UnrecognizedVariantError(DecodeError):
    """The discriminator value does not name a known variant."""

    def __init__(self, family: str, field: str, value: str) -> None:
        self.family = family
        self.field = field
        self.value = value
        super().__init__(f"Unrecognized {family} variant {field}={value!r}")

    def __repr__(self) -> str:
        return (
            f"UnrecognizedVariantError(family={self.family!r}, "
            f"field={self.field!r}, value={self.value!r})"
        )


class FieldDecodeError(DecodeError):
    """A single field did not match its expected shape.

    The whole object decode is aborted; no partially populated model is
    returned. ``field`` is a dotted path, e.g. ``vault.id`` or ``created_at``.
    """

    def __init__(self, field: str, cause: Any, message: str | None = None) -> None:
        """Initialize FieldDecodeError.

        Args:
            field: Dotted path of the offending field.
            cause: Underlying error or description of the failure.
            message: Optional override for the error message.
        """
        self.field = field
        self.cause = cause
        super().__init__(message or f"Failed to decode field '{field}': {cause}")

    def __repr__(self) -> str:
        return f"FieldDecodeError(field={self.field!r})"


class PaginationError(KeyOrchestratorError):
    """Base class for pager failures."""


class MalformedNextLinkError(PaginationError):
    """The ``next`` link carries an offset that is not an integer."""

    def __init__(self, href: str, value: str) -> None:
        self.href = href
        self.value = value
        super().__init__(f"Invalid offset {value!r} in next link {href!r}")


class InvalidPagerStateError(PaginationError):
    """The pager was constructed with options it cannot start from."""


class NoMoreResultsError(PaginationError):
    """``get_next`` was called after the last page."""

    def __init__(self, message: str = "No more results available") -> None:
        super().__init__(message)
