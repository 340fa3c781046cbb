"""Input validation utilities for request assembly."""

import re

from keyorchestrator.domain.models.errors import KeyOrchestratorError


class ValidationError(KeyOrchestratorError):
    """Raised when a path parameter or header is unsafe to send."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error message.
            field: Optional field name that failed validation.
        """
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        """Return error message with field name if available."""
        if self.field:
            return f"Validation error in field '{self.field}': {self.message}"
        return self.message


# Path parameters are inserted into URL paths verbatim
PATH_PARAM_PATTERN = re.compile(r"^[A-Za-z0-9._~\-]+$")

PATH_TRAVERSAL_PATTERN = re.compile(r"(^\.{1,2}$|\.\./|\.\.\\|%2e%2e)", re.IGNORECASE)

HEADER_INJECTION_PATTERN = re.compile(r"[\r\n\x00]")

MAX_PATH_PARAM_LENGTH = 256


def validate_path_param(value: str | None, field: str) -> str:
    """Validate a resource ID before it is placed in a URL path.

    Args:
        value: Path parameter value.
        field: Option field name, used in error messages.

    Returns:
        The stripped value.

    Raises:
        ValidationError: If the value is empty, too long, or unsafe in a path.
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} cannot be empty", field=field)

    value = str(value).strip()

    if len(value) > MAX_PATH_PARAM_LENGTH:
        raise ValidationError(
            f"{field} must be at most {MAX_PATH_PARAM_LENGTH} characters long",
            field=field,
        )

    if PATH_TRAVERSAL_PATTERN.search(value):
        raise ValidationError(f"{field} contains a path traversal sequence", field=field)

    if not PATH_PARAM_PATTERN.match(value):
        raise ValidationError(
            f"{field} contains characters not allowed in a path segment: {value!r}",
            field=field,
        )

    return value


def validate_headers(headers: dict[str, str]) -> None:
    """Reject header names or values that would split the HTTP message.

    Args:
        headers: Request headers.

    Raises:
        ValidationError: If a header name is empty or a name or value
            contains CR, LF or NUL.
    """
    for name, value in headers.items():
        if not name or not name.strip():
            raise ValidationError("Header name cannot be empty", field="headers")
        if HEADER_INJECTION_PATTERN.search(name) or HEADER_INJECTION_PATTERN.search(str(value)):
            raise ValidationError(
                f"Header {name!r} contains control characters",
                field=f"headers.{name}",
            )
