"""Synchronous HTTP transport built on httpx."""

from __future__ import annotations

import gzip
import json
import time
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from keyorchestrator.domain.interfaces.transport import Transport
from keyorchestrator.domain.models.common import ApiError
from keyorchestrator.domain.models.errors import ErrorCategory, TransportError
from keyorchestrator.domain.models.http import ApiRequest
from keyorchestrator.infrastructure.utils.validation import validate_headers
from keyorchestrator.version import __version__

if TYPE_CHECKING:
    from keyorchestrator.domain.interfaces.authenticator import Authenticator
    from keyorchestrator.domain.interfaces.observability_manager import ObservabilityManager
    from keyorchestrator.infrastructure.config.settings import ClientSettings


class HttpxTransport(Transport):
    """Transport executing requests with a pooled ``httpx.Client``.

    Handles default headers, gzip request compression, authentication and
    retries. Non-2xx responses are mapped to TransportError, including the
    service error envelope when the body is one.

    Example:
        ```python
        transport = HttpxTransport(
            service_url="https://uko.us-south.hs-crypto.cloud.ibm.com:8081",
            authenticator=IamAuthenticator(apikey=apikey),
        )
        transport.enable_retries(max_retries=3, max_retry_interval=10.0)
        ```
    """

    TIMEOUT = 30.0
    """Request timeout in seconds."""

    INITIAL_RETRY_INTERVAL = 1.0
    """Delay before the first retry in seconds; doubled on every further retry."""

    RETRY_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
    """Statuses that are retried when retries are enabled."""

    SERVICE_NAME = "uko"
    SERVICE_VERSION = "V4"

    def __init__(
        self,
        service_url: str,
        authenticator: Authenticator,
        timeout: float | None = None,
        disable_ssl_verification: bool = False,
        observability_manager: ObservabilityManager | None = None,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize HttpxTransport.

        Args:
            service_url: Base URL of the service.
            authenticator: Authenticator applied to every attempt.
            timeout: Optional timeout override in seconds.
            disable_ssl_verification: Skip TLS certificate verification.
            observability_manager: Optional manager for request logging.
            http_client: Optional client override (for testing).
            sleep: Function used to wait between retries (for testing).
        """
        self.set_service_url(service_url)
        self._authenticator = authenticator
        self._observability = observability_manager
        self._client = http_client or httpx.Client(
            timeout=timeout or self.TIMEOUT,
            verify=not disable_ssl_verification,
        )
        self._sleep = sleep
        self._default_headers: dict[str, str] = {}
        self._gzip_enabled = False
        self._max_retries = 0
        self._max_retry_interval = 30.0

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        authenticator: Authenticator,
        observability_manager: ObservabilityManager | None = None,
        http_client: httpx.Client | None = None,
    ) -> HttpxTransport:
        """Create a transport configured from ClientSettings."""
        transport = cls(
            service_url=settings.url,
            authenticator=authenticator,
            timeout=settings.timeout,
            disable_ssl_verification=settings.disable_ssl_verification,
            observability_manager=observability_manager,
            http_client=http_client,
        )
        transport.set_enable_gzip_compression(settings.enable_gzip)
        if settings.enable_retries:
            transport.enable_retries(settings.max_retries, settings.max_retry_interval)
        return transport

    @property
    def service_url(self) -> str:
        return self._service_url

    @property
    def authenticator(self) -> Authenticator:
        return self._authenticator

    def set_service_url(self, url: str) -> None:
        """Change the base URL of subsequent requests.

        Raises:
            ValueError: If the URL is empty or not http(s).
        """
        if not url or not url.strip():
            raise ValueError("Service URL cannot be empty")
        url = url.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ValueError(f"Service URL must start with http:// or https://: {url!r}")
        self._service_url = url

    def set_default_headers(self, headers: dict[str, str]) -> None:
        """Set headers sent with every request; per-request headers win."""
        validate_headers(headers)
        self._default_headers = dict(headers)

    def set_enable_gzip_compression(self, enabled: bool) -> None:
        """Enable or disable gzip compression of request bodies."""
        self._gzip_enabled = enabled

    def get_enable_gzip_compression(self) -> bool:
        return self._gzip_enabled

    def enable_retries(self, max_retries: int = 4, max_retry_interval: float = 30.0) -> None:
        """Retry throttled, failed and timed-out requests.

        Args:
            max_retries: Maximum number of retries per request.
            max_retry_interval: Upper bound of the delay between retries in seconds.

        Raises:
            ValueError: If an argument is out of range.
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if max_retry_interval <= 0:
            raise ValueError("max_retry_interval must be > 0")
        self._max_retries = max_retries
        self._max_retry_interval = max_retry_interval

    def disable_retries(self) -> None:
        """Fail on the first error."""
        self._max_retries = 0

    @property
    def max_retries(self) -> int:
        return self._max_retries

    def send(self, request: ApiRequest) -> httpx.Response:
        """Execute a request, retrying according to the retry policy.

        Args:
            request: Request assembled by an endpoint operation.

        Returns:
            Response with a 2xx status code.

        Raises:
            TransportError: If the request fails after all retries.
            AuthenticationError: If the authenticator cannot provide credentials.
        """
        url = f"{self._service_url}{request.path}"
        content = self._encode_body(request.body)
        attempt = 0

        while True:
            headers = self._build_headers(request, has_body=content is not None)
            self._authenticator.authenticate(headers)

            self._log(
                "DEBUG",
                "request_sent",
                {
                    "operation_id": request.operation_id,
                    "method": request.method,
                    "url": url,
                    "params": request.params,
                    "attempt": attempt,
                },
            )

            try:
                response = self._client.request(
                    request.method,
                    url,
                    params=request.params or None,
                    headers=headers,
                    content=content,
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                error = self.map_error(e)
                if error.retryable and attempt < self._max_retries:
                    delay = self._retry_delay(attempt, error.retry_after)
                    self._log(
                        "WARNING",
                        "request_retry",
                        {
                            "operation_id": request.operation_id,
                            "status_code": error.status_code,
                            "category": error.category.value,
                            "attempt": attempt + 1,
                            "delay": delay,
                        },
                    )
                    self._sleep(delay)
                    attempt += 1
                    continue

                self._log(
                    "ERROR",
                    "request_failed",
                    {
                        "operation_id": request.operation_id,
                        "status_code": error.status_code,
                        "category": error.category.value,
                        "trace": error.trace,
                        "message": error.message,
                    },
                )
                raise error from e

            self._log(
                "DEBUG",
                "request_completed",
                {
                    "operation_id": request.operation_id,
                    "status_code": response.status_code,
                    "attempts": attempt + 1,
                },
            )
            return response

    def close(self) -> None:
        self._client.close()

    def map_error(self, error: Exception) -> TransportError:
        """Map an httpx error to a TransportError.

        Args:
            error: Exception raised by httpx.

        Returns:
            TransportError with category, status and parsed error envelope.
        """
        if isinstance(error, httpx.HTTPStatusError):
            response = error.response
            status_code = response.status_code
            api_error = self._extract_api_error(response)
            message = (
                (api_error.first_message if api_error else None)
                or response.text
                or f"HTTP {status_code} {response.reason_phrase}"
            )

            return TransportError(
                category=self._category_for_status(status_code),
                message=message,
                status_code=status_code,
                api_error=api_error,
                body=response.text,
                retryable=status_code in self.RETRY_STATUS_CODES,
                retry_after=self._extract_retry_after(response),
                headers=dict(response.headers),
            )

        if isinstance(error, httpx.TimeoutException):
            return TransportError(
                category=ErrorCategory.Timeout,
                message=f"Request to {self._service_url} timed out",
                retryable=True,
            )

        if isinstance(error, httpx.NetworkError):
            return TransportError(
                category=ErrorCategory.Network,
                message=f"Network error connecting to {self._service_url}: {error}",
                retryable=True,
            )

        # Protocol, proxy, redirect and decoding failures; not retried.
        if isinstance(error, httpx.RequestError):
            return TransportError(
                category=ErrorCategory.Network,
                message=f"Request to {self._service_url} failed: {error}",
            )

        return TransportError(
            category=ErrorCategory.Unknown,
            message=f"Unknown transport error: {error}",
        )

    def _build_headers(self, request: ApiRequest, has_body: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"keyorchestrator-python/{__version__}",
            "X-IBMCloud-SDK-Analytics": (
                f"service_name={self.SERVICE_NAME};"
                f"service_version={self.SERVICE_VERSION};"
                f"operation_id={request.operation_id}"
            ),
        }
        if has_body:
            headers["Content-Type"] = "application/json"
            if self._gzip_enabled:
                headers["Content-Encoding"] = "gzip"
        headers.update(self._default_headers)
        headers.update(request.headers)
        validate_headers(headers)
        return headers

    def _encode_body(self, body: dict[str, Any] | None) -> bytes | None:
        if body is None:
            return None
        content = json.dumps(body, separators=(",", ":")).encode("utf-8")
        if self._gzip_enabled:
            content = gzip.compress(content)
        return content

    def _retry_delay(self, attempt: int, retry_after: int | None) -> float:
        if retry_after is not None and retry_after >= 0:
            return min(float(retry_after), self._max_retry_interval)
        return min(self.INITIAL_RETRY_INTERVAL * (2**attempt), self._max_retry_interval)

    @staticmethod
    def _category_for_status(status_code: int) -> ErrorCategory:
        if status_code == 401:
            return ErrorCategory.Authentication
        elif status_code == 403:
            return ErrorCategory.Authorization
        elif status_code == 404:
            return ErrorCategory.NotFound
        elif status_code == 409:
            return ErrorCategory.Conflict
        elif status_code == 412:
            return ErrorCategory.PreconditionFailed
        elif status_code == 429:
            return ErrorCategory.RateLimit
        elif status_code in (400, 422):
            return ErrorCategory.Validation
        elif 500 <= status_code < 600:
            return ErrorCategory.ServerError
        return ErrorCategory.Unknown

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Extract retry-after value from response headers.

        Args:
            response: HTTP response object.

        Returns:
            Retry after seconds, or None if not present.
        """
        retry_after_header = response.headers.get("retry-after")
        if not retry_after_header:
            return None

        try:
            return int(retry_after_header)
        except ValueError:
            pass

        try:
            retry_date = parsedate_to_datetime(retry_after_header)
        except (ValueError, TypeError):
            return None

        if retry_date.tzinfo is None:
            retry_date = retry_date.replace(tzinfo=UTC)
        delta = (retry_date - datetime.now(UTC)).total_seconds()
        return int(delta) if delta > 0 else 0

    def _extract_api_error(self, response: httpx.Response) -> ApiError | None:
        """Parse the service error envelope from a response body.

        Returns:
            ApiError, or None if the body is not an error envelope.
        """
        try:
            data = response.json()
        except ValueError:
            return None

        if not isinstance(data, dict) or "errors" not in data:
            return None

        try:
            return ApiError.model_validate(data)
        except PydanticValidationError:
            return None

    def _log(self, level: str, message: str, context: dict[str, Any]) -> None:
        if self._observability is not None:
            self._observability.log(level=level, message=message, context=context)
