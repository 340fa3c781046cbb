"""Authenticator implementations."""

from __future__ import annotations

import time
from typing import Any

import httpx

from keyorchestrator.domain.interfaces.authenticator import Authenticator
from keyorchestrator.domain.models.errors import AuthenticationError
from keyorchestrator.infrastructure.config.settings import DEFAULT_IAM_URL, ClientSettings


class NoAuthAuthenticator(Authenticator):
    """Sends requests without credentials, e.g. to a local test server."""

    AUTH_TYPE = "noauth"

    def authenticate(self, headers: dict[str, str]) -> None:
        pass

    def validate(self) -> None:
        pass


class BearerTokenAuthenticator(Authenticator):
    """Sends a caller-managed bearer token.

    The caller is responsible for refreshing the token; use
    :meth:`set_bearer_token` to swap it.
    """

    AUTH_TYPE = "bearertoken"

    def __init__(self, bearer_token: str) -> None:
        self._bearer_token = bearer_token
        self.validate()

    def set_bearer_token(self, bearer_token: str) -> None:
        """Replace the token used for subsequent requests."""
        self._bearer_token = bearer_token
        self.validate()

    def authenticate(self, headers: dict[str, str]) -> None:
        headers["Authorization"] = f"Bearer {self._bearer_token}"

    def validate(self) -> None:
        if not self._bearer_token or not self._bearer_token.strip():
            raise ValueError("bearer_token cannot be empty")


class IamAuthenticator(Authenticator):
    """Exchanges an IBM Cloud API key for IAM access tokens.

    Tokens are cached and refreshed shortly before they expire.

    Example:
        ```python
        authenticator = IamAuthenticator(apikey=os.environ["UKO_APIKEY"])
        client = KeyOrchestratorClient(settings, authenticator=authenticator)
        ```
    """

    AUTH_TYPE = "iam"

    TOKEN_PATH = "/identity/token"
    """Token endpoint path on the IAM service."""

    GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"
    """OAuth grant type for API key exchange."""

    REFRESH_WINDOW = 60.0
    """Refresh tokens this many seconds before they expire."""

    TIMEOUT = 30.0
    """Token request timeout in seconds."""

    def __init__(
        self,
        apikey: str,
        url: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        disable_ssl_verification: bool = False,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize IamAuthenticator.

        Args:
            apikey: IBM Cloud API key.
            url: IAM service URL, defaults to the public IAM endpoint.
            client_id: Optional client ID for basic auth on the token request.
            client_secret: Optional client secret, required with client_id.
            disable_ssl_verification: Skip TLS verification of the IAM endpoint.
            http_client: Optional client override (for testing).

        Raises:
            ValueError: If the configuration is incomplete.
        """
        self.apikey = apikey
        self.url = (url or DEFAULT_IAM_URL).rstrip("/")
        self.client_id = client_id
        self.client_secret = client_secret
        self.validate()

        self._http_client = http_client or httpx.Client(
            timeout=self.TIMEOUT,
            verify=not disable_ssl_verification,
        )
        self._access_token: str | None = None
        self._expires_at = 0.0

    def validate(self) -> None:
        if not self.apikey or not self.apikey.strip():
            raise ValueError("apikey cannot be empty")
        if self.apikey.startswith(("{", '"')) or self.apikey.endswith(("}", '"')):
            raise ValueError("apikey must not be wrapped in braces or quotes")
        if bool(self.client_id) != bool(self.client_secret):
            raise ValueError("client_id and client_secret must be set together")

    def authenticate(self, headers: dict[str, str]) -> None:
        headers["Authorization"] = f"Bearer {self.get_token()}"

    def get_token(self) -> str:
        """Return a valid access token, requesting a new one if needed.

        Raises:
            AuthenticationError: If the token request fails.
        """
        if self._access_token is None or time.time() >= self._expires_at - self.REFRESH_WINDOW:
            self._request_token()
        assert self._access_token is not None
        return self._access_token

    def _request_token(self) -> None:
        auth = (self.client_id, self.client_secret) if self.client_id and self.client_secret else None
        try:
            response = self._http_client.post(
                f"{self.url}{self.TOKEN_PATH}",
                data={"grant_type": self.GRANT_TYPE, "apikey": self.apikey},
                headers={"Accept": "application/json"},
                auth=auth,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise AuthenticationError(
                f"IAM token request failed: {e.response.reason_phrase}",
                status_code=e.response.status_code,
                body=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise AuthenticationError(f"IAM token request failed: {e}") from e

        token = self._parse_token(response)
        self._access_token = token["access_token"]
        self._expires_at = self._expiration(token)

    def _parse_token(self, response: httpx.Response) -> dict[str, Any]:
        try:
            token = response.json()
        except ValueError as e:
            raise AuthenticationError("IAM token response is not JSON", body=response.text) from e

        if not isinstance(token, dict) or not token.get("access_token"):
            raise AuthenticationError("IAM token response has no access_token", body=response.text)
        return token

    def _expiration(self, token: dict[str, Any]) -> float:
        if isinstance(token.get("expiration"), int | float):
            return float(token["expiration"])
        if isinstance(token.get("expires_in"), int | float):
            return time.time() + float(token["expires_in"])
        return time.time() + self.REFRESH_WINDOW * 2

    def close(self) -> None:
        """Close the token HTTP client."""
        self._http_client.close()


def get_authenticator_from_settings(settings: ClientSettings) -> Authenticator:
    """Build the authenticator selected by ``settings.auth_type``.

    Args:
        settings: Client settings.

    Returns:
        Authenticator instance.

    Raises:
        ValueError: If the selected scheme lacks its credential.
    """
    if settings.auth_type == NoAuthAuthenticator.AUTH_TYPE:
        return NoAuthAuthenticator()

    if settings.auth_type == BearerTokenAuthenticator.AUTH_TYPE:
        if settings.bearer_token is None:
            raise ValueError("bearer_token is required when auth_type is 'bearertoken'")
        return BearerTokenAuthenticator(settings.bearer_token.get_secret_value())

    if settings.apikey is None:
        raise ValueError("apikey is required when auth_type is 'iam'")
    return IamAuthenticator(
        apikey=settings.apikey.get_secret_value(),
        url=settings.auth_url,
        disable_ssl_verification=settings.disable_ssl_verification,
    )
