"""Tests for authenticators."""

import time

import httpx
import pytest
from pydantic import SecretStr

from fixtures.test_data import MockService
from keyorchestrator.domain.models.errors import AuthenticationError, ErrorCategory
from keyorchestrator.infrastructure.auth.authenticators import (
    BearerTokenAuthenticator,
    IamAuthenticator,
    NoAuthAuthenticator,
    get_authenticator_from_settings,
)
from keyorchestrator.infrastructure.config.settings import ClientSettings

IAM_URL = "https://iam.test.example.com"
TOKEN_PATH = "/identity/token"


def _iam(mock_service: MockService, **kwargs: object) -> IamAuthenticator:
    return IamAuthenticator(
        apikey="my-api-key",
        url=IAM_URL,
        http_client=mock_service.http_client(),
        **kwargs,  # type: ignore[arg-type]
    )


class TestBearerTokenAuthenticator:
    """Tests for BearerTokenAuthenticator."""

    def test_sets_authorization_header(self) -> None:
        """Test that the token is sent as a bearer credential."""
        headers: dict[str, str] = {}
        BearerTokenAuthenticator("abc").authenticate(headers)
        assert headers == {"Authorization": "Bearer abc"}

    def test_token_can_be_replaced(self) -> None:
        """Test that set_bearer_token swaps the credential."""
        authenticator = BearerTokenAuthenticator("old")
        authenticator.set_bearer_token("new")

        headers: dict[str, str] = {}
        authenticator.authenticate(headers)
        assert headers["Authorization"] == "Bearer new"

    @pytest.mark.parametrize("token", ["", "  "])
    def test_empty_token_rejected(self, token: str) -> None:
        """Test that empty tokens are rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            BearerTokenAuthenticator(token)


class TestNoAuthAuthenticator:
    """Tests for NoAuthAuthenticator."""

    def test_leaves_headers_untouched(self) -> None:
        """Test that no credentials are added."""
        headers = {"Accept": "application/json"}
        NoAuthAuthenticator().authenticate(headers)
        assert headers == {"Accept": "application/json"}


class TestIamAuthenticator:
    """Tests for IamAuthenticator."""

    def test_exchanges_apikey_for_token(self, mock_service: MockService) -> None:
        """Test that the API key is posted to the token endpoint."""
        mock_service.add(
            "POST",
            TOKEN_PATH,
            json={"access_token": "iam-token", "expires_in": 3600, "token_type": "Bearer"},
        )
        authenticator = _iam(mock_service)

        headers: dict[str, str] = {}
        authenticator.authenticate(headers)

        assert headers["Authorization"] == "Bearer iam-token"
        sent = mock_service.last_request
        assert sent.url == httpx.URL(f"{IAM_URL}{TOKEN_PATH}")
        form = dict(httpx.QueryParams(sent.content.decode()))
        assert form == {
            "grant_type": "urn:ibm:params:oauth:grant-type:apikey",
            "apikey": "my-api-key",
        }
        assert "Authorization" not in sent.headers

    def test_token_cached(self, mock_service: MockService) -> None:
        """Test that a valid token is reused."""
        mock_service.add("POST", TOKEN_PATH, json={"access_token": "iam-token", "expires_in": 3600})
        authenticator = _iam(mock_service)

        assert authenticator.get_token() == "iam-token"
        assert authenticator.get_token() == "iam-token"
        assert len(mock_service.requests) == 1

    def test_token_refreshed_near_expiry(self, mock_service: MockService) -> None:
        """Test that tokens inside the refresh window are renewed."""
        mock_service.add(
            "POST", TOKEN_PATH, json={"access_token": "first", "expiration": int(time.time()) + 30}
        )
        mock_service.add("POST", TOKEN_PATH, json={"access_token": "second", "expires_in": 3600})
        authenticator = _iam(mock_service)

        assert authenticator.get_token() == "first"
        assert authenticator.get_token() == "second"
        assert len(mock_service.requests) == 2

    def test_client_credentials_use_basic_auth(self, mock_service: MockService) -> None:
        """Test that client_id and client_secret authenticate the token request."""
        mock_service.add("POST", TOKEN_PATH, json={"access_token": "iam-token", "expires_in": 3600})
        authenticator = _iam(mock_service, client_id="bx", client_secret="bx")

        authenticator.get_token()

        assert mock_service.last_request.headers["Authorization"].startswith("Basic ")

    def test_token_request_failure(self, mock_service: MockService) -> None:
        """Test that IAM errors surface as AuthenticationError."""
        mock_service.add("POST", TOKEN_PATH, status_code=400, json={"errorMessage": "bad apikey"})
        authenticator = _iam(mock_service)

        with pytest.raises(AuthenticationError) as exc_info:
            authenticator.authenticate({})

        assert exc_info.value.category == ErrorCategory.Authentication
        assert exc_info.value.status_code == 400
        assert "bad apikey" in (exc_info.value.body or "")

    def test_token_response_without_token(self, mock_service: MockService) -> None:
        """Test that a response lacking access_token is rejected."""
        mock_service.add("POST", TOKEN_PATH, json={"token_type": "Bearer"})

        with pytest.raises(AuthenticationError, match="no access_token"):
            _iam(mock_service).get_token()

    @pytest.mark.parametrize("apikey", ["", "{my-key}", '"my-key"'])
    def test_invalid_apikey(self, apikey: str) -> None:
        """Test that empty or wrapped API keys are rejected."""
        with pytest.raises(ValueError):
            IamAuthenticator(apikey=apikey)

    def test_client_id_requires_secret(self) -> None:
        """Test that client credentials come in pairs."""
        with pytest.raises(ValueError, match="set together"):
            IamAuthenticator(apikey="key", client_id="bx")


class TestGetAuthenticatorFromSettings:
    """Tests for get_authenticator_from_settings."""

    def test_iam(self) -> None:
        """Test that auth_type iam builds an IamAuthenticator."""
        settings = ClientSettings(apikey=SecretStr("key"), auth_url="https://iam.test.example.com/")
        authenticator = get_authenticator_from_settings(settings)

        assert isinstance(authenticator, IamAuthenticator)
        assert authenticator.url == "https://iam.test.example.com"

    def test_bearer_token(self) -> None:
        """Test that auth_type bearertoken builds a BearerTokenAuthenticator."""
        settings = ClientSettings(auth_type="bearertoken", bearer_token=SecretStr("tok"))
        assert isinstance(get_authenticator_from_settings(settings), BearerTokenAuthenticator)

    def test_noauth(self) -> None:
        """Test that auth_type noauth builds a NoAuthAuthenticator."""
        settings = ClientSettings(auth_type="noauth")
        assert isinstance(get_authenticator_from_settings(settings), NoAuthAuthenticator)
