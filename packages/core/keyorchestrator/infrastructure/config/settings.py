"""Configuration settings using pydantic-settings."""

from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE_URL = "https://uko.cloud.ibm.com"
DEFAULT_IAM_URL = "https://iam.cloud.ibm.com"

AUTH_TYPES = ("iam", "bearertoken", "noauth")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ClientSettings(BaseSettings):
    """Configuration settings for KeyOrchestratorClient.

    Settings can be loaded from environment variables, an IBM-style
    credentials file, or passed as a dictionary. Environment variables are
    prefixed with 'UKO_' (e.g., UKO_URL, UKO_APIKEY, UKO_AUTH_TYPE).

    Example:
        ```python
        # From environment variables
        settings = ClientSettings()

        # From dictionary
        settings = ClientSettings(auth_type="bearertoken", bearer_token="...")

        # From an ibm-credentials.env file
        settings = ClientSettings.from_credentials_file("ibm-credentials.env")
        ```
    """

    model_config = SettingsConfigDict(
        env_prefix="UKO_",
        case_sensitive=False,
        extra="ignore",
    )

    # Service configuration
    url: str = Field(
        default=DEFAULT_SERVICE_URL,
        description="Service base URL",
    )
    timeout: float = Field(
        default=30.0,
        description="Request timeout in seconds",
        gt=0,
    )
    disable_ssl_verification: bool = Field(
        default=False,
        description="Skip TLS certificate verification",
    )
    enable_gzip: bool = Field(
        default=False,
        description="Compress request bodies with gzip",
    )

    # Retry configuration
    enable_retries: bool = Field(
        default=False,
        description="Retry failed requests automatically",
    )
    max_retries: int = Field(
        default=4,
        description="Maximum number of retries per request",
        ge=0,
        le=10,
    )
    max_retry_interval: float = Field(
        default=30.0,
        description="Upper bound of the delay between retries in seconds",
        gt=0,
    )

    # Authentication configuration
    auth_type: str = Field(
        default="iam",
        description="Authentication scheme: iam, bearertoken or noauth",
    )
    apikey: SecretStr | None = Field(
        default=None,
        description="IAM API key, required for auth_type=iam",
    )
    bearer_token: SecretStr | None = Field(
        default=None,
        description="Bearer token, required for auth_type=bearertoken",
    )
    auth_url: str = Field(
        default=DEFAULT_IAM_URL,
        description="IAM token service URL",
    )

    # Observability configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        description="Render logs as JSON instead of console output",
    )

    @field_validator("url", "auth_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL without a trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://: {v!r}")
        return v.rstrip("/")

    @field_validator("auth_type")
    @classmethod
    def validate_auth_type(cls, v: str) -> str:
        """Normalize and check the authentication scheme."""
        v = v.strip().lower()
        if v not in AUTH_TYPES:
            raise ValueError(f"auth_type must be one of {', '.join(AUTH_TYPES)}, got {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level."""
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_credentials(self) -> "ClientSettings":
        """Ensure the selected scheme has its credential."""
        if self.auth_type == "iam" and self.apikey is None:
            raise ValueError("apikey is required when auth_type is 'iam'")
        if self.auth_type == "bearertoken" and self.bearer_token is None:
            raise ValueError("bearer_token is required when auth_type is 'bearertoken'")
        return self

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "ClientSettings":
        """Create settings from a dictionary.

        Args:
            config: Dictionary with configuration values.

        Returns:
            ClientSettings instance.
        """
        return cls(**config)

    @classmethod
    def from_credentials_file(cls, path: str | Path) -> "ClientSettings":
        """Create settings from an IBM-style credentials file.

        The file holds ``UKO_*`` assignments, e.g.::

            UKO_URL=https://uko.us-south.hs-crypto.cloud.ibm.com:8081
            UKO_AUTH_TYPE=iam
            UKO_APIKEY=...

        Args:
            path: Path to the dotenv-formatted file.

        Returns:
            ClientSettings instance. Values in the file override environment
            variables.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Credentials file not found: {path}")

        prefix = cls.model_config.get("env_prefix", "").upper()
        config = {
            name[len(prefix):].lower(): value
            for name, value in dotenv_values(path).items()
            if value is not None and name.upper().startswith(prefix)
        }
        return cls(**config)
