"""Request and response envelopes exchanged with the transport."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

ResultT = TypeVar("ResultT")

HTTP_METHODS = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"})


class ApiRequest(BaseModel):
    """HTTP request assembled by an endpoint operation.

    ``path`` is relative to the service URL, e.g. ``/api/v4/vaults``.
    """

    method: str = Field(..., description="HTTP method")
    path: str = Field(..., description="Path relative to the service URL", min_length=1)
    operation_id: str = Field(..., description="Operation name, used for analytics and logging")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    params: dict[str, str | int] = Field(default_factory=dict, description="Query parameters")
    body: dict[str, Any] | None = Field(default=None, description="JSON request body")

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        """Normalize and check the HTTP method."""
        v = v.upper()
        if v not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method: {v}")
        return v

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Require an absolute path."""
        if not v.startswith("/"):
            raise ValueError("Request path must start with '/'")
        return v


class DetailedResponse(BaseModel, Generic[ResultT]):
    """Decoded result together with the HTTP status and headers.

    Example:
        ```python
        response = client.get_vault(GetVaultOptions(id=vault_id))
        client.update_vault(
            UpdateVaultOptions(id=vault_id, if_match=response.etag, name="renamed")
        )
        ```
    """

    result: ResultT | None = Field(default=None, description="Decoded response body")
    status_code: int = Field(..., description="HTTP status code")
    headers: dict[str, str] = Field(default_factory=dict, description="Response headers")

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def etag(self) -> str | None:
        """ETag header, used as If-Match on subsequent updates."""
        for name, value in self.headers.items():
            if name.lower() == "etag":
                return value
        return None
