"""Vault models."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from pydantic import Field

from keyorchestrator.domain.models.collection import PagedCollection
from keyorchestrator.domain.models.common import ApiModel


class Vault(ApiModel):
    """Root container of keys, keystores and templates.

    Example:
        ```python
        response = client.get_vault(GetVaultOptions(id="5295ad47-2ce9-43c3-b9e7-e5a9482c362b"))
        vault = response.result
        print(vault.name, vault.keys_count)
        ```
    """

    id: str | None = Field(default=None, description="Vault ID")
    name: str | None = Field(default=None, description="Vault name")
    description: str | None = Field(default=None, description="Vault description")
    keys_count: int | None = Field(default=None, description="Number of managed keys", ge=0)
    keystores_count: int | None = Field(default=None, description="Number of keystores", ge=0)
    templates_count: int | None = Field(default=None, description="Number of key templates", ge=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
    href: str | None = None

    def __repr__(self) -> str:
        return f"Vault(id={self.id!r}, name={self.name!r})"


class VaultList(PagedCollection):
    """Page of vaults."""

    ITEMS_FIELD: ClassVar[str] = "vaults"

    vaults: list[Vault] = Field(default_factory=list)
