"""Typed options for every endpoint operation.

Each options model declares which of its fields travel as headers, query
parameters or body fields. Endpoint operations read those declarations, so
adding a filter is a matter of adding a field and naming it here.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from keyorchestrator.domain.models.common import (
    KeyAlgorithm,
    KeystoreType,
    Tag,
    VaultReferenceInCreationRequest,
)
from keyorchestrator.domain.models.keystore import (
    KeystoreCreationRequest,
    KeystoreUpdateRequest,
    decode_keystore_creation_request,
    decode_keystore_update_request,
)
from keyorchestrator.domain.models.managed_key import ManagedKeyState
from keyorchestrator.domain.models.template import (
    KeyPropertiesRequest,
    KeyPropertiesUpdate,
    KeystoresPropertiesRequest,
)


def _wire_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True, by_alias=True)
    if isinstance(value, list):
        return [_wire_value(item) for item in value]
    return value


class BaseOptions(BaseModel):
    """Options shared by every operation.

    ``headers`` are added to the request and override client defaults.
    """

    HEADER_FIELDS: ClassVar[dict[str, str]] = {}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {}
    BODY_FIELDS: ClassVar[tuple[str, ...]] = ()

    headers: dict[str, str] | None = Field(default=None, description="Extra request headers")

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )

    def request_headers(self) -> dict[str, str]:
        """Headers derived from the declared header fields plus ``headers``."""
        headers = {
            wire: str(getattr(self, attr))
            for attr, wire in self.HEADER_FIELDS.items()
            if getattr(self, attr) is not None
        }
        headers.update(self.headers or {})
        return headers

    def query_params(self) -> dict[str, str | int]:
        """Query parameters; list filters are comma-joined."""
        params: dict[str, str | int] = {}
        for attr, wire in self.QUERY_FIELDS.items():
            value = _wire_value(getattr(self, attr))
            if value is None or value == []:
                continue
            params[wire] = ",".join(str(v) for v in value) if isinstance(value, list) else value
        return params

    def request_body(self) -> dict[str, Any] | None:
        """JSON body built from the declared body fields, or None."""
        if not self.BODY_FIELDS:
            return None
        return {
            name: _wire_value(getattr(self, name))
            for name in self.BODY_FIELDS
            if getattr(self, name) is not None
        }


class PagedOptions(BaseOptions):
    """Options of list operations."""

    limit: int | None = Field(default=None, description="Page size", ge=0, le=1000)
    offset: int | None = Field(default=None, description="Number of items to skip", ge=0)


class VaultScopedOptions(BaseOptions):
    """Options of operations that require the UKO-Vault header."""

    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}

    uko_vault: str = Field(..., description="ID of the vault the resource belongs to", min_length=1)


class ResourceOptions(VaultScopedOptions):
    """Vault-scoped operation on a single resource."""

    id: str = Field(..., description="Resource ID", min_length=1)


class ConditionalResourceOptions(ResourceOptions):
    """Vault-scoped mutation guarded by an ETag."""

    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault", "if_match": "If-Match"}

    if_match: str = Field(..., description="ETag of the current resource version", min_length=1)


# Managed keys


class ListManagedKeysOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {
        "vault_id": "vault.id",
        "algorithm": "algorithm",
        "state": "state",
        "label": "label",
        "template_id": "template.id",
        "limit": "limit",
        "offset": "offset",
    }

    uko_vault: str | None = Field(default=None, min_length=1)
    vault_id: list[str] | None = Field(default=None, description="Filter by vault IDs")
    algorithm: list[KeyAlgorithm] | None = Field(default=None, description="Filter by algorithms")
    state: list[ManagedKeyState] | None = Field(default=None, description="Filter by states")
    label: str | None = Field(default=None, description="Filter by label")
    template_id: str | None = Field(default=None, description="Filter by template ID")


class CreateManagedKeyOptions(VaultScopedOptions):
    BODY_FIELDS: ClassVar[tuple[str, ...]] = ("template_name", "vault", "label", "tags", "description")

    template_name: str = Field(..., description="Template to create the key from", min_length=1)
    vault: VaultReferenceInCreationRequest
    label: str = Field(..., description="Key label", min_length=1)
    tags: list[Tag] | None = None
    description: str | None = None


class GetManagedKeyOptions(ResourceOptions):
    pass


class UpdateManagedKeyOptions(ConditionalResourceOptions):
    BODY_FIELDS: ClassVar[tuple[str, ...]] = (
        "label",
        "activation_date",
        "expiration_date",
        "tags",
        "description",
    )

    label: str | None = Field(default=None, min_length=1)
    activation_date: date | None = None
    expiration_date: date | None = None
    tags: list[Tag] | None = None
    description: str | None = None


class DeleteManagedKeyOptions(ConditionalResourceOptions):
    pass


class GetKeyDistributionStatusForKeystoresOptions(ResourceOptions):
    pass


class UpdateManagedKeyFromTemplateOptions(ConditionalResourceOptions):
    pass


class ActivateManagedKeyOptions(ConditionalResourceOptions):
    pass


class DeactivateManagedKeyOptions(ConditionalResourceOptions):
    pass


class DestroyManagedKeyOptions(ConditionalResourceOptions):
    pass


class SyncManagedKeyOptions(ConditionalResourceOptions):
    pass


class RotateManagedKeyOptions(ConditionalResourceOptions):
    pass


class ListAssociatedResourcesForManagedKeyOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {"limit": "limit", "offset": "offset", "sort": "sort"}

    uko_vault: str = Field(..., min_length=1)
    id: str = Field(..., description="Managed key ID", min_length=1)
    sort: list[str] | None = Field(default=None, description="Sort fields, prefix '-' for descending")


# Key templates


class ListKeyTemplatesOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {
        "vault_id": "vault.id",
        "key_algorithm": "key.algorithm",
        "name": "name",
        "limit": "limit",
        "offset": "offset",
    }

    uko_vault: str | None = Field(default=None, min_length=1)
    vault_id: list[str] | None = None
    key_algorithm: list[KeyAlgorithm] | None = None
    name: str | None = None


class CreateKeyTemplateOptions(VaultScopedOptions):
    BODY_FIELDS: ClassVar[tuple[str, ...]] = ("vault", "name", "key", "keystores", "description")

    vault: VaultReferenceInCreationRequest
    name: str = Field(..., description="Template name", min_length=1, max_length=30)
    key: KeyPropertiesRequest
    keystores: list[KeystoresPropertiesRequest] = Field(..., min_length=1)
    description: str | None = None


class GetKeyTemplateOptions(ResourceOptions):
    pass


class UpdateKeyTemplateOptions(ConditionalResourceOptions):
    BODY_FIELDS: ClassVar[tuple[str, ...]] = ("keystores", "description", "key")

    keystores: list[KeystoresPropertiesRequest] | None = None
    description: str | None = None
    key: KeyPropertiesUpdate | None = None


class DeleteKeyTemplateOptions(ConditionalResourceOptions):
    pass


class ArchiveKeyTemplateOptions(ConditionalResourceOptions):
    pass


class UnarchiveKeyTemplateOptions(ConditionalResourceOptions):
    pass


# Keystores


class ListKeystoresOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {
        "type": "type",
        "group": "group",
        "vault_id": "vault.id",
        "name": "name",
        "limit": "limit",
        "offset": "offset",
    }

    uko_vault: str | None = Field(default=None, min_length=1)
    type: list[KeystoreType] | None = None
    group: str | None = None
    vault_id: list[str] | None = None
    name: str | None = None


class CreateKeystoreOptions(VaultScopedOptions):
    """Options of ``create_keystore``.

    ``keystore_body`` may be a creation request model or a plain mapping,
    which is decoded by its ``type`` before the request is sent.
    """

    keystore_body: KeystoreCreationRequest

    @field_validator("keystore_body", mode="before")
    @classmethod
    def decode_keystore_body(cls, v: Any) -> Any:
        """Dispatch mappings to their creation request variant."""
        if isinstance(v, dict):
            return decode_keystore_creation_request(v)
        return v

    def request_body(self) -> dict[str, Any] | None:
        return self.keystore_body.to_payload()


class GetKeystoreOptions(ResourceOptions):
    pass


class UpdateKeystoreOptions(ConditionalResourceOptions):
    """Options of ``update_keystore``; ``keystore_body`` may be a mapping with ``type``."""

    keystore_body: KeystoreUpdateRequest

    @field_validator("keystore_body", mode="before")
    @classmethod
    def decode_keystore_body(cls, v: Any) -> Any:
        """Dispatch mappings to their update request variant."""
        if isinstance(v, dict):
            return decode_keystore_update_request(v)
        return v

    def request_body(self) -> dict[str, Any] | None:
        return self.keystore_body.to_payload()


class DeleteKeystoreOptions(ConditionalResourceOptions):
    pass


class GetKeystoreStatusOptions(ResourceOptions):
    pass


class ListManagedKeysFromKeystoreOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {
        "algorithm": "algorithm",
        "state": "state",
        "limit": "limit",
        "offset": "offset",
    }

    uko_vault: str = Field(..., min_length=1)
    id: str = Field(..., description="Keystore ID", min_length=1)
    algorithm: list[KeyAlgorithm] | None = None
    state: list[ManagedKeyState] | None = None


class ListAssociatedResourcesForTargetKeystoreOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {"limit": "limit", "offset": "offset", "sort": "sort"}

    uko_vault: str = Field(..., min_length=1)
    id: str = Field(..., description="Keystore ID", min_length=1)
    sort: list[str] | None = None


# Vaults


class ListVaultsOptions(PagedOptions):
    QUERY_FIELDS: ClassVar[dict[str, str]] = {"name": "name", "limit": "limit", "offset": "offset"}

    name: str | None = None


class CreateVaultOptions(BaseOptions):
    BODY_FIELDS: ClassVar[tuple[str, ...]] = ("name", "description")

    name: str = Field(..., description="Vault name", min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=200)


class GetVaultOptions(BaseOptions):
    id: str = Field(..., description="Vault ID", min_length=1)


class UpdateVaultOptions(BaseOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"if_match": "If-Match"}
    BODY_FIELDS: ClassVar[tuple[str, ...]] = ("name", "description")

    id: str = Field(..., min_length=1)
    if_match: str = Field(..., min_length=1)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=200)


class DeleteVaultOptions(BaseOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"if_match": "If-Match"}

    id: str = Field(..., min_length=1)
    if_match: str = Field(..., min_length=1)


# Associated resources


class ListAssociatedResourcesOptions(PagedOptions):
    HEADER_FIELDS: ClassVar[dict[str, str]] = {"uko_vault": "UKO-Vault"}
    QUERY_FIELDS: ClassVar[dict[str, str]] = {"limit": "limit", "offset": "offset", "sort": "sort"}

    uko_vault: str | None = Field(default=None, min_length=1)
    sort: list[str] | None = None


class GetAssociatedResourceOptions(ResourceOptions):
    pass


__all__ = [
    "ActivateManagedKeyOptions",
    "ArchiveKeyTemplateOptions",
    "BaseOptions",
    "ConditionalResourceOptions",
    "CreateKeyTemplateOptions",
    "CreateKeystoreOptions",
    "CreateManagedKeyOptions",
    "CreateVaultOptions",
    "DeactivateManagedKeyOptions",
    "DeleteKeyTemplateOptions",
    "DeleteKeystoreOptions",
    "DeleteManagedKeyOptions",
    "DeleteVaultOptions",
    "DestroyManagedKeyOptions",
    "GetAssociatedResourceOptions",
    "GetKeyDistributionStatusForKeystoresOptions",
    "GetKeyTemplateOptions",
    "GetKeystoreOptions",
    "GetKeystoreStatusOptions",
    "GetManagedKeyOptions",
    "GetVaultOptions",
    "ListAssociatedResourcesForManagedKeyOptions",
    "ListAssociatedResourcesForTargetKeystoreOptions",
    "ListAssociatedResourcesOptions",
    "ListKeyTemplatesOptions",
    "ListKeystoresOptions",
    "ListManagedKeysFromKeystoreOptions",
    "ListManagedKeysOptions",
    "ListVaultsOptions",
    "PagedOptions",
    "ResourceOptions",
    "RotateManagedKeyOptions",
    "SyncManagedKeyOptions",
    "UnarchiveKeyTemplateOptions",
    "UpdateKeyTemplateOptions",
    "UpdateKeystoreOptions",
    "UpdateManagedKeyFromTemplateOptions",
    "UpdateManagedKeyOptions",
    "UpdateVaultOptions",
    "VaultScopedOptions",
]
