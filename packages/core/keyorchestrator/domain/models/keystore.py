"""Keystore read models, creation and update requests."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar, Literal

from pydantic import ConfigDict, Field, field_validator, model_validator

from keyorchestrator.domain.components.polymorphic_decoder import VariantRegistry
from keyorchestrator.domain.models.collection import PagedCollection
from keyorchestrator.domain.models.common import (
    ApiModel,
    AzureEnvironment,
    RequestModel,
    VaultReference,
    VaultReferenceInCreationRequest,
)


class KeystoreHealthStatus(str, Enum):
    """Health of the connection to a keystore."""

    Ok = "ok"
    """Keystore is reachable and configured correctly."""

    NotResponding = "not_responding"
    """Keystore did not answer the last heartbeat."""

    ConfigurationError = "configuration_error"
    """Keystore answered but rejected the configured credentials."""


class KeystoreStatus(ApiModel):
    """Connection status of a keystore."""

    last_heartbeat: datetime | None = Field(default=None, description="Time of the last heartbeat")
    health_status: str | None = Field(default=None, description="One of KeystoreHealthStatus")
    message: str | None = Field(default=None, description="Details about the status")


class Keystore(ApiModel):
    """Fields shared by every keystore vendor.

    Used as-is for list responses, keeping vendor fields as extras. Call
    :func:`refine_keystore` to get the vendor-specific variant.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    vault: VaultReference | None = Field(default=None, description="Owning vault")
    id: str | None = Field(default=None, description="Keystore ID")
    name: str | None = Field(default=None, description="Keystore name")
    description: str | None = Field(default=None, description="Keystore description")
    location: str | None = Field(default=None, description="Geographic location of the keystore")
    groups: list[str] | None = Field(default=None, description="Keystore groups")
    type: str | None = Field(default=None, description="Vendor tag, one of KeystoreType")
    status: KeystoreStatus | None = Field(default=None, description="Connection status")
    created_at: datetime | None = Field(default=None, description="Creation time")
    updated_at: datetime | None = Field(default=None, description="Last update time")
    created_by: str | None = Field(default=None, description="Creator ID")
    updated_by: str | None = Field(default=None, description="Last updater ID")
    href: str | None = Field(default=None, description="Keystore URL")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, name={self.name!r}, type={self.type!r})"


KEYSTORE_VARIANTS: VariantRegistry[Keystore] = VariantRegistry("Keystore", base=Keystore)


@KEYSTORE_VARIANTS.register("aws_kms")
class KeystoreTypeAwsKms(Keystore):
    """AWS KMS keystore."""

    type: Literal["aws_kms"] = "aws_kms"
    aws_region: str | None = Field(default=None, description="AWS region")
    aws_access_key_id: str | None = Field(default=None, description="AWS access key ID")
    aws_secret_access_key: str | None = Field(default=None, description="AWS secret access key")


@KEYSTORE_VARIANTS.register("azure_key_vault")
class KeystoreTypeAzure(Keystore):
    """Azure Key Vault keystore."""

    type: Literal["azure_key_vault"] = "azure_key_vault"
    azure_service_name: str | None = None
    azure_resource_group: str | None = None
    azure_location: str | None = None
    azure_service_principal_client_id: str | None = None
    azure_service_principal_password: str | None = None
    azure_tenant: str | None = None
    azure_subscription_id: str | None = None
    azure_environment: str | None = Field(default=None, description="One of AzureEnvironment")


@KEYSTORE_VARIANTS.register("google_kms")
class KeystoreTypeGoogleKms(Keystore):
    """Google Cloud KMS keystore."""

    type: Literal["google_kms"] = "google_kms"
    google_credentials: str | None = Field(default=None, description="Service account JSON, base64")
    google_location: str | None = None
    google_project_id: str | None = None
    google_private_key_id: str | None = None
    google_key_ring: str | None = None


@KEYSTORE_VARIANTS.register("ibm_cloud_kms")
class KeystoreTypeIbmCloudKms(Keystore):
    """IBM Cloud KMS keystore, either internal or connected to an external instance.

    Use :func:`refine_ibm_cloud_kms` to resolve ``ibm_variant``.
    """

    type: Literal["ibm_cloud_kms"] = "ibm_cloud_kms"
    ibm_variant: str | None = Field(default=None, description="One of IbmVariant")
    ibm_api_endpoint: str | None = None
    ibm_iam_endpoint: str | None = None
    ibm_api_key: str | None = None
    ibm_instance_id: str | None = None
    ibm_key_ring: str | None = None


@KEYSTORE_VARIANTS.register("cca")
class KeystoreTypeCca(Keystore):
    """CCA keystore on an IBM Z crypto domain."""

    type: Literal["cca"] = "cca"
    cca_host: str | None = None
    cca_port: int | None = None
    cca_domain: int | None = None


IBM_CLOUD_KMS_KEYSTORE_VARIANTS: VariantRegistry[KeystoreTypeIbmCloudKms] = VariantRegistry(
    "KeystoreTypeIbmCloudKms", discriminator="ibm_variant", base=KeystoreTypeIbmCloudKms
)


@IBM_CLOUD_KMS_KEYSTORE_VARIANTS.register("internal")
class KeystoreTypeIbmCloudKmsInternal(KeystoreTypeIbmCloudKms):
    """IBM Cloud KMS keystore hosted inside the vault's service instance."""

    ibm_variant: Literal["internal"] = "internal"


@IBM_CLOUD_KMS_KEYSTORE_VARIANTS.register("hpcs")
@IBM_CLOUD_KMS_KEYSTORE_VARIANTS.register("key_protect")
class KeystoreTypeIbmCloudKmsExternal(KeystoreTypeIbmCloudKms):
    """IBM Cloud KMS keystore connected to an external HPCS or Key Protect instance."""

    ibm_variant: Literal["hpcs", "key_protect"]


class KeystoreList(PagedCollection):
    """Page of keystores."""

    ITEMS_FIELD: ClassVar[str] = "keystores"

    keystores: list[Keystore] = Field(default_factory=list, description="Keystores on this page")


class KeystoreCreationRequest(RequestModel):
    """Fields shared by every keystore creation request."""

    type: str = Field(..., description="Vendor tag, one of KeystoreType", min_length=1)
    vault: VaultReferenceInCreationRequest = Field(..., description="Vault to create the keystore in")
    name: str = Field(..., description="Keystore name", min_length=1, max_length=100)
    description: str | None = Field(default=None, description="Keystore description", max_length=200)
    groups: list[str] | None = Field(default=None, description="Keystore groups")

    @field_validator("groups")
    @classmethod
    def validate_groups(cls, v: list[str] | None) -> list[str] | None:
        """Reject empty group names."""
        if v is not None and any(not group or not group.strip() for group in v):
            raise ValueError("Keystore group names cannot be empty")
        return v


KEYSTORE_CREATION_VARIANTS: VariantRegistry[KeystoreCreationRequest] = VariantRegistry(
    "KeystoreCreationRequest", base=KeystoreCreationRequest
)


@KEYSTORE_CREATION_VARIANTS.register("aws_kms")
class KeystoreCreationRequestAwsKms(KeystoreCreationRequest):
    """Request to connect an AWS KMS keystore."""

    type: Literal["aws_kms"] = "aws_kms"
    aws_region: str = Field(..., min_length=1)
    aws_access_key_id: str = Field(..., min_length=1)
    aws_secret_access_key: str = Field(..., min_length=1)


@KEYSTORE_CREATION_VARIANTS.register("azure_key_vault")
class KeystoreCreationRequestAzure(KeystoreCreationRequest):
    """Request to connect an Azure Key Vault keystore."""

    type: Literal["azure_key_vault"] = "azure_key_vault"
    azure_service_name: str = Field(..., min_length=1)
    azure_resource_group: str = Field(..., min_length=1)
    azure_location: str | None = None
    azure_service_principal_client_id: str = Field(..., min_length=1)
    azure_service_principal_password: str = Field(..., min_length=1)
    azure_tenant: str = Field(..., min_length=1)
    azure_subscription_id: str = Field(..., min_length=1)
    azure_environment: AzureEnvironment | None = None


@KEYSTORE_CREATION_VARIANTS.register("google_kms")
class KeystoreCreationRequestGoogleKms(KeystoreCreationRequest):
    """Request to connect a Google Cloud KMS keystore."""

    type: Literal["google_kms"] = "google_kms"
    google_credentials: str = Field(..., min_length=1)
    google_location: str = Field(..., min_length=1)
    google_project_id: str = Field(..., min_length=1)
    google_private_key_id: str = Field(..., min_length=1)
    google_key_ring: str = Field(..., min_length=1)


@KEYSTORE_CREATION_VARIANTS.register("ibm_cloud_kms")
class KeystoreCreationRequestIbmCloudKms(KeystoreCreationRequest):
    """Request to create an IBM Cloud KMS keystore, internal or external.

    Connection fields are only required for external keystores; use
    :func:`refine_ibm_cloud_kms` to resolve the leaf shape.
    """

    type: Literal["ibm_cloud_kms"] = "ibm_cloud_kms"
    ibm_variant: str | None = Field(default=None, description="One of IbmVariant")
    ibm_api_endpoint: str | None = None
    ibm_iam_endpoint: str | None = None
    ibm_api_key: str | None = None
    ibm_instance_id: str | None = None
    ibm_key_ring: str | None = None


IBM_CLOUD_KMS_CREATION_VARIANTS: VariantRegistry[KeystoreCreationRequestIbmCloudKms] = (
    VariantRegistry(
        "KeystoreCreationRequestIbmCloudKms",
        discriminator="ibm_variant",
        base=KeystoreCreationRequestIbmCloudKms,
    )
)

_IBM_CONNECTION_FIELDS = (
    "ibm_api_endpoint",
    "ibm_iam_endpoint",
    "ibm_api_key",
    "ibm_instance_id",
    "ibm_key_ring",
)


@IBM_CLOUD_KMS_CREATION_VARIANTS.register("internal")
class KeystoreCreationRequestIbmCloudKmsInternalCreate(KeystoreCreationRequestIbmCloudKms):
    """Request to create an internal IBM Cloud KMS keystore."""

    ibm_variant: Literal["internal"] = "internal"

    @model_validator(mode="after")
    def validate_no_connection_fields(self) -> KeystoreCreationRequestIbmCloudKmsInternalCreate:
        """Internal keystores take no external connection settings."""
        for name in _IBM_CONNECTION_FIELDS:
            if getattr(self, name) is not None:
                raise ValueError(f"{name} is not allowed for internal keystores")
        return self


@IBM_CLOUD_KMS_CREATION_VARIANTS.register("hpcs")
@IBM_CLOUD_KMS_CREATION_VARIANTS.register("key_protect")
class KeystoreCreationRequestIbmCloudKmsExternalCreate(KeystoreCreationRequestIbmCloudKms):
    """Request to connect an external HPCS or Key Protect instance."""

    ibm_variant: Literal["hpcs", "key_protect"]
    ibm_api_endpoint: str = Field(..., min_length=1)
    ibm_iam_endpoint: str = Field(..., min_length=1)
    ibm_api_key: str = Field(..., min_length=1)
    ibm_instance_id: str = Field(..., min_length=1)


@KEYSTORE_CREATION_VARIANTS.register("cca")
class KeystoreCreationRequestCca(KeystoreCreationRequest):
    """Request to connect a CCA keystore."""

    type: Literal["cca"] = "cca"
    cca_host: str = Field(..., min_length=1)
    cca_port: int = Field(..., ge=1, le=65535)
    cca_domain: int | None = Field(default=None, ge=0)


class KeystoreUpdateRequest(RequestModel):
    """Fields every keystore accepts in an update.

    ``type`` selects the variant when decoding and is never sent to the
    service.
    """

    type: str | None = Field(default=None, description="Vendor tag", exclude=True)
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=200)
    groups: list[str] | None = None


KEYSTORE_UPDATE_VARIANTS: VariantRegistry[KeystoreUpdateRequest] = VariantRegistry(
    "KeystoreUpdateRequest", base=KeystoreUpdateRequest
)


@KEYSTORE_UPDATE_VARIANTS.register("aws_kms")
class KeystoreUpdateRequestAwsKms(KeystoreUpdateRequest):
    """Update of an AWS KMS keystore connection."""

    type: Literal["aws_kms"] = Field(default="aws_kms", exclude=True)
    aws_region: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None


@KEYSTORE_UPDATE_VARIANTS.register("azure_key_vault")
class KeystoreUpdateRequestAzure(KeystoreUpdateRequest):
    """Update of an Azure Key Vault keystore connection."""

    type: Literal["azure_key_vault"] = Field(default="azure_key_vault", exclude=True)
    azure_service_name: str | None = None
    azure_resource_group: str | None = None
    azure_location: str | None = None
    azure_service_principal_client_id: str | None = None
    azure_service_principal_password: str | None = None
    azure_tenant: str | None = None
    azure_subscription_id: str | None = None
    azure_environment: AzureEnvironment | None = None


@KEYSTORE_UPDATE_VARIANTS.register("google_kms")
class KeystoreUpdateRequestGoogleKms(KeystoreUpdateRequest):
    """Update of a Google Cloud KMS keystore connection."""

    type: Literal["google_kms"] = Field(default="google_kms", exclude=True)
    google_credentials: str | None = None
    google_location: str | None = None
    google_project_id: str | None = None
    google_private_key_id: str | None = None
    google_key_ring: str | None = None


@KEYSTORE_UPDATE_VARIANTS.register("ibm_cloud_kms")
class KeystoreUpdateRequestIbmCloudKms(KeystoreUpdateRequest):
    """Update of an IBM Cloud KMS keystore connection."""

    type: Literal["ibm_cloud_kms"] = Field(default="ibm_cloud_kms", exclude=True)
    ibm_api_endpoint: str | None = None
    ibm_iam_endpoint: str | None = None
    ibm_api_key: str | None = None
    ibm_instance_id: str | None = None
    ibm_key_ring: str | None = None


@KEYSTORE_UPDATE_VARIANTS.register("cca")
class KeystoreUpdateRequestCca(KeystoreUpdateRequest):
    """Update of a CCA keystore connection."""

    type: Literal["cca"] = Field(default="cca", exclude=True)
    cca_host: str | None = None
    cca_port: int | None = Field(default=None, ge=1, le=65535)
    cca_domain: int | None = Field(default=None, ge=0)


def decode_keystore(raw: Any) -> Keystore:
    """Decode a keystore payload into its vendor variant."""
    return KEYSTORE_VARIANTS.decode(raw)


def decode_keystore_creation_request(raw: Any) -> KeystoreCreationRequest:
    """Decode a creation request payload into its vendor variant."""
    return KEYSTORE_CREATION_VARIANTS.decode(raw)


def decode_keystore_update_request(raw: Any) -> KeystoreUpdateRequest:
    """Decode an update request payload into its vendor variant."""
    return KEYSTORE_UPDATE_VARIANTS.decode(raw)


def refine_keystore(keystore: Keystore | Mapping[str, Any]) -> Keystore:
    """Resolve a base keystore, e.g. from a list page, into its vendor variant.

    Already-refined variants are returned unchanged.
    """
    if isinstance(keystore, Keystore):
        if type(keystore) is not Keystore:
            return keystore
        keystore = keystore.model_dump(mode="json", exclude_none=True)
    return KEYSTORE_VARIANTS.decode(keystore)


def refine_ibm_cloud_kms(
    value: KeystoreTypeIbmCloudKms | KeystoreCreationRequestIbmCloudKms | Mapping[str, Any],
) -> KeystoreTypeIbmCloudKms | KeystoreCreationRequestIbmCloudKms:
    """Second decode pass resolving ``ibm_variant`` on IBM Cloud KMS values.

    Args:
        value: First-level keystore or creation request, or a raw payload.
            Raw payloads are treated as keystores when they carry an ``id``
            and as creation requests otherwise.

    Returns:
        The internal or external leaf variant.

    Raises:
        MissingDiscriminatorError: If ``ibm_variant`` is absent.
        UnrecognizedVariantError: If ``ibm_variant`` is unknown.
        FieldDecodeError: If the leaf shape rejects a field.
    """
    if isinstance(value, KeystoreCreationRequestIbmCloudKms):
        registry: VariantRegistry[Any] = IBM_CLOUD_KMS_CREATION_VARIANTS
        raw: Mapping[str, Any] = value.model_dump(mode="json", exclude_none=True)
    elif isinstance(value, KeystoreTypeIbmCloudKms):
        registry = IBM_CLOUD_KMS_KEYSTORE_VARIANTS
        raw = value.model_dump(mode="json", exclude_none=True)
    else:
        registry = IBM_CLOUD_KMS_KEYSTORE_VARIANTS if "id" in value else IBM_CLOUD_KMS_CREATION_VARIANTS
        raw = value
    return registry.decode(raw)
