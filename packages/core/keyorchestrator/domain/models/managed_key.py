"""Managed key models, key instances and distribution status."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar

from pydantic import Field, field_validator, model_validator

from keyorchestrator.domain.components.polymorphic_decoder import VariantRegistry
from keyorchestrator.domain.models.collection import PagedCollection
from keyorchestrator.domain.models.common import (
    ApiError,
    ApiModel,
    KeyVerificationPattern,
    Tag,
    TargetKeystoreReference,
    TemplateReference,
    VaultReference,
)


class ManagedKeyState(str, Enum):
    """Lifecycle states of a managed key.

    Transitions are enforced by the service, not by this client.
    """

    PreActivation = "pre_activation"
    """Key exists but cannot be used yet."""

    Active = "active"
    """Key can be used for cryptographic operations."""

    Deactivated = "deactivated"
    """Key can only be used to process previously protected data."""

    Compromised = "compromised"
    """Key is considered compromised."""

    Destroyed = "destroyed"
    """Key material has been destroyed."""

    DestroyedCompromised = "destroyed_compromised"
    """Compromised key whose material has been destroyed."""


class KeystoreSyncStatus(str, Enum):
    """Synchronization state of a managed key in one keystore."""

    Active = "active"
    NotActive = "not_active"
    NotPresent = "not_present"
    WrongKey = "wrong_key"
    Error = "error"


class KeyProtectionLevel(str, Enum):
    """Protection level of a key instance in Azure or Google Cloud."""

    Software = "software"
    Hsm = "hsm"


class GoogleKeyPurpose(str, Enum):
    """Purpose of a Google Cloud KMS key."""

    EncryptDecrypt = "encrypt_decrypt"
    AsymmetricSign = "asymmetric_sign"
    AsymmetricDecrypt = "asymmetric_decrypt"
    Mac = "mac"


class InstanceInKeystore(ApiModel):
    """Keystore group and vendor a key instance lives in."""

    group: str | None = Field(default=None, description="Keystore group")
    type: str | None = Field(default=None, description="Vendor tag, one of KeystoreType")


class KeyInstance(ApiModel):
    """Representation of a managed key inside one keystore.

    ``type`` is the kind of key material (one of KeyType); the vendor is
    ``keystore.type``, which selects the variant.
    """

    VENDOR: ClassVar[str | None] = None

    id: str | None = Field(default=None, description="Key instance ID")
    label_in_keystore: str | None = Field(default=None, description="Key label inside the keystore")
    type: str | None = Field(default=None, description="One of KeyType")
    keystore: InstanceInKeystore | None = Field(default=None, description="Keystore the instance lives in")

    @model_validator(mode="after")
    def validate_vendor(self) -> KeyInstance:
        """Ensure the keystore vendor matches the variant."""
        if self.VENDOR is not None:
            actual = self.keystore.type if self.keystore else None
            if actual != self.VENDOR:
                raise ValueError(
                    f"{type(self).__name__} requires keystore.type={self.VENDOR!r}, got {actual!r}"
                )
        return self


KEY_INSTANCE_VARIANTS: VariantRegistry[KeyInstance] = VariantRegistry(
    "KeyInstance", discriminator="keystore.type", base=KeyInstance
)


@KEY_INSTANCE_VARIANTS.register("aws_kms")
class KeyInstanceAwsKms(KeyInstance):
    VENDOR: ClassVar[str | None] = "aws_kms"


@KEY_INSTANCE_VARIANTS.register("azure_key_vault")
class KeyInstanceAzure(KeyInstance):
    VENDOR: ClassVar[str | None] = "azure_key_vault"

    azure_key_protection_level: str | None = Field(default=None, description="One of KeyProtectionLevel")
    azure_key_operations: list[str] | None = Field(default=None, description="Allowed key operations")


@KEY_INSTANCE_VARIANTS.register("google_kms")
class KeyInstanceGoogleKms(KeyInstance):
    VENDOR: ClassVar[str | None] = "google_kms"

    google_key_protection_level: str | None = Field(default=None, description="One of KeyProtectionLevel")
    google_key_purpose: str | None = Field(default=None, description="One of GoogleKeyPurpose")
    google_kms_algorithm: str | None = Field(default=None, description="Google algorithm name")


@KEY_INSTANCE_VARIANTS.register("ibm_cloud_kms")
class KeyInstanceIbmCloudKms(KeyInstance):
    VENDOR: ClassVar[str | None] = "ibm_cloud_kms"


@KEY_INSTANCE_VARIANTS.register("cca")
class KeyInstanceCca(KeyInstance):
    VENDOR: ClassVar[str | None] = "cca"

    cca_usage_control: str | None = Field(default=None, description="Key usage control")
    cca_key_type: str | None = Field(default=None, description="CCA key type")


def decode_key_instance(raw: Any) -> KeyInstance:
    """Decode a key instance payload into its vendor variant."""
    return KEY_INSTANCE_VARIANTS.decode(raw)


class StatusInKeystore(ApiModel):
    """Synchronization status of a managed key in one keystore."""

    keystore: TargetKeystoreReference | None = None
    status: str | None = Field(default=None, description="One of KeystoreSyncStatus")
    error: ApiError | None = Field(default=None, description="Error reported by the keystore")
    key_id_in_keystore: str | None = None


class StatusInKeystores(ApiModel):
    """Synchronization status of a managed key in every target keystore."""

    statuses_in_keystores: list[StatusInKeystore] = Field(default_factory=list)


class ManagedKey(ApiModel):
    """Logical key distributed to one or more keystores."""

    id: str | None = Field(default=None, description="Managed key ID")
    vault: VaultReference | None = Field(default=None, description="Owning vault")
    template: TemplateReference | None = Field(default=None, description="Template the key was created from")
    description: str | None = None
    label: str | None = Field(default=None, description="Key label")
    state: str | None = Field(default=None, description="One of ManagedKeyState")
    size: str | None = Field(default=None, description="Key size, e.g. 256")
    algorithm: str | None = Field(default=None, description="One of KeyAlgorithm")
    verification_patterns: list[KeyVerificationPattern] | None = None
    activation_date: date | None = None
    expiration_date: date | None = None
    tags: list[Tag] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    created_by: str | None = None
    updated_by: str | None = None
    referenced_keystores: list[TargetKeystoreReference] = Field(default_factory=list)
    instances: list[KeyInstance] = Field(default_factory=list)
    href: str | None = None

    @field_validator("instances", mode="before")
    @classmethod
    def decode_instances(cls, v: Any) -> Any:
        """Dispatch each key instance to its vendor variant."""
        return KEY_INSTANCE_VARIANTS.decode_list(v, "instances")

    def __repr__(self) -> str:
        return f"ManagedKey(id={self.id!r}, label={self.label!r}, state={self.state!r})"


class ManagedKeyList(PagedCollection):
    """Page of managed keys."""

    ITEMS_FIELD: ClassVar[str] = "managed_keys"

    managed_keys: list[ManagedKey] = Field(default_factory=list)
