"""Shared shapes and enumerations used across resources."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiModel(BaseModel):
    """Base class for read models decoded from service responses.

    Unknown fields are ignored so newer service versions keep decoding.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )


class RequestModel(BaseModel):
    """Base class for write models sent to the service."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )

    def to_payload(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible request body, omitting unset fields."""
        return self.model_dump(mode="json", exclude_none=True, by_alias=True)


class KeystoreType(str, Enum):
    """Keystore vendor tags."""

    AwsKms = "aws_kms"
    """Amazon Web Services Key Management Service."""

    AzureKeyVault = "azure_key_vault"
    """Microsoft Azure Key Vault."""

    GoogleKms = "google_kms"
    """Google Cloud Key Management Service."""

    IbmCloudKms = "ibm_cloud_kms"
    """IBM Cloud Key Protect or Hyper Protect Crypto Services."""

    Cca = "cca"
    """Common Cryptographic Architecture keystore."""


class IbmVariant(str, Enum):
    """Second-level tag of IBM Cloud KMS keystores."""

    Internal = "internal"
    """Keystore hosted inside the service instance."""

    Hpcs = "hpcs"
    """External Hyper Protect Crypto Services instance."""

    KeyProtect = "key_protect"
    """External Key Protect instance."""


class AzureEnvironment(str, Enum):
    """Azure cloud environments."""

    Azure = "azure"
    AzureChina = "azure_china"
    AzureGermany = "azure_germany"
    AzureUsGovernment = "azure_us_government"


class KeyAlgorithm(str, Enum):
    """Key algorithms."""

    Aes = "aes"
    Rsa = "rsa"
    Ec = "ec"
    Hmac = "hmac"


class KeyType(str, Enum):
    """Kind of key material held by a key instance."""

    KeyPair = "key_pair"
    PrivateKey = "private_key"
    PublicKey = "public_key"
    SecretKey = "secret_key"


class HrefObject(ApiModel):
    """Navigation link."""

    href: str | None = Field(default=None, description="Target URL")


class VaultReference(ApiModel):
    """Reference to the vault owning a resource."""

    id: str | None = Field(default=None, description="Vault ID")
    name: str | None = Field(default=None, description="Vault name")
    href: str | None = Field(default=None, description="Vault URL")


class VaultReferenceInCreationRequest(RequestModel):
    """Vault reference sent when creating a resource."""

    id: str = Field(..., description="Vault ID", min_length=1)


class TemplateReference(ApiModel):
    """Reference to the template a managed key was created from."""

    id: str | None = Field(default=None, description="Template ID")
    name: str | None = Field(default=None, description="Template name")
    href: str | None = Field(default=None, description="Template URL")


class TargetKeystoreReference(ApiModel):
    """Reference to a keystore a resource is distributed to."""

    id: str | None = Field(default=None, description="Keystore ID")
    name: str | None = Field(default=None, description="Keystore name")
    type: str | None = Field(default=None, description="Keystore vendor tag")
    href: str | None = Field(default=None, description="Keystore URL")


class KeystoresProperties(BaseModel):
    """Keystore group and type a template distributes keys to."""

    group: str | None = Field(default=None, description="Keystore group")
    type: str | None = Field(default=None, description="Keystore vendor tag")

    model_config = ConfigDict(extra="ignore")


class Tag(BaseModel):
    """Name/value label attached to a managed key."""

    name: str = Field(..., description="Tag name", min_length=1)
    value: str = Field(..., description="Tag value")

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class KeyVerificationPattern(ApiModel):
    """Value that identifies key material without revealing it."""

    method: str | None = Field(default=None, description="Verification method, e.g. enc-zero")
    value: str | None = Field(default=None, description="Verification pattern")


class ApiErrorTarget(ApiModel):
    """Part of the request an error refers to."""

    type: str | None = Field(default=None, description="field, parameter or header")
    name: str | None = Field(default=None, description="Name of the offending item")


class ApiErrorItem(ApiModel):
    """Single entry in the service error envelope."""

    code: str | None = Field(default=None, description="Error code")
    message: str | None = Field(default=None, description="Error message")
    more_info: str | None = Field(default=None, description="Documentation link")
    message_params: list[str] | None = Field(default=None, description="Message parameters")
    target: ApiErrorTarget | None = Field(default=None, description="Error target")


class ApiError(ApiModel):
    """Service error envelope."""

    status_code: int | None = Field(default=None, description="HTTP status code")
    trace: str | None = Field(default=None, description="Service trace ID")
    errors: list[ApiErrorItem] = Field(default_factory=list, description="Error details")

    @property
    def first_message(self) -> str | None:
        """Message of the first error entry, if any."""
        for item in self.errors:
            if item.message:
                return item.message
        return None
