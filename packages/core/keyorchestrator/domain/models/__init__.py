"""Domain models for the key orchestrator client."""

from keyorchestrator.domain.models.associated_resource import (
    AssociatedResource,
    AssociatedResourceList,
    ManagedKeyReference,
)
from keyorchestrator.domain.models.collection import PagedCollection, extract_offset_from_href
from keyorchestrator.domain.models.common import (
    ApiError,
    ApiErrorItem,
    ApiErrorTarget,
    AzureEnvironment,
    HrefObject,
    IbmVariant,
    KeyAlgorithm,
    KeystoresProperties,
    KeystoreType,
    KeyType,
    KeyVerificationPattern,
    Tag,
    TargetKeystoreReference,
    TemplateReference,
    VaultReference,
    VaultReferenceInCreationRequest,
)
from keyorchestrator.domain.models.errors import (
    AuthenticationError,
    DecodeError,
    ErrorCategory,
    FieldDecodeError,
    InvalidPagerStateError,
    KeyOrchestratorError,
    MalformedNextLinkError,
    MissingDiscriminatorError,
    NoMoreResultsError,
    PaginationError,
    TransportError,
    UnrecognizedVariantError,
)
from keyorchestrator.domain.models.http import ApiRequest, DetailedResponse
from keyorchestrator.domain.models.keystore import (
    IBM_CLOUD_KMS_CREATION_VARIANTS,
    IBM_CLOUD_KMS_KEYSTORE_VARIANTS,
    KEYSTORE_CREATION_VARIANTS,
    KEYSTORE_UPDATE_VARIANTS,
    KEYSTORE_VARIANTS,
    Keystore,
    KeystoreCreationRequest,
    KeystoreCreationRequestAwsKms,
    KeystoreCreationRequestAzure,
    KeystoreCreationRequestCca,
    KeystoreCreationRequestGoogleKms,
    KeystoreCreationRequestIbmCloudKms,
    KeystoreCreationRequestIbmCloudKmsExternalCreate,
    KeystoreCreationRequestIbmCloudKmsInternalCreate,
    KeystoreHealthStatus,
    KeystoreList,
    KeystoreStatus,
    KeystoreTypeAwsKms,
    KeystoreTypeAzure,
    KeystoreTypeCca,
    KeystoreTypeGoogleKms,
    KeystoreTypeIbmCloudKms,
    KeystoreTypeIbmCloudKmsExternal,
    KeystoreTypeIbmCloudKmsInternal,
    KeystoreUpdateRequest,
    KeystoreUpdateRequestAwsKms,
    KeystoreUpdateRequestAzure,
    KeystoreUpdateRequestCca,
    KeystoreUpdateRequestGoogleKms,
    KeystoreUpdateRequestIbmCloudKms,
    decode_keystore,
    decode_keystore_creation_request,
    decode_keystore_update_request,
    refine_ibm_cloud_kms,
    refine_keystore,
)
from keyorchestrator.domain.models.managed_key import (
    KEY_INSTANCE_VARIANTS,
    GoogleKeyPurpose,
    InstanceInKeystore,
    KeyInstance,
    KeyInstanceAwsKms,
    KeyInstanceAzure,
    KeyInstanceCca,
    KeyInstanceGoogleKms,
    KeyInstanceIbmCloudKms,
    KeyProtectionLevel,
    KeystoreSyncStatus,
    ManagedKey,
    ManagedKeyList,
    ManagedKeyState,
    StatusInKeystore,
    StatusInKeystores,
    decode_key_instance,
)
from keyorchestrator.domain.models.template import (
    KeyProperties,
    KeyPropertiesRequest,
    KeyPropertiesUpdate,
    KeystoresPropertiesRequest,
    Template,
    TemplateKeyState,
    TemplateList,
    TemplateState,
)
from keyorchestrator.domain.models.vault import Vault, VaultList

__all__ = [
    "ApiError",
    "ApiErrorItem",
    "ApiErrorTarget",
    "ApiRequest",
    "AssociatedResource",
    "AssociatedResourceList",
    "AuthenticationError",
    "AzureEnvironment",
    "DecodeError",
    "DetailedResponse",
    "ErrorCategory",
    "FieldDecodeError",
    "GoogleKeyPurpose",
    "HrefObject",
    "IBM_CLOUD_KMS_CREATION_VARIANTS",
    "IBM_CLOUD_KMS_KEYSTORE_VARIANTS",
    "IbmVariant",
    "InstanceInKeystore",
    "InvalidPagerStateError",
    "KEYSTORE_CREATION_VARIANTS",
    "KEYSTORE_UPDATE_VARIANTS",
    "KEYSTORE_VARIANTS",
    "KEY_INSTANCE_VARIANTS",
    "KeyAlgorithm",
    "KeyInstance",
    "KeyInstanceAwsKms",
    "KeyInstanceAzure",
    "KeyInstanceCca",
    "KeyInstanceGoogleKms",
    "KeyInstanceIbmCloudKms",
    "KeyOrchestratorError",
    "KeyProperties",
    "KeyPropertiesRequest",
    "KeyPropertiesUpdate",
    "KeyProtectionLevel",
    "KeyType",
    "KeyVerificationPattern",
    "Keystore",
    "KeystoreCreationRequest",
    "KeystoreCreationRequestAwsKms",
    "KeystoreCreationRequestAzure",
    "KeystoreCreationRequestCca",
    "KeystoreCreationRequestGoogleKms",
    "KeystoreCreationRequestIbmCloudKms",
    "KeystoreCreationRequestIbmCloudKmsExternalCreate",
    "KeystoreCreationRequestIbmCloudKmsInternalCreate",
    "KeystoreHealthStatus",
    "KeystoreList",
    "KeystoreStatus",
    "KeystoreSyncStatus",
    "KeystoreType",
    "KeystoreTypeAwsKms",
    "KeystoreTypeAzure",
    "KeystoreTypeCca",
    "KeystoreTypeGoogleKms",
    "KeystoreTypeIbmCloudKms",
    "KeystoreTypeIbmCloudKmsExternal",
    "KeystoreTypeIbmCloudKmsInternal",
    "KeystoreUpdateRequest",
    "KeystoreUpdateRequestAwsKms",
    "KeystoreUpdateRequestAzure",
    "KeystoreUpdateRequestCca",
    "KeystoreUpdateRequestGoogleKms",
    "KeystoreUpdateRequestIbmCloudKms",
    "KeystoresProperties",
    "KeystoresPropertiesRequest",
    "MalformedNextLinkError",
    "ManagedKey",
    "ManagedKeyList",
    "ManagedKeyReference",
    "ManagedKeyState",
    "MissingDiscriminatorError",
    "NoMoreResultsError",
    "PagedCollection",
    "PaginationError",
    "StatusInKeystore",
    "StatusInKeystores",
    "Tag",
    "TargetKeystoreReference",
    "Template",
    "TemplateKeyState",
    "TemplateList",
    "TemplateReference",
    "TemplateState",
    "TransportError",
    "UnrecognizedVariantError",
    "Vault",
    "VaultList",
    "VaultReference",
    "VaultReferenceInCreationRequest",
    "decode_key_instance",
    "decode_keystore",
    "decode_keystore_creation_request",
    "decode_keystore_update_request",
    "extract_offset_from_href",
    "refine_ibm_cloud_kms",
    "refine_keystore",
]
