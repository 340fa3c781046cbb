"""KeyOrchestratorClient - typed client for the Unified Key Orchestrator API."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import httpx

from keyorchestrator.domain.components.pager import Pager
from keyorchestrator.domain.components.polymorphic_decoder import ROOT_FIELD, decode_model
from keyorchestrator.domain.interfaces.authenticator import Authenticator
from keyorchestrator.domain.interfaces.observability_manager import ObservabilityManager
from keyorchestrator.domain.interfaces.transport import Transport
from keyorchestrator.domain.models.associated_resource import (
    AssociatedResource,
    AssociatedResourceList,
)
from keyorchestrator.domain.models.errors import FieldDecodeError
from keyorchestrator.domain.models.http import ApiRequest, DetailedResponse
from keyorchestrator.domain.models.keystore import (
    Keystore,
    KeystoreList,
    KeystoreStatus,
    decode_keystore,
)
from keyorchestrator.domain.models.managed_key import (
    ManagedKey,
    ManagedKeyList,
    StatusInKeystores,
)
from keyorchestrator.domain.models.options import (
    ActivateManagedKeyOptions,
    ArchiveKeyTemplateOptions,
    BaseOptions,
    CreateKeystoreOptions,
    CreateKeyTemplateOptions,
    CreateManagedKeyOptions,
    CreateVaultOptions,
    DeactivateManagedKeyOptions,
    DeleteKeystoreOptions,
    DeleteKeyTemplateOptions,
    DeleteManagedKeyOptions,
    DeleteVaultOptions,
    DestroyManagedKeyOptions,
    GetAssociatedResourceOptions,
    GetKeyDistributionStatusForKeystoresOptions,
    GetKeystoreOptions,
    GetKeystoreStatusOptions,
    GetKeyTemplateOptions,
    GetManagedKeyOptions,
    GetVaultOptions,
    ListAssociatedResourcesForManagedKeyOptions,
    ListAssociatedResourcesForTargetKeystoreOptions,
    ListAssociatedResourcesOptions,
    ListKeystoresOptions,
    ListKeyTemplatesOptions,
    ListManagedKeysFromKeystoreOptions,
    ListManagedKeysOptions,
    ListVaultsOptions,
    RotateManagedKeyOptions,
    SyncManagedKeyOptions,
    UnarchiveKeyTemplateOptions,
    UpdateKeystoreOptions,
    UpdateKeyTemplateOptions,
    UpdateManagedKeyFromTemplateOptions,
    UpdateManagedKeyOptions,
    UpdateVaultOptions,
)
from keyorchestrator.domain.models.template import Template, TemplateList
from keyorchestrator.domain.models.vault import Vault, VaultList
from keyorchestrator.infrastructure.adapters.httpx_transport import HttpxTransport
from keyorchestrator.infrastructure.auth.authenticators import get_authenticator_from_settings
from keyorchestrator.infrastructure.config.file_loader import ConfigurationFileLoader
from keyorchestrator.infrastructure.config.settings import ClientSettings
from keyorchestrator.infrastructure.observability.logger import DefaultObservabilityManager
from keyorchestrator.infrastructure.utils.validation import validate_path_param

ResultT = TypeVar("ResultT")


class KeyOrchestratorClient:
    """Main entry point for library.

    One method per REST operation. Each method takes a typed options model,
    performs exactly one request (plus transport retries, if enabled) and
    returns a DetailedResponse with the decoded result, status and headers.

    Example:
        ```python
        # Credentials from UKO_* environment variables
        client = KeyOrchestratorClient()

        # Explicit configuration
        client = KeyOrchestratorClient(config={"auth_type": "iam", "apikey": apikey})

        with KeyOrchestratorClient.from_credentials_file("ibm-credentials.env") as client:
            vault = client.create_vault(CreateVaultOptions(name="payments")).result
            for key in client.managed_keys_pager(ListManagedKeysOptions(vault_id=[vault.id])):
                print(key.label, key.state)
        ```
    """

    API_PREFIX = "/api/v4"
    """Path prefix of every endpoint."""

    def __init__(
        self,
        config: ClientSettings | dict[str, Any] | None = None,
        authenticator: Authenticator | None = None,
        transport: Transport | None = None,
        observability_manager: ObservabilityManager | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize KeyOrchestratorClient with dependencies.

        Args:
            config: Optional configuration. Can be:
                   - ClientSettings instance
                   - Dictionary with configuration values
                   - None (loads from UKO_* environment variables)
            authenticator: Optional Authenticator. If not provided, one is
                         built from ``config.auth_type``.
            transport: Optional Transport implementation. If not provided,
                     defaults to HttpxTransport configured from ``config``.
            observability_manager: Optional ObservabilityManager implementation.
                                 If not provided, defaults to DefaultObservabilityManager.
            http_client: Optional httpx.Client for the default transport (for testing).

        Raises:
            ValueError: If configuration is invalid.
        """
        if config is None:
            self._config = ClientSettings()
        elif isinstance(config, dict):
            self._config = ClientSettings.from_dict(config)
        elif isinstance(config, ClientSettings):
            self._config = config
        else:
            raise ValueError(
                f"Invalid config type: {type(config)}. Expected ClientSettings, dict, or None"
            )

        if observability_manager is None:
            self._observability_manager: ObservabilityManager = DefaultObservabilityManager(
                log_level=self._config.log_level,
                json_format=self._config.json_logs,
            )
        else:
            self._observability_manager = observability_manager

        if transport is None:
            self._transport: Transport = HttpxTransport.from_settings(
                self._config,
                authenticator=authenticator or get_authenticator_from_settings(self._config),
                observability_manager=self._observability_manager,
                http_client=http_client,
            )
        else:
            self._transport = transport

    @classmethod
    def from_credentials_file(cls, path: str | Path, **kwargs: Any) -> KeyOrchestratorClient:
        """Create a client from an IBM-style ``ibm-credentials.env`` file."""
        return cls(config=ClientSettings.from_credentials_file(path), **kwargs)

    @classmethod
    def from_config_file(cls, path: str | Path | None = None, **kwargs: Any) -> KeyOrchestratorClient:
        """Create a client from the ``client`` section of a YAML or JSON file.

        Args:
            path: Configuration file; defaults to ``$UKO_CONFIG_FILE``.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        return cls(config=ConfigurationFileLoader(path).load_settings(), **kwargs)

    @property
    def config(self) -> ClientSettings:
        return self._config

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def service_url(self) -> str:
        return self._transport.service_url

    def set_service_url(self, url: str) -> None:
        """Change the base URL of subsequent requests."""
        self._http_transport().set_service_url(url)

    def set_default_headers(self, headers: dict[str, str]) -> None:
        """Set headers sent with every request."""
        self._http_transport().set_default_headers(headers)

    def set_enable_gzip_compression(self, enabled: bool) -> None:
        """Enable or disable gzip compression of request bodies."""
        self._http_transport().set_enable_gzip_compression(enabled)

    def get_enable_gzip_compression(self) -> bool:
        return self._http_transport().get_enable_gzip_compression()

    def enable_retries(self, max_retries: int = 4, max_retry_interval: float = 30.0) -> None:
        """Retry throttled, failed and timed-out requests."""
        self._http_transport().enable_retries(max_retries, max_retry_interval)

    def disable_retries(self) -> None:
        """Fail on the first error."""
        self._http_transport().disable_retries()

    def close(self) -> None:
        """Close the underlying transport."""
        self._transport.close()

    def __enter__(self) -> KeyOrchestratorClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # Managed keys

    def list_managed_keys(
        self, options: ListManagedKeysOptions | None = None
    ) -> DetailedResponse[ManagedKeyList]:
        """List managed keys, optionally filtered by vault, algorithm, state or label."""
        options = options or ListManagedKeysOptions()
        return self._invoke(
            "ListManagedKeys", "GET", self._path("managed_keys"), options, ManagedKeyList
        )

    def create_managed_key(self, options: CreateManagedKeyOptions) -> DetailedResponse[ManagedKey]:
        """Create a managed key from a template and distribute it to the template's keystores."""
        return self._invoke(
            "CreateManagedKey", "POST", self._path("managed_keys"), options, ManagedKey
        )

    def get_managed_key(self, options: GetManagedKeyOptions) -> DetailedResponse[ManagedKey]:
        return self._invoke(
            "GetManagedKey", "GET", self._path("managed_keys", options.id), options, ManagedKey
        )

    def update_managed_key(self, options: UpdateManagedKeyOptions) -> DetailedResponse[ManagedKey]:
        """Update label, dates, tags or description of a managed key."""
        return self._invoke(
            "UpdateManagedKey", "PATCH", self._path("managed_keys", options.id), options, ManagedKey
        )

    def delete_managed_key(self, options: DeleteManagedKeyOptions) -> DetailedResponse[None]:
        """Delete a managed key. Only destroyed keys can be deleted."""
        return self._invoke(
            "DeleteManagedKey", "DELETE", self._path("managed_keys", options.id), options, None
        )

    def get_key_distribution_status_for_keystores(
        self, options: GetKeyDistributionStatusForKeystoresOptions
    ) -> DetailedResponse[StatusInKeystores]:
        """Return the synchronization status of a managed key in each target keystore."""
        return self._invoke(
            "GetKeyDistributionStatusForKeystores",
            "GET",
            self._path("managed_keys", options.id, "status_in_keystores"),
            options,
            StatusInKeystores,
        )

    def update_managed_key_from_template(
        self, options: UpdateManagedKeyFromTemplateOptions
    ) -> DetailedResponse[ManagedKey]:
        """Apply the latest version of the key's template to the managed key."""
        return self._invoke(
            "UpdateManagedKeyFromTemplate",
            "POST",
            self._path("managed_keys", options.id, "update_from_template"),
            options,
            ManagedKey,
        )

    def activate_managed_key(self, options: ActivateManagedKeyOptions) -> DetailedResponse[ManagedKey]:
        """Move a managed key from pre_activation to active."""
        return self._invoke(
            "ActivateManagedKey",
            "POST",
            self._path("managed_keys", options.id, "activate"),
            options,
            ManagedKey,
        )

    def deactivate_managed_key(
        self, options: DeactivateManagedKeyOptions
    ) -> DetailedResponse[ManagedKey]:
        """Move a managed key from active to deactivated."""
        return self._invoke(
            "DeactivateManagedKey",
            "POST",
            self._path("managed_keys", options.id, "deactivate"),
            options,
            ManagedKey,
        )

    def destroy_managed_key(self, options: DestroyManagedKeyOptions) -> DetailedResponse[ManagedKey]:
        """Destroy the key material of a managed key in every keystore."""
        return self._invoke(
            "DestroyManagedKey",
            "POST",
            self._path("managed_keys", options.id, "destroy"),
            options,
            ManagedKey,
        )

    def sync_managed_key(self, options: SyncManagedKeyOptions) -> DetailedResponse[StatusInKeystores]:
        """Re-synchronize a managed key with its target keystores."""
        return self._invoke(
            "SyncManagedKey",
            "POST",
            self._path("managed_keys", options.id, "sync_status_in_keystores"),
            options,
            StatusInKeystores,
        )

    def rotate_managed_key(self, options: RotateManagedKeyOptions) -> DetailedResponse[ManagedKey]:
        """Generate new key material for a managed key."""
        return self._invoke(
            "RotateManagedKey",
            "POST",
            self._path("managed_keys", options.id, "rotate"),
            options,
            ManagedKey,
        )

    def list_associated_resources_for_managed_key(
        self, options: ListAssociatedResourcesForManagedKeyOptions
    ) -> DetailedResponse[AssociatedResourceList]:
        return self._invoke(
            "ListAssociatedResourcesForManagedKey",
            "GET",
            self._path("managed_keys", options.id, "associated_resources"),
            options,
            AssociatedResourceList,
        )

    # Key templates

    def list_key_templates(
        self, options: ListKeyTemplatesOptions | None = None
    ) -> DetailedResponse[TemplateList]:
        options = options or ListKeyTemplatesOptions()
        return self._invoke(
            "ListKeyTemplates", "GET", self._path("templates"), options, TemplateList
        )

    def create_key_template(self, options: CreateKeyTemplateOptions) -> DetailedResponse[Template]:
        return self._invoke("CreateKeyTemplate", "POST", self._path("templates"), options, Template)

    def get_key_template(self, options: GetKeyTemplateOptions) -> DetailedResponse[Template]:
        return self._invoke(
            "GetKeyTemplate", "GET", self._path("templates", options.id), options, Template
        )

    def update_key_template(self, options: UpdateKeyTemplateOptions) -> DetailedResponse[Template]:
        """Update a template; the service increments its version."""
        return self._invoke(
            "UpdateKeyTemplate", "PATCH", self._path("templates", options.id), options, Template
        )

    def delete_key_template(self, options: DeleteKeyTemplateOptions) -> DetailedResponse[None]:
        return self._invoke(
            "DeleteKeyTemplate", "DELETE", self._path("templates", options.id), options, None
        )

    def archive_key_template(self, options: ArchiveKeyTemplateOptions) -> DetailedResponse[Template]:
        """Archive a template so no new keys can be created from it."""
        return self._invoke(
            "ArchiveKeyTemplate",
            "POST",
            self._path("templates", options.id, "archive"),
            options,
            Template,
        )

    def unarchive_key_template(
        self, options: UnarchiveKeyTemplateOptions
    ) -> DetailedResponse[Template]:
        return self._invoke(
            "UnarchiveKeyTemplate",
            "POST",
            self._path("templates", options.id, "unarchive"),
            options,
            Template,
        )

    # Keystores

    def list_keystores(
        self, options: ListKeystoresOptions | None = None
    ) -> DetailedResponse[KeystoreList]:
        """List keystores.

        Items carry the shared keystore fields; use ``refine_keystore`` to get
        the vendor variant of an item.
        """
        options = options or ListKeystoresOptions()
        return self._invoke("ListKeystores", "GET", self._path("keystores"), options, KeystoreList)

    def create_keystore(self, options: CreateKeystoreOptions) -> DetailedResponse[Keystore]:
        """Create an internal keystore or connect an external one."""
        return self._invoke(
            "CreateKeystore", "POST", self._path("keystores"), options, decode_keystore
        )

    def get_keystore(self, options: GetKeystoreOptions) -> DetailedResponse[Keystore]:
        return self._invoke(
            "GetKeystore", "GET", self._path("keystores", options.id), options, decode_keystore
        )

    def update_keystore(self, options: UpdateKeystoreOptions) -> DetailedResponse[Keystore]:
        return self._invoke(
            "UpdateKeystore", "PATCH", self._path("keystores", options.id), options, decode_keystore
        )

    def delete_keystore(self, options: DeleteKeystoreOptions) -> DetailedResponse[None]:
        return self._invoke(
            "DeleteKeystore", "DELETE", self._path("keystores", options.id), options, None
        )

    def get_keystore_status(self, options: GetKeystoreStatusOptions) -> DetailedResponse[KeystoreStatus]:
        """Return the health of the connection to a keystore."""
        return self._invoke(
            "GetKeystoreStatus",
            "GET",
            self._path("keystores", options.id, "status"),
            options,
            KeystoreStatus,
        )

    def list_managed_keys_from_keystore(
        self, options: ListManagedKeysFromKeystoreOptions
    ) -> DetailedResponse[ManagedKeyList]:
        """List the managed keys distributed to a keystore."""
        return self._invoke(
            "ListManagedKeysFromKeystore",
            "GET",
            self._path("keystores", options.id, "managed_keys"),
            options,
            ManagedKeyList,
        )

    def list_associated_resources_for_target_keystore(
        self, options: ListAssociatedResourcesForTargetKeystoreOptions
    ) -> DetailedResponse[AssociatedResourceList]:
        return self._invoke(
            "ListAssociatedResourcesForTargetKeystore",
            "GET",
            self._path("keystores", options.id, "associated_resources"),
            options,
            AssociatedResourceList,
        )

    # Vaults

    def list_vaults(self, options: ListVaultsOptions | None = None) -> DetailedResponse[VaultList]:
        options = options or ListVaultsOptions()
        return self._invoke("ListVaults", "GET", self._path("vaults"), options, VaultList)

    def create_vault(self, options: CreateVaultOptions) -> DetailedResponse[Vault]:
        return self._invoke("CreateVault", "POST", self._path("vaults"), options, Vault)

    def get_vault(self, options: GetVaultOptions) -> DetailedResponse[Vault]:
        return self._invoke("GetVault", "GET", self._path("vaults", options.id), options, Vault)

    def update_vault(self, options: UpdateVaultOptions) -> DetailedResponse[Vault]:
        return self._invoke("UpdateVault", "PATCH", self._path("vaults", options.id), options, Vault)

    def delete_vault(self, options: DeleteVaultOptions) -> DetailedResponse[None]:
        """Delete a vault. The vault must not contain keys, keystores or templates."""
        return self._invoke("DeleteVault", "DELETE", self._path("vaults", options.id), options, None)

    # Associated resources

    def list_associated_resources(
        self, options: ListAssociatedResourcesOptions | None = None
    ) -> DetailedResponse[AssociatedResourceList]:
        options = options or ListAssociatedResourcesOptions()
        return self._invoke(
            "ListAssociatedResources",
            "GET",
            self._path("associated_resources"),
            options,
            AssociatedResourceList,
        )

    def get_associated_resource(
        self, options: GetAssociatedResourceOptions
    ) -> DetailedResponse[AssociatedResource]:
        return self._invoke(
            "GetAssociatedResource",
            "GET",
            self._path("associated_resources", options.id),
            options,
            AssociatedResource,
        )

    # Pagers

    def managed_keys_pager(
        self, options: ListManagedKeysOptions | None = None
    ) -> Pager[ListManagedKeysOptions, ManagedKey]:
        return self._pager(self.list_managed_keys, options or ListManagedKeysOptions())

    def key_templates_pager(
        self, options: ListKeyTemplatesOptions | None = None
    ) -> Pager[ListKeyTemplatesOptions, Template]:
        return self._pager(self.list_key_templates, options or ListKeyTemplatesOptions())

    def keystores_pager(
        self, options: ListKeystoresOptions | None = None
    ) -> Pager[ListKeystoresOptions, Keystore]:
        return self._pager(self.list_keystores, options or ListKeystoresOptions())

    def managed_keys_from_keystore_pager(
        self, options: ListManagedKeysFromKeystoreOptions
    ) -> Pager[ListManagedKeysFromKeystoreOptions, ManagedKey]:
        return self._pager(self.list_managed_keys_from_keystore, options)

    def vaults_pager(self, options: ListVaultsOptions | None = None) -> Pager[ListVaultsOptions, Vault]:
        return self._pager(self.list_vaults, options or ListVaultsOptions())

    def associated_resources_pager(
        self, options: ListAssociatedResourcesOptions | None = None
    ) -> Pager[ListAssociatedResourcesOptions, AssociatedResource]:
        return self._pager(self.list_associated_resources, options or ListAssociatedResourcesOptions())

    def associated_resources_for_managed_key_pager(
        self, options: ListAssociatedResourcesForManagedKeyOptions
    ) -> Pager[ListAssociatedResourcesForManagedKeyOptions, AssociatedResource]:
        return self._pager(self.list_associated_resources_for_managed_key, options)

    def associated_resources_for_target_keystore_pager(
        self, options: ListAssociatedResourcesForTargetKeystoreOptions
    ) -> Pager[ListAssociatedResourcesForTargetKeystoreOptions, AssociatedResource]:
        return self._pager(self.list_associated_resources_for_target_keystore, options)

    # Internals

    def _pager(self, operation: Callable[[Any], DetailedResponse[Any]], options: Any) -> Pager[Any, Any]:
        return Pager(operation, options, observability_manager=self._observability_manager)

    def _path(self, collection: str, resource_id: str | None = None, action: str | None = None) -> str:
        path = f"{self.API_PREFIX}/{collection}"
        if resource_id is not None:
            path = f"{path}/{validate_path_param(resource_id, 'id')}"
        if action is not None:
            path = f"{path}/{action}"
        return path

    def _invoke(
        self,
        operation_id: str,
        method: str,
        path: str,
        options: BaseOptions,
        decoder: type[Any] | Callable[[Any], ResultT] | None,
    ) -> DetailedResponse[Any]:
        request = ApiRequest(
            method=method,
            path=path,
            operation_id=operation_id,
            headers=options.request_headers(),
            params=options.query_params(),
            body=options.request_body(),
        )
        response = self._transport.send(request)

        result: Any = None
        if decoder is not None:
            result = self._decode(response, decoder)

        return DetailedResponse(
            result=result,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    @staticmethod
    def _decode(response: httpx.Response, decoder: type[Any] | Callable[[Any], Any]) -> Any:
        try:
            data = response.json()
        except ValueError as e:
            raise FieldDecodeError(ROOT_FIELD, "response body is not valid JSON") from e

        if isinstance(decoder, type):
            return decode_model(decoder, data)
        return decoder(data)

    def _http_transport(self) -> HttpxTransport:
        if not isinstance(self._transport, HttpxTransport):
            raise TypeError(
                f"{type(self._transport).__name__} does not support this setting; "
                "configure the custom transport directly"
            )
        return self._transport
