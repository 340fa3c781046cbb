"""
Basic KeyOrchestrator Usage Example

This example demonstrates the fundamental usage of KeyOrchestratorClient:
- Creating a client from UKO_* environment variables
- Creating a vault, a key template and a managed key
- Walking paginated collections
- ETag-guarded updates
- Basic error handling

Prerequisites:
    Install the package from source:
    pip install -e .

    Set credentials:
    export UKO_URL=https://uko.us-south.hs-crypto.appdomain.cloud:8081
    export UKO_APIKEY=<your IAM API key>

Run with: python basic-usage.py
"""

from keyorchestrator import (
    CreateKeyTemplateOptions,
    CreateManagedKeyOptions,
    CreateVaultOptions,
    DeleteVaultOptions,
    ErrorCategory,
    GetVaultOptions,
    KeyOrchestratorClient,
    ListKeystoresOptions,
    ListManagedKeysOptions,
    TransportError,
    UpdateVaultOptions,
    refine_keystore,
)


def main():
    """Main example function demonstrating basic KeyOrchestratorClient usage."""

    print("=" * 80)
    print("KeyOrchestrator Basic Usage Example")
    print("=" * 80)
    print()

    # ============================================================================
    # Step 1: Create the client
    # ============================================================================

    print("Step 1: Creating client from UKO_* environment variables...")
    client = KeyOrchestratorClient()
    client.enable_retries(max_retries=3)
    print(f"✓ Client targets {client.service_url}")
    print()

    with client:
        # ========================================================================
        # Step 2: Create a vault
        # ========================================================================

        print("Step 2: Creating vault...")
        vault = client.create_vault(
            CreateVaultOptions(name="example-vault", description="Created by basic-usage.py")
        ).result
        print(f"✓ Vault created: {vault.id}")
        print()

        # ========================================================================
        # Step 3: Create a template and a managed key
        # ========================================================================

        print("Step 3: Creating key template and managed key...")
        template = client.create_key_template(
            CreateKeyTemplateOptions(
                uko_vault=vault.id,
                vault={"id": vault.id},
                name="example-aes",
                key={
                    "size": "256",
                    "algorithm": "aes",
                    "activation_date": "P0D",
                    "expiration_date": "P1Y",
                    "state": "active",
                },
                keystores=[{"group": "production", "type": "ibm_cloud_kms"}],
            )
        ).result
        print(f"✓ Template created: {template.name} (version {template.version})")

        key = client.create_managed_key(
            CreateManagedKeyOptions(
                uko_vault=vault.id,
                template_name=template.name,
                vault={"id": vault.id},
                label="example-key",
            )
        ).result
        print(f"✓ Managed key created: {key.label} [{key.state}]")
        print()

        # ========================================================================
        # Step 4: Walk collections
        # ========================================================================

        print("Step 4: Listing managed keys and keystores...")
        for managed_key in client.managed_keys_pager(
            ListManagedKeysOptions(vault_id=[vault.id], limit=50)
        ):
            print(f"  - {managed_key.label}: {managed_key.algorithm} {managed_key.state}")

        keystores = client.keystores_pager(ListKeystoresOptions(vault_id=[vault.id])).get_all()
        for keystore in keystores:
            print(f"  - {refine_keystore(keystore)!r}")
        print()

        # ========================================================================
        # Step 5: ETag-guarded update
        # ========================================================================

        print("Step 5: Renaming vault with If-Match...")
        current = client.get_vault(GetVaultOptions(id=vault.id))
        renamed = client.update_vault(
            UpdateVaultOptions(id=vault.id, if_match=current.etag, name="example-vault-renamed")
        ).result
        print(f"✓ Vault renamed to {renamed.name}")
        print()

        # ========================================================================
        # Step 6: Error handling
        # ========================================================================

        print("Step 6: Deleting a non-empty vault...")
        try:
            latest = client.get_vault(GetVaultOptions(id=vault.id))
            client.delete_vault(DeleteVaultOptions(id=vault.id, if_match=latest.etag))
        except TransportError as e:
            if e.category == ErrorCategory.Conflict:
                print(f"✗ Vault still has resources: {e.message}")
            else:
                print(f"✗ Request failed ({e.category.value}): {e.message}")
            if e.trace:
                print(f"  trace: {e.trace}")
        print()

    print("=" * 80)
    print("Example complete")
    print("=" * 80)


if __name__ == "__main__":
    main()
