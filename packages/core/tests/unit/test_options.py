"""Tests for operation options and their wire mapping."""

from datetime import date

import pytest
from pydantic import ValidationError

from fixtures.test_data import ETAG, VAULT_ID
from keyorchestrator.domain.models.common import KeyAlgorithm, KeystoreType, Tag
from keyorchestrator.domain.models.errors import UnrecognizedVariantError
from keyorchestrator.domain.models.keystore import (
    KeystoreCreationRequestCca,
    KeystoreUpdateRequestAwsKms,
)
from keyorchestrator.domain.models.managed_key import ManagedKeyState
from keyorchestrator.domain.models.options import (
    CreateKeystoreOptions,
    CreateKeyTemplateOptions,
    CreateManagedKeyOptions,
    CreateVaultOptions,
    GetManagedKeyOptions,
    ListKeystoresOptions,
    ListManagedKeysOptions,
    ListVaultsOptions,
    UpdateKeystoreOptions,
    UpdateManagedKeyOptions,
    UpdateVaultOptions,
)
from keyorchestrator.domain.models.template import KeyPropertiesRequest


class TestQueryParams:
    """Tests for query parameter mapping."""

    def test_unset_filters_omitted(self) -> None:
        """Test that unset filters produce no parameters."""
        assert ListManagedKeysOptions().query_params() == {}

    def test_list_filters_comma_joined(self) -> None:
        """Test that list filters are joined and enums sent by value."""
        options = ListManagedKeysOptions(
            vault_id=[VAULT_ID, "other-vault"],
            algorithm=[KeyAlgorithm.Aes, KeyAlgorithm.Rsa],
            state=[ManagedKeyState.Active, ManagedKeyState.PreActivation],
            label="pay*",
            limit=50,
            offset=0,
        )

        assert options.query_params() == {
            "vault.id": f"{VAULT_ID},other-vault",
            "algorithm": "aes,rsa",
            "state": "active,pre_activation",
            "label": "pay*",
            "limit": 50,
            "offset": 0,
        }

    def test_enum_strings_accepted(self) -> None:
        """Test that enum filters accept their string values."""
        options = ListKeystoresOptions(type=["aws_kms", "cca"])
        assert options.type == [KeystoreType.AwsKms, KeystoreType.Cca]
        assert options.query_params() == {"type": "aws_kms,cca"}

    def test_unknown_enum_filter_rejected(self) -> None:
        """Test that write-side enums are validated."""
        with pytest.raises(ValidationError):
            ListManagedKeysOptions(state=["melted"])

    @pytest.mark.parametrize("limit", [-1, 1001])
    def test_limit_bounds(self, limit: int) -> None:
        """Test that the page size is bounded."""
        with pytest.raises(ValidationError):
            ListVaultsOptions(limit=limit)


class TestHeaders:
    """Tests for header mapping."""

    def test_vault_header(self) -> None:
        """Test that uko_vault travels as the UKO-Vault header."""
        options = GetManagedKeyOptions(uko_vault=VAULT_ID, id="key-1")
        assert options.request_headers() == {"UKO-Vault": VAULT_ID}

    def test_if_match_and_custom_headers(self) -> None:
        """Test that If-Match and caller headers are combined."""
        options = UpdateVaultOptions(
            id=VAULT_ID,
            if_match=ETAG,
            name="renamed",
            headers={"X-Correlation-Id": "abc"},
        )
        assert options.request_headers() == {"If-Match": ETAG, "X-Correlation-Id": "abc"}

    def test_missing_required_header_field(self) -> None:
        """Test that vault-scoped operations require uko_vault."""
        with pytest.raises(ValidationError):
            GetManagedKeyOptions(id="key-1")

    def test_empty_id_rejected(self) -> None:
        """Test that empty resource IDs fail on construction."""
        with pytest.raises(ValidationError):
            GetManagedKeyOptions(uko_vault=VAULT_ID, id="")

    def test_unknown_option_rejected(self) -> None:
        """Test that misspelled options fail instead of being dropped."""
        with pytest.raises(ValidationError):
            ListVaultsOptions(nmae="typo")


class TestRequestBody:
    """Tests for request body mapping."""

    def test_no_body_for_reads(self) -> None:
        """Test that operations without body fields send no body."""
        assert GetManagedKeyOptions(uko_vault=VAULT_ID, id="key-1").request_body() is None

    def test_create_vault_body(self) -> None:
        """Test that unset body fields are omitted."""
        assert CreateVaultOptions(name="payments").request_body() == {"name": "payments"}

    def test_create_managed_key_body(self) -> None:
        """Test that nested models serialize to JSON objects."""
        options = CreateManagedKeyOptions(
            uko_vault=VAULT_ID,
            template_name="aes-template",
            vault={"id": VAULT_ID},
            label="payments-key",
            tags=[Tag(name="team", value="payments")],
        )

        assert options.request_body() == {
            "template_name": "aes-template",
            "vault": {"id": VAULT_ID},
            "label": "payments-key",
            "tags": [{"name": "team", "value": "payments"}],
        }
        assert "UKO-Vault" not in options.request_body()

    def test_update_managed_key_dates(self) -> None:
        """Test that dates are sent in ISO format."""
        options = UpdateManagedKeyOptions(
            uko_vault=VAULT_ID,
            id="key-1",
            if_match=ETAG,
            expiration_date=date(2026, 1, 31),
        )
        assert options.request_body() == {"expiration_date": "2026-01-31"}

    def test_create_template_body(self) -> None:
        """Test that template key properties are validated and serialized."""
        options = CreateKeyTemplateOptions(
            uko_vault=VAULT_ID,
            vault={"id": VAULT_ID},
            name="aes-template",
            key=KeyPropertiesRequest(
                size="256",
                algorithm="aes",
                activation_date="P0D",
                expiration_date="P1Y",
                state="active",
            ),
            keystores=[{"group": "production", "type": "aws_kms"}],
        )

        body = options.request_body()
        assert body is not None
        assert body["key"] == {
            "size": "256",
            "algorithm": "aes",
            "activation_date": "P0D",
            "expiration_date": "P1Y",
            "state": "active",
        }
        assert body["keystores"] == [{"group": "production", "type": "aws_kms"}]

    @pytest.mark.parametrize("period", ["1Y", "P", "P1.5Y", "yearly"])
    def test_invalid_period_rejected(self, period: str) -> None:
        """Test that key periods must be ISO 8601 durations."""
        with pytest.raises(ValidationError):
            KeyPropertiesRequest(
                size="256",
                algorithm="aes",
                activation_date="P0D",
                expiration_date=period,
                state="active",
            )

    def test_template_requires_keystores(self) -> None:
        """Test that a template must target at least one keystore group."""
        with pytest.raises(ValidationError):
            CreateKeyTemplateOptions(
                uko_vault=VAULT_ID,
                vault={"id": VAULT_ID},
                name="aes-template",
                key={
                    "size": "256",
                    "algorithm": "aes",
                    "activation_date": "P0D",
                    "expiration_date": "P1Y",
                    "state": "active",
                },
                keystores=[],
            )


class TestKeystoreBodies:
    """Tests for keystore create and update bodies."""

    def test_create_from_mapping(self) -> None:
        """Test that a mapping body is decoded into its vendor variant."""
        options = CreateKeystoreOptions(
            uko_vault=VAULT_ID,
            keystore_body={
                "type": "cca",
                "vault": {"id": VAULT_ID},
                "name": "cca-prod",
                "cca_host": "zhost.example.com",
                "cca_port": 9000,
            },
        )

        assert isinstance(options.keystore_body, KeystoreCreationRequestCca)
        assert options.request_body() == {
            "type": "cca",
            "vault": {"id": VAULT_ID},
            "name": "cca-prod",
            "cca_host": "zhost.example.com",
            "cca_port": 9000,
        }

    def test_create_from_model(self) -> None:
        """Test that a variant model is used as-is."""
        body = KeystoreCreationRequestCca(
            vault={"id": VAULT_ID}, name="cca-prod", cca_host="zhost", cca_port=443
        )
        options = CreateKeystoreOptions(uko_vault=VAULT_ID, keystore_body=body)
        assert options.keystore_body is body

    def test_create_unknown_vendor(self) -> None:
        """Test that an unknown vendor in a mapping body is rejected."""
        with pytest.raises(UnrecognizedVariantError):
            CreateKeystoreOptions(
                uko_vault=VAULT_ID,
                keystore_body={"type": "tape_drive", "vault": {"id": VAULT_ID}, "name": "x"},
            )

    def test_update_body_omits_type(self) -> None:
        """Test that the update body never carries the vendor tag."""
        options = UpdateKeystoreOptions(
            uko_vault=VAULT_ID,
            id="keystore-1",
            if_match=ETAG,
            keystore_body={"type": "aws_kms", "aws_region": "eu-de"},
        )

        assert isinstance(options.keystore_body, KeystoreUpdateRequestAwsKms)
        assert options.request_body() == {"aws_region": "eu-de"}
        assert options.request_headers() == {"UKO-Vault": VAULT_ID, "If-Match": ETAG}
