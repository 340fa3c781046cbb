"""Tests for list envelopes and next-link offset extraction."""

import pytest

from keyorchestrator.domain.models.associated_resource import AssociatedResourceList
from keyorchestrator.domain.models.collection import extract_offset_from_href
from keyorchestrator.domain.models.errors import MalformedNextLinkError
from keyorchestrator.domain.models.managed_key import ManagedKeyList
from keyorchestrator.domain.models.template import TemplateList
from keyorchestrator.domain.models.vault import VaultList


class TestExtractOffsetFromHref:
    """Tests for extract_offset_from_href."""

    @pytest.mark.parametrize(
        ("href", "expected"),
        [
            ("https://host/api/v4/vaults?offset=42&limit=10", 42),
            ("https://host/api/v4/vaults?limit=10&offset=0", 0),
            ("/api/v4/managed_keys?offset=300", 300),
            ("https://host:8081/api/v4/keystores?vault.id=a,b&offset=7", 7),
        ],
    )
    def test_extracts_offset(self, href: str, expected: int) -> None:
        """Test that the offset is read from absolute and relative links."""
        assert extract_offset_from_href(href) == expected

    @pytest.mark.parametrize("href", [None, "", "https://host/api/v4/vaults?limit=10"])
    def test_absent_offset(self, href: str | None) -> None:
        """Test that missing links or parameters yield None."""
        assert extract_offset_from_href(href) is None

    @pytest.mark.parametrize("raw", ["abc", "1.5", ""])
    def test_non_integer_offset(self, raw: str) -> None:
        """Test that a non-integer offset raises MalformedNextLinkError."""
        href = f"https://host/api/v4/vaults?offset={raw}"
        with pytest.raises(MalformedNextLinkError) as exc_info:
            extract_offset_from_href(href)
        assert exc_info.value.href == href
        assert exc_info.value.value == raw


class TestPagedCollection:
    """Tests for the list envelope models."""

    def test_items_follow_resource_key(self) -> None:
        """Test that each envelope exposes its resource-specific array as items."""
        assert VaultList.model_validate({"vaults": [{"id": "v"}]}).items[0].id == "v"
        assert ManagedKeyList.model_validate({"managed_keys": [{"id": "k"}]}).items[0].id == "k"
        assert TemplateList.model_validate({"templates": [{"id": "t"}]}).items[0].id == "t"
        assert (
            AssociatedResourceList.model_validate({"associated_resources": [{"id": "r"}]})
            .items[0]
            .id
            == "r"
        )

    def test_next_offset(self) -> None:
        """Test that next_offset reads the next link."""
        page = VaultList.model_validate(
            {
                "vaults": [],
                "total_count": 30,
                "limit": 10,
                "offset": 0,
                "next": {"href": "https://host/api/v4/vaults?limit=10&offset=10"},
            }
        )
        assert page.has_next_link() is True
        assert page.next_offset() == 10

    def test_last_page(self) -> None:
        """Test that a page without next is the last one."""
        page = VaultList.model_validate({"vaults": [], "next": None})
        assert page.has_next_link() is False
        assert page.next_offset() is None

    def test_missing_items_default_empty(self) -> None:
        """Test that a missing items array decodes to an empty list."""
        assert VaultList.model_validate({"total_count": 0}).items == []
