"""Tests for Pager."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from fixtures.test_data import page_payload, vault_payload
from keyorchestrator.domain.components.pager import Pager
from keyorchestrator.domain.models.errors import (
    ErrorCategory,
    InvalidPagerStateError,
    KeyOrchestratorError,
    MalformedNextLinkError,
    NoMoreResultsError,
    TransportError,
)
from keyorchestrator.domain.models.http import DetailedResponse
from keyorchestrator.domain.models.options import ListVaultsOptions
from keyorchestrator.domain.models.vault import Vault, VaultList

VAULTS_PATH = "/api/v4/vaults"


def _vaults(*names: str) -> list[dict[str, Any]]:
    return [vault_payload(id=f"id-{name}", name=name) for name in names]


class FakeListOperation:
    """List operation replaying prepared pages and recording the offsets it was called with."""

    def __init__(self, pages: list[dict[str, Any] | Exception]) -> None:
        self._pages = list(pages)
        self.offsets: list[int | None] = []
        self.options: list[ListVaultsOptions] = []

    def __call__(self, options: ListVaultsOptions) -> DetailedResponse[VaultList]:
        self.offsets.append(options.offset)
        self.options.append(options)
        page = self._pages.pop(0)
        if isinstance(page, Exception):
            raise page
        return DetailedResponse(result=VaultList.model_validate(page), status_code=200)


def _three_pages() -> list[dict[str, Any] | Exception]:
    return [
        page_payload("vaults", _vaults("a", "b"), VAULTS_PATH, total_count=5, next_offset=10),
        page_payload("vaults", _vaults("c", "d"), VAULTS_PATH, offset=10, total_count=5, next_offset=20),
        page_payload("vaults", _vaults("e"), VAULTS_PATH, offset=20, total_count=5),
    ]


class TestPagerConstruction:
    """Tests for Pager construction."""

    def test_rejects_non_zero_offset(self) -> None:
        """Test that pagination must start at the beginning."""
        with pytest.raises(InvalidPagerStateError, match="offset 0"):
            Pager(FakeListOperation([]), ListVaultsOptions(offset=5))

    def test_accepts_zero_offset(self) -> None:
        """Test that an explicit offset of 0 is allowed."""
        pager = Pager(FakeListOperation([]), ListVaultsOptions(offset=0))
        assert pager.has_next() is True

    def test_copies_options(self) -> None:
        """Test that later changes to the caller's options do not leak into the walk."""
        options = ListVaultsOptions(limit=2, name="payments")
        operation = FakeListOperation(_three_pages())
        pager = Pager(operation, options)

        options.limit = 500
        options.name = "other"
        pager.get_next()

        sent = operation.options[0]
        assert sent is not options
        assert sent.limit == 2
        assert sent.name == "payments"


class TestPagerGetNext:
    """Tests for Pager.get_next."""

    def test_first_page_uses_original_options(self) -> None:
        """Test that the first request keeps the caller's offset."""
        operation = FakeListOperation(_three_pages())
        Pager(operation, ListVaultsOptions()).get_next()
        assert operation.offsets == [None]

    def test_follows_offset_from_next_link(self) -> None:
        """Test that the next request uses the offset from the next link."""
        operation = FakeListOperation(
            [
                {
                    "vaults": _vaults("a"),
                    "next": {"href": "https://host/api/v4/vaults?offset=42&limit=10"},
                },
                {"vaults": _vaults("b")},
            ]
        )
        pager = Pager(operation, ListVaultsOptions(limit=10))

        pager.get_next()
        pager.get_next()

        assert operation.offsets == [None, 42]
        assert operation.options[1].limit == 10

    def test_returns_page_items_in_order(self) -> None:
        """Test that items come back in server order."""
        pager = Pager(FakeListOperation(_three_pages()), ListVaultsOptions())
        items = pager.get_next()

        assert all(isinstance(item, Vault) for item in items)
        assert [item.name for item in items] == ["a", "b"]

    def test_malformed_offset(self) -> None:
        """Test that a non-numeric offset fails instead of defaulting to 0."""
        operation = FakeListOperation(
            [{"vaults": _vaults("a"), "next": {"href": "https://host/api/v4/vaults?offset=abc"}}]
        )
        pager = Pager(operation, ListVaultsOptions())

        with pytest.raises(MalformedNextLinkError) as exc_info:
            pager.get_next()
        assert exc_info.value.value == "abc"
        assert "offset=abc" in exc_info.value.href

    def test_next_link_without_offset_ends_walk(self) -> None:
        """Test that a next link lacking offset is treated as the last page."""
        operation = FakeListOperation(
            [{"vaults": _vaults("a"), "next": {"href": "https://host/api/v4/vaults?limit=10"}}]
        )
        pager = Pager(operation, ListVaultsOptions())

        assert [v.name for v in pager.get_next()] == ["a"]
        assert pager.has_next() is False

    def test_no_more_results(self) -> None:
        """Test that get_next after the last page fails without a request."""
        operation = FakeListOperation([{"vaults": _vaults("a")}])
        pager = Pager(operation, ListVaultsOptions())
        pager.get_next()

        assert pager.has_next() is False
        with pytest.raises(NoMoreResultsError):
            pager.get_next()
        assert len(operation.offsets) == 1

    def test_transport_error_propagates(self) -> None:
        """Test that transport failures reach the caller untouched."""
        error = TransportError(category=ErrorCategory.ServerError, message="boom", status_code=500)
        pager = Pager(FakeListOperation([error]), ListVaultsOptions())

        with pytest.raises(TransportError) as exc_info:
            pager.get_next()
        assert exc_info.value is error

    def test_logs_each_page(self) -> None:
        """Test that each fetched page is logged at DEBUG."""
        observability = MagicMock()
        pager = Pager(FakeListOperation(_three_pages()), ListVaultsOptions(), observability)
        pager.get_next()

        observability.log.assert_called_once()
        kwargs = observability.log.call_args.kwargs
        assert kwargs["level"] == "DEBUG"
        assert kwargs["message"] == "page_fetched"
        assert kwargs["context"]["items"] == 2
        assert kwargs["context"]["has_next"] is True


class TestPagerGetAll:
    """Tests for Pager.get_all and iteration."""

    def test_exhausts_three_pages(self) -> None:
        """Test that get_all concatenates every page in order."""
        operation = FakeListOperation(_three_pages())
        pager = Pager(operation, ListVaultsOptions(limit=2))

        vaults = pager.get_all()

        assert [v.name for v in vaults] == ["a", "b", "c", "d", "e"]
        assert operation.offsets == [None, 10, 20]
        assert pager.has_next() is False

    def test_partial_results_on_failure(self) -> None:
        """Test that the items fetched before a failure travel with the error."""
        pages = _three_pages()
        pages[2] = TransportError(category="server_error", message="unavailable", status_code=503)
        pager = Pager(FakeListOperation(pages), ListVaultsOptions())

        with pytest.raises(KeyOrchestratorError) as exc_info:
            pager.get_all()

        assert isinstance(exc_info.value, TransportError)
        assert [v.name for v in exc_info.value.partial_results] == ["a", "b", "c", "d"]

    def test_partial_results_on_malformed_link(self) -> None:
        """Test that pagination errors also carry partial results."""
        pages: list[dict[str, Any] | Exception] = [
            {"vaults": _vaults("a"), "next": {"href": "/api/v4/vaults?offset=1.5"}},
        ]
        pager = Pager(FakeListOperation(pages), ListVaultsOptions())

        with pytest.raises(MalformedNextLinkError) as exc_info:
            pager.get_all()
        assert exc_info.value.partial_results == []

    def test_iterates_lazily(self) -> None:
        """Test that iteration fetches pages only as items are consumed."""
        operation = FakeListOperation(_three_pages())
        iterator = iter(Pager(operation, ListVaultsOptions()))

        assert next(iterator).name == "a"
        assert len(operation.offsets) == 1

        names = ["a"] + [v.name for v in iterator]
        assert names == ["a", "b", "c", "d", "e"]
        assert len(operation.offsets) == 3

    def test_empty_collection(self) -> None:
        """Test that an empty first page ends the walk."""
        pager = Pager(FakeListOperation([{"vaults": [], "total_count": 0}]), ListVaultsOptions())
        assert pager.get_all() == []
        assert pager.has_next() is False
