"""Offset pagination over list operations."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from keyorchestrator.domain.models.collection import PagedCollection
from keyorchestrator.domain.models.errors import (
    InvalidPagerStateError,
    KeyOrchestratorError,
    NoMoreResultsError,
)
from keyorchestrator.domain.models.http import DetailedResponse
from keyorchestrator.domain.models.options import PagedOptions

if TYPE_CHECKING:
    from keyorchestrator.domain.interfaces.observability_manager import ObservabilityManager

OptionsT = TypeVar("OptionsT", bound=PagedOptions)
ItemT = TypeVar("ItemT")


class Pager(Generic[OptionsT, ItemT]):
    """Walks a list operation page by page by following ``next`` links.

    The options are copied at construction, so changing the caller's
    object afterwards has no effect on the walk. A pager is owned by one
    caller; create separate pagers to paginate concurrently.

    Example:
        ```python
        pager = client.managed_keys_pager(ListManagedKeysOptions(limit=50))
        while pager.has_next():
            for key in pager.get_next():
                print(key.label)

        # or, all at once
        keys = client.managed_keys_pager(ListManagedKeysOptions()).get_all()
        ```
    """

    def __init__(
        self,
        operation: Callable[[OptionsT], DetailedResponse[Any]],
        options: OptionsT,
        observability_manager: ObservabilityManager | None = None,
    ) -> None:
        """Initialize Pager.

        Args:
            operation: Bound list operation returning a page envelope.
            options: Options of the first request.
            observability_manager: Optional manager for page logging.

        Raises:
            InvalidPagerStateError: If ``options.offset`` is non-zero.
        """
        if options.offset:
            raise InvalidPagerStateError(
                f"Pagination must start at offset 0, got offset={options.offset}"
            )

        self._operation = operation
        self._options: OptionsT = options.model_copy(deep=True)
        self._observability = observability_manager
        self._has_next = True
        self._next_offset: int | None = None
        self._page_count = 0

    def has_next(self) -> bool:
        """Whether another page can be fetched."""
        return self._has_next

    def get_next(self) -> list[ItemT]:
        """Fetch the next page and return its items.

        Raises:
            NoMoreResultsError: If the last page was already returned.
            MalformedNextLinkError: If the page's ``next`` link has a
                non-integer offset.
            TransportError: If the request fails.
        """
        if not self._has_next:
            raise NoMoreResultsError()

        if self._next_offset is not None:
            self._options.offset = self._next_offset

        response = self._operation(self._options)
        page: PagedCollection = response.result
        next_offset = page.next_offset()

        self._page_count += 1
        self._next_offset = next_offset
        self._has_next = next_offset is not None

        items: list[ItemT] = page.items
        if self._observability is not None:
            self._observability.log(
                level="DEBUG",
                message="page_fetched",
                context={
                    "page": self._page_count,
                    "offset": self._options.offset or 0,
                    "items": len(items),
                    "total_count": page.total_count,
                    "has_next": self._has_next,
                },
            )
        return items

    def get_all(self) -> list[ItemT]:
        """Fetch every remaining page and concatenate their items.

        Raises:
            KeyOrchestratorError: The first error met. Items from the pages
                fetched before it are attached as ``partial_results``.
        """
        results: list[ItemT] = []
        while self.has_next():
            try:
                results.extend(self.get_next())
            except KeyOrchestratorError as e:
                e.partial_results = results
                raise
        return results

    def __iter__(self) -> Iterator[ItemT]:
        """Yield items lazily, fetching pages as needed."""
        while self.has_next():
            yield from self.get_next()
