"""List envelopes and next-link offset extraction."""

from __future__ import annotations

from typing import Any, ClassVar

import httpx
from pydantic import Field

from keyorchestrator.domain.models.common import ApiModel, HrefObject
from keyorchestrator.domain.models.errors import MalformedNextLinkError


def extract_offset_from_href(href: str | None) -> int | None:
    """Extract the ``offset`` query parameter from a pagination link.

    Args:
        href: Absolute or relative URL of a ``next``/``previous`` link.

    Returns:
        The offset as an integer, or None if the link or parameter is absent.

    Raises:
        MalformedNextLinkError: If the parameter is present but not an integer.
    """
    if not href:
        return None

    try:
        params = httpx.URL(href).params
    except httpx.InvalidURL as e:
        raise MalformedNextLinkError(href, href) from e

    raw = params.get("offset")
    if raw is None:
        return None

    try:
        return int(raw)
    except ValueError as e:
        raise MalformedNextLinkError(href, raw) from e


class PagedCollection(ApiModel):
    """Envelope shared by every list response.

    Subclasses declare their item list field and name it in ``ITEMS_FIELD``.
    """

    ITEMS_FIELD: ClassVar[str] = ""

    total_count: int | None = Field(default=None, description="Total number of items", ge=0)
    limit: int | None = Field(default=None, description="Page size", ge=0)
    offset: int | None = Field(default=None, description="Offset of this page", ge=0)
    first: HrefObject | None = Field(default=None, description="Link to the first page")
    last: HrefObject | None = Field(default=None, description="Link to the last page")
    previous: HrefObject | None = Field(default=None, description="Link to the previous page")
    next: HrefObject | None = Field(default=None, description="Link to the next page")

    @property
    def items(self) -> list[Any]:
        """Items carried by this page."""
        return list(getattr(self, self.ITEMS_FIELD) or [])

    def has_next_link(self) -> bool:
        """Whether the envelope links to a further page."""
        return self.next is not None and bool(self.next.href)

    def next_offset(self) -> int | None:
        """Offset of the next page, or None on the last page."""
        if self.next is None:
            return None
        return extract_offset_from_href(self.next.href)
