"""Protocol interfaces for swappable components.

The refresh pipeline references these protocols, not the concrete fetchers,
so tests can drive it with in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from govipsum.models.feed import ParsedFeed


class FeedFetcherProtocol(Protocol):
    """Interface for the feed source."""

    async def fetch(self) -> ParsedFeed: ...


class PageFetcherProtocol(Protocol):
    """Interface for fetching the page behind a linked entry."""

    async def fetch(self, url: str) -> str: ...
