"""One refresh cycle: fetch the feed, extract paragraphs, apply the filter."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from govipsum.extractor import extract
from govipsum.filters import accept

if TYPE_CHECKING:
    from govipsum.protocols import FeedFetcherProtocol, PageFetcherProtocol

log = structlog.get_logger()


class RefreshPipeline:
    """Builds a complete fragment set. Used as the cache's refresh callable."""

    def __init__(
        self,
        feed_fetcher: FeedFetcherProtocol,
        page_fetcher: PageFetcherProtocol,
        entry_scan_limit: int,
    ) -> None:
        self._feed_fetcher = feed_fetcher
        self._page_fetcher = page_fetcher
        self._entry_scan_limit = entry_scan_limit

    async def __call__(self) -> frozenset[str]:
        feed = await self._feed_fetcher.fetch()
        fragments = await extract(feed.entries, self._entry_scan_limit, self._page_fetcher)
        accepted = frozenset(f for f in fragments if accept(f))

        log.info(
            "refresh_complete",
            source=feed.source,
            entries=min(len(feed.entries), self._entry_scan_limit),
            extracted=len(fragments),
            accepted=len(accepted),
        )
        return accepted
