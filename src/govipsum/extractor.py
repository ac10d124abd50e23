"""Paragraph extraction from feed entries.

Inline entries are parsed directly. Linked entries are fetched first, all
of them concurrently. Parsing runs in worker threads. Only ``<p>``
elements contribute text; headings, lists and scripts are ignored. A
failing entry is logged and skipped so one bad link never aborts a refresh.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from bs4 import BeautifulSoup

from govipsum.errors import ErrorCode, GovIpsumError
from govipsum.models.feed import InlineEntry

if TYPE_CHECKING:
    from collections.abc import Sequence

    from govipsum.models.feed import FeedEntry
    from govipsum.protocols import PageFetcherProtocol

log = structlog.get_logger()


def paragraph_texts(html: str) -> list[str]:
    """Trimmed visible text of every non-empty ``<p>`` in ``html``."""
    try:
        # lxml closes an open <p> when the next one starts, as browsers do
        soup = BeautifulSoup(html, "lxml")
    except Exception as exc:
        raise GovIpsumError(
            code=ErrorCode.HTML_PARSE_FAILED,
            message=f"Malformed HTML: {exc}",
            recoverable=True,
        ) from exc

    texts = []
    for p in soup.find_all("p"):
        text = p.get_text().strip()
        if text:
            texts.append(text)
    return texts


async def _extract_entry(entry: FeedEntry, page_fetcher: PageFetcherProtocol) -> list[str]:
    if isinstance(entry, InlineEntry):
        html = entry.html
    else:
        html = await page_fetcher.fetch(entry.link)
    return await asyncio.to_thread(paragraph_texts, html)


async def _extract_or_skip(entry: FeedEntry, page_fetcher: PageFetcherProtocol) -> list[str]:
    try:
        return await _extract_entry(entry, page_fetcher)
    except GovIpsumError as exc:
        log.warning(
            "entry_extraction_failed",
            kind=entry.kind,
            link=entry.link,
            code=exc.code,
            message=exc.message,
        )
        return []


async def extract(
    entries: Sequence[FeedEntry],
    limit: int,
    page_fetcher: PageFetcherProtocol,
) -> list[str]:
    """Extract paragraph fragments from the first ``limit`` entries.

    Returns fragments in entry order. Duplicates are kept; the caller
    collapses them when building the fragment set.
    """
    selected = list(entries[:limit])
    results = await asyncio.gather(*(_extract_or_skip(e, page_fetcher) for e in selected))

    fragments = [text for texts in results for text in texts]
    log.debug("extraction_complete", entries=len(selected), fragments=len(fragments))
    return fragments
