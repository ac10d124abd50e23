"""Feed and page fetching.

All network I/O goes through one httpx.AsyncClient shared for the life of the
process. The lifespan owns the client; fetchers receive it by constructor
injection.

``FeedFetcher.fetch`` never raises for network or parse problems. Both are
reported as ``GovIpsumError`` internally, logged as distinct events, and
answered by loading the feed snapshot bundled with the package. Feed parsing
runs in a worker thread so the event loop keeps serving other requests.
"""

from __future__ import annotations

import asyncio
import io
from importlib.resources import files
from pathlib import Path
from typing import TYPE_CHECKING, Any

import feedparser
import httpx
import structlog

from govipsum.errors import ErrorCode, GovIpsumError
from govipsum.models.feed import FeedEntry, FeedSource, InlineEntry, LinkedEntry, ParsedFeed

if TYPE_CHECKING:
    from importlib.resources.abc import Traversable

    from govipsum.config import FeedSettings

log = structlog.get_logger()

BUNDLED_FALLBACK = files("govipsum") / "data" / "announcements-fallback.atom"

_FAILURE_EVENTS = {
    ErrorCode.FEED_FETCH_FAILED: "feed_fetch_failed",
    ErrorCode.FEED_PARSE_FAILED: "feed_parse_failed",
}


def build_http_client(settings: FeedSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=True,
        timeout=httpx.Timeout(settings.fetch_timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


async def _get(
    client: httpx.AsyncClient,
    url: str,
    code: ErrorCode,
    deadline: float | None = None,
) -> httpx.Response:
    """GET ``url``, raising GovIpsumError(code) on transport errors and non-2xx.

    ``deadline`` bounds the whole request in seconds. The client timeout only
    bounds each phase (connect, read, ...) separately.
    """
    try:
        response = await asyncio.wait_for(client.get(url), timeout=deadline)
    except TimeoutError as exc:
        raise GovIpsumError(
            code=code,
            message=f"Timed out after {deadline}s fetching {url}",
            recoverable=True,
        ) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise GovIpsumError(
            code=code,
            message=f"Network error fetching {url}: {exc}",
            recoverable=True,
        ) from exc

    if not response.is_success:
        raise GovIpsumError(
            code=code,
            message=f"HTTP {response.status_code} fetching {url}",
            recoverable=True,
        )
    return response


def _entry_from_feedparser(entry: Any) -> FeedEntry | None:
    """Map a feedparser entry onto the inline/linked variant.

    Entries with neither HTML content nor a link carry nothing to extract
    and are dropped.
    """
    link = entry.get("link") or None
    for content in entry.get("content") or []:
        value = content.get("value")
        if value:
            return InlineEntry(html=value, link=link)
    if link:
        return LinkedEntry(link=link)
    return None


def parse_feed(content: bytes, source: FeedSource) -> ParsedFeed:
    """Parse an Atom/RSS document.

    Raises GovIpsumError(FEED_PARSE_FAILED) when the document is not
    recognisable as a feed. A well-formed feed with no entries is valid.
    """
    # BytesIO stops feedparser from treating the payload as a URL or filename
    parsed = feedparser.parse(io.BytesIO(content))

    if not parsed.get("version") or (parsed.get("bozo") and not parsed.entries):
        reason = parsed.get("bozo_exception") or "unrecognised feed format"
        raise GovIpsumError(
            code=ErrorCode.FEED_PARSE_FAILED,
            message=f"Malformed feed: {reason}",
            recoverable=True,
        )

    entries = [e for e in map(_entry_from_feedparser, parsed.entries) if e is not None]
    return ParsedFeed(entries=entries, source=source)


class FeedFetcher:
    """Fetches the announcements feed, falling back to a local snapshot."""

    def __init__(self, client: httpx.AsyncClient, settings: FeedSettings) -> None:
        self._client = client
        self._url = settings.url
        self._deadline = settings.fetch_timeout_seconds
        self._fallback: Path | Traversable = (
            Path(settings.fallback_path).expanduser()
            if settings.fallback_path
            else BUNDLED_FALLBACK
        )

    async def fetch(self) -> ParsedFeed:
        """Return the remote feed, or the fallback snapshot on any failure.

        One attempt per call, no retries. Only raises if the fallback itself
        is unusable.
        """
        try:
            response = await _get(
                self._client, self._url, ErrorCode.FEED_FETCH_FAILED, deadline=self._deadline
            )
            feed = await asyncio.to_thread(parse_feed, response.content, "network")
        except GovIpsumError as exc:
            log.warning(
                _FAILURE_EVENTS.get(exc.code, "feed_fetch_failed"),
                url=self._url,
                code=exc.code,
                message=exc.message,
            )
            feed = await asyncio.to_thread(self.load_fallback)
            log.warning("feed_using_fallback", path=str(self._fallback), entries=len(feed.entries))
            return feed

        log.info("feed_fetched", url=self._url, entries=len(feed.entries))
        return feed

    def load_fallback(self) -> ParsedFeed:
        """Read and parse the fallback snapshot.

        Raises GovIpsumError(FALLBACK_UNAVAILABLE) if the file is missing or
        corrupt. The server calls this at startup so a broken deployment
        fails before serving traffic.
        """
        try:
            content = self._fallback.read_bytes()
            return parse_feed(content, source="fallback")
        except OSError as exc:
            raise GovIpsumError(
                code=ErrorCode.FALLBACK_UNAVAILABLE,
                message=f"Cannot read fallback feed {self._fallback}: {exc}",
            ) from exc
        except GovIpsumError as exc:
            raise GovIpsumError(
                code=ErrorCode.FALLBACK_UNAVAILABLE,
                message=f"Fallback feed {self._fallback} is corrupt: {exc.message}",
            ) from exc


class PageFetcher:
    """Fetches the HTML page behind a linked feed entry."""

    def __init__(self, client: httpx.AsyncClient, deadline: float | None = None) -> None:
        self._client = client
        self._deadline = deadline

    async def fetch(self, url: str) -> str:
        """Return the page body. Raises GovIpsumError(PAGE_FETCH_FAILED)."""
        response = await _get(
            self._client, url, ErrorCode.PAGE_FETCH_FAILED, deadline=self._deadline
        )
        log.debug("page_fetched", url=url, content_length=len(response.text))
        return response.text
