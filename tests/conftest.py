"""Shared test fixtures for the govipsum test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from govipsum.config import FeedSettings
from govipsum.errors import ErrorCode, GovIpsumError
from govipsum.models.feed import InlineEntry, ParsedFeed

if TYPE_CHECKING:
    from pathlib import Path

FEED_URL = "https://feeds.example.com/announcements.atom"

GOOD_PARAGRAPH = "Hello world this is a test paragraph with enough words to pass the filter."
CONTACT_PARAGRAPH = "Contact us at person@example.com for more."

SCENARIO_FEED = f"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <id>https://feeds.example.com/announcements</id>
  <title>Announcements</title>
  <updated>2026-10-16T12:00:00Z</updated>
  <entry>
    <id>https://feeds.example.com/news/1</id>
    <title>Entry one</title>
    <updated>2026-10-16T12:00:00Z</updated>
    <link rel="alternate" href="https://feeds.example.com/news/1"/>
    <content type="html">&lt;p&gt;{GOOD_PARAGRAPH}&lt;/p&gt;&lt;p&gt;{CONTACT_PARAGRAPH}&lt;/p&gt;</content>
  </entry>
</feed>
"""


class FakeFeedFetcher:
    """Returns a fixed ParsedFeed and counts calls."""

    def __init__(self, feed: ParsedFeed) -> None:
        self.feed = feed
        self.calls = 0

    async def fetch(self) -> ParsedFeed:
        self.calls += 1
        return self.feed


class FakePageFetcher:
    """Serves pages from a dict. Unknown URLs fail like a 404."""

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = pages or {}
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if url not in self.pages:
            raise GovIpsumError(
                code=ErrorCode.PAGE_FETCH_FAILED,
                message=f"HTTP 404 fetching {url}",
                recoverable=True,
            )
        return self.pages[url]


@pytest.fixture()
def scenario_fallback(tmp_path: Path) -> Path:
    """A fallback feed with one entry holding a good and a contact paragraph."""
    path = tmp_path / "fallback.atom"
    path.write_text(SCENARIO_FEED, encoding="utf-8")
    return path


@pytest.fixture()
def feed_settings(scenario_fallback: Path) -> FeedSettings:
    return FeedSettings(url=FEED_URL, fallback_path=str(scenario_fallback))


@pytest.fixture()
def make_feed_fetcher():
    def _make(*entries: InlineEntry, source: str = "network") -> FakeFeedFetcher:
        return FakeFeedFetcher(ParsedFeed(entries=list(entries), source=source))

    return _make


@pytest.fixture()
def page_fetcher() -> FakePageFetcher:
    return FakePageFetcher()
