from __future__ import annotations

from govipsum.models.feed import FeedEntry, FeedSource, InlineEntry, LinkedEntry, ParsedFeed
from govipsum.models.query import QueryParams

__all__ = [
    # feed
    "FeedEntry",
    "FeedSource",
    "InlineEntry",
    "LinkedEntry",
    "ParsedFeed",
    # query
    "QueryParams",
]
