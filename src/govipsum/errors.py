from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    FEED_FETCH_FAILED = "FEED_FETCH_FAILED"
    FEED_PARSE_FAILED = "FEED_PARSE_FAILED"
    FALLBACK_UNAVAILABLE = "FALLBACK_UNAVAILABLE"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    HTML_PARSE_FAILED = "HTML_PARSE_FAILED"


class GovIpsumError(Exception):
    """Raised for all expected failure conditions in the refresh pipeline.

    Feed errors are caught by the feed fetcher and replaced by the bundled
    fallback. Per-entry errors are caught by the extractor, which skips the
    entry. ``FALLBACK_UNAVAILABLE`` is the only code meant to escape.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

