"""In-memory fragment cache with a fixed staleness window.

The cache holds one immutable ``CacheSnapshot``. Refreshing builds a whole
new fragment set and then replaces the snapshot in a single assignment, so a
reader sees either the old pair or the new pair, never a mix.

Refreshes are serialised by an ``asyncio.Lock``. Requests that find the
cache stale while a refresh is running wait for it, re-check, and serve the
new set. Only one refresh runs per staleness window.

If a refresh raises and an earlier set exists, the earlier set keeps being
served and is treated as refreshed ``retry_after_seconds`` before it would
have gone stale, so the retry happens after that back-off rather than on
every request. With nothing to fall back on the error propagates.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

import structlog

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = structlog.get_logger()

CacheState = Literal["empty", "fresh", "stale"]


@dataclass(frozen=True)
class CacheSnapshot:
    fragments: frozenset[str] = frozenset()
    last_refreshed: float | None = None  # None until the first refresh


class FragmentCache:
    """Holds the latest fragment set and rebuilds it when stale."""

    def __init__(
        self,
        refresh: Callable[[], Awaitable[frozenset[str]]],
        timeout_seconds: float = 3600,
        retry_after_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._refresh = refresh
        self._timeout = timeout_seconds
        self._retry_after = min(retry_after_seconds, timeout_seconds)
        self._clock = clock
        self._snapshot = CacheSnapshot()
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    def state(self, now: float | None = None) -> CacheState:
        return self._state_of(self._snapshot, self._clock() if now is None else now)

    def _state_of(self, snapshot: CacheSnapshot, now: float) -> CacheState:
        if snapshot.last_refreshed is None:
            return "empty"
        if now - snapshot.last_refreshed >= self._timeout:
            return "stale"
        return "fresh"

    def invalidate(self) -> None:
        """Force the next access to refresh. The current set stays servable."""
        if self._snapshot.last_refreshed is not None:
            self._snapshot = CacheSnapshot(fragments=self._snapshot.fragments, last_refreshed=None)
            log.info("cache_invalidated")

    async def get_or_refresh(self, now: float | None = None) -> frozenset[str]:
        """Return the current fragment set, refreshing first if stale or empty."""
        if now is None:
            now = self._clock()

        snapshot = self._snapshot
        if self._state_of(snapshot, now) == "fresh":
            log.debug("cache_hit", fragments=len(snapshot.fragments))
            return snapshot.fragments

        async with self._lock:
            # Another request may have refreshed while we waited for the lock
            snapshot = self._snapshot
            state = self._state_of(snapshot, now)
            if state == "fresh":
                return snapshot.fragments

            log.info("cache_refreshing", state=state)
            try:
                fragments = await self._refresh()
            except Exception:
                if snapshot.last_refreshed is None and not snapshot.fragments:
                    log.error("cache_refresh_failed", serving="nothing", exc_info=True)
                    raise
                log.error(
                    "cache_refresh_failed",
                    serving="previous",
                    retry_in=self._retry_after,
                    exc_info=True,
                )
                self._snapshot = CacheSnapshot(
                    fragments=snapshot.fragments,
                    last_refreshed=now - self._timeout + self._retry_after,
                )
                return snapshot.fragments

            self._snapshot = CacheSnapshot(fragments=fragments, last_refreshed=now)
            return fragments
