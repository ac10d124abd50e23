"""Application state container.

AppState is created once at server startup (inside the Starlette lifespan)
and reached from request handlers through ``request.app.state.govipsum``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from govipsum.cache import FragmentCache
    from govipsum.config import Settings


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    cache: FragmentCache
    http_client: httpx.AsyncClient | None = None
