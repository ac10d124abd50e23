"""HTTP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState in the Starlette lifespan
- Route requests to the cache and sampler
- Start uvicorn
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from typing import TYPE_CHECKING

import structlog
import uvicorn
from starlette.applications import Starlette
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from govipsum import __version__
from govipsum.cache import FragmentCache
from govipsum.config import Settings
from govipsum.errors import GovIpsumError
from govipsum.fetcher import FeedFetcher, PageFetcher, build_http_client
from govipsum.models.query import QueryParams
from govipsum.refresh import RefreshPipeline
from govipsum.render import render_page
from govipsum.sampler import sample
from govipsum.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def build_state(settings: Settings) -> AsyncGenerator[AppState, None]:
    """Create and tear down the shared HTTP client, fetchers and cache."""
    http_client = build_http_client(settings.feed)
    feed_fetcher = FeedFetcher(http_client, settings.feed)

    # The fallback is the safety net for every refresh; refuse to start without it
    try:
        fallback = feed_fetcher.load_fallback()
    except GovIpsumError as exc:
        log.error("fallback_unavailable", code=exc.code, message=exc.message)
        await http_client.aclose()
        raise
    log.info("fallback_checked", entries=len(fallback.entries))

    pipeline = RefreshPipeline(
        feed_fetcher,
        PageFetcher(http_client, deadline=settings.feed.fetch_timeout_seconds),
        entry_scan_limit=settings.feed.entry_scan_limit,
    )
    cache = FragmentCache(
        pipeline,
        timeout_seconds=settings.cache.timeout_seconds,
        retry_after_seconds=settings.cache.retry_after_seconds,
    )

    try:
        yield AppState(settings=settings, cache=cache, http_client=http_client)
    finally:
        await http_client.aclose()


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def service_status(request: Request) -> Response:
    """Liveness check. Never touches the cache."""
    now = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    return PlainTextResponse(f"Up and running: {now}")


async def paragraphs(request: Request) -> Response:
    """Serve a random sample of cached paragraphs."""
    state: AppState = request.app.state.govipsum

    raw_paragraphs = request.path_params.get("paragraphs")
    if raw_paragraphs is None:
        raw_paragraphs = request.query_params.get("paragraphs")
    params = QueryParams.from_raw(
        raw_paragraphs,
        request.query_params.get("minimum-word-count"),
        state.settings.query,
    )

    try:
        fragments = await state.cache.get_or_refresh()
    except Exception:
        log.error("request_unexpected_error", path=request.url.path, exc_info=True)
        raise

    selected = sample(fragments, params.num_paragraphs, params.min_words)
    log.info(
        "paragraphs_served",
        requested=params.num_paragraphs,
        min_words=params.min_words,
        served=len(selected),
    )

    if "application/json" in request.headers.get("accept", ""):
        return JSONResponse(
            {
                "paragraphs": selected,
                "num_paragraphs": params.num_paragraphs,
                "min_words": params.min_words,
            }
        )
    return HTMLResponse(render_page(selected, params, state.settings.query.max_paragraphs))


routes = [
    # Must precede the path-parameter route, which would otherwise capture it
    Route("/service-status", service_status, methods=["GET"]),
    Route("/", paragraphs, methods=["GET"]),
    Route("/{paragraphs}", paragraphs, methods=["GET"]),
]


def create_app(settings: Settings | None = None, *, state: AppState | None = None) -> Starlette:
    """Build the Starlette app.

    When ``state`` is given it is used as-is and the lifespan builds nothing.
    Otherwise the lifespan creates the HTTP client, fetchers and cache from
    ``settings`` and closes them on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
        if state is not None:
            yield
            return
        async with build_state(settings or Settings()) as built:
            app.state.govipsum = built
            yield
        log.info("server_stopping")

    app = Starlette(routes=routes, lifespan=lifespan)
    if state is not None:
        app.state.govipsum = state
    return app


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        host=settings.server.host,
        port=settings.server.port,
        feed_url=settings.feed.url,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_config=None,  # Disable uvicorn's default logging; structlog handles it
    )


if __name__ == "__main__":
    main()
