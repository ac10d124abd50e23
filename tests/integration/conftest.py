"""Integration test fixtures.

Provides a Starlette app wired to a real FragmentCache whose refresh returns
a fixed fragment set, plus an httpx client that talks to the app in-process.
"""

from __future__ import annotations

import httpx
import pytest

from govipsum.cache import FragmentCache
from govipsum.config import Settings
from govipsum.server import create_app
from govipsum.state import AppState

FRAGMENTS = frozenset(
    {
        "Local authorities will receive additional funding to protect bus routes.",
        "Woodland creation helps to tackle climate change and reduces flood risk.",
        "Customers can now manage more of their tax affairs online.",
        "Apprenticeships give young people the chance to earn while they learn.",
        "Responses will be read & considered <carefully> before decisions are taken.",
        "A short one.",
        "Another brief fragment.",
    }
)


class StaticRefresh:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self) -> frozenset[str]:
        self.calls += 1
        return FRAGMENTS


@pytest.fixture()
def static_refresh() -> StaticRefresh:
    return StaticRefresh()


@pytest.fixture()
def app_state(static_refresh: StaticRefresh) -> AppState:
    return AppState(settings=Settings(), cache=FragmentCache(static_refresh))


@pytest.fixture()
async def client(app_state: AppState):
    app = create_app(state=app_state)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture()
def fragments() -> frozenset[str]:
    return FRAGMENTS
