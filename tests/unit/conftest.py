"""Unit-specific fixtures (no network, no event loop beyond pytest-asyncio's)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from mdsite.cache import PageCache

if TYPE_CHECKING:
    from tests.conftest import FakeClock, FakeSource

TTL_SECONDS = 60


@pytest.fixture()
def cache(source: FakeSource, clock: FakeClock) -> PageCache:
    """Cache storing fetched HTML as-is, driven by the fake clock."""
    return PageCache(source, TTL_SECONDS, clock=clock, timer=clock.monotonic)
