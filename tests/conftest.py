"""Shared fixtures: an in-memory content source and a controllable clock."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta

import pytest

from mdsite.errors import ErrorCode, MdSiteError


class FakeSource:
    """Content source backed by a dict of ``path -> html``.

    ``fail`` makes every fetch raise; ``gates`` holds a fetch for a path until
    its event is set.
    """

    def __init__(self, pages: dict[str, str] | None = None) -> None:
        self.pages = dict(pages or {})
        self.calls: list[str] = []
        self.fail: MdSiteError | None = None
        self.gates: dict[str, asyncio.Event] = {}

    async def fetch(self, path: str) -> str:
        self.calls.append(path)
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        if self.fail is not None:
            raise self.fail
        try:
            return self.pages[path]
        except KeyError:
            raise MdSiteError(ErrorCode.PAGE_NOT_FOUND, f"No such page: {path}") from None


class FakeClock:
    """Wall clock plus a monotonic timer that move together unless told not to."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=UTC)
        self.elapsed = 0.0

    def __call__(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.elapsed

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)
        self.elapsed += seconds

    def step_wall_clock(self, seconds: float) -> None:
        """Move only the wall clock, like an NTP step or a manual change."""
        self.now += timedelta(seconds=seconds)


@pytest.fixture()
def source() -> FakeSource:
    return FakeSource(
        {
            "/hello.md": "<h1>Hello</h1><p>First post.</p>",
            "/projects.md": "<ul><li>mdsite</li></ul>",
            "/contact.md": "<p>mail@example.com</p>",
        }
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()
