"""In-memory page cache with a fixed time-to-live.

Each key maps to one immutable ``PageCacheEntry``. A lookup returns the cached
content until ``ttl`` has elapsed since the entry was produced; otherwise it
fetches the page from the content source, runs the cache's render step, and
replaces the entry.

Freshness is measured on a monotonic timer, so wall-clock jumps (NTP steps,
manual clock changes) neither extend nor cut short an entry's lifetime. The
wall-clock ``produced_at``/``expires_at`` on the entry are informational.

Refresh failures propagate to the caller and leave the table untouched, so an
older entry survives for the next attempt. Nothing is ever evicted; staleness
is judged at lookup time. State is lost on restart.

Refreshes of the same key are serialised by a per-key ``asyncio.Lock``.
Callers that queued behind a refresh re-check freshness after acquiring the
lock and reuse the entry it stored, so a burst of requests for one stale page
costs one upstream fetch. Different keys never wait on each other. Locks live
in a ``WeakValueDictionary`` and disappear once no caller holds them.
"""

from __future__ import annotations

import asyncio
import time
import weakref
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, NamedTuple

import structlog

from mdsite.errors import ErrorCode, MdSiteError
from mdsite.models.cache import PageCacheEntry

if TYPE_CHECKING:
    from mdsite.fetcher import ContentSource

log = structlog.get_logger()

# (key, fetched html, produced_at) -> content to store
RenderStep = Callable[[str, str, datetime], str]
Clock = Callable[[], datetime]
Timer = Callable[[], float]


class _Slot(NamedTuple):
    entry: PageCacheEntry
    deadline: float  # Timer reading at which the entry goes stale


def markdown_path(key: str) -> str:
    """Map a page key to its markdown file in the content repository."""
    return f"/{key}.md"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class PageCache:
    """TTL cache of rendered pages, keyed by logical page name."""

    def __init__(
        self,
        source: ContentSource,
        ttl_seconds: float,
        *,
        render: RenderStep | None = None,
        path_for: Callable[[str], str] = markdown_path,
        clock: Clock = _utc_now,
        timer: Timer = time.monotonic,
        name: str = "pages",
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self._source = source
        self._ttl = timedelta(seconds=ttl_seconds)
        self._render = render
        self._path_for = path_for
        self._clock = clock
        self._timer = timer
        self._name = name
        # One slot per key, replaced as a whole
        self._entries: dict[str, _Slot] = {}
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def peek(self, key: str) -> PageCacheEntry | None:
        """Return the current entry for ``key`` without refreshing it."""
        slot = self._entries.get(key)
        return slot.entry if slot is not None else None

    async def get_or_refresh(self, key: str) -> str:
        """Return fresh content for ``key``, refreshing it if missing or stale.

        Raises ``MdSiteError`` if a refresh is needed and the fetch fails.
        """
        return (await self.get_entry(key)).content

    async def get_entry(self, key: str) -> PageCacheEntry:
        """Like ``get_or_refresh`` but returns the whole entry."""
        if not key:
            raise MdSiteError(ErrorCode.INVALID_KEY, "Page key must not be empty")

        entry = self._fresh_entry(key)
        if entry is not None:
            log.debug("cache_hit", cache=self._name, key=key)
            return entry

        # setdefault is atomic on the event loop thread; the local reference
        # keeps the lock alive for as long as this caller needs it
        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            entry = self._fresh_entry(key)
            if entry is not None:
                log.debug("cache_hit", cache=self._name, key=key, coalesced=True)
                return entry
            return await self._refresh(key)

    def _fresh_entry(self, key: str) -> PageCacheEntry | None:
        slot = self._entries.get(key)
        if slot is not None and self._timer() < slot.deadline:
            return slot.entry
        return None

    async def _refresh(self, key: str) -> PageCacheEntry:
        path = self._path_for(key)
        previous = self._entries.get(key)
        try:
            html = await self._source.fetch(path)
        except MdSiteError as exc:
            log.warning(
                "cache_refresh_failed",
                cache=self._name,
                key=key,
                path=path,
                code=exc.code.value,
                has_previous=previous is not None,
            )
            raise

        now = self._timer()
        produced_at = self._clock()
        content = self._render(key, html, produced_at) if self._render else html
        entry = PageCacheEntry(
            key=key,
            path=path,
            content=content,
            produced_at=produced_at,
            expires_at=produced_at + self._ttl,
        )
        self._entries[key] = _Slot(entry, now + self._ttl.total_seconds())
        log.info(
            "cache_refresh",
            cache=self._name,
            key=key,
            path=path,
            size=len(content),
            replaced=previous is not None,
        )
        return entry
