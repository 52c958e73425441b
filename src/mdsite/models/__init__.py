from __future__ import annotations

from mdsite.models.cache import PageCacheEntry

__all__ = [
    # cache
    "PageCacheEntry",
]
