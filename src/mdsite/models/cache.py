from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PageCacheEntry(BaseModel):
    """Rendered content for a single page key."""

    # Entries are replaced as a whole, never mutated in place
    model_config = ConfigDict(frozen=True)

    key: str
    path: str  # Content-source path the entry was fetched from
    content: str  # Fully rendered HTML
    produced_at: datetime
    expires_at: datetime
