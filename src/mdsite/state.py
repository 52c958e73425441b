from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdsite.cache import PageCache
    from mdsite.config import Settings


@dataclass
class AppState:
    """Everything a request handler needs, built once in the app lifespan."""

    settings: Settings
    # Raw fetched fragments, composed into the index page per request
    fragments: PageCache
    # Articles already rendered into the article template
    articles: PageCache
    index_template: str
