"""Composition of fetched content into the site's two page templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdsite.template import render
from mdsite.title import extract_title

if TYPE_CHECKING:
    from datetime import datetime

    from mdsite.cache import PageCache, RenderStep

INDEX_FRAGMENTS = {"PROJECTS": "projects", "CONTACT": "contact"}


def article_renderer(template: str, default_title: str, title_tag: str = "h1") -> RenderStep:
    """Build the article cache's render step.

    The article's first heading becomes ``TITLE``; pages without one get
    ``default_title``.
    """

    def _render(key: str, html: str, produced_at: datetime) -> str:
        title = extract_title(html, title_tag) or default_title
        return render(
            template,
            {
                "CONTENT": html,
                "TITLE": title,
                "UPDATED": produced_at.isoformat(timespec="seconds"),
            },
        )

    return _render


async def render_index(template: str, fragments: PageCache) -> str:
    """Render the index page from the cached project and contact fragments."""
    replacements = {
        placeholder: await fragments.get_or_refresh(key)
        for placeholder, key in INDEX_FRAGMENTS.items()
    }
    return render(template, replacements)
