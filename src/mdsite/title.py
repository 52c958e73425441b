"""Page title extraction from rendered HTML."""

from __future__ import annotations

import structlog
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString

log = structlog.get_logger()


def extract_title(html: str, tag: str = "h1") -> str | None:
    """Return the text of the first ``tag`` element in ``html``, or None.

    Only a direct text child of the heading counts; markup nested inside the
    heading is not unwrapped. Parsing problems yield None instead of raising.
    """
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception:
        log.debug("title_parse_failed", exc_info=True)
        return None

    # find() walks the tree in document order, which is a pre-order DFS
    heading = soup.find(tag)
    if heading is None:
        return None

    for child in heading.children:
        # Comments, CDATA and doctypes are PreformattedString subclasses
        if isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            text = child.strip()
            if text:
                return text
    return None
