"""HTML comment placeholder substitution.

Templates mark substitution points with HTML comments, e.g. ``<!--CONTENT-->``.
``render`` replaces each comment whose inner text exactly matches a key in the
replacement map and leaves every other comment untouched, so ordinary HTML
comments survive rendering.

An opening ``<!--`` without a closing ``-->`` ends the scan: the text from that
``<!--`` onward is dropped from the output. ``load_template`` warns about such
templates when they are read, since the truncation is otherwise silent.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from mdsite.errors import ErrorCode, MdSiteError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = structlog.get_logger()

OPEN = "<!--"
CLOSE = "-->"


def render(template: str, replacements: Mapping[str, str]) -> str:
    """Substitute ``<!--NAME-->`` placeholders found in ``replacements``.

    Names are matched exactly, whitespace included. Unknown placeholders are
    copied verbatim. An unterminated placeholder truncates the output at its
    opening delimiter.
    """
    parts: list[str] = []
    pos = 0
    while (start := template.find(OPEN, pos)) != -1:
        parts.append(template[pos:start])

        end = template.find(CLOSE, start + len(OPEN))
        if end == -1:
            return "".join(parts)

        name = template[start + len(OPEN) : end]
        if name in replacements:
            parts.append(replacements[name])
        else:
            parts.append(template[start : end + len(CLOSE)])

        pos = end + len(CLOSE)

    parts.append(template[pos:])
    return "".join(parts)


def find_unterminated(template: str) -> int | None:
    """Return the offset where ``render`` would truncate ``template``, if any."""
    pos = 0
    while (start := template.find(OPEN, pos)) != -1:
        end = template.find(CLOSE, start + len(OPEN))
        if end == -1:
            return start
        pos = end + len(CLOSE)
    return None


def load_template(path: str | Path) -> str:
    """Read a template file once at startup.

    Raises ``MdSiteError(TEMPLATE_NOT_FOUND)`` if the file cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MdSiteError(
            ErrorCode.TEMPLATE_NOT_FOUND,
            f"Could not read template {str(path)!r}: {exc}",
        ) from exc

    offset = find_unterminated(text)
    if offset is not None:
        log.warning(
            "template_unterminated_placeholder",
            template=str(path),
            offset=offset,
            dropped_chars=len(text) - offset,
        )
    return text
