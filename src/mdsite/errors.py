"""Error taxonomy.

Every failure that crosses a module boundary is an ``MdSiteError`` carrying an
``ErrorCode``. The HTTP layer maps codes to status codes; nothing else needs
to know which exception a collaborator raised underneath.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_KEY = "INVALID_KEY"
    INVALID_PATH = "INVALID_PATH"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    FETCH_TIMEOUT = "FETCH_TIMEOUT"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"


class MdSiteError(Exception):
    """Single exception type raised by mdsite components."""

    def __init__(self, code: ErrorCode, message: str, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def __repr__(self) -> str:
        return (
            f"MdSiteError(code={self.code.value!r}, message={self.message!r}, "
            f"recoverable={self.recoverable})"
        )
