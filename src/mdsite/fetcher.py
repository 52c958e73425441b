"""Content source: rendered markdown from the GitHub contents API.

GitHub renders a markdown file to HTML when the request carries
``Accept: application/vnd.github.html``. Every failure mode (bad path,
not found, HTTP error, timeout, network error) surfaces as ``MdSiteError`` so
the page cache can treat them uniformly as a failed refresh.
"""

from __future__ import annotations

from typing import Protocol

import httpx
import structlog

from mdsite.config import GitHubSettings
from mdsite.errors import ErrorCode, MdSiteError

log = structlog.get_logger()

GITHUB_HTML_MEDIA_TYPE = "application/vnd.github.html"


class ContentSource(Protocol):
    """Anything that can produce rendered HTML for a slash-prefixed path."""

    async def fetch(self, path: str) -> str: ...


def build_http_client(settings: GitHubSettings | None = None) -> httpx.AsyncClient:
    """Create the shared httpx client used for all GitHub requests."""
    settings = settings or GitHubSettings()
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={
            "User-Agent": settings.user_agent,
            "Accept": GITHUB_HTML_MEDIA_TYPE,
        },
        follow_redirects=True,
    )


class GitHubFetcher:
    """Fetch rendered HTML for files in a single GitHub repository."""

    def __init__(self, client: httpx.AsyncClient, settings: GitHubSettings | None = None) -> None:
        self._client = client
        self._settings = settings or GitHubSettings()

    def url_for(self, path: str) -> str:
        s = self._settings
        return f"{s.api_url.rstrip('/')}/repos/{s.owner}/{s.repo}/contents{path}"

    async def fetch(self, path: str) -> str:
        """Return the rendered HTML for ``path`` (which must start with ``/``)."""
        if not path.startswith("/"):
            raise MdSiteError(
                ErrorCode.INVALID_PATH,
                f"Content path must start with '/': {path!r}",
            )

        url = self.url_for(path)
        # Per-request headers win over client defaults, so a plain client works too
        headers = {
            "User-Agent": self._settings.user_agent,
            "Accept": GITHUB_HTML_MEDIA_TYPE,
        }
        try:
            response = await self._client.get(url, headers=headers)
        except httpx.InvalidURL as exc:
            # Not an HTTPError subclass; raised for control characters and the like
            log.warning("page_fetch_failed", url=url, reason="invalid_url")
            raise MdSiteError(
                ErrorCode.INVALID_PATH,
                f"Content path is not a valid URL path: {path!r}",
            ) from exc
        except httpx.TimeoutException as exc:
            log.warning("page_fetch_failed", url=url, reason="timeout")
            raise MdSiteError(
                ErrorCode.FETCH_TIMEOUT,
                f"Timed out fetching {url}",
                recoverable=True,
            ) from exc
        except httpx.HTTPError as exc:
            log.warning("page_fetch_failed", url=url, reason=type(exc).__name__)
            raise MdSiteError(
                ErrorCode.PAGE_FETCH_FAILED,
                f"Network error fetching {url}: {exc}",
                recoverable=True,
            ) from exc

        if response.status_code == 404:
            log.info("page_not_found", url=url)
            raise MdSiteError(
                ErrorCode.PAGE_NOT_FOUND,
                f"No such page: {path}",
                recoverable=False,
            )
        if not response.is_success:
            log.warning("page_fetch_failed", url=url, status_code=response.status_code)
            raise MdSiteError(
                ErrorCode.PAGE_FETCH_FAILED,
                f"GitHub returned HTTP {response.status_code} for {url}",
                recoverable=True,
            )

        log.debug("page_fetched", url=url, size=len(response.text))
        return response.text
