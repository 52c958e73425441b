"""HTTP layer and process entry point.

Routes:
  GET /          index template filled with the ``projects`` and ``contact`` pages
  GET /healthz   liveness check
  GET /{name}    article ``/{name}.md`` rendered into the article template
  /static/...    files from ``site.static_dir`` (when the directory exists)

Handlers only translate between HTTP and the page caches. Any ``MdSiteError``
becomes a generic error page; a missing page is a 404, everything else a 500.
"""

from __future__ import annotations

import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from mdsite.cache import PageCache
from mdsite.config import Settings
from mdsite.errors import ErrorCode, MdSiteError
from mdsite.fetcher import GitHubFetcher, build_http_client
from mdsite.logging_config import setup_logging
from mdsite.pages import article_renderer, render_index
from mdsite.state import AppState
from mdsite.template import load_template

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mdsite.fetcher import ContentSource

log = structlog.get_logger()

PAGE_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9_.-]*")


def build_state(
    settings: Settings,
    source: ContentSource,
    article_template: str,
    index_template: str,
) -> AppState:
    ttl = settings.cache.ttl_seconds
    return AppState(
        settings=settings,
        fragments=PageCache(source, ttl, name="fragments"),
        articles=PageCache(
            source,
            ttl,
            render=article_renderer(
                article_template,
                settings.site.default_title,
                settings.site.title_tag,
            ),
            name="articles",
        ),
        index_template=index_template,
    )


def create_app(settings: Settings | None = None, source: ContentSource | None = None) -> FastAPI:
    """Build the FastAPI app. ``source`` overrides the GitHub content source."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        article_template = load_template(settings.site.article_template)
        index_template = load_template(settings.site.index_template)

        if source is not None:
            app.state.mdsite = build_state(settings, source, article_template, index_template)
            yield
            return

        async with build_http_client(settings.github) as client:
            fetcher = GitHubFetcher(client, settings.github)
            app.state.mdsite = build_state(settings, fetcher, article_template, index_template)
            log.info(
                "content_source_ready",
                owner=settings.github.owner,
                repo=settings.github.repo,
                ttl_seconds=settings.cache.ttl_seconds,
            )
            yield

    app = FastAPI(
        title="mdsite",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    static_dir = Path(settings.site.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    else:
        log.info("static_dir_missing", static_dir=str(static_dir))

    @app.exception_handler(MdSiteError)
    async def handle_mdsite_error(request: Request, exc: MdSiteError) -> HTMLResponse:
        log.warning(
            "request_failed",
            path=request.url.path,
            code=exc.code.value,
            message=exc.message,
        )
        if exc.code is ErrorCode.PAGE_NOT_FOUND:
            return HTMLResponse("page not found", status_code=404)
        return HTMLResponse("internal server error", status_code=500)

    @app.get("/healthz")
    async def healthz(request: Request) -> JSONResponse:
        state: AppState = request.app.state.mdsite
        return JSONResponse(
            {
                "status": "ok",
                "cached_pages": len(state.fragments) + len(state.articles),
                "ttl_seconds": state.settings.cache.ttl_seconds,
            }
        )

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        state: AppState = request.app.state.mdsite
        return HTMLResponse(await render_index(state.index_template, state.fragments))

    @app.get("/{name}", response_class=HTMLResponse)
    async def article(name: str, request: Request) -> HTMLResponse:
        if not PAGE_NAME_RE.fullmatch(name):
            return HTMLResponse("page not found", status_code=404)
        state: AppState = request.app.state.mdsite
        return HTMLResponse(await state.articles.get_or_refresh(name))

    return app


def main() -> None:
    """Console entry point: load settings, configure logging, serve."""
    settings = Settings()
    setup_logging(settings.logging)
    log.info("server_starting", host=settings.server.host, port=settings.server.port)
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.logging.level.lower(),
    )


if __name__ == "__main__":
    main()
