"""Integration test fixtures.

Provides a fully wired FastAPI app with real templates on disk and the
in-memory ``FakeSource`` from tests/conftest.py standing in for GitHub.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from mdsite.config import Settings
from mdsite.server import create_app

if TYPE_CHECKING:
    from pathlib import Path

    from tests.conftest import FakeSource

ARTICLE_TEMPLATE = (
    "<html><head><title><!--TITLE--></title></head>"
    "<body><main><!--CONTENT--></main><footer>updated <!--UPDATED--></footer>"
    "<!-- analytics --></body></html>"
)
INDEX_TEMPLATE = (
    "<html><body><section id=projects><!--PROJECTS--></section>"
    "<section id=contact><!--CONTACT--></section></body></html>"
)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    (tmp_path / "template.html").write_text(ARTICLE_TEMPLATE, encoding="utf-8")
    (tmp_path / "index.html").write_text(INDEX_TEMPLATE, encoding="utf-8")
    static = tmp_path / "public"
    static.mkdir()
    (static / "style.css").write_text("body { margin: 0; }", encoding="utf-8")
    return Settings(
        site={
            "article_template": str(tmp_path / "template.html"),
            "index_template": str(tmp_path / "index.html"),
            "static_dir": str(static),
            "default_title": "example.dev",
        },
        cache={"ttl_seconds": 60},
    )


@pytest.fixture()
def client(settings: Settings, source: FakeSource) -> Iterator[TestClient]:
    """TestClient with the app lifespan running."""
    with TestClient(create_app(settings, source=source)) as c:
        yield c
