"""Unit tests for mdsite.logging_config."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from mdsite.config import LoggingSettings
from mdsite.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestSetupLogging:
    def test_json_format_uses_json_renderer(self) -> None:
        setup_logging(LoggingSettings(format="json"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_text_format_uses_console_renderer(self) -> None:
        setup_logging(LoggingSettings(format="text"))
        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_level_filters_lower_levels(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(LoggingSettings(level="WARNING", format="json"))
        logger = structlog.get_logger("level-test")
        logger.info("quiet_event")
        logger.warning("loud_event", key="value")

        err = capsys.readouterr().err
        assert "quiet_event" not in err
        assert '"event": "loud_event"' in err
        assert '"level": "warning"' in err
