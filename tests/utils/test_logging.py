"""Logging setup driven by settings."""

import logging
import logging.handlers
from pathlib import Path

import pytest
import structlog

from storefront.config import get_settings
from storefront.utils.logging import configure_logging, log_level_for


@pytest.fixture()
def logging_settings(monkeypatch):
    def _apply(**values):
        for name, value in values.items():
            monkeypatch.setenv(f"STOREFRONT_{name.upper()}", value)
        get_settings.cache_clear()
        configure_logging()

    yield _apply

    monkeypatch.undo()
    get_settings.cache_clear()
    configure_logging()


class TestLogLevel:
    @pytest.mark.parametrize(
        ("environment", "expected"),
        [("production", "INFO"), ("Staging", "INFO"), ("test", "WARNING"), ("development", "DEBUG")],
    )
    def test_default_per_environment(self, environment, expected):
        assert log_level_for(environment) == expected

    def test_override_wins(self):
        assert log_level_for("production", "debug") == "DEBUG"


class TestConfigureLogging:
    def test_console_only_without_log_dir(self, logging_settings):
        logging_settings(environment="test", log_dir="")

        handlers = logging.getLogger().handlers
        assert any(type(handler) is logging.StreamHandler for handler in handlers)
        assert not any(isinstance(handler, logging.handlers.RotatingFileHandler) for handler in handlers)
        assert logging.getLogger().level == logging.WARNING

    def test_rotating_file_under_log_dir(self, logging_settings, tmp_path):
        logging_settings(environment="test", log_level="info", log_dir=str(tmp_path / "logs"))

        structlog.get_logger("storefront.test").info("rate_recorded", price_per_gram=152.0)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = Path(tmp_path / "logs" / "storefront.log").read_text()
        assert "rate_recorded" in content
        assert "price_per_gram" in content
