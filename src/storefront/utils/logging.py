"""Logging for the storefront.

structlog renders key/value events through the standard library root logger.
Console output is always on; a rotating file is added when ``log_dir`` is set.
Deployed environments render JSON, everything else the dev console format.
"""

import logging
import logging.handlers
import sys
from pathlib import Path

import structlog

from storefront.config import get_settings

_DEFAULT_LEVELS = {"production": "INFO", "staging": "INFO", "test": "WARNING"}
_DEPLOYED = ("production", "staging")
_QUIET_LIBRARIES = ("urllib3", "protean", "cloudinary")


def log_level_for(environment: str, override: str = "") -> str:
    return (override or _DEFAULT_LEVELS.get(environment.lower(), "DEBUG")).upper()


def _handlers(log_dir: str) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                path / "storefront.log", maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
            )
        )
    return handlers


def configure_logging() -> None:
    settings = get_settings()
    environment = settings.environment.lower()
    level = log_level_for(environment, settings.log_level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = _handlers(settings.log_dir)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer = (
        structlog.processors.JSONRenderer()
        if environment in _DEPLOYED
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=environment != "test",
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
