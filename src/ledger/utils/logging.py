"""Logging for the ledger.

Handlers live on stdlib logging: stdout plus two rotating files, one of which
only receives errors. structlog formats on top of them. Money travels through
the ledger as ``Decimal`` and ids as ``UUID``; both are logged as plain strings
so JSON output keeps exact amounts.
"""

import logging
import logging.handlers
import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any
from uuid import UUID

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVIRONMENTS = ("production", "staging")
_MAX_BYTES = 10 * 1024 * 1024
_BACKUPS = 5


def _environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """LOG_LEVEL if set, else a level derived from the environment name."""
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO"))


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging() -> None:
    level = get_log_level()
    log_dir = Path(os.getenv("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [
        console,
        _rotating_file(log_dir / "lockledger.log", level),
        _rotating_file(log_dir / "lockledger_error.log", logging.ERROR),
    ]

    logging.getLogger("protean").setLevel(logging.WARNING)


def stringify_ledger_values(_, __, event_dict: dict) -> dict:
    """Render Decimal amounts and UUID ids as strings."""
    for key, value in event_dict.items():
        if isinstance(value, (Decimal, UUID)):
            event_dict[key] = str(value)
    return event_dict


def _renderer():
    if _environment() in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=True, max_frames=2),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            stringify_ledger_values,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def log_context(**kwargs: Any):
    """Bind values to every log event emitted inside the block.

    Only the given keys are touched; anything bound by an outer layer is
    restored unchanged when the block exits.
    """
    return structlog.contextvars.bound_contextvars(**kwargs)
