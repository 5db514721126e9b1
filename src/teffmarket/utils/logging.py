"""Logging for the marketplace.

Standard library handlers do the I/O: stdout always, plus a rotating
``{prefix}.log`` and an errors-only ``{prefix}_error.log`` when a log
directory is configured. structlog renders every event on top of them,
as JSON in production and staging and as colored console lines elsewhere.

Environment variables:
    PROTEAN_ENV / ENV   selects the level table below (default: development)
    LOG_LEVEL           overrides the level outright
    LOG_DIR             overrides the directory for the rotating files
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_JSON_ENVS = ("production", "staging")
_QUIET_LOGGERS = ("asyncio", "httpx", "uvicorn.access")
_ROTATE_BYTES = 10 * 1024 * 1024
_ROTATE_COUNT = 5


def get_environment() -> str:
    return (os.getenv("PROTEAN_ENV") or os.getenv("ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL") or _LEVEL_BY_ENV.get(get_environment(), "INFO")


def _rotating(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path, maxBytes=_ROTATE_BYTES, backupCount=_ROTATE_COUNT, encoding="utf-8"
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(level: str, log_dir: str | None, log_file_prefix: str) -> None:
    """Point the root logger at stdout and, when ``log_dir`` is set, the rotating files."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating(directory / f"{log_file_prefix}.log", level))
        handlers.append(_rotating(directory / f"{log_file_prefix}_error.log", logging.ERROR))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = handlers

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _renderer():
    if get_environment() in _JSON_ENVS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=True,
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=3),
    )


def setup_structlog() -> None:
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            _renderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(
    level: str | None = None,
    log_dir: str | None = "logs",
    log_file_prefix: str = "teffmarket",
) -> None:
    setup_stdlib_logging(
        level=level or get_log_level(),
        log_dir=os.getenv("LOG_DIR", log_dir),
        log_file_prefix=log_file_prefix,
    )
    setup_structlog()


def bind_request_context(**values: Any) -> None:
    """Attach ``values`` (request id, caller id) to every log line until cleared."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
