"""Logging setup for Cartflow.

stdlib logging carries the handlers (stdout, plus a rotating file when a
log directory is given) and structlog renders on top of it. Request-scoped
fields such as the request id are bound through structlog's contextvars so
every engine log line inside a request carries them.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from uuid import uuid4

import structlog

LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

JSON_ENVIRONMENTS = {"production", "staging"}

LOG_FILE_NAME = "cartflow.log"


def current_environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """``LOG_LEVEL`` wins; otherwise the level follows the environment."""
    return os.getenv("LOG_LEVEL", LEVEL_BY_ENVIRONMENT.get(current_environment(), "INFO"))


def setup_stdlib_logging(log_dir: Path | None = None) -> None:
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.handlers.RotatingFileHandler(
                filename=log_dir / LOG_FILE_NAME,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(log_level)
        root_logger.addHandler(handler)

    # Protean logs every UoW commit at INFO
    logging.getLogger("protean").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def setup_structlog(json_output: bool | None = None) -> None:
    if json_output is None:
        json_output = current_environment() in JSON_ENVIRONMENTS

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: Path | None = None, json_output: bool | None = None) -> None:
    """Configure stdlib handlers and the structlog pipeline. Call once at startup."""
    setup_stdlib_logging(log_dir)
    setup_structlog(json_output)


def bind_request_context(request_id: str | None = None, **fields) -> str:
    """Start a fresh logging context for one request and return its id."""
    request_id = request_id or uuid4().hex
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **fields)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
