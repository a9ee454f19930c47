"""Structured logging setup with structlog."""

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog
from rich.console import Console
from rich.logging import RichHandler

_SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]


def _build_handler(format_type: str) -> tuple[logging.Handler, list]:
    """Return the stream handler and renderer chain for an output format."""
    if format_type == "console":
        handler = RichHandler(
            console=Console(stderr=True),
            show_time=False,  # structlog adds timestamp
            show_path=False,
        )
        return handler, _SHARED_PROCESSORS + [structlog.dev.ConsoleRenderer(colors=True)]

    if format_type == "json":
        handler = logging.StreamHandler(sys.stdout)
        return handler, _SHARED_PROCESSORS + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    raise ValueError(f"Unknown log format: {format_type}")


def configure_logging(
    level: str = "INFO",
    format_type: str = "console",
    log_file: Path | None = None
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Output format ("console" for terminals, "json" for log shipping)
        log_file: Optional file path for log output
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(level=log_level, format="%(message)s", handlers=[])

    handler, processors = _build_handler(format_type)
    handler.setLevel(log_level)
    logging.root.addHandler(handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        logging.root.addHandler(file_handler)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


@contextmanager
def ranking_context(**values) -> Iterator[None]:
    """Bind key/value pairs to every log line emitted inside one ranking request."""
    tokens = structlog.contextvars.bind_contextvars(**values)
    try:
        yield
    finally:
        structlog.contextvars.reset_contextvars(**tokens)
