"""Logging configuration for docklean (stderr console + optional log file)."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | str | None = None,
    max_file_size_mb: int = 10,
    colors: bool = True,
) -> None:
    """Setup logging: console on stderr, plus docklean.log when log_dir is given.

    Console output goes to stderr so that --json output on stdout stays
    machine-readable.

    Args:
        log_level: Log level name (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the log file, or None for console only
        max_file_size_mb: Max file size before truncation (no backup files kept)
        colors: Colorize console output on a TTY
    """
    log_level_num = getattr(logging, log_level.upper(), logging.INFO)

    # Clear any existing handlers to prevent duplicates
    logging.getLogger().handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level_num)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_num)
    root_logger.addHandler(console_handler)

    file_handler: RotatingFileHandler | None = None
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path / "docklean.log",
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=0,  # Don't keep old files, just truncate
            encoding="utf-8",
        )
        file_handler.setLevel(log_level_num)
        root_logger.addHandler(file_handler)

    # Configure structlog to use standard library logging
    from structlog.stdlib import BoundLogger, LoggerFactory, ProcessorFormatter

    renderer = (
        structlog.dev.ConsoleRenderer(colors=colors)
        if sys.stderr.isatty()
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )
    console_handler.setFormatter(ProcessorFormatter(processor=renderer))
    if file_handler is not None:
        file_handler.setFormatter(
            ProcessorFormatter(processor=structlog.processors.JSONRenderer())
        )

    logger = structlog.get_logger("docklean")
    logger.debug(
        "Logging system initialized",
        log_level=log_level,
        log_file=str(Path(log_dir) / "docklean.log") if log_dir is not None else None,
        max_file_size_mb=max_file_size_mb,
    )


def resolve_log_level(default: str, verbose: bool = False, quiet: bool = False) -> str:
    """Map --verbose/--quiet onto a log level."""
    if verbose:
        return "DEBUG"
    if quiet:
        return "WARNING"
    return default


def get_logger() -> Any:
    """Get the docklean application logger."""
    return structlog.get_logger("docklean")
