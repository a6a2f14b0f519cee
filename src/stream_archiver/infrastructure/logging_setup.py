"""Logging configuration for the command-line entry point."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from stream_archiver.infrastructure.config.models import LoggingConfig

PACKAGE_LOGGER = "stream_archiver"


def console_level(verbosity: int) -> int:
    """Map the CLI verbosity to a console log level."""
    if verbosity >= 3:
        return logging.DEBUG
    if verbosity == 2:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbosity: int, config: LoggingConfig | None = None, console: Console | None = None) -> logging.Logger:
    """
    Configure the package logger with a rich console handler and an optional log file.

    Handlers installed by a previous call are replaced, so the function can be
    called once per command invocation.

    Args:
        verbosity: ``-v`` count minus ``-s`` count
        config: Logging section of the configuration file
        console: Console the handler writes to, stderr by default

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = console_level(verbosity)
    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if config is not None and config.file_path:
        path = Path(config.file_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(config.level)
        file_handler.setFormatter(logging.Formatter(config.format))
        logger.addHandler(file_handler)
        level = min(level, file_handler.level)

    logger.setLevel(level)
    return logger
