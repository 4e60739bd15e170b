"""Logging setup for Sharkbait.

Library modules only create loggers with ``logging.getLogger(__name__)``;
handlers are attached here, once, by the application that embeds the core.
"""

from __future__ import annotations

import logging

from rich.logging import RichHandler

from sharkbait.config.models import LoggingConfig
from sharkbait.utils.security import sanitize_for_logging

__all__ = ["LOGGER_NAME", "RedactingFilter", "configure_logging"]

LOGGER_NAME = "sharkbait"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class RedactingFilter(logging.Filter):
    """Logging filter that strips secrets from formatted messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        sanitized = sanitize_for_logging(message)
        if sanitized != message:
            record.msg = sanitized
            record.args = None
        return True


def configure_logging(config: LoggingConfig | None = None) -> logging.Logger:
    """Configure the ``sharkbait`` logger from a LoggingConfig.

    Replaces handlers previously installed by this function, so calling it
    again with a new config is safe.

    Args:
        config: Logging settings (defaults used if None)

    Returns:
        The configured package logger.
    """
    config = config or LoggingConfig()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(config.level)

    for handler in list(logger.handlers):
        if getattr(handler, "_sharkbait_handler", False):
            logger.removeHandler(handler)
            handler.close()

    handlers: list[logging.Handler] = []
    if config.rich:
        handlers.append(RichHandler(rich_tracebacks=True, show_path=False))
    else:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(stream_handler)

    if config.file is not None:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(config.file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handlers.append(file_handler)

    for handler in handlers:
        handler._sharkbait_handler = True  # type: ignore[attr-defined]
        if config.redact:
            handler.addFilter(RedactingFilter())
        logger.addHandler(handler)

    logger.debug(f"Logging configured at level {config.level}")
    return logger
