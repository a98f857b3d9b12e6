"""Logging configuration for the walk-in queue service."""

import logging
import sys

from loguru import logger
from walkin_queue.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# Libraries that log through the standard library and should end up in our sinks
FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "alembic")


class InterceptHandler(logging.Handler):
    """Forward standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logger():
    """Configure the logger for the application."""
    # Remove default handler
    logger.remove()

    # Console handler
    logger.add(
        sys.stdout,
        level=settings.log_level,
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    # File handler
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=settings.log_level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="30 days",
            compression="zip",
        )

    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    return logger


# Initialize logger
logger = setup_logger()
