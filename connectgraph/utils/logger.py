"""
Logging configuration using Loguru.

Standard-library loggers (uvicorn, aiosqlite) are routed into Loguru so the
server writes one consistent stream.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "aiosqlite")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to Loguru, keeping the caller's location."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
    intercept_stdlib: bool = True,
) -> None:
    """
    Configure Loguru sinks.

    Args:
        level: Minimum level for every sink
        log_to_file: Add a rotating file sink under log_dir
        log_dir: Directory for log files
        file_rotation: Loguru rotation rule for the file sink
        file_retention: Loguru retention rule for the file sink
        compression: Compression applied to rotated files
        serialize: Write the file sink as JSON lines
        intercept_stdlib: Route uvicorn/aiosqlite stdlib logging into Loguru
    """
    logger.remove()

    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True, serialize=False)

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "connectgraph_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )

    if intercept_stdlib:
        handler = InterceptHandler()
        for name in INTERCEPTED_LOGGERS:
            std_logger = logging.getLogger(name)
            std_logger.handlers = [handler]
            std_logger.propagate = False


def get_logger(name: str):
    """Get a logger instance for a module."""
    return logger.bind(module=name)
