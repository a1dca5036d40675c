"""
Logging configuration using Loguru.

Pipeline code logs through loggers bound to the Content Item being
processed, so every line of one ingestion carries its ``content_id`` and
``user_id`` in the serialized file sink.
"""

import sys
from pathlib import Path

from loguru import logger

from conceptweave.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{line} - {message}"


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install the console sink and, if enabled, the rotating file sink."""
    config = config or LoggingConfig()
    logger.remove()
    logger.configure(extra={"module": "conceptweave"})

    logger.add(sys.stderr, level=config.level, format=CONSOLE_FORMAT, colorize=True)

    if config.log_to_file:
        log_path = Path(config.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "conceptweave_{time:YYYY-MM-DD}.log",
            level=config.level,
            format=FILE_FORMAT,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression=config.compression,
            serialize=config.serialize,
            enqueue=True,
        )


def get_logger(name: str, **context):
    """
    Get a logger for a module, optionally bound to pipeline context.

    Example:
        get_logger(__name__, content_id=content.id, user_id=content.user_id)
    """
    return logger.bind(module=name, **context)
