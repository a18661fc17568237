"""
Centralized logging configuration for Mixxx Buddy using Loguru.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}"


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "mixxx-buddy.log"


def setup_logging(config: Optional[LoggingConfig] = None) -> Path:
    """
    Configure loguru sinks for the application.

    Args:
        config: Logging settings (defaults used when omitted)

    Returns:
        Path of the log file being written
    """
    config = config or LoggingConfig()
    level = config.level.upper()
    log_file = Path(config.log_file).expanduser() if config.log_file else get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler to avoid duplicate console output
    logger.remove()

    logger.add(
        log_file,
        rotation=config.rotation,
        retention=config.retention,
        level=level,
        format=LOG_FORMAT,
        encoding="utf-8",
        enqueue=False,  # Synchronous writes (thread-safe but blocking)
    )

    if config.console_output:
        logger.add(
            sys.stderr,
            level=level,
            format="<level>{level}</level>: {message}",
        )

    logger.info(
        f"Logging initialized: {log_file} "
        f"(level={level}, rotation={config.rotation}, retention={config.retention})"
    )
    return log_file
