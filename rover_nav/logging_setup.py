"""
Logging utilities
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logger(level: str = "INFO", log_dir: Optional[str] = None):
    """
    Setup logger with console and optional file output.

    The package disables its own loguru records on import; this re-enables
    them for applications that want the navigation trace.

    Args:
        level: Logging level
        log_dir: Directory for rotating log files (None for console only)
    """
    # Remove default handler
    logger.remove()

    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | "
               "<level>{level: <8}</level> | "
               "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
               "<level>{message}</level>",
        level=level,
        colorize=True
    )

    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "rover_nav_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="7 days",
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
        )

    logger.enable("rover_nav")
    return logger
