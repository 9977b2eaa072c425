"""Logging setup using Loguru."""

import sys
from pathlib import Path

from loguru import logger


def setup_logging(log_file: Path | None = None, level: str = "INFO") -> None:
    """Configure loguru with a rotating file sink and a stderr sink.

    Args:
        log_file: Path to log file (no file sink when None)
        level: Minimum level for the file sink (DEBUG, INFO, WARNING, ERROR)
    """
    # Remove default handler
    logger.remove()

    # Console shows problems only; notices are printed by the notifier
    logger.add(
        sys.stderr,
        level="WARNING",
        format="<red>{time:HH:mm:ss}</red> | <level>{level: <8}</level> | <level>{message}</level>",
        colorize=True,
    )

    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            rotation="10 MB",
            retention=5,  # Keep 5 backup files
            level=level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        )

    logger.debug(f"Logging initialized: {log_file} (level={level})")
