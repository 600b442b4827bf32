"""
Unified output system using Loguru.
Every user-facing message is written to the log file and echoed to the console.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import LoggingConfig, get_data_dir
from .console import safe_print

LEVEL_STYLES = {
    "debug": "cyan",
    "info": None,
    "success": "green",
    "warning": "yellow",
    "error": "red",
}


def get_log_file_path() -> Path:
    """Get the path to the log file."""
    return get_data_dir() / "trackduel.log"


def setup_loguru(
    log_file: Optional[Path] = None,
    level: str = "INFO",
    rotation_mb: int = 10,
    retention: int = 5,
    console_output: bool = False,
) -> None:
    """
    Configure loguru with a rotating file sink.

    Args:
        log_file: Path to log file (default: ~/.local/share/trackduel/trackduel.log)
        level: Minimum level for logging
        rotation_mb: Rotate after this many MB
        retention: Number of rotated files to keep
        console_output: Also log to stderr
    """
    log_file = log_file or get_log_file_path()
    log_file.parent.mkdir(parents=True, exist_ok=True)

    # Remove default handler
    logger.remove()

    logger.add(
        log_file,
        rotation=f"{rotation_mb} MB",
        retention=retention,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} | {message}",
        enqueue=False,
    )

    if console_output:
        logger.add(sys.stderr, level=level.upper(), format="{level}: {message}")

    logger.info(f"Loguru initialized: {log_file} (level={level})")


def setup_from_config(config: LoggingConfig) -> None:
    setup_loguru(
        log_file=Path(config.log_file).expanduser() if config.log_file else None,
        level=config.level,
        rotation_mb=config.rotation_mb,
        retention=config.retention,
        console_output=config.console_output,
    )


def log(message: str, level: str = "info") -> None:
    """
    Unified logging: writes to the log AND prints to the console.

    Use this instead of print() for user-facing messages that should also be logged.

    Args:
        message: User-facing message
        level: Log level (debug, info, success, warning, error)
    """
    log_func = getattr(logger, level)
    log_func(message)

    safe_print(message, LEVEL_STYLES.get(level))
