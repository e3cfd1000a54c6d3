"""Logging setup and silent mode."""

import logging
from typing import Dict, Optional

from rich.logging import RichHandler

from ..config.task_config import TaskConfig, get_config


# Package loggers live under these top-level names
PACKAGE_LOGGERS = ("src.taskgraph", "src.utils", "taskgraph", "utils")

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_silent_mode = False

# Above CRITICAL: package loggers drop every record, so nothing reaches root
SILENT_LEVEL = logging.CRITICAL + 1

# Package logger levels to restore when silent mode ends
_saved_levels: Dict[str, int] = {}


class SilentModeFilter(logging.Filter):
    """Drop every record while silent mode is on."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not _silent_mode


def enable_silent_mode() -> None:
    """
    Suppress all package log output.

    Applies whether or not configure_logging has run: module loggers inherit
    the raised level, so records never propagate to the root handlers either.
    """
    global _silent_mode
    if not _silent_mode:
        for name in PACKAGE_LOGGERS:
            package_logger = logging.getLogger(name)
            _saved_levels[name] = package_logger.level
            package_logger.setLevel(SILENT_LEVEL)
    _silent_mode = True


def disable_silent_mode() -> None:
    global _silent_mode
    for name, level in _saved_levels.items():
        logging.getLogger(name).setLevel(level)
    _saved_levels.clear()
    _silent_mode = False


def is_silent_mode() -> bool:
    return _silent_mode


def resolve_level(name: str) -> int:
    """Map a configured level name to a logging level (INFO when unknown)."""
    return LEVELS.get(name.lower(), logging.INFO)


def configure_logging(
    config: Optional[TaskConfig] = None,
    verbose: bool = False,
) -> int:
    """
    Configure console logging for the package loggers.

    Args:
        config: Configuration (defaults to get_config())
        verbose: Force DEBUG regardless of configuration

    Returns:
        The level applied
    """
    config = config or get_config()
    level = logging.DEBUG if verbose else resolve_level(config.effective_log_level())

    handler = RichHandler(show_path=False, markup=False)
    handler.addFilter(SilentModeFilter())
    handler.setFormatter(logging.Formatter("%(name)s - %(message)s"))

    for name in PACKAGE_LOGGERS:
        package_logger = logging.getLogger(name)
        if _silent_mode:
            _saved_levels[name] = level
        else:
            package_logger.setLevel(level)
        for existing in list(package_logger.handlers):
            if isinstance(existing, RichHandler):
                package_logger.removeHandler(existing)
        package_logger.addHandler(handler)
        package_logger.propagate = False

    return level
