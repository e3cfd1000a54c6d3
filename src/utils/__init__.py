"""Utility functions and helpers."""

from .logging_utils import (
    configure_logging,
    enable_silent_mode,
    disable_silent_mode,
    is_silent_mode,
)
from .storage import (
    read_json,
    write_json,
    read_complexity_report,
    load_tasks,
    save_tasks,
)

__all__ = [
    # Logging
    "configure_logging",
    "enable_silent_mode",
    "disable_silent_mode",
    "is_silent_mode",
    # Storage
    "read_json",
    "write_json",
    "read_complexity_report",
    "load_tasks",
    "save_tasks",
]
