"""Task core configuration with environment variable loading."""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv

from ..models.task_models import TaskPriority

# Load environment variables from .env file
load_dotenv()


LOG_LEVELS = ("debug", "info", "warn", "error", "success")


class TaskConfig(BaseModel):
    """Configuration for task loading, logging and defaults."""

    # Logging
    debug: bool = Field(
        default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true",
        description="Enable debug output",
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "info").lower(),
        description="Minimum log level (debug, info, warn, error, success)",
    )

    # Project
    project_name: str = Field(
        default_factory=lambda: os.getenv("PROJECT_NAME", "Task Master"),
        description="Project name written to task metadata",
    )
    project_version: str = Field(
        default_factory=lambda: os.getenv("PROJECT_VERSION", "1.0.0"),
        description="Project version written to task metadata",
    )

    # Task defaults
    default_priority: str = Field(
        default_factory=lambda: os.getenv("DEFAULT_PRIORITY", "medium"),
        description="Priority given to new tasks (low, medium, high)",
    )

    # Files
    tasks_file: str = Field(
        default_factory=lambda: os.getenv("TASKS_FILE", "tasks/tasks.json"),
        description="Path of the tasks document",
    )
    complexity_report_file: str = Field(
        default_factory=lambda: os.getenv(
            "COMPLEXITY_REPORT_FILE",
            "scripts/task-complexity-report.json",
        ),
        description="Path of the complexity report",
    )

    def effective_log_level(self) -> str:
        """Log level after applying the debug flag and falling back on unknown values."""
        if self.debug:
            return "debug"
        if self.log_level not in LOG_LEVELS:
            return "info"
        return self.log_level

    def resolved_priority(self) -> TaskPriority:
        """Configured default priority, or medium when it is not a known priority."""
        try:
            return TaskPriority(self.default_priority.lower())
        except ValueError:
            return TaskPriority.MEDIUM

    def document_meta(self) -> Dict[str, Any]:
        """Project metadata for a task document that has none of its own."""
        return {"projectName": self.project_name, "version": self.project_version}


_config: Optional[TaskConfig] = None


def get_config() -> TaskConfig:
    """
    Get the process-wide configuration, reading the environment on first use.

    Returns:
        TaskConfig instance
    """
    global _config
    if _config is None:
        _config = TaskConfig()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() re-reads the environment."""
    global _config
    _config = None
