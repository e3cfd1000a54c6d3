"""Configuration loaded from the environment."""

from .task_config import TaskConfig, get_config, reset_config

__all__ = ["TaskConfig", "get_config", "reset_config"]
