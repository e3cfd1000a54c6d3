"""Exceptions raised outside the query layer.

Lookups and cycle detection never raise; these cover loading, saving and
scheduling task data.
"""


class TaskGraphError(Exception):
    """Base class for task graph errors."""

    pass


class TaskDataError(TaskGraphError):
    """Raised when a task document cannot be turned into tasks."""

    pass


class DuplicateTaskIdError(TaskDataError):
    """Raised when two tasks, or two subtasks of one task, share an ID."""

    pass


class TaskStorageError(TaskGraphError):
    """Raised when task data cannot be written."""

    pass


class CircularDependencyError(TaskGraphError):
    """Raised when an execution order is requested for a cyclic graph."""

    def __init__(self, message: str, cycle_edges=None):
        super().__init__(message)
        self.cycle_edges = list(cycle_edges or [])
