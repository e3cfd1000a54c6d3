"""Task dependency core.

Identifier parsing, in-memory task lookup, subtask dependency cycle detection
and repair, and complexity report lookups.
"""

from .identifiers import (
    IdentifierKind,
    TaskIdentifier,
    SubtaskIdentifier,
    parse_identifier,
    format_identifier,
    is_subtask_identifier,
    subtask_identifier,
    normalize_dependency,
)
from .task_repository import (
    TaskLookup,
    TaskRepository,
    lookup_task,
    find_task_by_id,
    task_exists,
)
from .dependency_manager import (
    DependencyManager,
    TraversalContext,
    build_dependency_map,
    find_cycles,
)
from .complexity_lookup import ComplexityIndex, find_task_in_complexity_report
from .exceptions import (
    TaskGraphError,
    TaskDataError,
    DuplicateTaskIdError,
    TaskStorageError,
    CircularDependencyError,
)

__all__ = [
    # Identifiers
    "IdentifierKind",
    "TaskIdentifier",
    "SubtaskIdentifier",
    "parse_identifier",
    "format_identifier",
    "is_subtask_identifier",
    "subtask_identifier",
    "normalize_dependency",
    # Repository
    "TaskLookup",
    "TaskRepository",
    "lookup_task",
    "find_task_by_id",
    "task_exists",
    # Dependency graph
    "DependencyManager",
    "TraversalContext",
    "build_dependency_map",
    "find_cycles",
    # Complexity report
    "ComplexityIndex",
    "find_task_in_complexity_report",
    # Errors
    "TaskGraphError",
    "TaskDataError",
    "DuplicateTaskIdError",
    "TaskStorageError",
    "CircularDependencyError",
]
