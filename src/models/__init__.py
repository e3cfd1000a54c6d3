"""Models package for the task dependency core."""

from .task_models import (
    TaskStatus,
    TaskPriority,
    ParentContext,
    Subtask,
    Task,
    TasksDocument,
)
from .complexity_models import (
    ComplexityReportMeta,
    ComplexityAnalysisEntry,
    ComplexityReport,
)
from .dependency_models import (
    DependencyIssue,
    DependencyValidation,
    DependencyFixSummary,
)

__all__ = [
    # Task models
    "TaskStatus",
    "TaskPriority",
    "ParentContext",
    "Subtask",
    "Task",
    "TasksDocument",
    # Complexity report models
    "ComplexityReportMeta",
    "ComplexityAnalysisEntry",
    "ComplexityReport",
    # Dependency models
    "DependencyIssue",
    "DependencyValidation",
    "DependencyFixSummary",
]
