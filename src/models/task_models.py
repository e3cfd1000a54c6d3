"""Data models for tasks, subtasks and task documents."""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


DependencyId = Union[int, str]


class TaskStatus(str, Enum):
    """Known task statuses. Status fields stay plain strings so others still load."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    DEFERRED = "deferred"
    REVIEW = "review"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    """Task priorities."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ParentContext(BaseModel):
    """Owning task context attached to a subtask found by lookup."""

    id: int = Field(description="Owning task ID")
    title: str = Field(default="", description="Owning task title")
    status: str = Field(default=TaskStatus.PENDING.value, description="Owning task status")


class Subtask(BaseModel):
    """A work item owned by exactly one task."""

    id: int = Field(gt=0, description="ID, unique within the parent task")
    title: str = Field(default="", description="Subtask title")
    description: str = Field(default="")
    status: str = Field(default=TaskStatus.PENDING.value)
    details: str = Field(default="")
    dependencies: List[DependencyId] = Field(
        default_factory=list,
        description="Sibling subtask IDs or dotted parent.subtask IDs",
    )

    # Lookup annotations, recomputed on every find_task_by_id hit
    parent_task: Optional[ParentContext] = Field(default=None, alias="parentTask")
    is_subtask: Optional[bool] = Field(default=None, alias="isSubtask")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        extra = "allow"


class Task(BaseModel):
    """A top-level work item."""

    id: int = Field(gt=0, description="Unique task ID")
    title: str = Field(default="", description="Task title")
    description: str = Field(default="")
    status: str = Field(default=TaskStatus.PENDING.value)
    priority: str = Field(default=TaskPriority.MEDIUM.value)
    details: str = Field(default="")
    test_strategy: str = Field(default="", alias="testStrategy")
    dependencies: List[DependencyId] = Field(
        default_factory=list, description="Task IDs (or subtask IDs) this depends on"
    )
    subtasks: List[Subtask] = Field(default_factory=list)

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        extra = "allow"

    def get_subtask(self, subtask_id: int) -> Optional[Subtask]:
        """Return the subtask with the given ID, or None."""
        for subtask in self.subtasks:
            if subtask.id == subtask_id:
                return subtask
        return None

    def to_parent_context(self) -> ParentContext:
        """Build the back-reference value for this task's subtasks."""
        return ParentContext(id=self.id, title=self.title, status=self.status)


class TasksDocument(BaseModel):
    """The persisted tasks file: ``{"tasks": [...], "meta": {...}}``."""

    tasks: List[Task] = Field(default_factory=list)
    meta: Optional[Dict[str, Any]] = Field(default=None)

    class Config:
        """Pydantic configuration."""

        extra = "allow"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the file's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)
