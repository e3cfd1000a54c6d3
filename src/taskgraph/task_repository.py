"""In-memory task repository and identifier lookups."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..config.task_config import TaskConfig, get_config
from ..models.task_models import ParentContext, Subtask, Task, TaskStatus, TasksDocument
from .exceptions import DuplicateTaskIdError, TaskDataError
from .identifiers import SubtaskIdentifier, TaskIdentifier, parse_identifier


logger = logging.getLogger(__name__)

TaskItem = Union[Task, Subtask]


@dataclass(frozen=True)
class TaskLookup:
    """
    Result of a non-mutating lookup.

    ``item`` is a reference into the caller's task list, never a copy.
    ``parent`` is set only when the item is a subtask.
    """

    item: TaskItem
    parent: Optional[ParentContext] = None

    @property
    def is_subtask(self) -> bool:
        return self.parent is not None


def lookup_task(tasks: Any, identifier: Any) -> Optional[TaskLookup]:
    """
    Find a task or subtask without touching it.

    Args:
        tasks: Ordered list of Task objects
        identifier: Task ID, numeric string, or dotted ``parent.child`` string

    Returns:
        TaskLookup pairing the item with its owner context, or None
    """
    if not identifier or not isinstance(tasks, list):
        return None

    parsed = parse_identifier(identifier)
    if parsed is None:
        return None

    if isinstance(parsed, SubtaskIdentifier):
        parent = _find_task(tasks, parsed.parent_id)
        if parent is None or not parent.subtasks:
            return None
        subtask = parent.get_subtask(parsed.subtask_id)
        if subtask is None:
            return None
        return TaskLookup(item=subtask, parent=parent.to_parent_context())

    task = _find_task(tasks, parsed.id)
    if task is None:
        return None
    return TaskLookup(item=task)


def find_task_by_id(tasks: Any, identifier: Any) -> Optional[TaskItem]:
    """
    Find a task or subtask by ID.

    A subtask hit is annotated in place: ``parent_task`` is overwritten with the
    owning task's ``{id, title, status}`` and ``is_subtask`` is set. Callers that
    need their data untouched should use ``lookup_task``.

    Args:
        tasks: Ordered list of Task objects
        identifier: Task ID, numeric string, or dotted ``parent.child`` string

    Returns:
        The Task or Subtask, or None when not found
    """
    found = lookup_task(tasks, identifier)
    if found is None:
        return None

    if found.is_subtask:
        found.item.parent_task = found.parent
        found.item.is_subtask = True

    return found.item


def task_exists(tasks: Any, identifier: Any) -> bool:
    """Check whether ``find_task_by_id`` resolves ``identifier``."""
    return find_task_by_id(tasks, identifier) is not None


def _find_task(tasks: List[Any], task_id: int) -> Optional[Task]:
    for task in tasks:
        if getattr(task, "id", None) == task_id:
            return task
    return None


class TaskRepository:
    """
    Ordered collection of tasks, each owning an ordered list of subtasks.

    PATTERN: Thin owner around a plain list; lookups return references
    GOTCHA: find_task_by_id annotates subtasks it returns
    """

    def __init__(self, tasks: Optional[List[Task]] = None, meta: Optional[Dict[str, Any]] = None):
        """
        Initialize repository.

        Args:
            tasks: Tasks in file order
            meta: Opaque document metadata

        Raises:
            DuplicateTaskIdError: If task or sibling subtask IDs collide
        """
        self.tasks: List[Task] = list(tasks or [])
        self.meta = meta
        self.logger = logging.getLogger(__name__)
        self._check_unique_ids()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskRepository":
        """
        Build a repository from a parsed ``{"tasks": [...], "meta": ...}`` document.

        Raises:
            TaskDataError: If the document does not describe valid tasks
        """
        if not isinstance(data, dict):
            raise TaskDataError(f"Task document must be an object, got {type(data).__name__}")

        try:
            document = TasksDocument.model_validate(data)
        except ValidationError as e:
            raise TaskDataError(f"Invalid task document: {e}") from e

        return cls(tasks=document.tasks, meta=document.meta)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize back to the document shape."""
        return TasksDocument(tasks=self.tasks, meta=self.meta).to_dict()

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    def get_task(self, task_id: int) -> Optional[Task]:
        """Get a top-level task by integer ID."""
        return _find_task(self.tasks, task_id)

    def find_task_by_id(self, identifier: Any) -> Optional[TaskItem]:
        return find_task_by_id(self.tasks, identifier)

    def lookup(self, identifier: Any) -> Optional[TaskLookup]:
        return lookup_task(self.tasks, identifier)

    def task_exists(self, identifier: Any) -> bool:
        return task_exists(self.tasks, identifier)

    def next_task_id(self) -> int:
        """ID for a newly appended task."""
        return max((task.id for task in self.tasks), default=0) + 1

    def next_subtask_id(self, task_id: int) -> Optional[int]:
        """ID for a new subtask of ``task_id``, or None if the task is missing."""
        task = self.get_task(task_id)
        if task is None:
            return None
        return max((subtask.id for subtask in task.subtasks), default=0) + 1

    def add_task(
        self,
        title: str,
        description: str = "",
        dependencies: Optional[Sequence[Union[int, str]]] = None,
        priority: Optional[str] = None,
        config: Optional[TaskConfig] = None,
    ) -> Task:
        """
        Append a pending task with the next free ID.

        Args:
            title: Task title
            description: Task description
            dependencies: IDs the task depends on
            priority: Priority (defaults to the configured default priority)
            config: Configuration (defaults to get_config())

        Returns:
            The appended Task
        """
        if priority is None:
            priority = (config or get_config()).resolved_priority().value

        task = Task(
            id=self.next_task_id(),
            title=title,
            description=description,
            status=TaskStatus.PENDING.value,
            priority=priority,
            dependencies=list(dependencies or []),
        )
        self.tasks.append(task)
        self.logger.debug(f"Added task {task.id} with priority {task.priority}")
        return task

    def add_subtask(
        self,
        task_id: int,
        title: str,
        description: str = "",
        dependencies: Optional[Sequence[Union[int, str]]] = None,
    ) -> Optional[Subtask]:
        """Append a pending subtask to ``task_id``; None if the task is missing."""
        task = self.get_task(task_id)
        if task is None:
            self.logger.warning(f"Cannot add subtask: task {task_id} not found")
            return None

        subtask = Subtask(
            id=self.next_subtask_id(task_id),
            title=title,
            description=description,
            status=TaskStatus.PENDING.value,
            dependencies=list(dependencies or []),
        )
        task.subtasks.append(subtask)
        return subtask

    def _check_unique_ids(self) -> None:
        seen = set()
        for task in self.tasks:
            if task.id in seen:
                raise DuplicateTaskIdError(f"Duplicate task ID: {task.id}")
            seen.add(task.id)

            subtask_ids = set()
            for subtask in task.subtasks:
                if subtask.id in subtask_ids:
                    raise DuplicateTaskIdError(
                        f"Duplicate subtask ID {subtask.id} in task {task.id}"
                    )
                subtask_ids.add(subtask.id)

        self.logger.debug(f"Loaded {len(self.tasks)} tasks")
