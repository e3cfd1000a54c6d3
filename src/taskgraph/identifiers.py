"""Task and subtask identifier parsing and formatting.

Task IDs are positive integers. Subtask IDs are dotted ``parent.child`` pairs.
A bare number or numeric string is always a task ID.
"""

import logging
import re
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")


class IdentifierKind(str, Enum):
    """Kinds of parsed identifiers."""

    TASK = "task"
    SUBTASK = "subtask"


class TaskIdentifier(BaseModel):
    """Parsed top-level task ID."""

    kind: IdentifierKind = Field(default=IdentifierKind.TASK)
    id: int

    def __str__(self) -> str:
        return str(self.id)


class SubtaskIdentifier(BaseModel):
    """Parsed ``parent.child`` subtask ID."""

    kind: IdentifierKind = Field(default=IdentifierKind.SUBTASK)
    parent_id: int
    subtask_id: int

    def __str__(self) -> str:
        return subtask_identifier(self.parent_id, self.subtask_id)


ParsedIdentifier = Union[TaskIdentifier, SubtaskIdentifier]


def _to_int(value: str) -> Optional[int]:
    # Plain ASCII digits only: no signs, underscores or whitespace inside
    value = value.strip()
    if not _DIGITS.fullmatch(value):
        return None
    number = int(value)
    return number if number > 0 else None


def parse_identifier(raw: Any) -> Optional[ParsedIdentifier]:
    """
    Parse a raw task or subtask identifier.

    Strings containing ``.`` are split on the first dot and both halves must be
    positive decimal integers. Anything else must be a positive int, a whole
    float, or a digit string.

    Args:
        raw: Number or string identifier

    Returns:
        TaskIdentifier, SubtaskIdentifier, or None when the value is invalid
    """
    # bool is an int subclass but never an ID
    if isinstance(raw, bool):
        return None

    if isinstance(raw, int):
        return TaskIdentifier(id=raw) if raw > 0 else None

    # JSON numbers may arrive as floats; only whole values are IDs
    if isinstance(raw, float):
        if not raw.is_integer() or raw <= 0:
            return None
        return TaskIdentifier(id=int(raw))

    if not isinstance(raw, str) or not raw.strip():
        return None

    if "." in raw:
        parent_part, subtask_part = raw.split(".", 1)
        parent_id = _to_int(parent_part)
        subtask_id = _to_int(subtask_part)
        if parent_id is None or subtask_id is None:
            logger.debug(f"Invalid subtask identifier: {raw!r}")
            return None
        return SubtaskIdentifier(parent_id=parent_id, subtask_id=subtask_id)

    task_id = _to_int(raw)
    if task_id is None:
        return None
    return TaskIdentifier(id=task_id)


def format_identifier(value: Any) -> Any:
    """
    Format an identifier for display.

    Dotted strings are returned unchanged, ints become decimal strings, and
    any other value is passed through untouched.
    """
    if isinstance(value, str) and "." in value:
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def is_subtask_identifier(raw: Any) -> bool:
    """Check whether ``raw`` parses as a dotted subtask ID."""
    return isinstance(parse_identifier(raw), SubtaskIdentifier)


def subtask_identifier(parent_id: int, subtask_id: int) -> str:
    """Build the dotted ID for a subtask."""
    return f"{parent_id}.{subtask_id}"


def normalize_dependency(dependency: Any, parent_id: int) -> str:
    """
    Normalize a subtask dependency to its dotted form.

    A bare number in a subtask's dependency list refers to a sibling under the
    same parent. Dotted values keep their own parent.

    Args:
        dependency: Raw dependency entry
        parent_id: ID of the task owning the subtask

    Returns:
        Dotted dependency ID (or the string form of an unparseable entry)
    """
    parsed = parse_identifier(dependency)
    if isinstance(parsed, SubtaskIdentifier):
        return str(parsed)
    if isinstance(parsed, TaskIdentifier):
        return subtask_identifier(parent_id, parsed.id)
    return str(dependency)
