"""JSON storage for task documents and complexity reports."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..config.task_config import get_config
from ..models.complexity_models import ComplexityReport
from ..taskgraph.exceptions import TaskDataError, TaskStorageError
from ..taskgraph.task_repository import TaskRepository

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_json(path: PathLike) -> Optional[Any]:
    """
    Read and parse a JSON file.

    Args:
        path: File to read

    Returns:
        Parsed data, or None if the file is missing or not valid JSON
    """
    path = Path(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.debug(f"JSON file not found: {path}")
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading JSON file {path}: {e}")
        return None


def write_json(path: PathLike, data: Any) -> None:
    """
    Write data as indented JSON, creating parent directories.

    Raises:
        TaskStorageError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError) as e:
        logger.error(f"Error writing JSON file {path}: {e}")
        raise TaskStorageError(f"Could not write {path}: {e}") from e


def read_complexity_report(path: Optional[PathLike] = None) -> Optional[ComplexityReport]:
    """
    Load the complexity report.

    Args:
        path: Report file (defaults to the configured report path)

    Returns:
        ComplexityReport, or None if missing or malformed
    """
    path = path or get_config().complexity_report_file
    data = read_json(path)
    if data is None:
        return None

    try:
        return ComplexityReport.model_validate(data)
    except ValidationError as e:
        logger.error(f"Invalid complexity report {path}: {e}")
        return None


def load_tasks(path: Optional[PathLike] = None) -> Optional[TaskRepository]:
    """
    Load a task document into a repository.

    Args:
        path: Tasks file (defaults to the configured tasks path)

    Returns:
        TaskRepository, or None if the file is missing or unreadable

    Raises:
        TaskDataError: If the file parses but does not describe valid tasks
    """
    path = path or get_config().tasks_file
    data = read_json(path)
    if data is None:
        return None

    repository = TaskRepository.from_dict(data)
    logger.info(f"Loaded {len(repository)} tasks from {path}")
    return repository


def save_tasks(repository: TaskRepository, path: Optional[PathLike] = None) -> Dict[str, Any]:
    """
    Write a repository back to its document.

    Meta keys the document lacks (project name and version) are filled from
    the configuration; existing keys are kept.

    Args:
        repository: Tasks to write
        path: Tasks file (defaults to the configured tasks path)

    Returns:
        The document written

    Raises:
        TaskStorageError: If the file cannot be written
    """
    config = get_config()
    path = path or config.tasks_file

    meta = dict(repository.meta or {})
    for key, value in config.document_meta().items():
        meta.setdefault(key, value)
    repository.meta = meta

    document = repository.to_dict()
    write_json(path, document)
    logger.debug(f"Saved {len(repository)} tasks to {path}")
    return document
