"""Lookups into an externally produced complexity report."""

import logging
from typing import Any, Dict, Optional

from ..models.complexity_models import ComplexityAnalysisEntry, ComplexityReport


logger = logging.getLogger(__name__)


def _numeric_id(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def find_task_in_complexity_report(
    report: Optional[ComplexityReport],
    task_id: Any,
) -> Optional[ComplexityAnalysisEntry]:
    """
    Find the analysis entry for a task.

    Matches by numeric equality, so ``3``, ``"3"`` and ``3.0`` are the same ID.
    The report is never modified.

    Args:
        report: Complexity report, or None when none was loaded
        task_id: Task ID to look up

    Returns:
        First matching entry, or None
    """
    if report is None or not report.complexity_analysis:
        return None

    wanted = _numeric_id(task_id)
    if wanted is None:
        return None

    for entry in report.complexity_analysis:
        if _numeric_id(entry.task_id) == wanted:
            return entry

    return None


class ComplexityIndex:
    """
    Read-only task ID -> analysis entry index over one report.

    The first entry wins when a report lists a task twice, matching
    find_task_in_complexity_report.
    """

    def __init__(self, report: Optional[ComplexityReport]):
        self.report = report
        self._entries: Dict[float, ComplexityAnalysisEntry] = {}

        if report is not None:
            for entry in report.complexity_analysis:
                key = _numeric_id(entry.task_id)
                if key is None:
                    logger.debug(f"Skipping complexity entry with bad taskId {entry.task_id!r}")
                    continue
                self._entries.setdefault(key, entry)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, task_id: Any) -> Optional[ComplexityAnalysisEntry]:
        key = _numeric_id(task_id)
        if key is None:
            return None
        return self._entries.get(key)

    def contains(self, task_id: Any) -> bool:
        return self.get(task_id) is not None

    def score_for(self, task_id: Any) -> Optional[float]:
        """Complexity score of a task, or None if unanalysed."""
        entry = self.get(task_id)
        return entry.complexity_score if entry else None
