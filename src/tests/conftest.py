"""Shared fixtures for task core tests."""

import sys
from pathlib import Path

# Add project root to path so ``src.`` imports resolve
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

import pytest

from src.models.task_models import Subtask, Task
from src.models.complexity_models import ComplexityReport


@pytest.fixture
def setup_tasks():
    """Single task with two subtasks, the second depending on the first."""
    return [
        Task(
            id=1,
            title="Setup",
            status="done",
            subtasks=[
                Subtask(id=1, title="Init repo", dependencies=[]),
                Subtask(id=2, title="Config", dependencies=["1.1"]),
            ],
        )
    ]


@pytest.fixture
def project_tasks():
    """Three tasks with task-level and cross-parent subtask dependencies."""
    return [
        Task(
            id=1,
            title="Scaffold project",
            status="done",
            subtasks=[
                Subtask(id=1, title="Create repo"),
                Subtask(id=2, title="Add CI", dependencies=[1]),
            ],
        ),
        Task(
            id=2,
            title="Build API",
            status="in-progress",
            dependencies=[1],
            subtasks=[
                Subtask(id=1, title="Models", dependencies=["1.2"]),
                Subtask(id=2, title="Routes", dependencies=[1]),
                Subtask(id=3, title="Auth", dependencies=[1, 2]),
            ],
        ),
        Task(id=3, title="Write docs", dependencies=[2]),
    ]


@pytest.fixture
def complexity_report():
    """Report covering tasks 1 and 2."""
    return ComplexityReport.model_validate(
        {
            "meta": {
                "generatedAt": "2025-03-24T20:01:35.986Z",
                "tasksAnalyzed": 2,
                "thresholdScore": 5,
                "projectName": "Demo",
                "usedResearch": False,
            },
            "complexityAnalysis": [
                {
                    "taskId": 1,
                    "taskTitle": "Scaffold project",
                    "complexityScore": 3,
                    "recommendedSubtasks": 2,
                    "expansionPrompt": "Break down scaffolding",
                    "reasoning": "Routine setup",
                },
                {
                    "taskId": 2,
                    "taskTitle": "Build API",
                    "complexityScore": 8,
                    "recommendedSubtasks": 5,
                },
            ],
        }
    )
