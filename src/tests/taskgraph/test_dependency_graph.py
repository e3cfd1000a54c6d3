"""Tests for dependency cycle detection, validation and repair."""

import pytest

from src.models.task_models import Subtask, Task
from src.taskgraph.dependency_manager import (
    DependencyManager,
    TraversalContext,
    build_dependency_map,
    find_cycles,
)
from src.taskgraph.exceptions import CircularDependencyError


def _is_acyclic(dependency_map):
    """Check acyclicity with a fresh whole-graph scan."""
    return DependencyManager().find_cycle_edges(dependency_map) == []


def _remove_edges(dependency_map, edges):
    trimmed = {node: list(deps) for node, deps in dependency_map.items()}
    for source, target in edges:
        trimmed[source].remove(target)
    return trimmed


class TestFindCycles:
    """Test find_cycles."""

    def test_acyclic_map(self):
        dependency_map = {"1.1": [], "1.2": ["1.1"], "1.3": ["1.1", "1.2"]}
        assert find_cycles("1.3", dependency_map) == []

    def test_two_node_cycle(self):
        dependency_map = {"1.1": ["1.2"], "1.2": ["1.1"]}

        result = find_cycles("1.1", dependency_map)

        assert len(result) == 1
        assert result[0] in {"1.1", "1.2"}

    def test_three_node_cycle(self):
        dependency_map = {"A": ["B"], "B": ["C"], "C": ["A"]}

        result = find_cycles("A", dependency_map)

        # C -> A closes the loop when starting from A
        assert result == ["A"]
        assert _is_acyclic(_remove_edges(dependency_map, [("C", "A")]))

    def test_self_loop(self):
        assert find_cycles("A", {"A": ["A"]}) == ["A"]

    def test_unknown_dependency_is_leaf(self):
        assert find_cycles("1.1", {"1.1": ["9.9", "nonsense"]}) == []

    def test_declared_order_is_deterministic(self):
        dependency_map = {"A": ["B", "C"], "B": ["A"], "C": ["A"]}
        first = find_cycles("A", dependency_map)
        second = find_cycles("A", dependency_map)
        assert first == second == ["A", "A"]

    def test_shared_visited_set_across_roots(self):
        dependency_map = {"A": ["B"], "B": ["A"], "C": ["A"]}
        visited = set()
        recursion_stack = set()

        assert find_cycles("A", dependency_map, visited, recursion_stack) == ["A"]
        # A and B were already explored; C adds no new cycle
        assert find_cycles("C", dependency_map, visited, recursion_stack) == []
        assert visited == {"A", "B", "C"}
        assert recursion_stack == set()

    def test_path_records_start(self):
        path = []
        find_cycles("A", {"A": ["B"]}, path=path)
        assert path == ["A"]

    def test_long_acyclic_chain(self):
        dependency_map = {f"1.{i}": [f"1.{i + 1}"] for i in range(1, 2000)}
        recursion_stack = set()

        assert find_cycles("1.1", dependency_map, recursion_stack=recursion_stack) == []
        assert recursion_stack == set()

    def test_long_chain_closed_into_cycle(self):
        dependency_map = {f"1.{i}": [f"1.{i + 1}"] for i in range(1, 2000)}
        dependency_map["1.2000"] = ["1.1"]

        assert find_cycles("1.1", dependency_map) == ["1.1"]
        edges = DependencyManager().find_cycle_edges(dependency_map)
        assert edges == [("1.2000", "1.1")]
        assert _is_acyclic(_remove_edges(dependency_map, edges))

    def test_diamond_without_cycle(self):
        dependency_map = {"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": []}
        assert find_cycles("A", dependency_map) == []


class TestDependencyMap:
    """Test building the DependencyMap from tasks."""

    def test_normalizes_sibling_ids(self, project_tasks):
        dependency_map = build_dependency_map(project_tasks)

        assert dependency_map == {
            "1.1": [],
            "1.2": ["1.1"],
            "2.1": ["1.2"],
            "2.2": ["2.1"],
            "2.3": ["2.1", "2.2"],
        }

    def test_rebuilt_after_mutation(self, setup_tasks):
        before = build_dependency_map(setup_tasks)
        setup_tasks[0].subtasks[0].dependencies.append(2)
        after = build_dependency_map(setup_tasks)

        assert before["1.1"] == []
        assert after["1.1"] == ["1.2"]


class TestDependencyManager:
    """Test DependencyManager."""

    def test_find_cycle_edges_covers_every_cycle(self):
        dependency_map = {
            "1.1": ["1.2"],
            "1.2": ["1.1"],
            "2.1": ["2.2"],
            "2.2": ["2.3"],
            "2.3": ["2.1"],
            "3.1": ["3.1"],
        }
        manager = DependencyManager()

        edges = manager.find_cycle_edges(dependency_map)

        assert edges == [("1.2", "1.1"), ("2.3", "2.1"), ("3.1", "3.1")]
        assert _is_acyclic(_remove_edges(dependency_map, edges))

    def test_cross_parent_cycle(self):
        tasks = [
            Task(id=1, subtasks=[Subtask(id=1, dependencies=["2.1"])]),
            Task(id=2, subtasks=[Subtask(id=1, dependencies=["1.1"])]),
        ]
        edges = DependencyManager().find_cycle_edges(build_dependency_map(tasks))
        assert edges == [("2.1", "1.1")]

    def test_break_cycles(self):
        tasks = [
            Task(
                id=1,
                subtasks=[
                    Subtask(id=1, dependencies=[3]),
                    Subtask(id=2, dependencies=["1.1"]),
                    Subtask(id=3, dependencies=[2]),
                ],
            )
        ]
        manager = DependencyManager()

        removed = manager.break_cycles(tasks)

        # 1.1 -> 1.3 -> 1.2 -> 1.1; the last edge closes the loop
        assert removed == [("1.2", "1.1")]
        assert tasks[0].subtasks[1].dependencies == []
        # Edges not named are left alone
        assert tasks[0].subtasks[0].dependencies == [3]
        assert tasks[0].subtasks[2].dependencies == [2]
        assert manager.find_cycle_edges(build_dependency_map(tasks)) == []

    def test_break_cycles_leaves_graph_acyclic(self):
        tasks = [
            Task(
                id=1,
                subtasks=[
                    Subtask(id=1, dependencies=[2]),
                    Subtask(id=2, dependencies=[3]),
                    Subtask(id=3, dependencies=[1]),
                ],
            )
        ]
        manager = DependencyManager()

        removed = manager.break_cycles(tasks)

        assert removed == [("1.3", "1.1")]
        assert tasks[0].subtasks[2].dependencies == []
        assert manager.find_cycle_edges(build_dependency_map(tasks)) == []

    def test_long_subtask_chain(self):
        count = 2000
        subtasks = [Subtask(id=i, dependencies=[i + 1]) for i in range(1, count)]
        subtasks.append(Subtask(id=count, dependencies=[1]))
        tasks = [Task(id=1, subtasks=subtasks)]
        manager = DependencyManager()

        validation = manager.validate_dependencies(tasks)
        assert validation.cycle_edges == [(f"1.{count}", "1.1")]

        summary = manager.fix_dependencies(tasks)
        assert summary.removed_edges == [(f"1.{count}", "1.1")]
        assert tasks[0].subtasks[-1].dependencies == []
        assert manager.validate_dependencies(tasks).is_valid

    def test_validate_clean_tasks(self, project_tasks):
        validation = DependencyManager().validate_dependencies(project_tasks)

        assert validation.is_valid
        assert not validation.has_cycles
        assert validation.issues == []

    def test_validate_reports_every_kind(self):
        tasks = [
            Task(
                id=1,
                dependencies=[1, 7],
                subtasks=[
                    Subtask(id=1, dependencies=[1, "4.2"]),
                    Subtask(id=2, dependencies=[3]),
                    Subtask(id=3, dependencies=[2]),
                ],
            )
        ]
        original = [list(s.dependencies) for s in tasks[0].subtasks]

        validation = DependencyManager().validate_dependencies(tasks)

        assert not validation.is_valid
        assert validation.has_cycles
        assert [(i.item_id, i.dependency_id) for i in validation.self_dependencies] == [
            ("1", "1"),
            ("1.1", "1.1"),
        ]
        assert [(i.item_id, i.dependency_id) for i in validation.missing_dependencies] == [
            ("1", "7"),
            ("1.1", "4.2"),
        ]
        assert validation.cycle_edges == [("1.1", "1.1"), ("1.3", "1.2")]
        assert {issue.kind for issue in validation.issues} == {"self", "missing", "circular"}
        # Dependency lists are untouched
        assert [list(s.dependencies) for s in tasks[0].subtasks] == original

    def test_fix_dependencies(self):
        tasks = [
            Task(id=1, dependencies=[1, 2, 2, 9]),
            Task(
                id=2,
                subtasks=[
                    Subtask(id=1, dependencies=[2, "2.2", "5.1"]),
                    Subtask(id=2, dependencies=[2, 1]),
                ],
            ),
        ]

        summary = DependencyManager().fix_dependencies(tasks)

        assert tasks[0].dependencies == [2]
        assert tasks[1].subtasks[0].dependencies == [2]
        assert tasks[1].subtasks[1].dependencies == []
        assert summary.duplicates_removed == 2
        assert summary.self_dependencies_removed == 2
        assert summary.missing_dependencies_removed == 2
        assert summary.circular_dependencies_removed == 1
        assert summary.removed_edges == [("2.2", "2.1")]
        assert summary.changed
        assert summary.total_removed == 7

    def test_fix_clean_tasks_is_noop(self, project_tasks):
        before = [task.model_dump() for task in project_tasks]

        summary = DependencyManager().fix_dependencies(project_tasks)

        assert not summary.changed
        assert [task.model_dump() for task in project_tasks] == before

    def test_execution_batches(self, project_tasks):
        batches = DependencyManager().get_execution_batches(
            build_dependency_map(project_tasks)
        )
        assert batches == [["1.1"], ["1.2"], ["2.1"], ["2.2"], ["2.3"]]

    def test_execution_batches_parallel(self):
        dependency_map = {"A": [], "B": ["A"], "C": ["A"], "D": ["B", "C"]}
        batches = DependencyManager().get_execution_batches(dependency_map)
        assert batches == [["A"], ["B", "C"], ["D"]]

    def test_execution_batches_with_cycle(self):
        with pytest.raises(CircularDependencyError) as exc_info:
            DependencyManager().get_execution_batches({"A": ["B"], "B": ["A"]})
        assert exc_info.value.cycle_edges == [("B", "A")]


def test_traversal_context_defaults():
    context = TraversalContext()
    assert context.visited == set()
    assert context.recursion_stack == set()
    assert context.path == []
