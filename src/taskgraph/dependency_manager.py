"""Subtask dependency graph: cycle detection, validation and repair."""

import logging
from dataclasses import dataclass, field
from graphlib import CycleError, TopologicalSorter
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ..models.dependency_models import (
    DependencyFixSummary,
    DependencyIssue,
    DependencyValidation,
)
from ..models.task_models import Task
from .exceptions import CircularDependencyError
from .identifiers import (
    format_identifier,
    normalize_dependency,
    subtask_identifier,
)
from .task_repository import lookup_task


logger = logging.getLogger(__name__)

DependencyMap = Mapping[str, Sequence[str]]
Edge = Tuple[str, str]


@dataclass
class TraversalContext:
    """
    Shared state of one depth-first scan.

    ``visited`` is never cleared, so each node is expanded at most once per
    context. ``recursion_stack`` holds the active DFS path.
    """

    visited: Set[str] = field(default_factory=set)
    recursion_stack: Set[str] = field(default_factory=set)
    path: List[str] = field(default_factory=list)


def _walk(
    node: str,
    dependency_map: DependencyMap,
    context: TraversalContext,
    path: List[str],
    on_back_edge: Callable[[str, str], None],
) -> None:
    # Iterative DFS: each frame resumes its own iterator in declared order
    def enter(current: str, current_path: List[str]):
        context.visited.add(current)
        context.recursion_stack.add(current)
        current_path.append(current)
        return current, iter(dependency_map.get(current, ())), current_path

    frames = [enter(node, path)]

    try:
        while frames:
            current, dependencies, current_path = frames[-1]
            for dependency in dependencies:
                if dependency not in context.visited:
                    frames.append(enter(dependency, list(current_path)))
                    break
                if dependency in context.recursion_stack:
                    on_back_edge(current, dependency)
            else:
                frames.pop()
                context.recursion_stack.discard(current)
    finally:
        for current, _, _ in frames:
            context.recursion_stack.discard(current)


def find_cycles(
    subtask_id: str,
    dependency_map: DependencyMap,
    visited: Optional[Set[str]] = None,
    recursion_stack: Optional[Set[str]] = None,
    path: Optional[List[str]] = None,
) -> List[str]:
    """
    Find dependency edges that close cycles reachable from ``subtask_id``.

    PATTERN: DFS with back-edge detection in declared dependency order
    CRITICAL: visited and recursion_stack are shared across the whole scan;
    pass the same sets when scanning several roots
    GOTCHA: IDs missing from the map are leaves, not errors

    Args:
        subtask_id: Starting subtask ID
        dependency_map: Subtask ID -> ordered dependency IDs
        visited: Nodes already expanded
        recursion_stack: Nodes on the active DFS path
        path: Path so far (diagnostics only)

    Returns:
        Back-edge targets, in discovery order. The edge from the node being
        expanded to each reported ID is the one to remove.
    """
    context = TraversalContext(
        visited=visited if visited is not None else set(),
        recursion_stack=recursion_stack if recursion_stack is not None else set(),
        path=path if path is not None else [],
    )
    cycles_to_break: List[str] = []

    def report(source: str, target: str) -> None:
        logger.debug(f"Circular dependency: {source} -> {target}")
        cycles_to_break.append(target)

    _walk(subtask_id, dependency_map, context, context.path, report)
    return cycles_to_break


def build_dependency_map(tasks: List[Task]) -> Dict[str, List[str]]:
    """
    Build the subtask dependency map from a task list.

    Rebuilt on every call; the map is never cached across mutations. Bare
    numeric dependencies refer to siblings under the same parent.

    Args:
        tasks: Task list

    Returns:
        Dotted subtask ID -> ordered, normalized dependency IDs
    """
    dependency_map: Dict[str, List[str]] = {}

    for task in tasks:
        for subtask in task.subtasks:
            node = subtask_identifier(task.id, subtask.id)
            dependency_map[node] = [
                normalize_dependency(dep, task.id) for dep in subtask.dependencies
            ]

    return dependency_map


class DependencyManager:
    """
    Validates and repairs dependency lists of a task collection.

    PATTERN: Derive a fresh DependencyMap from the tasks for every operation
    CRITICAL: Cycle breaking removes one edge per back-edge found, in a
    deterministic order
    GOTCHA: The subtask graph is flat across parents; cross-parent edges count
    """

    def __init__(self):
        """Initialize dependency manager."""
        self.logger = logging.getLogger(__name__)

    def find_cycle_edges(self, dependency_map: DependencyMap) -> List[Edge]:
        """
        Scan the whole graph for edges that close cycles.

        One DFS per unvisited root, in map order, with a graph-wide visited set.

        Args:
            dependency_map: Subtask ID -> ordered dependency IDs

        Returns:
            (from, to) edges whose removal makes the graph acyclic
        """
        context = TraversalContext()
        edges: List[Edge] = []

        def report(source: str, target: str) -> None:
            edges.append((source, target))

        for node in dependency_map:
            if node not in context.visited:
                _walk(node, dependency_map, context, [], report)

        if edges:
            self.logger.info(f"Found {len(edges)} circular dependency edge(s)")

        return edges

    def break_cycles(self, tasks: List[Task]) -> List[Edge]:
        """
        Remove cycle-closing dependencies from subtasks in place.

        Args:
            tasks: Task list, mutated

        Returns:
            Removed (from, to) edges
        """
        edges = self.find_cycle_edges(build_dependency_map(tasks))

        for source, target in edges:
            parent_id, subtask_id = (int(part) for part in source.split(".", 1))
            subtask = self._get_subtask(tasks, parent_id, subtask_id)
            if subtask is None:
                continue
            subtask.dependencies = [
                dep
                for dep in subtask.dependencies
                if normalize_dependency(dep, parent_id) != target
            ]
            self.logger.debug(f"Removed circular dependency {source} -> {target}")

        return edges

    def validate_dependencies(self, tasks: List[Task]) -> DependencyValidation:
        """
        Check every dependency list without modifying anything.

        References resolve exactly as task_exists does, but through the
        non-annotating lookup.

        Args:
            tasks: Task list

        Returns:
            DependencyValidation with all issues found
        """
        self_deps: List[DependencyIssue] = []
        missing: List[DependencyIssue] = []

        for task in tasks:
            item_id = str(task.id)
            for dep in task.dependencies:
                self._check_reference(tasks, item_id, dep, str(dep), self_deps, missing)

            for subtask in task.subtasks:
                item_id = subtask_identifier(task.id, subtask.id)
                for dep in subtask.dependencies:
                    normalized = normalize_dependency(dep, task.id)
                    self._check_reference(tasks, item_id, dep, normalized, self_deps, missing)

        cycle_edges = self.find_cycle_edges(build_dependency_map(tasks))

        validation = DependencyValidation(
            is_valid=not (self_deps or missing or cycle_edges),
            has_cycles=bool(cycle_edges),
            cycle_edges=cycle_edges,
            missing_dependencies=missing,
            self_dependencies=self_deps,
        )

        if validation.is_valid:
            self.logger.info("Dependency validation successful")
        else:
            self.logger.warning(
                f"Dependency validation found {len(validation.issues)} issue(s)"
            )

        return validation

    def fix_dependencies(self, tasks: List[Task]) -> DependencyFixSummary:
        """
        Repair dependency lists in place.

        Removes duplicate, self and dangling references on tasks and subtasks,
        then breaks subtask cycles.

        Args:
            tasks: Task list, mutated

        Returns:
            DependencyFixSummary with removal counts
        """
        summary = DependencyFixSummary()

        for task in tasks:
            task.dependencies = self._clean_list(
                tasks, str(task.id), task.dependencies, lambda dep: str(dep), summary
            )
            for subtask in task.subtasks:
                parent_id = task.id
                subtask.dependencies = self._clean_list(
                    tasks,
                    subtask_identifier(parent_id, subtask.id),
                    subtask.dependencies,
                    lambda dep, parent_id=parent_id: normalize_dependency(dep, parent_id),
                    summary,
                )

        removed = self.break_cycles(tasks)
        summary.removed_edges = removed
        summary.circular_dependencies_removed = len(removed)

        if summary.changed:
            self.logger.info(f"Removed {summary.total_removed} invalid dependency reference(s)")
        else:
            self.logger.debug("No dependency issues to fix")

        return summary

    def get_execution_batches(self, dependency_map: DependencyMap) -> List[List[str]]:
        """
        Group subtasks into batches that can run in parallel.

        Args:
            dependency_map: Subtask ID -> ordered dependency IDs

        Returns:
            Batches in execution order, each sorted for stable output

        Raises:
            CircularDependencyError: If the graph has a cycle
        """
        sorter = TopologicalSorter({node: list(deps) for node, deps in dependency_map.items()})
        try:
            sorter.prepare()
        except CycleError as e:
            raise CircularDependencyError(
                f"Circular dependencies detected: {e}",
                cycle_edges=self.find_cycle_edges(dependency_map),
            ) from e

        batches = []
        while sorter.is_active():
            ready = sorted(sorter.get_ready())
            batches.append(ready)
            sorter.done(*ready)

        return batches

    def _check_reference(self, tasks, item_id, dep, normalized, self_deps, missing) -> None:
        if normalized == item_id:
            self_deps.append(
                DependencyIssue(
                    kind="self",
                    item_id=item_id,
                    dependency_id=normalized,
                    message=f"{item_id} depends on itself",
                )
            )
        elif lookup_task(tasks, normalized) is None:
            missing.append(
                DependencyIssue(
                    kind="missing",
                    item_id=item_id,
                    dependency_id=str(format_identifier(dep)),
                    message=f"{item_id} depends on missing {normalized}",
                )
            )

    def _clean_list(self, tasks, item_id, dependencies, normalize, summary) -> list:
        kept = []
        seen = set()
        for dep in dependencies:
            normalized = normalize(dep)
            if normalized in seen:
                summary.duplicates_removed += 1
            elif normalized == item_id:
                summary.self_dependencies_removed += 1
            elif lookup_task(tasks, normalized) is None:
                summary.missing_dependencies_removed += 1
                self.logger.debug(f"Removed missing dependency {normalized} from {item_id}")
            else:
                kept.append(dep)
            seen.add(normalized)
        return kept

    @staticmethod
    def _get_subtask(tasks: List[Task], parent_id: int, subtask_id: int):
        for task in tasks:
            if task.id == parent_id:
                return task.get_subtask(subtask_id)
        return None
