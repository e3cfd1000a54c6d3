"""Result models for dependency validation and repair."""

from typing import List, Tuple

from pydantic import BaseModel, Field


class DependencyIssue(BaseModel):
    """A single problem found in a dependency list."""

    kind: str = Field(description="self | missing | circular")
    item_id: str = Field(description="Task or subtask ID owning the dependency")
    dependency_id: str = Field(description="The offending dependency")
    message: str = Field(default="")


class DependencyValidation(BaseModel):
    """Result of dependency validation."""

    is_valid: bool = Field(description="Whether no issues were found")
    has_cycles: bool = Field(default=False, description="Whether circular dependencies exist")
    cycle_edges: List[Tuple[str, str]] = Field(
        default_factory=list, description="(from, to) edges whose removal breaks every cycle"
    )
    missing_dependencies: List[DependencyIssue] = Field(default_factory=list)
    self_dependencies: List[DependencyIssue] = Field(default_factory=list)

    @property
    def issues(self) -> List[DependencyIssue]:
        """All issues, cycles included."""
        circular = [
            DependencyIssue(
                kind="circular",
                item_id=source,
                dependency_id=target,
                message=f"{source} -> {target} closes a dependency cycle",
            )
            for source, target in self.cycle_edges
        ]
        return self.self_dependencies + self.missing_dependencies + circular


class DependencyFixSummary(BaseModel):
    """Counts of dependency references removed by a fix pass."""

    duplicates_removed: int = Field(default=0)
    self_dependencies_removed: int = Field(default=0)
    missing_dependencies_removed: int = Field(default=0)
    circular_dependencies_removed: int = Field(default=0)
    removed_edges: List[Tuple[str, str]] = Field(
        default_factory=list, description="Cycle edges removed from subtasks"
    )

    @property
    def total_removed(self) -> int:
        return (
            self.duplicates_removed
            + self.self_dependencies_removed
            + self.missing_dependencies_removed
            + self.circular_dependencies_removed
        )

    @property
    def changed(self) -> bool:
        return self.total_removed > 0
