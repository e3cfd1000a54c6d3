"""Data models for task complexity reports."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field


class ComplexityReportMeta(BaseModel):
    """Report metadata. Opaque to lookups; kept for round-tripping."""

    generated_at: Optional[str] = Field(default=None, alias="generatedAt")
    tasks_analyzed: Optional[int] = Field(default=None, alias="tasksAnalyzed")
    threshold_score: Optional[float] = Field(default=None, alias="thresholdScore")
    project_name: Optional[str] = Field(default=None, alias="projectName")
    used_research: Optional[bool] = Field(default=None, alias="usedResearch")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        extra = "allow"


class ComplexityAnalysisEntry(BaseModel):
    """Complexity analysis for one task."""

    task_id: Union[int, str] = Field(alias="taskId", description="Analysed task ID")
    task_title: str = Field(default="", alias="taskTitle")
    complexity_score: Optional[float] = Field(
        default=None, alias="complexityScore", description="Score on a 1-10 scale"
    )
    recommended_subtasks: Optional[int] = Field(default=None, alias="recommendedSubtasks")
    expansion_prompt: str = Field(default="", alias="expansionPrompt")
    reasoning: str = Field(default="")

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        extra = "allow"


class ComplexityReport(BaseModel):
    """Externally produced complexity report. Read-only here."""

    meta: Optional[ComplexityReportMeta] = Field(default=None)
    complexity_analysis: List[ComplexityAnalysisEntry] = Field(
        default_factory=list, alias="complexityAnalysis"
    )

    class Config:
        """Pydantic configuration."""

        populate_by_name = True
        extra = "allow"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the report's camelCase keys."""
        return self.model_dump(by_alias=True, exclude_none=True)
