"""Shapes exchanged with the external narrative generator.

The generator itself lives outside this package. We only build the payload
handed to it and validate the JSON that comes back.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .entries import FunnelStage


class NarrativeModel(BaseModel):
    """Base for generator responses, which use camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnomalySeverity(str, Enum):
    CRITICAL = "Critical"
    WARNING = "Warning"
    INFO = "Info"


class Anomaly(NarrativeModel):
    """Outlier flagged by the generator for a specific shot."""

    metric: str
    shot_id: str
    funnel_stage: str  # Stage tag or "Overall"
    observation: str
    impact: str
    severity: AnomalySeverity = AnomalySeverity.INFO


class AnalysisSummary(NarrativeModel):
    executive_summary: str
    key_wins: list[str] = Field(default_factory=list)
    areas_for_improvement: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    anomalies: list[Anomaly] = Field(default_factory=list)
    overall_score: float = Field(ge=0, le=100)


class FunnelStageReport(NarrativeModel):
    stage_name: FunnelStage
    key_takeaways: list[str] = Field(default_factory=list)
    expert_advice: list[str] = Field(default_factory=list)
    troubleshooting_actions: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class DetailedReport(NarrativeModel):
    shot_explanation: str
    headline: str
    funnel_stage_analysis: list[FunnelStageReport] = Field(default_factory=list)
    missing_stage_insights: list[str] = Field(default_factory=list)
    overall_recommendations: list[str] = Field(default_factory=list)


class RoadmapPhase(NarrativeModel):
    phase_name: str  # e.g. "Phase 1: Stabilization & Fixes"
    duration: str  # e.g. "Weeks 1-2"
    focus_area: str
    objectives: list[str] = Field(default_factory=list)
    action_items: list[str] = Field(default_factory=list)


class MarketingRoadmap(NarrativeModel):
    strategy_summary: str
    phases: list[RoadmapPhase] = Field(default_factory=list)
    budget_allocation: list[str] = Field(default_factory=list)


class NarrativeRequest(BaseModel):
    """Everything the narrative step receives.

    `stage_blocks` holds one CSV document per available stage, so stages are
    never mixed inside a block.
    """

    model_config = ConfigDict(frozen=True)

    strategy: str
    available_stages: list[FunnelStage]
    missing_stages: list[FunnelStage]
    stage_blocks: dict[FunnelStage, str]
    total_shots: int

    def render_data_section(self) -> str:
        """Concatenate the stage blocks under per-stage headings."""
        return "\n\n".join(
            f"--- DATA FOR FUNNEL STAGE: {stage.value} ---\n{self.stage_blocks[stage]}"
            for stage in self.available_stages
        )
