"""Analysis session - orchestrates uploads, stage merging and metrics."""

import logging
from pathlib import Path
from typing import Optional

from ..analytics import MetricsAggregationEngine
from ..ingestion import StageUpload, UploadPipeline, decode_upload, read_upload
from ..models.aggregated_metrics import AggregatedMetrics
from ..models.entries import FunnelStage, ShotAnalysisEntry
from ..models.narrative import NarrativeRequest
from ..settings import SchemaRegistry, load_schema_registry
from .narrative import build_narrative_request
from .stage_store import StageMergeManager

logger = logging.getLogger(__name__)


class AnalysisSession:
    """One user's working set of funnel-stage uploads.

    Orchestrates:
    1. Validation and shot aggregation of each stage upload
    2. Whole-stage replace/clear in the merge manager
    3. Portfolio metrics over the merged shots
    4. The payload handed to the narrative generator

    A failed upload raises and leaves the stage's previous shots in place.

    Usage:
        session = AnalysisSession()
        session.upload(FunnelStage.TOF, tof_csv)
        session.upload(FunnelStage.BOF, bof_csv)
        metrics = session.metrics()
        request = session.build_narrative_request("D2C skincare, ROAS > 3x")
    """

    def __init__(
        self,
        registry: Optional[SchemaRegistry] = None,
        stages: Optional[StageMergeManager] = None,
    ):
        """Initialize session with schema configuration.

        Args:
            registry: Loaded schema registry. Defaults to bundled config.
            stages: Merge manager to populate. A fresh one by default.
        """
        self.registry = registry or load_schema_registry()
        self.pipeline = UploadPipeline(self.registry)
        self.stages = stages or StageMergeManager()
        self.engine = MetricsAggregationEngine(
            default_days_in_shot=self.registry.aggregation.default_days_in_shot
        )

    # =========================================================================
    # UPLOADS
    # =========================================================================

    def upload(self, stage: FunnelStage, text: str) -> StageUpload:
        """Validate, aggregate and store a stage's upload, replacing prior data."""
        result = self.pipeline.ingest(text, stage)
        self.stages.submit(stage, result.shots)
        return result

    def upload_bytes(self, stage: FunnelStage, data: bytes) -> StageUpload:
        return self.upload(stage, decode_upload(data))

    def upload_file(self, path: Path, stage: FunnelStage) -> StageUpload:
        return self.upload(stage, read_upload(path))

    def remove(self, stage: FunnelStage) -> None:
        self.stages.clear(stage)

    def reset(self) -> None:
        """Drop every stage's data."""
        self.stages.clear_all()
        logger.info("Session reset")

    # =========================================================================
    # VIEWS
    # =========================================================================

    def current_shots(self) -> list[ShotAnalysisEntry]:
        return self.stages.current_shots()

    def available_stages(self) -> list[FunnelStage]:
        return self.stages.available_stages()

    def missing_stages(self) -> list[FunnelStage]:
        return self.stages.missing_stages()

    def metrics(self) -> AggregatedMetrics:
        """Portfolio snapshot over all current shots (zeros when empty)."""
        return self.engine.compute(self.stages.current_shots())

    def build_narrative_request(self, strategy: str) -> NarrativeRequest:
        """Payload for the external narrative step.

        Raises:
            EmptyShotSetError: If no stage has been uploaded.
            ValueError: If the strategy text is blank.
        """
        return build_narrative_request(
            self.stages.current_shots(),
            strategy,
            self.registry.daily_performance,
        )
