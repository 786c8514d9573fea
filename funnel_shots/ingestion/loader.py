"""Upload pipeline: read -> validate -> aggregate for one funnel stage."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..analytics.shots import ShotAggregator
from ..models.entries import DailyPerformanceEntry, FunnelStage, ShotAnalysisEntry
from ..settings import SchemaRegistry, load_schema_registry
from .validator import SchemaValidator

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv",)


@dataclass(frozen=True)
class StageUpload:
    """Result of ingesting one stage's file."""

    stage: FunnelStage
    entries: list[DailyPerformanceEntry]
    shots: list[ShotAnalysisEntry]


def decode_upload(data: bytes) -> str:
    """Decode uploaded bytes as UTF-8, dropping a leading BOM."""
    return data.decode("utf-8-sig")


def read_upload(path: Path) -> str:
    """Read a whole upload file into text.

    The file is read completely before any parsing starts.
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file type: {suffix}. Please upload a CSV file.")
    return decode_upload(path.read_bytes())


class UploadPipeline:
    """Pipeline for validating a stage upload and folding it into shots.

    Usage:
        pipeline = UploadPipeline()
        upload = pipeline.ingest(csv_text, FunnelStage.TOF)
        upload.shots  # [ShotAnalysisEntry(shot_id="TOF-Shot 1", ...), ...]
    """

    def __init__(self, registry: Optional[SchemaRegistry] = None):
        self.registry = registry or load_schema_registry()
        self.validator = SchemaValidator(self.registry)
        self.aggregator = ShotAggregator(self.registry.aggregation.shot_size)

    def ingest(self, text: str, stage: FunnelStage) -> StageUpload:
        """Full pipeline: Split -> Validate -> Aggregate.

        Args:
            text: Raw CSV content of the upload
            stage: Funnel stage the upload was submitted under

        Returns:
            StageUpload with the validated rows and their shots

        Raises:
            IngestionError: Any schema, validation or empty-data failure
        """
        entries = self.validator.validate(text, stage)
        shots = self.aggregator.aggregate(entries, stage)
        return StageUpload(stage=stage, entries=entries, shots=shots)

    def ingest_file(self, path: Path, stage: FunnelStage) -> StageUpload:
        logger.info("Reading %s upload from %s", stage.value, path)
        return self.ingest(read_upload(path), stage)
