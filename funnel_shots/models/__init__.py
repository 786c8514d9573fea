from .aggregated_metrics import AggregatedMetrics
from .entries import (
    METRIC_FIELDS,
    DailyPerformanceEntry,
    FunnelStage,
    MetricValues,
    ShotAnalysisEntry,
)
from .narrative import (
    AnalysisSummary,
    Anomaly,
    AnomalySeverity,
    DetailedReport,
    FunnelStageReport,
    MarketingRoadmap,
    NarrativeRequest,
    RoadmapPhase,
)

__all__ = [
    "METRIC_FIELDS",
    "AggregatedMetrics",
    "AnalysisSummary",
    "Anomaly",
    "AnomalySeverity",
    "DailyPerformanceEntry",
    "DetailedReport",
    "FunnelStage",
    "FunnelStageReport",
    "MarketingRoadmap",
    "MetricValues",
    "NarrativeRequest",
    "RoadmapPhase",
    "ShotAnalysisEntry",
]
