"""Metrics Aggregation Engine - reduces shots into a portfolio snapshot."""

from collections.abc import Sequence
from dataclasses import dataclass

import polars as pl

from ..models.aggregated_metrics import AggregatedMetrics
from ..models.entries import METRIC_FIELDS, ShotAnalysisEntry
from .expressions import portfolio_aggregates_expr


@dataclass(frozen=True)
class MetricsAggregationEngine:
    """Portfolio calculator over the merged shot set of all stages.

    Pure reduction: the same shots always produce the same snapshot. Shot
    metrics are taken as already-averaged per-day values.

    Attributes:
        default_days_in_shot: Day count assumed for a shot that lacks one
    """

    default_days_in_shot: int = 3

    def compute(self, shots: Sequence[ShotAnalysisEntry]) -> AggregatedMetrics:
        """Compute AggregatedMetrics; all zeros for an empty shot set."""
        if not shots:
            return AggregatedMetrics.zeros()

        row = (
            self._to_frame(shots)
            .select(portfolio_aggregates_expr(self.default_days_in_shot))
            .to_dicts()[0]
        )

        total_ad_spent = row["total_ad_spent"]
        total_link_clicks = row["total_link_clicks"]
        avg_cpm = row["avg_cpm"]

        # Derived metrics
        cpc = total_ad_spent / total_link_clicks if total_link_clicks > 0 else 0.0
        total_impressions = (
            total_ad_spent / avg_cpm * 1000 if avg_cpm > 0 and total_ad_spent > 0 else 0.0
        )

        return AggregatedMetrics(**row, cpc=cpc, total_impressions=total_impressions)

    def _to_frame(self, shots: Sequence[ShotAnalysisEntry]) -> pl.DataFrame:
        data = {m: [float(getattr(s, m)) for s in shots] for m in METRIC_FIELDS}
        data["num_days_in_shot"] = [s.num_days_in_shot for s in shots]

        schema = {m: pl.Float64 for m in METRIC_FIELDS}
        schema["num_days_in_shot"] = pl.Int64
        return pl.DataFrame(data, schema=schema)
