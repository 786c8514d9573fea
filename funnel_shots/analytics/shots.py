"""Shot Aggregator - folds consecutive daily rows into fixed-size windows."""

import logging
from collections.abc import Sequence

import polars as pl

from ..exceptions import EmptyShotSetError
from ..models.entries import (
    METRIC_FIELDS,
    DailyPerformanceEntry,
    FunnelStage,
    ShotAnalysisEntry,
)
from .expressions import shot_index_expr, shot_window_expr

logger = logging.getLogger(__name__)


def shot_id(stage: FunnelStage, number: int) -> str:
    """Stable identifier, e.g. "TOF-Shot 1"."""
    return f"{stage.value}-Shot {number}"


class ShotAggregator:
    """Partition one stage's daily rows into windows of `shot_size` days.

    A trailing partial window is kept as its own shot. Input order is
    chronology; rows are never re-sorted.
    """

    def __init__(self, shot_size: int = 3):
        if shot_size < 1:
            raise ValueError("shot_size must be at least 1")
        self.shot_size = shot_size

    def aggregate(
        self,
        entries: Sequence[DailyPerformanceEntry],
        stage: FunnelStage,
    ) -> list[ShotAnalysisEntry]:
        """Return shots numbered 1..N in input order.

        Raises:
            EmptyShotSetError: If there are no entries.
        """
        if not entries:
            raise EmptyShotSetError(
                f"No valid {self.shot_size}-day performance shots could be aggregated."
            )

        df = pl.DataFrame(
            {
                "date": [e.date for e in entries],
                **{m: [getattr(e, m) for e in entries] for m in METRIC_FIELDS},
            },
            schema={"date": pl.Utf8, **{m: pl.Float64 for m in METRIC_FIELDS}},
        )

        windows = (
            df.with_row_index("row_nr")
            .with_columns(shot_index_expr(self.shot_size))
            .group_by("shot_index", maintain_order=True)
            .agg(shot_window_expr())
            .sort("shot_index")
        )

        shots = [
            ShotAnalysisEntry(
                shot_id=shot_id(stage, row["shot_index"] + 1),
                start_date=row["start_date"],
                end_date=row["end_date"],
                funnel_stage=stage,
                num_days_in_shot=row["num_days_in_shot"],
                **{m: row[m] for m in METRIC_FIELDS},
            )
            for row in windows.to_dicts()
        ]

        logger.debug(
            "%s: aggregated %d daily rows into %d shots", stage.value, len(entries), len(shots)
        )
        return shots
