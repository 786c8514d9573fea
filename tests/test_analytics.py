"""Tests for the analytics module."""

import math

import pytest

from conftest import make_shot
from funnel_shots.analytics import MetricsAggregationEngine, ShotAggregator
from funnel_shots.exceptions import EmptyShotSetError
from funnel_shots.models import (
    METRIC_FIELDS,
    AggregatedMetrics,
    DailyPerformanceEntry,
    FunnelStage,
)


def make_entry(date: str, **overrides: float) -> DailyPerformanceEntry:
    values = {m: 1.0 for m in METRIC_FIELDS}
    values.update(overrides)
    return DailyPerformanceEntry(date=date, **values)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def seven_entries() -> list[DailyPerformanceEntry]:
    """Seven days with spend 100..700 and cpm 10..70."""
    return [
        make_entry(f"{i} Mar", ad_spent=float(i * 100), cpm=float(i * 10)) for i in range(1, 8)
    ]


@pytest.fixture
def aggregator() -> ShotAggregator:
    return ShotAggregator(shot_size=3)


@pytest.fixture
def engine() -> MetricsAggregationEngine:
    return MetricsAggregationEngine(default_days_in_shot=3)


# =============================================================================
# SHOT AGGREGATOR
# =============================================================================


class TestShotAggregator:
    """Tests for ShotAggregator.aggregate()."""

    def test_partitions_into_windows(
        self, aggregator: ShotAggregator, seven_entries: list[DailyPerformanceEntry]
    ) -> None:
        """7 days -> windows of 3, 3 and a trailing 1."""
        shots = aggregator.aggregate(seven_entries, FunnelStage.TOF)

        assert [s.num_days_in_shot for s in shots] == [3, 3, 1]
        assert [s.shot_id for s in shots] == ["TOF-Shot 1", "TOF-Shot 2", "TOF-Shot 3"]
        assert all(s.funnel_stage == FunnelStage.TOF for s in shots)

    def test_date_bounds(
        self, aggregator: ShotAggregator, seven_entries: list[DailyPerformanceEntry]
    ) -> None:
        shots = aggregator.aggregate(seven_entries, FunnelStage.TOF)
        assert [(s.start_date, s.end_date) for s in shots] == [
            ("1 Mar", "3 Mar"),
            ("4 Mar", "6 Mar"),
            ("7 Mar", "7 Mar"),
        ]

    def test_metrics_are_window_means(
        self, aggregator: ShotAggregator, seven_entries: list[DailyPerformanceEntry]
    ) -> None:
        """Each metric is the mean over exactly the window's days."""
        shots = aggregator.aggregate(seven_entries, FunnelStage.TOF)

        assert shots[0].ad_spent == pytest.approx(200.0)
        assert shots[1].ad_spent == pytest.approx(500.0)
        assert shots[2].ad_spent == pytest.approx(700.0)
        assert shots[1].cpm == pytest.approx(50.0)
        assert shots[0].reach == pytest.approx(1.0)

    def test_four_days_gives_partial_second_shot(self, aggregator: ShotAggregator) -> None:
        entries = [make_entry(f"{i} Mar") for i in range(1, 5)]
        shots = aggregator.aggregate(entries, FunnelStage.BOF)

        assert len(shots) == 2
        assert shots[1].num_days_in_shot == 1
        assert shots[1].shot_id == "BOF-Shot 2"

    @pytest.mark.parametrize("days", range(1, 11))
    def test_shot_count_and_day_total(self, aggregator: ShotAggregator, days: int) -> None:
        """ceil(days / 3) shots whose day counts add back up to days."""
        entries = [make_entry(f"d{i}") for i in range(days)]
        shots = aggregator.aggregate(entries, FunnelStage.MOF)

        assert len(shots) == math.ceil(days / 3)
        assert sum(s.num_days_in_shot for s in shots) == days

    def test_keeps_input_order(self, aggregator: ShotAggregator) -> None:
        """Date labels are never re-sorted."""
        entries = [make_entry(d) for d in ["9 Mar", "1 Mar", "5 Mar"]]
        shot = aggregator.aggregate(entries, FunnelStage.TOF)[0]
        assert (shot.start_date, shot.end_date) == ("9 Mar", "5 Mar")

    def test_custom_shot_size(self) -> None:
        entries = [make_entry(f"{i} Mar") for i in range(1, 6)]
        shots = ShotAggregator(shot_size=2).aggregate(entries, FunnelStage.TOF)
        assert [s.num_days_in_shot for s in shots] == [2, 2, 1]

    def test_empty_input_raises(self, aggregator: ShotAggregator) -> None:
        """Should raise EmptyShotSetError independently of the validator."""
        with pytest.raises(EmptyShotSetError):
            aggregator.aggregate([], FunnelStage.TOF)

    def test_rejects_zero_shot_size(self) -> None:
        with pytest.raises(ValueError):
            ShotAggregator(shot_size=0)


# =============================================================================
# METRICS AGGREGATION ENGINE
# =============================================================================


class TestMetricsAggregationEngine:
    """Tests for MetricsAggregationEngine.compute()."""

    def test_empty_shots_give_zeros(self, engine: MetricsAggregationEngine) -> None:
        """Should return all zeros, not raise."""
        result = engine.compute([])
        assert result == AggregatedMetrics()
        assert all(v == 0 for v in result.as_raw_dict().values())

    def test_totals_multiply_by_days(self, engine: MetricsAggregationEngine) -> None:
        """Totals are sum(avg * days) across shots."""
        shots = [
            make_shot(number=1, days=3, ad_spent=200.0, conversions=10.0),
            make_shot(number=2, days=1, ad_spent=700.0, conversions=4.0),
        ]
        result = engine.compute(shots)

        assert result.total_ad_spent == pytest.approx(1300.0)
        assert result.total_conversions == pytest.approx(34.0)

    def test_all_extensive_totals(self, engine: MetricsAggregationEngine) -> None:
        shot = make_shot(
            days=2,
            link_clicks=10.0,
            reach=100.0,
            landing_page_views=5.0,
            add_to_carts=3.0,
            initiate_checkout=2.0,
        )
        result = engine.compute([shot])

        assert result.total_link_clicks == pytest.approx(20.0)
        assert result.total_reach == pytest.approx(200.0)
        assert result.total_lp_views == pytest.approx(10.0)
        assert result.total_atcs == pytest.approx(6.0)
        assert result.total_ics == pytest.approx(4.0)

    def test_averages_are_unweighted(self, engine: MetricsAggregationEngine) -> None:
        """Every shot counts once regardless of its day count."""
        shots = [
            make_shot(number=1, days=3, cpm=10.0, ctr=0.01, roas=2.0, cpa=20.0, ad_frequency=1.0),
            make_shot(number=2, days=1, cpm=20.0, ctr=0.03, roas=4.0, cpa=40.0, ad_frequency=3.0),
        ]
        result = engine.compute(shots)

        assert result.avg_cpm == pytest.approx(15.0)
        assert result.avg_ctr == pytest.approx(0.02)
        assert result.avg_roas == pytest.approx(3.0)
        assert result.avg_cpa == pytest.approx(30.0)
        assert result.avg_ad_frequency == pytest.approx(2.0)

    def test_missing_day_count_defaults_to_three(self, engine: MetricsAggregationEngine) -> None:
        result = engine.compute([make_shot(days=None, ad_spent=100.0)])
        assert result.total_ad_spent == pytest.approx(300.0)

    def test_derived_metrics(self, engine: MetricsAggregationEngine) -> None:
        """CPC = spend / clicks; impressions = spend / avg CPM * 1000."""
        result = engine.compute([make_shot(days=3, ad_spent=100.0, link_clicks=50.0, cpm=10.0)])

        assert result.cpc == pytest.approx(2.0)
        assert result.total_impressions == pytest.approx(30000.0)

    def test_derived_metrics_guard_zero(self, engine: MetricsAggregationEngine) -> None:
        result = engine.compute([make_shot(days=3, ad_spent=100.0, link_clicks=0.0, cpm=0.0)])
        assert result.cpc == 0.0
        assert result.total_impressions == 0.0

    def test_idempotent(self, engine: MetricsAggregationEngine) -> None:
        """Same shots in, same snapshot out."""
        shots = [make_shot(number=i, days=3, ad_spent=float(i), cpm=2.0) for i in range(1, 5)]
        assert engine.compute(shots) == engine.compute(shots)

    def test_order_independent(self, engine: MetricsAggregationEngine) -> None:
        shots = [
            make_shot(FunnelStage.TOF, 1, days=3, ad_spent=10.0, cpm=5.0),
            make_shot(FunnelStage.BOF, 1, days=2, ad_spent=40.0, cpm=15.0),
        ]
        forward = engine.compute(shots).as_raw_dict()
        backward = engine.compute(list(reversed(shots))).as_raw_dict()
        assert forward == pytest.approx(backward)


# =============================================================================
# AGGREGATED METRICS OUTPUT
# =============================================================================


class TestAggregatedMetricsOutput:
    """Tests for AggregatedMetrics serialization and KPI lines."""

    def test_to_dict_rounds_and_converts_ctr(self) -> None:
        metrics = AggregatedMetrics(total_ad_spent=450.123, avg_ctr=0.021)
        result = metrics.to_dict()

        assert result["totals"]["ad_spent"] == 450.12
        assert result["averages"]["ctr_pct"] == pytest.approx(2.1)

    def test_to_json(self) -> None:
        assert '"totals"' in AggregatedMetrics().to_json()

    def test_kpi_highlights(self) -> None:
        metrics = AggregatedMetrics(
            total_ad_spent=1234.5, total_conversions=30, avg_roas=3.567, avg_ctr=0.021
        )
        lines = metrics.kpi_highlights()

        assert "Total Ad Spent: $1,234.50" in lines
        assert "Total Conversions: 30" in lines
        assert "Average ROAS: 3.57x" in lines
        assert "Average CTR: 2.10%" in lines
