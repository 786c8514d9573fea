"""Shared fixtures for funnel_shots tests."""

import pytest

from funnel_shots.models import FunnelStage, ShotAnalysisEntry
from funnel_shots.settings import SchemaRegistry, load_schema_registry

HEADER = (
    "DATE,CPM,CTR,REACH,LINK CLICKS,Landing page views,Add to carts,"
    "initiate checkout,Conversions,CPA,ROAS,Ad spent,AD FREQUENCY"
)


def make_row(
    date: str,
    *,
    cpm: str = "10",
    ctr: str = "0.02",
    reach: str = "50000",
    link_clicks: str = "1000",
    lp_views: str = "500",
    atc: str = "50",
    ic: str = "30",
    conversions: str = "10",
    cpa: str = "15",
    roas: str = "3.5",
    ad_spent: str = "150",
    frequency: str = "1.8",
) -> str:
    """One CSV data line in HEADER column order."""
    return ",".join(
        [date, cpm, ctr, reach, link_clicks, lp_views, atc, ic, conversions, cpa, roas, ad_spent, frequency]
    )


def make_csv(*rows: str, header: str = HEADER) -> str:
    return "\n".join([header, *rows])


def make_shot(
    stage: FunnelStage = FunnelStage.TOF,
    number: int = 1,
    days: int | None = 3,
    **metrics: float,
) -> ShotAnalysisEntry:
    """Shot with every metric 0 unless overridden."""
    values = {
        "cpm": 0.0,
        "ctr": 0.0,
        "reach": 0.0,
        "link_clicks": 0.0,
        "landing_page_views": 0.0,
        "add_to_carts": 0.0,
        "initiate_checkout": 0.0,
        "conversions": 0.0,
        "cpa": 0.0,
        "roas": 0.0,
        "ad_spent": 0.0,
        "ad_frequency": 0.0,
    }
    values.update(metrics)
    return ShotAnalysisEntry(
        shot_id=f"{stage.value}-Shot {number}",
        start_date=f"{number} Mar",
        end_date=f"{number} Mar",
        funnel_stage=stage,
        num_days_in_shot=days,
        **values,
    )


@pytest.fixture
def registry() -> SchemaRegistry:
    """Bundled schema registry."""
    return load_schema_registry()


@pytest.fixture
def three_day_csv() -> str:
    """Three valid days: spend 150 each, conversions 10/12/8."""
    return make_csv(
        make_row("1 Mar", cpm="10.50", ctr="0.02", conversions="10"),
        make_row("2 Mar", cpm="11.20", ctr="0.025", conversions="12"),
        make_row("3 Mar", cpm="9.80", ctr="0.018", conversions="8"),
    )


@pytest.fixture
def seven_day_csv() -> str:
    """Seven valid days with spend 100..700."""
    return make_csv(
        *[make_row(f"{i} Mar", ad_spent=str(i * 100), conversions=str(i)) for i in range(1, 8)]
    )
