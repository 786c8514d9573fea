"""Pydantic models for daily performance rows and aggregated shots."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FunnelStage(str, Enum):
    """Position in the marketing funnel an upload belongs to."""

    TOF = "TOF"  # Top of funnel
    MOF = "MOF"  # Middle of funnel
    BOF = "BOF"  # Bottom of funnel


# Order matters: it is the column order of exported shot blocks.
METRIC_FIELDS: tuple[str, ...] = (
    "cpm",
    "ctr",
    "reach",
    "link_clicks",
    "landing_page_views",
    "add_to_carts",
    "initiate_checkout",
    "conversions",
    "cpa",
    "roas",
    "ad_spent",
    "ad_frequency",
)


class MetricValues(BaseModel):
    """The twelve named performance metrics shared by rows and shots."""

    cpm: float  # Cost per mille
    ctr: float  # Decimal: 0.02 = 2%
    reach: float
    link_clicks: float
    landing_page_views: float
    add_to_carts: float
    initiate_checkout: float
    conversions: float
    cpa: float  # Cost per acquisition
    roas: float  # Return on ad spend, as a multiple
    ad_spent: float
    ad_frequency: float


class DailyPerformanceEntry(MetricValues):
    """Single validated day of data for one funnel stage.

    `date` is an opaque label; input order defines chronology.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    date: str


class ShotAnalysisEntry(MetricValues):
    """Aggregated reporting window of consecutive days.

    Each metric holds the per-day mean over the window's days.
    """

    model_config = ConfigDict(frozen=True)

    shot_id: str  # e.g. "TOF-Shot 1"
    start_date: str
    end_date: str
    funnel_stage: FunnelStage
    num_days_in_shot: Optional[int] = None  # None is read as the default window size
