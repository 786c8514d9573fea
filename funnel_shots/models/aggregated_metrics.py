"""AggregatedMetrics - portfolio-level snapshot for display and report export."""

import json
from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class AggregatedMetrics:
    """Portfolio totals and averages derived from the current shot set.

    Totals are estimates recovered from shot averages (avg * days in shot).
    Averages are unweighted means of the shot-level values.
    """

    # Extensive totals
    total_ad_spent: float = 0.0
    total_conversions: float = 0.0
    total_link_clicks: float = 0.0
    total_reach: float = 0.0
    total_lp_views: float = 0.0
    total_atcs: float = 0.0
    total_ics: float = 0.0

    # Intensive averages (every shot weighs the same)
    avg_cpm: float = 0.0
    avg_ctr: float = 0.0
    avg_roas: float = 0.0
    avg_cpa: float = 0.0
    avg_ad_frequency: float = 0.0

    # Derived
    cpc: float = 0.0  # total_ad_spent / total_link_clicks
    total_impressions: float = 0.0  # total_ad_spent / avg_cpm * 1000

    @classmethod
    def zeros(cls) -> "AggregatedMetrics":
        return cls()

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict, rounded for display."""
        return {
            "totals": {
                "ad_spent": round(self.total_ad_spent, 2),
                "conversions": round(self.total_conversions, 2),
                "link_clicks": round(self.total_link_clicks, 2),
                "reach": round(self.total_reach, 2),
                "landing_page_views": round(self.total_lp_views, 2),
                "add_to_carts": round(self.total_atcs, 2),
                "initiate_checkout": round(self.total_ics, 2),
                "impressions": round(self.total_impressions, 2),
            },
            "averages": {
                "cpm": round(self.avg_cpm, 2),
                "ctr_pct": round(self.avg_ctr * 100, 4),  # Convert to percentage
                "roas": round(self.avg_roas, 2),
                "cpa": round(self.avg_cpa, 2),
                "ad_frequency": round(self.avg_ad_frequency, 2),
            },
            "derived": {
                "cpc": round(self.cpc, 2),
            },
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def as_raw_dict(self) -> dict[str, float]:
        """Unrounded field values."""
        return asdict(self)

    def kpi_highlights(self) -> list[str]:
        """KPI lines embedded in exported report text."""
        return [
            f"Total Ad Spent: ${self.total_ad_spent:,.2f}",
            f"Total Conversions: {self.total_conversions:,.0f}",
            f"Average ROAS: {self.avg_roas:.2f}x",
            f"Average CPA: ${self.avg_cpa:.2f}",
            f"Average CPM: ${self.avg_cpm:.2f}",
            f"Average CTR: {self.avg_ctr * 100:.2f}%",
            f"Total Reach: {self.total_reach:,.0f}",
            f"Average Ad Frequency: {self.avg_ad_frequency:.2f}",
        ]
