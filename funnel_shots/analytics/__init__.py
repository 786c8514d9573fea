"""Analytics module for shot aggregation and portfolio metrics."""

from .calculator import MetricsAggregationEngine
from .shots import ShotAggregator, shot_id

__all__ = [
    "MetricsAggregationEngine",
    "ShotAggregator",
    "shot_id",
]
