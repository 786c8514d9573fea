"""Reusable Polars expressions for shot and portfolio calculations."""

import polars as pl

from ..models.entries import METRIC_FIELDS

# Metrics summed across shots (avg * days recovers an estimated total).
EXTENSIVE_METRICS: dict[str, str] = {
    "ad_spent": "total_ad_spent",
    "conversions": "total_conversions",
    "link_clicks": "total_link_clicks",
    "reach": "total_reach",
    "landing_page_views": "total_lp_views",
    "add_to_carts": "total_atcs",
    "initiate_checkout": "total_ics",
}

# Metrics averaged across shots, each shot weighted equally.
INTENSIVE_METRICS: dict[str, str] = {
    "cpm": "avg_cpm",
    "ctr": "avg_ctr",
    "roas": "avg_roas",
    "cpa": "avg_cpa",
    "ad_frequency": "avg_ad_frequency",
}


# =============================================================================
# SHOT WINDOWS
# =============================================================================


def shot_index_expr(shot_size: int) -> pl.Expr:
    """0-based window index for each row: row_nr // shot_size."""
    return (pl.col("row_nr") // shot_size).alias("shot_index")


def shot_window_expr() -> list[pl.Expr]:
    """Expressions for one shot: date bounds, day count, per-day means."""
    return [
        pl.col("date").first().alias("start_date"),
        pl.col("date").last().alias("end_date"),
        pl.len().alias("num_days_in_shot"),
        *[pl.col(m).mean().alias(m) for m in METRIC_FIELDS],
    ]


# =============================================================================
# PORTFOLIO AGGREGATES
# =============================================================================


def days_in_shot_expr(default_days: int) -> pl.Expr:
    """Day count per shot, treating a missing count as the default window."""
    return pl.col("num_days_in_shot").fill_null(default_days)


def estimated_total_expr(metric: str, default_days: int) -> pl.Expr:
    """Sum over shots of (shot average * days in shot)."""
    return (pl.col(metric) * days_in_shot_expr(default_days)).sum()


def portfolio_aggregates_expr(default_days: int) -> list[pl.Expr]:
    """Expressions for extensive totals and intensive averages."""
    return [
        *[
            estimated_total_expr(metric, default_days).alias(name)
            for metric, name in EXTENSIVE_METRICS.items()
        ],
        *[pl.col(metric).mean().alias(name) for metric, name in INTENSIVE_METRICS.items()],
    ]
