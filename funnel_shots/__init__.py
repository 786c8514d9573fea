"""Funnel-stage performance ingestion, shot aggregation and portfolio metrics."""

from .logging_config import setup_logging

__version__ = "0.1.0"

__all__ = ["setup_logging"]
