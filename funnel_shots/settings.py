"""Schema registry and pipeline settings.

Loads funnel_shots/config/schema_registry.yaml (or a caller-supplied file)
into typed Pydantic models.
"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from .exceptions import SchemaLoadError
from .models.entries import METRIC_FIELDS

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "config" / "schema_registry.yaml"


def normalize_header(name: str) -> str:
    """Case- and whitespace-insensitive header key ("LINK CLICKS" -> "linkclicks")."""
    return "".join(name.split()).lower()


class MetricColumn(BaseModel):
    """One metric column: typed field name, display label, accepted aliases."""

    field: str
    label: str
    aliases: list[str] = Field(default_factory=list)

    def header_keys(self) -> set[str]:
        return {normalize_header(self.label)} | {normalize_header(a) for a in self.aliases}


class ValidationSettings(BaseModel):
    max_reported_errors: int = Field(default=5, ge=1)


class AggregationSettings(BaseModel):
    shot_size: int = Field(default=3, ge=1)
    default_days_in_shot: int = Field(default=3, ge=1)


class LoggingSettings(BaseModel):
    level: str = "INFO"


class DailyPerformanceSchema(BaseModel):
    date_column: str = "DATE"
    metrics: list[MetricColumn]

    @model_validator(mode="after")
    def _check_metric_fields(self) -> "DailyPerformanceSchema":
        fields = [m.field for m in self.metrics]
        if sorted(fields) != sorted(METRIC_FIELDS):
            raise ValueError(
                f"Registry metrics {fields} do not match record fields {list(METRIC_FIELDS)}"
            )

        seen: dict[str, str] = {}
        for metric in self.metrics:
            for key in metric.header_keys():
                if key in seen and seen[key] != metric.field:
                    raise ValueError(
                        f"Header '{key}' is claimed by both {seen[key]} and {metric.field}"
                    )
                seen[key] = metric.field
        return self

    def header_lookup(self) -> dict[str, MetricColumn]:
        """Map normalized header text to its metric column."""
        return {key: m for m in self.metrics for key in m.header_keys()}

    def label_for(self, field: str) -> str:
        return next(m.label for m in self.metrics if m.field == field)


class SchemaRegistry(BaseModel):
    """Top-level registry settings."""

    daily_performance: DailyPerformanceSchema
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    aggregation: AggregationSettings = Field(default_factory=AggregationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_schema_registry(path: Optional[Path] = None) -> SchemaRegistry:
    """Load registry from YAML, defaulting to the bundled file."""
    path = path or DEFAULT_SCHEMA_PATH
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return SchemaRegistry.model_validate(data)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        raise SchemaLoadError(f"Failed to load schema from {path}: {e}") from e
