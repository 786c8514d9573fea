"""Schema Validator - turns raw upload text into validated daily rows."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import polars as pl

from ..exceptions import (
    EmptyDataError,
    MetricRangeError,
    MetricTypeError,
    RowShapeError,
    RowValidationError,
    SchemaError,
    ValidationFailure,
)
from ..models.entries import METRIC_FIELDS, DailyPerformanceEntry, FunnelStage
from ..settings import SchemaRegistry, normalize_header
from .cleaner import (
    apply_cleaning,
    fill_parsed_values,
    has_valid_number_expr,
    invalid_number_expr,
)
from .parser import RawRow, split_csv_text

logger = logging.getLogger(__name__)

LabelLookup = Callable[[str], str]


def format_number(value: float) -> str:
    """Render 2000.0 as "2000" and 0.025 as "0.025"."""
    if value.is_integer():
        return str(int(value))
    return str(value)


# =============================================================================
# PLAUSIBILITY RULES
# =============================================================================


@dataclass(frozen=True, eq=False)
class PlausibilityRule:
    """Cross-field business rule evaluated on parsed rows.

    `violated` is a boolean Polars expression over metric fields; `describe`
    builds the user-facing detail from the offending row.
    """

    rule_id: str
    violated: pl.Expr
    describe: Callable[[dict[str, Any], LabelLookup], str]


def non_negative_rule(field: str) -> PlausibilityRule:
    return PlausibilityRule(
        rule_id=f"{field}_negative",
        violated=pl.col(field) < 0,
        describe=lambda row, label: f"'{label(field)}' cannot be negative.",
    )


PLAUSIBILITY_RULES: tuple[PlausibilityRule, ...] = (
    non_negative_rule("ad_spent"),
    non_negative_rule("conversions"),
    non_negative_rule("link_clicks"),
    non_negative_rule("reach"),
    non_negative_rule("ad_frequency"),
    PlausibilityRule(
        rule_id="link_clicks_exceed_reach",
        violated=(pl.col("link_clicks") > 0)
        & (pl.col("reach") > 0)
        & (pl.col("link_clicks") > pl.col("reach")),
        describe=lambda row, label: (
            f"Logical error - '{label('link_clicks')}' "
            f"({format_number(row['link_clicks'])}) exceed "
            f"'{label('reach')}' ({format_number(row['reach'])})."
        ),
    ),
    PlausibilityRule(
        rule_id="ctr_out_of_range",
        violated=~pl.col("ctr").is_between(0, 1),
        describe=lambda row, label: (
            f"'{label('ctr')}' ({format_number(row['ctr'])}) is outside "
            "a plausible decimal range (0-1)."
        ),
    ),
    PlausibilityRule(
        rule_id="roas_negative",
        violated=pl.col("roas") < 0,
        describe=lambda row, label: (
            f"'{label('roas')}' ({format_number(row['roas'])}) cannot be negative."
        ),
    ),
)


# =============================================================================
# VALIDATOR
# =============================================================================


@dataclass(frozen=True)
class HeaderColumn:
    """Where a metric lives in the upload and what the client called it."""

    field: str
    index: int
    header_name: str


class SchemaValidator:
    """Parse and validate one funnel-stage upload.

    Row-level problems (shape, type, range) are collected across the whole
    file before failing, so the client sees every issue in one pass.

    Usage:
        validator = SchemaValidator(load_schema_registry())
        entries = validator.validate(csv_text, FunnelStage.TOF)
    """

    def __init__(
        self,
        registry: SchemaRegistry,
        rules: tuple[PlausibilityRule, ...] = PLAUSIBILITY_RULES,
    ):
        self.schema = registry.daily_performance
        self.max_reported_errors = registry.validation.max_reported_errors
        self.rules = rules

    def validate(self, text: str, stage: FunnelStage) -> list[DailyPerformanceEntry]:
        """Validate upload text and return daily rows in input order.

        Unparseable numbers are defaulted to 0 before the plausibility rules
        run, so a row with a type error can still record range errors. Any
        recorded error fails the whole upload.

        Raises:
            SchemaError: Header is malformed or missing required metrics.
            ValidationFailure: One or more row-level errors were recorded.
            EmptyDataError: No row carried a usable numeric value.
        """
        header, rows = split_csv_text(text)
        columns = self._resolve_header(header)

        errors: list[tuple[int, RowValidationError]] = []
        shaped: list[RawRow] = []
        for row in rows:
            if len(row.fields) != len(header):
                errors.append(
                    (row.row_number, RowShapeError(row.row_number, len(header), len(row.fields)))
                )
                continue
            shaped.append(row)

        df = self._to_frame(shaped, columns)
        df = apply_cleaning(df, list(METRIC_FIELDS))
        errors.extend(self._type_errors(df, columns))

        # Shape and type errors are reported in row order, range errors after.
        ordered: list[RowValidationError] = [
            e for _, e in sorted(errors, key=lambda item: item[0])
        ]

        valid = fill_parsed_values(
            df.filter(has_valid_number_expr(list(METRIC_FIELDS))),
            list(METRIC_FIELDS),
        )
        ordered.extend(self._range_errors(valid))

        if ordered:
            logger.warning(
                "%s upload failed validation with %d error(s)", stage.value, len(ordered)
            )
            raise ValidationFailure(ordered, limit=self.max_reported_errors)

        if len(valid) == 0:
            raise EmptyDataError("No valid daily performance data rows could be parsed.")

        entries = [
            DailyPerformanceEntry.model_validate(row)
            for row in valid.select(["date", *METRIC_FIELDS]).to_dicts()
        ]
        logger.info("%s upload validated: %d daily rows", stage.value, len(entries))
        return entries

    def _resolve_header(self, header: list[str]) -> list[HeaderColumn]:
        """Map header cells to metric fields.

        Raises SchemaError listing every missing metric, not just the first.
        """
        if not header or normalize_header(header[0]) != normalize_header(
            self.schema.date_column
        ):
            raise SchemaError(
                f"Invalid CSV header. Expected '{self.schema.date_column}' "
                "as the first column header."
            )

        metric_names = header[1:]
        if not any(metric_names):
            raise SchemaError("No metric columns found in the header row.")

        lookup = self.schema.header_lookup()
        columns: dict[str, HeaderColumn] = {}
        for index, name in enumerate(metric_names, start=1):
            metric = lookup.get(normalize_header(name))
            if metric is None:
                logger.debug("Ignoring unrecognised column '%s'", name)
                continue
            if metric.field in columns:
                logger.warning(
                    "Column '%s' duplicates '%s'; using the first",
                    name,
                    columns[metric.field].header_name,
                )
                continue
            columns[metric.field] = HeaderColumn(metric.field, index, name)

        missing = [m.label for m in self.schema.metrics if m.field not in columns]
        if missing:
            raise SchemaError.missing(missing)

        return sorted(columns.values(), key=lambda c: c.index)

    def _to_frame(self, rows: list[RawRow], columns: list[HeaderColumn]) -> pl.DataFrame:
        """Build a string-typed frame: row_number, date, one column per metric."""
        data: dict[str, list[Any]] = {
            "row_number": [r.row_number for r in rows],
            "date": [r.date for r in rows],
        }
        for col in columns:
            data[col.field] = [r.fields[col.index] for r in rows]

        schema = {"row_number": pl.Int64, "date": pl.Utf8}
        schema.update({col.field: pl.Utf8 for col in columns})
        return pl.DataFrame(data, schema=schema)

    def _type_errors(
        self, df: pl.DataFrame, columns: list[HeaderColumn]
    ) -> list[tuple[int, RowValidationError]]:
        """Non-empty values that failed to parse, in row then column order."""
        flagged = df.select(
            "row_number",
            "date",
            *[invalid_number_expr(c.field).alias(c.field) for c in columns],
            *[pl.col(c.field).alias(f"{c.field}__raw") for c in columns],
        )

        errors: list[tuple[int, RowValidationError]] = []
        for row in flagged.to_dicts():
            for col in columns:
                if row[col.field]:
                    errors.append(
                        (
                            row["row_number"],
                            MetricTypeError(row["date"], col.header_name, row[f"{col.field}__raw"]),
                        )
                    )
        return errors

    def _range_errors(self, df: pl.DataFrame) -> list[RowValidationError]:
        """Apply plausibility rules to parsed rows, in row then rule order."""
        if len(df) == 0:
            return []

        checked = df.with_columns(
            [rule.violated.alias(f"{rule.rule_id}__violated") for rule in self.rules]
        )

        errors: list[RowValidationError] = []
        for row in checked.to_dicts():
            for rule in self.rules:
                if row[f"{rule.rule_id}__violated"]:
                    errors.append(
                        MetricRangeError(
                            row["date"], rule.rule_id, rule.describe(row, self.schema.label_for)
                        )
                    )
        return errors
