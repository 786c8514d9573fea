"""Custom exceptions for the ingestion pipeline."""

from collections.abc import Sequence


class IngestionError(Exception):
    """Base exception for ingestion errors."""

    pass


class SchemaLoadError(IngestionError):
    """Failed to load schema configuration."""

    pass


class SchemaError(IngestionError):
    """Header row is malformed or lacks required metric columns."""

    def __init__(self, message: str, missing_columns: Sequence[str] = ()):
        self.missing_columns = list(missing_columns)
        super().__init__(message)

    @classmethod
    def missing(cls, missing_columns: Sequence[str]) -> "SchemaError":
        return cls(
            f"Missing required columns in header: {', '.join(missing_columns)}. "
            "Please ensure they are present.",
            missing_columns,
        )


class EmptyDataError(IngestionError):
    """No usable data rows in the upload."""

    pass


class EmptyShotSetError(IngestionError):
    """Aggregation was given nothing to aggregate."""

    pass


# =============================================================================
# ROW-LEVEL ERRORS (collected by the validator, never raised on their own)
# =============================================================================


class RowValidationError(IngestionError):
    """A problem with a single data row.

    Instances are accumulated during a parse and surfaced together through
    ValidationFailure.
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class RowShapeError(RowValidationError):
    """Row has a different number of fields than the header."""

    def __init__(self, row_number: int, expected: int, actual: int):
        self.row_number = row_number
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Row {row_number}: Mismatched number of columns. "
            f"Expected {expected}, got {actual}."
        )


class MetricTypeError(RowValidationError):
    """Non-numeric value in a numeric column."""

    def __init__(self, date: str, column: str, raw_value: str):
        self.date = date
        self.column = column
        self.raw_value = raw_value
        super().__init__(
            f"Date {date}, Column '{column}': Expected a number, "
            f"but received '{raw_value}'."
        )


class MetricRangeError(RowValidationError):
    """Value outside a business-plausibility bound."""

    def __init__(self, date: str, rule_id: str, detail: str):
        self.date = date
        self.rule_id = rule_id
        self.detail = detail
        super().__init__(f"Date {date}: {detail}")


class ValidationFailure(IngestionError):
    """Validation produced one or more row-level errors.

    Only the first `limit` messages are shown; the rest are summarised as an
    overflow count.
    """

    def __init__(self, errors: Sequence[RowValidationError], limit: int = 5):
        self.errors = list(errors)
        self.limit = limit
        self.messages = [e.message for e in self.errors[:limit]]
        self.overflow = max(len(self.errors) - limit, 0)

        text = "\n".join(self.messages)
        if self.overflow > 0:
            text += f"\n...and {self.overflow} more errors."
        super().__init__(text)


class NarrativeResponseError(Exception):
    """External narrative generator returned an unusable response."""

    pass
