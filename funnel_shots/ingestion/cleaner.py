"""Numeric coercion of raw string columns using Polars expressions."""

import polars as pl

VALUE_SUFFIX = "__value"


def value_column(col_name: str) -> str:
    return f"{col_name}{VALUE_SUFFIX}"


def clean_float_column(col_name: str) -> pl.Expr:
    """Parse a string column as float.

    Unparseable, empty and non-finite values become null.
    """
    parsed = pl.col(col_name).str.strip_chars().cast(pl.Float64, strict=False)
    return pl.when(parsed.is_finite()).then(parsed).otherwise(None)


def invalid_number_expr(col_name: str) -> pl.Expr:
    """True where the raw text is non-empty but did not parse."""
    return (pl.col(col_name).str.strip_chars() != "") & pl.col(
        value_column(col_name)
    ).is_null()


def has_valid_number_expr(col_names: list[str]) -> pl.Expr:
    """True where at least one column parsed to a number."""
    return pl.any_horizontal([pl.col(value_column(c)).is_not_null() for c in col_names])


def apply_cleaning(df: pl.DataFrame, float_cols: list[str]) -> pl.DataFrame:
    """Add a parsed `<col>__value` column next to each raw string column.

    Only cleans columns that exist in the DataFrame.
    """
    existing_cols = set(df.columns)
    exprs = [
        clean_float_column(col).alias(value_column(col))
        for col in float_cols
        if col in existing_cols
    ]

    if exprs:
        return df.with_columns(exprs)
    return df


def fill_parsed_values(df: pl.DataFrame, float_cols: list[str]) -> pl.DataFrame:
    """Replace raw columns with their parsed values, defaulting nulls to 0."""
    return df.with_columns(
        [pl.col(value_column(col)).fill_null(0.0).alias(col) for col in float_cols]
    ).drop([value_column(col) for col in float_cols])
