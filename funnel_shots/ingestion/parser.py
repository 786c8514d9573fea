"""Split raw upload text into a header and numbered data rows."""

from dataclasses import dataclass

from ..exceptions import EmptyDataError


@dataclass(frozen=True)
class RawRow:
    """One non-blank data line, split on commas and stripped.

    row_number is 1-based over non-blank lines, with the header as row 1.
    """

    row_number: int
    fields: list[str]

    @property
    def date(self) -> str:
        return self.fields[0] if self.fields else ""


def split_lines(text: str) -> list[str]:
    """Non-blank lines of the upload, in order."""
    return [line for line in text.strip().split("\n") if line.strip()]


def split_fields(line: str) -> list[str]:
    """Plain comma split. Quoting is not supported by the upload format."""
    return [part.strip() for part in line.split(",")]


def split_csv_text(text: str) -> tuple[list[str], list[RawRow]]:
    """Return (header cells, data rows).

    Rows whose fields are all empty (e.g. ",,,") are dropped silently.

    Raises:
        EmptyDataError: If there is no header plus at least one data line.
    """
    lines = split_lines(text)
    if len(lines) < 2:
        raise EmptyDataError(
            "File appears empty or invalid. "
            "Expected at least a header row and one data row."
        )

    header = split_fields(lines[0])
    rows: list[RawRow] = []
    for row_number, line in enumerate(lines[1:], start=2):
        fields = split_fields(line)
        if all(f == "" for f in fields):
            continue
        rows.append(RawRow(row_number=row_number, fields=fields))

    return header, rows
