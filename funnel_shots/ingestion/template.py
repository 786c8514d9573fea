"""Downloadable upload template with the canonical header."""

TEMPLATE_HEADER = [
    "DATE",
    "CPM",
    "CTR",
    "REACH",
    "LINK CLICKS",
    "Landing page views",
    "Add to carts",
    "initiate checkout",
    "Conversions",
    "CPA",
    "ROAS",
    "Ad spent",
    "AD FREQUENCY",
]

TEMPLATE_ROWS = [
    ["1 Mar", "10.50", "0.02", "50000", "1000", "500", "50", "30", "10", "15.00", "3.50", "150.00", "1.8"],
    ["2 Mar", "11.20", "0.025", "55000", "1375", "600", "65", "40", "12", "12.50", "4.00", "150.00", "2.1"],
    ["3 Mar", "9.80", "0.018", "48000", "864", "450", "40", "25", "8", "18.75", "3.20", "150.00", "1.9"],
]


def build_csv_template(delimiter: str = ",") -> str:
    """Header plus three sample days.

    Pass delimiter="\\t" for the variant that pastes cleanly into a spreadsheet.
    """
    lines = [delimiter.join(TEMPLATE_HEADER)]
    lines.extend(delimiter.join(row) for row in TEMPLATE_ROWS)
    return "\n".join(lines)
