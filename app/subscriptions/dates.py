from __future__ import annotations

import re
from datetime import date

MONTH_YEAR_FORMAT = "MM-YYYY"

_MONTH_YEAR_RE = re.compile(r"(\d{2})-(\d{4})", re.ASCII)


def parse_month_year(value: str) -> date:
    """Parse ``MM-YYYY`` into the first day of that month.

    Raises ``ValueError`` for anything else, including month ``13`` or a
    single-digit month such as ``1-2023``.
    """
    match = _MONTH_YEAR_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"expected {MONTH_YEAR_FORMAT}, got {value!r}")
    month, year = int(match.group(1)), int(match.group(2))
    return date(year, month, 1)


def format_month_year(value: date) -> str:
    return f"{value.month:02d}-{value.year:04d}"
