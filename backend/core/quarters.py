"""Quarterly settlement calendar."""
from __future__ import annotations

from datetime import date

QUARTERS: dict[str, tuple[int, int]] = {
    "Q1": (1, 3),
    "Q2": (4, 6),
    "Q3": (7, 9),
    "Q4": (10, 12),
}

# month-day on which each quarter is settled; Q4 settles in the following year
SUMMARY_DAYS: dict[str, str] = {
    "Q1": "04-15",
    "Q2": "07-15",
    "Q3": "10-15",
    "Q4": "01-15",
}


def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def quarter_of(value: date | str) -> str:
    month = _as_date(value).month
    for quarter, (first, last) in QUARTERS.items():
        if first <= month <= last:
            return quarter
    raise ValueError(f"invalid month {month}")


def summary_date(submit_date: date | str) -> str:
    """Settlement date for a claim submitted on ``submit_date``."""

    submitted = _as_date(submit_date)
    quarter = quarter_of(submitted)
    year = submitted.year + 1 if quarter == "Q4" else submitted.year
    return f"{year}-{SUMMARY_DAYS[quarter]}"
