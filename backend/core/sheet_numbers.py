"""Sheet numbers: ``YY`` + yard code + category code + two-digit serial.

Serials are derived by scanning the claims already stored, so two submissions
computed from the same snapshot receive the same number.  Callers that need
uniqueness must serialise generation and insert (see ``ClaimService``).
"""
from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping

from backend.domain import Category, Workstation

UNKNOWN_YARD = "99"
UNKNOWN_CATEGORY = "XX"

CATEGORY_CODES: dict[Category, str] = {
    Category.MATING: "MT",
    Category.TP: "TP",
    Category.JK: "JK",
}


def yard_code(workstation: str | None) -> str:
    try:
        return Workstation(workstation).value
    except ValueError:
        return UNKNOWN_YARD


def category_code(category: Category | str | None) -> str:
    if isinstance(category, Category):
        return CATEGORY_CODES[category]
    if category in CATEGORY_CODES.values():
        return str(category)
    try:
        return CATEGORY_CODES[Category(category)]
    except ValueError:
        return UNKNOWN_CATEGORY


def sheet_prefix(workstation: str | None, category: Category | str | None, *, today: date | None = None) -> str:
    year = (today or date.today()).strftime("%y")
    return f"{year}{yard_code(workstation)}{category_code(category)}"


def _sheet_no_of(claim: Any) -> str:
    if isinstance(claim, str):
        return claim
    if isinstance(claim, Mapping):
        return str(claim.get("sheetNo") or claim.get("sheet_no") or "")
    return str(getattr(claim, "sheet_no", "") or "")


def _serial(sheet_no: str) -> int | None:
    try:
        return int(sheet_no[-2:])
    except ValueError:
        return None


def generate_sheet_no(
    workstation: str | None,
    category: Category | str | None,
    existing_claims: Iterable[Any],
    *,
    today: date | None = None,
) -> str:
    """Return the next free sheet number for the workstation/category/year prefix."""

    prefix = sheet_prefix(workstation, category, today=today)
    serials = [
        serial
        for sheet_no in map(_sheet_no_of, existing_claims)
        if sheet_no.startswith(prefix)
        and (serial := _serial(sheet_no)) is not None
    ]
    next_serial = max(serials, default=0) + 1
    return f"{prefix}{next_serial:02d}"
