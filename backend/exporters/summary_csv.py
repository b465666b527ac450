from __future__ import annotations

from pathlib import Path
from typing import Iterable

import pandas as pd

from backend.core.catalog import Catalog
from backend.core.schema import Claim
from backend.domain import AllocationRole

COLUMNS = [
    "sheet_no",
    "workstation",
    "applicant",
    "category",
    "item_name",
    "submit_date",
    "summary_date",
    "status",
    "welds",
    "weld_numbers",
    "total_weight",
    "welder_amount",
    "foreman_amount",
    "allocated_amount",
    "component_bonus",
    "admin_comment",
]


def summary_frame(claims: Iterable[Claim], catalog: Catalog) -> pd.DataFrame:
    records = []
    for claim in claims:
        item = catalog.find(claim.master_item_id)
        welder_amount = sum(a.amount for a in claim.allocations if a.role is AllocationRole.WELDER)
        foreman_amount = sum(a.amount for a in claim.allocations if a.role is AllocationRole.FOREMAN)
        records.append({
            "sheet_no": claim.sheet_no,
            "workstation": claim.workstation,
            "applicant": claim.applicant_name,
            "category": item.category.value if item else "",
            "item_name": item.item_name if item else "Unknown",
            "submit_date": claim.submit_date,
            "summary_date": claim.summary_date or "",
            "status": claim.status.value,
            "welds": len(claim.items),
            "weld_numbers": ", ".join(line.weld_no for line in claim.items),
            "total_weight": sum(line.weight for line in claim.items),
            "welder_amount": welder_amount,
            "foreman_amount": foreman_amount,
            "allocated_amount": welder_amount + foreman_amount,
            "component_bonus": item.base_price if item else 0,
            "admin_comment": claim.admin_comment or "",
        })
    return pd.DataFrame(records, columns=COLUMNS)


CSV_ENCODING = "utf-8-sig"


def render_summary(claims: Iterable[Claim], catalog: Catalog) -> bytes:
    return summary_frame(claims, catalog).to_csv(index=False).encode(CSV_ENCODING)


def export_summary(path: Path, claims: Iterable[Claim], catalog: Catalog) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_summary(claims, catalog))
    return path
