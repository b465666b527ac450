"""Printable bonus application sheet for a single claim."""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from backend.core.schema import CatalogItem, Claim
from backend.domain import AllocationRole

TITLE = "關鍵構件一次合格獎金申請單"
WELD_HEADER = ["施工圖號", "#", "銲道編號", "熔填量 (est)", "分配人員", "UT 完成時間"]
SIGNATURES = ["廠長", "銲接主管", "電焊協調室", "品管部", "製表人"]
ROLE_LABELS = {AllocationRole.WELDER: "銲工", AllocationRole.FOREMAN: "領班"}
MIN_WELD_ROWS = 8

_thin = Side(style="thin")
_border = Border(left=_thin, right=_thin, top=_thin, bottom=_thin)
_header_fill = PatternFill("solid", fgColor="EEEEEE")


def _boxed_row(ws, row: int, values: list[object], *, header: bool = False) -> None:
    for col, value in enumerate(values, start=1):
        cell = ws.cell(row=row, column=col, value=value)
        cell.border = _border
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        if header:
            cell.font = Font(bold=True)
            cell.fill = _header_fill


def build_claim_sheet(claim: Claim, item: CatalogItem) -> Workbook:
    wb = Workbook()
    ws = wb.active
    ws.title = claim.sheet_no or "claim"

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(WELD_HEADER))
    ws["A1"] = TITLE
    ws["A1"].font = Font(bold=True, size=16)
    ws["A1"].alignment = Alignment(horizontal="center")

    serial = claim.items[0].item_serial if claim.items else ""
    info = [
        ("廠區", claim.workstation, "單號", claim.sheet_no),
        ("構件名稱", item.item_name, "申請日期", claim.submit_date),
        ("獎金總額", item.base_price, "構件編號", serial or "---"),
        ("銲工/領班", f"{item.welder_price} / {item.foreman_price}", "結算日", claim.summary_date or ""),
    ]
    row = 3
    for left_label, left_value, right_label, right_value in info:
        ws.cell(row=row, column=1, value=left_label).font = Font(bold=True)
        ws.cell(row=row, column=2, value=left_value)
        ws.cell(row=row, column=4, value=right_label).font = Font(bold=True)
        ws.cell(row=row, column=5, value=right_value)
        row += 1

    row += 1
    _boxed_row(ws, row, WELD_HEADER, header=True)
    names = ", ".join(a.worker_name for a in claim.allocations if a.worker_name)
    for index, line in enumerate(claim.items):
        row += 1
        _boxed_row(
            ws,
            row,
            [
                line.drawing_no,
                line.item_serial,
                line.weld_no,
                f"{line.weight:g} g",
                names if index == 0 else "同上",
                line.ut_date or claim.submit_date,
            ],
        )
    for _ in range(max(0, MIN_WELD_ROWS - len(claim.items))):
        row += 1
        _boxed_row(ws, row, [""] * len(WELD_HEADER))

    row += 2
    _boxed_row(ws, row, ["銲工每人獎金分配", f"共 {len(claim.allocations)} 人"], header=True)
    for allocation in claim.allocations:
        row += 1
        label = f"{allocation.worker_name or 'N/A'} ({ROLE_LABELS[allocation.role]})"
        _boxed_row(ws, row, [label, allocation.amount])

    row += 2
    _boxed_row(ws, row, SIGNATURES, header=True)
    row += 1
    _boxed_row(ws, row, ["", "", "", "", claim.applicant_name])
    ws.row_dimensions[row].height = 60

    for column, width in zip("ABCDEF", (28, 10, 12, 14, 30, 14)):
        ws.column_dimensions[column].width = width
    return wb


def export_claim_sheet(claim: Claim, item: CatalogItem, path: Path | None = None) -> bytes:
    """Render the sheet; also write it to ``path`` when given."""

    wb = build_claim_sheet(claim, item)
    buffer = BytesIO()
    wb.save(buffer)
    payload = buffer.getvalue()
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(payload)
    return payload
