from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Response, status

from backend.application import get_claim_service
from backend.core.schema import Allocation, ClaimDraft, ISODate, Record, User
from backend.domain import ClaimStatus
from backend.exporters.claim_sheet_xlsx import export_claim_sheet
from backend.exporters.summary_csv import render_summary
from backend.routes.deps import get_current_user

router = APIRouter(prefix="/claims", tags=["claims"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class DraftRequest(Record):
    master_item_id: str
    config_name: str | None = None
    item_serial: str = ""
    submit_date: ISODate | None = None


class AllocationsRequest(Record):
    master_item_id: str
    allocations: list[Allocation]


@router.post("/draft")
def draft_claim(payload: DraftRequest, user: User = Depends(get_current_user)) -> dict:
    draft = get_claim_service().draft(
        payload.master_item_id,
        config_name=payload.config_name,
        item_serial=payload.item_serial,
        submit_date=payload.submit_date,
    )
    return {
        "item": draft["item"].to_record(),
        "configurations": draft["configurations"],
        "configName": draft["config_name"],
        "lineItems": [line.to_record() for line in draft["line_items"]],
        "allocations": [row.to_record() for row in draft["allocations"]],
        "budget": draft["budget"].as_dict(),
    }


@router.post("/distribute")
def distribute(payload: AllocationsRequest, user: User = Depends(get_current_user)) -> dict:
    rows = get_claim_service().distribute(payload.master_item_id, payload.allocations)
    return {"allocations": [row.to_record() for row in rows]}


@router.post("/validate")
def validate_budget(payload: AllocationsRequest, user: User = Depends(get_current_user)) -> dict:
    return get_claim_service().check_budget(payload.master_item_id, payload.allocations).as_dict()


@router.post("", status_code=status.HTTP_201_CREATED)
def submit_claim(payload: ClaimDraft, user: User = Depends(get_current_user)) -> dict:
    return get_claim_service().submit(user, payload).to_record()


@router.get("")
def list_claims(
    quarter: str | None = Query(default=None, pattern=r"^Q[1-4]$"),
    status_filter: ClaimStatus | None = Query(default=None, alias="status"),
    q: str | None = Query(default=None),
    user: User = Depends(get_current_user),
) -> dict:
    claims = get_claim_service().list_claims(user, quarter=quarter, status=status_filter, search=q)
    return {"items": [claim.to_record() for claim in claims]}


@router.get("/applied")
def check_applied(
    weld_no: str = Query(..., alias="weldNo"),
    master_item_id: str = Query(..., alias="masterItemId"),
    user: User = Depends(get_current_user),
) -> dict:
    return {"applied": get_claim_service().check_if_applied(weld_no, master_item_id)}


@router.get("/export.csv")
def export_claims_csv(
    quarter: str | None = Query(default=None, pattern=r"^Q[1-4]$"),
    status_filter: ClaimStatus | None = Query(default=None, alias="status"),
    user: User = Depends(get_current_user),
) -> Response:
    service = get_claim_service()
    claims = service.list_claims(user, quarter=quarter, status=status_filter)
    return Response(
        content=render_summary(claims, service.catalog),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="summary.csv"'},
    )


@router.get("/{claim_id}")
def get_claim(claim_id: str, user: User = Depends(get_current_user)) -> dict:
    return get_claim_service().get(claim_id).to_record()


@router.put("/{claim_id}")
def update_claim(claim_id: str, payload: ClaimDraft, user: User = Depends(get_current_user)) -> dict:
    return get_claim_service().update(user, claim_id, payload).to_record()


@router.get("/{claim_id}/sheet.xlsx")
def claim_sheet(claim_id: str, user: User = Depends(get_current_user)) -> Response:
    service = get_claim_service()
    claim = service.get(claim_id)
    content = export_claim_sheet(claim, service.get_item(claim.master_item_id))
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{claim.sheet_no}.xlsx"'},
    )
