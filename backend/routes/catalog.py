from __future__ import annotations

from fastapi import APIRouter, Query

from backend.application import get_claim_service

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/items")
async def list_items(grouped: bool = Query(default=False)) -> dict:
    catalog = get_claim_service().catalog
    if grouped:
        return {
            "groups": {
                category: [item.to_record() for item in items]
                for category, items in catalog.grouped().items()
            }
        }
    return {"items": [item.to_record() for item in catalog]}


@router.get("/items/{item_id}")
async def get_item(item_id: str) -> dict:
    return get_claim_service().get_item(item_id).to_record()


@router.get("/items/{item_id}/configurations")
async def list_configurations(item_id: str) -> dict:
    item = get_claim_service().get_item(item_id)
    return {"itemId": item.id, "configurations": item.configurations}
