from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from backend.application import get_claim_service, get_user_service
from backend.core.schema import Record, User, UserPublic
from backend.domain import ClaimStatus, UserStatus
from backend.routes.deps import require_admin

router = APIRouter(prefix="/admin", tags=["admin"])


class StatusRequest(Record):
    status: ClaimStatus
    comment: str | None = None


class CommentRequest(Record):
    comment: str | None = None


@router.post("/claims/{claim_id}/status")
def change_status(claim_id: str, payload: StatusRequest, admin: User = Depends(require_admin)) -> dict:
    return get_claim_service().set_status(claim_id, payload.status, payload.comment).to_record()


@router.post("/claims/{claim_id}/comment")
def save_comment(claim_id: str, payload: CommentRequest, admin: User = Depends(require_admin)) -> dict:
    return get_claim_service().save_comment(claim_id, payload.comment).to_record()


@router.get("/users")
def list_users(
    status: UserStatus | None = Query(default=None),
    admin: User = Depends(require_admin),
) -> dict:
    users = get_user_service().list_users(status)
    return {"items": [UserPublic.from_user(user).to_record() for user in users]}


@router.post("/users/{user_id}/approve")
def approve_user(user_id: str, admin: User = Depends(require_admin)) -> dict:
    user = get_user_service().approve_user(user_id)
    return {"id": user_id, "updated": user is not None}


@router.post("/users/{user_id}/reject")
def reject_user(user_id: str, admin: User = Depends(require_admin)) -> dict:
    user = get_user_service().reject_user(user_id)
    return {"id": user_id, "updated": user is not None}
