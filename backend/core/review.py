"""Admin review state machine for claims.

PENDING may move to APPROVED, or to REJECTED when a reason is given in the
same call.  APPROVED and REJECTED only return to PENDING; there is no direct
edge between them.
"""
from __future__ import annotations

from backend.core.errors import ClaimLockedError, EmptyRejectionCommentError, InvalidTransitionError
from backend.core.schema import Claim
from backend.domain import ClaimStatus

ALLOWED_TRANSITIONS: dict[ClaimStatus, set[ClaimStatus]] = {
    ClaimStatus.PENDING: {ClaimStatus.APPROVED, ClaimStatus.REJECTED},
    ClaimStatus.APPROVED: {ClaimStatus.PENDING},
    ClaimStatus.REJECTED: {ClaimStatus.PENDING},
}


def _clean(comment: str | None) -> str | None:
    if comment is None:
        return None
    stripped = comment.strip()
    return stripped or None


def can_transition(current: ClaimStatus, target: ClaimStatus) -> bool:
    return current == target or target in ALLOWED_TRANSITIONS[current]


def transition(claim: Claim, target: ClaimStatus, comment: str | None = None) -> Claim:
    """Return a copy of ``claim`` moved to ``target``; the input is left untouched."""

    target = ClaimStatus(target)
    if not can_transition(claim.status, target):
        raise InvalidTransitionError(
            f"Cannot move claim {claim.sheet_no} from {claim.status.value} to {target.value}"
        )

    note = _clean(comment)
    if target is ClaimStatus.REJECTED and claim.status is not ClaimStatus.REJECTED and note is None:
        raise EmptyRejectionCommentError()

    update: dict[str, object] = {"status": target}
    if note is not None:
        update["admin_comment"] = note
    return claim.model_copy(update=update)


def save_comment(claim: Claim, comment: str | None) -> Claim:
    """Attach an admin note without touching the status; a blank note changes nothing."""

    note = _clean(comment)
    if note is None:
        return claim.model_copy()
    return claim.model_copy(update={"admin_comment": note})


def ensure_editable(claim: Claim) -> None:
    if claim.status is not ClaimStatus.PENDING:
        raise ClaimLockedError(f"Claim {claim.sheet_no} is {claim.status.value} and can no longer be edited")
