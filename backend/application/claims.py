"""Application service layer for bonus claims."""
from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, Iterable
from uuid import uuid4

from backend.core import budget, claim_builder, review
from backend.core.catalog import Catalog
from backend.core.errors import ClaimItemChangedError, ClaimNotFoundError, PermissionDeniedError
from backend.core.quarters import quarter_of, summary_date
from backend.core.schema import Allocation, CatalogItem, Claim, ClaimDraft, User
from backend.core.sheet_numbers import generate_sheet_no
from backend.domain import BudgetCheck, ClaimStatus, UserRole
from backend.infrastructure import ClaimStore

logger = logging.getLogger(__name__)


class ClaimService:
    """Coordinates claim authoring, review and reporting use cases."""

    def __init__(
        self,
        store: ClaimStore,
        catalog: Catalog,
        *,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._clock = clock
        # sheet numbering and insert form one critical section within this process
        self._submit_lock = threading.Lock()

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _today(self) -> str:
        return self._clock().isoformat()

    def _save(self, claim: Claim) -> Claim:
        stamped = claim.model_copy(update={"summary_date": summary_date(claim.submit_date)})
        self._store.upsert_claim(stamped)
        return stamped

    @staticmethod
    def _ensure_author(user: User) -> None:
        if user.role is UserRole.GUEST:
            raise PermissionDeniedError("Guests have read-only access")

    # ------------------------------------------------------------------
    # authoring helpers
    # ------------------------------------------------------------------
    def get_item(self, item_id: str) -> CatalogItem:
        return self._catalog.get(item_id)

    def draft(
        self,
        item_id: str,
        *,
        config_name: str | None = None,
        item_serial: str = "",
        submit_date: str | None = None,
    ) -> dict[str, object]:
        """Default weld lines and roster for a freshly selected catalog item."""

        item = self.get_item(item_id)
        configurations = item.configurations
        selected = config_name or (configurations[0] if configurations else "")
        lines = claim_builder.build_line_items(
            item,
            selected,
            item_serial,
            submit_date=submit_date or self._today(),
        )
        allocations = claim_builder.build_default_allocations(item)
        return {
            "item": item,
            "configurations": configurations,
            "config_name": selected,
            "line_items": lines,
            "allocations": allocations,
            "budget": budget.validate(allocations, item),
        }

    def distribute(self, item_id: str, allocations: Iterable[Allocation]) -> list[Allocation]:
        return claim_builder.redistribute(allocations, self.get_item(item_id))

    def check_budget(self, item_id: str, allocations: Iterable[Allocation]) -> BudgetCheck:
        return budget.validate(allocations, self.get_item(item_id))

    # ------------------------------------------------------------------
    # submission & editing
    # ------------------------------------------------------------------
    def submit(self, user: User, draft: ClaimDraft) -> Claim:
        self._ensure_author(user)
        item = self.get_item(draft.master_item_id)
        budget.ensure_submittable(draft.items, draft.allocations, item)

        with self._submit_lock:
            sheet_no = generate_sheet_no(
                user.workstation,
                item.category,
                self._store.list_claims(),
                today=self._clock(),
            )
            claim = Claim(
                id=str(uuid4()),
                sheet_no=sheet_no,
                workstation=user.workstation,
                applicant_name=user.name,
                submit_date=draft.submit_date or self._today(),
                master_item_id=item.id,
                items=draft.items,
                allocations=draft.allocations,
                status=ClaimStatus.PENDING,
            )
            saved = self._save(claim)

        logger.info("Claim %s submitted by %s (%s)", saved.sheet_no, user.id, item.item_name)
        return saved

    def update(self, user: User, claim_id: str, draft: ClaimDraft) -> Claim:
        """Re-save a pending claim with new content; identity and sheet number are kept."""

        self._ensure_author(user)
        existing = self.get(claim_id)
        if user.role is not UserRole.ADMIN and (
            existing.workstation != user.workstation or existing.applicant_name != user.name
        ):
            raise PermissionDeniedError("Only the submitting applicant may edit this claim")
        review.ensure_editable(existing)
        # the sheet number encodes the item category
        if draft.master_item_id != existing.master_item_id:
            raise ClaimItemChangedError(
                f"Claim {existing.sheet_no} belongs to item {existing.master_item_id!r}, not {draft.master_item_id!r}"
            )

        item = self.get_item(existing.master_item_id)
        budget.ensure_submittable(draft.items, draft.allocations, item)
        updated = existing.model_copy(
            update={
                "submit_date": draft.submit_date or existing.submit_date,
                "items": draft.items,
                "allocations": draft.allocations,
            }
        )
        saved = self._save(updated)
        logger.info("Claim %s updated by %s", saved.sheet_no, user.id)
        return saved

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    def get(self, claim_id: str) -> Claim:
        claim = self._store.get_claim(claim_id)
        if claim is None:
            raise ClaimNotFoundError(f"Claim {claim_id!r} not found")
        return claim

    def list_claims(
        self,
        user: User,
        *,
        quarter: str | None = None,
        status: ClaimStatus | None = None,
        search: str | None = None,
    ) -> list[Claim]:
        """Summary listing, newest first; workers only see their own workstation."""

        claims = self._store.list_claims()
        if user.role is UserRole.WORKER:
            claims = [claim for claim in claims if claim.workstation == user.workstation]
        if quarter:
            claims = [claim for claim in claims if quarter_of(claim.submit_date) == quarter]
        if status is not None:
            claims = [claim for claim in claims if claim.status is status]
        if search:
            keyword = search.strip().lower()
            claims = [
                claim
                for claim in claims
                if keyword in claim.sheet_no.lower()
                or keyword in claim.applicant_name.lower()
                or any(keyword in line.weld_no.lower() for line in claim.items)
            ]
        claims.sort(key=lambda claim: claim.submit_date, reverse=True)
        return claims

    def check_if_applied(self, weld_no: str, master_item_id: str) -> bool:
        """True when a live claim for the item already lists the weld."""

        return any(
            claim.master_item_id == master_item_id
            and claim.status is not ClaimStatus.REJECTED
            and any(line.weld_no == weld_no for line in claim.items)
            for claim in self._store.list_claims()
        )

    # ------------------------------------------------------------------
    # review
    # ------------------------------------------------------------------
    def set_status(self, claim_id: str, status: ClaimStatus, comment: str | None = None) -> Claim:
        claim = self.get(claim_id)
        moved = review.transition(claim, ClaimStatus(status), comment)
        saved = self._store.update_claim_review(claim_id, moved.status, moved.admin_comment)
        if saved is None:
            raise ClaimNotFoundError(f"Claim {claim_id!r} not found")
        logger.info("Claim %s moved %s -> %s", claim.sheet_no, claim.status.value, saved.status.value)
        return saved

    def save_comment(self, claim_id: str, comment: str | None) -> Claim:
        claim = review.save_comment(self.get(claim_id), comment)
        saved = self._store.update_claim_review(claim_id, claim.status, claim.admin_comment)
        if saved is None:
            raise ClaimNotFoundError(f"Claim {claim_id!r} not found")
        return saved

    # ------------------------------------------------------------------
    # notifications
    # ------------------------------------------------------------------
    def pending_count(self) -> int:
        return sum(1 for claim in self._store.list_claims() if claim.status is ClaimStatus.PENDING)

    def rejected_count_for(self, user: User) -> int:
        return sum(
            1
            for claim in self._store.list_claims()
            if claim.applicant_name == user.name and claim.status is ClaimStatus.REJECTED
        )
