"""Persistence contract for users and claims."""
from __future__ import annotations

import copy
from typing import Protocol

from backend.core.errors import UserAlreadyExistsError
from backend.core.schema import Claim, User
from backend.domain import ClaimStatus

USERS = "user"
CLAIMS = "claim"


class ClaimStore(Protocol):
    """Key/value contract over user and claim records.

    Updates are whole-record read-modify-write; concurrent writers to the same
    record follow last-writer-wins.
    """

    def list_users(self) -> list[User]: ...

    def get_user(self, user_id: str) -> User | None: ...

    def insert_user(self, user: User) -> None: ...

    def update_user(self, user: User) -> bool: ...

    def list_claims(self) -> list[Claim]: ...

    def get_claim(self, claim_id: str) -> Claim | None: ...

    def upsert_claim(self, claim: Claim) -> None: ...

    def update_claim_review(self, claim_id: str, status: ClaimStatus, comment: str | None = None) -> Claim | None: ...

    def reset(self) -> None: ...


class RecordClaimStore:
    """Implements the store contract on top of two lists of raw records.

    Subclasses only decide where the lists live.
    """

    # ------------------------------------------------------------------
    # storage hooks
    # ------------------------------------------------------------------
    def _read_rows(self, kind: str) -> list[dict]:
        raise NotImplementedError

    def _write_rows(self, kind: str, rows: list[dict]) -> None:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # users
    # ------------------------------------------------------------------
    def list_users(self) -> list[User]:
        return [User.model_validate(row) for row in self._read_rows(USERS)]

    def get_user(self, user_id: str) -> User | None:
        for row in self._read_rows(USERS):
            if row.get("id") == user_id:
                return User.model_validate(row)
        return None

    def insert_user(self, user: User) -> None:
        rows = self._read_rows(USERS)
        if any(row.get("id") == user.id for row in rows):
            raise UserAlreadyExistsError(f"Username {user.id!r} already exists")
        rows.append(user.to_record())
        self._write_rows(USERS, rows)

    def update_user(self, user: User) -> bool:
        rows = self._read_rows(USERS)
        for index, row in enumerate(rows):
            if row.get("id") == user.id:
                rows[index] = user.to_record()
                self._write_rows(USERS, rows)
                return True
        return False

    # ------------------------------------------------------------------
    # claims
    # ------------------------------------------------------------------
    def list_claims(self) -> list[Claim]:
        return [Claim.model_validate(row) for row in self._read_rows(CLAIMS)]

    def get_claim(self, claim_id: str) -> Claim | None:
        for row in self._read_rows(CLAIMS):
            if row.get("id") == claim_id:
                return Claim.model_validate(row)
        return None

    def upsert_claim(self, claim: Claim) -> None:
        rows = self._read_rows(CLAIMS)
        record = claim.to_record()
        for index, row in enumerate(rows):
            if row.get("id") == claim.id:
                rows[index] = record
                break
        else:
            rows.append(record)
        self._write_rows(CLAIMS, rows)

    def update_claim_review(self, claim_id: str, status: ClaimStatus, comment: str | None = None) -> Claim | None:
        rows = self._read_rows(CLAIMS)
        for index, row in enumerate(rows):
            if row.get("id") != claim_id:
                continue
            updated = dict(row, status=ClaimStatus(status).value)
            if comment:
                updated["adminComment"] = comment
            rows[index] = updated
            self._write_rows(CLAIMS, rows)
            return Claim.model_validate(updated)
        return None

    def reset(self) -> None:
        self._write_rows(USERS, [])
        self._write_rows(CLAIMS, [])


class InMemoryClaimStore(RecordClaimStore):
    """Simple in-memory store for fast iteration and tests."""

    def __init__(self) -> None:
        self._tables: dict[str, list[dict]] = {USERS: [], CLAIMS: []}

    def _read_rows(self, kind: str) -> list[dict]:
        return copy.deepcopy(self._tables[kind])

    def _write_rows(self, kind: str, rows: list[dict]) -> None:
        self._tables[kind] = copy.deepcopy(rows)
