"""Thin client for a hosted row-blob table (PostgREST style).

Every record is one row ``{"id": ..., "kind": "user" | "claim", "data": {...}}``
in a single table.  Filters use the ``column=eq.value`` query syntax.
"""
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

import httpx

from backend.core.errors import StoreError, UserAlreadyExistsError
from backend.core.schema import Claim, User
from backend.domain import ClaimStatus
from backend.infrastructure.store import CLAIMS, USERS

logger = logging.getLogger(__name__)


class RemoteTableClaimStore:
    """Claim store backed by a remote table reached over HTTP."""

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        *,
        table: str = "weldtrack_records",
        timeout: float = 15.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        parsed = urlparse(base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError("base_url must include scheme and host")

        self._table_url = f"{base_url.rstrip('/')}/{table}"
        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._headers = headers
        self._client = http_client or httpx.Client(timeout=timeout)
        self._owns_client = http_client is None

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        try:
            response = self._client.request(
                method,
                self._table_url,
                params=params,
                json=json,
                headers={**self._headers, **(headers or {})},
            )
        except httpx.HTTPError as exc:
            logger.warning("Remote table %s %s failed: %s", method, self._table_url, exc)
            raise StoreError("Storage backend unreachable") from exc
        return response

    @staticmethod
    def _check(response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("Remote table answered %s: %s", response.status_code, response.text[:200])
            raise StoreError(f"Storage backend error ({response.status_code})") from exc

    def _select(self, kind: str, record_id: str | None = None) -> list[dict]:
        params = {"select": "id,data", "kind": f"eq.{kind}", "order": "id"}
        if record_id is not None:
            params["id"] = f"eq.{record_id}"
        response = self._request("GET", params=params)
        self._check(response)
        rows = response.json()
        if not isinstance(rows, list):
            raise StoreError("Unexpected payload from storage backend")
        return [row.get("data") or {} for row in rows if isinstance(row, dict)]

    @staticmethod
    def _row(kind: str, record: dict) -> dict:
        return {"id": record["id"], "kind": kind, "data": record}

    # ------------------------------------------------------------------
    # users
    # ------------------------------------------------------------------
    def list_users(self) -> list[User]:
        return [User.model_validate(data) for data in self._select(USERS)]

    def get_user(self, user_id: str) -> User | None:
        rows = self._select(USERS, user_id)
        return User.model_validate(rows[0]) if rows else None

    def insert_user(self, user: User) -> None:
        response = self._request(
            "POST",
            json=self._row(USERS, user.to_record()),
            headers={"Prefer": "return=minimal"},
        )
        if response.status_code == httpx.codes.CONFLICT:
            raise UserAlreadyExistsError(f"Username {user.id!r} already exists")
        self._check(response)

    def update_user(self, user: User) -> bool:
        response = self._request(
            "PATCH",
            params={"id": f"eq.{user.id}", "kind": f"eq.{USERS}"},
            json={"data": user.to_record()},
            headers={"Prefer": "return=representation"},
        )
        self._check(response)
        return bool(response.json())

    # ------------------------------------------------------------------
    # claims
    # ------------------------------------------------------------------
    def list_claims(self) -> list[Claim]:
        return [Claim.model_validate(data) for data in self._select(CLAIMS)]

    def get_claim(self, claim_id: str) -> Claim | None:
        rows = self._select(CLAIMS, claim_id)
        return Claim.model_validate(rows[0]) if rows else None

    def upsert_claim(self, claim: Claim) -> None:
        response = self._request(
            "POST",
            params={"on_conflict": "id"},
            json=self._row(CLAIMS, claim.to_record()),
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )
        self._check(response)

    def update_claim_review(self, claim_id: str, status: ClaimStatus, comment: str | None = None) -> Claim | None:
        claim = self.get_claim(claim_id)
        if claim is None:
            return None
        update: dict[str, object] = {"status": ClaimStatus(status)}
        if comment:
            update["admin_comment"] = comment
        updated = claim.model_copy(update=update)
        response = self._request(
            "PATCH",
            params={"id": f"eq.{claim_id}", "kind": f"eq.{CLAIMS}"},
            json={"data": updated.to_record()},
            headers={"Prefer": "return=minimal"},
        )
        self._check(response)
        return updated

    def reset(self) -> None:
        for kind in (USERS, CLAIMS):
            response = self._request("DELETE", params={"kind": f"eq.{kind}"})
            self._check(response)

    def close(self) -> None:  # pragma: no cover - best effort cleanup
        if self._owns_client:
            self._client.close()


__all__ = ["RemoteTableClaimStore"]
