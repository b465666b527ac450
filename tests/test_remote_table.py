from __future__ import annotations

import json
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import httpx
import pytest

from backend.core.errors import StoreError, UserAlreadyExistsError
from backend.core.schema import Claim, User
from backend.domain import ClaimStatus
from backend.infrastructure import RemoteTableClaimStore

BASE_URL = "https://db.example.test/rest/v1"


def _store(handler) -> RemoteTableClaimStore:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return RemoteTableClaimStore(BASE_URL, "anon-key", table="records", http_client=http_client)


def _claim_data(**overrides) -> dict:
    data = {
        "id": "c1",
        "sheetNo": "24Y1TP01",
        "workstation": "Y1",
        "applicantName": "Alice",
        "submitDate": "2024-02-10",
        "masterItemId": "7",
        "items": [],
        "allocations": [],
        "status": "PENDING",
    }
    data.update(overrides)
    return data


def test_list_claims_filters_by_kind_and_sends_key():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["params"] = dict(request.url.params)
        captured["headers"] = request.headers
        return httpx.Response(200, json=[{"id": "c1", "data": _claim_data()}])

    claims = _store(handler).list_claims()

    assert [claim.sheet_no for claim in claims] == ["24Y1TP01"]
    assert captured["method"] == "GET"
    assert captured["path"] == "/rest/v1/records"
    assert captured["params"]["kind"] == "eq.claim"
    assert captured["headers"]["apikey"] == "anon-key"
    assert captured["headers"]["authorization"] == "Bearer anon-key"


def test_insert_user_maps_conflict_to_duplicate():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content.decode("utf-8")))
        return httpx.Response(409, json={"message": "duplicate key"})

    store = _store(handler)
    with pytest.raises(UserAlreadyExistsError):
        store.insert_user(User(id="alice", name="Alice", password="hash", workstation="Y1"))

    assert bodies[0]["kind"] == "user"
    assert bodies[0]["id"] == "alice"
    assert bodies[0]["data"]["workstation"] == "Y1"


def test_upsert_claim_merges_duplicates():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["params"] = dict(request.url.params)
        captured["prefer"] = request.headers["prefer"]
        return httpx.Response(201)

    _store(handler).upsert_claim(Claim.model_validate(_claim_data()))

    assert captured["params"] == {"on_conflict": "id"}
    assert "resolution=merge-duplicates" in captured["prefer"]


def test_update_claim_review_patches_the_record():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "GET":
            return httpx.Response(200, json=[{"id": "c1", "data": _claim_data()}])
        return httpx.Response(204)

    updated = _store(handler).update_claim_review("c1", ClaimStatus.REJECTED, "missing UT record")

    assert updated.status is ClaimStatus.REJECTED
    patch = requests[-1]
    assert patch.method == "PATCH"
    assert patch.url.params["id"] == "eq.c1"
    body = json.loads(patch.content.decode("utf-8"))
    assert body["data"]["status"] == "REJECTED"
    assert body["data"]["adminComment"] == "missing UT record"


def test_update_claim_review_of_missing_claim_returns_none():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        return httpx.Response(200, json=[])

    assert _store(handler).update_claim_review("nope", ClaimStatus.APPROVED) is None


def test_transport_and_server_failures_raise_store_error():
    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StoreError):
        _store(unreachable).list_users()

    def broken(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with pytest.raises(StoreError):
        _store(broken).list_claims()


def test_rejects_base_url_without_scheme():
    with pytest.raises(ValueError):
        RemoteTableClaimStore("db.example.test")
