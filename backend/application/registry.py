"""Process-wide service instances."""
from __future__ import annotations

from backend.application.claims import ClaimService
from backend.application.users import UserService
from backend.core.catalog import load_catalog
from backend.core.settings import get_settings
from backend.infrastructure import ClaimStore, build_store

_store: ClaimStore | None = None
_claim_service: ClaimService | None = None
_user_service: UserService | None = None


def configure_store(store: ClaimStore) -> None:
    """Install the store used by the services, dropping any cached instances."""

    global _store, _claim_service, _user_service
    _store = store
    _claim_service = None
    _user_service = None


def get_store() -> ClaimStore:
    global _store
    if _store is None:
        _store = build_store(get_settings())
    return _store


def get_claim_service() -> ClaimService:
    global _claim_service
    if _claim_service is None:
        _claim_service = ClaimService(get_store(), load_catalog(get_settings().catalog_path))
    return _claim_service


def get_user_service() -> UserService:
    global _user_service
    if _user_service is None:
        _user_service = UserService(get_store())
    return _user_service


def reset_services() -> None:
    """Forget every cached instance (used in tests)."""

    global _store, _claim_service, _user_service
    _store = None
    _claim_service = None
    _user_service = None
