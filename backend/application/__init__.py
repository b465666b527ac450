"""Application services."""

from .claims import ClaimService
from .notifications import notification_counts
from .registry import configure_store, get_claim_service, get_store, get_user_service, reset_services
from .users import UserService

__all__ = [
    "ClaimService",
    "UserService",
    "configure_store",
    "get_claim_service",
    "get_store",
    "get_user_service",
    "notification_counts",
    "reset_services",
]
