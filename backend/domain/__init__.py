"""Domain layer definitions."""

from .enums import AllocationRole, Category, ClaimStatus, UserRole, UserStatus, Workstation
from .budget import BudgetCheck
from .notifications import NotificationCounts

__all__ = [
    "AllocationRole",
    "BudgetCheck",
    "Category",
    "ClaimStatus",
    "NotificationCounts",
    "UserRole",
    "UserStatus",
    "Workstation",
]
