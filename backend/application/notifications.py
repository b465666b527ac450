from __future__ import annotations

from backend.application.claims import ClaimService
from backend.application.users import UserService
from backend.core.schema import User
from backend.domain import NotificationCounts, UserRole


def notification_counts(user: User, claims: ClaimService, users: UserService) -> NotificationCounts:
    """Admins see pending claims plus pending accounts; workers see their rejected claims."""

    if user.role is UserRole.ADMIN:
        return NotificationCounts(admin_count=claims.pending_count() + users.pending_count())
    if user.role is UserRole.WORKER:
        return NotificationCounts(worker_count=claims.rejected_count_for(user))
    return NotificationCounts()
