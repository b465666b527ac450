"""Account registration, login and admin approval."""
from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from backend.core.errors import (
    AccountPendingError,
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from backend.core.schema import GUEST_USER, User
from backend.domain import UserRole, UserStatus
from backend.infrastructure import ClaimStore

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ID = "admin"
DEFAULT_ADMIN_PASSWORD = "admin"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)


class UserService:
    """Coordinates account use cases."""

    def __init__(self, store: ClaimStore) -> None:
        self._store = store
        self._seeded = False

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _ensure_seeded(self) -> None:
        if self._seeded:
            return
        if not self._store.list_users():
            logger.info("Seeding default admin account")
            self._store.insert_user(
                User(
                    id=DEFAULT_ADMIN_ID,
                    name="System Admin",
                    password=hash_password(DEFAULT_ADMIN_PASSWORD),
                    workstation="OFFICE",
                    role=UserRole.ADMIN,
                    status=UserStatus.ACTIVE,
                )
            )
        self._seeded = True

    # ------------------------------------------------------------------
    # self service
    # ------------------------------------------------------------------
    def register(self, user_id: str, name: str, password: str, workstation: str) -> User:
        """Create a worker account that waits for admin approval."""

        self._ensure_seeded()
        user_id = user_id.strip()
        if user_id == GUEST_USER.id:
            raise UserAlreadyExistsError(f"Username {user_id!r} is reserved")
        user = User(
            id=user_id,
            name=name.strip(),
            password=hash_password(password),
            workstation=workstation,
            role=UserRole.WORKER,
            status=UserStatus.PENDING,
        )
        self._store.insert_user(user)
        logger.info("Registered user %s for workstation %s", user.id, user.workstation)
        return user

    def login(self, username: str, password: str | None = None) -> User:
        if username == GUEST_USER.id:
            return GUEST_USER

        self._ensure_seeded()
        user = self._store.get_user(username)
        if user is None or not verify_password(password or "", user.password):
            raise InvalidCredentialsError()
        if user.status is UserStatus.PENDING:
            raise AccountPendingError()
        if user.status is not UserStatus.ACTIVE:
            raise AccountPendingError("Account was not approved")
        return user

    def resolve(self, user_id: str) -> User:
        """Look up the active account behind a request identity."""

        if user_id == GUEST_USER.id:
            return GUEST_USER
        self._ensure_seeded()
        user = self._store.get_user(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id!r} not found")
        if user.status is not UserStatus.ACTIVE:
            raise AccountPendingError()
        return user

    # ------------------------------------------------------------------
    # administration
    # ------------------------------------------------------------------
    def list_users(self, status: UserStatus | None = None) -> list[User]:
        self._ensure_seeded()
        users = self._store.list_users()
        if status is not None:
            users = [user for user in users if user.status is status]
        return users

    def pending_count(self) -> int:
        return len(self.list_users(UserStatus.PENDING))

    def _set_status(self, user_id: str, status: UserStatus) -> User | None:
        user = self._store.get_user(user_id)
        if user is None:
            logger.info("Ignoring status change for missing user %s", user_id)
            return None
        updated = user.model_copy(update={"status": status})
        self._store.update_user(updated)
        logger.info("User %s is now %s", user_id, status.value)
        return updated

    def approve_user(self, user_id: str) -> User | None:
        """Activate an account; a missing account is a no-op."""

        return self._set_status(user_id, UserStatus.ACTIVE)

    def reject_user(self, user_id: str) -> User | None:
        return self._set_status(user_id, UserStatus.REJECTED)

    def reset(self) -> None:
        self._store.reset()
        self._seeded = False
