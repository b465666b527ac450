"""Shared request dependencies."""
from __future__ import annotations

from fastapi import Depends, Header, HTTPException, status

from backend.application import get_user_service
from backend.core.errors import AuthenticationError, NotFoundError
from backend.core.schema import User
from backend.domain import UserRole

USER_HEADER = "X-User-Id"


def get_current_user(x_user_id: str | None = Header(default=None, alias=USER_HEADER)) -> User:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"{USER_HEADER} header is required")
    try:
        return get_user_service().resolve(x_user_id)
    except (NotFoundError, AuthenticationError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role is not UserRole.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user
