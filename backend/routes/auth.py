from __future__ import annotations

from fastapi import APIRouter, status
from pydantic import Field

from backend.application import get_user_service
from backend.core.schema import Record, UserPublic

router = APIRouter(prefix="/auth", tags=["auth"])


class RegisterRequest(Record):
    id: str = Field(..., min_length=1, max_length=64)
    name: str = Field(..., min_length=1, max_length=120)
    password: str = Field(..., min_length=1, max_length=128)
    workstation: str = Field(..., min_length=1, max_length=20)


class LoginRequest(Record):
    username: str = Field(..., min_length=1)
    password: str | None = None


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest) -> dict:
    user = get_user_service().register(payload.id, payload.name, payload.password, payload.workstation)
    return UserPublic.from_user(user).to_record()


@router.post("/login")
def login(payload: LoginRequest) -> dict:
    user = get_user_service().login(payload.username.strip(), payload.password)
    return UserPublic.from_user(user).to_record()
