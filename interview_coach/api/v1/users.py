from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel, Field

from interview_coach.users import UserExistsError, UserRepository, get_user_repository, verify_password

router = APIRouter()


class RegisterRequest(BaseModel):
    name: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=200)
    password: str = Field(default="", max_length=200)


class LoginRequest(BaseModel):
    email: str = Field(default="", max_length=200)
    password: str = Field(default="", max_length=200)


def _public(user: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in user.items() if key != "password_hash"}


def _require_user(repo: UserRepository, user_id: int) -> dict[str, Any]:
    user = repo.find_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.post("/auth/register")
def register(payload: RegisterRequest, repo: UserRepository = Depends(get_user_repository)):
    name = payload.name.strip()
    email = payload.email.strip().lower()
    if not name or not email or not payload.password:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="All fields are required")
    try:
        user = repo.create(name=name, email=email, password=payload.password)
    except UserExistsError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return {"user": _public(user)}


@router.post("/auth/login")
def login(payload: LoginRequest, repo: UserRepository = Depends(get_user_repository)):
    user = repo.find_by_email(payload.email.strip().lower())
    if not user or not verify_password(payload.password, user.get("password_hash", "")):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return {"user": _public(user)}


@router.get("/users/{user_id}/sessions")
def list_sessions(user_id: int, repo: UserRepository = Depends(get_user_repository)):
    _require_user(repo, user_id)
    return {"sessions": repo.list_sessions(user_id)}


@router.post("/users/{user_id}/sessions")
def save_session(
    user_id: int,
    payload: dict[str, Any] | None = Body(default=None),
    repo: UserRepository = Depends(get_user_repository),
):
    _require_user(repo, user_id)
    return {"session": repo.append_session(user_id, payload or {})}
