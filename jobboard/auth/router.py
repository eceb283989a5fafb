"""
Auth API endpoints: token issuance, self-registration, current user.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from jobboard.core.validation import ensure_valid
from jobboard.users import schemas as user_schemas
from jobboard.users import service as user_service
from jobboard.users.repository import UserRepository
from jobboard.users.router import get_repository

from . import dependencies, schemas, service
from .gate import Identity

router = APIRouter(prefix="/auth")


@router.post("/token")
async def token(
    payload: schemas.TokenRequest,
    users: UserRepository = Depends(get_repository),
) -> schemas.TokenResponse:
    return await service.authenticate(users, payload)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    payload: dict[str, Any] = Body(...),
    users: UserRepository = Depends(get_repository),
) -> schemas.TokenResponse:
    data = ensure_valid(payload, user_schemas.USER_REGISTER)
    return await service.register(users, data)


@router.get("/me")
async def me(
    identity: Identity = Depends(dependencies.require_user),
    users: UserRepository = Depends(get_repository),
) -> dict:
    return {"user": await user_service.get_user(users, identity.username)}
