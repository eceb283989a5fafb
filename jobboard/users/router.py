"""
User API endpoints.

Listing and creating users is admin-only; a user's own record can be read,
changed or deleted by that user or by an admin.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from jobboard.auth import dependencies as auth_dependencies
from jobboard.auth import service as auth_service
from jobboard.auth.gate import Identity
from jobboard.core import db
from jobboard.core.validation import ensure_valid

from . import schemas, service
from .repository import UserRepository

router = APIRouter(prefix="/users")


def get_repository(executor: db.QueryExecutor = Depends(db.get_executor)) -> UserRepository:
    return UserRepository(executor)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: dict[str, Any] = Body(...),
    _: Identity = Depends(auth_dependencies.require_admin),
    users: UserRepository = Depends(get_repository),
) -> dict:
    data = ensure_valid(payload, schemas.USER_NEW)
    user = await service.create_user(users, data)
    return {"user": user, "token": auth_service.token_for(user)}


@router.get("")
async def list_users(
    request: Request,
    _: Identity = Depends(auth_dependencies.require_admin),
    users: UserRepository = Depends(get_repository),
) -> dict:
    return {"users": await users.find_all(dict(request.query_params))}


@router.get("/{username}")
async def get_user(
    username: str,
    _: Identity = Depends(auth_dependencies.require_admin_or_self),
    users: UserRepository = Depends(get_repository),
) -> dict:
    return {"user": await service.get_user(users, username)}


@router.patch("/{username}")
async def update_user(
    username: str,
    payload: dict[str, Any] = Body(...),
    _: Identity = Depends(auth_dependencies.require_admin_or_self),
    users: UserRepository = Depends(get_repository),
) -> dict:
    data = ensure_valid(payload, schemas.USER_UPDATE)
    return {"user": await service.update_user(users, username, data)}


@router.delete("/{username}")
async def delete_user(
    username: str,
    _: Identity = Depends(auth_dependencies.require_admin_or_self),
    users: UserRepository = Depends(get_repository),
) -> dict:
    await users.remove(username)
    return {"deleted": username}


@router.post("/{username}/jobs/{title}")
async def apply_to_job(
    username: str,
    title: str,
    _: Identity = Depends(auth_dependencies.require_admin_or_self),
    users: UserRepository = Depends(get_repository),
) -> dict:
    await users.apply(username, title)
    return {"applied": title}
