"""
User business logic: hashing passwords on the way in, attaching applications
on the way out.
"""

from __future__ import annotations

from typing import Any, Mapping

from jobboard.auth import security

from .repository import UserRepository


def _hash_password_field(data: Mapping[str, Any]) -> dict[str, Any]:
    data = dict(data)
    if "password" in data:
        data["password"] = security.hash_password(str(data["password"]))
    return data


async def create_user(users: UserRepository, data: Mapping[str, Any]) -> dict[str, Any]:
    data = _hash_password_field(data)
    data.setdefault("isAdmin", False)
    return await users.create(data)


async def get_user(users: UserRepository, username: str) -> dict[str, Any]:
    user = await users.find_one(username)
    user["applications"] = await users.applications(username)
    return user


async def update_user(users: UserRepository, username: str, data: Mapping[str, Any]) -> dict[str, Any]:
    return await users.update(username, _hash_password_field(data))
