"""
Auth business logic.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from jobboard.core.errors import UnauthorizedError
from jobboard.users import service as user_service
from jobboard.users.repository import UserRepository

from . import schemas, security

logger = logging.getLogger(__name__)


def token_for(user: Mapping[str, Any]) -> str:
    return security.build_access_token(username=str(user["username"]), is_admin=bool(user["isAdmin"]))


async def authenticate(users: UserRepository, payload: schemas.TokenRequest) -> schemas.TokenResponse:
    credentials = await users.get_credentials(payload.username)
    if credentials is None or not security.verify_password(
        payload.password, str(credentials.get("password") or "")
    ):
        logger.warning("Failed login for %s.", payload.username)
        raise UnauthorizedError("Invalid username/password.")

    return schemas.TokenResponse(token=token_for(credentials))


async def register(users: UserRepository, data: Mapping[str, Any]) -> schemas.TokenResponse:
    """
    Self-registration always creates a non-admin user.
    """
    user = await user_service.create_user(users, {**data, "isAdmin": False})
    return schemas.TokenResponse(token=token_for(user))
