"""
Auth dependencies for protected FastAPI routes.

`get_identity` never fails: a missing or unusable token just means an
anonymous caller. The `require_*` dependencies run before the endpoint body,
so a denied caller gets 401 whether or not the target exists.
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header

from jobboard.core.errors import UnauthorizedError

from . import gate, security

logger = logging.getLogger(__name__)


def _extract_bearer_token(authorization: str | None) -> str | None:
    raw = (authorization or "").strip()
    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


async def get_identity(authorization: str | None = Header(default=None)) -> gate.Identity | None:
    token = _extract_bearer_token(authorization)
    if token is None:
        return None
    try:
        claims = security.decode_access_token(token)
    except security.AuthSecurityError as exc:
        logger.warning("Ignoring bearer token: %s", exc)
        return None
    return gate.Identity.from_claims(claims)


async def require_user(identity: gate.Identity | None = Depends(get_identity)) -> gate.Identity:
    if not gate.is_authenticated(identity):
        raise UnauthorizedError()
    return identity


async def require_admin(identity: gate.Identity | None = Depends(get_identity)) -> gate.Identity:
    if not gate.is_authenticated_admin(identity):
        logger.info("Admin required; denied %s.", identity.username if identity else "anonymous")
        raise UnauthorizedError()
    return identity


async def require_admin_or_self(
    username: str,
    identity: gate.Identity | None = Depends(get_identity),
) -> gate.Identity:
    if not gate.is_authenticated_admin_or_self(identity, username):
        logger.info("Admin or %s required; denied %s.", username, identity.username if identity else "anonymous")
        raise UnauthorizedError()
    return identity
