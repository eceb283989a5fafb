"""
Authorization predicates.

Each predicate looks only at the caller's identity (None for an anonymous
request) and answers allow/deny. Raising is left to `dependencies.py`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Identity:
    username: str
    is_admin: bool = False

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> "Identity":
        return cls(username=str(claims["username"]), is_admin=claims.get("isAdmin") is True)


def is_authenticated(identity: Identity | None) -> bool:
    return identity is not None


def is_authenticated_admin(identity: Identity | None) -> bool:
    return identity is not None and identity.is_admin


def is_authenticated_admin_or_self(identity: Identity | None, username: str) -> bool:
    return identity is not None and (identity.is_admin or identity.username == username)
