import pytest

from jobboard.auth import dependencies, gate, security
from jobboard.core.errors import UnauthorizedError

ADMIN = gate.Identity("admin", is_admin=True)
U1 = gate.Identity("u1")


def test_is_authenticated():
    assert gate.is_authenticated(U1)
    assert not gate.is_authenticated(None)


def test_is_authenticated_admin():
    assert gate.is_authenticated_admin(ADMIN)
    assert not gate.is_authenticated_admin(U1)
    assert not gate.is_authenticated_admin(None)


@pytest.mark.parametrize(
    "identity, username, allowed",
    [
        (ADMIN, "u1", True),
        (ADMIN, "nobody", True),
        (U1, "u1", True),
        (U1, "u2", False),
        (None, "u1", False),
    ],
)
def test_is_authenticated_admin_or_self(identity, username, allowed):
    assert gate.is_authenticated_admin_or_self(identity, username) is allowed


def test_identity_from_claims_requires_true_admin_flag():
    assert gate.Identity.from_claims({"username": "x", "isAdmin": True}).is_admin
    assert not gate.Identity.from_claims({"username": "x", "isAdmin": "true"}).is_admin
    assert not gate.Identity.from_claims({"username": "x"}).is_admin


@pytest.mark.asyncio
async def test_get_identity_reads_bearer_token():
    token = security.build_access_token(username="u1", is_admin=False)
    assert await dependencies.get_identity(f"Bearer {token}") == U1


@pytest.mark.asyncio
@pytest.mark.parametrize("header", [None, "", "Bearer", "Basic abc", "Bearer not-a-jwt"])
async def test_get_identity_treats_bad_headers_as_anonymous(header):
    assert await dependencies.get_identity(header) is None


@pytest.mark.asyncio
async def test_require_dependencies():
    assert await dependencies.require_user(U1) == U1
    assert await dependencies.require_admin(ADMIN) == ADMIN
    assert await dependencies.require_admin_or_self("u1", U1) == U1

    with pytest.raises(UnauthorizedError):
        await dependencies.require_user(None)
    with pytest.raises(UnauthorizedError):
        await dependencies.require_admin(U1)
    with pytest.raises(UnauthorizedError):
        await dependencies.require_admin_or_self("u2", U1)
