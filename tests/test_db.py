import asyncpg
import pytest

from jobboard.core import db
from jobboard.core.errors import BadRequestError


def unique_violation(constraint=None):
    exc = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    if constraint is not None:
        exc.constraint_name = constraint
    return exc


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["fetch_one", "fetch_all"])
async def test_pool_executor_reports_unique_violation_as_bad_request(monkeypatch, method):
    async def racing_insert(sql, *args):
        raise unique_violation("companies_name_key")

    monkeypatch.setattr(db, method, racing_insert)
    with pytest.raises(BadRequestError, match="companies_name_key") as exc:
        await getattr(db.PoolExecutor(), method)("INSERT INTO companies (name) VALUES ($1)", "C1")
    assert exc.value.status_code == 400
    assert isinstance(exc.value.__cause__, asyncpg.UniqueViolationError)


@pytest.mark.asyncio
async def test_pool_executor_unnamed_constraint(monkeypatch):
    async def racing_insert(sql, *args):
        raise unique_violation()

    monkeypatch.setattr(db, "fetch_one", racing_insert)
    with pytest.raises(BadRequestError, match="unique constraint"):
        await db.PoolExecutor().fetch_one("INSERT INTO applications VALUES ($1, $2)", "u1", "cook")


@pytest.mark.asyncio
async def test_pool_executor_passes_other_errors_through(monkeypatch):
    async def broken(sql, *args):
        raise asyncpg.UndefinedTableError("relation does not exist")

    monkeypatch.setattr(db, "fetch_all", broken)
    with pytest.raises(asyncpg.UndefinedTableError):
        await db.PoolExecutor().fetch_all("SELECT 1 FROM nowhere")


def test_sanitize_database_url_drops_sslmode():
    url = "postgresql://u:p@host/db?sslmode=require&application_name=jobboard"
    assert db._sanitize_database_url(url) == "postgresql://u:p@host/db?application_name=jobboard"
