import os
import re
import sqlite3
from decimal import Decimal

os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-thirty-two-bytes")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_SCHEMA"] = "0"

import pytest
from fastapi.testclient import TestClient

from jobboard.auth import security
from jobboard.companies.repository import CompanyRepository
from jobboard.core import db
from jobboard.jobs.repository import JobRepository
from jobboard.users.repository import UserRepository

_PLACEHOLDER = re.compile(r"\$(\d+)")


class SqliteExecutor:
    """
    In-memory QueryExecutor: runs the asyncpg-style SQL against SQLite.

    `$n` becomes `?n` and ILIKE becomes LIKE (case-insensitive for ASCII in
    SQLite). Every statement is recorded with its parameters.
    """

    def __init__(self):
        self.conn = sqlite3.connect(":memory:", check_same_thread=False, isolation_level=None)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA foreign_keys = ON")
        self.conn.executescript(db.SCHEMA_PATH.read_text(encoding="utf-8"))
        self.statements = []

    def run(self, sql, *args):
        self.statements.append((sql, args))
        sql = _PLACEHOLDER.sub(r"?\1", sql).replace(" ILIKE ", " LIKE ")
        params = tuple(float(a) if isinstance(a, Decimal) else a for a in args)
        cursor = self.conn.execute(sql, params)
        try:
            return [dict(row) for row in cursor.fetchall()]
        finally:
            cursor.close()

    async def fetch_one(self, sql, *args):
        rows = self.run(sql, *args)
        return rows[0] if rows else None

    async def fetch_all(self, sql, *args):
        return self.run(sql, *args)

    def close(self):
        self.conn.close()


def seed(executor):
    for handle, count, logo in (("c1", 1, "http://c1.img"), ("c2", 2, "http://c2.img"), ("c3", 3, None)):
        executor.run(
            "INSERT INTO companies (handle, name, description, num_employees, logo_url) VALUES ($1, $2, $3, $4, $5)",
            handle,
            handle.upper(),
            f"Desc{handle[1]}",
            count,
            logo,
        )
    for title, salary, equity, handle in (
        ("manager", 75000, 0.10, "c1"),
        ("cook", 90000, 0.0, "c2"),
        ("teacher", 50000, 0.15, "c3"),
    ):
        executor.run(
            "INSERT INTO jobs (title, salary, equity, company_handle) VALUES ($1, $2, $3, $4)",
            title,
            salary,
            equity,
            handle,
        )
    for username, is_admin in (("u1", False), ("admin", True)):
        executor.run(
            """
            INSERT INTO users (username, password, first_name, last_name, email, is_admin)
            VALUES ($1, $2, $3, $4, $5, $6)
            """,
            username,
            security.hash_password(f"{username}-password"),
            f"{username}F",
            f"{username}L",
            f"{username}@email.com",
            is_admin,
        )
    executor.statements.clear()


@pytest.fixture
def executor():
    executor = SqliteExecutor()
    seed(executor)
    yield executor
    executor.close()


@pytest.fixture
def companies(executor):
    return CompanyRepository(executor)


@pytest.fixture
def jobs(executor):
    return JobRepository(executor)


@pytest.fixture
def users(executor):
    return UserRepository(executor)


@pytest.fixture
def client(executor):
    from jobboard.main import app

    app.dependency_overrides[db.get_executor] = lambda: executor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token():
    return security.build_access_token(username="admin", is_admin=True)


@pytest.fixture
def u1_token():
    return security.build_access_token(username="u1", is_admin=False)
