"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `jobboard/main.py`).

Repositories never touch the pool directly: they receive a `QueryExecutor`
(`get_executor()` in production, an in-memory fake in tests).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .errors import BadRequestError

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).with_name("schema.sql")

_pool: asyncpg.Pool | None = None


class QueryExecutor(Protocol):
    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None: ...

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]: ...


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def auto_create_schema() -> bool:
    raw = os.environ.get("AUTO_CREATE_SCHEMA", "1").strip().lower()
    return raw not in ("0", "false", "no", "off")


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=1,
        max_size=5,
        command_timeout=30,
    )
    logger.info("Database pool ready.")


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    row = await pool().fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await pool().fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any) -> None:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). No result returned.
    """
    await pool().execute(sql, *args)


async def apply_schema() -> None:
    """
    Create the tables if they do not exist yet.
    """
    await execute(SCHEMA_PATH.read_text(encoding="utf-8"))
    logger.info("Schema applied from %s.", SCHEMA_PATH.name)


class PoolExecutor:
    """
    `QueryExecutor` backed by the module pool.

    A unique-constraint violation (two writers racing past a repository's
    collision check) surfaces as BadRequestError.
    """

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        try:
            return await fetch_one(sql, *args)
        except asyncpg.UniqueViolationError as exc:
            raise _collision(exc) from exc

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        try:
            return await fetch_all(sql, *args)
        except asyncpg.UniqueViolationError as exc:
            raise _collision(exc) from exc


def _collision(exc: asyncpg.UniqueViolationError) -> BadRequestError:
    constraint = getattr(exc, "constraint_name", None) or "unique constraint"
    logger.info("Unique violation on %s.", constraint)
    return BadRequestError(f"Duplicate value violates {constraint}.")


def get_executor() -> QueryExecutor:
    return PoolExecutor()
