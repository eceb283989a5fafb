"""
Shared raw-SQL CRUD for one table keyed by a single identifier column.

Feature packages subclass `EntityRepository` and declare their table,
public field set, column translation and recognized filters. Every
statement binds values as parameters; column names come only from those
declarations, quoted with `quote_ident`.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping

from .db import QueryExecutor
from .errors import BadRequestError, NotFoundError
from .sql import FilterRule, quote_ident, sql_for_filters, sql_for_partial_update

logger = logging.getLogger(__name__)


class EntityRepository:
    table: ClassVar[str]
    key: ClassVar[str]
    fields: ClassVar[tuple[str, ...]]
    column_names: ClassVar[Mapping[str, str]] = {}
    filter_rules: ClassVar[Mapping[str, FilterRule]] = {}
    write_only: ClassVar[tuple[str, ...]] = ()
    order_by: ClassVar[str]
    label: ClassVar[str]

    def __init__(self, executor: QueryExecutor) -> None:
        self.executor = executor

    def column(self, name: str) -> str:
        return quote_ident(self.column_names.get(name, name))

    @property
    def key_column(self) -> str:
        return self.column(self.key)

    @property
    def select_list(self) -> str:
        return ", ".join(f"{self.column(name)} AS {quote_ident(name)}" for name in self.fields)

    @property
    def writable(self) -> frozenset[str]:
        return frozenset(self.fields) | frozenset(self.column_names) | frozenset(self.write_only)

    def check_writable(self, data: Mapping[str, Any]) -> None:
        invalid = [name for name in data if name not in self.writable]
        if invalid:
            raise BadRequestError(
                f"Unknown {self.label} fields: [{', '.join(invalid)}]",
                errors=[f"{name}: unknown field" for name in invalid],
            )

    def shape(self, row: Mapping[str, Any]) -> dict[str, Any]:
        return {name: row[name] for name in self.fields}

    async def exists(self, identifier: Any) -> bool:
        row = await self.executor.fetch_one(
            f"SELECT {self.key_column} FROM {self.table} WHERE {self.key_column} = $1",
            identifier,
        )
        return row is not None

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Insert a row from a validated payload and return it shaped.

        Raises BadRequestError for undeclared fields or an identifier that is
        already taken.
        """
        self.check_writable(data)
        identifier = data.get(self.key)
        if identifier is not None and await self.exists(identifier):
            raise BadRequestError(f"Duplicate {self.label}: {identifier}")

        names = list(data)
        columns = ", ".join(self.column(name) for name in names)
        placeholders = ", ".join(f"${idx}" for idx in range(1, len(names) + 1))
        row = await self.executor.fetch_one(
            f"""
            INSERT INTO {self.table} ({columns})
            VALUES ({placeholders})
            RETURNING {self.select_list}
            """,
            *(data[name] for name in names),
        )
        if row is None:
            raise RuntimeError(f"Failed to create {self.label}.")
        logger.info("Created %s %s.", self.label, identifier)
        return self.shape(row)

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        List rows matching `filters`, ordered by the display column.

        Filter names must all be in `filter_rules`.
        """
        where = sql_for_filters(filters or {}, self.filter_rules)
        where_clause = f"WHERE {where.text}" if where.text else ""
        logger.debug("Listing %s with %d bound filter values.", self.table, where.placeholder_count)
        rows = await self.executor.fetch_all(
            f"""
            SELECT {self.select_list}
            FROM {self.table}
            {where_clause}
            ORDER BY {self.column(self.order_by)} ASC
            """,
            *where.values,
        )
        return [self.shape(row) for row in rows]

    async def find_one(self, identifier: Any) -> dict[str, Any]:
        row = await self.executor.fetch_one(
            f"""
            SELECT {self.select_list}
            FROM {self.table}
            WHERE {self.key_column} = $1
            """,
            identifier,
        )
        if row is None:
            raise NotFoundError(f"No {self.label}: {identifier}")
        return self.shape(row)

    async def update(self, identifier: Any, data: Mapping[str, Any]) -> dict[str, Any]:
        """
        Partial update: only the fields present in `data` change.

        Raises BadRequestError for an empty payload or undeclared fields,
        NotFoundError when no row has `identifier`.
        """
        self.check_writable(data)
        set_cols = sql_for_partial_update(data, self.column_names)
        row = await self.executor.fetch_one(
            f"""
            UPDATE {self.table}
            SET {set_cols.text}
            WHERE {self.key_column} = ${set_cols.next_placeholder}
            RETURNING {self.select_list}
            """,
            *set_cols.values,
            identifier,
        )
        if row is None:
            raise NotFoundError(f"No {self.label}: {identifier}")
        logger.info("Updated %s %s (%d fields).", self.label, identifier, set_cols.placeholder_count)
        return self.shape(row)

    async def remove(self, identifier: Any) -> None:
        row = await self.executor.fetch_one(
            f"""
            DELETE FROM {self.table}
            WHERE {self.key_column} = $1
            RETURNING {self.key_column}
            """,
            identifier,
        )
        if row is None:
            raise NotFoundError(f"No {self.label}: {identifier}")
        logger.info("Removed %s %s.", self.label, identifier)
