"""
Company persistence (raw SQL).

Both the handle and the display name are unique.
"""

from __future__ import annotations

from typing import Any, Mapping

from jobboard.core.errors import BadRequestError
from jobboard.core.repository import EntityRepository
from jobboard.core.sql import Comparison, FilterRule, coerce_filters


class CompanyRepository(EntityRepository):
    table = "companies"
    key = "handle"
    fields = ("handle", "name", "description", "numEmployees", "logoUrl")
    column_names = {
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }
    filter_rules = {
        "name": FilterRule("name", Comparison.ICONTAINS),
        "minEmployees": FilterRule("num_employees", Comparison.AT_LEAST, int),
        "maxEmployees": FilterRule("num_employees", Comparison.AT_MOST, int),
    }
    order_by = "name"
    label = "company"

    async def _ensure_name_free(self, name: Any, handle: Any) -> None:
        row = await self.executor.fetch_one(
            "SELECT handle FROM companies WHERE name = $1 AND handle <> $2",
            name,
            handle,
        )
        if row is not None:
            raise BadRequestError(f"Duplicate company name: {name}")

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        self.check_writable(data)
        if data.get("name") is not None:
            await self._ensure_name_free(data["name"], data.get("handle"))
        return await super().create(data)

    async def update(self, identifier: Any, data: Mapping[str, Any]) -> dict[str, Any]:
        self.check_writable(data)
        if data.get("name") is not None:
            await self._ensure_name_free(data["name"], identifier)
        return await super().update(identifier, data)

    async def find_all(self, filters: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        filters = coerce_filters(filters or {}, self.filter_rules)
        low, high = filters.get("minEmployees"), filters.get("maxEmployees")
        if low is not None and high is not None and low > high:
            raise BadRequestError("minEmployees cannot be greater than maxEmployees.")
        return await super().find_all(filters)
