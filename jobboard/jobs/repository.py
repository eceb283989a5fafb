"""
Job persistence (raw SQL).

Jobs are looked up by title, which is unique.
"""

from __future__ import annotations

from typing import Any, Mapping

from jobboard.core.errors import BadRequestError
from jobboard.core.repository import EntityRepository
from jobboard.core.sql import Comparison, FilterRule


class JobRepository(EntityRepository):
    table = "jobs"
    key = "title"
    fields = ("title", "salary", "equity", "companyHandle")
    column_names = {"companyHandle": "company_handle"}
    filter_rules = {
        "title": FilterRule("title", Comparison.ICONTAINS),
        "minSalary": FilterRule("salary", Comparison.AT_LEAST, int),
        "hasEquity": FilterRule("equity", Comparison.NONZERO, bool),
    }
    order_by = "title"
    label = "job"

    def shape(self, row: Mapping[str, Any]) -> dict[str, Any]:
        job = super().shape(row)
        # NUMERIC comes back as Decimal from Postgres.
        if job["equity"] is not None:
            job["equity"] = float(job["equity"])
        return job

    async def create(self, data: Mapping[str, Any]) -> dict[str, Any]:
        self.check_writable(data)
        handle = data.get("companyHandle")
        company = await self.executor.fetch_one(
            "SELECT handle FROM companies WHERE handle = $1",
            handle,
        )
        if company is None:
            raise BadRequestError(f"No company: {handle}")
        return await super().create(data)

    async def for_company(self, handle: str) -> list[dict[str, Any]]:
        rows = await self.executor.fetch_all(
            f"""
            SELECT {self.select_list}
            FROM jobs
            WHERE company_handle = $1
            ORDER BY title ASC
            """,
            handle,
        )
        return [self.shape(row) for row in rows]
