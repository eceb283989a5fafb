"""
User persistence (raw SQL).

`password` is write-only: it can be inserted and updated but is never part
of a shaped row. Only `get_credentials` reads the stored hash.
"""

from __future__ import annotations

from typing import Any, Mapping

from jobboard.core.errors import BadRequestError, NotFoundError
from jobboard.core.repository import EntityRepository


class UserRepository(EntityRepository):
    table = "users"
    key = "username"
    fields = ("username", "firstName", "lastName", "email", "isAdmin")
    column_names = {
        "firstName": "first_name",
        "lastName": "last_name",
        "isAdmin": "is_admin",
    }
    write_only = ("password",)
    order_by = "username"
    label = "user"

    def shape(self, row: Mapping[str, Any]) -> dict[str, Any]:
        user = super().shape(row)
        user["isAdmin"] = bool(user["isAdmin"])
        return user

    async def get_credentials(self, username: str) -> dict[str, Any] | None:
        row = await self.executor.fetch_one(
            f"""
            SELECT {self.select_list}, password
            FROM users
            WHERE username = $1
            """,
            username,
        )
        if row is None:
            return None
        return {**self.shape(row), "password": row["password"]}

    async def applications(self, username: str) -> list[str]:
        rows = await self.executor.fetch_all(
            """
            SELECT job_title
            FROM applications
            WHERE username = $1
            ORDER BY job_title ASC
            """,
            username,
        )
        return [str(row["job_title"]) for row in rows]

    async def apply(self, username: str, title: str) -> None:
        """
        Record that `username` applied to job `title`. Applications are final.
        """
        if not await self.exists(username):
            raise NotFoundError(f"No user: {username}")

        job = await self.executor.fetch_one("SELECT title FROM jobs WHERE title = $1", title)
        if job is None:
            raise NotFoundError(f"No job: {title}")

        row = await self.executor.fetch_one(
            """
            INSERT INTO applications (username, job_title)
            VALUES ($1, $2)
            ON CONFLICT (username, job_title) DO NOTHING
            RETURNING job_title
            """,
            username,
            title,
        )
        if row is None:
            raise BadRequestError(f"{username} already applied to {title}")
