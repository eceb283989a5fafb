"""
Job API endpoints.

Reads are public; writes require an admin token.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from jobboard.auth import dependencies as auth_dependencies
from jobboard.auth.gate import Identity
from jobboard.core import db
from jobboard.core.validation import ensure_valid

from . import schemas
from .repository import JobRepository

router = APIRouter(prefix="/jobs")


def get_repository(executor: db.QueryExecutor = Depends(db.get_executor)) -> JobRepository:
    return JobRepository(executor)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: dict[str, Any] = Body(...),
    _: Identity = Depends(auth_dependencies.require_admin),
    jobs: JobRepository = Depends(get_repository),
) -> dict:
    data = ensure_valid(payload, schemas.JOB_NEW)
    return {"job": await jobs.create(data)}


@router.get("")
async def list_jobs(
    request: Request,
    jobs: JobRepository = Depends(get_repository),
) -> dict:
    """
    Optional filters: title (partial, case-insensitive), minSalary, hasEquity.
    """
    return {"jobs": await jobs.find_all(dict(request.query_params))}


@router.get("/{title}")
async def get_job(
    title: str,
    jobs: JobRepository = Depends(get_repository),
) -> dict:
    return {"job": await jobs.find_one(title)}


@router.patch("/{title}")
async def update_job(
    title: str,
    payload: dict[str, Any] = Body(...),
    _: Identity = Depends(auth_dependencies.require_admin),
    jobs: JobRepository = Depends(get_repository),
) -> dict:
    data = ensure_valid(payload, schemas.JOB_UPDATE)
    return {"job": await jobs.update(title, data)}


@router.delete("/{title}")
async def delete_job(
    title: str,
    _: Identity = Depends(auth_dependencies.require_admin),
    jobs: JobRepository = Depends(get_repository),
) -> dict:
    await jobs.remove(title)
    return {"deleted": title}
