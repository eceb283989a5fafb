"""
Company API endpoints.

Reads are public; writes require an admin token.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request, status

from jobboard.auth import dependencies as auth_dependencies
from jobboard.auth.gate import Identity
from jobboard.core import db
from jobboard.core.validation import ensure_valid
from jobboard.jobs.repository import JobRepository
from jobboard.jobs.router import get_repository as get_job_repository

from . import schemas
from .repository import CompanyRepository

router = APIRouter(prefix="/companies")


def get_repository(executor: db.QueryExecutor = Depends(db.get_executor)) -> CompanyRepository:
    return CompanyRepository(executor)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_company(
    payload: dict[str, Any] = Body(...),
    _: Identity = Depends(auth_dependencies.require_admin),
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    data = ensure_valid(payload, schemas.COMPANY_NEW)
    return {"company": await companies.create(data)}


@router.get("")
async def list_companies(
    request: Request,
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    """
    Optional filters: name (partial, case-insensitive), minEmployees, maxEmployees.
    """
    return {"companies": await companies.find_all(dict(request.query_params))}


@router.get("/{handle}")
async def get_company(
    handle: str,
    companies: CompanyRepository = Depends(get_repository),
    jobs: JobRepository = Depends(get_job_repository),
) -> dict:
    company = await companies.find_one(handle)
    company["jobs"] = await jobs.for_company(handle)
    return {"company": company}


@router.patch("/{handle}")
async def update_company(
    handle: str,
    payload: dict[str, Any] = Body(...),
    _: Identity = Depends(auth_dependencies.require_admin),
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    data = ensure_valid(payload, schemas.COMPANY_UPDATE)
    return {"company": await companies.update(handle, data)}


@router.delete("/{handle}")
async def delete_company(
    handle: str,
    _: Identity = Depends(auth_dependencies.require_admin),
    companies: CompanyRepository = Depends(get_repository),
) -> dict:
    await companies.remove(handle)
    return {"deleted": handle}
