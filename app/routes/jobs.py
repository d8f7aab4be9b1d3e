import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from app.models import Job
from app.services.jobs import record_job, revise_job
from app.storage import (
    PayrollFinalizedError,
    Storage,
    UnknownReferenceError,
    get_storage,
)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


class JobCreate(BaseModel):
    date: datetime.date
    customer_name: str = Field(min_length=1, max_length=255)
    revenue: Decimal = Field(ge=0, decimal_places=2)
    parts_cost: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    outside_labor: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    plumber_id: int = Field(ge=1)
    payroll_id: int = Field(ge=1)


class JobUpdate(BaseModel):
    date: Optional[datetime.date] = None
    customer_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    revenue: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    parts_cost: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    outside_labor: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    plumber_id: Optional[int] = Field(default=None, ge=1)
    payroll_id: Optional[int] = Field(default=None, ge=1)


def job_to_dict(job: Job) -> dict:
    return {
        "id": job.id,
        "date": job.date.isoformat() if job.date else None,
        "customer_name": job.customer_name,
        "revenue": float(job.revenue),
        "parts_cost": float(job.parts_cost),
        "outside_labor": float(job.outside_labor),
        "commission_amount": float(job.commission_amount),
        "plumber_id": job.plumber_id,
        "payroll_id": job.payroll_id,
    }


@router.get("")
async def list_jobs(storage: Storage = Depends(get_storage)):
    return [job_to_dict(j) for j in storage.get_jobs()]


@router.get("/plumber/{plumber_id}")
async def list_jobs_by_plumber(plumber_id: int, storage: Storage = Depends(get_storage)):
    return [job_to_dict(j) for j in storage.get_jobs_by_plumber(plumber_id)]


@router.get("/payroll/{payroll_id}")
async def list_jobs_by_payroll(payroll_id: int, storage: Storage = Depends(get_storage)):
    return [job_to_dict(j) for j in storage.get_jobs_by_payroll(payroll_id)]


@router.get("/{job_id}")
async def get_job(job_id: int, storage: Storage = Depends(get_storage)):
    job = storage.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job_to_dict(job)


@router.post("", status_code=201)
async def create_job(data: JobCreate, storage: Storage = Depends(get_storage)):
    """Record a job. Commission is priced from the plumber's current rate."""
    try:
        job = record_job(storage, data.model_dump())
    except UnknownReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PayrollFinalizedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return job_to_dict(job)


@router.patch("/{job_id}")
async def update_job(job_id: int, data: JobUpdate, storage: Storage = Depends(get_storage)):
    try:
        job = revise_job(storage, job_id, data.model_dump(exclude_none=True))
    except UnknownReferenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PayrollFinalizedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job_to_dict(job)


@router.delete("/{job_id}", status_code=204)
async def delete_job(job_id: int, storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.delete_job(job_id)
    except PayrollFinalizedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Job not found")
    return Response(status_code=204)
