import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from app.models import Payroll
from app.services.payroll_summary import PayrollSummary
from app.storage import DuplicatePayrollError, Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payrolls", tags=["payrolls"])

STATUS_PATTERN = "^(" + "|".join(Payroll.STATUSES) + ")$"


class PayrollCreate(BaseModel):
    week_ending_date: date
    status: str = Field(default=Payroll.DRAFT, pattern=STATUS_PATTERN)


class PayrollUpdate(BaseModel):
    week_ending_date: Optional[date] = None
    status: Optional[str] = Field(default=None, pattern=STATUS_PATTERN)


def payroll_to_dict(payroll: Payroll) -> dict:
    return {
        "id": payroll.id,
        "week_ending_date": payroll.week_ending_date.isoformat(),
        "status": payroll.status,
        "created_at": payroll.created_at.isoformat() if payroll.created_at else None,
    }


def summary_to_dict(row: PayrollSummary) -> dict:
    return {
        "plumber_id": row.plumber_id,
        "plumber_name": row.plumber_name,
        "job_count": row.job_count,
        "total_revenue": float(row.total_revenue),
        "total_costs": float(row.total_costs),
        "total_commission": float(row.total_commission),
    }


def _get_or_404(storage: Storage, payroll_id: int) -> Payroll:
    payroll = storage.get_payroll(payroll_id)
    if not payroll:
        raise HTTPException(status_code=404, detail="Payroll not found")
    return payroll


@router.get("")
async def list_payrolls(storage: Storage = Depends(get_storage)):
    return [payroll_to_dict(p) for p in storage.get_payrolls()]


@router.get("/current")
async def current_payroll(storage: Storage = Depends(get_storage)):
    """Latest draft payroll, created for the coming Friday if none exists."""
    return payroll_to_dict(storage.get_current_payroll())


@router.get("/latest-finalized")
async def latest_finalized_payroll(storage: Storage = Depends(get_storage)):
    payroll = storage.get_latest_finalized_payroll()
    if not payroll:
        raise HTTPException(status_code=404, detail="No finalized payroll found")
    return payroll_to_dict(payroll)


@router.get("/{payroll_id}")
async def get_payroll(payroll_id: int, storage: Storage = Depends(get_storage)):
    return payroll_to_dict(_get_or_404(storage, payroll_id))


@router.post("", status_code=201)
async def create_payroll(data: PayrollCreate, storage: Storage = Depends(get_storage)):
    try:
        payroll = storage.create_payroll(data.model_dump())
    except DuplicatePayrollError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return payroll_to_dict(payroll)


@router.patch("/{payroll_id}")
async def update_payroll(
    payroll_id: int, data: PayrollUpdate, storage: Storage = Depends(get_storage)
):
    try:
        payroll = storage.update_payroll(payroll_id, data.model_dump(exclude_none=True))
    except DuplicatePayrollError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not payroll:
        raise HTTPException(status_code=404, detail="Payroll not found")
    return payroll_to_dict(payroll)


@router.post("/{payroll_id}/finalize")
async def finalize_payroll(payroll_id: int, storage: Storage = Depends(get_storage)):
    """Lock a payroll so its jobs can no longer change."""
    _get_or_404(storage, payroll_id)
    payroll = storage.update_payroll(payroll_id, {"status": Payroll.FINALIZED})
    logger.info("Payroll %s finalized (week ending %s)", payroll.id, payroll.week_ending_date)
    return payroll_to_dict(payroll)


@router.post("/{payroll_id}/reopen")
async def reopen_payroll(payroll_id: int, storage: Storage = Depends(get_storage)):
    _get_or_404(storage, payroll_id)
    payroll = storage.update_payroll(payroll_id, {"status": Payroll.DRAFT})
    logger.info("Payroll %s reopened (week ending %s)", payroll.id, payroll.week_ending_date)
    return payroll_to_dict(payroll)


@router.delete("/{payroll_id}", status_code=204)
async def delete_payroll(payroll_id: int, storage: Storage = Depends(get_storage)):
    """Delete a payroll together with all of its jobs."""
    if not storage.delete_payroll(payroll_id):
        raise HTTPException(status_code=404, detail="Payroll not found")
    return Response(status_code=204)


@router.get("/{payroll_id}/summary")
async def payroll_summary(payroll_id: int, storage: Storage = Depends(get_storage)):
    """Per-plumber totals, recomputed from the payroll's jobs on every request."""
    _get_or_404(storage, payroll_id)
    return [summary_to_dict(row) for row in storage.get_payroll_summary(payroll_id)]
