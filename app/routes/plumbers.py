from datetime import date
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field

from app.models import Plumber
from app.storage import PlumberInUseError, Storage, get_storage

router = APIRouter(prefix="/api/plumbers", tags=["plumbers"])

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class PlumberCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(pattern=EMAIL_PATTERN)
    phone: str = Field(min_length=1, max_length=50)
    commission_rate: Decimal = Field(
        default=Plumber.DEFAULT_COMMISSION_RATE, ge=0, le=100, decimal_places=2
    )
    is_active: bool = True
    start_date: date


class PlumberUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=50)
    commission_rate: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    is_active: Optional[bool] = None
    start_date: Optional[date] = None


def plumber_to_dict(plumber: Plumber) -> dict:
    return {
        "id": plumber.id,
        "name": plumber.name,
        "email": plumber.email,
        "phone": plumber.phone,
        "commission_rate": float(plumber.commission_rate),
        "is_active": plumber.is_active,
        "start_date": plumber.start_date.isoformat() if plumber.start_date else None,
    }


@router.get("")
async def list_plumbers(storage: Storage = Depends(get_storage)):
    return [plumber_to_dict(p) for p in storage.get_plumbers()]


@router.get("/active")
async def list_active_plumbers(storage: Storage = Depends(get_storage)):
    return [plumber_to_dict(p) for p in storage.get_active_plumbers()]


@router.get("/{plumber_id}")
async def get_plumber(plumber_id: int, storage: Storage = Depends(get_storage)):
    plumber = storage.get_plumber(plumber_id)
    if not plumber:
        raise HTTPException(status_code=404, detail="Plumber not found")
    return plumber_to_dict(plumber)


@router.post("", status_code=201)
async def create_plumber(data: PlumberCreate, storage: Storage = Depends(get_storage)):
    plumber = storage.create_plumber(data.model_dump())
    return plumber_to_dict(plumber)


@router.patch("/{plumber_id}")
async def update_plumber(
    plumber_id: int, data: PlumberUpdate, storage: Storage = Depends(get_storage)
):
    """Update a plumber. A new commission rate only applies to jobs priced afterwards."""
    plumber = storage.update_plumber(plumber_id, data.model_dump(exclude_none=True))
    if not plumber:
        raise HTTPException(status_code=404, detail="Plumber not found")
    return plumber_to_dict(plumber)


@router.delete("/{plumber_id}", status_code=204)
async def delete_plumber(plumber_id: int, storage: Storage = Depends(get_storage)):
    try:
        deleted = storage.delete_plumber(plumber_id)
    except PlumberInUseError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Plumber not found")
    return Response(status_code=204)
