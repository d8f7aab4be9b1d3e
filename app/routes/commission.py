from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.services.commission import calculate_commission

router = APIRouter(prefix="/api", tags=["commission"])


class CommissionRequest(BaseModel):
    revenue: Decimal = Field(ge=0, decimal_places=2)
    parts_cost: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    outside_labor: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    commission_rate: Decimal = Field(ge=0, le=100, decimal_places=2)


@router.post("/calculate-commission")
async def calculate(data: CommissionRequest):
    """Preview a job's commission without saving anything."""
    breakdown = calculate_commission(
        data.revenue, data.parts_cost, data.outside_labor, data.commission_rate
    )
    return {key: float(value) for key, value in breakdown.as_dict().items()}
