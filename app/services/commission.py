"""
Commission Calculation Service

Handles:
- Cost markup (parts and outside labor marked up before subtracting)
- Commission base (revenue minus adjusted costs, never below zero)
- Commission amount (base × plumber's commission rate)
- Pricing a job at write time (rounded to cents for storage)

All arithmetic uses Decimal. The markup and rounding rules live on a single
CommissionPolicy so the calculator and the payroll summary cannot drift apart.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Fields whose change invalidates a job's stored commission
COMMISSION_INPUTS = ("revenue", "parts_cost", "outside_labor", "plumber_id")


def to_decimal(value: Number) -> Decimal:
    """Convert a number to Decimal without picking up binary float noise."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class CommissionPolicy:
    """Markup and rounding rules shared by every commission calculation."""

    markup: Decimal = Decimal("1.25")
    currency_quantum: Decimal = Decimal("0.01")
    rounding: str = ROUND_HALF_UP

    def mark_up(self, amount: Number) -> Decimal:
        return to_decimal(amount) * self.markup

    def adjusted_costs(self, parts_cost: Number, outside_labor: Number) -> Decimal:
        """Parts cost and outside labor, each marked up, then summed."""
        return self.mark_up(parts_cost) + self.mark_up(outside_labor)

    def commission_base(self, revenue: Number, adjusted_costs: Number) -> Decimal:
        """Revenue minus adjusted costs, floored at zero (no clawback)."""
        return max(ZERO, to_decimal(revenue) - to_decimal(adjusted_costs))

    def round_currency(self, amount: Number) -> Decimal:
        return to_decimal(amount).quantize(self.currency_quantum, rounding=self.rounding)


DEFAULT_POLICY = CommissionPolicy()


@dataclass(frozen=True)
class CommissionBreakdown:
    revenue: Decimal
    parts_cost_with_markup: Decimal
    outside_labor_with_markup: Decimal
    adjusted_costs: Decimal
    commission_base: Decimal
    commission_amount: Decimal

    def as_dict(self) -> Dict[str, Decimal]:
        return {
            "revenue": self.revenue,
            "parts_cost_with_markup": self.parts_cost_with_markup,
            "outside_labor_with_markup": self.outside_labor_with_markup,
            "adjusted_costs": self.adjusted_costs,
            "commission_base": self.commission_base,
            "commission_amount": self.commission_amount,
        }


def calculate_commission(
    revenue: Number,
    parts_cost: Number,
    outside_labor: Number,
    commission_rate: Number,
    policy: CommissionPolicy = DEFAULT_POLICY,
) -> CommissionBreakdown:
    """
    Calculate the commission breakdown for one job.

    Args:
        revenue: Amount billed to the customer
        parts_cost: Raw parts cost
        outside_labor: Raw subcontracted labor cost
        commission_rate: Plumber's rate as a percentage (e.g., 30 for 30%)
        policy: Markup rules to apply

    Returns:
        CommissionBreakdown with every intermediate value, unrounded

    No range checks are done here: negative amounts or rates outside 0-100
    produce a proportional result. Rejecting them is up to the caller.
    """
    revenue = to_decimal(revenue)
    parts_cost_with_markup = policy.mark_up(parts_cost)
    outside_labor_with_markup = policy.mark_up(outside_labor)
    adjusted_costs = parts_cost_with_markup + outside_labor_with_markup
    commission_base = policy.commission_base(revenue, adjusted_costs)
    commission_amount = commission_base * (to_decimal(commission_rate) / HUNDRED)

    return CommissionBreakdown(
        revenue=revenue,
        parts_cost_with_markup=parts_cost_with_markup,
        outside_labor_with_markup=outside_labor_with_markup,
        adjusted_costs=adjusted_costs,
        commission_base=commission_base,
        commission_amount=commission_amount,
    )


def price_job(
    revenue: Number,
    parts_cost: Number,
    outside_labor: Number,
    commission_rate: Number,
    policy: CommissionPolicy = DEFAULT_POLICY,
) -> Decimal:
    """Commission to persist on a job, rounded to the currency quantum."""
    breakdown = calculate_commission(
        revenue, parts_cost, outside_labor, commission_rate, policy=policy
    )
    return policy.round_currency(breakdown.commission_amount)


def commission_inputs_changed(job: Any, changes: Mapping[str, Any]) -> bool:
    """
    Check whether an update touches any field the stored commission depends on.

    Money fields are compared as Decimals so 100 and 100.00 count as unchanged.
    """
    for field in COMMISSION_INPUTS:
        if field not in changes or changes[field] is None:
            continue
        current = getattr(job, field)
        if field == "plumber_id":
            if changes[field] != current:
                return True
        elif to_decimal(changes[field]) != to_decimal(current):
            return True
    return False
