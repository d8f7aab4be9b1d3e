"""
Payroll Summary Service

Folds the jobs of one payroll period into per-plumber summary rows.
Summaries are never stored; they are recomputed from the jobs on every read.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.services.commission import DEFAULT_POLICY, CommissionPolicy, ZERO, to_decimal


class PlumberNotFoundError(LookupError):
    """A job in the payroll references a plumber that could not be resolved."""

    def __init__(self, job_id: Optional[int], plumber_id: Optional[int]):
        self.job_id = job_id
        self.plumber_id = plumber_id
        super().__init__(f"Plumber {plumber_id} not found for job {job_id}")


@dataclass
class JobWithPlumber:
    """A job joined with its owning plumber (None when the join failed)."""

    job: Any
    plumber: Any


@dataclass
class PayrollSummary:
    plumber_id: int
    plumber_name: str
    job_count: int = 0
    total_revenue: Decimal = ZERO
    total_costs: Decimal = ZERO
    total_commission: Decimal = ZERO


@dataclass
class PayrollTotals:
    job_count: int = 0
    total_revenue: Decimal = ZERO
    total_costs: Decimal = ZERO
    total_commission: Decimal = ZERO


@dataclass
class JobTotals:
    total_revenue: Decimal = ZERO
    total_parts_cost: Decimal = ZERO
    total_outside_labor: Decimal = ZERO
    total_adjusted_costs: Decimal = ZERO
    total_commission: Decimal = ZERO


def summarize(
    jobs: Sequence[JobWithPlumber],
    policy: CommissionPolicy = DEFAULT_POLICY,
) -> List[PayrollSummary]:
    """
    Build one summary row per plumber with at least one job.

    Rows come back in the order each plumber is first seen. Commission is the
    sum of each job's stored commission_amount; it is not re-derived.

    Raises:
        PlumberNotFoundError: if any job has no resolved plumber
    """
    rows: Dict[int, PayrollSummary] = {}

    for entry in jobs:
        job = entry.job
        if entry.plumber is None:
            raise PlumberNotFoundError(job.id, job.plumber_id)

        row = rows.get(job.plumber_id)
        if row is None:
            row = PayrollSummary(plumber_id=job.plumber_id, plumber_name=entry.plumber.name)
            rows[job.plumber_id] = row

        row.job_count += 1
        row.total_revenue += to_decimal(job.revenue)
        row.total_costs += policy.adjusted_costs(job.parts_cost, job.outside_labor)
        row.total_commission += to_decimal(job.commission_amount)

    return list(rows.values())


def summary_totals(rows: Iterable[PayrollSummary]) -> PayrollTotals:
    """Grand totals across all plumber rows of a payroll."""
    totals = PayrollTotals()
    for row in rows:
        totals.job_count += row.job_count
        totals.total_revenue += row.total_revenue
        totals.total_costs += row.total_costs
        totals.total_commission += row.total_commission
    return totals


def job_totals(jobs: Iterable[Any], policy: CommissionPolicy = DEFAULT_POLICY) -> JobTotals:
    """Totals over raw jobs, e.g. for a single plumber's statement."""
    totals = JobTotals()
    for job in jobs:
        totals.total_revenue += to_decimal(job.revenue)
        totals.total_parts_cost += to_decimal(job.parts_cost)
        totals.total_outside_labor += to_decimal(job.outside_labor)
        totals.total_adjusted_costs += policy.adjusted_costs(job.parts_cost, job.outside_labor)
        totals.total_commission += to_decimal(job.commission_amount)
    return totals
