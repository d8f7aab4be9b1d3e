"""
Job Write Path

Prices a job with its plumber's current commission rate when it is created,
and again whenever an update changes revenue, parts cost, outside labor or
the plumber. Edits that leave those inputs alone keep the stored commission,
so a later change to a plumber's rate never rewrites past jobs.

Money inputs are rounded to cents before pricing, so the commission is always
derived from exactly the amounts that get stored.
"""

import logging
from typing import Any, Dict, Optional

from app.models import Job
from app.services.commission import (
    DEFAULT_POLICY,
    CommissionPolicy,
    commission_inputs_changed,
    price_job,
)
from app.storage.base import Storage, UnknownReferenceError

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("revenue", "parts_cost", "outside_labor")


def quantize_money(data: Dict[str, Any], policy: CommissionPolicy = DEFAULT_POLICY) -> Dict[str, Any]:
    """Copy of `data` with every money field present rounded to the currency quantum."""
    rounded = dict(data)
    for field in MONEY_FIELDS:
        if rounded.get(field) is not None:
            rounded[field] = policy.round_currency(rounded[field])
    return rounded


def record_job(
    storage: Storage, data: Dict[str, Any], policy: CommissionPolicy = DEFAULT_POLICY
) -> Job:
    """
    Create a job with a freshly calculated commission.

    Raises:
        UnknownReferenceError: plumber or payroll does not exist
        PayrollFinalizedError: payroll is finalized
    """
    plumber = storage.get_plumber(data.get("plumber_id"))
    if plumber is None:
        raise UnknownReferenceError("Plumber not found")

    priced = quantize_money(data, policy)
    priced["commission_amount"] = price_job(
        priced.get("revenue"),
        priced.get("parts_cost"),
        priced.get("outside_labor"),
        plumber.commission_rate,
        policy=policy,
    )
    return storage.create_job(priced)


def revise_job(
    storage: Storage,
    job_id: int,
    changes: Dict[str, Any],
    policy: CommissionPolicy = DEFAULT_POLICY,
) -> Optional[Job]:
    """
    Apply a partial update to a job, re-pricing it when commission inputs change.

    Pricing runs inside the storage write, against the row as it is locked
    there, so concurrent edits cannot leave a commission priced from stale
    amounts. Returns None when the job does not exist.
    """
    changes = quantize_money({k: v for k, v in changes.items() if v is not None}, policy)
    # Commission is always derived here, never taken from the caller
    changes.pop("commission_amount", None)

    def reprice(job, plumber):
        if not commission_inputs_changed(job, changes):
            return None
        amount = price_job(
            changes.get("revenue", job.revenue),
            changes.get("parts_cost", job.parts_cost),
            changes.get("outside_labor", job.outside_labor),
            plumber.commission_rate,
            policy=policy,
        )
        logger.debug("Re-priced job %s at %s%%: %s", job_id, plumber.commission_rate, amount)
        return amount

    return storage.update_job(job_id, changes, reprice=reprice)
