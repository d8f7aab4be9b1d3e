"""
Storage interface shared by the in-memory and SQL backends.

Backends return model instances (app.models) and None for missing rows.
Rule violations raise StorageError subclasses, which routes turn into 4xx.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from app.models import Job, Payroll, Plumber, User
from app.services.commission import DEFAULT_POLICY, CommissionPolicy
from app.services.payroll_summary import JobWithPlumber, PayrollSummary, summarize

logger = logging.getLogger(__name__)

FRIDAY = 4

# Called with the locked job and its (new) plumber; returns a commission or None to keep it
Repricer = Callable[[Job, Plumber], Optional[Decimal]]


class StorageError(ValueError):
    """Base class for storage rule violations."""


class UnknownReferenceError(StorageError):
    """A write references a plumber or payroll that does not exist."""


class PayrollFinalizedError(StorageError):
    """Jobs cannot be added, changed or removed in a finalized payroll."""


class PlumberInUseError(StorageError):
    """A plumber with recorded jobs cannot be deleted."""


class DuplicatePayrollError(StorageError):
    """Only one payroll may exist per week ending date."""


def apply_changes(obj, data: Dict[str, Any]):
    """Copy known column values from `data` onto a model instance."""
    columns = obj.__table__.columns.keys()
    for key, value in data.items():
        if key in columns and key != "id":
            setattr(obj, key, value)
    return obj


def week_ending_for(day: date) -> date:
    """Return the Friday that closes the pay week containing `day`."""
    return day + timedelta(days=(FRIDAY - day.weekday()) % 7)


class Storage(ABC):
    """Persistence operations used by the API and reports."""

    # Plumber operations
    @abstractmethod
    def get_plumbers(self) -> List[Plumber]: ...

    @abstractmethod
    def get_active_plumbers(self) -> List[Plumber]: ...

    @abstractmethod
    def get_plumber(self, plumber_id: int) -> Optional[Plumber]: ...

    @abstractmethod
    def create_plumber(self, data: Dict[str, Any]) -> Plumber: ...

    @abstractmethod
    def update_plumber(self, plumber_id: int, data: Dict[str, Any]) -> Optional[Plumber]: ...

    @abstractmethod
    def delete_plumber(self, plumber_id: int) -> bool:
        """Delete a plumber. Raises PlumberInUseError if they have jobs."""

    # Job operations
    @abstractmethod
    def get_jobs(self) -> List[Job]: ...

    @abstractmethod
    def get_job(self, job_id: int) -> Optional[Job]: ...

    @abstractmethod
    def get_jobs_by_plumber(self, plumber_id: int) -> List[Job]: ...

    @abstractmethod
    def get_jobs_by_payroll(self, payroll_id: int) -> List[Job]: ...

    @abstractmethod
    def get_jobs_with_plumber_by_payroll(self, payroll_id: int) -> List[JobWithPlumber]:
        """Jobs of a payroll ordered by id, each joined to its plumber (None if missing)."""

    @abstractmethod
    def create_job(self, data: Dict[str, Any]) -> Job:
        """
        Insert a job. `data` must already carry its commission_amount.

        Raises:
            UnknownReferenceError: plumber or payroll does not exist
            PayrollFinalizedError: payroll is finalized
        """

    @abstractmethod
    def update_job(
        self, job_id: int, data: Dict[str, Any], reprice: Optional[Repricer] = None
    ) -> Optional[Job]:
        """
        Apply `data` to a job in one write.

        When given, `reprice` runs inside the same lock or transaction as the
        write, and a non-None result becomes the new commission_amount.

        Raises:
            UnknownReferenceError: new plumber or payroll does not exist
            PayrollFinalizedError: current or target payroll is finalized
        """

    @abstractmethod
    def delete_job(self, job_id: int) -> bool: ...

    # Payroll operations
    @abstractmethod
    def get_payrolls(self) -> List[Payroll]:
        """All payrolls, most recent week first."""

    @abstractmethod
    def get_payroll(self, payroll_id: int) -> Optional[Payroll]: ...

    @abstractmethod
    def get_payroll_by_date(self, week_ending_date: date) -> Optional[Payroll]: ...

    @abstractmethod
    def get_latest_finalized_payroll(self) -> Optional[Payroll]: ...

    @abstractmethod
    def create_payroll(self, data: Dict[str, Any]) -> Payroll: ...

    @abstractmethod
    def update_payroll(self, payroll_id: int, data: Dict[str, Any]) -> Optional[Payroll]: ...

    @abstractmethod
    def delete_payroll(self, payroll_id: int) -> bool:
        """Delete a payroll together with its jobs."""

    def get_current_payroll(self, today: Optional[date] = None) -> Payroll:
        """
        Return the latest draft payroll, creating one when none exists.

        A new draft closes on the Friday of the current week, or the first
        following Friday that has no payroll yet.
        """
        drafts = [p for p in self.get_payrolls() if p.status == Payroll.DRAFT]
        if drafts:
            return max(drafts, key=lambda p: p.week_ending_date)

        week_ending = week_ending_for(today or date.today())
        while self.get_payroll_by_date(week_ending) is not None:
            week_ending += timedelta(days=7)
        logger.info("No draft payroll found; creating one for week ending %s", week_ending)
        try:
            return self.create_payroll({"week_ending_date": week_ending, "status": Payroll.DRAFT})
        except DuplicatePayrollError:
            # Another request opened the same week first
            existing = self.get_payroll_by_date(week_ending)
            if existing is None:
                raise
            return existing

    # Summary operations
    def get_payroll_summary(
        self, payroll_id: int, policy: CommissionPolicy = DEFAULT_POLICY
    ) -> List[PayrollSummary]:
        """Recompute the per-plumber summary for a payroll from its jobs."""
        return summarize(self.get_jobs_with_plumber_by_payroll(payroll_id), policy=policy)

    # User operations
    @abstractmethod
    def create_user(self, data: Dict[str, Any]) -> User: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_id(self, user_id: int) -> Optional[User]: ...
