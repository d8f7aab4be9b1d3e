"""In-memory storage used when no DATABASE_URL is configured."""

import itertools
import threading
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from app.models import Job, Payroll, Plumber, User
from app.services.payroll_summary import JobWithPlumber
from app.storage.base import (
    apply_changes,
    DuplicatePayrollError,
    PayrollFinalizedError,
    PlumberInUseError,
    Repricer,
    Storage,
    UnknownReferenceError,
)


class MemoryStorage(Storage):
    """
    Dict-backed storage holding transient (never persisted) model instances.

    All mutations run under one lock so a job's money fields and its
    commission are always replaced together.
    """

    def __init__(self, seed: bool = True):
        self._lock = threading.RLock()
        self._plumbers: Dict[int, Plumber] = {}
        self._jobs: Dict[int, Job] = {}
        self._payrolls: Dict[int, Payroll] = {}
        self._users: Dict[int, User] = {}
        self._plumber_ids = itertools.count(1)
        self._job_ids = itertools.count(1)
        self._payroll_ids = itertools.count(1)
        self._user_ids = itertools.count(1)

        if seed:
            self._initialize_data()

    def _initialize_data(self):
        # No payrolls or jobs; a draft payroll is created on demand
        self.create_plumber(
            {
                "name": "Lucas Whelan",
                "email": "lucas@example.com",
                "phone": "555-000-0000",
                "commission_rate": Plumber.DEFAULT_COMMISSION_RATE,
                "is_active": True,
                "start_date": date.today(),
            }
        )

    # Plumber operations
    def get_plumbers(self) -> List[Plumber]:
        return list(self._plumbers.values())

    def get_active_plumbers(self) -> List[Plumber]:
        return [p for p in self._plumbers.values() if p.is_active]

    def get_plumber(self, plumber_id: int) -> Optional[Plumber]:
        return self._plumbers.get(plumber_id)

    def create_plumber(self, data: Dict[str, Any]) -> Plumber:
        with self._lock:
            plumber = apply_changes(
                Plumber(commission_rate=Plumber.DEFAULT_COMMISSION_RATE, is_active=True), data
            )
            plumber.id = next(self._plumber_ids)
            self._plumbers[plumber.id] = plumber
            return plumber

    def update_plumber(self, plumber_id: int, data: Dict[str, Any]) -> Optional[Plumber]:
        with self._lock:
            plumber = self._plumbers.get(plumber_id)
            if plumber is None:
                return None
            return apply_changes(plumber, data)

    def delete_plumber(self, plumber_id: int) -> bool:
        with self._lock:
            if plumber_id not in self._plumbers:
                return False
            if any(job.plumber_id == plumber_id for job in self._jobs.values()):
                raise PlumberInUseError("Plumber has recorded jobs; deactivate instead")
            del self._plumbers[plumber_id]
            return True

    # Job operations
    def get_jobs(self) -> List[Job]:
        return list(self._jobs.values())

    def get_job(self, job_id: int) -> Optional[Job]:
        return self._jobs.get(job_id)

    def get_jobs_by_plumber(self, plumber_id: int) -> List[Job]:
        return [job for job in self._jobs.values() if job.plumber_id == plumber_id]

    def get_jobs_by_payroll(self, payroll_id: int) -> List[Job]:
        return [job for job in self._jobs.values() if job.payroll_id == payroll_id]

    def get_jobs_with_plumber_by_payroll(self, payroll_id: int) -> List[JobWithPlumber]:
        with self._lock:
            return [
                JobWithPlumber(job=job, plumber=self._plumbers.get(job.plumber_id))
                for job in sorted(self.get_jobs_by_payroll(payroll_id), key=lambda j: j.id)
            ]

    def _check_job_refs(self, plumber_id: int, payroll_id: int) -> Plumber:
        plumber = self._plumbers.get(plumber_id)
        if plumber is None:
            raise UnknownReferenceError("Plumber not found")
        payroll = self._payrolls.get(payroll_id)
        if payroll is None:
            raise UnknownReferenceError("Payroll not found")
        if payroll.is_finalized:
            raise PayrollFinalizedError("Payroll is finalized")
        return plumber

    def create_job(self, data: Dict[str, Any]) -> Job:
        with self._lock:
            self._check_job_refs(data.get("plumber_id"), data.get("payroll_id"))
            job = apply_changes(Job(), data)
            job.id = next(self._job_ids)
            self._jobs[job.id] = job
            return job

    def update_job(
        self, job_id: int, data: Dict[str, Any], reprice: Optional[Repricer] = None
    ) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None
            if self._payrolls[job.payroll_id].is_finalized:
                raise PayrollFinalizedError("Payroll is finalized")
            plumber = self._check_job_refs(
                data.get("plumber_id", job.plumber_id), data.get("payroll_id", job.payroll_id)
            )
            data = dict(data)
            if reprice is not None:
                amount = reprice(job, plumber)
                if amount is not None:
                    data["commission_amount"] = amount
            return apply_changes(job, data)

    def delete_job(self, job_id: int) -> bool:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return False
            if self._payrolls[job.payroll_id].is_finalized:
                raise PayrollFinalizedError("Payroll is finalized")
            del self._jobs[job_id]
            return True

    # Payroll operations
    def get_payrolls(self) -> List[Payroll]:
        return sorted(self._payrolls.values(), key=lambda p: p.week_ending_date, reverse=True)

    def get_payroll(self, payroll_id: int) -> Optional[Payroll]:
        return self._payrolls.get(payroll_id)

    def get_payroll_by_date(self, week_ending_date: date) -> Optional[Payroll]:
        for payroll in self._payrolls.values():
            if payroll.week_ending_date == week_ending_date:
                return payroll
        return None

    def get_latest_finalized_payroll(self) -> Optional[Payroll]:
        finalized = [p for p in self._payrolls.values() if p.is_finalized]
        if not finalized:
            return None
        return max(finalized, key=lambda p: p.week_ending_date)

    def create_payroll(self, data: Dict[str, Any]) -> Payroll:
        with self._lock:
            if self.get_payroll_by_date(data.get("week_ending_date")) is not None:
                raise DuplicatePayrollError("A payroll already exists for that week")
            payroll = apply_changes(Payroll(status=Payroll.DRAFT), data)
            payroll.id = next(self._payroll_ids)
            payroll.created_at = datetime.utcnow()
            self._payrolls[payroll.id] = payroll
            return payroll

    def update_payroll(self, payroll_id: int, data: Dict[str, Any]) -> Optional[Payroll]:
        with self._lock:
            payroll = self._payrolls.get(payroll_id)
            if payroll is None:
                return None
            week = data.get("week_ending_date")
            if week is not None:
                existing = self.get_payroll_by_date(week)
                if existing is not None and existing.id != payroll_id:
                    raise DuplicatePayrollError("A payroll already exists for that week")
            return apply_changes(payroll, data)

    def delete_payroll(self, payroll_id: int) -> bool:
        with self._lock:
            if payroll_id not in self._payrolls:
                return False
            for job_id in [j.id for j in self._jobs.values() if j.payroll_id == payroll_id]:
                del self._jobs[job_id]
            del self._payrolls[payroll_id]
            return True

    # User operations
    def create_user(self, data: Dict[str, Any]) -> User:
        with self._lock:
            user = apply_changes(User(), data)
            user.id = next(self._user_ids)
            user.created_at = datetime.utcnow()
            self._users[user.id] = user
            return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)
