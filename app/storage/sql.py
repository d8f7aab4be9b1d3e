"""SQLAlchemy-backed storage used when DATABASE_URL is set."""

from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from app.database import create_session_factory, get_engine, init_db
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


class SqlStorage(Storage):
    """Each call runs in its own session; writes commit as one transaction."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @classmethod
    def from_url(cls, url: Optional[str] = None) -> "SqlStorage":
        engine = get_engine(url)
        init_db(engine)
        return cls(create_session_factory(engine))

    # Plumber operations
    def get_plumbers(self) -> List[Plumber]:
        with self._session_factory() as db:
            return db.query(Plumber).order_by(Plumber.id).all()

    def get_active_plumbers(self) -> List[Plumber]:
        with self._session_factory() as db:
            return (
                db.query(Plumber)
                .filter(Plumber.is_active.is_(True))
                .order_by(Plumber.id)
                .all()
            )

    def get_plumber(self, plumber_id: int) -> Optional[Plumber]:
        with self._session_factory() as db:
            return db.get(Plumber, plumber_id)

    def create_plumber(self, data: Dict[str, Any]) -> Plumber:
        with self._session_factory.begin() as db:
            plumber = apply_changes(Plumber(), data)
            db.add(plumber)
            db.flush()
            return plumber

    def update_plumber(self, plumber_id: int, data: Dict[str, Any]) -> Optional[Plumber]:
        with self._session_factory.begin() as db:
            plumber = db.get(Plumber, plumber_id)
            if plumber is None:
                return None
            return apply_changes(plumber, data)

    def delete_plumber(self, plumber_id: int) -> bool:
        with self._session_factory.begin() as db:
            plumber = db.get(Plumber, plumber_id)
            if plumber is None:
                return False
            if db.query(Job.id).filter(Job.plumber_id == plumber_id).first() is not None:
                raise PlumberInUseError("Plumber has recorded jobs; deactivate instead")
            db.delete(plumber)
            return True

    # Job operations
    def get_jobs(self) -> List[Job]:
        with self._session_factory() as db:
            return db.query(Job).order_by(Job.id).all()

    def get_job(self, job_id: int) -> Optional[Job]:
        with self._session_factory() as db:
            return db.get(Job, job_id)

    def get_jobs_by_plumber(self, plumber_id: int) -> List[Job]:
        with self._session_factory() as db:
            return db.query(Job).filter(Job.plumber_id == plumber_id).order_by(Job.id).all()

    def get_jobs_by_payroll(self, payroll_id: int) -> List[Job]:
        with self._session_factory() as db:
            return db.query(Job).filter(Job.payroll_id == payroll_id).order_by(Job.id).all()

    def get_jobs_with_plumber_by_payroll(self, payroll_id: int) -> List[JobWithPlumber]:
        with self._session_factory() as db:
            # Outer join so a dangling plumber_id surfaces as plumber=None
            rows = (
                db.query(Job, Plumber)
                .outerjoin(Plumber, Job.plumber_id == Plumber.id)
                .filter(Job.payroll_id == payroll_id)
                .order_by(Job.id)
                .all()
            )
            return [JobWithPlumber(job=job, plumber=plumber) for job, plumber in rows]

    def _check_job_refs(self, db: Session, plumber_id: int, payroll_id: int) -> Plumber:
        plumber = db.get(Plumber, plumber_id) if plumber_id is not None else None
        if plumber is None:
            raise UnknownReferenceError("Plumber not found")
        payroll = db.get(Payroll, payroll_id) if payroll_id is not None else None
        if payroll is None:
            raise UnknownReferenceError("Payroll not found")
        if payroll.is_finalized:
            raise PayrollFinalizedError("Payroll is finalized")
        return plumber

    def create_job(self, data: Dict[str, Any]) -> Job:
        with self._session_factory.begin() as db:
            self._check_job_refs(db, data.get("plumber_id"), data.get("payroll_id"))
            job = apply_changes(Job(), data)
            db.add(job)
            db.flush()
            return job

    def update_job(
        self, job_id: int, data: Dict[str, Any], reprice: Optional[Repricer] = None
    ) -> Optional[Job]:
        with self._session_factory.begin() as db:
            job = db.get(Job, job_id, with_for_update=True)
            if job is None:
                return None
            if db.get(Payroll, job.payroll_id).is_finalized:
                raise PayrollFinalizedError("Payroll is finalized")
            plumber = self._check_job_refs(
                db, data.get("plumber_id", job.plumber_id), data.get("payroll_id", job.payroll_id)
            )
            data = dict(data)
            # Priced against the row locked above, in the same transaction
            if reprice is not None:
                amount = reprice(job, plumber)
                if amount is not None:
                    data["commission_amount"] = amount
            return apply_changes(job, data)

    def delete_job(self, job_id: int) -> bool:
        with self._session_factory.begin() as db:
            job = db.get(Job, job_id)
            if job is None:
                return False
            if db.get(Payroll, job.payroll_id).is_finalized:
                raise PayrollFinalizedError("Payroll is finalized")
            db.delete(job)
            return True

    # Payroll operations
    def get_payrolls(self) -> List[Payroll]:
        with self._session_factory() as db:
            return db.query(Payroll).order_by(Payroll.week_ending_date.desc()).all()

    def get_payroll(self, payroll_id: int) -> Optional[Payroll]:
        with self._session_factory() as db:
            return db.get(Payroll, payroll_id)

    def get_payroll_by_date(self, week_ending_date: date) -> Optional[Payroll]:
        with self._session_factory() as db:
            return (
                db.query(Payroll)
                .filter(Payroll.week_ending_date == week_ending_date)
                .first()
            )

    def get_latest_finalized_payroll(self) -> Optional[Payroll]:
        with self._session_factory() as db:
            return (
                db.query(Payroll)
                .filter(Payroll.status == Payroll.FINALIZED)
                .order_by(Payroll.week_ending_date.desc())
                .first()
            )

    def create_payroll(self, data: Dict[str, Any]) -> Payroll:
        with self._session_factory.begin() as db:
            week = data.get("week_ending_date")
            if db.query(Payroll.id).filter(Payroll.week_ending_date == week).first():
                raise DuplicatePayrollError("A payroll already exists for that week")
            payroll = apply_changes(Payroll(status=Payroll.DRAFT), data)
            db.add(payroll)
            db.flush()
            return payroll

    def update_payroll(self, payroll_id: int, data: Dict[str, Any]) -> Optional[Payroll]:
        with self._session_factory.begin() as db:
            payroll = db.get(Payroll, payroll_id)
            if payroll is None:
                return None
            week = data.get("week_ending_date")
            if week is not None:
                clash = (
                    db.query(Payroll.id)
                    .filter(Payroll.week_ending_date == week, Payroll.id != payroll_id)
                    .first()
                )
                if clash:
                    raise DuplicatePayrollError("A payroll already exists for that week")
            return apply_changes(payroll, data)

    def delete_payroll(self, payroll_id: int) -> bool:
        with self._session_factory.begin() as db:
            payroll = db.get(Payroll, payroll_id)
            if payroll is None:
                return False
            # Relationship cascade removes the payroll's jobs
            db.delete(payroll)
            return True

    # User operations
    def create_user(self, data: Dict[str, Any]) -> User:
        with self._session_factory.begin() as db:
            user = apply_changes(User(), data)
            db.add(user)
            db.flush()
            return user

    def get_user_by_username(self, username: str) -> Optional[User]:
        with self._session_factory() as db:
            return db.query(User).filter(User.username == username).first()

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._session_factory() as db:
            return db.get(User, user_id)
