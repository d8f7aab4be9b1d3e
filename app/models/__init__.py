from app.models.user import User
from app.models.plumber import Plumber
from app.models.payroll import Payroll
from app.models.job import Job

__all__ = [
    "User",
    "Plumber",
    "Payroll",
    "Job",
]
