from app.services.commission import (
    CommissionPolicy,
    CommissionBreakdown,
    DEFAULT_POLICY,
    calculate_commission,
    price_job,
    commission_inputs_changed,
)
from app.services.payroll_summary import (
    JobWithPlumber,
    PayrollSummary,
    PlumberNotFoundError,
    summarize,
    summary_totals,
    job_totals,
)

__all__ = [
    'CommissionPolicy',
    'CommissionBreakdown',
    'DEFAULT_POLICY',
    'calculate_commission',
    'price_job',
    'commission_inputs_changed',
    'JobWithPlumber',
    'PayrollSummary',
    'PlumberNotFoundError',
    'summarize',
    'summary_totals',
    'job_totals',
]
