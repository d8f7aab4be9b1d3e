"""
Unit tests for the payroll summary fold.

Tests:
- Per-plumber grouping and totals
- Row order (first job seen)
- Costs recomputed from the shared markup policy
- Missing plumber references
- Grand totals and per-job totals
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.commission import CommissionPolicy
from app.services.payroll_summary import (
    JobWithPlumber,
    PlumberNotFoundError,
    job_totals,
    summarize,
    summary_totals,
)


def make_job(job_id, plumber_id, revenue, parts_cost, outside_labor, commission):
    return SimpleNamespace(
        id=job_id,
        plumber_id=plumber_id,
        revenue=Decimal(revenue),
        parts_cost=Decimal(parts_cost),
        outside_labor=Decimal(outside_labor),
        commission_amount=Decimal(commission),
    )


JOHN = SimpleNamespace(id=1, name='John Smith')
MICHAEL = SimpleNamespace(id=2, name='Michael Johnson')


@pytest.fixture
def week_jobs():
    return [
        JobWithPlumber(make_job(1, 1, '850', '250', '100', '123.75'), JOHN),
        JobWithPlumber(make_job(2, 2, '750', '200', '50', '131.25'), MICHAEL),
        JobWithPlumber(make_job(3, 1, '1200', '350', '0', '228.75'), JOHN),
    ]


class TestSummarize:
    """Tests for folding jobs into per-plumber rows."""

    def test_one_row_per_plumber(self, week_jobs):
        rows = summarize(week_jobs)
        assert [row.plumber_id for row in rows] == [1, 2]

    def test_totals_for_plumber(self, week_jobs):
        john = summarize(week_jobs)[0]
        assert john.plumber_name == 'John Smith'
        assert john.job_count == 2
        assert john.total_revenue == Decimal('2050')
        assert john.total_costs == Decimal('875.00')
        assert john.total_commission == Decimal('352.50')

    def test_plumbers_do_not_mix(self, week_jobs):
        michael = summarize(week_jobs)[1]
        assert michael.job_count == 1
        assert michael.total_revenue == Decimal('750')
        assert michael.total_costs == Decimal('312.50')
        assert michael.total_commission == Decimal('131.25')

    def test_rows_in_first_seen_order(self):
        """Order follows the first job of each plumber, not the plumber id."""
        jobs = [
            JobWithPlumber(make_job(1, 2, '100', '0', '0', '30'), MICHAEL),
            JobWithPlumber(make_job(2, 1, '100', '0', '0', '30'), JOHN),
        ]
        assert [row.plumber_name for row in summarize(jobs)] == [
            'Michael Johnson',
            'John Smith',
        ]

    def test_uses_stored_commission(self):
        """Commission is summed as stored, even if the rate has changed since."""
        jobs = [JobWithPlumber(make_job(1, 1, '850', '250', '100', '99.99'), JOHN)]
        assert summarize(jobs)[0].total_commission == Decimal('99.99')

    def test_costs_follow_policy(self, week_jobs):
        rows = summarize(week_jobs, policy=CommissionPolicy(markup=Decimal('1')))
        assert rows[0].total_costs == Decimal('700')

    def test_empty_payroll(self):
        assert summarize([]) == []

    def test_missing_plumber_raises(self, week_jobs):
        week_jobs.append(JobWithPlumber(make_job(9, 42, '10', '0', '0', '3'), None))

        with pytest.raises(PlumberNotFoundError) as excinfo:
            summarize(week_jobs)

        assert excinfo.value.job_id == 9
        assert excinfo.value.plumber_id == 42
        assert isinstance(excinfo.value, LookupError)


class TestSummaryTotals:
    """Tests for grand totals across rows."""

    def test_totals(self, week_jobs):
        totals = summary_totals(summarize(week_jobs))
        assert totals.job_count == 3
        assert totals.total_revenue == Decimal('2800')
        assert totals.total_costs == Decimal('1187.50')
        assert totals.total_commission == Decimal('483.75')

    def test_row_commissions_add_up_to_jobs(self, week_jobs):
        """Grouping neither drops nor double counts a job's commission."""
        david = SimpleNamespace(id=3, name='David Wilson')
        jobs = week_jobs + [
            JobWithPlumber(make_job(4, 3, '550', '150', '0', '108.75'), david),
            JobWithPlumber(make_job(5, 2, '300', '400', '0', '0.00'), MICHAEL),
            JobWithPlumber(make_job(6, 3, '99.99', '10.01', '5', '33.20'), david),
        ]

        rows = summarize(jobs)

        assert len(rows) == 3
        assert sum(row.total_commission for row in rows) == sum(
            entry.job.commission_amount for entry in jobs)
        assert sum(row.job_count for row in rows) == len(jobs)

    def test_no_rows(self):
        totals = summary_totals([])
        assert totals.job_count == 0
        assert totals.total_commission == Decimal('0')


class TestJobTotals:
    """Tests for a single plumber's job totals."""

    def test_totals(self, week_jobs):
        jobs = [entry.job for entry in week_jobs if entry.job.plumber_id == 1]
        totals = job_totals(jobs)
        assert totals.total_revenue == Decimal('2050')
        assert totals.total_parts_cost == Decimal('600')
        assert totals.total_outside_labor == Decimal('100')
        assert totals.total_adjusted_costs == Decimal('875.00')
        assert totals.total_commission == Decimal('352.50')
