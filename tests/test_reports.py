"""
Tests for payroll exports: CSV, PDF and the printable HTML reports.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.payroll_report import (
    formula_lines,
    generate_payroll_pdf,
    markup_percent,
    summary_to_csv,
)
from app.services.payroll_summary import PayrollSummary


@pytest.fixture
def rows():
    return [
        PayrollSummary(1, 'John Smith', 2, Decimal('2050'), Decimal('875.00'), Decimal('352.50')),
        PayrollSummary(2, 'Michael Johnson', 1, Decimal('750'), Decimal('312.50'), Decimal('131.25')),
    ]


class TestCsvExport:
    """Tests for summary_to_csv."""

    def test_rows_and_total(self, rows):
        lines = summary_to_csv(rows).splitlines()
        assert lines == [
            'Plumber,Jobs,Revenue,Adjusted Costs,Commission',
            'John Smith,2,2050.00,875.00,352.50',
            'Michael Johnson,1,750.00,312.50,131.25',
            'Total,3,2800.00,1187.50,483.75',
        ]

    def test_empty(self):
        lines = summary_to_csv([]).splitlines()
        assert lines[-1] == 'Total,0,0.00,0.00,0.00'


class TestPdfExport:
    """Tests for generate_payroll_pdf."""

    def test_generates_pdf(self, rows):
        payroll = SimpleNamespace(week_ending_date=date(2026, 10, 23), status='finalized')
        pdf = generate_payroll_pdf(payroll, rows)
        assert pdf.startswith(b'%PDF')


class TestFormula:
    """Tests for the formula footnote."""

    def test_markup_percent(self):
        assert markup_percent() == '25'

    def test_lines_mention_markup(self):
        assert '1.25' in formula_lines()[0]


class TestReportRoutes:
    """Tests for /reports endpoints."""

    @pytest.fixture
    def week(self, client):
        plumber = client.post('/api/plumbers', json={
            'name': 'John Smith',
            'email': 'john.smith@example.com',
            'phone': '555-123-4567',
            'commission_rate': 30,
            'start_date': '2022-01-01',
        }).json()
        payroll = client.post('/api/payrolls', json={'week_ending_date': '2026-10-23'}).json()
        client.post('/api/jobs', json={
            'date': '2026-10-19',
            'customer_name': 'Johnson Residence',
            'revenue': 850,
            'parts_cost': 250,
            'outside_labor': 100,
            'plumber_id': plumber['id'],
            'payroll_id': payroll['id'],
        })
        return plumber, payroll

    def test_payroll_html(self, client, week):
        _, payroll = week
        response = client.get(f"/reports/payrolls/{payroll['id']}")
        assert response.status_code == 200
        assert 'Weekly Payroll Summary' in response.text
        assert 'John Smith' in response.text
        assert '$123.75' in response.text

    def test_plumber_html(self, client, week):
        plumber, payroll = week
        response = client.get(f"/reports/payrolls/{payroll['id']}/plumbers/{plumber['id']}")
        assert response.status_code == 200
        assert 'Johnson Residence' in response.text
        assert '$437.50' in response.text
        assert 'with 25% markup' in response.text

    def test_plumber_html_missing_plumber(self, client, week):
        _, payroll = week
        response = client.get(f"/reports/payrolls/{payroll['id']}/plumbers/999")
        assert response.status_code == 404

    def test_csv(self, client, week):
        _, payroll = week
        response = client.get(f"/reports/payrolls/{payroll['id']}/summary.csv")
        assert response.status_code == 200
        assert response.headers['content-type'].startswith('text/csv')
        assert 'payroll_2026-10-23.csv' in response.headers['content-disposition']
        assert 'John Smith,1,850.00,437.50,123.75' in response.text

    def test_pdf(self, client, week):
        _, payroll = week
        response = client.get(f"/reports/payrolls/{payroll['id']}/report.pdf")
        assert response.status_code == 200
        assert response.headers['content-type'] == 'application/pdf'
        assert response.content.startswith(b'%PDF')

    def test_missing_payroll(self, client):
        assert client.get('/reports/payrolls/999').status_code == 404
        assert client.get('/reports/payrolls/999/summary.csv').status_code == 404
