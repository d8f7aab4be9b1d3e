"""Printable payroll reports: HTML pages, CSV export and PDF download."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, Response

from app.models import Payroll
from app.services.commission import DEFAULT_POLICY
from app.services.payroll_report import (
    COMPANY_NAME,
    formula_lines,
    generate_payroll_pdf,
    markup_percent,
    summary_to_csv,
)
from app.services.payroll_summary import job_totals, summary_totals
from app.storage import Storage, get_storage
from app.template_config import templates

router = APIRouter(prefix="/reports", tags=["reports"])


def _get_payroll(storage: Storage, payroll_id: int) -> Payroll:
    payroll = storage.get_payroll(payroll_id)
    if not payroll:
        raise HTTPException(status_code=404, detail="Payroll not found")
    return payroll


@router.get("/payrolls/{payroll_id}", response_class=HTMLResponse)
async def payroll_report(request: Request, payroll_id: int, storage: Storage = Depends(get_storage)):
    payroll = _get_payroll(storage, payroll_id)
    rows = storage.get_payroll_summary(payroll_id)

    return templates.TemplateResponse(
        request,
        "reports/payroll.html",
        {
            "company_name": COMPANY_NAME,
            "payroll": payroll,
            "rows": rows,
            "totals": summary_totals(rows),
            "formula_lines": formula_lines(DEFAULT_POLICY),
        },
    )


@router.get("/payrolls/{payroll_id}/plumbers/{plumber_id}", response_class=HTMLResponse)
async def plumber_report(
    request: Request,
    payroll_id: int,
    plumber_id: int,
    storage: Storage = Depends(get_storage),
):
    """One plumber's job-by-job commission statement for a payroll week."""
    payroll = _get_payroll(storage, payroll_id)
    plumber = storage.get_plumber(plumber_id)
    if not plumber:
        raise HTTPException(status_code=404, detail="Plumber not found")

    jobs = [j for j in storage.get_jobs_by_payroll(payroll_id) if j.plumber_id == plumber_id]
    jobs.sort(key=lambda j: (j.date, j.id))

    return templates.TemplateResponse(
        request,
        "reports/plumber.html",
        {
            "company_name": COMPANY_NAME,
            "payroll": payroll,
            "plumber": plumber,
            "jobs": jobs,
            "totals": job_totals(jobs, DEFAULT_POLICY),
            "markup_percent": markup_percent(DEFAULT_POLICY),
        },
    )


@router.get("/payrolls/{payroll_id}/summary.csv")
async def payroll_csv(payroll_id: int, storage: Storage = Depends(get_storage)):
    payroll = _get_payroll(storage, payroll_id)
    content = summary_to_csv(storage.get_payroll_summary(payroll_id))
    filename = f"payroll_{payroll.week_ending_date.isoformat()}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/payrolls/{payroll_id}/report.pdf")
async def payroll_pdf(payroll_id: int, storage: Storage = Depends(get_storage)):
    payroll = _get_payroll(storage, payroll_id)
    pdf_bytes = generate_payroll_pdf(payroll, storage.get_payroll_summary(payroll_id))
    filename = f"payroll_{payroll.week_ending_date.isoformat()}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
