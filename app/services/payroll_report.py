"""
Payroll Report Service

Exports a payroll summary as CSV, and as a printable PDF using ReportLab.
"""

import csv
import io
import os
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from app.models import Payroll
from app.services.commission import DEFAULT_POLICY, CommissionPolicy
from app.services.payroll_summary import PayrollSummary, summary_totals

COMPANY_NAME = os.getenv("COMPANY_NAME", "MC Plumbing")

CSV_HEADER = ["Plumber", "Jobs", "Revenue", "Adjusted Costs", "Commission"]


def format_currency(value: Optional[Decimal]) -> str:
    """Format a decimal value as currency."""
    if value is None:
        return "$0.00"
    return f"${value:,.2f}"


def markup_percent(policy: CommissionPolicy = DEFAULT_POLICY) -> str:
    """Markup as a display percentage, e.g. '25'."""
    return f"{((policy.markup - 1) * 100).normalize():f}"


def formula_lines(policy: CommissionPolicy = DEFAULT_POLICY) -> List[str]:
    """Plain-language description of how commission is computed."""
    return [
        f"1. Adjusted Costs = (Parts Cost + Outside Labor) × {policy.markup}",
        "2. Commission Base = Revenue - Adjusted Costs (never below zero)",
        "3. Commission Amount = Commission Base × Plumber's Commission Rate",
    ]


def summary_to_csv(rows: Sequence[PayrollSummary]) -> str:
    """Render summary rows plus a total line as CSV text."""
    totals = summary_totals(rows)
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(CSV_HEADER)
    for row in rows:
        writer.writerow(
            [
                row.plumber_name,
                row.job_count,
                f"{row.total_revenue:.2f}",
                f"{row.total_costs:.2f}",
                f"{row.total_commission:.2f}",
            ]
        )
    writer.writerow(
        [
            "Total",
            totals.job_count,
            f"{totals.total_revenue:.2f}",
            f"{totals.total_costs:.2f}",
            f"{totals.total_commission:.2f}",
        ]
    )
    return buffer.getvalue()


def generate_payroll_pdf(
    payroll: Payroll,
    rows: Sequence[PayrollSummary],
    company_name: str = COMPANY_NAME,
    policy: CommissionPolicy = DEFAULT_POLICY,
) -> bytes:
    """
    Generate the weekly payroll summary as a PDF.

    Args:
        payroll: The Payroll being reported
        rows: Summary rows from the payroll summary service
        company_name: Company name for the header
        policy: Markup rules, used for the formula footnote

    Returns:
        The PDF bytes
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        rightMargin=0.75 * inch,
        leftMargin=0.75 * inch,
        topMargin=0.75 * inch,
        bottomMargin=0.75 * inch,
        title=f"Payroll {payroll.week_ending_date}",
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ReportTitle",
        parent=styles["Heading1"],
        fontSize=20,
        spaceAfter=6,
        textColor=colors.HexColor("#1a365d"),
        alignment=TA_CENTER,
    )
    subtitle_style = ParagraphStyle(
        "Subtitle",
        parent=styles["Normal"],
        fontSize=11,
        textColor=colors.HexColor("#4a5568"),
        alignment=TA_CENTER,
    )
    section_header_style = ParagraphStyle(
        "SectionHeader",
        parent=styles["Heading2"],
        fontSize=14,
        spaceBefore=16,
        spaceAfter=8,
        textColor=colors.HexColor("#2d3748"),
    )
    small_style = ParagraphStyle(
        "Small",
        parent=styles["Normal"],
        fontSize=9,
        textColor=colors.HexColor("#718096"),
    )

    story = []
    story.append(Paragraph(company_name, title_style))
    story.append(Paragraph("WEEKLY PAYROLL SUMMARY", subtitle_style))
    story.append(
        Paragraph(
            f"Week Ending: {payroll.week_ending_date:%B %d, %Y} &nbsp;|&nbsp; "
            f"Status: {payroll.status.capitalize()} &nbsp;|&nbsp; "
            f"Generated: {datetime.now():%B %d, %Y}",
            subtitle_style,
        )
    )
    story.append(
        HRFlowable(
            width="100%",
            thickness=2,
            color=colors.HexColor("#3182ce"),
            spaceBefore=10,
            spaceAfter=10,
        )
    )

    story.append(Paragraph("COMMISSION SUMMARY", section_header_style))

    totals = summary_totals(rows)
    data = [CSV_HEADER]
    for row in rows:
        data.append(
            [
                row.plumber_name,
                str(row.job_count),
                format_currency(row.total_revenue),
                format_currency(row.total_costs),
                format_currency(row.total_commission),
            ]
        )
    data.append(
        [
            "Total",
            str(totals.job_count),
            format_currency(totals.total_revenue),
            format_currency(totals.total_costs),
            format_currency(totals.total_commission),
        ]
    )

    table = Table(
        data, colWidths=[2.4 * inch, 0.7 * inch, 1.2 * inch, 1.3 * inch, 1.2 * inch]
    )
    table.setStyle(
        TableStyle(
            [
                # Header
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e2e8f0")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#2d3748")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                # Body
                ("FONTSIZE", (0, 1), (-1, -1), 9),
                ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                # Total row
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("LINEABOVE", (0, -1), (-1, -1), 1, colors.HexColor("#a0aec0")),
                ("GRID", (0, 0), (-1, -2), 0.5, colors.HexColor("#e2e8f0")),
                ("TOPPADDING", (0, 0), (-1, -1), 6),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
            ]
        )
    )
    story.append(table)
    story.append(Spacer(1, 0.3 * inch))

    story.append(Paragraph("<b>Commission Calculation Formula:</b>", small_style))
    for line in formula_lines(policy):
        story.append(Paragraph(line, small_style))

    story.append(Spacer(1, 0.4 * inch))
    story.append(
        Paragraph(
            f"This is an official payroll document for {company_name}. Authorized by management.",
            small_style,
        )
    )

    doc.build(story)

    return buffer.getvalue()
