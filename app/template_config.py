"""Jinja2 template configuration with currency and timezone filters."""
import os
from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from fastapi.templating import Jinja2Templates

# App timezone setting - defaults to Central Time
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "America/Chicago")

TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def get_app_tz() -> ZoneInfo:
    return ZoneInfo(APP_TIMEZONE)


def to_local(dt: datetime) -> datetime:
    """Convert a datetime to the app's local timezone. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(get_app_tz())


def localdate(value, fmt: str = None) -> str:
    """Jinja filter for dates and datetimes.

    Usage in templates:
        {{ payroll.week_ending_date | localdate }}
        {{ payroll.created_at | localdate('%B %d, %Y') }}
    """
    if value is None:
        return ""

    # Plain dates carry no timezone
    if isinstance(value, datetime):
        value = to_local(value)

    # Default format: "Jan 15, 2025"
    return value.strftime(fmt or "%b %d, %Y")


def currency(value) -> str:
    """Jinja filter: {{ job.revenue | currency }} -> $1,234.50"""
    if value is None:
        value = Decimal("0")
    return f"${Decimal(str(value)):,.2f}"


def create_templates() -> Jinja2Templates:
    """Create a Jinja2Templates instance with custom filters."""
    templates = Jinja2Templates(directory=TEMPLATE_DIR)

    templates.env.filters["localdate"] = localdate
    templates.env.filters["currency"] = currency
    templates.env.globals["today"] = date.today

    return templates


# Singleton template instance - import this in route files
templates = create_templates()
