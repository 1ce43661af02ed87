"""
Helper Utilities
Common helper functions
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime

    Returns:
        datetime: UTC wall-clock time without tzinfo, as stored in the database
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def round_money(amount: float) -> float:
    """Round an amount to 2 decimal places"""
    return round(float(amount), 2)


def format_currency(amount: float, currency: str = "USD") -> str:
    """
    Format amount as currency

    Args:
        amount: Amount to format
        currency: Currency code

    Returns:
        str: Formatted currency string
    """
    return f"{currency} {amount:,.2f}"


def format_datetime(dt: datetime, format_str: str = "%Y-%m-%d %H:%M:%S") -> str:
    """
    Format datetime with time

    Args:
        dt: Datetime object
        format_str: Format string

    Returns:
        str: Formatted datetime string
    """
    return dt.strftime(format_str)


def period_of(dt: datetime) -> str:
    """Month period key (YYYY-MM) of a datetime"""
    return f"{dt.year}-{dt.month:02d}"


def parse_period(period: Optional[str]) -> str:
    """
    Validate a YYYY-MM period string, defaulting to the current month

    Raises:
        ValueError: If the period is malformed
    """
    if not period:
        return period_of(utcnow())
    parsed = datetime.strptime(period, "%Y-%m")
    return period_of(parsed)


def default_report_title(user_name: str, when: Optional[datetime] = None) -> str:
    """Title used when a report is submitted without one"""
    when = when or utcnow()
    return f"{user_name}'s Expense Report - {when.strftime('%Y-%m-%d')}"
