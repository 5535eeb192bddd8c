"""Date parsing utilities."""

import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from tallybook.domain.entities import DateRange
from tallybook.domain.errors import ValidationError

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

PERIODS = ("day", "month", "year", "custom")


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_iso_date(value: str) -> date:
    """Parse a strict ISO-8601 calendar date (YYYY-MM-DD).

    Args:
        value: Date string

    Returns:
        Date object

    Raises:
        ValueError: If the string is not a valid YYYY-MM-DD date
    """
    value = (value or "").strip()
    if not _ISO_DATE.match(value):
        raise ValueError(f"Date '{value}' is not in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValueError(f"Date '{value}' is not a valid calendar date: {e}")


def resolve_period(
    period: str = "month",
    start: Optional[date] = None,
    end: Optional[date] = None,
    today: Optional[date] = None,
) -> DateRange:
    """Resolve a statistics period preset into an inclusive window.

    Args:
        period: One of day, month, year, custom
        start: Start date, required for custom
        end: End date, required for custom
        today: Reference date (defaults to date.today())

    Returns:
        DateRange for the period

    Raises:
        ValidationError: If the period is unknown or custom bounds are missing
    """
    period = (period or "month").strip().lower()
    today = today or date.today()

    if period == "day":
        return DateRange(today, today)
    elif period == "month":
        return DateRange.for_month(today.year, today.month)
    elif period == "year":
        return DateRange.for_year(today.year)
    elif period == "custom":
        if start is None or end is None:
            raise ValidationError("Custom period requires both a start and an end date")
        return DateRange(start, end)

    raise ValidationError(
        f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
    )
