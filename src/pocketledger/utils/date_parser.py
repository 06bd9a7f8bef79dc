"""Date parsing utilities."""

from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from pocketledger.domain.dates import CalendarDate
from pocketledger.domain.errors import InvalidDate

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def _resolve_relative(date_str: str, today: date) -> date | None:
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
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)
        elif period in WEEKDAYS:
            days_ago = (today.weekday() - WEEKDAYS.index(period)) % 7
            return today - timedelta(days=days_ago or 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    return None


def parse_date(date_str: str, today: date | None = None) -> CalendarDate:
    """Parse a user supplied date into a CalendarDate.

    Supports:
    - Absolute dates: "2024-01-15", "January 15, 2024", "15.01.2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this week", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms (defaults to date.today())

    Returns:
        CalendarDate

    Raises:
        InvalidDate: If the string cannot be parsed or is out of range
    """
    date_str = date_str.strip().lower()
    today = today or date.today()

    resolved = _resolve_relative(date_str, today)
    if resolved is None:
        try:
            resolved = date_parser.parse(date_str, dayfirst="." in date_str).date()
        except (ValueError, OverflowError) as e:
            raise InvalidDate(f"Could not parse date '{date_str}': {e}")

    return CalendarDate.from_date(resolved)
