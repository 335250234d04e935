"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Callable, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import MO, relativedelta

from ledgerkit.domain.entities import DateRange


def _quarter_start(day: date) -> date:
    return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)


def _this_week(today: date) -> tuple[date, date]:
    return today + relativedelta(weekday=MO(-1)), today


def _this_month(today: date) -> tuple[date, date]:
    return today.replace(day=1), today


def _this_quarter(today: date) -> tuple[date, date]:
    return _quarter_start(today), today


def _this_year(today: date) -> tuple[date, date]:
    return today.replace(month=1, day=1), today


def _last_week(today: date) -> tuple[date, date]:
    start = today + relativedelta(weekday=MO(-1), weeks=-1)
    return start, start + timedelta(days=6)


def _last_month(today: date) -> tuple[date, date]:
    end = today.replace(day=1) - timedelta(days=1)
    return end.replace(day=1), end


def _last_quarter(today: date) -> tuple[date, date]:
    end = _quarter_start(today) - timedelta(days=1)
    return _quarter_start(end), end


def _last_year(today: date) -> tuple[date, date]:
    return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)


PERIODS: dict[str, Callable[[date], tuple[date, date]]] = {
    "this-week": _this_week,
    "this-month": _this_month,
    "this-quarter": _this_quarter,
    "this-year": _this_year,
    "last-week": _last_week,
    "last-month": _last_month,
    "last-quarter": _last_quarter,
    "last-year": _last_year,
}


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2025-01-15", "January 15, 2025") and the
    relative words "today", "yesterday", "this month", "last month",
    "this year", and "last year". Relative month and year forms resolve to
    the first day of that month or year.

    Args:
        date_str: Date string
        today: Reference date for relative forms (defaults to today)

    Returns:
        Date object

    Raises:
        ValueError: If the string cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    if text == "today":
        return today
    if text == "yesterday":
        return today - timedelta(days=1)

    words = text.split()
    if len(words) == 2 and words[0] in ("this", "last"):
        key = f"{words[0]}-{words[1]}"
        if key in PERIODS:
            return PERIODS[key](today)[0]

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> DateRange:
    """Get the date range of a named period.

    "this-*" periods end today; "last-*" periods cover the whole previous
    week, month, quarter, or year.

    Args:
        period: One of the keys of PERIODS (e.g. "this-month", "last-quarter")
        today: Reference date (defaults to today)

    Returns:
        DateRange for the period

    Raises:
        ValueError: If the period is not recognized
    """
    key = period.strip().lower()
    if key not in PERIODS:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}"
        )
    start, end = PERIODS[key](today or date.today())
    return DateRange(start, end)
