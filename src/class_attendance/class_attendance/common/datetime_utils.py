from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Optional, Union

from ..core.enums import ReportMode
from ..core.exceptions import ValidationError

DateLike = Union[date, str]


def format_date(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime("%Y-%m-%d")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def to_iso(value: DateLike) -> str:
    if isinstance(value, date):
        return format_date(value)
    # '2024-1-5' and '2024-01-05' must address the same sheet.
    try:
        return format_date(parse_iso_date(value.strip()))
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return date.today()


def get_today() -> str:
    return format_date(today_local())


def start_of_week(anchor: Optional[date] = None) -> date:
    """Monday of the anchor's week."""
    anchor = anchor or today_local()
    return anchor - timedelta(days=anchor.weekday())


def end_of_week(anchor: Optional[date] = None) -> date:
    """Sunday of the anchor's week."""
    return start_of_week(anchor) + timedelta(days=6)


def start_of_month(anchor: Optional[date] = None) -> date:
    anchor = anchor or today_local()
    return anchor.replace(day=1)


def end_of_month(anchor: Optional[date] = None) -> date:
    anchor = anchor or today_local()
    last_day = calendar.monthrange(anchor.year, anchor.month)[1]
    return anchor.replace(day=last_day)


def day_name(value: DateLike) -> str:
    """English weekday name, e.g. 'Monday'."""
    d = parse_iso_date(value) if isinstance(value, str) else value
    return calendar.day_name[d.weekday()]


def formatted_date(value: DateLike) -> str:
    """Long form used in report headings, e.g. 'May 5, 2023'."""
    d = parse_iso_date(value) if isinstance(value, str) else value
    return f"{calendar.month_name[d.month]} {d.day}, {d.year}"


def report_range(mode: ReportMode, anchor: Optional[date] = None) -> tuple[str, str]:
    anchor = anchor or today_local()
    if mode == ReportMode.WEEKLY:
        return format_date(start_of_week(anchor)), format_date(end_of_week(anchor))
    if mode == ReportMode.MONTHLY:
        return format_date(start_of_month(anchor)), format_date(end_of_month(anchor))
    return format_date(anchor), format_date(anchor)
