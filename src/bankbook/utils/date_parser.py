"""Parsing of user-entered dates for command line options."""

from datetime import date, timedelta

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from bankbook.domain.errors import ValidationError

PERIODS = ("this-week", "this-month", "this-year", "last-week", "last-month", "last-year")


def _start_of(unit: str, day: date) -> date:
    if unit == "week":
        return day - timedelta(days=day.weekday())
    if unit == "month":
        return day.replace(day=1)
    if unit == "year":
        return day.replace(month=1, day=1)
    raise ValidationError(f"Unknown period unit '{unit}'")


def _shift(unit: str, day: date, count: int) -> date:
    if unit == "week":
        return day + timedelta(weeks=count)
    if unit == "month":
        return day + relativedelta(months=count)
    return day + relativedelta(years=count)


def parse_date(date_str: str, today: date | None = None) -> date:
    """Parse a date typed on the command line.

    Accepts ISO and other absolute formats understood by dateutil, plus
    "today", "yesterday", "tomorrow" and "this/last/next week|month|year",
    which resolve to the first day of that period.

    Args:
        date_str: Date text
        today: Reference day for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValidationError: If the text cannot be parsed
    """
    text = date_str.strip().lower()
    today = today or date.today()

    offsets = {"yesterday": -1, "today": 0, "tomorrow": 1}
    if text in offsets:
        return today + timedelta(days=offsets[text])

    words = text.split()
    if len(words) == 2 and words[0] in ("last", "this", "next") and words[1] in ("week", "month", "year"):
        step = {"last": -1, "this": 0, "next": 1}[words[0]]
        return _start_of(words[1], _shift(words[1], today, step))

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: date | None = None) -> tuple[date, date]:
    """Start and end date (inclusive) of a named period.

    "this-*" periods end today; "last-*" periods cover the whole previous period.

    Raises:
        ValidationError: If the period is not one of PERIODS
    """
    period = period.strip().lower()
    if period not in PERIODS:
        raise ValidationError(f"Unknown period '{period}'. Supported periods: {', '.join(PERIODS)}")

    today = today or date.today()
    which, unit = period.split("-")
    current_start = _start_of(unit, today)
    if which == "this":
        return current_start, today
    return _shift(unit, current_start, -1), current_start - timedelta(days=1)
