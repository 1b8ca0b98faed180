"""Conversion between calendar dates and the ledger's numeric epoch.

The ledger stores dates as seconds since 2001-01-01T00:00:00Z, which is
978307200 seconds after the Unix epoch.
"""

import time
from datetime import date, datetime, timedelta, timezone

from dateutil import parser as date_parser

from bankbook.domain.errors import ValidationError

EPOCH_OFFSET = 978307200

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def now() -> int:
    """Return the current time as a ledger epoch value."""
    return int(time.time()) - EPOCH_OFFSET


def to_epoch(value: str | date) -> int:
    """Convert a calendar date to a ledger epoch value at midnight UTC.

    Args:
        value: ISO date string (YYYY-MM-DD) or a date object

    Returns:
        Seconds since the ledger epoch origin

    Raises:
        ValidationError: If the string is not a valid ISO calendar date
    """
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        try:
            value = date_parser.isoparse(str(value).strip()).date()
        except (ValueError, OverflowError) as e:
            raise ValidationError(f"Invalid calendar date '{value}': {e}")

    midnight = datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return int((midnight - _UNIX_EPOCH).total_seconds()) - EPOCH_OFFSET


def to_date(epoch_value: float) -> date:
    """Convert a ledger epoch value to the UTC calendar date it falls on."""
    return (_UNIX_EPOCH + timedelta(seconds=epoch_value + EPOCH_OFFSET)).date()


def to_calendar_date(epoch_value: float) -> str:
    """Convert a ledger epoch value to an ISO date string."""
    return to_date(epoch_value).isoformat()


def optional_calendar_date(epoch_value: float | None) -> str | None:
    """Like to_calendar_date, but passes through missing values."""
    if epoch_value is None:
        return None
    return to_calendar_date(epoch_value)
