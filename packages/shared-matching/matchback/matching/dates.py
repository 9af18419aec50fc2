"""
Date helpers shared by every matchback stage.

All calendar comparisons happen on timezone-aware UTC datetimes so that
stored dates never drift between stages. Naive datetimes are interpreted
as UTC; plain dates are promoted to midnight UTC.

Spreadsheet uploads frequently carry Excel serial numbers instead of real
dates, so conversion for those lives here as well.
"""

from __future__ import annotations

import numbers
from datetime import UTC, date, datetime, timedelta
from typing import Any

SECONDS_PER_DAY = 86400

# Excel counts from 1900-01-01 and wrongly treats 1900 as a leap year
EXCEL_EPOCH = datetime(1900, 1, 1, tzinfo=UTC)
EXCEL_LEAP_BUG_SERIAL = 60
EXCEL_MAX_SERIAL = 100000


def to_utc(value: date | datetime) -> datetime:
    """Return a timezone-aware UTC datetime for a date or datetime."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)
    return datetime(value.year, value.month, value.day, tzinfo=UTC)


def same_utc_month(first: date | datetime, second: date | datetime) -> bool:
    """Check whether two dates fall in the same UTC year and month."""
    a = to_utc(first)
    b = to_utc(second)
    return a.year == b.year and a.month == b.month


def days_between(start: date | datetime, end: date | datetime) -> float:
    """Return the (fractional) number of days from start to end."""
    return (to_utc(end) - to_utc(start)).total_seconds() / SECONDS_PER_DAY


def month_key(value: date | datetime) -> str:
    """Format a date as YYYY-MM using UTC calendar fields."""
    utc = to_utc(value)
    return f"{utc.year:04d}-{utc.month:02d}"


def is_excel_serial(value: Any) -> bool:
    """Check if a value is likely an Excel serial date.

    Excel dates typically range from 1 (1900-01-01) to ~50000 (2136).
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return 0 < value < EXCEL_MAX_SERIAL


def excel_serial_to_datetime(serial: float) -> datetime:
    """Convert an Excel serial date number to a UTC datetime.

    Raises:
        ValueError: If the value is not a usable serial number.
    """
    if not is_excel_serial(serial):
        raise ValueError(f"Invalid Excel date serial number: {serial!r}")

    serial = float(serial)
    days = serial - 2 if serial > EXCEL_LEAP_BUG_SERIAL else serial - 1
    return EXCEL_EPOCH + timedelta(days=days)


def datetime_to_excel_serial(value: date | datetime) -> int:
    """Convert a date to its whole-day Excel serial number."""
    days = int((to_utc(value) - EXCEL_EPOCH).total_seconds() // SECONDS_PER_DAY)
    serial = days + 1
    return serial + 1 if serial >= EXCEL_LEAP_BUG_SERIAL else serial


def parse_date(value: Any) -> datetime:
    """Coerce a datetime, date, Excel serial, or ISO string to UTC.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime | date):
        return to_utc(value)

    if is_excel_serial(value):
        return excel_serial_to_datetime(value)

    if isinstance(value, str) and value.strip():
        try:
            return to_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
        except ValueError as e:
            raise ValueError(f"Unable to parse date from value: {value!r}") from e

    raise ValueError(f"Unable to parse date from value: {value!r}")
