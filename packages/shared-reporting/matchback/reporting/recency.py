"""
Signup recency relative to an explicit reference date.

The customer-type classifier decides NEW_SIGNUP against the campaign date.
Report filters historically used "signed up within the last N months of
today" instead. Both definitions go through this helper with the reference
passed in, so callers choose between the campaign date and wall-clock now.
"""

from __future__ import annotations

from datetime import UTC, date, datetime

from matchback.matching.dates import to_utc


def month_start_before(reference: date | datetime, months_back: int) -> datetime:
    """Return midnight UTC on the first day of the month months_back before reference."""
    ref = to_utc(reference)
    month_index = ref.year * 12 + (ref.month - 1) - months_back
    year, month = divmod(month_index, 12)
    return datetime(year, month + 1, 1, tzinfo=UTC)


def is_recent_signup(
    signup_date: date | datetime | None,
    reference: date | datetime,
    months_back: int,
) -> bool:
    """Check if signup falls on or after the start of the month months_back before reference."""
    if signup_date is None:
        return False
    return to_utc(signup_date) >= month_start_before(reference, months_back)
