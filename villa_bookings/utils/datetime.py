"""UTC datetime and calendar-date utilities."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Used for every server-side timestamp (updated_at, approved_at, audit
    and sync-event timestamps) so all stored times are UTC.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def parse_booking_date(value: str) -> date:
    """
    Parse a check-in/check-out value into a calendar date.

    Accepts a plain ISO date ("2025-07-20") or a full ISO timestamp
    ("2025-07-20T14:00:00Z"). Timestamps carrying an offset are converted to
    UTC before the time part is dropped, so "2025-07-20T23:30:00-05:00" is
    2025-07-21.

    Raises:
        ValueError: If the value is not an ISO date or timestamp
    """
    value = value.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return date.fromisoformat(value)
    except ValueError:
        parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()
