"""The one clock of the service.

Timestamps are stored as naive UTC and calendar days ("today", the
dashboard's trailing week) are UTC days, so expiry checks and day views
never disagree around midnight.
"""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Current UTC time without tzinfo, the form every DateTime column holds."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today() -> date:
    return utc_now().date()
