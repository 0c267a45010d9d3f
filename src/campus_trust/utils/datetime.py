"""Date-time helpers shared by models and services."""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive timestamp, matching the column type."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def hours_from(now: datetime, hours: int | float) -> datetime:
    """Return the timestamp ``hours`` after ``now``."""

    return now + timedelta(hours=hours)
