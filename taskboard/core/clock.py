"""
Time helpers. Everything persisted is UTC; calendar days for snapshots are
UTC dates unless the caller passes its own local date.
"""
from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today() -> date:
    return utc_now().date()


def previous_day(day: date) -> date:
    return day - timedelta(days=1)
