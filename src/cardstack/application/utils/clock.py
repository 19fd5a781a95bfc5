"""
Clock helpers.

Every timestamp in cardstack comes from `get_now`, so tests can freeze time
by patching `utcnow` on this module.
"""

from datetime import datetime, timedelta, timezone

from cardstack.domain.constants import SECONDS_PER_DAY


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def get_now(seconds_in_future: float = 0) -> datetime:
    """Current UTC time, optionally shifted into the future."""
    return utcnow() + timedelta(seconds=seconds_in_future)


def add_days(moment: datetime, days: float) -> datetime:
    return moment + timedelta(seconds=days * SECONDS_PER_DAY)


def is_same_day(d1: datetime, d2: datetime) -> bool:
    return d1.astimezone(timezone.utc).date() == d2.astimezone(timezone.utc).date()


def is_today(moment: datetime | None) -> bool:
    if moment is None:
        return False
    return is_same_day(moment, get_now())
