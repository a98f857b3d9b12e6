"""Office calendar helpers.

Timestamps are stored as naive UTC. Anything that depends on "today" (queue
number prefixes, the daily counter partition, today's queue view, the
stale-serving cutoff) is computed in the office timezone and converted back
to naive UTC for comparison against stored columns.
"""

from datetime import date, datetime, time, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from walkin_queue.config import settings


def office_zone() -> ZoneInfo:
    return ZoneInfo(settings.office_timezone)


def utcnow() -> datetime:
    """Current time as naive UTC, matching how timestamps are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_office_time(moment: Optional[datetime] = None) -> datetime:
    """Convert a naive-UTC (or aware) datetime to office-local aware time."""
    if moment is None:
        moment = utcnow()
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(office_zone())


def office_today(moment: Optional[datetime] = None) -> date:
    """Office-local calendar date for ``moment`` (default: now)."""
    return to_office_time(moment).date()


def start_of_office_day(moment: Optional[datetime] = None) -> datetime:
    """Office-local midnight of the day containing ``moment``, as naive UTC."""
    local_midnight = datetime.combine(office_today(moment), time.min, tzinfo=office_zone())
    return local_midnight.astimezone(timezone.utc).replace(tzinfo=None)


def office_hour(moment: Optional[datetime] = None) -> int:
    return to_office_time(moment).hour
