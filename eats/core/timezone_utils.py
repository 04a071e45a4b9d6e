from datetime import datetime, time, timezone, timedelta
from zoneinfo import ZoneInfo

from eats.core.config import settings

try:
    LOCAL_TZ = ZoneInfo(settings.APP_TIMEZONE)
except Exception:
    # unknown zone name in the environment: fall back to UTC
    LOCAL_TZ = timezone.utc


def utcnow() -> datetime:
    """Naive UTC now, matching how DateTime columns round-trip through sqlite."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_aware_local(dt: datetime) -> datetime:
    """Ensure a datetime is timezone-aware in LOCAL_TZ.

    Naive values are treated as UTC (that is how they are stored) and then
    converted.
    """
    if dt is None:
        return None
    if getattr(dt, 'tzinfo', None) is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(LOCAL_TZ)


def seconds_until_next_midnight(now: datetime = None) -> float:
    """Seconds from ``now`` until the next local midnight (never zero)."""
    now = make_aware_local(now or utcnow())
    next_day = now.date() + timedelta(days=1)
    midnight = datetime.combine(next_day, time.min, tzinfo=LOCAL_TZ)
    return max((midnight - now).total_seconds(), 1.0)
