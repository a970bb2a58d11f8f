from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_datetime(value) -> Optional[datetime]:
    """
    Normalize what Firestore (or a client) hands back into an aware datetime.

    Accepts datetimes (Firestore returns DatetimeWithNanoseconds, a subclass),
    dates, ISO strings and {"seconds": ...} timestamp dicts. Returns None for
    anything else.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    if isinstance(value, dict) and "seconds" in value:
        return datetime.fromtimestamp(value["seconds"], tz=timezone.utc)
    return None


def day_range(day: Optional[date] = None) -> Tuple[datetime, datetime]:
    """[start, end) of the given UTC day (today by default)."""
    day = day or utcnow().date()
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    return start, start + timedelta(days=1)


def in_range(value, start: datetime, end: datetime, inclusive_end: bool = False) -> bool:
    dt = to_datetime(value)
    if dt is None:
        return False
    if inclusive_end:
        return start <= dt <= end
    return start <= dt < end


def current_season(month: Optional[int] = None) -> str:
    """Season bucket used to pick seasonal guidelines."""
    month = month or utcnow().month
    if 3 <= month <= 5:
        return "spring"
    if 6 <= month <= 8:
        return "summer"
    if 9 <= month <= 11:
        return "autumn"
    return "winter"
