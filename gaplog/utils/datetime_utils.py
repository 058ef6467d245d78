"""Date and time utilities."""

from datetime import date, datetime, timedelta, timezone
from typing import Iterator, List, Optional, Union


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse an ISO date string, passing dates through."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def parse_datetime(value: Union[str, datetime, date]) -> datetime:
    """Parse an ISO timestamp, accepting a trailing Z.

    Offset-aware values are converted to naive UTC so that timestamps
    from different sources stay comparable.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    else:
        parsed = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def iter_days(start_date: date, days: int) -> Iterator[date]:
    """Yield ``days`` consecutive dates starting at ``start_date``."""
    for offset in range(days):
        yield start_date + timedelta(days=offset)


def get_days_between(start_date: date, end_date: date, weekdays: List[int]) -> List[date]:
    """Get dates in the inclusive range falling on the given weekdays."""
    days = []
    current = start_date
    
    while current <= end_date:
        if current.weekday() in weekdays:
            days.append(current)
        current += timedelta(days=1)
    
    return days


def time_to_minutes(value: str) -> int:
    """Convert ``HH:MM`` to minutes after midnight, -1 when unparsable."""
    try:
        hours, minutes = str(value).split(':')[:2]
        return int(hours) * 60 + int(minutes)
    except (TypeError, ValueError):
        return -1
