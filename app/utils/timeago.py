from datetime import datetime, timezone
from typing import Optional

# (upper bound in seconds, unit length in seconds, unit name)
_UNITS = [
    (3600, 60, "minute"),
    (86400, 3600, "hour"),
    (604800, 86400, "day"),
    (2419200, 604800, "week"),
    (29030400, 2419200, "month"),
]
_YEAR = 29030400


def relative_time(moment: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Human readable age of a timestamp: 'just now', '5 minutes ago', '2 years ago'"""
    if moment is None:
        return ""
    now = now or datetime.now(timezone.utc)
    # SQLite hands back naive UTC timestamps
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - moment).total_seconds())
    if seconds < 60:
        return "just now"

    for bound, unit_seconds, name in _UNITS:
        if seconds < bound:
            return _plural(seconds // unit_seconds, name)
    return _plural(seconds // _YEAR, "year")


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"
