import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def try_parse_date(value: Any) -> Optional[date]:
    """YYYY-MM-DD string -> date, or None if the shape or the calendar date is invalid."""
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_today(now: Optional[datetime] = None) -> date:
    now = now or utc_now()
    return now.astimezone(timezone.utc).date()


def utc_yesterday(now: Optional[datetime] = None) -> date:
    return utc_today(now) - timedelta(days=1)
