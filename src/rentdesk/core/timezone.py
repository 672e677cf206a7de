"""Timezone utilities for Europe/Paris local time."""

from datetime import date, datetime
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser

PARIS_TZ = pytz.timezone("Europe/Paris")

DateLike = Union[str, date, datetime, None]


def now_paris() -> datetime:
    """Return current time in Europe/Paris timezone."""
    return datetime.now(PARIS_TZ)


def to_paris(dt: datetime) -> datetime:
    """Convert a datetime to Europe/Paris timezone."""
    if dt.tzinfo is None:
        # Assume naive datetime is already Paris local time
        return PARIS_TZ.localize(dt)
    return dt.astimezone(PARIS_TZ)


def parse_datetime_paris(value: DateLike) -> Optional[datetime]:
    """
    Parse a backend date value and return it in Europe/Paris timezone.

    Accepts ISO strings, dates and datetimes. Values without a timezone are
    taken as Paris local time. Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_paris(value)
    if isinstance(value, date):
        return PARIS_TZ.localize(datetime(value.year, value.month, value.day))
    try:
        dt = date_parser.parse(str(value))
    except (ValueError, OverflowError):
        return None
    return to_paris(dt)
