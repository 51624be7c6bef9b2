"""Value coercion helpers shared by the filter validator and compiler."""

import re
from datetime import datetime

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1


def parse_int(value: str) -> int | None:
    """Parse a 32-bit signed integer, returning None when not one.

    Only an optional sign followed by digits is accepted; whitespace,
    underscores and out-of-range values are rejected.
    """
    if not _INT_PATTERN.fullmatch(value):
        return None
    number = int(value)
    if number < _INT_MIN or number > _INT_MAX:
        return None
    return number


def parse_date(value: str, date_format: str) -> datetime | None:
    """Parse a calendar date, returning None when it does not match."""
    try:
        return datetime.strptime(value.strip(), date_format)
    except ValueError:
        return None


def end_of_day(value: datetime) -> datetime:
    """Move a date to 23:59:59 on the same day."""
    return value.replace(hour=23, minute=59, second=59, microsecond=0)
