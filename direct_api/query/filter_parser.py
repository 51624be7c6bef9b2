"""Parse the ``filter`` query parameter into a FilterSet.

The transport sends all filters as one URL-encoded string::

    filter=type%3Dactive%26challengeTechnologies%3Din(Java%2C.NET)

which the framework decodes to ``type=active&challengeTechnologies=in(Java,.NET)``
before it reaches the parser; values are taken as-is from there.
Multiple values are comma separated, optionally wrapped in ``in(...)``.
Repeated keys accumulate their values.
"""

import logging

from direct_api.errors import BadRequestError
from direct_api.query.models import FilterSet

logger = logging.getLogger(__name__)


def _split_values(raw: str) -> list[str]:
    """Split a raw filter value into its individual values."""
    value = raw.strip()
    if value.lower().startswith("in(") and value.endswith(")"):
        value = value[3:-1]
    return [v.strip() for v in value.split(",") if v.strip()]


def parse_filter(raw: str | None) -> FilterSet:
    """Parse a ``key=value&key=v1,v2`` filter string.

    Args:
        raw: The decoded ``filter`` query parameter; None or blank means
            no filters.

    Returns:
        FilterSet with case-insensitive keys in request order.

    Raises:
        BadRequestError: If a segment is not a ``key=value`` pair.
    """
    entries: dict[str, list[str]] = {}
    if not raw or not raw.strip():
        return FilterSet()

    for segment in raw.split("&"):
        if not segment.strip():
            continue
        key, sep, value = segment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise BadRequestError.from_code("E-2011", segment=segment)
        entries.setdefault(key, []).extend(_split_values(value))

    logger.debug("Parsed filter keys: %s", list(entries))
    return FilterSet(entries=entries)
