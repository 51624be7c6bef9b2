"""Filter validator: rejects malformed requests before any query is built.

Each rule checks one filter key (or the paging window) and raises a
BadRequestError for the first problem it finds. Rules run in a fixed
order and the first failure wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from direct_api.config import QueryConfig
from direct_api.errors import BadRequestError
from direct_api.query.boundaries import IdentityBoundary
from direct_api.query.models import FilterSet, LimitQuery, QueryParameter
from direct_api.query.values import parse_date, parse_int

logger = logging.getLogger(__name__)

_INTEGER_FILTERS = ("directProjectId", "clientId", "billingId")
_START_DATE_FILTERS = ("startDateFrom", "startDateTo")
_END_DATE_FILTERS = ("endDateFrom", "endDateTo")


class FilterValidator:
    """Validates a caller's filters, creator claim and paging window."""

    def __init__(self, identity: IdentityBoundary, config: QueryConfig) -> None:
        self._identity = identity
        self._config = config

    def validate(self, user_id: int, query: QueryParameter) -> None:
        """Validate every supported filter of a request.

        Args:
            user_id: Id of the calling user.
            query: The parsed request.

        Raises:
            BadRequestError: For the first rule that fails.
            DataAccessError: If the creator check cannot look up the handle.
        """
        rules: list[Callable[[], None]] = [
            lambda: self._check_type(query.filter),
            lambda: self._check_creator(user_id, query.filter),
            lambda: self._check_integers(query.filter),
            lambda: self._check_dates(query.filter, _START_DATE_FILTERS, "E-2005"),
            lambda: self._check_dates(query.filter, _END_DATE_FILTERS, "E-2006"),
            lambda: self._check_limit(query.limit),
        ]
        try:
            for rule in rules:
                rule()
        except BadRequestError as e:
            logger.info("Rejected challenge query for user %s: %s", user_id, e)
            raise

    def _check_type(self, filters: FilterSet) -> None:
        if not filters.contains("type"):
            return
        allowed = set(self._config.allowed_types)
        if not set(filters.values("type", lower=True)) <= allowed:
            raise BadRequestError.from_code("E-2001")

    def _check_creator(self, user_id: int, filters: FilterSet) -> None:
        # Only the caller may be used as creator.
        if not filters.contains("creator"):
            return
        current_handle = self._identity.get_user_handle(user_id)
        for handle in filters.values("creator"):
            if current_handle != handle:
                raise BadRequestError.from_code("E-2002")

    def _check_integers(self, filters: FilterSet) -> None:
        for key in _INTEGER_FILTERS:
            if not filters.contains(key):
                continue
            for value in filters.values(key):
                number = parse_int(value)
                if number is None:
                    raise BadRequestError.from_code("E-2004", field=key)
                if key == "directProjectId" and number <= 0:
                    raise BadRequestError.from_code("E-2003")

    def _check_dates(self, filters: FilterSet, keys: tuple[str, ...], code: str) -> None:
        for key in keys:
            if not filters.contains(key):
                continue
            value = filters.first(key)
            if value is None or parse_date(value, self._config.date_format) is None:
                raise BadRequestError.from_code(code)

    def _check_limit(self, limit: LimitQuery | None) -> None:
        if limit is None:
            return
        if limit.limit is not None:
            if limit.limit == 0 or limit.limit < self._config.unlimited:
                raise BadRequestError.from_code("E-2007")
        if limit.offset is not None and limit.offset < 0:
            raise BadRequestError.from_code("E-2008")
