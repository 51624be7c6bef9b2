"""Challenge filter compiler: deterministic parameterized query fragments.

Translates a validated FilterSet into a CompiledQuery: an ordered list of
self-contained ``AND ...`` fragments plus the named parameters they bind.
Also builds the ORDER BY clause from an OrderSpec.

Each supported filter is a FilterRule registered in ``FilterCompiler.rules``.
A rule fires when any of its trigger keys is present and appends exactly one
fragment. Identical FilterSet + identical lookup data → identical output.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from direct_api.config import QueryConfig
from direct_api.errors import BadRequestError
from direct_api.query.lookup_resolver import (
    CATEGORY_CHALLENGE_TYPE,
    CATEGORY_PLATFORM,
    CATEGORY_TECHNOLOGY,
    LookupResolver,
)
from direct_api.query.models import CompiledQuery, FilterSet, OrderSpec, SortOrder
from direct_api.query.values import end_of_day, parse_date, parse_int

logger = logging.getLogger(__name__)

CREATOR_FILTER = "AND p.create_user = :creator_id"

CHALLENGE_TYPE_FILTER = "AND p.project_category_id IN (:challenge_type_ids)"

TECHNOLOGY_FILTER = (
    "AND EXISTS (SELECT 1 FROM comp_technology ct "
    "WHERE ct.comp_vers_id = pi1.value AND ct.technology_type_id IN (:technology_ids))"
)

PLATFORM_FILTER = (
    "AND EXISTS (SELECT 1 FROM project_platform pp "
    "WHERE pp.project_platform_id IN (:platform_ids) AND p.project_id = pp.project_id)"
)

DIRECT_PROJECT_ID_FILTER = "AND p.tc_direct_project_id IN (:direct_project_ids)"

CLIENT_ID_FILTER = "AND client_billing_info.client_id IN (:client_ids)"

BILLING_ID_FILTER = "AND client_billing_info.billing_id IN (:billing_ids)"

TYPE_FILTER = "AND p.project_status_id IN (:type_id)"

STATUS_ID_PREDICATE = "p.project_status_id = :{param}"

STATUS_NAME_PREDICATE = "LOWER(psl.name) LIKE :{param} ESCAPE '\\'"

DIRECT_PROJECT_NAME_PREDICATE = (
    "EXISTS (SELECT 1 FROM tc_direct_project tdp "
    "WHERE tdp.project_id = p.tc_direct_project_id "
    "AND LOWER(tdp.name) LIKE :{param} ESCAPE '\\')"
)

START_DATE_FILTER = (
    "AND (COALESCE(reg_phase.actual_start_time, reg_phase.scheduled_start_time) "
    "BETWEEN :startDateFrom AND :startDateTo)"
)

# A challenge ends when its last phase ends.
END_DATE_FILTER = (
    "AND ((SELECT COALESCE(MAX(ph.actual_end_time), MAX(ph.scheduled_end_time)) "
    "FROM project_phase ph WHERE ph.project_id = p.project_id) "
    "BETWEEN :endDateFrom AND :endDateTo)"
)


@dataclass(frozen=True)
class FilterRule:
    """One supported filter: trigger keys and the function that compiles it.

    Attributes:
        name: Rule name, the filter key for single-key rules.
        keys: Filter keys whose presence fires the rule.
        apply: Appends the rule's fragment and parameters to the query.
    """

    name: str
    keys: tuple[str, ...]
    apply: Callable[[FilterSet, CompiledQuery], None]

    def matches(self, filters: FilterSet) -> bool:
        return any(filters.contains(key) for key in self.keys)


def _escape_like_value(value: str) -> str:
    """Escape backslash, percent and underscore for a LIKE pattern."""
    result = value.replace("\\", "\\\\")
    result = result.replace("%", "\\%")
    result = result.replace("_", "\\_")
    return result


def _or_group(predicates: list[str]) -> str:
    return "AND (" + " OR ".join(predicates) + ")"


class FilterCompiler:
    """Compiles caller filters and sort requests into query fragments."""

    def __init__(self, resolver: LookupResolver, config: QueryConfig) -> None:
        self._resolver = resolver
        self._config = config
        self.rules: dict[str, FilterRule] = {
            rule.name: rule
            for rule in (
                FilterRule("challengeType", ("challengeType",), self._challenge_type),
                FilterRule("challengeStatus", ("challengeStatus",), self._challenge_status),
                FilterRule("type", ("type",), self._type),
                FilterRule(
                    "challengeTechnologies", ("challengeTechnologies",), self._technologies
                ),
                FilterRule("challengePlatforms", ("challengePlatforms",), self._platforms),
                FilterRule("directProjectId", ("directProjectId",), self._direct_project_ids),
                FilterRule(
                    "directProjectName", ("directProjectName",), self._direct_project_names
                ),
                FilterRule("clientId", ("clientId",), self._client_ids),
                FilterRule("billingId", ("billingId",), self._billing_ids),
                FilterRule("startDate", ("startDateFrom", "startDateTo"), self._start_date),
                FilterRule("endDate", ("endDateFrom", "endDateTo"), self._end_date),
            )
        }

    # -----------------------------------------------------------------------
    # Entry points
    # -----------------------------------------------------------------------

    def compile_creator_flow(self, user_id: int, filters: FilterSet) -> CompiledQuery:
        """Compile the "my created challenges" flow.

        Adds the created-by-caller predicate, then the shared filters.

        Raises:
            BadRequestError: If a filter value cannot be compiled.
            DataAccessError: If a lookup fails.
        """
        query = CompiledQuery()
        query.bind("creator_id", user_id)
        query.add(CREATOR_FILTER)
        query.extend(self.compile_shared_flow(filters))
        return query

    def compile_shared_flow(self, filters: FilterSet) -> CompiledQuery:
        """Compile the filters common to both challenge views.

        Unrecognized keys are ignored.

        Raises:
            BadRequestError: If a filter value cannot be compiled.
            DataAccessError: If a lookup fails.
        """
        query = CompiledQuery()
        for rule in self.rules.values():
            if rule.matches(filters):
                rule.apply(filters, query)
        logger.debug(
            "Compiled %d filter fragment(s) from keys %s", len(query.fragments), filters.keys()
        )
        return query

    def compile_order(self, order: OrderSpec | None) -> str:
        """Build the ORDER BY clause.

        A tie-break on the challenge id (descending) is appended unless the
        id itself is the sort field, so paging over ties is stable.

        Raises:
            BadRequestError: For an unknown field or unsupported direction.
        """
        order = order or OrderSpec()
        field_name = order.field
        if field_name is None or not field_name.strip():
            field_name = self._config.default_sort_field
        field_name = field_name.strip().lower()

        column = self._config.order_by_fields.get(field_name)
        if column is None:
            raise BadRequestError.from_code("E-2009")

        clause = f"ORDER BY {column}"
        if order.sort_order is not None:
            if order.sort_order == SortOrder.ASC_NULLS_FIRST:
                clause += " ASC"
            elif order.sort_order == SortOrder.DESC_NULLS_LAST:
                clause += " DESC"
            else:
                raise BadRequestError.from_code(
                    "E-2010", sort_order=order.sort_order.value
                )

        if field_name != self._config.id_sort_field.lower():
            clause += f", {self._config.tie_break_column} DESC"
        return clause

    # -----------------------------------------------------------------------
    # Rules
    # -----------------------------------------------------------------------

    def _challenge_type(self, filters: FilterSet, query: CompiledQuery) -> None:
        ids = self._resolver.resolve(CATEGORY_CHALLENGE_TYPE, filters.values("challengeType"))
        query.bind("challenge_type_ids", ids)
        query.add(CHALLENGE_TYPE_FILTER)

    def _challenge_status(self, filters: FilterSet, query: CompiledQuery) -> None:
        # Integer values match the status id, text values match the name.
        statuses = [s for s in filters.values("challengeStatus", lower=True) if s]
        if not statuses:
            return
        predicates = []
        for index, value in enumerate(statuses):
            status_id = parse_int(value)
            if status_id is not None:
                param = f"challenge_status_id{index}"
                query.bind(param, status_id)
                predicates.append(STATUS_ID_PREDICATE.format(param=param))
            else:
                param = f"challenge_status_name{index}"
                query.bind(param, f"%{_escape_like_value(value)}%")
                predicates.append(STATUS_NAME_PREDICATE.format(param=param))
        query.add(_or_group(predicates))

    def _type(self, filters: FilterSet, query: CompiledQuery) -> None:
        types = filters.values("type", lower=True)
        type_ids: list[int] = []
        if "active" in types:
            type_ids.append(self._config.active_status_id)
        if "draft" in types:
            type_ids.append(self._config.draft_status_id)
        if "past" in types:
            type_ids.extend(self._resolver.resolve_all(self._config.past_status_category))
        if not type_ids:
            type_ids = self._resolver.no_match
        query.bind("type_id", type_ids)
        query.add(TYPE_FILTER)

    def _technologies(self, filters: FilterSet, query: CompiledQuery) -> None:
        names = filters.values("challengeTechnologies", lower=True)
        query.bind("technology_ids", self._resolver.resolve(CATEGORY_TECHNOLOGY, names))
        query.add(TECHNOLOGY_FILTER)

    def _platforms(self, filters: FilterSet, query: CompiledQuery) -> None:
        names = filters.values("challengePlatforms", lower=True)
        query.bind("platform_ids", self._resolver.resolve(CATEGORY_PLATFORM, names))
        query.add(PLATFORM_FILTER)

    def _integer_ids(self, filters: FilterSet, key: str) -> list[int]:
        ids = []
        for value in filters.values(key):
            number = parse_int(value)
            if number is None:
                raise BadRequestError.from_code("E-2004", field=key)
            ids.append(number)
        return ids

    def _direct_project_ids(self, filters: FilterSet, query: CompiledQuery) -> None:
        query.bind("direct_project_ids", self._integer_ids(filters, "directProjectId"))
        query.add(DIRECT_PROJECT_ID_FILTER)

    def _client_ids(self, filters: FilterSet, query: CompiledQuery) -> None:
        query.bind("client_ids", self._integer_ids(filters, "clientId"))
        query.add(CLIENT_ID_FILTER)

    def _billing_ids(self, filters: FilterSet, query: CompiledQuery) -> None:
        query.bind("billing_ids", self._integer_ids(filters, "billingId"))
        query.add(BILLING_ID_FILTER)

    def _direct_project_names(self, filters: FilterSet, query: CompiledQuery) -> None:
        names = [n for n in filters.values("directProjectName", lower=True) if n]
        if not names:
            return
        predicates = []
        for index, name in enumerate(names):
            param = f"direct_project_name{index}"
            query.bind(param, f"%{_escape_like_value(name)}%")
            predicates.append(DIRECT_PROJECT_NAME_PREDICATE.format(param=param))
        query.add(_or_group(predicates))

    def _start_date(self, filters: FilterSet, query: CompiledQuery) -> None:
        self._date_range(filters, query, "startDate", START_DATE_FILTER, "E-2005")

    def _end_date(self, filters: FilterSet, query: CompiledQuery) -> None:
        self._date_range(filters, query, "endDate", END_DATE_FILTER, "E-2006")

    def _date_range(
        self,
        filters: FilterSet,
        query: CompiledQuery,
        prefix: str,
        fragment: str,
        error_code: str,
    ) -> None:
        """Bind ``<prefix>From``/``<prefix>To`` and add one range fragment.

        A missing lower bound becomes the minimal date, a missing upper bound
        the maximal date. A supplied upper bound covers its whole day.
        """
        lower = self._parse_bound(filters, f"{prefix}From", error_code)
        upper = self._parse_bound(filters, f"{prefix}To", error_code)
        query.bind(f"{prefix}From", lower if lower is not None else self._config.min_date)
        query.bind(
            f"{prefix}To",
            end_of_day(upper) if upper is not None else self._config.max_date,
        )
        query.add(fragment)

    def _parse_bound(self, filters: FilterSet, key: str, error_code: str):
        if not filters.contains(key):
            return None
        value = filters.first(key)
        parsed = parse_date(value, self._config.date_format) if value else None
        if parsed is None:
            raise BadRequestError.from_code(error_code)
        return parsed
