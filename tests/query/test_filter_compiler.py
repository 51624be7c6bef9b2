"""Tests for the challenge filter compiler.

Covers every filter rule, the creator flow, ORDER BY construction and the
no-match sentinel for lookups that resolve to nothing.
"""

from datetime import datetime

import pytest

from direct_api.errors import BadRequestError
from direct_api.query.models import FilterSet, OrderSpec, SortOrder


@pytest.fixture
def compiler(fake_lookups, query_config):
    from direct_api.query import FilterCompiler, LookupResolver

    return FilterCompiler(LookupResolver(fake_lookups, query_config), query_config)


class TestSharedFlow:
    """Verify compile_shared_flow() emits one fragment per matching rule."""

    def test_empty_filters_compile_to_nothing(self, compiler):
        query = compiler.compile_shared_flow(FilterSet())

        assert query.fragments == []
        assert query.params == {}

    def test_unknown_keys_are_ignored(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(color="blue"))

        assert query.fragments == []

    def test_every_fragment_starts_with_and(self, compiler):
        filters = FilterSet.of(
            type="active",
            challengeStatus="1",
            challengeTechnologies="Java",
            directProjectId="5",
            endDateTo="01/15/2020",
        )

        query = compiler.compile_shared_flow(filters)

        assert len(query.fragments) == 5
        assert all(f.startswith("AND ") for f in query.fragments)

    def test_all_referenced_parameters_are_bound(self, compiler):
        filters = FilterSet.of(
            challengeType="Code",
            challengeStatus=["1", "act"],
            type=["active", "past"],
            challengeTechnologies="Java",
            challengePlatforms="AWS",
            directProjectId="5",
            directProjectName="apollo",
            clientId="10",
            billingId="20",
            startDateFrom="01/01/2020",
            endDateTo="02/01/2020",
        )

        query = compiler.compile_shared_flow(filters)

        assert len(query.fragments) == 11
        assert query.unbound_parameters() == set()

    def test_same_input_compiles_identically(self, compiler):
        filters = FilterSet.of(type="past", challengeStatus=["1", "draft"])

        first = compiler.compile_shared_flow(filters)
        second = compiler.compile_shared_flow(filters)

        assert first == second


class TestChallengeStatus:
    """Integer statuses match the id, text statuses match the name."""

    def test_mixed_values_produce_or_group(self, compiler):
        query = compiler.compile_shared_flow(
            FilterSet.of(challengeStatus=["1", "Active"])
        )

        fragment = query.fragments[0]
        assert fragment.startswith("AND (")
        assert "p.project_status_id = :challenge_status_id0" in fragment
        assert "LOWER(psl.name) LIKE :challenge_status_name1" in fragment
        assert " OR " in fragment
        assert query.params["challenge_status_id0"] == 1
        assert query.params["challenge_status_name1"] == "%active%"

    def test_like_wildcards_are_escaped(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(challengeStatus="100%_done"))

        assert query.params["challenge_status_name0"] == "%100\\%\\_done%"

    def test_blank_values_add_no_fragment(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(challengeStatus=["", "  "]))

        assert query.fragments == []


class TestTypeFilter:
    """Verify the active/draft/past mapping onto status ids."""

    def test_active(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(type="active"))

        assert query.fragments == ["AND p.project_status_id IN (:type_id)"]
        assert query.params["type_id"] == [1]

    def test_draft_is_case_insensitive(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(type="DRAFT"))

        assert query.params["type_id"] == [2]

    def test_past_uses_every_past_status(self, compiler, fake_lookups):
        query = compiler.compile_shared_flow(FilterSet.of(type="past"))

        assert query.params["type_id"] == [7, 10]
        assert ("draft_project_status", None) in fake_lookups.calls

    def test_combined_types_accumulate(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(type=["active", "draft", "past"]))

        assert query.params["type_id"] == [1, 2, 7, 10]

    def test_no_past_status_falls_back_to_sentinel(self, query_config):
        from direct_api.query import FilterCompiler, LookupResolver
        from tests.helpers.fakes import FakeLookups

        compiler = FilterCompiler(LookupResolver(FakeLookups({}), query_config), query_config)

        query = compiler.compile_shared_flow(FilterSet.of(type="past"))

        assert query.params["type_id"] == [-1]


class TestLookupFilters:
    """Technology, platform and challenge type names resolve through lookups."""

    def test_technologies_resolve_lower_cased(self, compiler, fake_lookups):
        query = compiler.compile_shared_flow(
            FilterSet.of(challengeTechnologies=["Java", ".NET"])
        )

        assert query.params["technology_ids"] == [1, 2]
        assert ("technology", ["java", ".net"]) in fake_lookups.calls
        assert "comp_technology" in query.fragments[0]

    def test_unknown_technology_matches_nothing(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(challengeTechnologies="Cobol"))

        assert query.params["technology_ids"] == [-1]
        assert len(query.fragments) == 1

    def test_platforms(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(challengePlatforms="aws"))

        assert query.params["platform_ids"] == [1]
        assert "project_platform" in query.fragments[0]

    def test_challenge_type_keeps_caller_case(self, compiler, fake_lookups):
        query = compiler.compile_shared_flow(FilterSet.of(challengeType="First2Finish"))

        assert query.params["challenge_type_ids"] == [38]
        assert ("challenge_type", ["First2Finish"]) in fake_lookups.calls


class TestIdAndNameFilters:
    def test_direct_project_ids(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(directProjectId=["5", "6"]))

        assert query.fragments == ["AND p.tc_direct_project_id IN (:direct_project_ids)"]
        assert query.params["direct_project_ids"] == [5, 6]

    def test_client_and_billing_ids(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(clientId="10", billingId="20"))

        assert query.params["client_ids"] == [10]
        assert query.params["billing_ids"] == [20]

    def test_non_integer_id_is_rejected(self, compiler):
        with pytest.raises(BadRequestError) as exc_info:
            compiler.compile_shared_flow(FilterSet.of(clientId="abc"))

        assert exc_info.value.code == "E-2004"
        assert "clientId" in exc_info.value.message

    def test_direct_project_names_are_or_grouped(self, compiler):
        query = compiler.compile_shared_flow(
            FilterSet.of(directProjectName=["Apollo", "gemini"])
        )

        fragment = query.fragments[0]
        assert fragment.count("tc_direct_project tdp") == 2
        assert query.params["direct_project_name0"] == "%apollo%"
        assert query.params["direct_project_name1"] == "%gemini%"


class TestDateFilters:
    """Verify date bounds, defaults and end-of-day widening."""

    def test_end_date_to_covers_whole_day(self, compiler):
        query = compiler.compile_shared_flow(FilterSet.of(endDateTo="01/15/2020"))

        assert query.params["endDateTo"] == datetime(2020, 1, 15, 23, 59, 59)
        assert query.params["endDateFrom"] == datetime(1970, 1, 1)

    def test_end_date_from_only_uses_max_date(self, compiler, query_config):
        query = compiler.compile_shared_flow(FilterSet.of(endDateFrom="01/01/2020"))

        assert query.params["endDateFrom"] == datetime(2020, 1, 1)
        assert query.params["endDateTo"] == query_config.max_date

    def test_start_date_range(self, compiler):
        query = compiler.compile_shared_flow(
            FilterSet.of(startDateFrom="01/01/2020", startDateTo="01/31/2020")
        )

        assert len(query.fragments) == 1
        assert "BETWEEN :startDateFrom AND :startDateTo" in query.fragments[0]
        assert query.params["startDateFrom"] == datetime(2020, 1, 1)
        assert query.params["startDateTo"] == datetime(2020, 1, 31, 23, 59, 59)

    def test_bad_start_date(self, compiler):
        with pytest.raises(BadRequestError) as exc_info:
            compiler.compile_shared_flow(FilterSet.of(startDateFrom="2020-01-01"))

        assert exc_info.value.code == "E-2005"

    def test_bad_end_date(self, compiler):
        with pytest.raises(BadRequestError) as exc_info:
            compiler.compile_shared_flow(FilterSet.of(endDateTo="13/45/2020"))

        assert exc_info.value.code == "E-2006"


class TestCreatorFlow:
    def test_creator_predicate_comes_first(self, compiler):
        query = compiler.compile_creator_flow(100, FilterSet.of(creator="alice", type="active"))

        assert query.fragments[0] == "AND p.create_user = :creator_id"
        assert query.params["creator_id"] == 100
        assert query.params["type_id"] == [1]
        assert len(query.fragments) == 2


class TestCompileOrder:
    """Verify ORDER BY construction and the challenge id tie-break."""

    def test_default_order(self, compiler):
        clause = compiler.compile_order(None)

        assert clause == "ORDER BY challenge_end_date, challenge_id DESC"

    def test_blank_field_uses_default(self, compiler):
        clause = compiler.compile_order(OrderSpec(field="  "))

        assert clause.startswith("ORDER BY challenge_end_date")

    def test_field_is_case_insensitive(self, compiler):
        clause = compiler.compile_order(
            OrderSpec(field="ChallengeName", sort_order=SortOrder.ASC_NULLS_FIRST)
        )

        assert clause == "ORDER BY challenge_name ASC, challenge_id DESC"

    def test_descending(self, compiler):
        clause = compiler.compile_order(
            OrderSpec(field="challengeStartDate", sort_order=SortOrder.DESC_NULLS_LAST)
        )

        assert clause == "ORDER BY challenge_start_date DESC, challenge_id DESC"

    def test_id_has_no_tie_break(self, compiler):
        clause = compiler.compile_order(
            OrderSpec(field="id", sort_order=SortOrder.DESC_NULLS_LAST)
        )

        assert clause == "ORDER BY challenge_id DESC"

    def test_unknown_field_is_rejected(self, compiler):
        with pytest.raises(BadRequestError) as exc_info:
            compiler.compile_order(OrderSpec(field="password"))

        assert exc_info.value.code == "E-2009"

    @pytest.mark.parametrize(
        "sort_order", [SortOrder.ASC_NULLS_LAST, SortOrder.DESC_NULLS_FIRST]
    )
    def test_unsupported_direction_is_rejected(self, compiler, sort_order):
        with pytest.raises(BadRequestError) as exc_info:
            compiler.compile_order(OrderSpec(field="id", sort_order=sort_order))

        assert exc_info.value.code == "E-2010"
        assert sort_order.value in exc_info.value.message
