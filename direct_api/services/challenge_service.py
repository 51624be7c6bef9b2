"""Service for the My Challenges listing and count operations.

Sequences validation, filter compilation and prize enrichment, and hands
execution to the challenge data access boundary. Two flows exist: when a
``creator`` filter is present only challenges created by the caller are
considered ("my created challenges"); otherwise every challenge the caller
can access is ("my challenges").

Example:
    service = ChallengeService(challenge_dao, catalog_dao, user_dao, config.query)
    challenges = service.get_challenges(identity, query)
"""

import logging
from typing import Any

from direct_api.config import QueryConfig
from direct_api.errors import DataAccessError, ServerInternalError
from direct_api.query import FilterCompiler, FilterValidator, LookupResolver, ResultEnricher
from direct_api.query.boundaries import (
    ChallengeBoundary,
    IdentityBoundary,
    LookupBoundary,
)
from direct_api.query.models import Challenge, CompiledQuery, LimitQuery, QueryParameter
from direct_api.security import AccessLevel, Identity

logger = logging.getLogger(__name__)

CREATOR_FILTER_KEY = "creator"


class ChallengeService:
    """Facade over the challenge query pipeline."""

    def __init__(
        self,
        challenges: ChallengeBoundary,
        lookups: LookupBoundary,
        users: IdentityBoundary,
        config: QueryConfig,
        allowed_levels: tuple[AccessLevel, ...] = (AccessLevel.ADMIN, AccessLevel.MEMBER),
    ) -> None:
        self._challenges = challenges
        self._config = config
        self._allowed_levels = allowed_levels
        self.validator = FilterValidator(users, config)
        self.compiler = FilterCompiler(LookupResolver(lookups, config), config)
        self.enricher = ResultEnricher(challenges, config)

    def authorize(self, identity: Identity) -> None:
        """Reject callers holding none of the allowed access levels.

        Raises:
            UnauthorizedError: If the caller is neither admin nor member.
        """
        identity.authorize(*self._allowed_levels)

    def get_challenges(self, identity: Identity, query: QueryParameter) -> list[Challenge]:
        """Retrieve the caller's challenges with prize data merged in.

        Args:
            identity: The authenticated caller.
            query: Filters, ordering and paging requested.

        Returns:
            The requested page of challenges; may be empty.

        Raises:
            UnauthorizedError: If the caller is neither admin nor member.
            BadRequestError: For any invalid filter, sort or paging value.
            ServerInternalError: If a data access call fails.
        """
        self.authorize(identity)
        try:
            compiled = self._compile(identity, query)
            params = dict(compiled.params)
            self._populate_limit(query.limit, params)
            order_clause = self.compiler.compile_order(query.order)

            challenges = self._challenges.get_my_challenges(
                compiled.fragments, params, order_clause
            )
            if challenges:
                self.enricher.enrich(challenges)
        except DataAccessError as e:
            logger.error("Challenge listing failed for user %s: %s", identity.user_id, e)
            raise ServerInternalError.from_code("E-4001") from e

        logger.info(
            "Returned %d challenge(s) to user %s", len(challenges), identity.user_id
        )
        return challenges

    def get_challenge_count(self, identity: Identity, query: QueryParameter) -> int:
        """Count the caller's challenges matching the filters.

        Raises:
            UnauthorizedError: If the caller is neither admin nor member.
            BadRequestError: For any invalid filter value.
            ServerInternalError: If a data access call fails.
        """
        self.authorize(identity)
        try:
            compiled = self._compile(identity, query)
            count = self._challenges.get_my_challenges_count(
                compiled.fragments, dict(compiled.params)
            )
        except DataAccessError as e:
            logger.error("Challenge count failed for user %s: %s", identity.user_id, e)
            raise ServerInternalError.from_code("E-4002") from e
        return count or 0

    def _compile(self, identity: Identity, query: QueryParameter) -> CompiledQuery:
        """Validate the request and compile the matching flow's filters."""
        self.validator.validate(identity.user_id, query)

        if query.filter.contains(CREATOR_FILTER_KEY):
            flow = "my created challenges"
            compiled = self.compiler.compile_creator_flow(identity.user_id, query.filter)
        else:
            flow = "my challenges"
            compiled = self.compiler.compile_shared_flow(query.filter)

        # Restricts rows to projects the caller can access.
        compiled.bind("user_id", identity.user_id)
        logger.info(
            "User %s queried %s with %d filter fragment(s)",
            identity.user_id,
            flow,
            len(compiled.fragments),
        )
        return compiled

    def _populate_limit(self, limit: LimitQuery | None, params: dict[str, Any]) -> None:
        """Add ``limit``/``offset`` parameters; an unlimited page adds no limit."""
        page_size = self._config.default_limit
        offset = 0
        if limit is not None:
            if limit.limit is not None:
                page_size = limit.limit
            if limit.offset is not None:
                offset = limit.offset
        if page_size != self._config.unlimited:
            params["limit"] = page_size
        params["offset"] = offset
