"""Protocols for the data access collaborators of the challenge query core.

The query layer depends only on these interfaces. The SQLAlchemy DAOs in
``direct_api.db`` are the production implementations; tests substitute
in-memory fakes. Implementations raise DataAccessError on I/O failure.
"""

from typing import Any, Protocol, runtime_checkable

from direct_api.query.models import Challenge, Prize


@runtime_checkable
class IdentityBoundary(Protocol):
    """Looks up the display handle of a user."""

    def get_user_handle(self, user_id: int) -> str | None:
        """Return the handle of the user, or None when unknown."""
        ...


@runtime_checkable
class LookupBoundary(Protocol):
    """Resolves reference-data names to identifiers, scoped by category."""

    def get_ids(self, category: str, names: list[str] | None) -> list[int]:
        """Return ids matching ``names``; ``None`` returns the whole category."""
        ...


@runtime_checkable
class ChallengeBoundary(Protocol):
    """Executes the challenge listing, count and prize queries."""

    def get_my_challenges(
        self, filters: list[str], params: dict[str, Any], order_clause: str
    ) -> list[Challenge]:
        """Run the listing query with the compiled fragments appended."""
        ...

    def get_my_challenges_count(
        self, filters: list[str], params: dict[str, Any]
    ) -> int | None:
        """Run the count query with the compiled fragments appended."""
        ...

    def get_my_challenges_prizes(self, challenge_ids: list[int]) -> list[Prize]:
        """Fetch every prize row for the given challenges in one call."""
        ...
