"""Lookup resolver: symbolic filter values to identifier sets.

Delegates every call to the lookup boundary (no caching) and applies the
empty-result policy: a resolution that matches nothing yields the no-match
sentinel set, never an empty list, so the compiled ``IN (...)`` clause stays
well formed and matches no rows.
"""

import logging

from direct_api.config import QueryConfig
from direct_api.query.boundaries import LookupBoundary

logger = logging.getLogger(__name__)

CATEGORY_CHALLENGE_TYPE = "challenge_type"
CATEGORY_TECHNOLOGY = "technology"
CATEGORY_PLATFORM = "platform"
CATEGORY_PROJECT_STATUS = "project_status"


class LookupResolver:
    """Resolves names within a lookup category to ids."""

    def __init__(self, lookups: LookupBoundary, config: QueryConfig) -> None:
        self._lookups = lookups
        self._no_match = list(config.no_match_ids)

    @property
    def no_match(self) -> list[int]:
        """A fresh copy of the sentinel id set that matches no row."""
        return list(self._no_match)

    def resolve(self, category: str, names: list[str] | None) -> list[int]:
        """Resolve names to ids, substituting the no-match set when empty.

        Args:
            category: Lookup category, e.g. ``technology``.
            names: Names to resolve; ``None`` requests the whole category.

        Returns:
            Non-empty list of ids.

        Raises:
            DataAccessError: If the lookup boundary fails.
        """
        ids = self._lookups.get_ids(category, names)
        if not ids:
            logger.debug("No %s ids matched %r, using no-match sentinel", category, names)
            return self.no_match
        return list(ids)

    def resolve_all(self, category: str) -> list[int]:
        """Return every id of a category, without the sentinel fallback."""
        return list(self._lookups.get_ids(category, None))
