"""Caller identity established by the upstream authentication layer."""

from dataclasses import dataclass, field
from enum import Enum

from direct_api.errors import UnauthorizedError


class AccessLevel(str, Enum):
    """Roles recognized by the Direct API."""

    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


@dataclass(frozen=True)
class Identity:
    """An authenticated caller.

    Attributes:
        user_id: Id of the logged in user.
        access_levels: Roles granted to the user.
    """

    user_id: int
    access_levels: frozenset[AccessLevel] = field(default_factory=frozenset)

    def authorize(self, *levels: AccessLevel) -> None:
        """Require at least one of the given access levels.

        Raises:
            UnauthorizedError: If the caller holds none of them.
        """
        if not self.access_levels.intersection(levels):
            raise UnauthorizedError.from_code(
                "E-5002", levels=", ".join(level.value for level in levels)
            )
