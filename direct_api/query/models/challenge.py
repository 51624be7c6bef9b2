"""Read-only challenge and prize projections.

Challenge rows come from the primary query; the three prize fields are
filled in afterwards by the result enricher. Field names are snake_case in
Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PrizeType(str, Enum):
    """Closed set of prize categories used by the enricher."""

    challenge = "challenge"
    checkpoint = "checkpoint"
    other = "other"

    @classmethod
    def from_type_id(
        cls, type_id: int, challenge_type_id: int, checkpoint_type_id: int
    ) -> PrizeType:
        """Classify a stored prize type id."""
        if type_id == challenge_type_id:
            return cls.challenge
        if type_id == checkpoint_type_id:
            return cls.checkpoint
        return cls.other


class Prize(BaseModel):
    """A prize row attached to a challenge."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    challenge_id: int
    prize_type: int
    prize_amount: float
    number_of_prize: int | None = None
    placement: int | None = None


class Challenge(BaseModel):
    """One row of the My Challenges listing."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    challenge_name: str | None = None
    challenge_type: str | None = None
    challenge_status: str | None = None
    challenge_creator: str | None = None
    challenge_start_date: datetime | None = None
    challenge_end_date: datetime | None = None
    client_id: int | None = None
    client_name: str | None = None
    billing_id: int | None = None
    billing_name: str | None = None
    direct_project_id: int | None = None
    direct_project_name: str | None = None
    dr_points: float | None = None

    # Written only by the result enricher.
    prizes: list[Prize] | None = None
    check_point_prizes: list[Prize] | None = None
    total_prize: float | None = None
