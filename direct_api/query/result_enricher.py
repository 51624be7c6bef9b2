"""Result enricher: joins prize rows onto a page of challenges.

Fetches the prizes of every challenge on the page in one boundary call,
groups them by challenge id, and fills in each challenge's challenge prizes,
checkpoint prizes and total prize. Only this module writes those fields.
"""

import logging
from collections import defaultdict

from direct_api.config import QueryConfig
from direct_api.query.boundaries import ChallengeBoundary
from direct_api.query.models import Challenge, Prize, PrizeType

logger = logging.getLogger(__name__)


class ResultEnricher:
    """Merges prize data into challenge projections in place."""

    def __init__(self, challenges: ChallengeBoundary, config: QueryConfig) -> None:
        self._challenges = challenges
        self._config = config

    def enrich(self, challenges: list[Challenge]) -> None:
        """Fill the prize fields of every challenge.

        The prize fetch happens before any challenge is touched, so a
        failure leaves the list unmodified.

        Raises:
            DataAccessError: If the prize query fails.
        """
        if not challenges:
            return

        prizes = self._challenges.get_my_challenges_prizes([c.id for c in challenges])
        by_challenge = group_prizes(prizes)
        logger.debug("Merging %d prize row(s) into %d challenge(s)", len(prizes), len(challenges))

        for challenge in challenges:
            self._apply(challenge, by_challenge.get(challenge.id, []))

    def _apply(self, challenge: Challenge, prizes: list[Prize]) -> None:
        challenge_prizes: list[Prize] = []
        checkpoint_prizes: list[Prize] = []
        total = 0.0

        for prize in prizes:
            amount = prize.prize_amount * (prize.number_of_prize or 0)
            total += amount
            kind = PrizeType.from_type_id(
                prize.prize_type,
                self._config.challenge_prize_type_id,
                self._config.checkpoint_prize_type_id,
            )
            if kind is PrizeType.challenge:
                # Placement already orders challenge prizes.
                prize.number_of_prize = None
                challenge_prizes.append(prize)
            elif kind is PrizeType.checkpoint:
                # Checkpoint prizes are not placed.
                prize.placement = None
                checkpoint_prizes.append(prize)
            else:
                total -= amount

        challenge.prizes = challenge_prizes
        challenge.check_point_prizes = checkpoint_prizes
        challenge.total_prize = total


def group_prizes(prizes: list[Prize]) -> dict[int, list[Prize]]:
    """Group prize rows by challenge id, keeping row order."""
    grouped: dict[int, list[Prize]] = defaultdict(list)
    for prize in prizes:
        grouped[prize.challenge_id].append(prize)
    return dict(grouped)
