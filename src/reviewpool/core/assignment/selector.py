"""Random reviewer selection."""
import random
from typing import Optional, Sequence

from ..models import User


class ReviewerSelector:
    """Picks reviewers uniformly at random from a candidate pool.

    The random source is owned by the selector, so a seeded instance gives
    reproducible picks without touching module-level random state.
    """

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        """Initialize the selector.

        Args:
            rng: Random source to draw from; takes precedence over ``seed``
            seed: Seed for a private ``random.Random`` when ``rng`` is not given
        """
        self._rng = rng if rng is not None else random.Random(seed)

    def select(self, candidates: Sequence[User], max_count: int) -> list[str]:
        """Select up to ``max_count`` distinct user ids.

        Sampling is without replacement and order carries no meaning. A pool
        smaller than ``max_count`` is returned whole; an empty pool yields an
        empty list.

        Args:
            candidates: Eligible users
            max_count: Upper bound on the number of picks

        Returns:
            Selected user ids
        """
        if max_count <= 0:
            return []

        user_ids = list(dict.fromkeys(candidate.user_id for candidate in candidates))
        return self._rng.sample(user_ids, k=min(max_count, len(user_ids)))
