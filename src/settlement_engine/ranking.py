"""Contribution ranking with randomized tie-breaks.

Players are ordered by contribution, highest first. Players with exactly
the same contribution are ordered at random: each entry draws one random
tie-break key per ranking call, so the order among any number of tied
players is a uniformly random permutation.
"""

import logging
import random
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from src.settlement_engine.models import Submission

logger = logging.getLogger(__name__)

NoiseFunction = Callable[[float], float]


def no_noise(contribution: float) -> float:
    """Default noise function: the contribution itself."""
    return contribution


class Ranker:
    """Produces a total order over deduplicated submissions.

    Args:
        noise_fn: Maps a raw contribution to the value used for the noisy
            ranking. Defaults to identity, i.e. no perturbation.
        rng: Source of tie-break draws. Pass a seeded ``random.Random``
            for reproducible rankings.
    """

    def __init__(
        self,
        noise_fn: Optional[NoiseFunction] = None,
        rng: Optional[random.Random] = None,
    ):
        self.noise_fn = noise_fn or no_noise
        self.rng = rng or random.Random()

    @property
    def has_noise(self) -> bool:
        return self.noise_fn is not no_noise

    def rank(self, submissions: Iterable[Submission]) -> List[Submission]:
        """Sort by raw contribution, descending."""
        submissions = list(submissions)
        values = [s.contribution for s in submissions]
        return self._sort(submissions, values)

    def rank_noisy(
        self, submissions: Iterable[Submission]
    ) -> Tuple[List[Submission], Dict[str, float]]:
        """Sort by noise-perturbed contribution, descending.

        Returns:
            (ranked submissions, player -> noisy contribution). Noise is
            drawn once per submission, so the returned values are exactly
            the ones the order was computed from.
        """
        submissions = list(submissions)
        values = [self.noise_fn(s.contribution) for s in submissions]
        noisy_values = {s.player: v for s, v in zip(submissions, values)}
        return self._sort(submissions, values), noisy_values

    def _sort(
        self, submissions: List[Submission], values: List[float]
    ) -> List[Submission]:
        tie_keys = [self.rng.random() for _ in submissions]
        order = sorted(
            range(len(submissions)),
            key=lambda i: (-values[i], tie_keys[i]),
        )
        ranked = [submissions[i] for i in order]

        logger.debug(
            "Ranked %d submissions (%d distinct values)",
            len(ranked),
            len(set(values)),
        )
        return ranked
