"""Submission deduplication.

A player who reconnects during a round can submit more than once. Only the
most recently received submission counts; earlier ones are discarded, never
merged.
"""

import logging
from typing import Iterable, List

import pandas as pd

from src.settlement_engine.models import Submission

logger = logging.getLogger(__name__)

_COLUMNS = ["player", "contribution", "demand"]


class Deduplicator:
    """Resolves multiple submissions per player to the last one received."""

    def deduplicate(self, submissions: Iterable[Submission]) -> List[Submission]:
        """Keep the last submission of each player.

        Input order is arrival order. The result lists each surviving
        submission at the position it arrived in.
        """
        submissions = list(submissions)
        if not submissions:
            return []

        df = pd.DataFrame(
            [(s.player, s.contribution, s.demand) for s in submissions],
            columns=_COLUMNS,
        )
        dupes = df["player"].duplicated(keep="last")
        if not dupes.any():
            return submissions

        logger.info(
            "Dropping %d superseded submissions from %d players",
            dupes.sum(),
            df.loc[dupes, "player"].nunique(),
        )
        return [submissions[i] for i in df.index[~dupes]]
