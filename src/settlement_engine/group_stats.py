"""Per-group contribution and demand statistics."""

import logging
import math
from typing import Dict, List, Tuple

import pandas as pd

from src.settlement_engine.config import NOT_AVAILABLE
from src.settlement_engine.models import (
    Group,
    GroupStats,
    Stat,
    check_group_labels,
)

logger = logging.getLogger(__name__)


def sample_std(total: float, total_sq: float, n: int) -> Stat:
    """Sample standard deviation from running sums.

    Uses ``sqrt((sum(x^2) - sum(x)^2 / n) / (n - 1))``. Returns "NA" when
    ``n - 1 <= 1``. Negative radicands from floating-point cancellation
    are clamped to zero.
    """
    df = n - 1
    if df <= 1:
        return NOT_AVAILABLE
    variance = (total_sq - (total ** 2) / n) / df
    return math.sqrt(max(variance, 0.0))


class StatsAggregator:
    """Computes GroupStats for each group of a round."""

    def __init__(self, demand_tracked: bool = False):
        self.demand_tracked = demand_tracked

    def compute(self, groups: List[Group]) -> Dict[str, GroupStats]:
        """Return stats keyed by group label, in group order.

        Raises:
            ConfigurationError: If two groups share a label.
        """
        if groups:
            check_group_labels([group.label for group in groups])

        rows = [
            (index, entry.contribution, entry.demand)
            for index, group in enumerate(groups)
            for entry in group.members
        ]
        if not rows:
            return {}

        df = pd.DataFrame(rows, columns=["group_index", "contribution", "demand"])
        df["demand"] = pd.to_numeric(df["demand"], errors="coerce")
        df["contribution_sq"] = df["contribution"] ** 2
        df["demand_sq"] = df["demand"] ** 2

        sums = df.groupby("group_index", sort=False).agg(
            n=("contribution", "size"),
            c_sum=("contribution", "sum"),
            c_sq=("contribution_sq", "sum"),
            d_sum=("demand", "sum"),
            d_sq=("demand_sq", "sum"),
            d_count=("demand", "count"),
        )

        out: Dict[str, GroupStats] = {}
        for index, row in sums.iterrows():
            label = groups[index].label
            n = int(row["n"])
            avg_c, std_c = self._avg_std(row["c_sum"], row["c_sq"], n)

            if self.demand_tracked and int(row["d_count"]) == n:
                avg_d, std_d = self._avg_std(row["d_sum"], row["d_sq"], n)
            else:
                if self.demand_tracked:
                    logger.warning(
                        "Group %s is missing demand values for %d of %d players",
                        label, n - int(row["d_count"]), n,
                    )
                avg_d, std_d = NOT_AVAILABLE, NOT_AVAILABLE

            out[label] = GroupStats(
                avg_contribution=avg_c,
                std_contribution=std_c,
                avg_demand=avg_d,
                std_demand=std_d,
            )

        logger.debug("Computed stats for %d groups", len(out))
        return out

    def group_stats(self, group: Group) -> GroupStats:
        """Stats for a single non-empty group."""
        return self.compute([group])[group.label]

    @staticmethod
    def _avg_std(total, total_sq, n: int) -> Tuple[float, Stat]:
        total = float(total)
        return total / n, sample_std(total, float(total_sq), n)
