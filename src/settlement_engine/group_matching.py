"""Ladder matching - split the ranking into consecutive fixed-size groups."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.settlement_engine.models import (
    ConfigurationError,
    Group,
    RankedEntry,
    Submission,
    check_group_labels,
    check_subgroup_size,
)

logger = logging.getLogger(__name__)


@dataclass
class MatchingResult:
    """Output of ladder matching.

    Attributes:
        ranking: Player ids from top to lowest contribution.
        groups: Groups in ranking order (top block first).
        bars: Per group, the ``[contribution, demand]`` pair of each member
            in member order. Sent to clients for display and used as the
            payoff input.
    """

    ranking: List[str] = field(default_factory=list)
    groups: List[Group] = field(default_factory=list)
    bars: List[List[List[Optional[float]]]] = field(default_factory=list)

    def entries(self) -> List[RankedEntry]:
        return [entry for group in self.groups for entry in group.members]


class GroupPartitioner:
    """Assigns ranked players to groups of ``subgroup_size``.

    Group labels are taken from ``group_labels`` in order. The last group
    is short when the number of players is not a multiple of the size.
    """

    def __init__(self, subgroup_size: int, group_labels: List[str]):
        check_subgroup_size(subgroup_size)
        check_group_labels(list(group_labels))
        self.subgroup_size = subgroup_size
        self.group_labels = list(group_labels)

    def partition(
        self,
        ranked: List[Submission],
        noisy_values: Optional[Dict[str, float]] = None,
    ) -> MatchingResult:
        """Walk the ranking and open a new group every ``subgroup_size`` entries.

        Args:
            ranked: Submissions in ranking order.
            noisy_values: Optional player -> noisy contribution. Entries
                without one record their raw contribution.

        Raises:
            ConfigurationError: If there are more groups than labels.
        """
        needed = -(-len(ranked) // self.subgroup_size)
        if needed > len(self.group_labels):
            raise ConfigurationError(
                f"{len(ranked)} players need {needed} groups of "
                f"{self.subgroup_size}, but only {len(self.group_labels)} "
                f"group labels are configured"
            )

        noisy_values = noisy_values or {}
        result = MatchingResult()
        group: Optional[Group] = None
        group_bars: List[List[Optional[float]]] = []

        for i, sub in enumerate(ranked):
            if i % self.subgroup_size == 0:
                group = Group(label=self.group_labels[len(result.groups)])
                group_bars = []
                result.groups.append(group)
                result.bars.append(group_bars)

            entry = RankedEntry(
                player=sub.player,
                contribution=sub.contribution,
                demand=sub.demand,
                rank=i,
                group=group.label,
                position_in_group=group.size,
                noisy_contribution=noisy_values.get(sub.player, sub.contribution),
            )
            group.members.append(entry)
            result.ranking.append(sub.player)
            group_bars.append([sub.contribution, sub.demand])

        logger.debug(
            "Matched %d players into %d groups of up to %d",
            len(result.ranking),
            len(result.groups),
            self.subgroup_size,
        )
        return result
