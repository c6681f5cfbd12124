"""Public-goods payoff calculation.

A player keeps the part of the endowment they did not contribute, plus the
group account divided by a fixed divider:

    payoff = initial_coins - own contribution + group account / divider

The divider is a game constant, not the group size.
"""

import logging
from typing import List, Optional, Sequence

from src.settlement_engine.models import ConfigurationError, Position

logger = logging.getLogger(__name__)

Bars = Sequence[Sequence[Sequence[Optional[float]]]]


class DataConsistencyError(Exception):
    """Raised when a position does not exist in the round's groups."""

    pass


class PayoffCalculator:
    """Computes payoffs from the per-group bars of a round."""

    def __init__(self, initial_coins: float, group_account_divider: float):
        if group_account_divider <= 0:
            raise ConfigurationError(
                f"group_account_divider must be positive, "
                f"got {group_account_divider!r}"
            )
        self.initial_coins = initial_coins
        self.group_account_divider = group_account_divider

    def group_account(self, bars: Bars, group_index: int) -> float:
        """Sum of contributions in one group."""
        group = self._group(bars, group_index)
        return sum(bar[0] for bar in group)

    def payoff(self, bars: Bars, position: Position) -> float:
        """Payoff for the player at ``(group_index, position_in_group)``.

        Raises:
            DataConsistencyError: If the group or member does not exist.
        """
        group_index, member_index = position
        group = self._group(bars, group_index)
        if not 0 <= member_index < len(group):
            raise DataConsistencyError(
                f"Position {member_index} does not exist in group {group_index} "
                f"(size {len(group)})"
            )

        account = sum(bar[0] for bar in group)
        own_contribution = group[member_index][0]
        return (
            self.initial_coins
            - own_contribution
            + account / self.group_account_divider
        )

    def group_payoffs(self, bars: Bars, group_index: int) -> List[float]:
        """Payoffs of every member of one group, in member order."""
        group = self._group(bars, group_index)
        return [self.payoff(bars, (group_index, j)) for j in range(len(group))]

    @staticmethod
    def _group(bars: Bars, group_index: int):
        if not 0 <= group_index < len(bars):
            raise DataConsistencyError(
                f"Group {group_index} does not exist ({len(bars)} groups)"
            )
        return bars[group_index]
