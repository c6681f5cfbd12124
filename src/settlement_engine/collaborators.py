"""Interfaces to the services a round settlement talks to.

The settlement engine reads submissions, persists results, updates player
balances and delivers results to clients only through these interfaces.
"""

from typing import Any, Dict, List, Protocol

from src.settlement_engine.models import GroupStats, Position, Submission


class PlayerLookupError(Exception):
    """Raised when a player cannot be found in the registry."""

    def __init__(self, player: str):
        super().__init__(f"Player {player} not found in registry")
        self.player = player


class SubmissionSource(Protocol):
    def fetch(self, round_id: str) -> List[Submission]:
        """All raw submissions for a round, in arrival order.

        May contain several submissions per player, or none at all.
        """
        ...


class ResultStore(Protocol):
    def save_round_results(
        self,
        round_id: str,
        ranking: List[str],
        group_stats: Dict[str, GroupStats],
        noisy_ranking: List[str],
        noisy_group_stats: Dict[str, GroupStats],
    ) -> None:
        ...

    def save_player_values(
        self,
        submission: Submission,
        payoff: float,
        position: Position,
        ranking: List[str],
        noisy_ranking: List[str],
        group_stats: Dict[str, GroupStats],
        round_id: str,
    ) -> None:
        ...


class MessageDelivery(Protocol):
    def say(self, player: str, payload: Dict[str, Any]) -> None:
        ...


class PlayerRegistry(Protocol):
    def add_win(self, player: str, amount: float) -> float:
        """Add ``amount`` to the player's running balance in one request.

        Returns:
            The new balance.

        Raises:
            PlayerLookupError: If the player is unknown.
        """
        ...
