"""In-memory player registry holding each player's running balance."""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from src.settlement_engine.collaborators import PlayerLookupError

logger = logging.getLogger(__name__)


@dataclass
class PlayerEntry:
    """Registry record of a connected player."""

    player_id: str
    win: float = 0.0
    rounds_settled: int = 0


class InMemoryPlayerRegistry:
    """PlayerRegistry backed by a dict."""

    def __init__(self, players: Optional[Iterable[str]] = None):
        self._players: Dict[str, PlayerEntry] = {}
        for player_id in players or []:
            self.register(player_id)

    def register(self, player_id: str) -> PlayerEntry:
        """Add a player, or return the existing entry."""
        if player_id not in self._players:
            self._players[player_id] = PlayerEntry(player_id=player_id)
        return self._players[player_id]

    def get(self, player_id: str) -> Optional[PlayerEntry]:
        return self._players.get(player_id)

    def add_win(self, player: str, amount: float) -> float:
        entry = self._players.get(player)
        if entry is None:
            raise PlayerLookupError(player)

        entry.win += amount
        entry.rounds_settled += 1
        logger.info("Added to %s %s ECU (total %s)", player, amount, entry.win)
        return entry.win

    def balances(self) -> Dict[str, float]:
        return {pid: entry.win for pid, entry in self._players.items()}

    def __contains__(self, player_id: str) -> bool:
        return player_id in self._players

    def __len__(self) -> int:
        return len(self._players)
