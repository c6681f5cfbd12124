"""Result emitter - persists a settled round and notifies each player."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.settlement_engine.collaborators import (
    MessageDelivery,
    PlayerLookupError,
    PlayerRegistry,
    ResultStore,
)
from src.settlement_engine.models import ConfigurationError, RoundOutcome

logger = logging.getLogger(__name__)


@dataclass
class EmitReport:
    """Which players received their results, were skipped, or failed."""

    delivered: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)  # Credited, not delivered

    @property
    def complete(self) -> bool:
        return not self.skipped and not self.failed


class ResultEmitter:
    """Hands a RoundOutcome to the registry, the result store and clients.

    Players are processed one at a time in noisy-group order. A player
    missing from the registry is logged and skipped. A player whose
    persistence or delivery fails is logged and recorded as failed. Either
    way the remaining players are still credited, persisted and notified.
    """

    def __init__(
        self,
        registry: PlayerRegistry,
        delivery: MessageDelivery,
        store: Optional[ResultStore] = None,
        persistence_enabled: bool = False,
    ):
        if persistence_enabled and store is None:
            raise ConfigurationError("persistence_enabled requires a result store")
        self.registry = registry
        self.delivery = delivery
        self.store = store
        self.persistence_enabled = persistence_enabled

    def emit(
        self,
        outcome: RoundOutcome,
        round_id: str,
        compatibility: Any = None,
    ) -> EmitReport:
        """Persist, credit and deliver the results of one round."""
        report = EmitReport()

        if self.persistence_enabled:
            self.store.save_round_results(
                round_id,
                outcome.ranking,
                outcome.group_stats,
                outcome.noisy_ranking,
                outcome.noisy_group_stats,
            )

        payoffs = {record.player: record for record in outcome.payoffs}

        for i, group in enumerate(outcome.noisy_groups):
            for j, entry in enumerate(group.members):
                position = (i, j)
                record = payoffs[entry.player]

                try:
                    self.registry.add_win(entry.player, record.payoff)
                except PlayerLookupError:
                    logger.warning(
                        "Player %s not found in registry; skipping results "
                        "for round %s (payoff %s)",
                        entry.player,
                        round_id,
                        record.payoff,
                    )
                    report.skipped.append(entry.player)
                    continue

                try:
                    if self.persistence_enabled:
                        self.store.save_player_values(
                            entry.to_submission(),
                            record.payoff,
                            position,
                            outcome.ranking,
                            outcome.noisy_ranking,
                            outcome.group_stats,
                            round_id,
                        )

                    self.delivery.say(
                        entry.player,
                        self.build_payload(
                            outcome, position, record.payoff, compatibility
                        ),
                    )
                except Exception:
                    logger.exception(
                        "Failed to save or deliver results for player %s "
                        "in round %s",
                        entry.player,
                        round_id,
                    )
                    report.failed.append(entry.player)
                    continue

                report.delivered.append(entry.player)

        logger.info(
            "Round %s: delivered results to %d players, skipped %d, failed %d",
            round_id,
            len(report.delivered),
            len(report.skipped),
            len(report.failed),
        )
        return report

    @staticmethod
    def build_payload(
        outcome: RoundOutcome,
        position,
        payoff: float,
        compatibility: Any = None,
    ) -> Dict[str, Any]:
        """Client payload: all bars, the player's position and payoff."""
        return {
            "bars": outcome.bars,
            "position": list(position),
            "payoff": payoff,
            "compatibility": compatibility,
        }
