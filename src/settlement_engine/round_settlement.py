"""Round settlement - orchestrates the full settlement of one round."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from src.settlement_engine.collaborators import SubmissionSource
from src.settlement_engine.deduplication import Deduplicator
from src.settlement_engine.group_matching import GroupPartitioner
from src.settlement_engine.group_stats import StatsAggregator
from src.settlement_engine.models import (
    PayoffRecord,
    RoundOutcome,
    SettlementConfig,
    Submission,
)
from src.settlement_engine.payoff import PayoffCalculator
from src.settlement_engine.ranking import Ranker
from src.settlement_engine.result_emitter import EmitReport, ResultEmitter

logger = logging.getLogger(__name__)


@dataclass
class SettlementResult:
    """A settled round and the delivery report for it."""

    round_id: str
    outcome: RoundOutcome
    report: Optional[EmitReport] = None


class RoundSettler:
    """Main entry point for settling a round.

    Runs submissions through deduplication, ranking, ladder matching,
    group statistics and payoffs, then hands the outcome to the
    ResultEmitter.
    """

    def __init__(
        self,
        config: SettlementConfig,
        source: Optional[SubmissionSource] = None,
        emitter: Optional[ResultEmitter] = None,
        ranker: Optional[Ranker] = None,
    ):
        self.config = config
        self.source = source
        self.emitter = emitter
        self.deduplicator = Deduplicator()
        self.ranker = ranker or Ranker()
        self.partitioner = GroupPartitioner(config.subgroup_size, config.group_labels)
        self.stats = StatsAggregator(demand_tracked=config.demand_tracked)
        self.payoffs = PayoffCalculator(
            initial_coins=config.initial_coins,
            group_account_divider=config.group_account_divider,
        )

    def compute_outcome(self, submissions: Iterable[Submission]) -> RoundOutcome:
        """Compute ranking, groups, stats and payoffs for raw submissions.

        Raises:
            ConfigurationError: If there are not enough group labels.
            DataConsistencyError: If a payoff position is out of range.
        """
        unique = self.deduplicator.deduplicate(submissions)

        ranked = self.ranker.rank(unique)
        matching = self.partitioner.partition(ranked)
        group_stats = self.stats.compute(matching.groups)

        if self.ranker.has_noise:
            noisy_ranked, noisy_values = self.ranker.rank_noisy(unique)
            noisy_matching = self.partitioner.partition(noisy_ranked, noisy_values)
            noisy_group_stats = self.stats.compute(noisy_matching.groups)
        else:
            noisy_matching = matching
            noisy_group_stats = group_stats

        # Payoffs and client bars both come from the noisy groups.
        bars = noisy_matching.bars

        records = []
        for i, group in enumerate(noisy_matching.groups):
            account = self.payoffs.group_account(bars, i)
            for j, entry in enumerate(group.members):
                records.append(
                    PayoffRecord(
                        player=entry.player,
                        payoff=self.payoffs.payoff(bars, (i, j)),
                        position_in_ranking=(i, j),
                        group_label=group.label,
                        group_account_total=account,
                    )
                )

        return RoundOutcome(
            ranking=matching.ranking,
            groups=matching.groups,
            group_stats=group_stats,
            bars=bars,
            noisy_ranking=noisy_matching.ranking,
            noisy_groups=noisy_matching.groups,
            noisy_group_stats=noisy_group_stats,
            payoffs=records,
        )

    def settle(self, round_id: str, compatibility: Any = None) -> SettlementResult:
        """Fetch a round's submissions, settle it and emit the results."""
        if self.source is None:
            raise ValueError("RoundSettler has no submission source")

        submissions = self.source.fetch(round_id)
        logger.info(
            "Settling round %s: %d raw submissions", round_id, len(submissions)
        )

        outcome = self.compute_outcome(submissions)
        if outcome.is_empty:
            logger.info("Round %s had no submissions", round_id)

        report = None
        if self.emitter is not None:
            report = self.emitter.emit(outcome, round_id, compatibility)

        logger.info(
            "Round %s settled: %d players in %d groups",
            round_id,
            len(outcome.ranking),
            len(outcome.groups),
        )
        return SettlementResult(round_id=round_id, outcome=outcome, report=report)
