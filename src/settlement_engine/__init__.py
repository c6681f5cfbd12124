from src.settlement_engine.collaborators import PlayerLookupError
from src.settlement_engine.deduplication import Deduplicator
from src.settlement_engine.group_matching import GroupPartitioner, MatchingResult
from src.settlement_engine.group_stats import StatsAggregator
from src.settlement_engine.models import (
    ConfigurationError,
    Group,
    GroupStats,
    PayoffRecord,
    RankedEntry,
    RoundOutcome,
    SettlementConfig,
    Submission,
)
from src.settlement_engine.payoff import DataConsistencyError, PayoffCalculator
from src.settlement_engine.ranking import Ranker
from src.settlement_engine.result_emitter import EmitReport, ResultEmitter
from src.settlement_engine.round_settlement import RoundSettler, SettlementResult

__all__ = [
    "ConfigurationError",
    "DataConsistencyError",
    "Deduplicator",
    "EmitReport",
    "Group",
    "GroupPartitioner",
    "GroupStats",
    "MatchingResult",
    "PayoffCalculator",
    "PayoffRecord",
    "PlayerLookupError",
    "RankedEntry",
    "Ranker",
    "ResultEmitter",
    "RoundOutcome",
    "RoundSettler",
    "SettlementConfig",
    "SettlementResult",
    "StatsAggregator",
    "Submission",
]
