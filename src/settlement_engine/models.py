"""Round settlement data models."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from src.settlement_engine.config import (
    DEFAULT_GROUP_ACCOUNT_DIVIDER,
    DEFAULT_GROUP_NAMES,
    DEFAULT_INITIAL_COINS,
    DEFAULT_NOISE_HIGH,
    DEFAULT_NOISE_LOW,
    DEFAULT_SUBGROUP_SIZE,
    DEMAND_TRACKING_TREATMENTS,
)

# A statistic is either a number or the "NA" marker
Stat = Union[float, str]

# (group index, position within group)
Position = Tuple[int, int]


class ConfigurationError(Exception):
    """Raised when settlement settings cannot produce a valid round."""

    pass


def check_subgroup_size(size) -> None:
    """Raise ConfigurationError unless size is a positive int (bools excluded)."""
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ConfigurationError(
            f"subgroup_size must be a positive integer, got {size!r}"
        )


def check_group_labels(labels: List[str]) -> None:
    """Raise ConfigurationError for an empty or repeating label list."""
    if not labels:
        raise ConfigurationError("group_labels cannot be empty")
    repeated = sorted({label for label in labels if labels.count(label) > 1})
    if repeated:
        raise ConfigurationError(
            f"group_labels must be unique, repeated: {', '.join(repeated)}"
        )


@dataclass
class Submission:
    """One player's input for a round."""

    player: str
    contribution: float
    demand: Optional[float] = None


@dataclass(frozen=True)
class RankedEntry:
    """A submission with its resolved rank and group assignment."""

    player: str
    contribution: float
    demand: Optional[float]
    rank: int
    group: str
    position_in_group: int
    noisy_contribution: float

    def to_submission(self) -> Submission:
        return Submission(
            player=self.player,
            contribution=self.contribution,
            demand=self.demand,
        )


@dataclass
class Group:
    """Consecutively ranked players sharing one group account."""

    label: str
    members: List[RankedEntry] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def total_contribution(self) -> float:
        return sum(m.contribution for m in self.members)

    def players(self) -> List[str]:
        return [m.player for m in self.members]


@dataclass
class GroupStats:
    """Per-group averages and sample standard deviations."""

    avg_contribution: float
    std_contribution: Stat
    avg_demand: Stat
    std_demand: Stat

    def to_dict(self) -> Dict[str, Stat]:
        return {
            "avgContr": self.avg_contribution,
            "stdContr": self.std_contribution,
            "avgDemand": self.avg_demand,
            "stdDemand": self.std_demand,
        }


@dataclass
class PayoffRecord:
    """Outcome of a round for a single player."""

    player: str
    payoff: float
    position_in_ranking: Position
    group_label: str
    group_account_total: float


@dataclass
class RoundOutcome:
    """Everything computed for one round, handed to the ResultEmitter."""

    ranking: List[str]
    groups: List[Group]
    group_stats: Dict[str, GroupStats]
    bars: List[List[List[Optional[float]]]]
    noisy_ranking: List[str]
    noisy_groups: List[Group]
    noisy_group_stats: Dict[str, GroupStats]
    payoffs: List[PayoffRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.ranking

    def payoff_for(self, player: str) -> Optional[PayoffRecord]:
        for record in self.payoffs:
            if record.player == player:
                return record
        return None


@dataclass
class SettlementConfig:
    """Settings for settling a round, passed in at construction time."""

    subgroup_size: int = DEFAULT_SUBGROUP_SIZE
    group_labels: List[str] = field(default_factory=lambda: list(DEFAULT_GROUP_NAMES))
    noise_high: float = DEFAULT_NOISE_HIGH
    noise_low: float = DEFAULT_NOISE_LOW
    group_account_divider: float = DEFAULT_GROUP_ACCOUNT_DIVIDER
    initial_coins: float = DEFAULT_INITIAL_COINS
    demand_tracked: bool = False
    persistence_enabled: bool = False

    def __post_init__(self):
        self.validate()

    def validate(self):
        """Raise ConfigurationError for settings that can never settle a round."""
        check_subgroup_size(self.subgroup_size)
        if self.group_account_divider <= 0:
            raise ConfigurationError(
                f"group_account_divider must be positive, "
                f"got {self.group_account_divider!r}"
            )
        check_group_labels(self.group_labels)

    def max_players(self) -> int:
        """Largest round that the label list can partition."""
        return self.subgroup_size * len(self.group_labels)

    @classmethod
    def from_dict(cls, data: Dict) -> "SettlementConfig":
        """Build a config from a settings dict (missing keys use defaults).

        Recognizes an optional ``treatment`` key: treatments listed in
        ``DEMAND_TRACKING_TREATMENTS`` turn on demand tracking unless
        ``demand_tracked`` is given explicitly.
        """
        kwargs = {}
        for key in (
            "subgroup_size",
            "group_labels",
            "noise_high",
            "noise_low",
            "group_account_divider",
            "initial_coins",
            "demand_tracked",
            "persistence_enabled",
        ):
            if key in data:
                kwargs[key] = data[key]

        treatment = data.get("treatment")
        if treatment is not None and "demand_tracked" not in kwargs:
            kwargs["demand_tracked"] = treatment in DEMAND_TRACKING_TREATMENTS

        if "group_labels" in kwargs:
            kwargs["group_labels"] = list(kwargs["group_labels"])

        return cls(**kwargs)

    @classmethod
    def for_treatment(cls, treatment: str, **overrides) -> "SettlementConfig":
        """Default config for a named treatment."""
        data = {"treatment": treatment}
        data.update(overrides)
        return cls.from_dict(data)


def load_settings(path: Path) -> SettlementConfig:
    """Load a SettlementConfig from a JSON settings file.

    Raises:
        ConfigurationError: If the file is missing or not valid JSON.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain an object")
    return SettlementConfig.from_dict(data)
