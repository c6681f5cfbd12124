"""Result persistence - save settled rounds to JSON files."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from src.settlement_engine.config import RESULTS_DIR
from src.settlement_engine.models import GroupStats, Position, Submission

logger = logging.getLogger(__name__)


class JsonResultStore:
    """ResultStore writing one JSON file per round.

    Each file holds the group-level results and a list of per-player
    records, appended as players are settled.
    """

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = Path(storage_dir) if storage_dir else RESULTS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def save_round_results(
        self,
        round_id: str,
        ranking: List[str],
        group_stats: Dict[str, GroupStats],
        noisy_ranking: List[str],
        noisy_group_stats: Dict[str, GroupStats],
    ) -> Path:
        """Write the group-level results, starting a fresh round file."""
        data = {
            "round_id": round_id,
            "saved_at": datetime.now().isoformat(),
            "ranking": ranking,
            "group_stats": self._stats_to_dict(group_stats),
            "noisy_ranking": noisy_ranking,
            "noisy_group_stats": self._stats_to_dict(noisy_group_stats),
            "players": [],
        }
        filepath = self._write(round_id, data)
        logger.info(
            "Saved round %s results (%d players) to %s",
            round_id, len(ranking), filepath,
        )
        return filepath

    def save_player_values(
        self,
        submission: Submission,
        payoff: float,
        position: Position,
        ranking: List[str],
        noisy_ranking: List[str],
        group_stats: Dict[str, GroupStats],
        round_id: str,
    ) -> Path:
        """Append one player's record to the round file."""
        data = self.load_round(round_id) or {"round_id": round_id, "players": []}

        data["players"].append(
            {
                "player": submission.player,
                "contribution": submission.contribution,
                "demand": submission.demand,
                "payoff": payoff,
                "position_in_noisy_rank": list(position),
                "rank": ranking.index(submission.player) + 1,
                "noisy_rank": noisy_ranking.index(submission.player) + 1,
                "group_stats": self._stats_to_dict(group_stats),
            }
        )
        filepath = self._write(round_id, data)
        logger.debug("Saved player %s for round %s", submission.player, round_id)
        return filepath

    def load_round(self, round_id: str) -> Optional[Dict]:
        """Load a round's saved results.

        Returns:
            The stored dict if found and readable, None otherwise.
        """
        filepath = self._round_path(round_id)
        if not filepath.exists():
            return None

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt round file %s: %s", filepath, e)
            return None

    def load_group_stats(self, round_id: str, noisy: bool = False) -> Dict[str, GroupStats]:
        """Reconstruct the GroupStats saved for a round."""
        data = self.load_round(round_id) or {}
        key = "noisy_group_stats" if noisy else "group_stats"
        return {
            label: GroupStats(
                avg_contribution=s["avgContr"],
                std_contribution=s["stdContr"],
                avg_demand=s["avgDemand"],
                std_demand=s["stdDemand"],
            )
            for label, s in data.get(key, {}).items()
        }

    def list_rounds(self) -> List[str]:
        """Round ids with saved results, sorted by file modification time."""
        files = sorted(
            self.storage_dir.glob("round_*.json"), key=lambda p: p.stat().st_mtime
        )
        return [p.stem[len("round_"):] for p in files]

    def _round_path(self, round_id: str) -> Path:
        return self.storage_dir / f"round_{round_id}.json"

    def _write(self, round_id: str, data: Dict) -> Path:
        filepath = self._round_path(round_id)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        return filepath

    @staticmethod
    def _stats_to_dict(group_stats: Dict[str, GroupStats]) -> Dict[str, Dict]:
        return {label: stats.to_dict() for label, stats in group_stats.items()}
