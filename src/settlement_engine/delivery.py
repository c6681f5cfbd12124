"""Outbox delivery - collects per-player result messages."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

logger = logging.getLogger(__name__)


class Outbox:
    """MessageDelivery that keeps messages in memory until written out."""

    def __init__(self):
        self.messages: List[Tuple[str, Dict[str, Any]]] = []

    def say(self, player: str, payload: Dict[str, Any]) -> None:
        self.messages.append((player, payload))
        logger.debug("Queued results for %s", player)

    def for_player(self, player: str) -> List[Dict[str, Any]]:
        return [payload for pid, payload in self.messages if pid == player]

    def write(self, filepath: Path) -> Path:
        """Dump all queued messages as ``{player: payload}`` JSON."""
        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(dict(self.messages), f, indent=2)
        logger.info("Wrote %d result messages to %s", len(self.messages), filepath)
        return filepath
