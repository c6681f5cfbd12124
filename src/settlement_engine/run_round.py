"""Settle one round from a CSV submission log.

Usage:
    python -m src.settlement_engine.run_round <submissions_csv> <round_id> [settings_json]

Examples:
    python -m src.settlement_engine.run_round data/raw/session1.csv 3
    python -m src.settlement_engine.run_round data/raw/session1.csv 3 settings.json
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from src.logging_config import setup_logging
from src.settlement_engine.config import RESULTS_DIR
from src.settlement_engine.delivery import Outbox
from src.settlement_engine.ingestion import CsvSubmissionSource
from src.settlement_engine.models import SettlementConfig, load_settings
from src.settlement_engine.registry import InMemoryPlayerRegistry
from src.settlement_engine.result_emitter import ResultEmitter
from src.settlement_engine.result_persistence import JsonResultStore
from src.settlement_engine.round_settlement import RoundSettler

logger = logging.getLogger(__name__)


def run_round(
    submissions_file: Path,
    round_id: str,
    settings_file: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> Path:
    """Settle ``round_id`` and write the per-player messages.

    Every player found anywhere in the submission log is registered, so
    players who skipped this round still appear in the registry.

    Args:
        submissions_file: CSV submission log.
        round_id: Round to settle.
        settings_file: Optional JSON settings; defaults are used otherwise.
        output_dir: Directory for results. Defaults to ``data/results/``.

    Returns:
        Path to the written outbox JSON file.
    """
    if output_dir is None:
        output_dir = RESULTS_DIR

    config = load_settings(settings_file) if settings_file else SettlementConfig()

    source = CsvSubmissionSource(submissions_file)
    registry = InMemoryPlayerRegistry(source.read_log()["player"].unique())
    outbox = Outbox()
    store = JsonResultStore(output_dir) if config.persistence_enabled else None

    emitter = ResultEmitter(
        registry=registry,
        delivery=outbox,
        store=store,
        persistence_enabled=config.persistence_enabled,
    )
    settler = RoundSettler(config, source=source, emitter=emitter)
    result = settler.settle(round_id)

    for record in result.outcome.payoffs:
        logger.info(
            "  %s: group %s, payoff %.2f",
            record.player, record.group_label, record.payoff,
        )

    return outbox.write(Path(output_dir) / f"outbox_{round_id}.json")


if __name__ == "__main__":
    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)

    submissions_file = Path(sys.argv[1])
    round_id = sys.argv[2]
    setup_logging(log_file=f"settlement_{submissions_file.stem}.log")
    settings_file = Path(sys.argv[3]) if len(sys.argv) > 3 else None

    try:
        output = run_round(submissions_file, round_id, settings_file)
        print(f"Round settled: {output}")
    except Exception:
        logger.exception("Round settlement failed")
        sys.exit(1)
