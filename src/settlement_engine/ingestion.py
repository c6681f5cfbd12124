"""CSV ingestion of the raw submission log.

The log holds one row per message received from a client, in arrival order:
- ``round``: round identifier
- ``player``: player id
- ``key``: message key (contributions are recorded under ``SUBMISSION_KEY``)
- ``contribution``: submitted contribution
- ``demand``: submitted demand (optional column)

Reconnecting clients can leave several rows per player in one round; they
are all returned here and resolved later by the Deduplicator.
"""

import logging
from pathlib import Path
from typing import List, Optional

import pandas as pd

from src.settlement_engine.config import SUBMISSION_KEY
from src.settlement_engine.models import Submission

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["round", "player", "contribution"]


class IngestionError(Exception):
    """Raised when the submission log cannot be read."""


def _parse_numeric(value: Optional[str]) -> float:
    """Parse a logged number such as '1,000.5'. Unparseable values become NaN."""
    if value is None or pd.isna(value):
        return float("nan")
    try:
        return float(value.replace(",", ""))
    except ValueError:
        return float("nan")


class CsvSubmissionSource:
    """SubmissionSource reading a CSV submission log with pandas."""

    def __init__(self, filepath: Path, key: str = SUBMISSION_KEY):
        self.filepath = Path(filepath)
        self.key = key

    def read_log(self) -> pd.DataFrame:
        """Read and clean the whole log.

        Raises:
            IngestionError: If the file is missing, unreadable, or lacks
                required columns.
        """
        if not self.filepath.exists():
            raise IngestionError(f"Submission log not found: {self.filepath}")

        try:
            df = pd.read_csv(self.filepath, quotechar='"', dtype=str)
        except Exception as e:
            raise IngestionError(f"Failed to read {self.filepath}: {e}") from e

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise IngestionError(
                f"{self.filepath.name} is missing columns: {', '.join(missing)}"
            )

        for col in df.columns:
            if df[col].notna().any():
                df[col] = df[col].str.strip('"').str.strip()

        df = df[df["player"].notna() & (df["player"] != "")]
        df = df.reset_index(drop=True)

        for col in ("contribution", "demand"):
            if col in df.columns:
                df[col] = df[col].apply(_parse_numeric)

        logger.info("Loaded %d log rows from %s", len(df), self.filepath.name)
        return df

    def fetch(self, round_id: str) -> List[Submission]:
        """All submissions for ``round_id``, in arrival order."""
        df = self.read_log()

        mask = df["round"] == str(round_id)
        if "key" in df.columns:
            mask &= df["key"] == self.key
        rows = df.loc[mask]

        bad = rows["contribution"].isna()
        if bad.any():
            logger.warning(
                "Ignoring %d submissions with no numeric contribution in round %s: %s",
                bad.sum(),
                round_id,
                rows.loc[bad, "player"].tolist(),
            )
            rows = rows[~bad]

        has_demand = "demand" in rows.columns
        submissions = [
            Submission(
                player=row["player"],
                contribution=float(row["contribution"]),
                demand=self._demand(row) if has_demand else None,
            )
            for _, row in rows.iterrows()
        ]

        logger.info(
            "Round %s: %d submissions under key %r", round_id, len(submissions), self.key
        )
        return submissions

    @staticmethod
    def _demand(row: pd.Series) -> Optional[float]:
        value = row["demand"]
        if pd.isna(value):
            return None
        return float(value)
