"""Match store backed by CSV/Excel exports and a matches CSV file."""

from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.records import (
    BankTransaction,
    Match,
    MatchableRecord,
    MatchStatus,
    RecordKind,
)
from ..parsers.record_parser import RecordParser
from ..parsers.transaction_parser import TransactionParser
from ..parsers.values import is_missing
from ..utils.exceptions import ReconciliationError, StoreError
from .base import MatchStore

logger = logging.getLogger(__name__)

MATCH_COLUMNS = ["transaction_id", "record_id", "status", "confidence", "reason"]


class CsvMatchStore(MatchStore):
    """
    File based store used by the command-line tool.

    Transactions and records are read from their exports on every load;
    matches live in a CSV file that confirmed pairs are appended to.
    """

    def __init__(
        self,
        transactions_path: Path,
        records_path: Path,
        matches_path: Path,
        config: Optional[ReconConfig] = None,
    ):
        """
        Initialize the store.

        Args:
            transactions_path: Bank transaction export (CSV or Excel)
            records_path: Record export (CSV or Excel)
            matches_path: Matches CSV (created on first insert)
            config: Application configuration
        """
        self.config = config or ReconConfig()
        self.transactions_path = transactions_path
        self.records_path = records_path
        self.matches_path = matches_path

    @classmethod
    def from_directory(
        cls, directory: Path, config: Optional[ReconConfig] = None
    ) -> "CsvMatchStore":
        """Store over transactions.csv, records.csv and matches.csv in a directory."""
        return cls(
            directory / "transactions.csv",
            directory / "records.csv",
            directory / "matches.csv",
            config=config,
        )

    def load_transactions(
        self, group_id: Optional[str] = None
    ) -> list[BankTransaction]:
        try:
            transactions = TransactionParser(self.config).parse_file(
                self.transactions_path
            )
        except ReconciliationError as e:
            raise StoreError(f"Failed to load transactions: {e}") from e

        if group_id is None:
            return transactions
        return [t for t in transactions if t.group_id == group_id]

    def load_records(
        self, kinds: Optional[Iterable[RecordKind]] = None
    ) -> list[MatchableRecord]:
        try:
            records = RecordParser(self.config).parse_file(self.records_path)
        except ReconciliationError as e:
            raise StoreError(f"Failed to load records: {e}") from e

        if kinds is None:
            return records
        wanted = set(kinds)
        return [r for r in records if r.kind in wanted]

    def load_matches(self) -> list[Match]:
        if not self.matches_path.exists():
            return []

        try:
            df = pd.read_csv(self.matches_path, dtype=str, encoding="utf-8")
        except (OSError, ValueError) as e:
            raise StoreError(f"Failed to load matches: {e}") from e

        missing = {"transaction_id", "record_id"} - set(df.columns)
        if missing:
            raise StoreError(
                f"Matches file {self.matches_path} lacks columns: {sorted(missing)}"
            )

        matches: list[Match] = []
        for idx, row in df.iterrows():
            if is_missing(row["transaction_id"]) or is_missing(row["record_id"]):
                logger.warning(f"Matches row {idx}: missing identifier, skipping")
                continue
            matches.append(self._row_to_match(row))
        return matches

    @staticmethod
    def _row_to_match(row: pd.Series) -> Match:
        status_value = row.get("status")
        try:
            status = MatchStatus(str(status_value).strip().lower())
        except ValueError:
            # Rows written by hand without a status count as confirmed
            status = MatchStatus.CONFIRMED

        confidence_value = row.get("confidence")
        try:
            confidence = 0.0 if is_missing(confidence_value) else float(confidence_value)
        except ValueError:
            confidence = 0.0

        reason_value = row.get("reason")
        return Match(
            transaction_id=str(row["transaction_id"]).strip(),
            record_id=str(row["record_id"]).strip(),
            status=status,
            confidence=confidence,
            reason="" if is_missing(reason_value) else str(reason_value),
        )

    def insert_matches(self, matches: Sequence[Match]) -> None:
        if not matches:
            return

        df = pd.DataFrame([m.to_row() for m in matches], columns=MATCH_COLUMNS)
        write_header = not self.matches_path.exists()

        try:
            self.matches_path.parent.mkdir(parents=True, exist_ok=True)
            df.to_csv(
                self.matches_path,
                mode="a",
                header=write_header,
                index=False,
                encoding="utf-8",
            )
        except OSError as e:
            raise StoreError(f"Failed to write matches: {e}") from e

        logger.info(f"Appended {len(matches)} matches to {self.matches_path}")
