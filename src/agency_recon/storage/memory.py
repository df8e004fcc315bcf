"""In-memory match store."""

from collections.abc import Iterable, Sequence
from typing import Optional
import logging

from ..models.records import BankTransaction, Match, MatchableRecord, RecordKind
from ..utils.exceptions import StoreError
from .base import MatchStore

logger = logging.getLogger(__name__)


class InMemoryMatchStore(MatchStore):
    """
    Match store backed by plain lists.

    Useful for tests and for callers that already hold their data in
    memory. ``fail_inserts`` and ``fail_loads`` make the store raise
    StoreError to exercise failure handling.
    """

    def __init__(
        self,
        transactions: Optional[Iterable[BankTransaction]] = None,
        records: Optional[Iterable[MatchableRecord]] = None,
        matches: Optional[Iterable[Match]] = None,
        fail_inserts: bool = False,
        fail_loads: bool = False,
    ):
        self.transactions = list(transactions or [])
        self.records = list(records or [])
        self.matches = list(matches or [])
        self.fail_inserts = fail_inserts
        self.fail_loads = fail_loads
        self.insert_calls = 0

    def _check_load(self, what: str) -> None:
        if self.fail_loads:
            raise StoreError(f"Failed to load {what}")

    def load_transactions(
        self, group_id: Optional[str] = None
    ) -> list[BankTransaction]:
        self._check_load("transactions")
        if group_id is None:
            return list(self.transactions)
        return [t for t in self.transactions if t.group_id == group_id]

    def load_records(
        self, kinds: Optional[Iterable[RecordKind]] = None
    ) -> list[MatchableRecord]:
        self._check_load("records")
        if kinds is None:
            return list(self.records)
        wanted = set(kinds)
        return [r for r in self.records if r.kind in wanted]

    def load_matches(self) -> list[Match]:
        self._check_load("matches")
        return list(self.matches)

    def insert_matches(self, matches: Sequence[Match]) -> None:
        self.insert_calls += 1
        if self.fail_inserts:
            raise StoreError(f"Failed to insert {len(matches)} matches")
        self.matches.extend(matches)
        logger.debug(f"Inserted {len(matches)} matches")
