"""Interface to the store holding transactions, records and matches."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Optional

from ..models.records import BankTransaction, Match, MatchableRecord, RecordKind


class MatchStore(ABC):
    """
    Abstract base class for match stores.

    Implementations raise StoreError for any load or insert failure.
    Nothing here is transactional: a load followed by an insert is not
    isolated from other writers.
    """

    @abstractmethod
    def load_transactions(
        self, group_id: Optional[str] = None
    ) -> list[BankTransaction]:
        """Load bank transactions, optionally only those of one group."""
        pass

    @abstractmethod
    def load_records(
        self, kinds: Optional[Iterable[RecordKind]] = None
    ) -> list[MatchableRecord]:
        """Load candidate records, optionally restricted to some kinds."""
        pass

    @abstractmethod
    def load_matches(self) -> list[Match]:
        """Load all committed transaction/record pairings."""
        pass

    @abstractmethod
    def insert_matches(self, matches: Sequence[Match]) -> None:
        """Insert the given pairings in one bulk write."""
        pass
