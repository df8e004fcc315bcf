"""Match store interface and implementations."""

from .base import MatchStore
from .memory import InMemoryMatchStore
from .csv_store import CsvMatchStore

__all__ = ["MatchStore", "InMemoryMatchStore", "CsvMatchStore"]
