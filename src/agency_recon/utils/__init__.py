"""Utility modules."""

from .exceptions import (
    ReconciliationError,
    TransactionParseError,
    RecordParseError,
    ConfigurationError,
    StoreError,
    ReportGenerationError,
)
from .logging_config import setup_logging, get_logger

__all__ = [
    "ReconciliationError",
    "TransactionParseError",
    "RecordParseError",
    "ConfigurationError",
    "StoreError",
    "ReportGenerationError",
    "setup_logging",
    "get_logger",
]
