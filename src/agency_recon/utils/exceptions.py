"""Custom exceptions for the reconciliation engine."""


class ReconciliationError(Exception):
    """Base exception for reconciliation errors."""

    pass


class TransactionParseError(ReconciliationError):
    """Error reading a bank transaction export."""

    pass


class RecordParseError(ReconciliationError):
    """Error reading an invoice/income/expense record export."""

    pass


class ConfigurationError(ReconciliationError):
    """Error in configuration."""

    pass


class StoreError(ReconciliationError):
    """Error loading from or writing to the match store."""

    pass


class ReportGenerationError(ReconciliationError):
    """Error generating Excel report."""

    pass
