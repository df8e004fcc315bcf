"""Bank transaction to invoice/income/expense reconciliation."""

__version__ = "0.1.0"
