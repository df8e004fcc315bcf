"""Parsers for bank transaction and record exports."""

from .transaction_parser import TransactionParser
from .record_parser import RecordParser
from .values import parse_amount, parse_date

__all__ = ["TransactionParser", "RecordParser", "parse_amount", "parse_date"]
