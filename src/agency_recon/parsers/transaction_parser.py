"""Bank transaction export parser."""

from typing import Optional
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.records import BankTransaction
from ..utils.exceptions import TransactionParseError
from .base import TabularParser
from .values import parse_amount, parse_date, parse_text

logger = logging.getLogger(__name__)


class TransactionParser(TabularParser):
    """
    Parser for bank transaction exports (CSV or Excel).

    Amounts are signed: positive for money in, negative for money out.
    """

    error_class = TransactionParseError
    entity_name = "transaction"

    def __init__(self, config: ReconConfig):
        super().__init__(config.input.transactions)

    def _normalize_row(self, row: pd.Series, idx: int) -> Optional[BankTransaction]:
        amount = parse_amount(self._cell(row, "amount"))
        if amount is None:
            logger.warning(f"Row {idx}: No valid amount found, skipping")
            return None

        txn_date = parse_date(self._cell(row, "date"), self.input_config.date_format)
        if txn_date is None:
            # Kept: the date dimension simply scores 0
            logger.warning(f"Row {idx}: Invalid or missing date")

        txn_id = self._identifier(self._cell(row, "id")) or f"TXN-{idx:05d}"

        return BankTransaction(
            id=txn_id,
            amount=amount,
            date=txn_date,
            description=parse_text(self._cell(row, "description")) or "",
            bank_name=parse_text(self._cell(row, "bank_name")),
            group_id=self._identifier(self._cell(row, "group_id")),
            raw_data=row.to_dict(),
        )
