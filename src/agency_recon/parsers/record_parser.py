"""Invoice / income / expense record export parser."""

from typing import Optional
import logging

import pandas as pd

from ..config import ReconConfig
from ..models.records import MatchableRecord, RecordKind
from ..utils.exceptions import RecordParseError
from .base import TabularParser
from .values import parse_amount, parse_date, parse_text

logger = logging.getLogger(__name__)


class RecordParser(TabularParser):
    """
    Parser for matchable record exports (CSV or Excel).

    Rows with an unknown kind are skipped. A missing amount is kept: such
    records are loaded but never suggested.
    """

    error_class = RecordParseError
    entity_name = "record"

    def __init__(self, config: ReconConfig):
        super().__init__(config.input.records)

    def _normalize_row(self, row: pd.Series, idx: int) -> Optional[MatchableRecord]:
        kind = RecordKind.parse(self._cell(row, "kind"))
        if kind is None:
            logger.warning(f"Row {idx}: Unknown record kind, skipping")
            return None

        record_id = self._identifier(self._cell(row, "id")) or f"REC-{idx:05d}"

        return MatchableRecord(
            id=record_id,
            kind=kind,
            amount=parse_amount(self._cell(row, "amount")),
            date=parse_date(self._cell(row, "date"), self.input_config.date_format),
            vendor_or_client=parse_text(self._cell(row, "vendor_or_client")),
            invoice_number=parse_text(self._cell(row, "invoice_number")),
            description=parse_text(self._cell(row, "description")),
            group_id=self._identifier(self._cell(row, "group_id")),
            raw_data=row.to_dict(),
        )
