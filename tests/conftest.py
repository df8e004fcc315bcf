"""Shared fixtures: factories for transactions and records."""

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from agency_recon.models.records import BankTransaction, MatchableRecord, RecordKind


@pytest.fixture
def make_txn():
    def _make(
        txn_id: str = "T1",
        amount: str = "-50.00",
        on: Optional[date] = date(2024, 1, 10),
        description: str = "",
        group_id: Optional[str] = None,
    ) -> BankTransaction:
        return BankTransaction(
            id=txn_id,
            amount=Decimal(amount),
            date=on,
            description=description,
            group_id=group_id,
        )

    return _make


@pytest.fixture
def make_record():
    def _make(
        record_id: str = "R1",
        kind: RecordKind = RecordKind.EXPENSE,
        amount: Optional[str] = "50.00",
        on: Optional[date] = date(2024, 1, 10),
        vendor: Optional[str] = None,
        description: Optional[str] = None,
        group_id: Optional[str] = None,
        invoice_number: Optional[str] = None,
    ) -> MatchableRecord:
        return MatchableRecord(
            id=record_id,
            kind=kind,
            amount=Decimal(amount) if amount is not None else None,
            date=on,
            vendor_or_client=vendor,
            invoice_number=invoice_number,
            description=description,
            group_id=group_id,
        )

    return _make
