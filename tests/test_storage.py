"""Tests for the match stores."""

from decimal import Decimal

import pytest

from agency_recon.models.records import Match, MatchStatus, RecordKind
from agency_recon.storage import CsvMatchStore, InMemoryMatchStore
from agency_recon.utils.exceptions import StoreError

TRANSACTIONS_CSV = """id,transaction_date,description,amount,package_id
T1,01/03/2024,Hotel Grande Bretagne,-100.00,PKG-1
T2,02/03/2024,Client payment,250.00,PKG-2
"""

RECORDS_CSV = """id,type,amount,invoice_date,merchant
R1,expense,100.00,01/03/2024,Hotel Grande Bretagne
R2,income,250.00,02/03/2024,Acme Travel
R3,invoice,250.00,02/03/2024,Acme Travel
"""


@pytest.fixture
def store_dir(tmp_path):
    (tmp_path / "transactions.csv").write_text(TRANSACTIONS_CSV, encoding="utf-8")
    (tmp_path / "records.csv").write_text(RECORDS_CSV, encoding="utf-8")
    return tmp_path


class TestCsvMatchStore:
    def test_load_transactions(self, store_dir):
        store = CsvMatchStore.from_directory(store_dir)

        assert [t.id for t in store.load_transactions()] == ["T1", "T2"]
        assert [t.id for t in store.load_transactions("PKG-2")] == ["T2"]

    def test_load_records_by_kind(self, store_dir):
        store = CsvMatchStore.from_directory(store_dir)

        assert len(store.load_records()) == 3
        batch_records = store.load_records(kinds=(RecordKind.INCOME, RecordKind.EXPENSE))
        assert [r.id for r in batch_records] == ["R1", "R2"]
        assert batch_records[0].amount == Decimal("100.00")

    def test_missing_matches_file_is_empty(self, store_dir):
        assert CsvMatchStore.from_directory(store_dir).load_matches() == []

    def test_insert_then_load(self, store_dir):
        store = CsvMatchStore.from_directory(store_dir)

        store.insert_matches([Match("T1", "R1", confidence=90, reason="exact amount")])
        store.insert_matches([Match("T2", "R2", confidence=75)])

        lines = (store_dir / "matches.csv").read_text(encoding="utf-8").splitlines()
        assert lines[0] == "transaction_id,record_id,status,confidence,reason"
        assert len(lines) == 3

        matches = store.load_matches()
        assert [(m.transaction_id, m.record_id) for m in matches] == [
            ("T1", "R1"),
            ("T2", "R2"),
        ]
        assert matches[0].status == MatchStatus.CONFIRMED
        assert matches[0].confidence == 90.0
        assert matches[0].reason == "exact amount"
        assert matches[1].reason == ""

    def test_empty_insert_creates_nothing(self, store_dir):
        store = CsvMatchStore.from_directory(store_dir)

        store.insert_matches([])

        assert not (store_dir / "matches.csv").exists()

    def test_hand_written_matches(self, store_dir):
        (store_dir / "matches.csv").write_text(
            "transaction_id,record_id,status\nT1,R1,\nT2,R2,suggested\n,R3,confirmed\n",
            encoding="utf-8",
        )

        matches = CsvMatchStore.from_directory(store_dir).load_matches()

        assert [m.status for m in matches] == [
            MatchStatus.CONFIRMED,
            MatchStatus.SUGGESTED,
        ]

    def test_matches_without_id_columns(self, store_dir):
        (store_dir / "matches.csv").write_text("foo,bar\n1,2\n", encoding="utf-8")

        with pytest.raises(StoreError, match="lacks columns"):
            CsvMatchStore.from_directory(store_dir).load_matches()

    def test_unreadable_export_raises_store_error(self, tmp_path):
        store = CsvMatchStore.from_directory(tmp_path)

        with pytest.raises(StoreError, match="transactions"):
            store.load_transactions()
        with pytest.raises(StoreError, match="records"):
            store.load_records()


class TestInMemoryMatchStore:
    def test_filters(self, make_txn, make_record):
        store = InMemoryMatchStore(
            transactions=[make_txn("T1", group_id="A"), make_txn("T2")],
            records=[make_record("R1"), make_record("R2", kind=RecordKind.INVOICE)],
        )

        assert [t.id for t in store.load_transactions("A")] == ["T1"]
        assert [r.id for r in store.load_records([RecordKind.EXPENSE])] == ["R1"]

    def test_failure_switches(self):
        store = InMemoryMatchStore(fail_inserts=True, fail_loads=True)

        with pytest.raises(StoreError):
            store.load_matches()
        with pytest.raises(StoreError):
            store.insert_matches([Match("T1", "R1")])
        assert store.insert_calls == 1
        assert store.matches == []
