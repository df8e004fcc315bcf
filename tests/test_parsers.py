"""Tests for CSV/Excel parsing of transactions and records."""

from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest
from openpyxl import Workbook

from agency_recon.config import FileInputConfig, ReconConfig
from agency_recon.models.records import RecordKind
from agency_recon.parsers import RecordParser, TransactionParser
from agency_recon.parsers.base import TabularParser
from agency_recon.parsers.values import is_missing, parse_amount, parse_date, parse_text
from agency_recon.utils.exceptions import RecordParseError, TransactionParseError

TRANSACTIONS_CSV = """id,transaction_date,description,amount,bank_name,package_id
T1,15/03/2024,ΠΛΗΡΩΜΗ ΔΕΗ,"-1.234,56 €",Πειραιώς,PKG-7
T2,2024-03-16,Client deposit,2500.00,Alpha Bank,
T3,not a date,Card fee,-3.50,Alpha Bank,
T4,17/03/2024,No amount,,Alpha Bank,
,18/03/2024,Missing id,10,Eurobank,
"""

RECORDS_CSV = """id,type,amount,invoice_date,merchant,invoice_number,description,package_id
R1,expense,"1.234,56",14/03/2024,ΔΕΗ ΑΕ,INV-001,Ρεύμα Μαρτίου,PKG-7
R2,INCOME,2500,16/03/2024,Acme Travel,,,
R3,refund,10,16/03/2024,Unknown,,,
R4,invoice,,,Pending client,INV-009,,
"""


@pytest.fixture
def config():
    return ReconConfig()


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("1.234,56", Decimal("1234.56")),
            ("-1.234,56 €", Decimal("-1234.56")),
            ("12,5", Decimal("12.5")),
            ("12.50", Decimal("12.50")),
            ("$ 99", Decimal("99")),
            (42, Decimal("42")),
            (12.5, Decimal("12.5")),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", float("nan"), True])
    def test_invalid(self, raw):
        assert parse_amount(raw) is None


class TestParseDate:
    def test_day_first(self):
        assert parse_date("05/03/2024") == date(2024, 3, 5)
        assert parse_date("5.3.2024") == date(2024, 3, 5)

    def test_iso(self):
        assert parse_date("2024-03-05") == date(2024, 3, 5)
        assert parse_date("2024-03-05T10:30:00") == date(2024, 3, 5)

    def test_excel_serial(self):
        assert parse_date(45292) == date(2024, 1, 1)
        assert parse_date(45292.75) == date(2024, 1, 1)

    def test_date_objects(self):
        assert parse_date(datetime(2024, 3, 5, 9, 0)) == date(2024, 3, 5)
        assert parse_date(pd.Timestamp("2024-03-05")) == date(2024, 3, 5)
        assert parse_date(date(2024, 3, 5)) == date(2024, 3, 5)

    def test_explicit_format(self):
        assert parse_date("Mar 05 2024", date_format="%b %d %Y") == date(2024, 3, 5)

    @pytest.mark.parametrize("raw", [None, "", "31/02/2024", "yesterday", pd.NaT])
    def test_invalid(self, raw):
        assert parse_date(raw) is None


class TestCellHelpers:
    def test_is_missing(self):
        assert is_missing(None)
        assert is_missing("  ")
        assert is_missing(float("nan"))
        assert not is_missing(0)
        assert not is_missing("0")

    def test_parse_text(self):
        assert parse_text("  Acme  ") == "Acme"
        assert parse_text(None) is None


class TestTransactionParser:
    def test_parse_csv(self, tmp_path, config):
        path = tmp_path / "transactions.csv"
        path.write_text(TRANSACTIONS_CSV, encoding="utf-8")

        transactions = TransactionParser(config).parse_file(path)

        assert [t.id for t in transactions] == ["T1", "T2", "T3", "TXN-00004"]

        t1 = transactions[0]
        assert t1.amount == Decimal("-1234.56")
        assert t1.date == date(2024, 3, 15)
        assert t1.description == "ΠΛΗΡΩΜΗ ΔΕΗ"
        assert t1.bank_name == "Πειραιώς"
        assert t1.group_id == "PKG-7"
        assert t1.direction == "out"

        assert transactions[1].direction == "in"
        assert transactions[1].group_id is None
        # Unparseable date is kept as missing
        assert transactions[2].date is None

    def test_custom_mapping_and_delimiter(self, tmp_path, config):
        config.input.transactions.delimiter = ";"
        config.input.transactions.column_mappings = {
            "id": "Κωδικός",
            "date": "Ημερομηνία",
            "description": "Αιτιολογία",
            "amount": "Ποσό",
        }
        path = tmp_path / "transactions.csv"
        path.write_text(
            "Κωδικός;Ημερομηνία;Αιτιολογία;Ποσό\nA1;01/02/2024;Εξόφληση;1.000,00\n",
            encoding="utf-8",
        )

        [txn] = TransactionParser(config).parse_file(path)

        assert txn.id == "A1"
        assert txn.amount == Decimal("1000.00")
        assert txn.date == date(2024, 2, 1)

    def test_configured_date_format(self, tmp_path, config):
        config.input.transactions.date_format = "%m/%d/%Y"
        path = tmp_path / "transactions.csv"
        path.write_text(
            "id,transaction_date,amount\nUS1,03/05/2024,-20\nUS2,2024-03-06,-30\n",
            encoding="utf-8",
        )

        transactions = TransactionParser(config).parse_file(path)

        # Month first as configured; ISO dates still parse
        assert [t.date for t in transactions] == [date(2024, 3, 5), date(2024, 3, 6)]

    def test_parse_xlsx(self, tmp_path, config):
        path = tmp_path / "transactions.xlsx"
        wb = Workbook()
        ws = wb.active
        ws.append(["id", "transaction_date", "description", "amount"])
        ws.append([1001, 45292, "Serial date", -75.5])
        ws.append([1002, datetime(2024, 1, 2), "Native date", 20])
        wb.save(path)

        transactions = TransactionParser(config).parse_file(path)

        assert [t.id for t in transactions] == ["1001", "1002"]
        assert transactions[0].date == date(2024, 1, 1)
        assert transactions[0].amount == Decimal("-75.5")
        assert transactions[1].date == date(2024, 1, 2)

    def test_missing_file(self, tmp_path, config):
        with pytest.raises(TransactionParseError):
            TransactionParser(config).parse_file(tmp_path / "absent.csv")


class TestRecordParser:
    def test_configured_date_format(self, tmp_path, config):
        config.input.records.date_format = "%Y%m%d"
        path = tmp_path / "records.csv"
        path.write_text(
            "id,type,amount,invoice_date\nR1,expense,10,20240305\n", encoding="utf-8"
        )

        [record] = RecordParser(config).parse_file(path)

        assert record.date == date(2024, 3, 5)

    def test_parse_csv(self, tmp_path, config):
        path = tmp_path / "records.csv"
        path.write_text(RECORDS_CSV, encoding="utf-8")

        records = RecordParser(config).parse_file(path)

        # R3 has an unknown kind
        assert [r.id for r in records] == ["R1", "R2", "R4"]

        r1 = records[0]
        assert r1.kind == RecordKind.EXPENSE
        assert r1.amount == Decimal("1234.56")
        assert r1.date == date(2024, 3, 14)
        assert r1.vendor_or_client == "ΔΕΗ ΑΕ"
        assert r1.invoice_number == "INV-001"
        assert r1.match_text == "ΔΕΗ ΑΕ Ρεύμα Μαρτίου"

        assert records[1].kind == RecordKind.INCOME
        assert records[1].vendor_or_client == "Acme Travel"

        r4 = records[2]
        assert r4.kind == RecordKind.INVOICE
        assert r4.amount is None
        assert r4.date is None

    def test_missing_file(self, tmp_path, config):
        with pytest.raises(RecordParseError):
            RecordParser(config).parse_file(tmp_path / "absent.csv")


def test_tabular_parser_is_abstract():
    with pytest.raises(TypeError):
        TabularParser(FileInputConfig())
