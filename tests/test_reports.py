"""Tests for the Excel report generator."""

from datetime import date

from openpyxl import load_workbook

from agency_recon.config import ReconConfig
from agency_recon.matching.engine import ReconciliationEngine
from agency_recon.matching.ranker import SuggestionRanker
from agency_recon.models.records import ReconcileResult
from agency_recon.reports.excel_generator import (
    DECISION_HEADERS,
    REVIEW_HEADERS,
    ExcelReportGenerator,
)


def _batch_result(make_txn, make_record):
    transactions = [
        make_txn("T1", description="Aegean Airlines"),
        make_txn("T2", on=date(2024, 1, 30)),
    ]
    records = [
        make_record("R1", vendor="Aegean Airlines"),
        make_record("R2", on=date(2024, 1, 12)),
    ]
    result = ReconciliationEngine().reconcile(transactions, records, dry_run=True)
    return result, transactions, records


class TestExcelReportGenerator:
    def test_batch_report_sheets(self, tmp_path, make_txn, make_record):
        result, transactions, records = _batch_result(make_txn, make_record)
        output = tmp_path / "out" / "report.xlsx"

        path = ExcelReportGenerator().generate_report(
            result, output, transactions=transactions, records=records
        )

        assert path == output
        wb = load_workbook(path)
        assert wb.sheetnames == ["Summary", "Confirmed Matches", "Suggested Matches"]

        confirmed = wb["Confirmed Matches"]
        assert [c.value for c in confirmed[1]] == DECISION_HEADERS
        row = [c.value for c in confirmed[2]]
        assert row[0] == "T1"
        assert row[4] == "R1"
        assert row[5] == "expense"
        assert row[8] == "Aegean Airlines"
        assert row[9] == 90
        assert confirmed.max_row == 2

        suggested = wb["Suggested Matches"]
        assert suggested["A2"].value == "T2"
        assert suggested["K2"].value.endswith("(low confidence)")

        summary = wb["Summary"]
        labels = {summary[f"A{i}"].value: summary[f"B{i}"].value for i in range(3, 12)}
        assert labels["Transactions Processed:"] == 2
        assert labels["Matched (confirmed):"] == 1
        assert labels["Dry Run:"] == "Yes"

    def test_review_sheet(self, tmp_path, make_txn, make_record):
        txn = make_txn()
        records = [make_record("R1"), make_record("R2", amount="51.00")]
        ranker = SuggestionRanker(ReconConfig().suggestions)
        suggestions = ranker.suggest_all([txn], records)

        path = ExcelReportGenerator().generate_report(
            ReconcileResult(dry_run=True), tmp_path / "review.xlsx", suggestions=suggestions
        )

        ws = load_workbook(path)["Review Suggestions"]
        assert [c.value for c in ws[1]] == REVIEW_HEADERS
        assert [ws[f"C{i}"].value for i in (2, 3)] == ["R1", "R2"]
        assert ws["B2"].value == 1
        assert ws["H2"].value == "100%"
        assert ws["I2"].value == "High"

    def test_disabled_sheets(self, tmp_path, make_txn, make_record):
        result, transactions, records = _batch_result(make_txn, make_record)
        config = ReconConfig()
        config.output.sheets.confirmed.enabled = False
        config.output.sheets.suggested.enabled = False

        path = ExcelReportGenerator(config).generate_report(
            result, tmp_path / "report.xlsx"
        )

        assert load_workbook(path).sheetnames == ["Summary"]
