"""
Excel report generator for reconciliation results.
Creates multi-sheet workbooks with formatted output.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any, Optional
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import ReconConfig, SheetConfig
from ..matching.confidence import (
    classify_points,
    get_confidence_style,
)
from ..models.records import (
    BankTransaction,
    ConfidenceLevel,
    MatchableRecord,
    MatchDecision,
    MatchSuggestion,
    ReconcileResult,
)
from ..utils.exceptions import ReportGenerationError

logger = logging.getLogger(__name__)

# Style definitions
HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

DECISION_HEADERS = [
    "Transaction ID",
    "Transaction Date",
    "Transaction Amount",
    "Transaction Description",
    "Record ID",
    "Record Kind",
    "Record Date",
    "Record Amount",
    "Vendor / Client",
    "Confidence (pts)",
    "Reason",
]

REVIEW_HEADERS = [
    "Transaction ID",
    "Rank",
    "Record ID",
    "Record Kind",
    "Invoice Number",
    "Vendor / Client",
    "Record Amount",
    "Confidence",
    "Level",
    "Reasons",
]


def _level_fill(level: ConfidenceLevel) -> PatternFill:
    color = get_confidence_style(level).fill_color
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


class ExcelReportGenerator:
    """Generates Excel reconciliation reports with multiple sheets."""

    def __init__(self, config: Optional[ReconConfig] = None):
        """
        Initialize the report generator.

        Args:
            config: Application configuration
        """
        self.config = config or ReconConfig()
        self.sheet_config = self.config.output.sheets

    def generate_report(
        self,
        result: ReconcileResult,
        output_path: Path,
        transactions: Iterable[BankTransaction] = (),
        records: Iterable[MatchableRecord] = (),
        suggestions: Optional[dict[str, list[MatchSuggestion]]] = None,
    ) -> Path:
        """
        Generate the reconciliation report.

        Args:
            result: Batch reconciliation result
            output_path: Path for output file
            transactions: Transactions, used to fill in decision details
            records: Records, used to fill in decision details
            suggestions: Optional interactive suggestions per transaction

        Returns:
            Path to generated report

        Raises:
            ReportGenerationError: If the workbook cannot be written
        """
        logger.info(f"Generating Excel report: {output_path}")

        txn_by_id = {t.id: t for t in transactions}
        record_by_id = {r.id: r for r in records}

        wb = Workbook()
        if wb.active:
            wb.remove(wb.active)

        sheets = self.sheet_config
        if sheets.summary.enabled:
            self._create_summary_sheet(wb, sheets.summary, result)
        if sheets.confirmed.enabled:
            self._create_decision_sheet(
                wb, sheets.confirmed, result.confirmed, txn_by_id, record_by_id
            )
        if sheets.suggested.enabled:
            self._create_decision_sheet(
                wb, sheets.suggested, result.suggestions, txn_by_id, record_by_id
            )
        if sheets.review.enabled and suggestions:
            self._create_review_sheet(wb, sheets.review, suggestions)

        if not wb.sheetnames:
            # openpyxl refuses to save an empty workbook
            wb.create_sheet(sheets.summary.name)

        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            wb.save(output_path)
        except OSError as e:
            raise ReportGenerationError(f"Failed to save report {output_path}: {e}") from e

        logger.info(f"Report saved: {output_path}")
        return output_path

    def _create_summary_sheet(
        self, wb: Workbook, sheet: SheetConfig, result: ReconcileResult
    ) -> None:
        """Create the summary sheet with key metrics."""
        ws = wb.create_sheet(sheet.name)

        ws["A1"] = "Bank Reconciliation Summary"
        ws["A1"].font = Font(size=16, bold=True)
        ws.merge_cells("A1:D1")

        rows: list[tuple[str, Any]] = [
            ("Generated At:", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
            ("Config File:", self.config.config_file_path or "Default"),
            ("Dry Run:", "Yes" if result.dry_run else "No"),
            ("", ""),
            ("Transactions Processed:", result.total_processed),
            ("Matched (confirmed):", result.matched),
            ("Suggested (review):", result.suggested),
            ("Failed:", result.failed),
            ("Processing Time:", f"{result.processing_time_seconds:.2f} seconds"),
        ]
        if result.insert_error:
            rows.append(("Insert Error:", result.insert_error))

        for i, (label, value) in enumerate(rows, start=3):
            ws[f"A{i}"] = label
            ws[f"A{i}"].font = Font(bold=True)
            ws[f"B{i}"] = value

        ws.column_dimensions["A"].width = 30
        ws.column_dimensions["B"].width = 40

    def _create_decision_sheet(
        self,
        wb: Workbook,
        sheet: SheetConfig,
        decisions: Sequence[MatchDecision],
        txn_by_id: dict[str, BankTransaction],
        record_by_id: dict[str, MatchableRecord],
    ) -> None:
        """Create a sheet listing batch decisions."""
        ws = wb.create_sheet(sheet.name)
        self._write_headers(ws, DECISION_HEADERS)

        for row_num, decision in enumerate(decisions, start=2):
            txn = txn_by_id.get(decision.transaction_id)
            record = record_by_id.get(decision.record_id)

            row_data = [
                decision.transaction_id,
                txn.date if txn else "",
                float(txn.amount) if txn else "",
                txn.description if txn else "",
                decision.record_id,
                decision.record_kind.value,
                record.date if record and record.date else "",
                float(record.amount) if record and record.amount is not None else "",
                (record.vendor_or_client or "") if record else "",
                decision.confidence,
                decision.reason,
            ]

            fill = _level_fill(classify_points(decision.confidence))
            for col, value in enumerate(row_data, start=1):
                cell = ws.cell(row=row_num, column=col, value=value)
                cell.border = THIN_BORDER
                cell.fill = fill

        self._auto_fit_columns(ws)

    def _create_review_sheet(
        self,
        wb: Workbook,
        sheet: SheetConfig,
        suggestions: dict[str, list[MatchSuggestion]],
    ) -> None:
        """Create the sheet of ranked suggestions for manual review."""
        ws = wb.create_sheet(sheet.name)
        self._write_headers(ws, REVIEW_HEADERS)

        row_num = 2
        for txn_id, ranked in suggestions.items():
            for position, suggestion in enumerate(ranked, start=1):
                record = suggestion.record
                row_data = [
                    txn_id,
                    position,
                    suggestion.record_id,
                    suggestion.record_kind.value,
                    record.invoice_number or "",
                    record.vendor_or_client or "",
                    float(record.amount) if record.amount is not None else "",
                    f"{suggestion.confidence_percent}%",
                    get_confidence_style(suggestion.confidence_level).label,
                    "; ".join(suggestion.reasons),
                ]

                fill = _level_fill(suggestion.confidence_level)
                for col, value in enumerate(row_data, start=1):
                    cell = ws.cell(row=row_num, column=col, value=value)
                    cell.border = THIN_BORDER
                    cell.fill = fill
                row_num += 1

        self._auto_fit_columns(ws)

    @staticmethod
    def _write_headers(ws: Worksheet, headers: list[str]) -> None:
        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.fill = HEADER_FILL
            cell.font = HEADER_FONT
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal="center")
        ws.freeze_panes = "A2"

    def _auto_fit_columns(self, ws: Worksheet) -> None:
        """Auto-fit column widths based on content."""
        for column_cells in ws.columns:
            max_length = 0
            column = column_cells[0].column_letter

            for cell in column_cells:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))

            ws.column_dimensions[column].width = min(max_length + 2, 50)
