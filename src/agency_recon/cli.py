"""
Command-line interface for the agency reconciliation tool.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import load_config, generate_default_config, ReconConfig
from .matching.confidence import classify_points, get_confidence_style
from .matching.engine import ReconciliationEngine
from .matching.ranker import SuggestionRanker
from .models.records import MatchSuggestion, ReconcileResult
from .reports.excel_generator import ExcelReportGenerator
from .storage.csv_store import CsvMatchStore
from .utils.logging_config import setup_logging

console = Console()


def _setup(config: Optional[Path], verbose: bool) -> ReconConfig:
    """Load configuration and configure logging from it."""
    recon_config = load_config(config)
    level = logging.DEBUG if verbose else recon_config.logging.level
    log_file = Path(recon_config.logging.file) if recon_config.logging.file else None
    setup_logging(level, log_file=log_file, log_format=recon_config.logging.format)
    return recon_config


@click.group()
@click.version_option(version=__version__)
def main():
    """Bank transaction to invoice/income/expense reconciliation tool."""
    pass


@main.command()
@click.argument("transactions_file", type=click.Path(exists=True, path_type=Path))
@click.argument("records_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-m",
    "--matches",
    "matches_file",
    type=click.Path(path_type=Path),
    help="Matches CSV (default: matches.csv beside the transactions file)",
)
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option(
    "--min-confidence",
    type=click.IntRange(0, 100),
    default=None,
    help="Points needed to auto-confirm a match (0-100)",
)
@click.option("--group", "group_id", default=None, help="Only reconcile this group/package")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel report path")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("--dry-run", is_flag=True, help="Compute matches without writing them")
def reconcile(
    transactions_file: Path,
    records_file: Path,
    matches_file: Optional[Path],
    config: Optional[Path],
    min_confidence: Optional[int],
    group_id: Optional[str],
    output: Optional[Path],
    verbose: bool,
    dry_run: bool,
):
    """
    Automatically match unmatched transactions to records.

    TRANSACTIONS_FILE: Bank transaction export (CSV or Excel)
    RECORDS_FILE: Invoice/income/expense export (CSV or Excel)
    """
    try:
        recon_config = _setup(config, verbose)

        if matches_file is None:
            matches_file = transactions_file.parent / "matches.csv"

        store = CsvMatchStore(
            transactions_file, records_file, matches_file, config=recon_config
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task("Running reconciliation...", total=None)
            engine = ReconciliationEngine(recon_config, store=store)
            result = engine.run(
                min_confidence=min_confidence,
                dry_run=dry_run or recon_config.batch.dry_run,
                group_id=group_id,
            )
            progress.update(task, completed=True)

        _display_result(result)

        if result.dry_run:
            console.print("\n[yellow]Dry run - no matches written[/yellow]")
        elif result.insert_error:
            console.print(
                f"\n[red]Failed to save matches: {escape(result.insert_error)}[/red]"
            )
        elif result.matched:
            console.print(f"\n[green]Matches written to {matches_file}[/green]")

        if output is not None:
            report_path = ExcelReportGenerator(recon_config).generate_report(
                result,
                output,
                transactions=store.load_transactions(group_id),
                records=store.load_records(),
            )
            console.print(f"[green]Report generated: {report_path}[/green]")

        if result.insert_error:
            sys.exit(1)

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command()
@click.argument("transactions_file", type=click.Path(exists=True, path_type=Path))
@click.argument("records_file", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-n",
    "--max-suggestions",
    type=click.IntRange(min=1),
    default=None,
    help="Suggestions shown per transaction",
)
@click.option(
    "-t", "--transaction", "transaction_id", default=None, help="Only this transaction"
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Output Excel report path")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def suggest(
    transactions_file: Path,
    records_file: Path,
    config: Optional[Path],
    max_suggestions: Optional[int],
    transaction_id: Optional[str],
    output: Optional[Path],
    verbose: bool,
):
    """
    Rank candidate records for each transaction for manual review.

    TRANSACTIONS_FILE: Bank transaction export (CSV or Excel)
    RECORDS_FILE: Invoice/income/expense export (CSV or Excel)
    """
    try:
        recon_config = _setup(config, verbose)
        if max_suggestions is not None:
            recon_config.suggestions.max_suggestions = max_suggestions

        store = CsvMatchStore(
            transactions_file,
            records_file,
            transactions_file.parent / "matches.csv",
            config=recon_config,
        )
        transactions = store.load_transactions()
        records = store.load_records()
        matched_ids = {m.transaction_id for m in store.load_matches() if m.is_confirmed}

        if transaction_id is not None:
            transactions = [t for t in transactions if t.id == transaction_id]
            if not transactions:
                console.print(f"[red]Transaction not found: {escape(transaction_id)}[/red]")
                sys.exit(1)

        ranker = SuggestionRanker(recon_config.suggestions)
        suggestions = ranker.suggest_all(transactions, records, matched_ids=matched_ids)
        txn_by_id = {t.id: t for t in transactions}

        for txn_id, ranked in suggestions.items():
            _display_suggestions(txn_by_id[txn_id], ranked)

        stats = ranker.stats(suggestions)
        console.print(
            f"\n{stats.total} of {len(suggestions)} transactions have suggestions: "
            f"[green]{stats.high} high[/green], "
            f"[yellow]{stats.medium} medium[/yellow], "
            f"[dark_orange]{stats.low} low[/dark_orange]"
        )

        if output is not None:
            report_path = ExcelReportGenerator(recon_config).generate_report(
                ReconcileResult(dry_run=True),
                output,
                suggestions=suggestions,
            )
            console.print(f"[green]Report generated: {report_path}[/green]")

    except Exception as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        if verbose:
            console.print_exception()
        sys.exit(1)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _display_result(result: ReconcileResult) -> None:
    """Display batch reconciliation counts and decisions."""
    table = Table(title="Reconciliation Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Transactions Processed", str(result.total_processed))
    table.add_row("Matched", str(result.matched))
    table.add_row("Suggested", str(result.suggested))
    table.add_row("Failed", str(result.failed))
    table.add_row("Processing Time", f"{result.processing_time_seconds:.2f}s")
    console.print(table)

    if not result.matches:
        return

    decisions = Table(title="Match Decisions")
    decisions.add_column("Transaction")
    decisions.add_column("Record")
    decisions.add_column("Status")
    decisions.add_column("Points", justify="right")
    decisions.add_column("Reason")

    for decision in result.matches:
        style = get_confidence_style(classify_points(decision.confidence))
        decisions.add_row(
            decision.transaction_id,
            decision.record_id,
            decision.status.value,
            f"[{style.color}]{decision.confidence:.0f}[/{style.color}]",
            escape(decision.reason),
        )
    console.print(decisions)


def _display_suggestions(txn, suggestions: list[MatchSuggestion]) -> None:
    """Display ranked suggestions for one transaction."""
    title = (
        f"{txn.id}  {txn.date or '-'}  {txn.amount:,.2f}  "
        f"{escape(txn.description[:40])}"
    )
    if not suggestions:
        console.print(f"[dim]{title}: no suggestions[/dim]")
        return

    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Record")
    table.add_column("Kind")
    table.add_column("Vendor / Client")
    table.add_column("Amount", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Reasons")

    for position, suggestion in enumerate(suggestions, start=1):
        record = suggestion.record
        style = get_confidence_style(suggestion.confidence_level)
        table.add_row(
            str(position),
            suggestion.record_id,
            suggestion.record_kind.value,
            escape(record.vendor_or_client or "-"),
            f"{abs(record.amount):,.2f}" if record.amount is not None else "-",
            f"[{style.color}]{suggestion.confidence_percent}% {style.label}[/{style.color}]",
            escape(", ".join(suggestion.reasons)),
        )

    console.print(table)


if __name__ == "__main__":
    main()
