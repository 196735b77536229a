"""Main CLI entry point."""

import logging
import sys
from typing import NoReturn, Optional

import structlog
import typer
from rich.console import Console
from rich.table import Table

from db.enums import DEFAULT_FIELDS, ExportField, NamedPeriod, PaymentStatus

app = typer.Typer(
    name="payexport",
    help="Payment data export tool",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    from config import get_settings

    settings = get_settings()
    if verbose or settings.debug:
        level = logging.DEBUG
    else:
        level = getattr(logging, settings.log_level.upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def _fail(message: str) -> NoReturn:
    err_console.print(f"Error: {message}", style="red", markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Log pipeline stages to stderr"),
):
    """Export payment records as a table, CSV or JSON."""
    _configure_logging(verbose)


@app.command("init-db")
def init_db(
    force: bool = typer.Option(False, "--force", "-f", help="Drop and recreate tables"),
):
    """Initialize the payment tables."""
    from db.connection import get_engine
    from db.models import Base

    engine = get_engine()
    with console.status("Initializing database..."):
        if force:
            Base.metadata.drop_all(engine)
            console.print("[yellow]Dropped existing tables[/yellow]")
        Base.metadata.create_all(engine)

    console.print("[green]Database initialized successfully[/green]")


@app.command("export-payments")
def export_payments(
    start_date: Optional[str] = typer.Option(None, "--start-date", help="Start date (YYYY-MM-DD), inclusive"),
    end_date: Optional[str] = typer.Option(None, "--end-date", help="End date (YYYY-MM-DD), inclusive"),
    last_days: Optional[str] = typer.Option(
        None, "--last-days", help="Number of days back from today, or a named period (e.g. last_month)"
    ),
    format: Optional[str] = typer.Option(None, "--format", help="Output format: csv or json (default: csv)"),
    fields: Optional[str] = typer.Option(
        None, "--fields", help="Comma-separated fields (default: id,customer-id,date,status,amount,gateway)"
    ),
    output: Optional[str] = typer.Option(None, "--output", help="Destination: shell or file (default: shell)"),
    file: Optional[str] = typer.Option(None, "--file", help="Output file path; required when --output=file"),
    amount_filter: Optional[str] = typer.Option(
        None, "--amount-filter", help="Amount comparison, e.g. '> $1.00' or '< $100'"
    ),
    status_filter: Optional[str] = typer.Option(
        None, "--status-filter", help="Comma-separated statuses, e.g. complete,refunded"
    ),
    customer_filter: Optional[str] = typer.Option(None, "--customer-filter", help="Customer email or ID"),
    product_filter: Optional[str] = typer.Option(
        None, "--product-filter", help="Comma-separated product / price IDs"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Create folders and overwrite files without asking"),
):
    """Export payment data matching the given filters."""
    from config import get_settings
    from payexport.services import (
        ExportPipeline,
        Exporter,
        PaymentExportError,
        RawExportArgs,
        SqlPaymentStore,
    )
    from payexport.services.export import assume_yes, deny, interactive_confirm, summary_line

    settings = get_settings()

    if yes:
        confirm = assume_yes
    elif sys.stdin.isatty():
        confirm = interactive_confirm
    else:
        confirm = deny

    raw = RawExportArgs(
        start_date=start_date,
        end_date=end_date,
        last_days=last_days,
        format=format,
        fields=fields,
        output=output,
        file=file,
        amount_filter=amount_filter,
        status_filter=status_filter,
        customer_filter=customer_filter,
        product_filter=product_filter,
    )
    exporter = Exporter(console=console, confirm=confirm, json_indent=settings.json_indent)

    pipeline = ExportPipeline(SqlPaymentStore(), exporter, min_date=settings.min_export_date)
    try:
        result = pipeline.run(raw)
    except PaymentExportError as exc:
        _fail(str(exc))

    if result.output_path is not None:
        console.print(f"Exported to: {result.output_path}", style="green", markup=False, soft_wrap=True)
    console.print(summary_line(result.row_count), highlight=False)


@app.command("list-statuses")
def list_statuses():
    """List the payment statuses accepted by --status-filter."""
    table = Table(title="Payment Statuses")
    table.add_column("Status", style="cyan")
    for status in PaymentStatus:
        table.add_row(status.value)
    console.print(table)


@app.command("list-fields")
def list_fields():
    """List exportable fields in column order."""
    table = Table(title="Export Fields")
    table.add_column("Field", style="cyan")
    table.add_column("Default", justify="center")
    for f in ExportField:
        table.add_row(f.value, "Yes" if f in DEFAULT_FIELDS else "No")
    console.print(table)

    periods = ", ".join(p.value for p in NamedPeriod)
    console.print(f"\n[bold]Named periods for --last-days:[/bold] {periods}")


if __name__ == "__main__":
    app()
