"""Report rendering for the CLI."""

import csv
import json
from io import StringIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

OUTPUT_FORMATS = ("table", "json", "csv")

console = Console()
console_err = Console(stderr=True)


def print_table(rows: list[list[str]], columns: list[str], title: str | None = None) -> None:
    """
    Print report rows as a Rich table.

    A header-only report still prints its column names.

    Args:
        rows: Report rows, one list of cells per row
        columns: Column names
        title: Optional table title
    """
    if not columns:
        console.print("[yellow]Empty report[/yellow]")
        return

    table = Table(title=title, show_header=True, header_style="bold cyan")
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*row)

    console.print(table)


def print_json(rows: list[list[str]], columns: list[str]) -> None:
    """Print report rows as a JSON array of objects keyed by column name."""
    records = [dict(zip(columns, row)) for row in rows]
    console.print_json(json.dumps(records, ensure_ascii=False))


def print_csv(rows: list[list[str]], columns: list[str]) -> None:
    """Print report rows as CSV, header first."""
    output = StringIO()
    writer = csv.writer(output, lineterminator="\n")
    if columns:
        writer.writerow(columns)
    writer.writerows(rows)

    console.print(output.getvalue(), end="", markup=False, highlight=False)


def print_report(rows: list[list[str]], columns: list[str], output_format: str) -> None:
    """Dispatch to the printer of one of OUTPUT_FORMATS."""
    if output_format == "json":
        print_json(rows, columns)
    elif output_format == "csv":
        print_csv(rows, columns)
    else:
        print_table(rows, columns)


def print_error(message: str) -> None:
    """Print error message with X mark."""
    console_err.print(f"[red]✗[/red] {escape(message)}", highlight=False)


def print_info(message: str) -> None:
    """Print info message with info symbol."""
    console_err.print(f"[blue]ℹ[/blue] {message}")
