"""Query execution commands for awql."""

import time
from pathlib import Path
from typing import List, Optional

import typer

from awql.cli.output import OUTPUT_FORMATS, print_error, print_info, print_report
from awql.connection import connect
from awql.exceptions import ApiError, AwqlError
from awql.logging_config import get_logger

app = typer.Typer(help="Execute AWQL queries")
logger = get_logger(__name__)


def coerce_param(value: str) -> bool | int | float | str:
    """Turn a command line value into the type it spells."""
    if value.upper() in ("TRUE", "FALSE"):
        return value.upper() == "TRUE"
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value


@app.command()
def execute(
    dsn: str = typer.Option(
        ...,
        "--dsn",
        "-d",
        envvar="AWQL_DSN",
        help="Connection string: account[:version]|developerToken[|accessToken]",
    ),
    query: Optional[str] = typer.Option(None, "--query", "-e", help="AWQL query string"),
    file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="AWQL file path",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    params: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Value bound to the next ? placeholder"
    ),
    output_format: str = typer.Option(
        "table", "--output", "-o", help="Output format: table, json, csv"
    ),
    zero_impressions: bool = typer.Option(
        False, "--zero-impressions", help="Include rows with zero impressions"
    ),
    raw_enums: bool = typer.Option(False, "--raw-enums", help="Use raw enum values"),
) -> None:
    """
    Execute an AWQL query and print the report.

    Examples:
        awql query execute --dsn "123-456-7890|devToken|accessToken" \\
            --query "SELECT CampaignName, Clicks FROM CAMPAIGN_PERFORMANCE_REPORT"

        awql query execute --file report.awql --param 100 --output csv
    """
    if not query and not file:
        print_error("Provide the query via --query or --file")
        raise typer.Exit(1)

    if query and file:
        print_error("Provide either --query or --file, not both")
        raise typer.Exit(1)

    query_text = file.read_text().strip() if file else query.strip()
    if not query_text:
        print_error("Query cannot be empty")
        raise typer.Exit(1)

    if output_format not in OUTPUT_FORMATS:
        print_error(f"Invalid output format: {output_format}")
        print_info(f"Valid formats: {', '.join(OUTPUT_FORMATS)}")
        raise typer.Exit(1)

    start_time = time.time()
    try:
        with connect(
            dsn,
            include_zero_impressions=zero_impressions,
            use_raw_enum_values=raw_enums,
        ) as conn:
            args = [coerce_param(value) for value in params or []]
            rows = conn.prepare(query_text).execute(*args)
            columns = rows.columns
            data = list(rows)
            rows.close()
    except ApiError as e:
        print_error(f"API error {e.reason}: {e.detail}")
        raise typer.Exit(1)
    except AwqlError as e:
        logger.debug("Query failed", query=query_text, **e.to_dict())
        print_error(f"Query failed: {e.message}")
        raise typer.Exit(1)

    print_report(data, columns, output_format)

    print_info(f"Rows: {len(data):,} | Time: {time.time() - start_time:.3f}s")
