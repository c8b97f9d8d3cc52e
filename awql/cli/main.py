"""Main CLI entry point for awql."""

import sys
from pathlib import Path
from typing import Optional

import typer

from awql import __version__
from awql.cli import config, query
from awql.cli.output import console, print_error
from awql.config import get_settings
from awql.exceptions import AwqlError
from awql.logging_config import setup_logging

app = typer.Typer(
    name="awql",
    help="awql - Query AdWords reports like a database",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"awql version: {__version__}")
        console.print(f"Default API version: {get_settings().default_api_version}")
        raise typer.Exit(0)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version information and exit",
        callback=version_callback,
        is_eager=True,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (default: ~/.awql/config.yaml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log requests and token refreshes at DEBUG level",
    ),
) -> None:
    """Run AWQL queries against the report download service."""
    if config_file is not None:
        get_settings(config_path=config_file, reload=True)

    setup_logging(verbose=verbose)


app.add_typer(query.app, name="query", help="Execute AWQL queries")
app.add_typer(config.app, name="config", help="Configuration management")


def main_cli() -> None:
    """Entry point for CLI application with error handling."""
    try:
        app()
    except AwqlError as e:
        print_error(e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        print_error("Interrupted")
        sys.exit(130)


if __name__ == "__main__":
    main_cli()
