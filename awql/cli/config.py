"""Configuration management CLI commands."""

import typer
import yaml

from awql.cli.output import console, print_error, print_table
from awql.config import get_settings

app = typer.Typer(help="Configuration management")


@app.command("show")
def show_config(
    format: str = typer.Option(
        "table",
        "--format",
        "-f",
        help="Output format: table, yaml",
    ),
) -> None:
    """Show the effective configuration (defaults, config.yaml, environment)."""
    settings = get_settings()
    data = {key: str(value) for key, value in settings.model_dump().items()}

    if format == "yaml":
        console.print(yaml.safe_dump(data, sort_keys=True), end="", markup=False)
    elif format == "table":
        rows = [[key, value] for key, value in sorted(data.items())]
        print_table(rows, ["Setting", "Value"], title="awql configuration")
    else:
        print_error(f"Invalid format: {format}")
        raise typer.Exit(1)
