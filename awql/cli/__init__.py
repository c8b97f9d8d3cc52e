"""CLI module for awql."""

from awql.cli.main import app, main_cli

__all__ = ["app", "main_cli"]
