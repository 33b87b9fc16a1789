"""Typer callbacks for CLI."""

import typer

from histofit.ui import VERSION, console


def version_callback(value: bool | None) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"[header]HistoFit[/header] v{VERSION}")
        raise typer.Exit
