"""Main Typer application for HistoFit.

This module creates the Typer application and registers the commands
from the commands/ subpackage.
"""

from typing import Annotated

import typer

from histofit.cli.callbacks import version_callback
from histofit.cli.commands import fill_command, fit_command, init_command

app = typer.Typer(
    name="histofit",
    help="HistoFit - Concurrent histogramming and multi-peak fitting",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """HistoFit - Fill histograms from tabular data and fit their peaks."""


app.command(name="init")(init_command)
app.command(name="fill")(fill_command)
app.command(name="fit")(fit_command)
