"""CLI command modules for HistoFit.

Each module exports a command function carrying its Typer annotations;
app.py imports and registers them.
"""

from histofit.cli.commands.fill import fill_command
from histofit.cli.commands.fit import fit_command
from histofit.cli.commands.init import init_command

__all__ = [
    "fill_command",
    "fit_command",
    "init_command",
]
