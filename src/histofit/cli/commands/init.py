"""Init command implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from histofit.io.config import generate_default_config, load_config
from histofit.ui import error, info, print_next_steps, print_rows, success


def init_command(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the histogram script", dir_okay=False, resolve_path=True),
    ] = Path("histofit.toml"),
    force: Annotated[
        bool, typer.Option("--force", "-f", help="Replace an existing file")
    ] = False,
) -> None:
    """Write a starter histogram script.

    Examples
    --------
      $ histofit init
      $ histofit init runs/histofit.toml --force
    """
    if path.exists() and not force:
        error(f"Refusing to overwrite [path]{path}[/path]")
        info("Pass [bold]--force[/bold] to replace it")
        raise typer.Exit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_default_config(), encoding="utf-8")
    success(f"Wrote [path]{path}[/path]")

    config = load_config(path)
    print_rows(
        [
            {"Histogram": spec.name, "Column": spec.column, "Bins": str(spec.bins), "Container": spec.container or ""}
            for spec in config.histograms
        ],
        title="Configured histograms",
    )
    print_next_steps([
        f"Point the [cyan]column[/] entries of {path.name} at your data columns",
        f"Fill: [cyan]histofit fill {path.name} run.parquet[/]",
        f"Fit a peak: [cyan]histofit fit {path.name} run.parquet -H <name> -p <center>[/]",
    ])
