"""Fill command implementation."""

from __future__ import annotations

import json
import logging
import pathlib  # noqa: TC003
from typing import TYPE_CHECKING, Annotated

import typer

from histofit.cli.shared import load_config_or_exit, open_source_or_exit
from histofit.core.histograms.histogram1d import Histogram1D
from histofit.core.shared.events import EventDispatcher
from histofit.core.shared.exceptions import ConfigError
from histofit.services import HistogramService
from histofit.ui import (
    ConsoleReporter,
    FillProgressDisplay,
    print_histogram_table,
    setup_logging,
    show_error_with_details,
    success,
)

if TYPE_CHECKING:
    from histofit.core.domain.config import HistoFitConfig
    from histofit.services import FillSummary

DataFiles = Annotated[
    list[pathlib.Path],
    typer.Argument(
        help="Parquet or CSV files, read in the given order",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
ConfigFile = Annotated[
    pathlib.Path,
    typer.Argument(
        help="Path to TOML configuration file",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Show log output")]
LogFileOption = Annotated[
    pathlib.Path | None,
    typer.Option("--log-file", help="Write a session log (.log text or .json lines)"),
]
ProgressOption = Annotated[
    bool, typer.Option("--progress/--no-progress", help="Show live fill progress bars")
]


def run_fill(config: HistoFitConfig, data: list[pathlib.Path], *, progress: bool) -> FillSummary:
    """Fill every configured histogram; exits with code 1 when a fill failed."""
    source = open_source_or_exit(data)
    dispatcher = EventDispatcher()
    service = HistogramService(reporter=ConsoleReporter(), dispatcher=dispatcher)

    try:
        if progress:
            with FillProgressDisplay(dispatcher, transient=True):
                summary = service.fill(config, source)
        else:
            summary = service.fill(config, source)
    except ConfigError as exc:
        show_error_with_details("Building histograms", exc)
        raise typer.Exit(1) from exc

    registry = summary.registry
    labels = {
        name: registry.layout.containers[cid].label
        for name, cid in registry.layout.placements.items()
    }
    print_histogram_table(summary.histograms(), labels)
    if not summary.success:
        raise typer.Exit(1)
    return summary


def counts_payload(summary: FillSummary) -> dict[str, object]:
    payload: dict[str, object] = {}
    for hist in summary.histograms():
        entry: dict[str, object] = {
            "bins": hist.bin_count,
            "range": hist.range,
            "counts": hist.snapshot_counts().tolist(),
        }
        if not isinstance(hist, Histogram1D):
            entry["columns"] = [hist.x_column, hist.y_column]
        payload[hist.name] = entry
    return payload


def fill_command(
    config: ConfigFile,
    data: DataFiles,
    output: Annotated[
        pathlib.Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Write the filled counts to this JSON file",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    progress: ProgressOption = True,
    verbose: VerboseOption = False,
    log_file: LogFileOption = None,
) -> None:
    """Fill the configured histograms from data files.

    Examples
    --------
      Fill from one Parquet file:
        $ histofit fill histofit.toml run_001.parquet

      Fill from several runs and save counts:
        $ histofit fill histofit.toml run_*.parquet --output counts.json
    """
    setup_logging(log_file, verbose=verbose, level=logging.DEBUG if verbose else logging.INFO)
    summary = run_fill(load_config_or_exit(config), data, progress=progress)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(json.dumps(counts_payload(summary), indent=2), encoding="utf-8")
        success(f"Counts written to [path]{output}[/path]")
