"""Fit command implementation."""

from __future__ import annotations

import logging
import pathlib  # noqa: TC003
from typing import Annotated

import typer

from histofit.cli.commands.fill import (
    ConfigFile,
    DataFiles,
    LogFileOption,
    ProgressOption,
    VerboseOption,
    run_fill,
)
from histofit.cli.shared import load_config_or_exit
from histofit.core.fitting.fitter import Fits, Fitter
from histofit.core.shared.exceptions import DataIOError, FitError, HistogramNotFoundError
from histofit.io.fits import FitsRepository
from histofit.services import FitService
from histofit.ui import (
    ConsoleReporter,
    error,
    print_rows,
    print_summary,
    setup_logging,
    show_error_with_details,
    show_header,
    success,
)


def fit_command(
    config: ConfigFile,
    data: DataFiles,
    histogram: Annotated[
        str,
        typer.Option("--histogram", "-H", help="Name of the 1D histogram to fit"),
    ],
    peaks: Annotated[
        list[float] | None,
        typer.Option("--peak", "-p", help="Initial peak center (repeat for several peaks)"),
    ] = None,
    start: Annotated[float | None, typer.Option("--start", help="Fit region start")] = None,
    end: Annotated[float | None, typer.Option("--end", help="Fit region end")] = None,
    background_start: Annotated[
        float | None,
        typer.Option("--background-start", help="Background sideband start"),
    ] = None,
    background_end: Annotated[
        float | None,
        typer.Option("--background-end", help="Background sideband end"),
    ] = None,
    linear: Annotated[
        bool, typer.Option("--linear", help="Fit a straight line instead of Gaussians")
    ] = False,
    fits_file: Annotated[
        pathlib.Path | None,
        typer.Option(
            "--fits",
            help="Append the fit to this JSON fit collection (merged if it exists)",
            dir_okay=False,
            resolve_path=True,
        ),
    ] = None,
    progress: ProgressOption = True,
    verbose: VerboseOption = False,
    log_file: LogFileOption = None,
) -> None:
    """Fill the histograms, then fit a region of one of them.

    Examples
    --------
      Two Gaussians on a linear background:
        $ histofit fit histofit.toml run.parquet -H Energy -p 511 -p 662 \\
            --start 400 --end 750 --background-start 750 --background-end 900
    """
    setup_logging(log_file, verbose=verbose, level=logging.DEBUG if verbose else logging.INFO)
    if (background_start is None) != (background_end is None):
        error("--background-start and --background-end must be given together")
        raise typer.Exit(2)
    if not linear and not peaks:
        error("Give at least one --peak, or use --linear")
        raise typer.Exit(2)

    settings = load_config_or_exit(config)
    summary = run_fill(settings, data, progress=progress)
    try:
        hist = summary.registry.get_1d(histogram)
    except HistogramNotFoundError as exc:
        error(str(exc))
        raise typer.Exit(1) from exc

    regions = []
    if background_start is not None and background_end is not None:
        regions.append((background_start, background_end))

    show_header(f"Fitting {histogram}")
    service = FitService(settings.fit, reporter=ConsoleReporter())
    try:
        fitter = service.fit_histogram(hist, peaks or [], start, end, regions, linear=linear)
    except FitError as exc:
        show_error_with_details("Fitting", exc)
        raise typer.Exit(1) from exc

    print_rows(fitter.stats_rows(), title=f"Fit of {histogram}")
    if fitter.background is not None and fitter.background.result is not None:
        print_rows(fitter.background.result.stats_rows(), title="Background")

    if fits_file is not None:
        _append_fit(fits_file, fitter)


def _append_fit(path: pathlib.Path, fitter: Fitter) -> None:
    fits = Fits()
    try:
        if path.exists():
            FitsRepository.load_into(path, fits)
        fits.set_temp_fit(fitter)
        fits.store_temp_fit()
        FitsRepository.save(path, fits)
    except DataIOError as exc:
        show_error_with_details("Saving fits", exc)
        raise typer.Exit(1) from exc
    success(f"Fit stored in [path]{path}[/path]")
    print_summary({"Stored fits": len(fits), "File": path}, title="Fit collection")
