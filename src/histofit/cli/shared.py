"""Helpers shared by the CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from histofit.core.shared.exceptions import ConfigError, DataSourceError
from histofit.core.source import DataFrameSource
from histofit.io.config import load_config
from histofit.ui import error, show_error_with_details, show_file_not_found

if TYPE_CHECKING:
    from pathlib import Path

    from histofit.core.domain.config import HistoFitConfig


def load_config_or_exit(path: Path) -> HistoFitConfig:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        show_file_not_found(path)
        raise typer.Exit(1) from exc
    except ConfigError as exc:
        show_error_with_details("Loading configuration", exc)
        raise typer.Exit(1) from exc


def open_source_or_exit(paths: list[Path]) -> DataFrameSource:
    try:
        return DataFrameSource.from_files(paths)
    except DataSourceError as exc:
        error(str(exc))
        raise typer.Exit(1) from exc
