"""Command-line interface for HistoFit."""

from histofit.cli.app import app

__all__ = ["app"]
