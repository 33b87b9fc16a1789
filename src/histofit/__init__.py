"""HistoFit - concurrent histogram accumulation and multi-peak fitting.

Public API:
    - HistogramService: Fill configured histograms from tabular data
    - FitService: Fit a histogram region

Configuration:
    - HistoFitConfig: Main configuration object
    - FillConfig, FitConfig: Sub-configurations
"""

import contextlib
from importlib import metadata

__version__ = "0.1.0"

with contextlib.suppress(metadata.PackageNotFoundError):
    __version__ = metadata.version(__name__)

from histofit.core.domain.config import FillConfig, FitConfig, HistoFitConfig  # noqa: E402
from histofit.core.histograms import Histogram1D, Histogram2D, HistogramRegistry  # noqa: E402
from histofit.services import FitService, HistogramService  # noqa: E402

__all__ = [
    "__version__",
    "FitService",
    "HistogramService",
    "HistoFitConfig",
    "FillConfig",
    "FitConfig",
    "Histogram1D",
    "Histogram2D",
    "HistogramRegistry",
]
