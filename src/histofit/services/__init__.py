"""Application service layer for orchestrating HistoFit workflows.

This module provides high-level service facades that CLI and other
adapters can use without knowing core implementation details.
"""

from histofit.services.fit import FitService, sideband_background
from histofit.services.histogram import FillSummary, HistogramService

__all__ = [
    "FillSummary",
    "FitService",
    "HistogramService",
    "sideband_background",
]
