"""Histogram accumulation: bin geometry, histograms, scheduler, registry."""

from histofit.core.histograms.binning import Axis
from histofit.core.histograms.histogram1d import Histogram1D, HistogramStatistics
from histofit.core.histograms.histogram2d import Histogram2D
from histofit.core.histograms.layout import Container, ContainerId, Layout
from histofit.core.histograms.registry import HistogramRegistry
from histofit.core.histograms.scheduler import FillScheduler, FillTask

__all__ = [
    "Axis",
    "Container",
    "ContainerId",
    "FillScheduler",
    "FillTask",
    "Histogram1D",
    "Histogram2D",
    "HistogramRegistry",
    "HistogramStatistics",
    "Layout",
]
