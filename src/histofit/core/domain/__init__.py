"""Domain configuration models."""

from histofit.core.domain.config import (
    FillConfig,
    FitConfig,
    Histogram1DSpec,
    Histogram2DSpec,
    HistoFitConfig,
)

__all__ = [
    "FillConfig",
    "FitConfig",
    "HistoFitConfig",
    "Histogram1DSpec",
    "Histogram2DSpec",
]
