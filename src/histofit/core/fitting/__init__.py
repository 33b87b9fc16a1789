"""Background, Gaussian and linear fitters and their orchestration."""

from histofit.core.fitting.background import BackgroundFitter
from histofit.core.fitting.fitter import (
    FitModel,
    FitResult,
    Fits,
    Fitter,
    GaussianModel,
    LinearModel,
)
from histofit.core.fitting.gaussian import GaussianFitter, GaussianPeak
from histofit.core.fitting.linear import LinearFitter
from histofit.core.fitting.lines import FitLine

__all__ = [
    "BackgroundFitter",
    "FitLine",
    "FitModel",
    "FitResult",
    "Fits",
    "Fitter",
    "GaussianFitter",
    "GaussianModel",
    "GaussianPeak",
    "LinearFitter",
    "LinearModel",
]
