"""Fit service: builds and runs a Fitter over a histogram region."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

import numpy as np

from histofit.core.domain.config import FitConfig
from histofit.core.fitting.background import BackgroundFitter
from histofit.core.fitting.fitter import Fitter, GaussianModel, LinearModel
from histofit.core.fitting.gaussian import GaussianFitter
from histofit.core.shared.reporter import LoggingReporter, Reporter

if TYPE_CHECKING:
    from histofit.core.histograms.histogram1d import Histogram1D

log = logging.getLogger(__name__)


def sideband_background(
    hist: Histogram1D, regions: Sequence[tuple[float, float]]
) -> BackgroundFitter | None:
    """Background fitter sampling the bins of *hist* inside each region."""
    if not regions:
        return None
    xs: list[np.ndarray] = []
    ys: list[np.ndarray] = []
    for low, high in regions:
        x, y = hist.spectrum(low, high)
        xs.append(x)
        ys.append(y)
    return BackgroundFitter(
        x_data=np.concatenate(xs).tolist(),
        y_data=np.concatenate(ys).tolist(),
    )


class FitService:
    """Service for peak fitting on filled histograms.

    Example:
        service = FitService(FitConfig())
        fitter = service.fit_histogram(hist, peaks=[511.0], start=450, end=570)
        print(fitter.stats_rows())
    """

    def __init__(self, settings: FitConfig | None = None, reporter: Reporter | None = None) -> None:
        self._settings = settings or FitConfig()
        self._reporter = reporter or LoggingReporter(__name__)

    def fit_histogram(
        self,
        hist: Histogram1D,
        peaks: Sequence[float] = (),
        start: float | None = None,
        end: float | None = None,
        background_regions: Sequence[tuple[float, float]] = (),
        *,
        linear: bool = False,
    ) -> Fitter:
        """Fit the region ``[start, end]`` of *hist*.

        Raises
        ------
            DegenerateDataError: For a linear model on a degenerate region.
        """
        model = LinearModel() if linear else GaussianModel(peak_markers=list(peaks))
        fitter = Fitter.from_histogram(
            hist,
            start,
            end,
            model=model,
            background=sideband_background(hist, background_regions),
            settings=self._settings,
        )
        self._reporter.action(f"Fitting '{hist.name}' over {len(fitter.x_data)} bin(s)...")
        fitter.fit()
        if fitter.background is not None and fitter.background.result is None:
            self._reporter.warning("Background fit unavailable, fitting raw counts")
        result = fitter.result
        if isinstance(result, GaussianFitter) and result.degraded:
            self._reporter.warning(f"Fit of '{hist.name}' is degraded: {result.message}")
        else:
            self._reporter.success(f"Fit of '{hist.name}' finished")
        return fitter
