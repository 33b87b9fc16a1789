"""Fit orchestration: background, model dispatch, and the fit collection."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from histofit.core.domain.config import FitConfig
from histofit.core.fitting.background import BackgroundFitter
from histofit.core.fitting.gaussian import GaussianFitter
from histofit.core.fitting.linear import LinearFitter
from histofit.core.fitting.lines import FitLine

if TYPE_CHECKING:
    from histofit.core.histograms.histogram1d import Histogram1D

log = logging.getLogger(__name__)


class GaussianModel(BaseModel):
    """Sum of Gaussians seeded with one center per marker."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["gaussian"] = "gaussian"
    peak_markers: list[float] = Field(default_factory=list)


class LinearModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: Literal["linear"] = "linear"


FitModel = Annotated[GaussianModel | LinearModel, Field(discriminator="kind")]
FitResult = Annotated[GaussianFitter | LinearFitter, Field(discriminator="kind")]


class Fitter(BaseModel):
    """One data slice, its optional background, a model, and the latest result.

    ``fit()`` is synchronous. Each call discards the previous result and the
    curves derived from it before running again.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    x_data: list[float] = Field(default_factory=list)
    y_data: list[float] = Field(default_factory=list)
    y_err: list[float] | None = None
    background: BackgroundFitter | None = None
    model: FitModel = Field(default_factory=GaussianModel)
    result: FitResult | None = None
    deconvoluted_lines: list[FitLine] = Field(default_factory=list)
    convoluted_line: FitLine | None = None
    settings: FitConfig = Field(default_factory=FitConfig)

    @model_validator(mode="after")
    def check_lengths(self) -> Fitter:
        if len(self.x_data) != len(self.y_data):
            msg = f"x_data ({len(self.x_data)}) and y_data ({len(self.y_data)}) lengths differ"
            raise ValueError(msg)
        if self.y_err is not None and len(self.y_err) != len(self.y_data):
            msg = "y_err must have the same length as y_data"
            raise ValueError(msg)
        return self

    @classmethod
    def from_histogram(
        cls,
        hist: Histogram1D,
        start: float | None = None,
        end: float | None = None,
        model: GaussianModel | LinearModel | None = None,
        background: BackgroundFitter | None = None,
        settings: FitConfig | None = None,
    ) -> Fitter:
        """Fitter over the bins of *hist* whose centers lie in ``[start, end]``.

        Errors are Poisson, ``sqrt(counts)``, with empty bins given unit error.
        """
        x, y = hist.spectrum(start, end)
        y_err = np.sqrt(np.maximum(y, 1.0))
        return cls(
            name=hist.name,
            x_data=x.tolist(),
            y_data=y.tolist(),
            y_err=y_err.tolist(),
            background=background,
            model=model or GaussianModel(),
            settings=settings or FitConfig(),
        )

    def subtract_background(self) -> list[float]:
        """y-data minus the evaluated background, or the raw y-data without one."""
        if self.background is None:
            return list(self.y_data)
        values = self.background.get_background(self.x_data)
        if values is None:
            return list(self.y_data)
        return (np.asarray(self.y_data, dtype=np.float64) - values).tolist()

    def get_peak_markers(self) -> list[float]:
        if isinstance(self.result, GaussianFitter):
            return list(self.result.peak_markers)
        if isinstance(self.model, GaussianModel):
            return list(self.model.peak_markers)
        return []

    def fit(self) -> None:
        """Fit the background if needed, then the model on the corrected data.

        Raises:
            DegenerateDataError: linear model on fewer than two points or
                constant x. The previous result stays cleared.
        """
        self.result = None
        self.deconvoluted_lines = []
        self.convoluted_line = None

        if self.background is not None and self.background.result is None:
            self.background.fit()

        y_corrected = self.subtract_background()

        match self.model:
            case GaussianModel(peak_markers=markers):
                fit = GaussianFitter(
                    x_data=self.x_data,
                    y_data=y_corrected,
                    y_err=self.y_err,
                    initial_markers=markers,
                    max_iterations=self.settings.max_iterations,
                    tolerance=self.settings.tolerance,
                )
                fit.multi_gauss_fit()
                self.deconvoluted_lines = [line.model_copy() for line in fit.fit_lines]
                self.convoluted_line = self._convoluted(fit)
                self.result = fit
                log.info(
                    "Gaussian fit of '%s': %d peak(s), reduced chi2=%s%s",
                    self.name,
                    len(fit.peaks),
                    fit.reduced_chi_squared,
                    " (degraded)" if fit.degraded else "",
                )
            case LinearModel():
                fit = LinearFitter(x_data=self.x_data, y_data=y_corrected)
                fit.perform_linear_fit()
                self.convoluted_line = fit.fit_line
                self.result = fit

    def stats_rows(self) -> list[dict[str, str]]:
        return [] if self.result is None else self.result.stats_rows()

    def _convoluted(self, fit: GaussianFitter) -> FitLine | None:
        if not fit.peaks:
            return None
        pair = None if self.background is None else self.background.get_slope_intercept()
        if pair is None:
            return fit.convoluted_line
        points = fit.calculate_convoluted_fit_points_with_background(*pair)
        return FitLine(name="Convoluted", points=points)


class Fits(BaseModel):
    """In-progress fit and background plus the ordered finalized fits.

    ``temp_background_fit`` may be set on its own while a background is being
    fitted. Once ``set_temp_fit`` runs it is the temp fit's own background, and
    that sharing is restored when a serialised collection is loaded back.
    """

    model_config = ConfigDict(extra="forbid")

    temp_fit: Fitter | None = None
    temp_background_fit: BackgroundFitter | None = None
    stored_fits: list[Fitter] = Field(default_factory=list)

    @model_validator(mode="after")
    def link_temp_background(self) -> Fits:
        if (
            self.temp_fit is not None
            and self.temp_fit.background is not None
            and self.temp_background_fit == self.temp_fit.background
        ):
            self.temp_background_fit = self.temp_fit.background
        return self

    def __len__(self) -> int:
        return len(self.stored_fits)

    def set_temp_fit(self, fitter: Fitter) -> None:
        self.temp_fit = fitter
        self.temp_background_fit = fitter.background

    def store_temp_fit(self) -> Fitter | None:
        """Append the in-progress fit to the stored fits and clear the temp slots."""
        fitter = self.temp_fit
        if fitter is None:
            log.warning("No fit in progress to store")
            return None
        self.stored_fits.append(fitter)
        self.remove_temp_fits()
        return fitter

    def remove_stored_fit(self, index: int) -> Fitter:
        """Remove the stored fit at *index*; IndexError when out of range."""
        if not 0 <= index < len(self.stored_fits):
            msg = f"No stored fit at index {index} (have {len(self.stored_fits)})"
            raise IndexError(msg)
        return self.stored_fits.pop(index)

    def remove_temp_fits(self) -> None:
        self.temp_fit = None
        self.temp_background_fit = None

    def merge(self, other: Fits) -> None:
        """Append *other*'s stored fits; its in-progress slots replace ours."""
        self.stored_fits.extend(other.stored_fits)
        self.temp_fit = other.temp_fit
        self.temp_background_fit = other.temp_background_fit

    def summary_rows(self) -> list[dict[str, str]]:
        """Fit/Peak/Mean/FWHM/Area rows over every stored Gaussian fit."""
        rows: list[dict[str, str]] = []
        for i, fitter in enumerate(self.stored_fits):
            if not isinstance(fitter.result, GaussianFitter):
                continue
            rows.extend({"Fit": str(i), **row} for row in fitter.result.stats_rows())
        return rows
