"""Ordinary least-squares straight-line fit."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from histofit.core.fitting.lines import FitLine
from histofit.core.results.statistics import compute_r_squared
from histofit.core.shared.exceptions import DegenerateDataError, FitError

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray

log = logging.getLogger(__name__)


class LinearFitter(BaseModel):
    """Closed-form fit of ``y = slope * x + intercept``.

    Uncertainties come from the residual variance with ``n - 2`` degrees of
    freedom; with exactly two points the line is exact and both are zero.
    """

    model_config = ConfigDict(extra="forbid")

    kind: Literal["linear"] = "linear"
    x_data: list[float] = Field(default_factory=list)
    y_data: list[float] = Field(default_factory=list)

    slope: float | None = None
    intercept: float | None = None
    slope_err: float | None = None
    intercept_err: float | None = None
    r_squared: float | None = None
    fit_line: FitLine | None = None

    @model_validator(mode="after")
    def check_lengths(self) -> LinearFitter:
        if len(self.x_data) != len(self.y_data):
            msg = f"x_data ({len(self.x_data)}) and y_data ({len(self.y_data)}) lengths differ"
            raise ValueError(msg)
        return self

    @property
    def fitted(self) -> bool:
        return self.slope is not None and self.intercept is not None

    def perform_linear_fit(self) -> None:
        """Fit the stored points, replacing any previous result.

        Raises:
            DegenerateDataError: fewer than two points or all x identical.
        """
        x = np.asarray(self.x_data, dtype=np.float64)
        y = np.asarray(self.y_data, dtype=np.float64)
        n = x.size
        if n < 2:
            msg = f"Linear fit needs at least 2 points, got {n}"
            raise DegenerateDataError(msg)

        x_mean = x.mean()
        y_mean = y.mean()
        sxx = float(np.sum((x - x_mean) ** 2))
        if sxx == 0.0:
            msg = "Linear fit needs at least two distinct x values"
            raise DegenerateDataError(msg)

        slope = float(np.sum((x - x_mean) * (y - y_mean)) / sxx)
        intercept = float(y_mean - slope * x_mean)

        model = slope * x + intercept
        ssr = float(np.sum((y - model) ** 2))
        variance = ssr / (n - 2) if n > 2 else 0.0

        self.slope = slope
        self.intercept = intercept
        self.slope_err = float(np.sqrt(variance / sxx))
        self.intercept_err = float(np.sqrt(variance * (1.0 / n + x_mean**2 / sxx)))
        self.r_squared = compute_r_squared(y, model)
        self.fit_line = FitLine.from_arrays("Linear", x, model)
        log.debug("Linear fit: slope=%g intercept=%g", slope, intercept)

    def evaluate(self, x_values: FloatArray | list[float]) -> FloatArray:
        if self.slope is None or self.intercept is None:
            msg = "Linear fit has not been performed"
            raise FitError(msg)
        return self.slope * np.asarray(x_values, dtype=np.float64) + self.intercept

    def stats_rows(self) -> list[dict[str, str]]:
        if not self.fitted:
            return []
        return [
            {
                "Slope": f"{self.slope:.4g} ± {self.slope_err:.2g}",
                "Intercept": f"{self.intercept:.4g} ± {self.intercept_err:.2g}",
            }
        ]
