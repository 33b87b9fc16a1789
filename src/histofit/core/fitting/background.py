"""Smooth background estimated from sideband points."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from histofit.core.fitting.linear import LinearFitter
from histofit.core.shared.exceptions import DegenerateDataError

if TYPE_CHECKING:
    from histofit.core.fitting.lines import FitLine
    from histofit.core.shared.typing import FloatArray

log = logging.getLogger(__name__)


class BackgroundFitter(BaseModel):
    """Linear background fitted to its own sample points.

    The samples are usually a sideband selection taken next to the peaks,
    not the spectrum that is later fitted.
    """

    model_config = ConfigDict(extra="forbid")

    x_data: list[float] = Field(default_factory=list)
    y_data: list[float] = Field(default_factory=list)
    result: LinearFitter | None = None

    def fit(self) -> None:
        """Fit the samples once; later calls keep the existing result."""
        if self.result is not None:
            return

        line = LinearFitter(x_data=self.x_data, y_data=self.y_data)
        try:
            line.perform_linear_fit()
        except DegenerateDataError as exc:
            log.error("Background fit failed: %s", exc)
            return
        self.result = line

    def get_background(self, x_values: FloatArray | list[float]) -> FloatArray | None:
        """Background evaluated at *x_values*, or ``None`` before a fit."""
        if self.result is None:
            return None
        return self.result.evaluate(np.asarray(x_values, dtype=np.float64))

    def get_slope_intercept(self) -> tuple[float, float] | None:
        if self.result is None or not self.result.fitted:
            return None
        return self.result.slope, self.result.intercept  # type: ignore[return-value]

    @property
    def background_line(self) -> FitLine | None:
        return None if self.result is None else self.result.fit_line
