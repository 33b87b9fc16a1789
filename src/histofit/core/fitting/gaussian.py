"""Multi-peak Gaussian fit with scipy's Levenberg-Marquardt solver.

The model is a plain sum of Gaussians,

    f(x) = sum_i A_i * exp(-(x - mu_i)^2 / (2 sigma_i^2)),

fitted to background-subtracted data starting from one guessed center per
peak. A solver that runs out of iterations, or whose covariance cannot be
estimated, still produces a result; it is flagged as ``degraded`` instead of
raising.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Literal

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator
from scipy.optimize import least_squares

from histofit.core.fitting.lines import FitLine
from histofit.core.results.statistics import (
    compute_chi_squared,
    compute_r_squared,
    compute_reduced_chi_squared,
)

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray

log = logging.getLogger(__name__)

FWHM_FACTOR = 2.0 * math.sqrt(2.0 * math.log(2.0))
PARAMS_PER_PEAK = 3


def gaussian(x: FloatArray, amplitude: float, mean: float, sigma: float) -> FloatArray:
    """Single Gaussian component of height *amplitude* at *mean*."""
    return amplitude * np.exp(-((x - mean) ** 2) / (2.0 * sigma**2))


def multi_gaussian(x: FloatArray, params: FloatArray) -> FloatArray:
    """Sum of Gaussians for a flat ``(A, mu, sigma, A, mu, sigma, ...)`` vector."""
    total = np.zeros_like(x, dtype=np.float64)
    for amplitude, mean, sigma in np.reshape(params, (-1, PARAMS_PER_PEAK)):
        total += gaussian(x, amplitude, mean, sigma)
    return total


def multi_gaussian_jacobian(x: FloatArray, params: FloatArray) -> FloatArray:
    """Derivatives of :func:`multi_gaussian` w.r.t. each parameter, shape (n_x, n_params)."""
    jac = np.empty((x.size, len(params)), dtype=np.float64)
    for i, (amplitude, mean, sigma) in enumerate(np.reshape(params, (-1, PARAMS_PER_PEAK))):
        dx = x - mean
        shape = np.exp(-(dx**2) / (2.0 * sigma**2))
        col = PARAMS_PER_PEAK * i
        jac[:, col] = shape
        jac[:, col + 1] = amplitude * shape * dx / sigma**2
        jac[:, col + 2] = amplitude * shape * dx**2 / sigma**3
    return jac


class GaussianPeak(BaseModel):
    """Fitted parameters of one component and their standard errors."""

    model_config = ConfigDict(extra="forbid")

    amplitude: float
    mean: float
    sigma: float
    amplitude_err: float = 0.0
    mean_err: float = 0.0
    sigma_err: float = 0.0

    @property
    def fwhm(self) -> float:
        return FWHM_FACTOR * self.sigma

    @property
    def fwhm_err(self) -> float:
        return FWHM_FACTOR * self.sigma_err

    @property
    def area(self) -> float:
        return self.amplitude * self.sigma * math.sqrt(2.0 * math.pi)

    @property
    def area_err(self) -> float:
        # First-order propagation assuming independent A and sigma.
        return math.sqrt(2.0 * math.pi) * math.hypot(
            self.amplitude_err * self.sigma, self.amplitude * self.sigma_err
        )

    def evaluate(self, x: FloatArray) -> FloatArray:
        return gaussian(np.asarray(x, dtype=np.float64), self.amplitude, self.mean, self.sigma)


class GaussianFitter(BaseModel):
    """Fits one Gaussian per initial marker and decomposes the result.

    ``initial_markers`` are the guessed centers handed in; ``peak_markers``
    mirror them until a fit ran and then hold the fitted means, in the same
    order. ``fit_lines`` always has one curve per marker.
    """

    model_config = ConfigDict(extra="forbid")

    kind: Literal["gaussian"] = "gaussian"
    x_data: list[float] = Field(default_factory=list)
    y_data: list[float] = Field(default_factory=list)
    y_err: list[float] | None = None
    initial_markers: list[float] = Field(default_factory=list)
    max_iterations: int = Field(default=2000, gt=0)
    tolerance: float = Field(default=1e-10, gt=0)

    peak_markers: list[float] = Field(default_factory=list)
    peaks: list[GaussianPeak] = Field(default_factory=list)
    fit_lines: list[FitLine] = Field(default_factory=list)
    convoluted_line: FitLine | None = None
    chi_squared: float | None = None
    reduced_chi_squared: float | None = None
    r_squared: float | None = None
    converged: bool = False
    degraded: bool = False
    nfev: int = 0
    message: str = ""

    @model_validator(mode="after")
    def check_inputs(self) -> GaussianFitter:
        if len(self.x_data) != len(self.y_data):
            msg = f"x_data ({len(self.x_data)}) and y_data ({len(self.y_data)}) lengths differ"
            raise ValueError(msg)
        if self.y_err is not None and len(self.y_err) != len(self.y_data):
            msg = "y_err must have the same length as y_data"
            raise ValueError(msg)
        if not self.peak_markers and not self.peaks:
            self.peak_markers = list(self.initial_markers)
        return self

    @property
    def fitted(self) -> bool:
        return bool(self.peaks)

    def initial_guess(self) -> np.ndarray:
        """Flat ``(A, mu, sigma, ...)`` starting vector.

        Amplitude is the data value nearest each marker, the mean is the
        marker itself, and sigma is a quarter of the x-range shared between
        the peaks, capped at half the closest marker spacing and floored at
        one sample spacing.
        """
        x = np.asarray(self.x_data, dtype=np.float64)
        y = np.asarray(self.y_data, dtype=np.float64)
        markers = np.asarray(self.initial_markers, dtype=np.float64)
        n_peaks = markers.size

        span = float(np.ptp(x)) if x.size > 1 else 1.0
        span = span or 1.0
        sigma = span / (4.0 * n_peaks)
        if n_peaks > 1:
            spacing = float(np.min(np.diff(np.sort(markers))))
            if spacing > 0:
                sigma = min(sigma, spacing / 2.0)
        if x.size > 1:
            step = float(np.median(np.diff(np.sort(x))))
            if step > 0:
                sigma = max(sigma, step)

        params = np.empty(PARAMS_PER_PEAK * n_peaks, dtype=np.float64)
        for i, marker in enumerate(markers):
            amplitude = float(y[np.argmin(np.abs(x - marker))]) if x.size else 0.0
            params[PARAMS_PER_PEAK * i : PARAMS_PER_PEAK * (i + 1)] = (amplitude, marker, sigma)
        return params

    def multi_gauss_fit(self) -> None:
        """Run the fit, replacing any previous result."""
        self._clear()
        n_peaks = len(self.initial_markers)
        if n_peaks == 0:
            self.converged = True
            self.message = "No peak markers given"
            return

        x = np.asarray(self.x_data, dtype=np.float64)
        y = np.asarray(self.y_data, dtype=np.float64)
        weights = self._weights()
        p0 = self.initial_guess()

        if x.size < p0.size:
            self.degraded = True
            self.message = (
                f"Not enough points to fit {n_peaks} peak(s): {x.size} < {p0.size} parameters"
            )
            log.warning(self.message)
            self._store(x, y, weights, p0, np.zeros_like(p0))
            return

        def residuals(params: np.ndarray) -> np.ndarray:
            return (y - multi_gaussian(x, params)) * weights

        def jacobian(params: np.ndarray) -> np.ndarray:
            return -multi_gaussian_jacobian(x, params) * weights[:, np.newaxis]

        result = least_squares(
            residuals,
            p0,
            jac=jacobian,
            method="lm",
            xtol=self.tolerance,
            ftol=self.tolerance,
            max_nfev=self.max_iterations,
        )

        params = np.asarray(result.x, dtype=np.float64)
        params[2::PARAMS_PER_PEAK] = np.abs(params[2::PARAMS_PER_PEAK])
        errors = self._standard_errors(result.jac, result.fun, params.size)

        self.converged = bool(result.success)
        self.nfev = int(result.nfev)
        self.message = str(result.message)
        if not self.converged:
            self.degraded = True
            log.warning("Gaussian fit did not converge: %s", self.message)
        if errors is None:
            self.degraded = True
            errors = np.zeros_like(params)
            log.warning("Gaussian fit covariance could not be estimated")
        if np.any(params[2::PARAMS_PER_PEAK] == 0.0):
            self.degraded = True

        self._store(x, y, weights, params, errors)

    def evaluate(self, x_values: FloatArray | list[float]) -> FloatArray:
        """Sum of the fitted components at *x_values*."""
        x = np.asarray(x_values, dtype=np.float64)
        total = np.zeros_like(x)
        for peak in self.peaks:
            total += peak.evaluate(x)
        return total

    def calculate_convoluted_fit_points_with_background(
        self, slope: float, intercept: float
    ) -> list[tuple[float, float]]:
        """Summed curve plus a linear background, over the fit domain."""
        x = np.asarray(self.x_data, dtype=np.float64)
        y = self.evaluate(x) + slope * x + intercept
        return [(float(a), float(b)) for a, b in zip(x, y, strict=True)]

    def stats_rows(self) -> list[dict[str, str]]:
        return [
            {
                "Peak": str(i),
                "Mean": f"{peak.mean:.4g} ± {peak.mean_err:.2g}",
                "FWHM": f"{peak.fwhm:.4g} ± {peak.fwhm_err:.2g}",
                "Area": f"{peak.area:.4g} ± {peak.area_err:.2g}",
            }
            for i, peak in enumerate(self.peaks)
        ]

    def _clear(self) -> None:
        self.peak_markers = list(self.initial_markers)
        self.peaks = []
        self.fit_lines = []
        self.convoluted_line = None
        self.chi_squared = None
        self.reduced_chi_squared = None
        self.r_squared = None
        self.converged = False
        self.degraded = False
        self.nfev = 0
        self.message = ""

    def _weights(self) -> np.ndarray:
        if self.y_err is None:
            return np.ones(len(self.y_data), dtype=np.float64)
        err = np.asarray(self.y_err, dtype=np.float64)
        # Zero or invalid errors fall back to unit weight.
        safe = np.where(np.isfinite(err) & (err > 0), err, 1.0)
        return 1.0 / safe

    @staticmethod
    def _standard_errors(jac: np.ndarray, fun: np.ndarray, n_params: int) -> np.ndarray | None:
        # cov = inv(J.T @ J) * s2, where s2 = chi^2 / (n - p)
        n_data = fun.size
        if n_data <= n_params:
            return None
        s2 = compute_chi_squared(fun) / (n_data - n_params)
        try:
            cov = np.linalg.inv(jac.T @ jac) * s2
        except np.linalg.LinAlgError:
            return None
        diag = np.diag(cov)
        if not np.all(np.isfinite(diag)) or np.any(diag < 0):
            return None
        return np.sqrt(diag)

    def _store(
        self,
        x: np.ndarray,
        y: np.ndarray,
        weights: np.ndarray,
        params: np.ndarray,
        errors: np.ndarray,
    ) -> None:
        peaks = []
        for p, e in zip(
            np.reshape(params, (-1, PARAMS_PER_PEAK)),
            np.reshape(errors, (-1, PARAMS_PER_PEAK)),
            strict=True,
        ):
            peaks.append(
                GaussianPeak(
                    amplitude=float(p[0]),
                    mean=float(p[1]),
                    sigma=float(p[2]),
                    amplitude_err=float(e[0]),
                    mean_err=float(e[1]),
                    sigma_err=float(e[2]),
                )
            )
        self.peaks = peaks
        self.peak_markers = [peak.mean for peak in peaks]
        self.fit_lines = [
            FitLine.from_arrays(f"Peak {i}", x, peak.evaluate(x)) for i, peak in enumerate(peaks)
        ]
        model = self.evaluate(x)
        self.convoluted_line = FitLine.from_arrays("Convoluted", x, model)
        if x.size:
            self.chi_squared = compute_chi_squared((y - model) * weights)
            self.reduced_chi_squared = compute_reduced_chi_squared(
                self.chi_squared, x.size, params.size
            )
            self.r_squared = compute_r_squared(y, model)
