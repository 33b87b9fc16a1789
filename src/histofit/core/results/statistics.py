"""Goodness-of-fit metrics shared by the fitters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray


def compute_chi_squared(residuals: FloatArray) -> float:
    """Compute chi-squared (sum of squared residuals).

    Args:
        residuals: Residuals (data - model), optionally divided by the errors

    Returns
    -------
        Chi-squared value (sum of residuals squared)
    """
    return float(np.sum(np.asarray(residuals) ** 2))


def compute_degrees_of_freedom(n_data: int, n_params: int) -> int:
    """Degrees of freedom, never below 1 to avoid division by zero."""
    return max(1, n_data - n_params)


def compute_reduced_chi_squared(chi_squared: float, n_data: int, n_params: int) -> float:
    """Compute reduced chi-squared (chi_squared / dof).

    Args:
        chi_squared: Sum of squared residuals
        n_data: Number of data points
        n_params: Number of fitted parameters

    Returns
    -------
        Reduced chi-squared value
    """
    return chi_squared / compute_degrees_of_freedom(n_data, n_params)


def compute_r_squared(y: FloatArray, model: FloatArray) -> float:
    """Coefficient of determination; 1.0 for a perfect fit of constant data."""
    y = np.asarray(y, dtype=np.float64)
    ss_res = float(np.sum((y - np.asarray(model)) ** 2))
    ss_tot = float(np.sum((y - y.mean()) ** 2)) if y.size else 0.0
    if ss_tot == 0.0:
        return 1.0 if ss_res == 0.0 else 0.0
    return 1.0 - ss_res / ss_tot


__all__ = [
    "compute_chi_squared",
    "compute_degrees_of_freedom",
    "compute_r_squared",
    "compute_reduced_chi_squared",
]
