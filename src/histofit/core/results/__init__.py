"""Fit quality metrics."""

from histofit.core.results.statistics import (
    compute_chi_squared,
    compute_degrees_of_freedom,
    compute_r_squared,
    compute_reduced_chi_squared,
)

__all__ = [
    "compute_chi_squared",
    "compute_degrees_of_freedom",
    "compute_r_squared",
    "compute_reduced_chi_squared",
]
