"""Bin geometry shared by 1D histograms and each axis of 2D histograms."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from histofit.core.shared.exceptions import ConfigError

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray, IntArray


@dataclass(frozen=True, slots=True)
class Axis:
    """Uniform binning of the half-open interval ``[min, max)``.

    A value ``v`` belongs to bin ``floor((v - min) / (max - min) * bins)``.
    The upper edge is excluded so that the bins agree with the row selection
    predicate ``column > min AND column < max`` used when filling.
    """

    bins: int
    min: float
    max: float

    def __post_init__(self) -> None:
        if isinstance(self.bins, bool) or int(self.bins) != self.bins or self.bins <= 0:
            msg = f"Bin count must be a positive integer, got {self.bins!r}"
            raise ConfigError(msg)
        if not (math.isfinite(self.min) and math.isfinite(self.max)):
            msg = f"Range bounds must be finite, got ({self.min}, {self.max})"
            raise ConfigError(msg)
        if self.min >= self.max:
            msg = f"Range minimum must be below maximum, got ({self.min}, {self.max})"
            raise ConfigError(msg)

    @classmethod
    def from_range(cls, bins: int, value_range: tuple[float, float]) -> Axis:
        low, high = value_range
        return cls(bins, float(low), float(high))

    @property
    def range(self) -> tuple[float, float]:
        return (self.min, self.max)

    @property
    def bin_width(self) -> float:
        return (self.max - self.min) / self.bins

    def contains(self, value: float) -> bool:
        return self.min <= value < self.max

    def index(self, value: float) -> int | None:
        """Bin index of *value*, or ``None`` when it lies outside ``[min, max)``."""
        if not self.min <= value < self.max:
            return None
        idx = int((value - self.min) / (self.max - self.min) * self.bins)
        # Rounding can push values just below max onto the upper edge.
        return min(idx, self.bins - 1)

    def indices(self, values: FloatArray) -> IntArray:
        """Vectorized :meth:`index`; out-of-range values map to ``-1``."""
        values = np.asarray(values, dtype=np.float64)
        inside = (values >= self.min) & (values < self.max)
        idx = np.floor((values - self.min) / (self.max - self.min) * self.bins)
        idx = np.where(inside, np.minimum(idx, self.bins - 1), -1)
        return idx.astype(np.int64)

    def edges(self) -> FloatArray:
        return np.linspace(self.min, self.max, self.bins + 1)

    def centers(self) -> FloatArray:
        edges = self.edges()
        return 0.5 * (edges[:-1] + edges[1:])
