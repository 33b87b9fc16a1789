"""Two-dimensional histogram with a lock-guarded bin grid."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

import numpy as np

from histofit.core.histograms.binning import Axis
from histofit.core.histograms.histogram1d import Histogram1D, _fraction

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray, IntArray


class Histogram2D:
    """Fixed-geometry frequency grid; ``counts[ix, iy]`` has shape ``(nx, ny)``.

    Each axis bins independently with the same rule as :class:`Histogram1D`;
    a pair is counted only when both components are in range.
    """

    def __init__(
        self,
        name: str,
        bins: tuple[int, int],
        value_range: tuple[tuple[float, float], tuple[float, float]],
    ) -> None:
        self.name = name
        self.x_axis = Axis.from_range(bins[0], value_range[0])
        self.y_axis = Axis.from_range(bins[1], value_range[1])
        self.x_column: str | None = None
        self.y_column: str | None = None
        self._counts = np.zeros((self.x_axis.bins, self.y_axis.bins), dtype=np.int64)
        self._progress: float | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"<Histogram2D {self.name!r} bins={self.bin_count} total={self.total}>"

    @property
    def bin_count(self) -> tuple[int, int]:
        return (self.x_axis.bins, self.y_axis.bins)

    @property
    def range(self) -> tuple[tuple[float, float], tuple[float, float]]:
        return (self.x_axis.range, self.y_axis.range)

    @property
    def counts(self) -> IntArray:
        return self.snapshot_counts()

    @property
    def total(self) -> int:
        with self._lock:
            return int(self._counts.sum())

    @property
    def progress(self) -> float | None:
        with self._lock:
            return self._progress

    def set_columns(self, x_column: str, y_column: str) -> None:
        with self._lock:
            self.x_column = x_column
            self.y_column = y_column

    def fill(self, x: float, y: float, row_index: int, total_rows: int) -> None:
        """Count the pair ``(x, y)`` and publish ``row_index / total_rows``."""
        ix = self.x_axis.index(x)
        iy = self.y_axis.index(y)
        with self._lock:
            if ix is not None and iy is not None:
                self._counts[ix, iy] += 1
            self._progress = _fraction(row_index, total_rows)

    def contribute(
        self,
        x_values: FloatArray,
        y_values: FloatArray,
        processed: int | None = None,
        total_rows: int | None = None,
    ) -> None:
        """Count a batch of pairs under a single lock acquisition."""
        ix = self.x_axis.indices(x_values)
        iy = self.y_axis.indices(y_values)
        inside = (ix >= 0) & (iy >= 0)
        flat = ix[inside] * self.y_axis.bins + iy[inside]
        increments = np.bincount(flat, minlength=self._counts.size).reshape(self._counts.shape)
        with self._lock:
            self._counts += increments
            if processed is not None and total_rows is not None:
                self._progress = _fraction(processed, total_rows)

    def finish_fill(self) -> None:
        with self._lock:
            self._progress = None

    def reset(self) -> None:
        with self._lock:
            self._counts[:, :] = 0
            self._progress = None

    def snapshot_counts(self) -> IntArray:
        with self._lock:
            return self._counts.copy()

    def projection_x(self) -> Histogram1D:
        """Counts summed over y, as a detached 1D histogram."""
        summed = self.snapshot_counts().sum(axis=1)
        return Histogram1D.from_counts(f"{self.name} X projection", self.x_axis, summed)

    def projection_y(self) -> Histogram1D:
        """Counts summed over x, as a detached 1D histogram."""
        summed = self.snapshot_counts().sum(axis=0)
        return Histogram1D.from_counts(f"{self.name} Y projection", self.y_axis, summed)
