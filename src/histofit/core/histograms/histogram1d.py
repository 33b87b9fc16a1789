"""One-dimensional histogram with a lock-guarded bin buffer."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from histofit.core.histograms.binning import Axis

if TYPE_CHECKING:
    from histofit.core.shared.typing import FloatArray, IntArray


@dataclass(frozen=True, slots=True)
class HistogramStatistics:
    """Summary of the counts in a region of a 1D histogram."""

    integral: int
    mean: float
    stdev: float


class Histogram1D:
    """Fixed-geometry frequency distribution over ``[min, max)``.

    Bin geometry never changes after construction. All access to the counts
    goes through the instance lock, so many fill workers may contribute while
    readers take snapshots or sample :attr:`progress`.
    """

    def __init__(self, name: str, bins: int, value_range: tuple[float, float]) -> None:
        self.name = name
        self.axis = Axis.from_range(bins, value_range)
        self._counts = np.zeros(self.axis.bins, dtype=np.int64)
        self._progress: float | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_counts(cls, name: str, axis: Axis, counts: IntArray) -> Histogram1D:
        """Build a detached histogram holding a copy of *counts*."""
        hist = cls(name, axis.bins, axis.range)
        hist._counts[:] = counts
        return hist

    def __repr__(self) -> str:
        return (
            f"<Histogram1D {self.name!r} bins={self.bin_count} "
            f"range=[{self.axis.min:g}, {self.axis.max:g}) total={self.total}>"
        )

    @property
    def bin_count(self) -> int:
        return self.axis.bins

    @property
    def range(self) -> tuple[float, float]:
        return self.axis.range

    @property
    def counts(self) -> IntArray:
        return self.snapshot_counts()

    @property
    def total(self) -> int:
        with self._lock:
            return int(self._counts.sum())

    @property
    def progress(self) -> float | None:
        """Fraction of the running fill already processed, ``None`` when idle."""
        with self._lock:
            return self._progress

    def fill(self, value: float, row_index: int, total_rows: int) -> None:
        """Count *value* and publish ``row_index / total_rows`` as progress.

        Out-of-range values only update the progress.
        """
        idx = self.axis.index(value)
        with self._lock:
            if idx is not None:
                self._counts[idx] += 1
            self._progress = _fraction(row_index, total_rows)

    def contribute(
        self,
        values: FloatArray,
        processed: int | None = None,
        total_rows: int | None = None,
    ) -> None:
        """Count a batch of values under a single lock acquisition."""
        idx = self.axis.indices(values)
        idx = idx[idx >= 0]
        increments = np.bincount(idx, minlength=self.axis.bins)
        with self._lock:
            self._counts += increments
            if processed is not None and total_rows is not None:
                self._progress = _fraction(processed, total_rows)

    def finish_fill(self) -> None:
        with self._lock:
            self._progress = None

    def reset(self) -> None:
        """Zero every bin and clear progress; geometry is unchanged."""
        with self._lock:
            self._counts[:] = 0
            self._progress = None

    def snapshot_counts(self) -> IntArray:
        with self._lock:
            return self._counts.copy()

    def bin_centers(self) -> FloatArray:
        return self.axis.centers()

    def spectrum(
        self, start: float | None = None, end: float | None = None
    ) -> tuple[FloatArray, FloatArray]:
        """Bin centers and counts for the bins whose center lies in ``[start, end]``."""
        centers = self.axis.centers()
        counts = self.snapshot_counts().astype(np.float64)
        low = self.axis.min if start is None else start
        high = self.axis.max if end is None else end
        if low > high:
            low, high = high, low
        keep = (centers >= low) & (centers <= high)
        return centers[keep], counts[keep]

    def statistics(self, start: float | None = None, end: float | None = None) -> HistogramStatistics:
        """Integral, mean and standard deviation of the counts in a region."""
        x, y = self.spectrum(start, end)
        integral = float(y.sum())
        if integral <= 0:
            return HistogramStatistics(integral=0, mean=0.0, stdev=0.0)
        mean = float(np.sum(x * y) / integral)
        variance = float(np.sum(y * (x - mean) ** 2) / integral)
        return HistogramStatistics(integral=int(integral), mean=mean, stdev=float(np.sqrt(variance)))


def _fraction(row_index: int, total_rows: int) -> float:
    if total_rows <= 0:
        return 1.0
    return min(max(row_index / total_rows, 0.0), 1.0)
