"""Name-keyed collection of histograms with asynchronous filling."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from histofit.core.histograms.histogram1d import Histogram1D
from histofit.core.histograms.histogram2d import Histogram2D
from histofit.core.histograms.layout import ContainerId, Layout
from histofit.core.histograms.scheduler import FillScheduler, FillTask
from histofit.core.shared.exceptions import ConfigError, HistogramNotFoundError
from histofit.core.shared.reporter import NullReporter, Reporter

if TYPE_CHECKING:
    from histofit.core.source import TabularSource

log = logging.getLogger(__name__)

Histogram = Histogram1D | Histogram2D


class HistogramRegistry:
    """Creates, resets, and fills histograms by name.

    Adding a histogram whose name already exists (with the same
    dimensionality) resets its counts in place instead of creating a
    duplicate; the existing bin geometry is kept. Fill requests run on the
    registry's :class:`FillScheduler` and return without waiting.

    Example:
        >>> registry = HistogramRegistry()
        >>> registry.add_1d("Energy", 512, (0.0, 4096.0))
        >>> registry.fill_1d("Energy", source, "energy")
        True
        >>> registry.wait()
    """

    def __init__(
        self,
        scheduler: FillScheduler | None = None,
        reporter: Reporter | None = None,
        layout: Layout | None = None,
    ) -> None:
        self.reporter = reporter or NullReporter()
        self.scheduler = scheduler or FillScheduler(reporter=self.reporter)
        self.layout = layout or Layout()
        self._histograms: dict[str, Histogram] = {}

    def __enter__(self) -> HistogramRegistry:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __contains__(self, name: object) -> bool:
        return name in self._histograms

    def __len__(self) -> int:
        return len(self._histograms)

    def names(self) -> list[str]:
        return list(self._histograms)

    def histograms(self) -> list[Histogram]:
        return list(self._histograms.values())

    def get(self, name: str) -> Histogram:
        try:
            return self._histograms[name]
        except KeyError:
            msg = f"Histogram '{name}' not found"
            raise HistogramNotFoundError(msg) from None

    def get_1d(self, name: str) -> Histogram1D:
        hist = self.get(name)
        if not isinstance(hist, Histogram1D):
            msg = f"Histogram '{name}' is not one-dimensional"
            raise HistogramNotFoundError(msg)
        return hist

    def get_2d(self, name: str) -> Histogram2D:
        hist = self.get(name)
        if not isinstance(hist, Histogram2D):
            msg = f"Histogram '{name}' is not two-dimensional"
            raise HistogramNotFoundError(msg)
        return hist

    def create_container(self, label: str) -> ContainerId:
        return self.layout.create_container(label)

    def container_for(self, name: str) -> ContainerId | None:
        return self.layout.container_of(name)

    def add_1d(
        self,
        name: str,
        bins: int,
        value_range: tuple[float, float],
        container: ContainerId | None = None,
    ) -> Histogram1D:
        """Create a 1D histogram, or reset the existing one of that name."""
        existing = self._existing(name, Histogram1D)
        if existing is not None:
            existing.reset()
            return existing

        hist = Histogram1D(name, bins, value_range)
        self._register(hist, container)
        return hist

    def add_2d(
        self,
        name: str,
        bins: tuple[int, int],
        value_range: tuple[tuple[float, float], tuple[float, float]],
        container: ContainerId | None = None,
    ) -> Histogram2D:
        """Create a 2D histogram, or reset the existing one of that name."""
        existing = self._existing(name, Histogram2D)
        if existing is not None:
            existing.reset()
            return existing

        hist = Histogram2D(name, bins, value_range)
        self._register(hist, container)
        return hist

    def fill_1d(self, name: str, source: TabularSource, column: str) -> bool:
        """Dispatch an asynchronous fill; ``False`` if no such 1D histogram."""
        hist = self._lookup(name, Histogram1D)
        if hist is None:
            return False
        self.scheduler.submit_1d(hist, source, column)
        return True

    def fill_2d(self, name: str, source: TabularSource, x_column: str, y_column: str) -> bool:
        """Dispatch an asynchronous fill; ``False`` if no such 2D histogram."""
        hist = self._lookup(name, Histogram2D)
        if hist is None:
            return False
        self.scheduler.submit_2d(hist, source, x_column, y_column)
        return True

    def add_and_fill_1d(
        self,
        name: str,
        source: TabularSource,
        column: str,
        bins: int,
        value_range: tuple[float, float],
        container: ContainerId | None = None,
    ) -> bool:
        self.add_1d(name, bins, value_range, container)
        return self.fill_1d(name, source, column)

    def add_and_fill_2d(
        self,
        name: str,
        source: TabularSource,
        x_column: str,
        y_column: str,
        bins: tuple[int, int],
        value_range: tuple[tuple[float, float], tuple[float, float]],
        container: ContainerId | None = None,
    ) -> bool:
        self.add_2d(name, bins, value_range, container)
        return self.fill_2d(name, source, x_column, y_column)

    def reset(self, name: str) -> bool:
        hist = self._lookup(name, (Histogram1D, Histogram2D))
        if hist is None:
            return False
        hist.reset()
        return True

    def remove(self, name: str) -> bool:
        """Forget a histogram; fills already running keep their own reference."""
        if self._lookup(name, (Histogram1D, Histogram2D)) is None:
            return False
        del self._histograms[name]
        self.layout.discard(name)
        return True

    def reorganize_layout(self) -> None:
        self.layout.reorganize()

    def progress(self) -> dict[str, float | None]:
        return {name: hist.progress for name, hist in self._histograms.items()}

    def poll(self) -> list[FillTask]:
        return self.scheduler.poll()

    def wait(self, timeout: float | None = None) -> list[FillTask]:
        return self.scheduler.wait(timeout)

    def close(self, wait: bool = True) -> None:
        self.scheduler.shutdown(wait=wait)

    def _existing(self, name: str, kind: type[Histogram]) -> Histogram | None:
        hist = self._histograms.get(name)
        if hist is None:
            return None
        if not isinstance(hist, kind):
            msg = (
                f"Histogram '{name}' already exists as {type(hist).__name__}, "
                f"cannot add it as {kind.__name__}"
            )
            raise ConfigError(msg)
        return hist

    def _lookup(self, name: str, kind: type | tuple[type, ...]) -> Histogram | None:
        hist = self._histograms.get(name)
        if hist is None or not isinstance(hist, kind):
            log.error("Histogram '%s' not found", name)
            self.reporter.error(f"Histogram '{name}' not found")
            return None
        return hist

    def _register(self, hist: Histogram, container: ContainerId | None) -> None:
        self._histograms[hist.name] = hist
        if container is None:
            container = self.layout.fallback()
        try:
            self.layout.place(hist.name, container)
        except KeyError:
            log.error("Invalid container id %s for '%s', using fallback", container, hist.name)
            self.layout.place(hist.name, self.layout.fallback())
