"""Histogram service: runs the configured histogram script over a data source."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from histofit.core.histograms.registry import Histogram, HistogramRegistry
from histofit.core.histograms.scheduler import FillScheduler
from histofit.core.shared.reporter import LoggingReporter, NullReporter, Reporter

if TYPE_CHECKING:
    from histofit.core.domain.config import HistoFitConfig
    from histofit.core.histograms.scheduler import FillTask
    from histofit.core.shared.events import EventDispatcher
    from histofit.core.source import TabularSource

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class FillSummary:
    """Outcome of a completed fill run.

    Attributes
    ----------
        registry: The registry holding the filled histograms
        tasks: Every fill task that finished within the timeout
        unfinished: Fill tasks still running when the timeout elapsed
        elapsed: Wall-clock seconds spent dispatching and waiting
    """

    registry: HistogramRegistry
    tasks: list[FillTask] = field(default_factory=list)
    unfinished: list[FillTask] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def failed(self) -> list[FillTask]:
        return [task for task in self.tasks if task.error is not None]

    @property
    def success(self) -> bool:
        return not self.failed and not self.unfinished

    def histograms(self) -> list[Histogram]:
        return self.registry.histograms()


class HistogramService:
    """Builds a registry from configuration and fills it.

    Example:
        service = HistogramService()
        summary = service.fill(config, DataFrameSource.from_files(paths))
        energy = summary.registry.get_1d("Energy")
    """

    def __init__(
        self,
        reporter: Reporter | None = None,
        dispatcher: EventDispatcher | None = None,
    ) -> None:
        self._reporter = reporter or LoggingReporter(__name__)
        # Registry and scheduler log their own errors; only an explicit reporter is forwarded.
        self._core_reporter = reporter or NullReporter()
        self._dispatcher = dispatcher

    def build_registry(self, config: HistoFitConfig) -> HistogramRegistry:
        """Create every configured histogram, placed in its labelled container."""
        scheduler = FillScheduler(
            max_workers=config.fill.max_workers,
            batch_size=config.fill.batch_size,
            dispatcher=self._dispatcher,
            reporter=self._core_reporter,
        )
        registry = HistogramRegistry(scheduler=scheduler, reporter=self._core_reporter)
        for spec in config.histograms:
            container = registry.layout.get_or_create(spec.container) if spec.container else None
            registry.add_1d(spec.name, spec.bins, spec.range, container)
        for spec2d in config.histograms2d:
            container = (
                registry.layout.get_or_create(spec2d.container) if spec2d.container else None
            )
            registry.add_2d(spec2d.name, spec2d.bins, spec2d.range, container)
        return registry

    def fill(
        self,
        config: HistoFitConfig,
        source: TabularSource,
        timeout: float | None = None,
    ) -> FillSummary:
        """Fill every configured histogram from *source* and wait for completion.

        Individual task failures are reported and collected in the summary;
        they do not stop the other fills. With a *timeout*, fills still running
        when it elapses are listed in ``unfinished`` and left to complete in
        the background.
        """
        start = time.perf_counter()
        registry = self.build_registry(config)
        n_fills = len(config.histograms) + len(config.histograms2d)
        self._reporter.action(f"Filling {n_fills} histogram(s)...")

        for spec in config.histograms:
            registry.fill_1d(spec.name, source, spec.column)
        for spec2d in config.histograms2d:
            registry.fill_2d(spec2d.name, source, spec2d.x_column, spec2d.y_column)

        tasks = registry.wait(timeout)
        unfinished = registry.scheduler.pending
        # Timed-out fills keep running in the pool; do not block on them here.
        registry.close(wait=not unfinished)
        elapsed = time.perf_counter() - start

        summary = FillSummary(
            registry=registry, tasks=tasks, unfinished=unfinished, elapsed=elapsed
        )
        if unfinished:
            names = ", ".join(task.histogram for task in unfinished)
            log.warning("Fill timed out after %.2fs, still running: %s", elapsed, names)
            self._reporter.warning(f"Timed out after {elapsed:.2f}s waiting for: {names}")
        elif summary.success:
            self._reporter.success(f"Filled {len(tasks)} histogram(s) in {elapsed:.2f}s")
        else:
            self._reporter.warning(
                f"{len(summary.failed)} of {len(tasks)} fill(s) failed after {elapsed:.2f}s"
            )
        log.info("Fill run finished: %d task(s), %d failed", len(tasks), len(summary.failed))
        return summary
