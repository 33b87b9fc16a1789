"""Asynchronous population of histograms from a tabular source.

Each fill request becomes one task on a thread pool:

1. build the range predicate from the histogram's bin geometry,
2. materialize the selected column(s) from the source,
3. walk the values in source order, taking the histogram lock for every
   contribution (or every ``batch_size`` values) and publishing progress.

Bin geometry is immutable and the very same :class:`Axis` objects drive both
the row selection and the counting, so what is selected is always what gets
binned. Tasks never raise into the scheduler: a failure is stored on the
:class:`FillTask`, logged and reported exactly once when the task finishes.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from histofit.core.shared.events import Event, EventDispatcher, EventType, FillProgressEvent
from histofit.core.shared.reporter import NullReporter, Reporter
from histofit.core.source import Predicate

if TYPE_CHECKING:
    from collections.abc import Callable

    from histofit.core.histograms.histogram1d import Histogram1D
    from histofit.core.histograms.histogram2d import Histogram2D
    from histofit.core.source import TabularSource

log = logging.getLogger(__name__)

# Progress events are throttled to roughly this many per task.
_PROGRESS_EVENTS_PER_TASK = 100


@dataclass(eq=False)
class FillTask:
    """Handle on one in-flight (or finished) histogram fill."""

    histogram: str
    columns: tuple[str, ...]
    future: Future[int] = field(repr=False)
    error: BaseException | None = None
    _finished: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    @property
    def done(self) -> bool:
        """True once the task ran and its outcome has been reported."""
        return self._finished.is_set()

    @property
    def succeeded(self) -> bool:
        return self.done and self.error is None

    def join(self, timeout: float | None = None) -> bool:
        return self._finished.wait(timeout)

    @property
    def rows(self) -> int | None:
        """Number of rows materialized for the fill, once it succeeded."""
        if not self.succeeded:
            return None
        return self.future.result()


class FillScheduler:
    """Thread-pool runner for histogram fill tasks."""

    def __init__(
        self,
        max_workers: int | None = None,
        batch_size: int = 1,
        dispatcher: EventDispatcher | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        if batch_size < 1:
            msg = f"batch_size must be at least 1, got {batch_size}"
            raise ValueError(msg)
        self.batch_size = batch_size
        self.dispatcher = dispatcher or EventDispatcher()
        self.reporter = reporter or NullReporter()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="histofit-fill"
        )
        self._pending: list[FillTask] = []
        self._lock = threading.Lock()

    def __enter__(self) -> FillScheduler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    @property
    def pending(self) -> list[FillTask]:
        """Tasks submitted but not yet collected by :meth:`poll` or :meth:`wait`."""
        with self._lock:
            return list(self._pending)

    def submit_1d(self, hist: Histogram1D, source: TabularSource, column: str) -> FillTask:
        """Dispatch a fill of *hist* from *column* and return immediately."""
        axis = hist.axis
        predicate = Predicate.range(column, axis.min, axis.max)
        log.info("Starting to fill histogram '%s' with data from column '%s'", hist.name, column)
        return self._submit(
            hist.name,
            (column,),
            lambda: self._fill_1d(hist, source, column, predicate),
        )

    def submit_2d(
        self, hist: Histogram2D, source: TabularSource, x_column: str, y_column: str
    ) -> FillTask:
        """Dispatch a fill of *hist* from the column pair and return immediately."""
        predicate = Predicate.range(x_column, hist.x_axis.min, hist.x_axis.max) & Predicate.range(
            y_column, hist.y_axis.min, hist.y_axis.max
        )
        hist.set_columns(x_column, y_column)
        log.info(
            "Starting to fill 2D histogram '%s' with data from columns '%s' and '%s'",
            hist.name,
            x_column,
            y_column,
        )
        return self._submit(
            hist.name,
            (x_column, y_column),
            lambda: self._fill_2d(hist, source, x_column, y_column, predicate),
        )

    def poll(self) -> list[FillTask]:
        """Collect the tasks that finished since the last poll."""
        with self._lock:
            finished = [task for task in self._pending if task.done]
            self._pending = [task for task in self._pending if not task.done]
        return finished

    def wait(self, timeout: float | None = None) -> list[FillTask]:
        """Block until every pending task finished (or *timeout* elapsed), then poll."""
        deadline = None if timeout is None else time.monotonic() + timeout
        for task in self.pending:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            task.join(remaining)
        return self.poll()

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; running fills are left to complete."""
        self._executor.shutdown(wait=wait)

    def _submit(
        self, name: str, columns: tuple[str, ...], work: Callable[[], int]
    ) -> FillTask:
        future = self._executor.submit(work)
        task = FillTask(histogram=name, columns=columns, future=future)
        with self._lock:
            self._pending.append(task)
        future.add_done_callback(lambda _: self._on_done(task))
        return task

    def _on_done(self, task: FillTask) -> None:
        # Runs exactly once per future, on the worker (or the submitting) thread.
        try:
            exc = task.future.exception()
            if exc is None:
                log.info("Completed filling histogram '%s'", task.histogram)
                event = Event(
                    EventType.FILL_COMPLETED,
                    {"histogram": task.histogram, "rows": task.future.result()},
                )
            else:
                task.error = exc
                log.error("Filling histogram '%s' failed: %s", task.histogram, exc)
                self.reporter.error(f"Filling histogram '{task.histogram}' failed: {exc}")
                event = Event(EventType.FILL_FAILED, {"histogram": task.histogram, "error": exc})
            self.dispatcher.dispatch(event)
        finally:
            task._finished.set()

    def _fill_1d(
        self, hist: Histogram1D, source: TabularSource, column: str, predicate: Predicate
    ) -> int:
        log.debug("Thread started for filling histogram '%s'", hist.name)
        values = source.select([column]).filter(predicate).collect()[column]
        total = len(values)
        log.info(
            "Histogram '%s' will be filled with %d values from column '%s'",
            hist.name,
            total,
            column,
        )
        self._started(hist.name, total)
        step = self._progress_step(total)
        try:
            if self.batch_size == 1:
                for i, value in enumerate(values.tolist()):
                    hist.fill(value, i, total)
                    if (i + 1) % step == 0:
                        self._progressed(hist.name, i + 1, total)
            else:
                for start in range(0, total, self.batch_size):
                    stop = min(start + self.batch_size, total)
                    hist.contribute(values[start:stop], stop, total)
                    if stop % step < self.batch_size or stop == total:
                        self._progressed(hist.name, stop, total)
        finally:
            hist.finish_fill()
        return total

    def _fill_2d(
        self,
        hist: Histogram2D,
        source: TabularSource,
        x_column: str,
        y_column: str,
        predicate: Predicate,
    ) -> int:
        log.debug("Thread started for filling 2D histogram '%s'", hist.name)
        data = source.select([x_column, y_column]).filter(predicate).collect()
        x_values, y_values = data[x_column], data[y_column]
        total = len(x_values)
        log.info(
            "2D histogram '%s' will be filled with %d value pairs from columns '%s' and '%s'",
            hist.name,
            total,
            x_column,
            y_column,
        )
        self._started(hist.name, total)
        step = self._progress_step(total)
        try:
            if self.batch_size == 1:
                for i, (x, y) in enumerate(zip(x_values.tolist(), y_values.tolist(), strict=True)):
                    hist.fill(x, y, i, total)
                    if (i + 1) % step == 0:
                        self._progressed(hist.name, i + 1, total)
            else:
                for start in range(0, total, self.batch_size):
                    stop = min(start + self.batch_size, total)
                    hist.contribute(x_values[start:stop], y_values[start:stop], stop, total)
                    if stop % step < self.batch_size or stop == total:
                        self._progressed(hist.name, stop, total)
        finally:
            hist.finish_fill()
        return total

    def _progress_step(self, total: int) -> int:
        return max(1, total // _PROGRESS_EVENTS_PER_TASK)

    def _started(self, name: str, total: int) -> None:
        self.dispatcher.dispatch(Event(EventType.FILL_STARTED, {"histogram": name, "rows": total}))

    def _progressed(self, name: str, processed: int, total: int) -> None:
        self.dispatcher.dispatch(
            FillProgressEvent(
                EventType.FILL_PROGRESS, {}, histogram=name, processed=processed, total=total
            )
        )
