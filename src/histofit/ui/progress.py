"""Live progress bars for histogram fills.

Fill workers publish events from their own threads; rich's ``Progress`` is
safe to update from any thread, so the handlers below write to it directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from histofit.core.shared.events import Event, EventType, FillProgressEvent
from histofit.ui.console import console, icon

if TYPE_CHECKING:
    from histofit.core.shared.events import EventDispatcher

__all__ = [
    "FillProgressDisplay",
    "create_progress",
]


def create_progress(transient: bool = False) -> Progress:
    """Create a standard progress bar with consistent styling."""
    return Progress(
        SpinnerColumn(finished_text=f"[success]{icon('check')}[/success]", spinner_name="dots"),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(complete_style="cyan", finished_style="green"),
        TaskProgressColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=transient,
    )


class FillProgressDisplay:
    """One progress bar per histogram, driven by fill events.

    Example:
        dispatcher = EventDispatcher()
        with FillProgressDisplay(dispatcher):
            service = HistogramService(dispatcher=dispatcher)
            service.fill(config, source)
    """

    def __init__(self, dispatcher: EventDispatcher, transient: bool = False) -> None:
        self.progress = create_progress(transient=transient)
        self._tasks: dict[str, TaskID] = {}
        dispatcher.subscribe(EventType.FILL_STARTED, self._on_started)
        dispatcher.subscribe(EventType.FILL_PROGRESS, self._on_progress)
        dispatcher.subscribe(EventType.FILL_COMPLETED, self._on_finished)
        dispatcher.subscribe(EventType.FILL_FAILED, self._on_finished)

    def __enter__(self) -> FillProgressDisplay:
        self.progress.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.progress.stop()

    def _on_started(self, event: Event) -> None:
        name = str(event.data["histogram"])
        self._tasks[name] = self.progress.add_task(name, total=int(event.data["rows"]))

    def _on_progress(self, event: Event) -> None:
        if not isinstance(event, FillProgressEvent):
            return
        task_id = self._tasks.get(event.histogram)
        if task_id is not None:
            self.progress.update(task_id, completed=event.processed)

    def _on_finished(self, event: Event) -> None:
        task_id = self._tasks.get(str(event.data["histogram"]))
        if task_id is None:
            return
        if event.event_type is EventType.FILL_FAILED:
            self.progress.update(task_id, description=f"[error]{event.data['histogram']}[/error]")
        else:
            self.progress.update(task_id, completed=int(event.data["rows"]))
