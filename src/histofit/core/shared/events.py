"""Lightweight event dispatcher for reporting long-running fill progress."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable


class EventType(Enum):
    """Supported event types emitted by the fill scheduler."""

    FILL_STARTED = auto()
    FILL_PROGRESS = auto()
    FILL_COMPLETED = auto()
    FILL_FAILED = auto()


@dataclass(slots=True)
class Event:
    """Base event carrying a type and arbitrary metadata."""

    event_type: EventType
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class FillProgressEvent(Event):
    """Event emitted while a histogram fill walks its rows."""

    histogram: str = ""
    processed: int = 0
    total: int = 0

    @property
    def fraction(self) -> float:
        return self.processed / self.total if self.total else 1.0


class EventHandler(Protocol):
    """Protocol implemented by event handlers."""

    def handle(self, event: Event) -> None:  # pragma: no cover - thin interface
        """Process an incoming event."""


class EventDispatcher:
    """Simple pub-sub dispatcher for internal progress events.

    Fill workers dispatch from their own threads, so the handler table is
    guarded and handlers must be thread-safe themselves.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[EventHandler]] = {}
        self._lock = threading.Lock()

    def subscribe(
        self,
        event_type: EventType,
        handler: EventHandler | Callable[[Event], None],
    ) -> None:
        """Register a handler for a particular event type."""
        if callable(handler) and not hasattr(handler, "handle"):
            handler = _CallableHandler(handler)

        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)

    def dispatch(self, event: Event) -> None:
        """Send an event to all subscribed handlers."""
        with self._lock:
            handlers = list(self._handlers.get(event.event_type, []))
        for handler in handlers:
            handler.handle(event)


class _CallableHandler:
    """Adapter that allows bare callables to act as event handlers."""

    def __init__(self, func: Callable[[Event], None]) -> None:
        self._func = func

    def handle(self, event: Event) -> None:  # pragma: no cover - trivial adapter
        self._func(event)
