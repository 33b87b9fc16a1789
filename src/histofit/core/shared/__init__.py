"""Shared foundational utilities for HistoFit."""

from histofit.core.shared.events import (
    Event,
    EventDispatcher,
    EventType,
    FillProgressEvent,
)
from histofit.core.shared.exceptions import (
    ConfigError,
    DataIOError,
    DataSourceError,
    DegenerateDataError,
    FitError,
    HistoFitError,
    HistogramNotFoundError,
)
from histofit.core.shared.reporter import LoggingReporter, NullReporter, Reporter

__all__ = [
    "ConfigError",
    "DataIOError",
    "DataSourceError",
    "DegenerateDataError",
    "Event",
    "EventDispatcher",
    "EventType",
    "FillProgressEvent",
    "FitError",
    "HistoFitError",
    "HistogramNotFoundError",
    "LoggingReporter",
    "NullReporter",
    "Reporter",
]
