"""Exception taxonomy for HistoFit.

Every error the engine reports derives from :class:`HistoFitError` so callers
can catch the whole family at a UI or CLI boundary, while still handling the
individual cases (bad geometry, unknown histogram, unreadable data, degenerate
fit input) precisely.
"""

from __future__ import annotations


class HistoFitError(Exception):
    """Base class for all HistoFit-specific exceptions."""


class ConfigError(HistoFitError):
    """Invalid configuration (bin counts, inverted ranges, bad config files)."""


class HistogramNotFoundError(HistoFitError, LookupError):
    """A fill/reset/lookup targeted a histogram name that is not registered."""


class DataSourceError(HistoFitError):
    """Materializing columns from a tabular source failed."""


class DataIOError(HistoFitError):
    """Fit collection loading/saving errors (files, formats, permissions)."""


class FitError(HistoFitError):
    """Errors raised while fitting a model to data."""


class DegenerateDataError(FitError):
    """Too few points or constant data for the requested fit."""


__all__ = [
    "ConfigError",
    "DataIOError",
    "DataSourceError",
    "DegenerateDataError",
    "FitError",
    "HistoFitError",
    "HistogramNotFoundError",
]
