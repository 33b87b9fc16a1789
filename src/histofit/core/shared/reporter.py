"""Progress and status reporting abstraction.

The registry and the fill scheduler report lookups, dispatches, and failed
tasks through a :class:`Reporter` instead of printing, so the same engine
runs silently in tests, through ``logging`` in a service, or through the
Rich console (``histofit.ui.reporter.ConsoleReporter``) in the CLI.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class Reporter(Protocol):
    """Protocol for progress and status reporting."""

    def action(self, message: str) -> None:
        """Report an action being performed, e.g. 'Filling Energy...'."""
        ...

    def info(self, message: str) -> None:
        """Report informational message."""
        ...

    def warning(self, message: str) -> None:
        """Report a non-fatal issue the user should be aware of."""
        ...

    def error(self, message: str) -> None:
        """Report an error that did not stop execution."""
        ...

    def success(self, message: str) -> None:
        """Report successful completion."""
        ...


class NullReporter:
    """Silent reporter that discards all messages.

    Example:
        >>> reporter = NullReporter()
        >>> reporter.error("Histogram 'x' not found")  # No output
    """

    def action(self, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass


class LoggingReporter:
    """Reporter that writes to Python logging.

    Maps reporter methods to logging levels.

    Example:
        >>> reporter = LoggingReporter("histofit.registry")
        >>> reporter.action("Filling histogram 'Energy'")  # INFO level
        >>> reporter.error("Histogram 'dE' not found")  # ERROR level
    """

    def __init__(self, logger_name: str = "histofit") -> None:
        """Initialize with a logger name.

        Args:
            logger_name: Name for the logger (default: 'histofit')
        """
        self._logger = logging.getLogger(logger_name)

    def action(self, message: str) -> None:
        """Log action at INFO level with prefix."""
        self._logger.info("[ACTION] %s", message)

    def info(self, message: str) -> None:
        """Log info at INFO level."""
        self._logger.info(message)

    def warning(self, message: str) -> None:
        """Log warning at WARNING level."""
        self._logger.warning(message)

    def error(self, message: str) -> None:
        """Log error at ERROR level."""
        self._logger.error(message)

    def success(self, message: str) -> None:
        """Log success at INFO level with prefix."""
        self._logger.info("[SUCCESS] %s", message)
