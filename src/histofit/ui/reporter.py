"""Reporter that writes fill and fit status to the rich console."""

from __future__ import annotations

from histofit.ui.messages import action, error, info, success, warning


class ConsoleReporter:
    """Console-backed implementation of the core ``Reporter`` protocol.

    Services use it to announce work ("Filling 3 histogram(s)") and outcomes.
    Nested messages are indented by *indent* levels.
    """

    def __init__(self, indent: int = 0) -> None:
        self.indent = indent

    def action(self, message: str) -> None:
        action(message)

    def info(self, message: str) -> None:
        info(message, self.indent)

    def warning(self, message: str) -> None:
        warning(message, self.indent)

    def error(self, message: str) -> None:
        error(message, self.indent)

    def success(self, message: str) -> None:
        success(message, self.indent)
