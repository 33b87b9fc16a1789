"""UI and terminal output styling for HistoFit.

Submodules:
- console: Theme and console instance
- logging: Logging setup (Rich console handler, optional log file)
- messages: Status messages (success, error, warning, etc.)
- tables: Table display utilities
- progress: Live fill progress bars
"""

from histofit.ui.console import HISTOFIT_THEME, VERSION, console, icon
from histofit.ui.logging import JSONFormatter, close_logging, setup_logging
from histofit.ui.messages import (
    action,
    error,
    info,
    print_next_steps,
    show_error_with_details,
    show_file_not_found,
    show_header,
    success,
    warning,
)
from histofit.ui.progress import FillProgressDisplay, create_progress
from histofit.ui.reporter import ConsoleReporter
from histofit.ui.tables import create_table, print_histogram_table, print_rows, print_summary

__all__ = [
    "HISTOFIT_THEME",
    "VERSION",
    "ConsoleReporter",
    "FillProgressDisplay",
    "JSONFormatter",
    "action",
    "close_logging",
    "console",
    "create_progress",
    "create_table",
    "error",
    "icon",
    "info",
    "print_histogram_table",
    "print_next_steps",
    "print_rows",
    "print_summary",
    "setup_logging",
    "show_error_with_details",
    "show_file_not_found",
    "show_header",
    "success",
    "warning",
]
