"""Logging configuration for HistoFit UI."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime
from typing import TYPE_CHECKING

from rich.logging import RichHandler

from histofit.ui.console import VERSION, console

if TYPE_CHECKING:
    from pathlib import Path

LOGGER_NAME = "histofit"


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_record = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "thread": record.threadName,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_record)


def setup_logging(
    log_file: Path | None = None,
    verbose: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """Configure the ``histofit`` logger for a CLI session.

    Without *verbose* and without *log_file* only warnings and errors reach
    the console.
    """
    logger = logging.getLogger(LOGGER_NAME)
    close_logging()
    logger.setLevel(level if (verbose or log_file) else logging.WARNING)

    console_handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
    )
    console_handler.setLevel(level if verbose else logging.WARNING)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        if log_file.suffix == ".json":
            file_handler.setFormatter(JSONFormatter())
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s | %(levelname)-5s | %(threadName)s | %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        logger.addHandler(file_handler)

        logger.info("HistoFit v%s - Session Started", VERSION)
        logger.info("Command: %s", " ".join(sys.argv))
        logger.info("Python: %s | Platform: %s", sys.version.split()[0], sys.platform)

    return logger


def close_logging() -> None:
    """Close and detach every handler installed by :func:`setup_logging`."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


__all__ = [
    "JSONFormatter",
    "close_logging",
    "setup_logging",
]
