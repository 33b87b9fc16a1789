"""Shared rich console and the HistoFit colour theme."""

import os
import sys

from rich.console import Console
from rich.theme import Theme

from histofit import __version__

HISTOFIT_THEME = Theme(
    {
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "header": "bold cyan",
        "path": "blue underline",
        # Histogram tables
        "histogram": "cyan",
        "container": "magenta",
        "counts": "green",
        # Fit tables
        "parameter": "bold green",
        "progress.description": "bold white",
    }
)

console = Console(theme=HISTOFIT_THEME)

VERSION = __version__

_PLAIN_ICONS = {"check": "+", "warn": "!", "error": "x", "info": ">", "bullet": "-"}
_EMOJI_ICONS = {"check": "✓", "warn": "⚠", "error": "✗", "info": "▸", "bullet": "‣"}


def icon(name: str) -> str:
    """Status glyph for *name*; ASCII when emoji are off or the encoding is not UTF."""
    disabled = os.getenv("HISTOFIT_NO_EMOJI", "").lower() in {"1", "true", "yes"}
    encoding = getattr(console, "encoding", None) or sys.getdefaultencoding()
    icons = _PLAIN_ICONS if disabled or "utf" not in encoding.lower() else _EMOJI_ICONS
    return icons.get(name, icons["bullet"])


__all__ = [
    "HISTOFIT_THEME",
    "VERSION",
    "console",
    "icon",
]
