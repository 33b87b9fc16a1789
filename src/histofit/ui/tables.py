"""UI tables for displaying structured data.

This module provides functions for creating and displaying Rich tables
with consistent styling across the application.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich import box
from rich.table import Table

from histofit.ui.console import console

if TYPE_CHECKING:
    from collections.abc import Sequence

    from histofit.core.histograms.registry import Histogram

__all__ = [
    "create_table",
    "print_histogram_table",
    "print_rows",
    "print_summary",
]


def create_table(title: str | None = None, show_header: bool = True) -> Table:
    """Create a standard table with consistent styling.

    Args:
        title: Optional table title
        show_header: Whether to show table header

    Returns
    -------
        Configured Table instance
    """
    return Table(
        title=title,
        title_style="header" if title else None,
        box=box.ROUNDED,
        show_header=show_header,
        header_style="bold cyan",
        border_style="dim",
    )


def print_summary(items: dict[str, Any], title: str = "Summary") -> None:
    """Print a standard two-column summary table."""
    table = create_table(title, show_header=False)
    table.add_column("Item", style="parameter")
    table.add_column("Value")

    for key, value in items.items():
        table.add_row(key, str(value))

    console.print(table)


def print_rows(rows: Sequence[dict[str, str]], title: str | None = None) -> None:
    """Print homogeneous dict rows, one column per key of the first row."""
    if not rows:
        return
    table = create_table(title)
    for key in rows[0]:
        table.add_column(key, justify="right" if key not in {"Fit", "Peak"} else "center")
    for row in rows:
        table.add_row(*(row.get(key, "") for key in rows[0]))
    console.print(table)


def print_histogram_table(
    histograms: Sequence[Histogram],
    containers: dict[str, str] | None = None,
    title: str = "Histograms",
) -> None:
    """One line per histogram: container, shape, range and total count."""
    containers = containers or {}
    table = create_table(title)
    table.add_column("Name", style="histogram")
    table.add_column("Container", style="container")
    table.add_column("Bins", justify="right")
    table.add_column("Range")
    table.add_column("Total", style="counts", justify="right")
    for hist in histograms:
        bins = hist.bin_count
        shape = str(bins) if isinstance(bins, int) else " x ".join(str(b) for b in bins)
        table.add_row(
            hist.name,
            containers.get(hist.name, ""),
            shape,
            str(hist.range),
            str(hist.total),
        )
    console.print(table)
