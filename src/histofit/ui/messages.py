"""UI messages and status indicators."""

from __future__ import annotations

from typing import TYPE_CHECKING

from histofit.ui.console import console, icon

if TYPE_CHECKING:
    from pathlib import Path

__all__ = [
    "action",
    "error",
    "info",
    "print_next_steps",
    "show_error_with_details",
    "show_file_not_found",
    "show_header",
    "success",
    "warning",
]


def show_header(text: str) -> None:
    """Display a prominent section header."""
    console.print("[header]" + "━" * 60 + "[/header]")
    console.print(f"[header]  {text}[/header]")
    console.print("[header]" + "━" * 60 + "[/header]")


def success(message: str, indent: int = 0) -> None:
    spaces = "  " * indent
    console.print(f"{spaces}[success]{icon('check')}[/success] {message}")


def warning(message: str, indent: int = 0) -> None:
    spaces = "  " * indent
    console.print(f"{spaces}[warning]{icon('warn')}[/warning]  {message}")


def error(message: str, indent: int = 0) -> None:
    spaces = "  " * indent
    console.print(f"{spaces}[error]{icon('error')}[/error] {message}")


def info(message: str, indent: int = 0) -> None:
    spaces = "  " * indent
    console.print(f"{spaces}[dim]{icon('info')}[/dim] {message}")


def action(message: str) -> None:
    """Display an action/process message with visual separation."""
    console.print(f"\n[bold yellow]»[/bold yellow] {message}")


def show_error_with_details(context: str, err: Exception, suggestion: str | None = None) -> None:
    """Display an error with its type and an optional hint."""
    error(f"{context} failed")
    console.print(f"  [error]{type(err).__name__}[/error]: {err!s}", highlight=False)
    if suggestion:
        info(f"Suggestion: {suggestion}")


def show_file_not_found(filepath: Path) -> None:
    error(f"File not found: [path]{filepath}[/path]")


def print_next_steps(steps: list[str]) -> None:
    """Print suggested next steps for the user."""
    console.print("\n[header]Next steps:[/header]")
    for i, step in enumerate(steps, 1):
        console.print(f"  {i}. {step}")
    console.print()
