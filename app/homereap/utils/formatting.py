"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

if TYPE_CHECKING:
    from homereap.models.outcome import Outcome

THEME = Theme(
    {
        "text": "#ffffff",
        "muted": "#b2bec3",
        "bold_header": "bold #69B9A1",
        "border": "#29526d",
        "success": "#03b971",
        "warning": "#f5b332",
        "error": "#f53263",
        "info": "#0ec1c8",
    }
)


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals, None otherwise so that
    log files receive plain text.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances
console = Console(theme=THEME, color_system=_detect_color_system())
err_console = Console(theme=THEME, stderr=True, color_system=_detect_color_system())


def create_outcome_table(title: str = "Reclaim Outcomes") -> Table:
    """Create a pre-configured table for per-candidate outcomes.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for outcome display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Volume", no_wrap=True)
    table.add_column("Mountpoint", style="muted")
    table.add_column("Owner", style="text")
    table.add_column("State")
    table.add_column("Key", justify="center")
    table.add_column("Signals", style="warning")
    table.add_column("Steps", style="info", justify="right")
    return table


def format_outcome_row(outcome: Outcome) -> tuple[str, str, str, str, str, str, str]:
    """Format an outcome as a table row with styling.

    Args:
        outcome: The outcome to format.

    Returns:
        Tuple of (volume, mountpoint, owner, state, key, signals, steps) with
        Rich markup.
    """
    candidate = outcome.candidate
    if outcome.reclaimed:
        state = f"[success]{outcome.mount_state.value}[/]"
    else:
        state = f"[error]{outcome.mount_state.value}[/]"

    if outcome.key_unloaded:
        key = "[success]unloaded[/]"
    elif outcome.key_unload_attempted:
        key = "[warning]failed[/]"
    else:
        key = "[muted]-[/]"

    signals = ",".join(a.step.severity.value for a in outcome.signals() if a.step.severity)

    return (
        candidate.volume_id,
        candidate.mountpoint,
        candidate.owner,
        state,
        key,
        signals or "[muted]-[/]",
        str(len(outcome.attempts)),
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
