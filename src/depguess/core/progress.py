"""User-facing status output for the CLI.

Status lines go to stderr through a Rich console, so stdout stays clean for
package names or JSON. Usage::

    from depguess.core.progress import status

    status("Cannot list directory", style="error")  # ✗ Cannot list directory
    status("Skipped 2 files", style="warning")  # ! Skipped 2 files
"""

from __future__ import annotations

import structlog
from rich.console import Console
from rich.markup import escape

logger = structlog.get_logger()

_console = Console(stderr=True)

_STYLES = {
    "error": "[red]✗[/red] ",
    "warning": "[yellow]![/yellow] ",
    "info": "  ",
}


def status(message: str, *, style: str = "info") -> None:
    """Print a styled status message to stderr."""
    _console.print(f"{_STYLES.get(style, '')}{escape(message)}", highlight=False)
    logger.debug("status", message=message, style=style)


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    """Format a count with the right noun form, e.g. ``1 file`` / ``3 files``."""
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"
