"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
All CLI output should go through this module.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.table import Table

from metad.domain.metadata.model.aggregate import MetadataRecord

_STATUS_STYLES = {
    "rejected": "red",
    "pending": "yellow",
    "converted": "cyan",
    "merged": "cyan",
    "completed": "green",
}


class Console:
    """CLI output manager wrapping rich."""

    def __init__(self, *, force_terminal: bool | None = None, quiet: bool = False) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def warning(self, message: str) -> None:
        self._console.print(f"[yellow]⚠[/yellow] {message}")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._console.print(f"[dim]{message}[/dim]")

    def print(self, *args: Any, **kwargs: Any) -> None:
        self._console.print(*args, **kwargs)

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def records(self, records: list[MetadataRecord], *, title: str | None = None) -> None:
        """Print metadata records as a table, with status labels."""
        table = Table(title=title, show_header=True, header_style="bold")
        table.add_column("Station")
        table.add_column("Status")
        table.add_column("Submitted")
        table.add_column("Fingerprint", style="dim")
        table.add_column("Id", style="dim")

        for record in records:
            style = _STATUS_STYLES.get(record.status.value, "white")
            table.add_row(
                str(record.key),
                f"[{style}]{record.status.value}[/{style}] [dim]{record.status.label}[/dim]",
                record.created_at.strftime("%Y-%m-%d %H:%M"),
                record.sha256[:8] + "…",
                str(record.id),
            )

        self._console.print(table)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
