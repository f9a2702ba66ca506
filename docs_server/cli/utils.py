"""Output helpers for the Docs Server CLI."""

from rich.console import Console
from rich.table import Table

console = Console()


def echo_success(message: str) -> None:
    """Print success message."""
    console.print(f"[green]✓ {message}[/green]")


def echo_error(message: str) -> None:
    """Print error message."""
    console.print(f"[red]✗ {message}[/red]")


def echo_warning(message: str) -> None:
    """Print warning message."""
    console.print(f"[yellow]⚠ {message}[/yellow]")


def echo_info(message: str) -> None:
    """Print info message."""
    console.print(f"[blue]ℹ {message}[/blue]")


def print_key_values(rows: list[tuple[str, str]], title: str = "") -> None:
    """Print a two-column rich table."""
    table = Table(title=title, show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, value)
    console.print(table)
