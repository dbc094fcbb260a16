"""Display formatters for CLI output."""

import logging
from typing import Dict, List

from rich.console import Console
from rich.table import Table

from ...core.device import Device
from ...core.sync import DivergenceSet, SyncResult
from ...models import PlaylistRecord

console = Console()
logger = logging.getLogger(__name__)


def _names(items: tuple) -> List[str]:
    return [
        item.title if isinstance(item, PlaylistRecord) else str(item) for item in items
    ]


def display_devices(devices: List[Device]) -> None:
    """Show connected devices and their state."""
    if not devices:
        console.print("[yellow]No devices connected[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Serial", style="cyan")
    table.add_column("State")
    table.add_column("Ready", justify="center")
    for device in devices:
        table.add_row(
            device.serial,
            device.state,
            "[green]✓[/green]" if device.is_ready else "[red]✗[/red]",
        )
    console.print(table)


def display_divergences(divergences: Dict[str, DivergenceSet]) -> None:
    """Show what differs between PC and Quest per category."""
    for name, divergence in divergences.items():
        if divergence.is_empty:
            console.print(f"[dim]✓ {name.capitalize()} in sync[/dim]")
            continue

        console.print(f"\n[bold blue]{name.capitalize()}[/bold blue]")
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Only on PC", style="cyan")
        table.add_column("Only on Quest", style="green")
        local = _names(divergence.only_on_a)
        remote = _names(divergence.only_on_b)
        for row in range(max(len(local), len(remote))):
            table.add_row(
                local[row] if row < len(local) else "",
                remote[row] if row < len(remote) else "",
            )
        console.print(table)


def display_sync_result(result: SyncResult) -> None:
    """Show the summary of a sync session."""
    summary = result.get_summary()

    if result.in_sync and not result.errors:
        console.print("\n[bold green]✅ PC and Quest already in sync[/bold green]")
    elif result.errors:
        console.print("\n[bold yellow]⚠️  Sync finished with errors[/bold yellow]")
    else:
        console.print("\n[bold green]✅ Sync complete![/bold green]")

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Category", style="cyan")
    table.add_column("Only on PC", justify="right")
    table.add_column("Only on Quest", justify="right")
    for name in ("favorites", "playlists"):
        counts = summary.get(name)
        if counts is None:
            table.add_row(name.capitalize(), "[red]aborted[/red]", "[red]aborted[/red]")
        else:
            table.add_row(
                name.capitalize(),
                str(counts["only_local"]),
                str(counts["only_remote"]),
            )
    console.print(table)

    for conflict in result.conflicts.conflicts:
        console.print(f"  [green]→[/green] {conflict}")
    for warning in result.warnings:
        console.print(f"  [yellow]⚠ {warning}[/yellow]")
    for error in result.errors:
        console.print(f"  [red]✗ {error}[/red]")
