"""Show differences between the PC and a Quest without changing anything."""

import logging
from typing import Optional

import click

from ...config import Config
from ...core.device import AdbClient
from ...core.sync import SyncOrchestrator
from ...exceptions import SyncError
from ..display.formatters import display_divergences
from ..prompts import ConsolePrompter
from .common import console, ensure_paths, select_device

logger = logging.getLogger(__name__)


@click.command("diff")
@click.option("--device", "-d", "serial", help="Serial of the device to compare")
def diff_command(serial: Optional[str]) -> None:
    """Show favorites and playlists that exist on only one side."""
    config = Config()
    ensure_paths(config)

    client = AdbClient(config.adb_path)
    try:
        device = select_device(client, ConsolePrompter(console), serial)
        divergences = SyncOrchestrator(
            config=config, transport_factory=client.open_transport
        ).diff(device)
    except SyncError as e:
        logger.debug("Diff failed", exc_info=True)
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise click.Abort()

    display_divergences(divergences)
