"""Interactive two-way sync between the PC and a Quest."""

import logging
from pathlib import Path
from typing import Optional

import click

from ...config import Config
from ...core.device import AdbClient
from ...core.sync import SyncOrchestrator
from ...exceptions import SyncError
from ..display.formatters import display_sync_result
from ..prompts import ConsolePrompter
from .common import console, ensure_paths, select_device

logger = logging.getLogger(__name__)


@click.command("sync")
@click.option("--device", "-d", "serial", help="Serial of the device to sync with")
@click.option(
    "--config-path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Beat Saber config folder (contains PlayerData.dat)",
)
@click.option(
    "--game-path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Beat Saber game folder (contains Playlists)",
)
def sync_command(
    serial: Optional[str],
    config_path: Optional[Path],
    game_path: Optional[Path],
) -> None:
    """Sync favorites and playlists between the PC and a Quest.

    Every difference is shown and you choose whether to copy the entries to
    the other side or remove them from the side that has them.
    """
    config = Config()
    ensure_paths(config, config_path, game_path)

    prompter = ConsolePrompter(console)
    client = AdbClient(config.adb_path)
    try:
        device = select_device(client, prompter, serial)
        console.print(f"[bold green]Syncing from {device.serial} to PC...[/bold green]")
        orchestrator = SyncOrchestrator(
            config=config,
            transport_factory=client.open_transport,
            prompter=prompter,
        )
        result = orchestrator.run(device)
    except SyncError as e:
        logger.debug("Sync stopped", exc_info=True)
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise click.Abort()

    display_sync_result(result)
