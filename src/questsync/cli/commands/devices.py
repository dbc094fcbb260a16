"""List connected devices."""

import click

from ...config import Config
from ...core.device import AdbClient
from ...exceptions import SyncError
from ..display.formatters import display_devices
from .common import console


@click.command("devices")
def devices_command() -> None:
    """List devices visible to adb."""
    config = Config()
    try:
        devices = AdbClient(config.adb_path).list_devices()
    except SyncError as e:
        console.print(f"[bold red]❌ {e}[/bold red]")
        raise click.Abort()
    display_devices(devices)
