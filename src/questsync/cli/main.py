"""Command-line interface for the quest-sync application.

This is the main entry point that delegates to command modules.
"""

from pathlib import Path
from typing import Optional

import click

from ..utils.logging_config import configure_third_party_loggers, setup_logging
from .commands import config_command, devices_command, diff_command, sync_command


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Set logging level",
)
@click.option("--log-file", type=click.Path(), help="Log to file")
@click.version_option(package_name="quest-sync")
def cli(log_level: str, log_file: Optional[str]) -> None:
    """Quest Sync.

    Two-way sync of Beat Saber favorites and playlists between a PC and a
    Quest headset connected over adb.
    """
    setup_logging(log_level=log_level, log_file=Path(log_file) if log_file else None)
    configure_third_party_loggers()


cli.add_command(sync_command)
cli.add_command(diff_command)
cli.add_command(devices_command)
cli.add_command(config_command)


if __name__ == "__main__":
    cli()
