"""Show the effective configuration."""

import click
from rich.table import Table

from ...config import Config, is_valid_config_path, is_valid_game_path
from .common import console


@click.command("config")
def config_command() -> None:
    """Show paths and settings quest-sync will use."""
    config = Config()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for name, value in config.as_dict().items():
        table.add_row(name, value)
    console.print(table)

    if not is_valid_config_path(config.beat_saber_config_path):
        console.print("[yellow]⚠️  Config path has no PlayerData.dat[/yellow]")
    if not is_valid_game_path(config.beat_saber_game_path):
        console.print("[yellow]⚠️  Game path is not a Beat Saber install[/yellow]")
