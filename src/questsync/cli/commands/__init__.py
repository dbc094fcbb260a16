"""CLI command modules."""

from .devices import devices_command
from .diff import diff_command
from .show_config import config_command
from .sync import sync_command

__all__ = [
    "config_command",
    "devices_command",
    "diff_command",
    "sync_command",
]
