"""Helpers shared by the CLI commands: path checks and device selection."""

import logging
from pathlib import Path
from typing import Callable, List, Optional

import click
from rich.console import Console

from ...config import Config, is_valid_config_path, is_valid_game_path
from ...core.device import AdbClient, Device
from ...core.sync import PromptOption, Prompter
from ...exceptions import NoDevicesError

console = Console()
logger = logging.getLogger(__name__)


def _ask_for_folder(
    message: str, validate: Callable[[Path], bool], invalid_hint: str
) -> Path:
    while True:
        path = click.prompt(
            message, type=click.Path(exists=True, file_okay=False, path_type=Path)
        )
        if validate(path):
            return path
        console.print(f"[red]{invalid_hint}[/red]")


def ensure_paths(
    config: Config,
    config_path: Optional[Path] = None,
    game_path: Optional[Path] = None,
) -> None:
    """Make sure both PC folders are valid, asking for them when they are not.

    Folders given on the command line are used for this run only, folders typed
    at the prompt are saved to the settings file.
    """
    if config_path:
        config.beat_saber_config_path = config_path
    if game_path:
        config.beat_saber_game_path = game_path

    if not is_valid_config_path(config.beat_saber_config_path):
        console.print(
            f"[red]Beat Saber config path {config.beat_saber_config_path} "
            "does not exist[/red]"
        )
        path = _ask_for_folder(
            "Please enter the path to your Beat Saber config folder",
            is_valid_config_path,
            "That folder does not contain PlayerData.dat",
        )
        config.save_custom_config_path(path)

    if not is_valid_game_path(config.beat_saber_game_path):
        console.print(
            f"[red]Beat Saber game path {config.beat_saber_game_path} "
            "does not exist[/red]"
        )
        path = _ask_for_folder(
            "Please enter the path to your Beat Saber game folder",
            is_valid_game_path,
            "That folder does not look like a Beat Saber install",
        )
        config.save_custom_game_path(path)


def select_device(
    client: AdbClient, prompter: Prompter, serial: Optional[str] = None
) -> Device:
    """Pick the device to sync with.

    Args:
        client: adb client
        prompter: Used when several devices are connected
        serial: Serial requested on the command line

    Raises:
        NoDevicesError: If no (matching) device is connected
    """
    devices: List[Device] = client.list_devices()
    if not devices:
        raise NoDevicesError(
            "No devices found, make sure you have a Quest connected "
            "and USB debugging enabled"
        )

    if serial:
        for device in devices:
            if device.serial == serial:
                return device
        raise NoDevicesError(f"Device {serial} is not connected")

    if len(devices) == 1:
        return devices[0]

    return prompter.ask(
        "Found multiple devices, please choose one",
        [PromptOption(str(device), device) for device in devices],
    )
