"""Configuration management for the quest-sync application."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env file from config directory or project root
config_env = Path(__file__).parent.parent.parent / "config" / ".env"
if config_env.exists():
    load_dotenv(config_env)
else:
    load_dotenv()

PLAYERDATA_FILE_NAME = "PlayerData.dat"
PLAYLISTS_DIR_NAME = "Playlists"
GAME_EXECUTABLE_NAME = "Beat Saber.exe"

QUEST_PLAYERDATA_PATH = (
    "/sdcard/Android/data/com.beatgames.beatsaber/files/PlayerData.dat"
)
QUEST_PLAYLISTS_PATH = (
    "/sdcard/ModData/com.beatgames.beatsaber/Mods/PlaylistManager/Playlists"
)

# Steam app id of Beat Saber, used for the Proton prefix on Linux
BEAT_SABER_APP_ID = "620980"


def default_config_path() -> Path:
    """Default location of the Beat Saber config folder on this platform."""
    relative = Path("AppData", "LocalLow", "Hyperbolic Magnetism", "Beat Saber")
    if sys.platform.startswith("win"):
        return Path(os.getenv("USERPROFILE", str(Path.home()))) / relative
    prefix = (
        Path.home()
        / ".steam"
        / "steam"
        / "steamapps"
        / "compatdata"
        / BEAT_SABER_APP_ID
        / "pfx"
        / "drive_c"
        / "users"
        / "steamuser"
    )
    return prefix / relative


def default_game_path() -> Path:
    """Default Beat Saber install folder in the Steam library."""
    if sys.platform.startswith("win"):
        return Path("C:/Program Files (x86)/Steam/steamapps/common/Beat Saber")
    return Path.home() / ".steam" / "steam" / "steamapps" / "common" / "Beat Saber"


def is_valid_config_path(path: Optional[Path]) -> bool:
    """Check that a folder holds PlayerData.dat."""
    if path is None:
        return False
    path = Path(path)
    return path.is_dir() and (path / PLAYERDATA_FILE_NAME).is_file()


def is_valid_game_path(path: Optional[Path]) -> bool:
    """Check that a folder looks like a Beat Saber install."""
    if path is None:
        return False
    path = Path(path)
    if not path.is_dir():
        return False
    return (path / GAME_EXECUTABLE_NAME).exists() or (
        path / PLAYLISTS_DIR_NAME
    ).is_dir()


class Config:
    """Application configuration.

    Precedence for the PC paths is: environment variable, then the custom path
    saved in the settings file, then the platform default.
    """

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        self.settings_file = Path(
            os.getenv(
                "QUEST_SYNC_SETTINGS_FILE",
                str(Path.home() / ".quest-sync" / "settings.json"),
            )
        )
        settings = self._load_settings()

        self.beat_saber_config_path = self._resolve_path(
            "QUEST_SYNC_CONFIG_PATH",
            settings.get("custom_config_path"),
            default_config_path(),
        )
        self.beat_saber_game_path = self._resolve_path(
            "QUEST_SYNC_GAME_PATH",
            settings.get("custom_game_path"),
            default_game_path(),
        )

        # adb / device settings
        self.adb_path = os.getenv("QUEST_SYNC_ADB_PATH", "adb")
        self.quest_playerdata_path = os.getenv(
            "QUEST_SYNC_QUEST_PLAYERDATA_PATH", QUEST_PLAYERDATA_PATH
        )
        self.quest_playlists_path = os.getenv(
            "QUEST_SYNC_QUEST_PLAYLISTS_PATH", QUEST_PLAYLISTS_PATH
        )

    @staticmethod
    def _resolve_path(env_var: str, saved: Optional[str], default: Path) -> Path:
        value = os.getenv(env_var)
        if value:
            return Path(value)
        if saved:
            return Path(saved)
        return default

    @property
    def pc_playerdata_path(self) -> Path:
        """PlayerData.dat on the PC."""
        return self.beat_saber_config_path / PLAYERDATA_FILE_NAME

    @property
    def pc_playlists_path(self) -> Path:
        """Playlist folder on the PC."""
        return self.beat_saber_game_path / PLAYLISTS_DIR_NAME

    def _load_settings(self) -> Dict[str, Any]:
        """Load persisted settings, empty when missing or unreadable."""
        if not self.settings_file.exists():
            return {}
        try:
            with open(self.settings_file, "r", encoding="utf-8") as file:
                data = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(
                "Ignoring unreadable settings file %s: %s", self.settings_file, e
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed settings file %s", self.settings_file)
            return {}
        return data

    def _save_setting(self, key: str, value: str) -> None:
        settings = self._load_settings()
        settings[key] = value
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w", encoding="utf-8") as file:
            json.dump(settings, file, indent=2)
        logger.debug("Saved %s to %s", key, self.settings_file)

    def save_custom_config_path(self, path: Path) -> None:
        """Persist a user chosen config folder and use it from now on."""
        self.beat_saber_config_path = Path(path)
        self._save_setting("custom_config_path", str(path))

    def save_custom_game_path(self, path: Path) -> None:
        """Persist a user chosen game folder and use it from now on."""
        self.beat_saber_game_path = Path(path)
        self._save_setting("custom_game_path", str(path))

    def as_dict(self) -> Dict[str, str]:
        """Effective settings for display."""
        return {
            "Config path": str(self.beat_saber_config_path),
            "Game path": str(self.beat_saber_game_path),
            "PC PlayerData": str(self.pc_playerdata_path),
            "PC playlists": str(self.pc_playlists_path),
            "Quest PlayerData": self.quest_playerdata_path,
            "Quest playlists": self.quest_playlists_path,
            "adb": self.adb_path,
            "Settings file": str(self.settings_file),
        }


def get_config() -> Config:
    """Get application configuration."""
    return Config()
