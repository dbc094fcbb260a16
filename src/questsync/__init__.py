"""Quest Sync.

Two-way sync of Beat Saber favorites and playlists between a PC and a Quest
headset connected over adb, with the user deciding every difference.
"""

__version__ = "1.0.0"

from .config import Config
from .core.sync import SyncOrchestrator, SyncResult
from .models import PlayerProfile, PlaylistRecord, Side

__all__ = [
    "Config",
    "PlayerProfile",
    "PlaylistRecord",
    "Side",
    "SyncOrchestrator",
    "SyncResult",
]
