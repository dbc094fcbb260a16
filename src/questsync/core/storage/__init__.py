"""Per-side storage adapters for player data and playlists."""

from .backends import Backend, LocalBackend, RemoteBackend
from .playlist_store import PlaylistStore, parse_playlist
from .profile_store import ProfileStore, parse_player_data

__all__ = [
    "Backend",
    "LocalBackend",
    "RemoteBackend",
    "PlaylistStore",
    "ProfileStore",
    "parse_player_data",
    "parse_playlist",
]
