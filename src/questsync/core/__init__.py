"""Core modules for quest-sync.

- device: adb discovery and the remote transport
- storage: uniform per-side access to player data and playlists
- sync: reconciliation, conflict resolution and session orchestration
"""

__all__: list[str] = []
