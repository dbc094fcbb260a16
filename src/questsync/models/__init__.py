"""Data models for quest-sync."""

from .models import (
    LocalPlayer,
    PlayerData,
    PlayerProfile,
    PlaylistRecord,
    Side,
    slugify_title,
    unique_ids,
)

__all__ = [
    "LocalPlayer",
    "PlayerData",
    "PlayerProfile",
    "PlaylistRecord",
    "Side",
    "slugify_title",
    "unique_ids",
]
