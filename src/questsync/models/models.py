"""Data models for Beat Saber player data and playlists."""

import json
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from ..exceptions import NoPlayerError


class Side(str, Enum):
    """One of the two stores being reconciled."""

    LOCAL = "local"
    REMOTE = "remote"

    @property
    def label(self) -> str:
        """Name shown to the user."""
        return "PC" if self is Side.LOCAL else "Quest"

    @property
    def other(self) -> "Side":
        """The opposite side."""
        return Side.REMOTE if self is Side.LOCAL else Side.LOCAL


class LocalPlayer(BaseModel):
    """One entry of ``localPlayers`` in PlayerData.dat.

    Only the favourites are modelled, everything else is kept as extra fields so
    the entry round-trips unchanged.
    """

    favorites_level_ids: List[str] = Field(
        default_factory=list, alias="favoritesLevelIds"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class PlayerData(BaseModel):
    """The PlayerData.dat document."""

    local_players: List[LocalPlayer] = Field(
        default_factory=list, alias="localPlayers"
    )

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_json(self) -> str:
        """Serialize back to the on-disk representation."""
        return self.model_dump_json(by_alias=True)


def unique_ids(ids: Iterable[str]) -> List[str]:
    """Drop duplicate ids, keeping first-seen order."""
    seen = set()
    result = []
    for level_id in ids:
        if level_id not in seen:
            seen.add(level_id)
            result.append(level_id)
    return result


class PlayerProfile:
    """Favourites of the first local player, bound to its whole document.

    The document is kept so that writing the profile back persists every other
    field exactly as it was read.
    """

    def __init__(self, document: PlayerData) -> None:
        """Initialize profile.

        Args:
            document: Parsed PlayerData document

        Raises:
            NoPlayerError: If the document has no local players
        """
        if not document.local_players:
            raise NoPlayerError("No local players found in PlayerData.dat")
        self.document = document

    @property
    def player(self) -> LocalPlayer:
        """The player the profile operates on."""
        # TODO: let the user pick a player when the document holds several
        return self.document.local_players[0]

    @property
    def favorite_ids(self) -> List[str]:
        """Favourite level ids in stored order."""
        return list(self.player.favorites_level_ids)

    @favorite_ids.setter
    def favorite_ids(self, ids: Iterable[str]) -> None:
        self.player.favorites_level_ids = unique_ids(ids)

    def __repr__(self) -> str:
        """String representation of the profile."""
        return f"PlayerProfile(favorites={len(self.player.favorites_level_ids)})"


class PlaylistRecord(BaseModel):
    """A playlist document (.bplist).

    ``title`` is the identity used to match playlists across sides, ``items``
    is copied verbatim and never inspected.
    """

    title: str = Field(alias="playlistTitle")
    author: Optional[str] = Field(default=None, alias="playlistAuthor")
    items: List[Dict[str, Any]] = Field(default_factory=list, alias="songs")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    _source_name: Optional[str] = PrivateAttr(default=None)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Reject blank titles, they cannot identify a playlist."""
        if not v.strip():
            raise ValueError("playlistTitle must not be empty")
        return v

    @property
    def source_name(self) -> Optional[str]:
        """Entry name the record was read from, if any."""
        return self._source_name

    @source_name.setter
    def source_name(self, name: Optional[str]) -> None:
        self._source_name = name

    @property
    def file_name(self) -> str:
        """Entry name to use when writing the record."""
        if self._source_name:
            return self._source_name
        return f"{slugify_title(self.title)}.bplist"

    def to_json(self) -> str:
        """Serialize back to the on-disk representation."""
        data = self.model_dump(mode="json", by_alias=True)
        if self.author is None and "author" not in self.model_fields_set:
            data.pop("playlistAuthor", None)
        return json.dumps(data, indent=2)


def slugify_title(title: str) -> str:
    """Turn a playlist title into a safe file stem."""
    stem = re.sub(r"[^\w\- ]+", "", title).strip().replace(" ", "_")
    return stem or "playlist"
