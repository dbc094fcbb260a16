"""Read and write the player profile on either side."""

import json
import logging
from typing import Dict

from pydantic import ValidationError

from ...exceptions import ParseError
from ...models import PlayerData, PlayerProfile, Side
from .backends import Backend

logger = logging.getLogger(__name__)


def parse_player_data(raw: bytes, source: str = "") -> PlayerData:
    """Decode PlayerData.dat content.

    Args:
        raw: File content
        source: Path used in error messages

    Returns:
        Parsed document

    Raises:
        ParseError: If the content is not a PlayerData JSON document
    """
    try:
        # The game pads the file with whitespace
        data = json.loads(raw.decode("utf-8-sig").strip())
        return PlayerData.model_validate(data)
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise ParseError(f"Cannot parse player data {source}: {e}", source) from e


class ProfileStore:
    """Uniform get/set of the player profile for the local and remote side."""

    def __init__(self, backends: Dict[Side, Backend], paths: Dict[Side, str]) -> None:
        """Initialize profile store.

        Args:
            backends: File backend per side
            paths: PlayerData.dat location per side
        """
        self.backends = backends
        self.paths = paths

    def read_profile(self, side: Side) -> PlayerProfile:
        """Read the profile of ``side``.

        Raises:
            NotFoundError: If the document is missing
            ParseError: If the document cannot be decoded
            NoPlayerError: If the document holds no local player
            StoreIOError: If reading fails
        """
        path = self.paths[side]
        raw = self.backends[side].read_file(path)
        profile = PlayerProfile(parse_player_data(raw, path))
        logger.debug(
            "Read %s profile from %s: %d favorites",
            side.label,
            path,
            len(profile.favorite_ids),
        )
        return profile

    def write_profile(self, side: Side, profile: PlayerProfile) -> None:
        """Persist ``profile`` to ``side`` as one whole document.

        Raises:
            StoreIOError: If writing fails
        """
        path = self.paths[side]
        self.backends[side].write_file(path, profile.document.to_json().encode("utf-8"))
        logger.info("Saved %s player data (%s)", side.label, path)
