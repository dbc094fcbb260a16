"""List, add and remove playlists on either side."""

import json
import logging
from typing import Dict, List, Optional, Set

from pydantic import ValidationError

from ...exceptions import NotFoundError, ParseError
from ...models import PlaylistRecord, Side
from .backends import Backend

logger = logging.getLogger(__name__)

PLAYLIST_SUFFIXES = (".bplist", ".json")


def is_playlist_entry(name: str) -> bool:
    """Check whether a directory entry looks like a playlist document."""
    return name.lower().endswith(PLAYLIST_SUFFIXES)


def parse_playlist(raw: bytes, source: str = "") -> PlaylistRecord:
    """Decode a playlist document.

    Raises:
        ParseError: If the content is not a playlist document
    """
    try:
        data = json.loads(raw.decode("utf-8-sig").strip())
        record = PlaylistRecord.model_validate(data)
    except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise ParseError(f"Cannot parse playlist {source}: {e}", source) from e
    record.source_name = source or None
    return record


class PlaylistStore:
    """Uniform list/add/remove of playlists for the local and remote side.

    Entries that fail to decode while listing are skipped and recorded in
    ``warnings``.
    """

    def __init__(
        self, backends: Dict[Side, Backend], directories: Dict[Side, str]
    ) -> None:
        """Initialize playlist store.

        Args:
            backends: File backend per side
            directories: Playlist directory per side
        """
        self.backends = backends
        self.directories = directories
        self.warnings: List[str] = []
        # title -> entry names, per side, from the last listing
        self._index: Dict[Side, Dict[str, List[str]]] = {}
        # every entry name seen per side, skipped entries included
        self._names: Dict[Side, Set[str]] = {}

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        logger.warning(message)

    def list_playlists(self, side: Side) -> List[PlaylistRecord]:
        """Read every playlist of ``side``.

        A missing playlist directory lists as empty.

        Raises:
            StoreIOError: If the directory or an entry cannot be read
        """
        backend = self.backends[side]
        directory = self.directories[side]
        try:
            names = backend.list_directory(directory)
        except NotFoundError:
            logger.info("No %s playlist folder at %s", side.label, directory)
            names = []

        records: List[PlaylistRecord] = []
        index: Dict[str, List[str]] = {}
        for name in names:
            if not is_playlist_entry(name):
                continue
            try:
                raw = backend.read_file(backend.join(directory, name))
                record = parse_playlist(raw, name)
            except (ParseError, NotFoundError) as e:
                self._warn(f"Skipping {side.label} playlist {name}: {e}")
                continue
            records.append(record)
            index.setdefault(record.title, []).append(name)

        self._index[side] = index
        self._names[side] = set(names)
        logger.debug("Found %d %s playlists", len(records), side.label)
        return records

    def _entries(self, side: Side) -> Dict[str, List[str]]:
        if side not in self._index:
            self.list_playlists(side)
        return self._index[side]

    def _free_name(self, side: Side, record: PlaylistRecord) -> str:
        """Pick an entry name no other title or skipped entry uses."""
        own = set(self._entries(side).get(record.title, []))
        taken = self._names[side] - own
        name = record.file_name
        if name not in taken:
            return name
        stem, dot, suffix = name.rpartition(".")
        if not dot:
            stem, suffix = name, "bplist"
        counter = 2
        while f"{stem}_{counter}.{suffix}" in taken:
            counter += 1
        return f"{stem}_{counter}.{suffix}"

    def find_entry(self, side: Side, title: str) -> Optional[str]:
        """Entry name of the first playlist titled ``title`` on ``side``."""
        names = self._entries(side).get(title)
        return names[0] if names else None

    def add_playlist(self, side: Side, record: PlaylistRecord) -> None:
        """Create ``record`` on ``side``.

        A playlist with the same title is overwritten (last write wins).

        Raises:
            StoreIOError: If writing fails
        """
        backend = self.backends[side]
        name = self.find_entry(side, record.title) or self._free_name(side, record)
        path = backend.join(self.directories[side], name)
        backend.write_file(path, record.to_json().encode("utf-8"))
        self._entries(side)[record.title] = [name]
        self._names[side].add(name)
        logger.info("Added playlist '%s' to %s (%s)", record.title, side.label, name)

    def remove_playlist(self, side: Side, title: str) -> None:
        """Delete the playlist titled ``title`` from ``side``.

        Removing a playlist that does not exist is a no-op.

        Raises:
            StoreIOError: If deleting fails
        """
        backend = self.backends[side]
        entries = self._entries(side)
        names = entries.get(title, [])
        if not names:
            logger.debug("Playlist '%s' already absent from %s", title, side.label)
            return
        for name in names:
            backend.remove_file(backend.join(self.directories[side], name))
            self._names[side].discard(name)
        del entries[title]
        logger.info("Removed playlist '%s' from %s", title, side.label)
