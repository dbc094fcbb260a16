"""Bindings of the synced data kinds to their stores."""

import logging
from typing import Dict, List, Sequence, Set, Tuple, Type

from ...exceptions import NotFoundError
from ...models import PlayerProfile, PlaylistRecord, Side
from ..storage import PlaylistStore, ProfileStore
from .reconciler import playlist_title

logger = logging.getLogger(__name__)


class FavoritesCategory:
    """Favourite level ids of the player profile.

    Changes are made to the in-memory profiles and each changed side is written
    once on ``commit``.
    """

    name = "favorites"
    fatal_errors: Tuple[Type[Exception], ...] = (NotFoundError,)

    def __init__(self, store: ProfileStore) -> None:
        """Initialize favorites category.

        Args:
            store: Profile store for both sides
        """
        self.store = store
        self.profiles: Dict[Side, PlayerProfile] = {}
        self.changed: Set[Side] = set()

    def load(self) -> Tuple[List[str], List[str]]:
        """Read both profiles, remote first."""
        self.profiles = {
            Side.REMOTE: self.store.read_profile(Side.REMOTE),
            Side.LOCAL: self.store.read_profile(Side.LOCAL),
        }
        self.changed.clear()
        return (
            self.profiles[Side.LOCAL].favorite_ids,
            self.profiles[Side.REMOTE].favorite_ids,
        )

    def key(self, item: str) -> str:
        """Level ids are their own identity."""
        return item

    def describe(self, item: str) -> str:
        """Level id as shown in questions."""
        return item

    def adopt(self, side: Side, items: Sequence[str]) -> None:
        """Append ``items`` to the favourites of ``side``."""
        profile = self.profiles[side]
        profile.favorite_ids = profile.favorite_ids + list(items)
        self.changed.add(side)

    def remove(self, side: Side, items: Sequence[str]) -> None:
        """Drop ``items`` from the favourites of ``side``, keeping the rest."""
        dropped = set(items)
        profile = self.profiles[side]
        profile.favorite_ids = [i for i in profile.favorite_ids if i not in dropped]
        self.changed.add(side)

    def commit(self) -> None:
        """Write every changed profile back to its own side."""
        for side in (Side.REMOTE, Side.LOCAL):
            if side in self.changed:
                self.store.write_profile(side, self.profiles[side])
        self.changed.clear()


class PlaylistsCategory:
    """Playlists, matched by title.

    Every add or remove is written through the store immediately.
    """

    name = "playlists"
    fatal_errors: Tuple[Type[Exception], ...] = ()

    def __init__(self, store: PlaylistStore) -> None:
        """Initialize playlists category.

        Args:
            store: Playlist store for both sides
        """
        self.store = store

    def load(self) -> Tuple[List[PlaylistRecord], List[PlaylistRecord]]:
        """Read both playlist collections, remote first."""
        remote = self.store.list_playlists(Side.REMOTE)
        local = self.store.list_playlists(Side.LOCAL)
        return local, remote

    def key(self, item: PlaylistRecord) -> str:
        """Playlists match by title."""
        return playlist_title(item)

    def describe(self, item: PlaylistRecord) -> str:
        """Playlist title as shown in questions."""
        return item.title

    def adopt(self, side: Side, items: Sequence[PlaylistRecord]) -> None:
        """Copy each playlist to ``side``."""
        for record in items:
            self.store.add_playlist(side, record)

    def remove(self, side: Side, items: Sequence[PlaylistRecord]) -> None:
        """Delete each playlist from ``side``."""
        for record in items:
            self.store.remove_playlist(side, record.title)

    def commit(self) -> None:
        """Nothing is pending, writes already happened."""
        logger.debug("Playlists written through, nothing to commit")
