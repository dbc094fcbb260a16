"""Set difference between the two sides of a sync.

Given two collections and a key function, computes which items exist only on
one side. Items are matched by key alone:
- favourites are matched by the level id itself
- playlists are matched by title, their songs are never compared
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, Iterable, Sequence, Tuple, TypeVar

from ...models import PlaylistRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _identity(item: T) -> T:
    return item


def playlist_title(record: PlaylistRecord) -> str:
    """Identity key of a playlist."""
    return record.title


@dataclass(frozen=True)
class DivergenceSet(Generic[T]):
    """Items present on one side only.

    Attributes:
        only_on_a: Items of A whose key is not in B, in A's order
        only_on_b: Items of B whose key is not in A, in B's order
    """

    only_on_a: Tuple[T, ...] = ()
    only_on_b: Tuple[T, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when both sides hold the same keys."""
        return not self.only_on_a and not self.only_on_b

    def __repr__(self) -> str:
        """String representation of the divergence."""
        return (
            f"DivergenceSet(only_on_a={len(self.only_on_a)}, "
            f"only_on_b={len(self.only_on_b)})"
        )


def _only_in(
    items: Iterable[T], other_keys: set, key: Callable[[T], Hashable]
) -> Tuple[T, ...]:
    return tuple(item for item in items if key(item) not in other_keys)


def reconcile(
    a: Sequence[T],
    b: Sequence[T],
    key: Callable[[T], Hashable] = _identity,
) -> DivergenceSet[T]:
    """Compute the two one-sided differences of ``a`` and ``b``.

    Runs in O(|a| + |b|) using a key index per side. The output keeps the input
    iteration order.

    Args:
        a: Items of the first side
        b: Items of the second side
        key: Identity function used for matching

    Returns:
        DivergenceSet with the items only in ``a`` and only in ``b``
    """
    keys_a = {key(item) for item in a}
    keys_b = {key(item) for item in b}

    divergence = DivergenceSet(
        only_on_a=_only_in(a, keys_b, key),
        only_on_b=_only_in(b, keys_a, key),
    )
    logger.debug("Reconciled %d vs %d items: %r", len(a), len(b), divergence)
    return divergence


def reconcile_favorites(a: Sequence[str], b: Sequence[str]) -> DivergenceSet[str]:
    """Difference of two favourite id lists."""
    return reconcile(a, b)


def reconcile_playlists(
    a: Sequence[PlaylistRecord], b: Sequence[PlaylistRecord]
) -> DivergenceSet[PlaylistRecord]:
    """Difference of two playlist collections, matched by title."""
    return reconcile(a, b, key=playlist_title)
