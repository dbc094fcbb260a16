"""Sync session orchestrator.

Runs one sync session between the PC and a device:
1. Open the transport to the device
2. Sync favourites
3. Sync playlists
4. Release the transport

Both categories always run. A store error aborts only the category it happened
in, the fatal errors (missing player data, no player, device not ready) end the
session.
"""

import logging
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from ...config import Config
from ...exceptions import (
    FATAL_ERRORS,
    DeviceNotReadyError,
    NotFoundError,
    ParseError,
    StoreIOError,
)
from ...models import Side
from ..device.adb import Device, Transport
from ..storage import LocalBackend, PlaylistStore, ProfileStore, RemoteBackend
from ..storage.backends import Backend
from .categories import FavoritesCategory, PlaylistsCategory
from .conflict_resolver import (
    ConflictResolutionResult,
    ConflictResolver,
    Prompter,
    SyncCategory,
)
from .reconciler import DivergenceSet, reconcile

logger = logging.getLogger(__name__)

TransportFactory = Callable[[Device], Transport]

# Order in which one-sided divergences are put to the user
RESOLVE_ORDER = (Side.REMOTE, Side.LOCAL)


class SyncStage(str, Enum):
    """Ordered stages of a sync session."""

    INIT = "init"
    FAVORITES = "favorites"
    PLAYLISTS = "playlists"
    CLOSED = "closed"

    @classmethod
    def ordered(cls) -> List["SyncStage"]:
        """Return stages in execution order."""
        return [cls.INIT, cls.FAVORITES, cls.PLAYLISTS, cls.CLOSED]


def local_only(divergence: DivergenceSet) -> tuple:
    """Items only on the PC (reconcile is always called local first)."""
    return divergence.only_on_a


def remote_only(divergence: DivergenceSet) -> tuple:
    """Items only on the device."""
    return divergence.only_on_b


@dataclass
class SyncResult:
    """Result of a sync session."""

    device_serial: str = ""
    stages: List[SyncStage] = dataclass_field(default_factory=list)
    divergences: Dict[str, DivergenceSet] = dataclass_field(default_factory=dict)
    conflicts: ConflictResolutionResult = dataclass_field(
        default_factory=ConflictResolutionResult
    )
    errors: List[str] = dataclass_field(default_factory=list)
    warnings: List[str] = dataclass_field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Add an error message."""
        self.errors.append(error)
        logger.error(error)

    @property
    def in_sync(self) -> bool:
        """True when no category diverged."""
        return all(d.is_empty for d in self.divergences.values())

    def get_summary(self) -> Dict[str, Any]:
        """Get summary of the session."""
        summary: Dict[str, Any] = {
            "success": len(self.errors) == 0,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "device": self.device_serial,
            "stages": [stage.value for stage in self.stages],
            "conflicts_resolved": self.conflicts.conflicts_resolved,
        }
        for name, divergence in self.divergences.items():
            summary[name] = {
                "only_local": len(local_only(divergence)),
                "only_remote": len(remote_only(divergence)),
            }
        return summary


class SyncOrchestrator:
    """Sequences a sync session between the PC and one device."""

    def __init__(
        self,
        config: Config,
        transport_factory: TransportFactory,
        prompter: Optional[Prompter] = None,
        local_backend: Optional[Backend] = None,
    ) -> None:
        """Initialize sync orchestrator.

        Args:
            config: Application configuration (paths on both sides)
            transport_factory: Opens a transport to a device
            prompter: Asks the user how to resolve divergences, not needed
                for ``diff``
            local_backend: Backend for the PC side, the filesystem by default
        """
        self.config = config
        self.transport_factory = transport_factory
        self.prompter = prompter
        self.local_backend = local_backend or LocalBackend()

    def _stores(self, transport: Transport) -> tuple:
        backends: Dict[Side, Backend] = {
            Side.LOCAL: self.local_backend,
            Side.REMOTE: RemoteBackend(transport),
        }
        profile_store = ProfileStore(
            backends,
            {
                Side.LOCAL: str(self.config.pc_playerdata_path),
                Side.REMOTE: self.config.quest_playerdata_path,
            },
        )
        playlist_store = PlaylistStore(
            backends,
            {
                Side.LOCAL: str(self.config.pc_playlists_path),
                Side.REMOTE: self.config.quest_playlists_path,
            },
        )
        return profile_store, playlist_store

    @staticmethod
    def _check_device(device: Device) -> None:
        if not device.is_ready:
            raise DeviceNotReadyError(
                f"Device {device.serial} is {device.state}, "
                "please authorize it in the headset"
            )

    def _close(self, transport: Transport) -> None:
        try:
            transport.close()
        except Exception as e:
            logger.warning("Failed to release transport: %s", e)

    def run(self, device: Device) -> SyncResult:
        """Run a full sync session with ``device``.

        Raises:
            DeviceNotReadyError: If the device is not authorized, before any I/O
            NotFoundError: If a PlayerData document is missing
            NoPlayerError: If a PlayerData document has no local player
        """
        if self.prompter is None:
            raise ValueError("A prompter is required to resolve divergences")
        self._check_device(device)

        result = SyncResult(device_serial=device.serial)
        resolver = ConflictResolver(self.prompter)
        logger.info("Syncing %s with PC", device.serial)

        transport = self.transport_factory(device)
        result.stages.append(SyncStage.INIT)
        try:
            profile_store, playlist_store = self._stores(transport)
            categories = (
                (SyncStage.FAVORITES, FavoritesCategory(profile_store)),
                (SyncStage.PLAYLISTS, PlaylistsCategory(playlist_store)),
            )
            for stage, category in categories:
                self._run_category(category, resolver, result)
                result.stages.append(stage)
            result.warnings.extend(playlist_store.warnings)
        finally:
            self._close(transport)
        result.stages.append(SyncStage.CLOSED)

        logger.info("Sync finished: %s", result.get_summary())
        return result

    def _run_category(
        self, category: SyncCategory, resolver: ConflictResolver, result: SyncResult
    ) -> None:
        try:
            result.divergences[category.name] = self.sync_category(
                category, resolver, result.conflicts
            )
        except FATAL_ERRORS:
            raise
        except category.fatal_errors:
            raise
        except (StoreIOError, ParseError, NotFoundError) as e:
            result.add_error(f"{category.name.capitalize()} sync aborted: {e}")

    def sync_category(
        self,
        category: SyncCategory,
        resolver: ConflictResolver,
        conflicts: ConflictResolutionResult,
    ) -> DivergenceSet:
        """Reconcile one category and resolve its divergences.

        Both sides are read before anything is written. Each non-empty
        one-sided divergence is asked about once.

        Returns:
            The divergence found before resolution
        """
        local_items, remote_items = category.load()
        divergence = reconcile(local_items, remote_items, key=category.key)
        if divergence.is_empty:
            logger.info("%s already in sync", category.name.capitalize())
            return divergence

        held = {
            Side.LOCAL: local_only(divergence),
            Side.REMOTE: remote_only(divergence),
        }
        for holder in RESOLVE_ORDER:
            conflict = resolver.resolve(category, holder, held[holder])
            if conflict:
                conflicts.add_conflict(conflict)
        category.commit()
        return divergence

    def diff(self, device: Device) -> Dict[str, DivergenceSet]:
        """Reconcile both categories without asking or writing anything.

        Raises:
            DeviceNotReadyError: If the device is not authorized, before any I/O
        """
        self._check_device(device)
        transport = self.transport_factory(device)
        try:
            profile_store, playlist_store = self._stores(transport)
            divergences: Dict[str, DivergenceSet] = {}
            for category in (
                FavoritesCategory(profile_store),
                PlaylistsCategory(playlist_store),
            ):
                local_items, remote_items = category.load()
                divergences[category.name] = reconcile(
                    local_items, remote_items, key=category.key
                )
            return divergences
        finally:
            self._close(transport)
