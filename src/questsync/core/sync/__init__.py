"""Synchronization module.

Handles reconciliation, conflict resolution and session orchestration.
"""

from .categories import FavoritesCategory, PlaylistsCategory
from .conflict_resolver import (
    Conflict,
    ConflictResolutionResult,
    ConflictResolver,
    Decision,
    DecisionKind,
    PromptOption,
    Prompter,
    build_options,
)
from .orchestrator import SyncOrchestrator, SyncResult, SyncStage
from .reconciler import (
    DivergenceSet,
    reconcile,
    reconcile_favorites,
    reconcile_playlists,
)

__all__ = [
    # Reconciliation
    "DivergenceSet",
    "reconcile",
    "reconcile_favorites",
    "reconcile_playlists",
    # Conflict resolution
    "Conflict",
    "ConflictResolutionResult",
    "ConflictResolver",
    "Decision",
    "DecisionKind",
    "PromptOption",
    "Prompter",
    "build_options",
    # Categories
    "FavoritesCategory",
    "PlaylistsCategory",
    # Orchestration
    "SyncOrchestrator",
    "SyncResult",
    "SyncStage",
]
