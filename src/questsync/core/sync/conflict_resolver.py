"""Conflict resolution for sync divergences.

Every divergence (items held by one side only) is put to the user as a single
question with exactly two answers:
- add the items to the other side
- remove the items from the side that holds them

The answer applies to the whole divergent set. There is no "do nothing" answer
and no per-item choice.
"""

import logging
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, Hashable, List, Optional, Protocol, Sequence, Tuple, Type

from ...models import Side

logger = logging.getLogger(__name__)

# Number of item names quoted in a question before it is shortened
PREVIEW_LIMIT = 5


class DecisionKind(str, Enum):
    """What to do with a divergent set."""

    ADOPT_INTO = "adopt_into"  # Copy the items into the given side
    REMOVE_FROM = "remove_from"  # Delete the items from the given side


@dataclass(frozen=True)
class Decision:
    """A resolved choice, bound to the side it acts on."""

    kind: DecisionKind
    side: Side

    @classmethod
    def adopt_into(cls, side: Side) -> "Decision":
        """Copy the divergent items into ``side``."""
        return cls(DecisionKind.ADOPT_INTO, side)

    @classmethod
    def remove_from(cls, side: Side) -> "Decision":
        """Delete the divergent items from ``side``."""
        return cls(DecisionKind.REMOVE_FROM, side)

    def __str__(self) -> str:
        """String representation of the decision."""
        if self.kind is DecisionKind.ADOPT_INTO:
            return f"add to {self.side.label}"
        return f"remove from {self.side.label}"


@dataclass(frozen=True)
class PromptOption:
    """One named answer offered to the user."""

    label: str
    value: Any


class Prompter(Protocol):
    """Asks the user a question with a fixed set of answers."""

    def ask(self, question: str, options: Sequence[PromptOption]) -> Any:
        """Return the ``value`` of the chosen option."""
        ...


class SyncCategory(Protocol):
    """A kind of data synced between the two sides."""

    name: str
    # Errors that end the session when this category raises them
    fatal_errors: Tuple[Type[Exception], ...]

    def load(self) -> tuple:
        """Read the (local, remote) items."""
        ...

    def key(self, item: Any) -> Hashable:
        """Identity of an item across sides."""
        ...

    def describe(self, item: Any) -> str:
        """Short name of an item for display."""
        ...

    def adopt(self, side: Side, items: Sequence[Any]) -> None:
        """Copy ``items`` into ``side``."""
        ...

    def remove(self, side: Side, items: Sequence[Any]) -> None:
        """Delete ``items`` from ``side``."""
        ...

    def commit(self) -> None:
        """Persist pending changes."""
        ...


@dataclass
class Conflict:
    """A divergence that was put to the user."""

    category: str
    holder: Side
    keys: List[str]
    decision: Optional[Decision] = None

    def __str__(self) -> str:
        """String representation of conflict."""
        parts = [
            f"{self.category}: {len(self.keys)} only on {self.holder.label}",
        ]
        if self.decision:
            parts.append(f"[resolved: {self.decision}]")
        return " ".join(parts)


@dataclass
class ConflictResolutionResult:
    """Result of conflict resolution across a session."""

    conflicts_detected: int = 0
    conflicts_resolved: int = 0
    conflicts: List[Conflict] = dataclass_field(default_factory=list)

    def add_conflict(self, conflict: Conflict) -> None:
        """Add a conflict to the result."""
        self.conflicts.append(conflict)
        self.conflicts_detected += 1
        if conflict.decision:
            self.conflicts_resolved += 1


def build_options(holder: Side) -> List[PromptOption]:
    """The two answers for items held only by ``holder``."""
    target = holder.other
    return [
        PromptOption(f"Add to {target.label}", Decision.adopt_into(target)),
        PromptOption(f"Remove from {holder.label}", Decision.remove_from(holder)),
    ]


class ConflictResolver:
    """Asks the user about divergences and applies the answers."""

    def __init__(self, prompter: Prompter) -> None:
        """Initialize conflict resolver.

        Args:
            prompter: Collaborator that puts questions to the user
        """
        self.prompter = prompter

    def build_question(
        self, category: SyncCategory, holder: Side, items: Sequence[Any]
    ) -> str:
        """Question text for items held only by ``holder``."""
        names = [category.describe(item) for item in items[:PREVIEW_LIMIT]]
        if len(items) > PREVIEW_LIMIT:
            names.append(f"... {len(items) - PREVIEW_LIMIT} more")
        return (
            f"Found {len(items)} {category.name} that are on {holder.label} "
            f"but not on {holder.other.label} ({', '.join(names)}). "
            f"What would you like to do with these {category.name}?"
        )

    def ask(
        self, category: SyncCategory, holder: Side, items: Sequence[Any]
    ) -> Decision:
        """Put one divergence to the user.

        Returns:
            The decision the user chose

        Raises:
            ValueError: If the prompter returns something that was not offered
        """
        options = build_options(holder)
        decision = self.prompter.ask(
            self.build_question(category, holder, items), options
        )
        if decision not in [option.value for option in options]:
            raise ValueError(f"Prompt returned an unknown choice: {decision!r}")
        return decision

    def apply(
        self, category: SyncCategory, decision: Decision, items: Sequence[Any]
    ) -> None:
        """Dispatch a decision to the category's write operations."""
        if decision.kind is DecisionKind.ADOPT_INTO:
            category.adopt(decision.side, items)
        elif decision.kind is DecisionKind.REMOVE_FROM:
            category.remove(decision.side, items)
        else:
            raise ValueError(f"Unhandled decision: {decision.kind}")
        logger.info("%s: %s %d item(s)", category.name, decision, len(items))

    def resolve(
        self, category: SyncCategory, holder: Side, items: Sequence[Any]
    ) -> Optional[Conflict]:
        """Ask about and apply one divergent set.

        Args:
            category: Category the items belong to
            holder: Side that holds the items
            items: Items present on ``holder`` only

        Returns:
            The resolved conflict, or None when there was nothing to resolve
        """
        if not items:
            return None

        decision = self.ask(category, holder, items)
        self.apply(category, decision, items)
        return Conflict(
            category=category.name,
            holder=holder,
            keys=[str(category.key(item)) for item in items],
            decision=decision,
        )
