"""
Undo/Redo history as a log of snapshots with a cursor.
"""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .models import Annotation
from ..errors import NothingToRedo, NothingToUndo

if TYPE_CHECKING:
    from ..document.pages import DocumentState


@dataclass(frozen=True)
class Snapshot:
    """Editor state after one mutating operation."""

    annotations: Dict[str, Tuple[Annotation, ...]] = field(default_factory=dict)
    document: Optional["DocumentState"] = None


class UndoRedoStack:
    """
    Append-only snapshot log.

    ``snapshots[cursor]`` is always the current state. Committing while the
    cursor is behind the tip discards the redo branch.
    """

    def __init__(self, initial: Optional[Snapshot] = None, max_size: int = 0):
        """
        Initialize the history.

        Args:
            initial: Starting state, empty if omitted
            max_size: Maximum number of snapshots to keep, 0 for no limit
        """
        self.snapshots: List[Snapshot] = [initial if initial is not None else Snapshot()]
        self.cursor = 0
        self.max_size = max_size

    @property
    def current(self) -> Snapshot:
        return self.snapshots[self.cursor]

    def commit(self, snapshot: Snapshot) -> None:
        """
        Record a new state after a mutation.

        Args:
            snapshot: State to append
        """
        del self.snapshots[self.cursor + 1 :]
        self.snapshots.append(snapshot)
        self.cursor = len(self.snapshots) - 1

        if self.max_size and len(self.snapshots) > self.max_size:
            overflow = len(self.snapshots) - self.max_size
            del self.snapshots[:overflow]
            self.cursor -= overflow

    def can_undo(self) -> bool:
        """Check if undo is available."""
        return self.cursor > 0

    def can_redo(self) -> bool:
        """Check if redo is available."""
        return self.cursor < len(self.snapshots) - 1

    def undo(self) -> Snapshot:
        """
        Step back one snapshot.

        Raises:
            NothingToUndo: At the oldest snapshot
        """
        if not self.can_undo():
            raise NothingToUndo("Nothing to undo")
        self.cursor -= 1
        return self.snapshots[self.cursor]

    def redo(self) -> Snapshot:
        """
        Step forward one snapshot.

        Raises:
            NothingToRedo: At the newest snapshot
        """
        if not self.can_redo():
            raise NothingToRedo("Nothing to redo")
        self.cursor += 1
        return self.snapshots[self.cursor]
