from __future__ import annotations

"""Undo/redo history of document snapshots.

This service is UI-agnostic and performs pure in-memory history tracking of
the form document. Because documents are immutable snapshots sharing
unchanged nodes, a history entry costs one reference, not a serialized copy.

Design principles
-----------------
- No UI imports and no I/O.
- Two stack pairs kept in lock-step: ``past``/``past_meta`` and
  ``future``/``future_meta`` always have equal lengths and index i of one
  describes index i of the other.
- Future is cleared on every push (standard undo/redo behavior).
- Memory usage controlled by a max_history policy (trim oldest).

"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from form_designer.core.models.document import Document
from form_designer.core.models.interaction import Idle, InteractionState

__all__ = ["ActionMeta", "HistoryService"]


@dataclass(frozen=True)
class ActionMeta:
    """Metadata stored alongside one history step.

    Attributes
    ----------
    message :
        Human-readable description, e.g. ``"Delete 'Arrest Date'"``.
    interaction_snapshot :
        What the UI was doing right before the step was committed.
    """

    message: str
    interaction_snapshot: InteractionState = Idle()


class HistoryService:
    """Manage past/present/future documents and their paired metadata.

    Parameters
    ----------
    initial : Document
        The starting ``present`` document.
    max_history : int, default=100
        Maximum number of undo steps to keep. Oldest entries (document and
        meta together) are discarded when the capacity is exceeded. Coerced
        to at least 1.

    Examples
    --------
    >>> history = HistoryService(doc0)
    >>> history.push(doc1, ActionMeta("Add 'Name'"))
    >>> meta = history.undo()   # present is doc0 again
    >>> meta = history.redo()   # present is doc1 again
    """

    def __init__(self, initial: Document, max_history: int = 100) -> None:
        self._max_history: int = max(1, int(max_history))
        self._present: Document = initial
        self._past: List[Document] = []
        self._future: List[Document] = []
        self._past_meta: List[ActionMeta] = []
        self._future_meta: List[ActionMeta] = []

    # --------------------------------------------------------------------- API

    @property
    def present(self) -> Document:
        return self._present

    @property
    def past(self) -> Tuple[Document, ...]:
        return tuple(self._past)

    @property
    def future(self) -> Tuple[Document, ...]:
        """Redo candidates, next one last."""
        return tuple(self._future)

    @property
    def past_meta(self) -> Tuple[ActionMeta, ...]:
        return tuple(self._past_meta)

    @property
    def future_meta(self) -> Tuple[ActionMeta, ...]:
        return tuple(self._future_meta)

    @property
    def max_history(self) -> int:
        return self._max_history

    def push(self, document: Document, meta: ActionMeta) -> None:
        """Record a committed step.

        The current present moves onto the past stack, ``document`` becomes
        the present and the future is cleared. If the past exceeds
        max_history, the oldest entries are dropped.
        """
        self._past.append(self._present)
        self._past_meta.append(meta)
        self._present = document
        # New user action invalidates redo history
        self._future.clear()
        self._future_meta.clear()
        overflow = len(self._past) - self._max_history
        if overflow > 0:
            del self._past[0:overflow]
            del self._past_meta[0:overflow]

    def undo(self) -> Optional[ActionMeta]:
        """Step back one entry.

        Returns the meta of the undone step (its ``interaction_snapshot`` is
        what the UI should restore), or None when there is nothing to undo.
        """
        if not self._past:
            return None
        meta = self._past_meta.pop()
        self._future.append(self._present)
        self._future_meta.append(meta)
        self._present = self._past.pop()
        return meta

    def redo(self) -> Optional[ActionMeta]:
        """Re-apply the most recently undone step; None if there is none."""
        if not self._future:
            return None
        meta = self._future_meta.pop()
        self._past.append(self._present)
        self._past_meta.append(meta)
        self._present = self._future.pop()
        return meta

    def can_undo(self) -> bool:
        """Return True if an undo operation is currently possible."""
        return len(self._past) > 0

    def can_redo(self) -> bool:
        """Return True if a redo operation is currently possible."""
        return len(self._future) > 0

    def clear(self, present: Optional[Document] = None) -> None:
        """Clear both histories, optionally replacing the present document."""
        if present is not None:
            self._present = present
        self._past.clear()
        self._past_meta.clear()
        self._future.clear()
        self._future_meta.clear()
