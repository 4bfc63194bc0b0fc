"""Live store of the canvas interaction state.

The session snapshots this store into every history entry and writes the
snapshot back on undo/redo. UI collaborators read it and call the setters as
the user selects or starts editing nodes; setting it never touches history.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List

from form_designer.core.models.interaction import (
    Editing,
    Idle,
    InteractionState,
    Selecting,
    editing_id,
    selected_ids,
)

__all__ = ["InteractionStore"]

logger = logging.getLogger(__name__)

Listener = Callable[[InteractionState], None]


class InteractionStore:
    """Holds the current :data:`InteractionState` and notifies listeners."""

    def __init__(self, state: InteractionState = Idle()) -> None:
        self._state: InteractionState = state
        self._listeners: List[Listener] = []

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def selected_ids(self):
        return selected_ids(self._state)

    @property
    def editing_id(self):
        return editing_id(self._state)

    def set(self, state: InteractionState) -> None:
        if state == self._state:
            return
        logger.debug("Interaction: %s -> %s", self._state, state)
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def select(self, ids: Iterable[str]) -> None:
        """Select ``ids``; an empty selection means idle."""
        ordered: List[str] = []
        for node_id in ids:
            if node_id not in ordered:
                ordered.append(node_id)
        self.set(Selecting(tuple(ordered)) if ordered else Idle())

    def start_editing(self, node_id: str) -> None:
        self.set(Editing(node_id))

    def clear(self) -> None:
        self.set(Idle())

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
