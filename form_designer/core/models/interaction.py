"""Canvas interaction state.

What the UI is doing at a given moment: nothing, selecting one or more
nodes, or editing a single node inline. A snapshot of this state is stored
with every history entry and restored on undo/redo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

__all__ = ["Idle", "Selecting", "Editing", "InteractionState", "selected_ids", "editing_id"]


@dataclass(frozen=True)
class Idle:
    mode = "idle"


@dataclass(frozen=True)
class Selecting:
    ids: Tuple[str, ...]

    mode = "selecting"

    def __post_init__(self) -> None:
        # Accept any iterable from callers but store an immutable tuple
        object.__setattr__(self, "ids", tuple(self.ids))


@dataclass(frozen=True)
class Editing:
    id: str

    mode = "editing"


InteractionState = Union[Idle, Selecting, Editing]


def selected_ids(state: InteractionState) -> Tuple[str, ...]:
    """Ids the user currently has selected; an edited node counts as selected."""
    if isinstance(state, Selecting):
        return state.ids
    if isinstance(state, Editing):
        return (state.id,)
    return ()


def editing_id(state: InteractionState):
    return state.id if isinstance(state, Editing) else None
