from __future__ import annotations

"""Drag-and-drop gesture bookkeeping.

A :class:`DragSession` tracks one gesture: what is being dragged and where
it would currently land. Hover updates are transient and may arrive at high
frequency; they never touch the document or history. Only :meth:`drop`
issues a command, at most one per gesture, and :meth:`cancel` issues none.

The gesture layer resolves pixel geometry itself and hands this class a
``(parent_id, index)`` drop target.
"""

from dataclasses import dataclass
import logging
from typing import Optional, TYPE_CHECKING

from form_designer.core.models.commands import AddNode, Move, NodeSpec, Reorder
from form_designer.core.services.structure_editing_service import OperationResult
from form_designer.core.utils import display_name

if TYPE_CHECKING:
    from form_designer.core.session import EditorSession

__all__ = ["DropTarget", "DragSession"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DropTarget:
    parent_id: str
    index: int


class DragSession:
    """Track a single drag gesture against an editor session."""

    def __init__(self, session: "EditorSession") -> None:
        self._session = session
        self._active_id: Optional[str] = None
        self._new_spec: Optional[NodeSpec] = None
        self._target: Optional[DropTarget] = None

    # ------------------------------------------------------------- lifecycle

    @property
    def is_active(self) -> bool:
        return self._active_id is not None or self._new_spec is not None

    @property
    def target(self) -> Optional[DropTarget]:
        """Current placeholder position, if any."""
        return self._target

    def start_existing(self, node_id: str) -> None:
        self._reset()
        self._active_id = node_id

    def start_new(self, spec: NodeSpec) -> None:
        self._reset()
        self._new_spec = spec

    def hover(self, parent_id: Optional[str], index: int = 0) -> None:
        """Update the placeholder; ``parent_id=None`` means not over a valid target."""
        if not self.is_active:
            return
        if parent_id is None or self._is_self_or_descendant(parent_id):
            self._target = None
            return
        self._target = DropTarget(parent_id, index)

    def cancel(self) -> None:
        """Abort the gesture; nothing is committed."""
        logger.debug("Drag cancelled active=%s", self._active_id)
        self._reset()

    def drop(self) -> Optional[OperationResult]:
        """End the gesture, committing at most one command.

        Returns the commit result, or None when the drop resolved to nothing
        (no target, dropped in place, or dropped into itself).
        """
        try:
            target = self._target
            if not self.is_active or target is None:
                return None
            if self._new_spec is not None:
                name = self._new_spec.name or "Component"
                return self._session.commit(AddNode(target.parent_id, target.index, self._new_spec), f"Add '{name}'")
            return self._drop_existing(self._active_id, target)
        finally:
            self._reset()

    # --------------------------------------------------------------- helpers

    def _drop_existing(self, node_id: str, target: DropTarget) -> Optional[OperationResult]:
        document = self._session.document
        node = document.get(node_id)
        if node is None or node_id == document.root_id:
            return None
        if self._is_self_or_descendant(target.parent_id):
            logger.info("Drag rejected: drop of %s into itself", node_id)
            return None
        old_parent = document.get_container(node.parent_id)
        if old_parent is None:
            return None
        name = display_name(node)

        if old_parent.id == target.parent_id:
            old_index = old_parent.children.index(node_id)
            # The placeholder index counts the dragged node itself
            new_index = target.index - 1 if old_index < target.index else target.index
            new_index = min(new_index, len(old_parent.children) - 1)
            if new_index == old_index:
                return None
            return self._session.commit(
                Reorder(node_id, old_parent.id, old_index, new_index),
                f"Reorder '{name}'",
            )
        return self._session.commit(
            Move(node_id, old_parent.id, target.parent_id, target.index),
            f"Move '{name}'",
        )

    def _is_self_or_descendant(self, parent_id: str) -> bool:
        if self._active_id is None:
            return False
        document = self._session.document
        return parent_id == self._active_id or document.is_descendant(parent_id, self._active_id)

    def _reset(self) -> None:
        self._active_id = None
        self._new_spec = None
        self._target = None
