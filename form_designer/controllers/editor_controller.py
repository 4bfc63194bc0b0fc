from __future__ import annotations

"""Canvas-level editing actions for toolbars, menus and keyboard shortcuts.

The controller turns user intents ("delete what is selected", "nudge up")
into commands with history messages, commits them through the session and
adjusts the interaction state afterwards. It contains no UI toolkit code.
"""

import logging
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence

from form_designer.core.interaction_store import InteractionStore
from form_designer.core.models.commands import (
    AddNodesBulk,
    ConvertLeafKind,
    DeleteMany,
    DeleteSubtree,
    Move,
    NodeSpec,
    Rename,
    RenameNode,
    Reorder,
    UnwrapContainer,
    UpdateAppearance,
    UpdateBinding,
    UpdateContextualLayout,
    UpdateProperties,
    WrapInContainer,
)
from form_designer.core.models.nodes import Binding, ContainerNode, LeafNode
from form_designer.core.services.capability_service import Capabilities, get_capabilities
from form_designer.core.services.structure_editing_service import OperationResult
from form_designer.core.session import EditorSession
from form_designer.core.utils import display_name, top_level_ids

__all__ = ["EditorController"]

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]


class EditorController:
    """Coordinate canvas editing actions with the editor session.

    Parameters
    ----------
    session : EditorSession
        The session that owns the document, its history and the interaction
        state.

    Notes
    -----
    - Routine validation failures (nothing selected, action not available)
      return an unsuccessful OperationResult instead of raising.
    - Every successful action is exactly one history entry.
    """

    def __init__(self, session: EditorSession) -> None:
        self.session: EditorSession = session

    # ---------------------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------------------

    @property
    def interaction(self) -> InteractionStore:
        return self.session.interaction

    @property
    def selected_ids(self) -> List[str]:
        """Selected ids that still exist in the document, in selection order."""
        nodes = self.session.nodes_by_id
        return [nid for nid in self.interaction.selected_ids if nid in nodes]

    @property
    def capabilities(self) -> Capabilities:
        return get_capabilities(self.session.document, self.selected_ids)

    def _commit(self, command: Any, message: str) -> OperationResult:
        result = self.session.commit(command, message)
        if not result.success:
            logger.info("Action rejected: %s (%s)", message, result.message)
        return result

    @staticmethod
    def _refused(message: str) -> OperationResult:
        return OperationResult(success=False, message=message)

    # ---------------------------------------------------------------------------------
    # Selection and inline editing
    # ---------------------------------------------------------------------------------

    def select(self, node_ids: Sequence[str]) -> None:
        self.interaction.select(nid for nid in node_ids if nid in self.session.nodes_by_id)

    def clear_selection(self) -> None:
        self.interaction.clear()

    def select_parent(self) -> bool:
        """Replace a single selection with its parent container (never the root)."""
        if not self.capabilities.can_select_parent:
            return False
        node = self.session.document.get(self.selected_ids[0])
        self.interaction.select([node.parent_id])
        return True

    def start_editing(self, node_id: Optional[str] = None) -> bool:
        """Enter inline editing on a leaf; containers cannot be edited inline."""
        if node_id is None:
            ids = self.selected_ids
            if len(ids) != 1:
                return False
            node_id = ids[0]
        if not isinstance(self.session.document.get(node_id), LeafNode):
            return False
        self.interaction.start_editing(node_id)
        return True

    def cancel_editing(self) -> None:
        """Leave inline editing without committing, keeping the node selected."""
        node_id = self.interaction.editing_id
        if node_id is not None:
            self.interaction.select([node_id])

    def handle_commit_inline_text(self, node_id: str, text: str) -> OperationResult:
        """Commit inline-edited text: content for text widgets, label otherwise.

        On success the edited node stays selected.
        """
        node = self.session.document.get(node_id)
        if not isinstance(node, LeafNode):
            return self._refused("Only form components can be edited inline")
        if node.properties.is_textual:
            if text == node.properties.content:
                self.interaction.select([node_id])
                return self._refused("Text unchanged")
            result = self._commit(UpdateProperties(node_id, {"content": text}), "Update text content")
        else:
            if text == node.properties.label:
                self.interaction.select([node_id])
                return self._refused("Label unchanged")
            result = self._commit(UpdateProperties(node_id, {"label": text}), f'Rename label to "{text}"')
        self.interaction.select([node_id])
        return result

    # ---------------------------------------------------------------------------------
    # Structural actions on the selection
    # ---------------------------------------------------------------------------------

    def handle_delete_selection(self) -> OperationResult:
        """Delete the selected subtrees; the selection is cleared afterwards."""
        if not self.capabilities.can_delete:
            return self._refused("No deletable selection")
        ids = top_level_ids(self.session.document, self.selected_ids)
        if len(ids) == 1:
            node = self.session.document.get(ids[0])
            result = self._commit(DeleteSubtree(ids[0]), f"Delete '{display_name(node)}'")
        else:
            result = self._commit(DeleteMany(tuple(ids)), f"Delete {len(ids)} components")
        if result.success:
            self.interaction.clear()
        return result

    def handle_wrap_selection(self) -> OperationResult:
        """Wrap the selected siblings into a new container and select it."""
        if not self.capabilities.can_wrap:
            return self._refused("No wrappable selection")
        ids = self.selected_ids
        first = self.session.document.get(ids[0])
        result = self._commit(WrapInContainer(tuple(ids), first.parent_id), f"Wrap {len(ids)} component(s)")
        if result.success:
            self.interaction.select([result.details["container_id"]])
        return result

    def handle_unwrap_selection(self) -> OperationResult:
        """Dissolve the selected container; its former children become the selection."""
        if not self.capabilities.can_unwrap:
            return self._refused("Selection cannot be unwrapped")
        container = self.session.document.get(self.selected_ids[0])
        result = self._commit(UnwrapContainer(container.id), f"Unwrap '{display_name(container)}'")
        if result.success:
            self.interaction.select(result.details["children"])
        return result

    def handle_nudge(self, direction: Direction) -> OperationResult:
        """Swap the selected node with its previous or next sibling."""
        caps = self.capabilities
        allowed = caps.can_nudge_up if direction == "up" else caps.can_nudge_down
        if not allowed:
            return self._refused(f"Cannot move {direction}")
        document = self.session.document
        node = document.get(self.selected_ids[0])
        old_index = document.index_in_parent(node.id)
        new_index = old_index - 1 if direction == "up" else old_index + 1
        return self._commit(Reorder(node.id, node.parent_id, old_index, new_index), "Reorder component")

    def handle_move_to_adjacent_container(self, direction: Direction) -> OperationResult:
        """Move the selected node to the top of the container next to its parent.

        The target is the previous (``"up"``) or next (``"down"``) sibling of
        the node's parent; nothing happens when that sibling is not a container.
        """
        ids = self.selected_ids
        if len(ids) != 1:
            return self._refused("Select a single component")
        document = self.session.document
        node = document.get(ids[0])
        parent = document.get_container(node.parent_id)
        grandparent = document.get_container(parent.parent_id) if parent is not None else None
        if grandparent is None:
            return self._refused("No adjacent container")
        target_index = grandparent.children.index(parent.id) + (-1 if direction == "up" else 1)
        if not 0 <= target_index < len(grandparent.children):
            return self._refused("No adjacent container")
        target = document.get(grandparent.children[target_index])
        if not isinstance(target, ContainerNode):
            return self._refused("No adjacent container")
        return self._commit(Move(node.id, parent.id, target.id, 0), "Move component to new container")

    def handle_convert(self, target_kind: str) -> OperationResult:
        """Convert the selected leaf into a heading, a paragraph or a link."""
        caps = self.capabilities
        allowed = {
            "heading": caps.can_convert_to_heading,
            "paragraph": caps.can_convert_to_paragraph,
            "link": caps.can_convert_to_link,
        }
        if not allowed.get(target_kind, False):
            return self._refused(f"Cannot convert to {target_kind}")
        return self._commit(
            ConvertLeafKind(self.selected_ids[0], target_kind),
            f"Convert component to {target_kind}",
        )

    # ---------------------------------------------------------------------------------
    # Creation
    # ---------------------------------------------------------------------------------

    def handle_add_data_fields(self, specs: Sequence[NodeSpec]) -> OperationResult:
        """Append fields picked from a data source.

        Fields go into the selected container when exactly one container is
        selected, into the root otherwise. The selection is cleared afterwards.
        """
        specs = tuple(specs or ())
        if not specs:
            return self._refused("No fields to add")
        document = self.session.document
        parent_id = document.root_id
        ids = self.selected_ids
        if len(ids) == 1 and isinstance(document.get(ids[0]), ContainerNode):
            parent_id = ids[0]
        result = self._commit(AddNodesBulk(parent_id, specs), f"Add {len(specs)} field(s)")
        if result.success:
            self.interaction.clear()
        return result

    # ---------------------------------------------------------------------------------
    # Property panel
    # ---------------------------------------------------------------------------------

    def handle_rename_form(self, new_name: str) -> OperationResult:
        name = (new_name or "").strip()
        if not name:
            return self._refused("Empty name is not allowed")
        if name == self.session.form_name:
            return self._refused("Name unchanged")
        return self._commit(Rename(name), f'Renamed form to "{name}"')

    def handle_rename_container(self, node_id: str, new_name: str) -> OperationResult:
        if not isinstance(new_name, str) or not new_name.strip():
            return self._refused("Empty name is not allowed")
        return self._commit(RenameNode(node_id, new_name), f"Rename to '{new_name.strip()}'")

    def handle_update_properties(self, node_id: str, changes: Mapping[str, Any]) -> OperationResult:
        node = self.session.document.get(node_id)
        if node is None:
            return self._refused("Component not found")
        return self._commit(UpdateProperties(node_id, dict(changes)), f"Update properties for '{display_name(node)}'")

    def handle_update_appearance(self, node_id: str, changes: Mapping[str, Any]) -> OperationResult:
        node = self.session.document.get(node_id)
        if node is None:
            return self._refused("Component not found")
        return self._commit(UpdateAppearance(node_id, dict(changes)), f"Update appearance for '{display_name(node)}'")

    def handle_update_binding(self, node_id: str, binding: Optional[Binding]) -> OperationResult:
        node = self.session.document.get(node_id)
        if node is None:
            return self._refused("Component not found")
        return self._commit(UpdateBinding(node_id, binding), f"Update binding for '{display_name(node)}'")

    def handle_set_column_span(self, node_id: str, span: int) -> OperationResult:
        node = self.session.document.get(node_id)
        if node is None:
            return self._refused("Component not found")
        return self._commit(
            UpdateContextualLayout(node_id, {"column_span": span}),
            f"Update column span for '{display_name(node)}'",
        )

    def handle_toggle_shrink(self, node_id: str) -> OperationResult:
        node = self.session.document.get(node_id)
        if not isinstance(node, LeafNode):
            return self._refused("Only form components have a layout")
        changes: Dict[str, Any] = {"prevent_shrinking": not node.contextual_layout.prevent_shrinking}
        return self._commit(UpdateContextualLayout(node_id, changes), f"Toggle shrink for '{display_name(node)}'")

    # ---------------------------------------------------------------------------------
    # History
    # ---------------------------------------------------------------------------------

    def undo(self) -> bool:
        return self.session.undo()

    def redo(self) -> bool:
        return self.session.redo()
