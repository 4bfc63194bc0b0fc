from __future__ import annotations

"""Which canvas actions are available for a selection.

Centralizes the rules shared by the selection toolbar, the context menu and
keyboard shortcuts so they never disagree about what can be done.
"""

from dataclasses import dataclass
from typing import Sequence

from form_designer.core.models.document import Document
from form_designer.core.models.nodes import ContainerNode, LeafNode

__all__ = ["Capabilities", "get_capabilities"]


@dataclass(frozen=True)
class Capabilities:
    can_rename: bool = False
    can_delete: bool = False
    can_wrap: bool = False
    can_unwrap: bool = False
    can_nudge_up: bool = False
    can_nudge_down: bool = False
    can_select_parent: bool = False
    can_convert_to_heading: bool = False
    can_convert_to_paragraph: bool = False
    can_convert_to_link: bool = False


def get_capabilities(document: Document, selected_ids: Sequence[str]) -> Capabilities:
    """Compute the actions available for ``selected_ids`` in ``document``.

    The first id is the primary selection; single-node actions (rename,
    unwrap, nudge, convert) require exactly one selected node.
    """
    if not selected_ids:
        return Capabilities()
    primary = document.get(selected_ids[0])
    if primary is None:
        return Capabilities()

    single = len(selected_ids) == 1
    root_selected = document.root_id in selected_ids
    parent = document.get_container(primary.parent_id) if primary.id != document.root_id else None

    can_unwrap = (
        single
        and isinstance(primary, ContainerNode)
        and not root_selected
        and len(primary.children) > 0
        and parent is not None
    )

    can_nudge_up = can_nudge_down = False
    if single and parent is not None:
        index = parent.children.index(primary.id)
        can_nudge_up = index > 0
        can_nudge_down = index < len(parent.children) - 1

    is_heading = is_paragraph = is_link = False
    if isinstance(primary, LeafNode):
        props = primary.properties
        is_link = props.control_type == "link"
        is_heading = props.is_heading
        is_paragraph = props.is_paragraph

    return Capabilities(
        can_rename=single and not root_selected,
        can_delete=not root_selected,
        can_wrap=not root_selected,
        can_unwrap=can_unwrap,
        can_nudge_up=can_nudge_up,
        can_nudge_down=can_nudge_down,
        can_select_parent=single and parent is not None and parent.id != document.root_id,
        can_convert_to_heading=single and (is_paragraph or is_link),
        can_convert_to_paragraph=single and (is_heading or is_link),
        can_convert_to_link=single and (is_heading or is_paragraph),
    )
