from __future__ import annotations

"""Simple reusable helper functions.

These helpers are side-effect-free and contain no GUI or disk I/O; they can be
used across all layers of the designer.
"""

from typing import List, Optional

from form_designer.core.models.document import Document
from form_designer.core.models.nodes import ContainerNode, Node

__all__ = [
    "display_name",
    "ancestors",
    "top_level_ids",
]


def display_name(node: Optional[Node]) -> str:
    """Return the name shown for *node* in history messages and menus.

    Containers use their name; text widgets the first 30 characters of their
    content; input controls their label.
    """
    if node is None:
        return ""
    if isinstance(node, ContainerNode):
        return node.name
    props = node.properties
    if props.control_type in ("plain-text", "link"):
        return (props.content or "")[:30] or ("Link" if props.control_type == "link" else "Plain Text")
    return props.label or "Form Field"


def ancestors(document: Document, node_id: str) -> List[str]:
    """Return the ids above *node_id*, nearest first, ending with the root."""
    result: List[str] = []
    node = document.get(node_id)
    while node is not None and node.id != document.root_id:
        parent = document.get(node.parent_id)
        if parent is None or parent.id in result:
            break
        result.append(parent.id)
        node = parent
    return result


def top_level_ids(document: Document, node_ids: List[str]) -> List[str]:
    """Drop ids whose ancestor is also in *node_ids*, keeping input order."""
    wanted = set(node_ids)
    kept: List[str] = []
    for node_id in node_ids:
        if node_id in kept:
            continue
        if any(a in wanted for a in ancestors(document, node_id)):
            continue
        kept.append(node_id)
    return kept
