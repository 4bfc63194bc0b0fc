"""Tree invariant checks for documents.

Used by tests and by the session's debug mode to prove that a document is a
well-formed tree rooted at ``root_id``.
"""

from __future__ import annotations

from typing import Dict, List

from form_designer.core.models.document import Document
from form_designer.core.models.nodes import ContainerNode

__all__ = ["check_invariants", "is_valid"]


def check_invariants(document: Document) -> List[str]:
    """Return a list of invariant violations; empty when the document is valid."""
    problems: List[str] = []
    nodes = document.nodes
    root = nodes.get(document.root_id)

    # 1. root
    if root is None:
        return [f"root '{document.root_id}' missing"]
    if not isinstance(root, ContainerNode):
        problems.append("root is not a container")
    if root.parent_id:
        problems.append(f"root has parent '{root.parent_id}'")

    # 3. children reference existing nodes, each listed by one container only
    listed_by: Dict[str, str] = {}
    for node in nodes.values():
        if not isinstance(node, ContainerNode):
            continue
        for child_id in node.children:
            if child_id not in nodes:
                problems.append(f"'{node.id}' lists missing child '{child_id}'")
            elif child_id in listed_by:
                problems.append(f"'{child_id}' listed by '{listed_by[child_id]}' and '{node.id}'")
            else:
                listed_by[child_id] = node.id

    # 2. parent links agree with children lists
    for node in nodes.values():
        if node.id == document.root_id:
            continue
        parent = nodes.get(node.parent_id)
        if not isinstance(parent, ContainerNode):
            problems.append(f"'{node.id}' has no container parent '{node.parent_id}'")
            continue
        count = parent.children.count(node.id)
        if count != 1:
            problems.append(f"'{node.id}' appears {count} times in '{parent.id}'")

    # 4. everything reachable from the root, without cycles
    seen = set()
    stack = [document.root_id]
    while stack:
        current = stack.pop()
        if current in seen:
            problems.append(f"cycle through '{current}'")
            continue
        seen.add(current)
        node = nodes.get(current)
        if isinstance(node, ContainerNode):
            stack.extend(node.children)
    unreachable = sorted(set(nodes) - seen)
    if unreachable:
        problems.append(f"unreachable nodes: {', '.join(unreachable)}")

    return problems


def is_valid(document: Document) -> bool:
    return not check_invariants(document)
