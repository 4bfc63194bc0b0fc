from __future__ import annotations

"""Service layer for structural edits on the form document.

This module provides a UI-agnostic, testable service that encapsulates every
mutation of the component tree: adding, deleting, moving, reordering,
wrapping/unwrapping and converting nodes, and editing their properties.

Scope and guarantees:
- Operates purely in-memory on immutable :class:`Document` snapshots; every
  operation returns a new document and leaves its input untouched.
- Conservative behavior with boundary checks; invalid operations return
  OperationResult(success=False, ...) carrying the unchanged input document,
  never raise.
- The four tree invariants (root exists and is a parentless container, every
  child is listed exactly once by its container, no dangling children, the
  parent links form a tree) hold on every returned document.

Examples
--------
Basic usage:

    service = StructureEditingService()
    result = service.add_node(doc, doc.root_id, 0, NodeSpec.leaf("Name"))
    if result.success:
        doc = result.document

"""

from dataclasses import dataclass, replace
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from form_designer.core.factory import NodeFactory
from form_designer.core.models.commands import NodeSpec
from form_designer.core.models.document import Document, DocumentDraft
from form_designer.core.models.nodes import (
    APPEARANCE_STYLES,
    ARRANGEMENTS,
    COLUMN_LAYOUTS,
    CONTROL_TYPES,
    DISTRIBUTIONS,
    GAPS,
    PADDINGS,
    TEXT_ELEMENTS,
    VERTICAL_ALIGNMENTS,
    Appearance,
    Binding,
    ContainerNode,
    ContainerProperties,
    ContextualLayout,
    LeafNode,
    LeafProperties,
)


__all__ = ["OperationResult", "StructureEditingService", "CONVERT_TARGETS"]

logger = logging.getLogger(__name__)

CONVERT_TARGETS = ("heading", "paragraph", "link")

# Allowed values per enumerated property; keys absent here accept any value
_CONTAINER_CHOICES: Dict[str, Sequence[str]] = {
    "arrangement": ARRANGEMENTS,
    "gap": GAPS,
    "distribution": DISTRIBUTIONS,
    "vertical_align": VERTICAL_ALIGNMENTS,
    "column_layout": COLUMN_LAYOUTS,
}
_APPEARANCE_CHOICES: Dict[str, Sequence[str]] = {
    "style": APPEARANCE_STYLES,
    "padding": PADDINGS,
}
_LEAF_CHOICES: Dict[str, Sequence[Optional[str]]] = {
    "control_type": CONTROL_TYPES,
    "text_element": TEXT_ELEMENTS + (None,),
}


@dataclass(frozen=True)
class OperationResult:
    """Result of a structural editing operation.

    Attributes
    ----------
    success
        Whether the operation completed successfully.
    message
        Human-readable summary suitable for logs or UI display.
    details
        Optional structured details for diagnostics or caller logic.
    document
        The resulting document. On failure this is the input document itself.
    """
    success: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    document: Optional[Document] = None


def _clamp(index: Optional[int], length: int) -> int:
    """Clamp an insertion index; None means append."""
    if index is None:
        return length
    return max(0, min(int(index), length))


class StructureEditingService:
    """Encapsulates structural edit operations on a form document.

    Design principles:
    - No UI dependencies, no I/O.
    - No exceptions for expected invalid actions; return OperationResult.
    - Operators never dispatch commands themselves; they return data.

    Parameters
    ----------
    factory
        Node factory used for every node the operators create. Injecting one
        with a deterministic id factory makes results reproducible.
    """

    def __init__(self, factory: Optional[NodeFactory] = None) -> None:
        self._factory = factory or NodeFactory()

    @property
    def factory(self) -> NodeFactory:
        return self._factory

    # -------------------------------------------------------------------------
    # Creation
    # -------------------------------------------------------------------------

    def add_node(self, document: Document, parent_id: str, index: Optional[int], spec: NodeSpec) -> OperationResult:
        """Create a node from ``spec`` and insert it into ``parent_id`` at ``index``."""
        logger.info("Edit: add_node parent=%s index=%s kind=%s", parent_id, index, spec.kind)
        parent = document.get_container(parent_id)
        if parent is None:
            logger.warning("Edit FAIL: add_node parent_not_container parent=%s", parent_id)
            return self._fail(document, f"Parent '{parent_id}' is not a container.", {"parent_id": parent_id})

        draft = document.edit()
        node = self._factory.create(spec, parent_id, taken=draft)
        position = _clamp(index, len(parent.children))
        children = list(parent.children)
        children.insert(position, node.id)
        draft.put(node)
        draft.put(parent.with_children(children))

        logger.info("Edit OK: add_node node=%s parent=%s index=%d", node.id, parent_id, position)
        return OperationResult(
            True,
            "Added component.",
            {"node_id": node.id, "parent_id": parent_id, "index": position},
            draft.freeze(),
        )

    def add_nodes_bulk(
        self,
        document: Document,
        parent_id: str,
        index: Optional[int],
        specs: Sequence[NodeSpec],
    ) -> OperationResult:
        """Create several nodes at once, inserted contiguously in caller order.

        All-or-nothing: an invalid parent or an empty spec list changes nothing.
        """
        specs = list(specs or [])
        logger.info("Edit: add_nodes_bulk parent=%s index=%s count=%d", parent_id, index, len(specs))
        parent = document.get_container(parent_id)
        if parent is None:
            logger.warning("Edit FAIL: add_nodes_bulk parent_not_container parent=%s", parent_id)
            return self._fail(document, f"Parent '{parent_id}' is not a container.", {"parent_id": parent_id})
        if not specs:
            logger.info("Edit noop: add_nodes_bulk empty")
            return self._fail(document, "Nothing to add.", {"parent_id": parent_id})

        draft = document.edit()
        position = _clamp(index, len(parent.children))
        children = list(parent.children)
        new_ids: List[str] = []
        for offset, spec in enumerate(specs):
            node = self._factory.create(spec, parent_id, taken=draft)
            draft.put(node)
            children.insert(position + offset, node.id)
            new_ids.append(node.id)
        draft.put(parent.with_children(children))

        logger.info("Edit OK: add_nodes_bulk parent=%s added=%d", parent_id, len(new_ids))
        return OperationResult(
            True,
            f"Added {len(new_ids)} component(s).",
            {"node_ids": new_ids, "parent_id": parent_id, "index": position},
            draft.freeze(),
        )

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete_subtree(self, document: Document, node_id: str) -> OperationResult:
        """Delete ``node_id`` and everything below it."""
        logger.info("Edit: delete_subtree node=%s", node_id)
        if node_id == document.root_id:
            logger.warning("Edit FAIL: delete_subtree refused_root")
            return self._fail(document, "The root container cannot be deleted.", {"node_id": node_id})
        if node_id not in document:
            logger.warning("Edit FAIL: delete_subtree node_not_found node=%s", node_id)
            return self._fail(document, f"Component not found for id '{node_id}'.", {"node_id": node_id})

        draft = document.edit()
        removed = self._remove_subtree(draft, node_id)
        logger.info("Edit OK: delete_subtree node=%s removed=%d", node_id, removed)
        return OperationResult(True, "Deleted component.", {"node_id": node_id, "removed": removed}, draft.freeze())

    def delete_many(self, document: Document, node_ids: Iterable[str]) -> OperationResult:
        """Delete several subtrees.

        Ids that already disappeared because an ancestor in the same batch was
        deleted first are skipped, as are the root and unknown ids.
        """
        requested = list(node_ids or [])
        logger.info("Edit: delete_many count=%d", len(requested))
        draft = document.edit()
        deleted: List[str] = []
        removed = 0
        for node_id in requested:
            if node_id == document.root_id or node_id not in draft:
                continue
            removed += self._remove_subtree(draft, node_id)
            deleted.append(node_id)

        details = {
            "requested": requested,
            "deleted": deleted,
            "removed": removed,
            "skipped": len(requested) - len(deleted),
        }
        if not deleted:
            logger.info("Edit noop: delete_many deleted=0")
            return self._fail(document, "No components deleted.", details)
        logger.info("Edit OK: delete_many deleted=%d removed=%d skipped=%d", len(deleted), removed, details["skipped"])
        return OperationResult(True, f"Deleted {len(deleted)} component(s).", details, draft.freeze())

    # -------------------------------------------------------------------------
    # Moving
    # -------------------------------------------------------------------------

    def move(
        self,
        document: Document,
        node_id: str,
        from_parent_id: str,
        to_parent_id: str,
        to_index: int,
    ) -> OperationResult:
        """Re-parent ``node_id`` from ``from_parent_id`` into ``to_parent_id`` at ``to_index``."""
        logger.info("Edit: move node=%s from=%s to=%s index=%s", node_id, from_parent_id, to_parent_id, to_index)
        details = {"node_id": node_id, "from_parent_id": from_parent_id, "to_parent_id": to_parent_id}
        node = document.get(node_id)
        if node is None or node_id == document.root_id:
            logger.warning("Edit FAIL: move invalid_node node=%s", node_id)
            return self._fail(document, "Component cannot be moved.", details)
        source = document.get_container(from_parent_id)
        target = document.get_container(to_parent_id)
        if source is None or target is None:
            logger.warning("Edit FAIL: move parent_not_container from=%s to=%s", from_parent_id, to_parent_id)
            return self._fail(document, "Source and destination must be containers.", details)
        if node_id not in source.children:
            logger.warning("Edit FAIL: move not_a_child node=%s from=%s", node_id, from_parent_id)
            return self._fail(document, "Component is not in the source container.", details)
        if to_parent_id == node_id or document.is_descendant(to_parent_id, node_id):
            logger.warning("Edit FAIL: move cycle node=%s to=%s", node_id, to_parent_id)
            return self._fail(document, "Cannot move a container into itself.", details)

        draft = document.edit()
        source_children = [c for c in source.children if c != node_id]
        if source.id == target.id:
            target_children = source_children
        else:
            draft.put(source.with_children(source_children))
            target_children = list(target.children)
        position = _clamp(to_index, len(target_children))
        target_children.insert(position, node_id)
        draft.put(target.with_children(target_children))
        if node.parent_id != to_parent_id:
            draft.put(replace(node, parent_id=to_parent_id))

        logger.info("Edit OK: move node=%s to=%s index=%d", node_id, to_parent_id, position)
        return OperationResult(True, "Moved component.", {**details, "index": position}, draft.freeze())

    def reorder(self, document: Document, node_id: str, parent_id: str, from_index: int, to_index: int) -> OperationResult:
        """Move ``node_id`` within its parent's children from one index to another."""
        logger.info("Edit: reorder node=%s parent=%s %s->%s", node_id, parent_id, from_index, to_index)
        details = {"node_id": node_id, "parent_id": parent_id, "from_index": from_index, "to_index": to_index}
        parent = document.get_container(parent_id)
        if parent is None:
            logger.warning("Edit FAIL: reorder parent_not_container parent=%s", parent_id)
            return self._fail(document, f"Parent '{parent_id}' is not a container.", details)
        count = len(parent.children)
        if not (0 <= from_index < count and 0 <= to_index < count):
            logger.info("Edit noop: reorder out_of_range count=%d", count)
            return self._fail(document, "Cannot reorder (index out of range).", details)
        if parent.children[from_index] != node_id:
            logger.warning("Edit FAIL: reorder stale_index node=%s index=%d", node_id, from_index)
            return self._fail(document, "Component is not at the given index.", details)
        if from_index == to_index:
            return OperationResult(True, "Component already in place.", details, document)

        children = list(parent.children)
        children.insert(to_index, children.pop(from_index))
        draft = document.edit()
        draft.put(parent.with_children(children))
        logger.info("Edit OK: reorder node=%s %d->%d", node_id, from_index, to_index)
        return OperationResult(True, "Reordered component.", details, draft.freeze())

    # -------------------------------------------------------------------------
    # Wrapping
    # -------------------------------------------------------------------------

    def wrap_in_container(self, document: Document, node_ids: Sequence[str], parent_id: str) -> OperationResult:
        """Wrap sibling nodes of ``parent_id`` into a new default container.

        The new container takes the position of the first listed id; wrapped
        nodes keep their original relative order. All ids must be children of
        ``parent_id``: wrapping across parents is rejected.
        """
        ids: List[str] = []
        for nid in node_ids or []:
            if nid not in ids:
                ids.append(nid)
        logger.info("Edit: wrap_in_container parent=%s count=%d", parent_id, len(ids))
        details = {"node_ids": ids, "parent_id": parent_id}
        parent = document.get_container(parent_id)
        if parent is None:
            logger.warning("Edit FAIL: wrap_in_container parent_not_container parent=%s", parent_id)
            return self._fail(document, f"Parent '{parent_id}' is not a container.", details)
        if not ids:
            logger.info("Edit noop: wrap_in_container empty")
            return self._fail(document, "Nothing to wrap.", details)
        strangers = [nid for nid in ids if nid not in parent.children]
        if strangers:
            logger.warning("Edit FAIL: wrap_in_container not_siblings ids=%s", strangers)
            return self._fail(document, "Only components sharing the same parent can be wrapped.", {**details, "rejected": strangers})

        wrapped = set(ids)
        first = ids[0]
        remaining: List[str] = []
        insert_at = 0
        for child_id in parent.children:
            if child_id == first:
                insert_at = len(remaining)
            if child_id not in wrapped:
                remaining.append(child_id)
        ordered = [c for c in parent.children if c in wrapped]

        draft = document.edit()
        container = self._factory.create_container(parent_id, taken=draft)
        container = container.with_children(ordered)
        draft.put(container)
        for child_id in ordered:
            draft.put(replace(document.nodes[child_id], parent_id=container.id))
        remaining.insert(insert_at, container.id)
        draft.put(parent.with_children(remaining))

        logger.info("Edit OK: wrap_in_container container=%s wrapped=%d", container.id, len(ordered))
        return OperationResult(
            True,
            f"Wrapped {len(ordered)} component(s).",
            {**details, "container_id": container.id, "index": insert_at},
            draft.freeze(),
        )

    def unwrap_container(self, document: Document, container_id: str) -> OperationResult:
        """Dissolve a container, splicing its children into its parent."""
        logger.info("Edit: unwrap_container container=%s", container_id)
        details = {"container_id": container_id}
        if container_id == document.root_id:
            logger.warning("Edit FAIL: unwrap_container refused_root")
            return self._fail(document, "The root container cannot be unwrapped.", details)
        container = document.get_container(container_id)
        if container is None:
            logger.warning("Edit FAIL: unwrap_container not_container id=%s", container_id)
            return self._fail(document, f"'{container_id}' is not a container.", details)
        parent = document.get_container(container.parent_id)
        if parent is None:
            logger.warning("Edit FAIL: unwrap_container no_parent id=%s", container_id)
            return self._fail(document, "Container has no parent container.", details)

        position = parent.children.index(container_id)
        spliced = list(parent.children[:position]) + list(container.children) + list(parent.children[position + 1:])
        draft = document.edit()
        for child_id in container.children:
            child = document.get(child_id)
            if child is not None:
                draft.put(replace(child, parent_id=parent.id))
        draft.put(parent.with_children(spliced))
        draft.remove(container_id)

        logger.info("Edit OK: unwrap_container container=%s released=%d", container_id, len(container.children))
        return OperationResult(
            True,
            "Unwrapped container.",
            {**details, "parent_id": parent.id, "index": position, "children": list(container.children)},
            draft.freeze(),
        )

    # -------------------------------------------------------------------------
    # Leaf conversion
    # -------------------------------------------------------------------------

    def convert_leaf_kind(self, document: Document, node_id: str, target_kind: str) -> OperationResult:
        """Turn a leaf into a heading, a paragraph or a link.

        Text carries over from the content (or the label of input controls);
        every property specific to the previous kind is reset.
        """
        logger.info("Edit: convert_leaf_kind node=%s target=%s", node_id, target_kind)
        details = {"node_id": node_id, "target_kind": target_kind}
        if target_kind not in CONVERT_TARGETS:
            logger.warning("Edit FAIL: convert_leaf_kind unsupported target=%s", target_kind)
            return self._fail(document, f"Unsupported conversion target '{target_kind}'.", {**details, "allowed": list(CONVERT_TARGETS)})
        node = document.get(node_id)
        if not isinstance(node, LeafNode):
            logger.warning("Edit FAIL: convert_leaf_kind not_leaf node=%s", node_id)
            return self._fail(document, "Only form components can be converted.", details)

        props = node.properties
        text = props.content if props.content else props.label
        if target_kind == "heading":
            new_props = LeafProperties(control_type="plain-text", content=text, text_element="h2")
        elif target_kind == "paragraph":
            new_props = LeafProperties(control_type="plain-text", content=text, text_element="p")
        else:
            new_props = LeafProperties(control_type="link", content=text, href="#", target="_self")
        if new_props == props:
            logger.info("Edit noop: convert_leaf_kind already=%s", target_kind)
            return self._fail(document, f"Component is already a {target_kind}.", details)

        draft = document.edit()
        # Textual widgets never carry a data binding
        draft.put(replace(node, properties=new_props, binding=None))
        logger.info("Edit OK: convert_leaf_kind node=%s target=%s", node_id, target_kind)
        return OperationResult(True, f"Converted component to {target_kind}.", details, draft.freeze())

    # -------------------------------------------------------------------------
    # Property edits
    # -------------------------------------------------------------------------

    def update_properties(self, document: Document, node_id: str, changes: Mapping[str, Any]) -> OperationResult:
        """Shallow-merge ``changes`` into a node's variant-specific properties."""
        changes = dict(changes or {})
        logger.info("Edit: update_properties node=%s keys=%s", node_id, sorted(changes))
        node = document.get(node_id)
        if node is None:
            logger.warning("Edit FAIL: update_properties node_not_found node=%s", node_id)
            return self._fail(document, f"Component not found for id '{node_id}'.", {"node_id": node_id})

        if isinstance(node, ContainerNode):
            allowed = set(ContainerProperties.keys()) - {"appearance"}
            error = self._validate(changes, allowed, _CONTAINER_CHOICES)
            if error:
                logger.warning("Edit FAIL: update_properties node=%s %s", node_id, error)
                return self._fail(document, error, {"node_id": node_id, "changes": changes})
            updated = replace(node, properties=replace(node.properties, **changes))
        else:
            error = self._validate(changes, set(LeafProperties.keys()), _LEAF_CHOICES)
            if error:
                logger.warning("Edit FAIL: update_properties node=%s %s", node_id, error)
                return self._fail(document, error, {"node_id": node_id, "changes": changes})
            if "options" in changes:
                changes["options"] = tuple(changes["options"] or ())
            updated = replace(node, properties=replace(node.properties, **changes))

        draft = document.edit()
        draft.put(updated)
        logger.info("Edit OK: update_properties node=%s", node_id)
        return OperationResult(True, "Updated properties.", {"node_id": node_id, "changes": changes}, draft.freeze())

    def update_appearance(self, document: Document, node_id: str, changes: Mapping[str, Any]) -> OperationResult:
        """Shallow-merge ``changes`` into a container's appearance."""
        changes = dict(changes or {})
        logger.info("Edit: update_appearance node=%s keys=%s", node_id, sorted(changes))
        node = document.get(node_id)
        if not isinstance(node, ContainerNode):
            logger.warning("Edit FAIL: update_appearance not_container node=%s", node_id)
            return self._fail(document, "Appearance only applies to containers.", {"node_id": node_id})
        error = self._validate(changes, set(Appearance.keys()), _APPEARANCE_CHOICES)
        if error:
            logger.warning("Edit FAIL: update_appearance node=%s %s", node_id, error)
            return self._fail(document, error, {"node_id": node_id, "changes": changes})

        appearance = replace(node.properties.appearance, **changes)
        draft = document.edit()
        draft.put(replace(node, properties=replace(node.properties, appearance=appearance)))
        logger.info("Edit OK: update_appearance node=%s", node_id)
        return OperationResult(True, "Updated appearance.", {"node_id": node_id, "changes": changes}, draft.freeze())

    def update_binding(self, document: Document, node_id: str, binding: Optional[Binding]) -> OperationResult:
        """Bind a leaf to a data source field, or unbind it with ``None``."""
        logger.info("Edit: update_binding node=%s bound=%s", node_id, binding is not None)
        node = document.get(node_id)
        if not isinstance(node, LeafNode):
            logger.warning("Edit FAIL: update_binding not_leaf node=%s", node_id)
            return self._fail(document, "Only form components can be bound.", {"node_id": node_id})
        if binding is not None and not isinstance(binding, Binding):
            logger.warning("Edit FAIL: update_binding bad_payload node=%s", node_id)
            return self._fail(document, "Invalid binding.", {"node_id": node_id})

        draft = document.edit()
        draft.put(replace(node, binding=binding))
        logger.info("Edit OK: update_binding node=%s", node_id)
        message = "Updated binding." if binding is not None else "Removed binding."
        return OperationResult(True, message, {"node_id": node_id}, draft.freeze())

    def update_contextual_layout(self, document: Document, node_id: str, changes: Mapping[str, Any]) -> OperationResult:
        """Shallow-merge grid/wrap layout hints into a leaf."""
        changes = dict(changes or {})
        logger.info("Edit: update_contextual_layout node=%s keys=%s", node_id, sorted(changes))
        node = document.get(node_id)
        if not isinstance(node, LeafNode):
            logger.warning("Edit FAIL: update_contextual_layout not_leaf node=%s", node_id)
            return self._fail(document, "Contextual layout only applies to form components.", {"node_id": node_id})
        error = self._validate(changes, set(ContextualLayout.keys()), {})
        if not error and "column_span" in changes:
            span = changes["column_span"]
            if isinstance(span, bool) or not isinstance(span, int) or span < 1:
                error = "Column span must be a positive integer."
        if error:
            logger.warning("Edit FAIL: update_contextual_layout node=%s %s", node_id, error)
            return self._fail(document, error, {"node_id": node_id, "changes": changes})

        draft = document.edit()
        draft.put(replace(node, contextual_layout=replace(node.contextual_layout, **changes)))
        logger.info("Edit OK: update_contextual_layout node=%s", node_id)
        return OperationResult(True, "Updated layout.", {"node_id": node_id, "changes": changes}, draft.freeze())

    def rename(self, document: Document, new_name: str) -> OperationResult:
        """Rename the form."""
        name = " ".join((new_name or "").split())
        logger.info("Edit: rename form")
        if not name:
            logger.info("Edit noop: rename empty_name")
            return self._fail(document, "Empty name is not allowed.", {"new_name": new_name})
        draft = document.edit()
        draft.set_form_name(name)
        logger.info("Edit OK: rename form=%r", name)
        return OperationResult(True, "Renamed form.", {"new_name": name}, draft.freeze())

    def rename_node(self, document: Document, node_id: str, new_name: str) -> OperationResult:
        """Rename a container."""
        name = " ".join((new_name or "").split())
        logger.info("Edit: rename_node node=%s", node_id)
        node = document.get(node_id)
        if not isinstance(node, ContainerNode):
            logger.warning("Edit FAIL: rename_node not_container node=%s", node_id)
            return self._fail(document, "Only containers have a name.", {"node_id": node_id})
        if not name:
            logger.info("Edit noop: rename_node empty_name node=%s", node_id)
            return self._fail(document, "Empty name is not allowed.", {"node_id": node_id})
        draft = document.edit()
        draft.put(replace(node, name=name))
        logger.info("Edit OK: rename_node node=%s", node_id)
        return OperationResult(True, "Renamed container.", {"node_id": node_id, "new_name": name}, draft.freeze())

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _fail(document: Document, message: str, details: Optional[Dict[str, Any]] = None) -> OperationResult:
        return OperationResult(False, message, details, document)

    @staticmethod
    def _validate(changes: Mapping[str, Any], allowed: Iterable[str], choices: Mapping[str, Sequence[Any]]) -> Optional[str]:
        """Return an error message if ``changes`` has unknown keys or bad enum values."""
        if not changes:
            return "No changes given."
        unknown = sorted(set(changes) - set(allowed))
        if unknown:
            return f"Unknown properties: {', '.join(unknown)}."
        for key, value in changes.items():
            options = choices.get(key)
            if options is not None and value not in options:
                return f"Invalid value {value!r} for '{key}'."
        return None

    @staticmethod
    def _remove_subtree(draft: DocumentDraft, node_id: str) -> int:
        """Remove ``node_id`` and its descendants from ``draft``; return count removed.

        Descendants are removed depth-first, then the node is unlinked from
        its parent's children, then the node itself is removed.
        """
        node = draft.get(node_id)
        if node is None:
            return 0

        removed = 0
        # Iterative post-order; deep trees must not hit the recursion limit
        stack = [(node_id, False)]
        descendants: List[str] = []
        while stack:
            current_id, visited = stack.pop()
            current = draft.get(current_id)
            if current is None:
                continue
            if visited:
                if current_id != node_id:
                    descendants.append(current_id)
                continue
            stack.append((current_id, True))
            if isinstance(current, ContainerNode):
                for child_id in reversed(current.children):
                    stack.append((child_id, False))
        for descendant_id in descendants:
            draft.remove(descendant_id)
            removed += 1

        parent = draft.get_container(node.parent_id)
        if parent is not None and node_id in parent.children:
            draft.put(parent.with_children(c for c in parent.children if c != node_id))
        draft.remove(node_id)
        return removed + 1
