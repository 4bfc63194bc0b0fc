from __future__ import annotations

"""Normalized document holding the designed screen.

The document is a flat id -> node map plus the root id and the form name.
It is immutable: structural operators obtain a :class:`DocumentDraft` via
:meth:`Document.edit`, apply their changes to the draft and freeze it into a
new :class:`Document`. Nodes that were not touched are shared by reference
between the old and the new document.
"""

from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from form_designer.core.models.nodes import ContainerNode, Node

__all__ = ["Document", "DocumentDraft"]


class Document:
    """Immutable snapshot of the screen being designed.

    Attributes
    ----------
    form_name
        Document-level display name.
    root_id
        Id of the root container. The root is never deleted or reparented.
    nodes
        Read-only mapping of node id to node.
    """

    __slots__ = ("_form_name", "_root_id", "_nodes")

    def __init__(self, form_name: str, root_id: str, nodes: Mapping[str, Node]) -> None:
        self._form_name = form_name
        self._root_id = root_id
        # Private dict; callers only ever see the read-only proxy
        self._nodes: Dict[str, Node] = dict(nodes)

    @classmethod
    def _from_owned(cls, form_name: str, root_id: str, nodes: Dict[str, Node]) -> "Document":
        doc = cls.__new__(cls)
        doc._form_name = form_name
        doc._root_id = root_id
        doc._nodes = nodes
        return doc

    # ------------------------------------------------------------------ views

    @property
    def form_name(self) -> str:
        return self._form_name

    @property
    def root_id(self) -> str:
        return self._root_id

    @property
    def nodes(self) -> Mapping[str, Node]:
        return MappingProxyType(self._nodes)

    @property
    def root(self) -> ContainerNode:
        return self._nodes[self._root_id]  # type: ignore[return-value]

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def get_container(self, node_id: Optional[str]) -> Optional[ContainerNode]:
        """Return the node if it resolves to a container, else None."""
        node = self.get(node_id)
        return node if isinstance(node, ContainerNode) else None

    def parent_of(self, node_id: str) -> Optional[ContainerNode]:
        node = self.get(node_id)
        if node is None or node.id == self._root_id:
            return None
        return self.get_container(node.parent_id)

    def index_in_parent(self, node_id: str) -> int:
        parent = self.parent_of(node_id)
        if parent is None:
            return -1
        try:
            return parent.children.index(node_id)
        except ValueError:
            return -1

    def is_descendant(self, node_id: str, ancestor_id: str) -> bool:
        """Return True if ``node_id`` lies strictly below ``ancestor_id``."""
        seen = set()
        current = self.get(node_id)
        while current is not None and current.id != self._root_id:
            if current.id in seen:
                # Corrupt parent chain; treat as unrelated
                return False
            seen.add(current.id)
            if current.parent_id == ancestor_id:
                return True
            current = self.get(current.parent_id)
        return False

    def iter_subtree(self, node_id: str) -> Iterator[Node]:
        """Yield the node and all its descendants, depth-first pre-order."""
        stack: List[str] = [node_id]
        while stack:
            current = self._nodes.get(stack.pop())
            if current is None:
                continue
            yield current
            if isinstance(current, ContainerNode):
                stack.extend(reversed(current.children))

    # ---------------------------------------------------------------- editing

    def edit(self) -> "DocumentDraft":
        return DocumentDraft(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (
            self._form_name == other._form_name
            and self._root_id == other._root_id
            and self._nodes == other._nodes
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document(form_name={self._form_name!r}, root_id={self._root_id!r}, nodes={len(self._nodes)})"


class DocumentDraft:
    """Copy-on-write working copy of a :class:`Document`.

    The id map is copied lazily on the first write; nodes themselves are
    never copied, only replaced. ``freeze()`` returns the original document
    object when nothing was written.
    """

    def __init__(self, base: Document) -> None:
        self._base = base
        self._nodes: Dict[str, Node] = base._nodes
        self._form_name = base.form_name
        self._copied = False
        self._dirty = False

    @property
    def root_id(self) -> str:
        return self._base.root_id

    def _ensure_copy(self) -> None:
        if not self._copied:
            self._nodes = dict(self._nodes)
            self._copied = True
        self._dirty = True

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def get(self, node_id: Optional[str]) -> Optional[Node]:
        if node_id is None:
            return None
        return self._nodes.get(node_id)

    def get_container(self, node_id: Optional[str]) -> Optional[ContainerNode]:
        node = self.get(node_id)
        return node if isinstance(node, ContainerNode) else None

    def put(self, node: Node) -> None:
        self._ensure_copy()
        self._nodes[node.id] = node

    def remove(self, node_id: str) -> None:
        if node_id in self._nodes:
            self._ensure_copy()
            del self._nodes[node_id]

    def set_form_name(self, name: str) -> None:
        self._form_name = name
        self._dirty = True

    def freeze(self) -> Document:
        if not self._dirty:
            return self._base
        return Document._from_owned(self._form_name, self._base.root_id, self._nodes)
