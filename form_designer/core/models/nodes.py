from __future__ import annotations

"""Node variants that make up the designed screen.

A screen is a tree of two kinds of nodes: containers, which arrange an
ordered list of children, and leaves, which are the form fields and text
widgets the user places on the canvas. Both variants are frozen dataclasses;
an edit always produces a new node object so consumers can detect change by
reference inequality.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Literal, Optional, Tuple, Union

__all__ = [
    "ARRANGEMENTS",
    "GAPS",
    "DISTRIBUTIONS",
    "VERTICAL_ALIGNMENTS",
    "COLUMN_LAYOUTS",
    "APPEARANCE_STYLES",
    "PADDINGS",
    "CONTROL_TYPES",
    "TEXTUAL_CONTROL_TYPES",
    "TEXT_ELEMENTS",
    "Appearance",
    "ContainerProperties",
    "Binding",
    "LeafProperties",
    "ContextualLayout",
    "ContainerNode",
    "LeafNode",
    "Node",
    "is_container",
    "is_leaf",
]

ARRANGEMENTS = ("stack", "row", "wrap", "grid")
GAPS = ("none", "sm", "md", "lg")
DISTRIBUTIONS = ("start", "center", "end", "space-between")
VERTICAL_ALIGNMENTS = ("start", "center", "end", "stretch")
COLUMN_LAYOUTS = ("auto", "2-col-50-50", "3-col-33", "2-col-split-left")
APPEARANCE_STYLES = ("transparent", "primary", "secondary", "tertiary", "info", "warning", "error")
PADDINGS = ("none", "sm", "md", "lg")

CONTROL_TYPES = ("text-input", "dropdown", "radio-buttons", "checkbox", "plain-text", "link")
TEXTUAL_CONTROL_TYPES = ("plain-text", "link")
TEXT_ELEMENTS = ("p", "h1", "h2", "h3", "h4", "h5", "h6")

ControlType = Literal["text-input", "dropdown", "radio-buttons", "checkbox", "plain-text", "link"]


def _field_names(cls) -> Tuple[str, ...]:
    return tuple(f.name for f in fields(cls))


# ---------------------------------------------------------------------------
# Container properties
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Appearance:
    """Visual treatment of a container (background style, border, padding)."""

    style: str = "transparent"
    bordered: bool = False
    padding: str = "md"

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return _field_names(cls)


@dataclass(frozen=True)
class ContainerProperties:
    """Layout properties of a container.

    ``distribution`` only matters for ``row`` arrangements and
    ``column_layout`` only for ``grid``; both are kept regardless so that
    switching arrangement back and forth does not lose settings.
    """

    arrangement: str = "stack"
    gap: str = "md"
    distribution: str = "start"
    vertical_align: str = "stretch"
    column_layout: str = "auto"
    appearance: Appearance = field(default_factory=Appearance)

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return _field_names(cls)


# ---------------------------------------------------------------------------
# Leaf properties
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Binding:
    """Reference to a field of an external data source.

    Stored opaquely; the catalog that produced it is responsible for its
    referential integrity.
    """

    source_node_id: str
    source_node_name: str
    field_id: str
    field_name: str
    path: str


@dataclass(frozen=True)
class LeafProperties:
    """Field/widget properties of a leaf.

    Textual leaves (``plain-text`` and ``link``) use ``content``; input
    controls use ``label``, ``field_name``, ``placeholder`` and ``required``.
    """

    control_type: str = "text-input"
    label: str = ""
    content: Optional[str] = None
    field_name: str = ""
    placeholder: str = ""
    required: bool = False
    text_element: Optional[str] = None
    href: Optional[str] = None
    target: Optional[str] = None
    options: Tuple[str, ...] = ()

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return _field_names(cls)

    @property
    def is_textual(self) -> bool:
        return self.control_type in TEXTUAL_CONTROL_TYPES

    @property
    def is_heading(self) -> bool:
        return self.control_type == "plain-text" and bool(self.text_element) and self.text_element.startswith("h")

    @property
    def is_paragraph(self) -> bool:
        return self.control_type == "plain-text" and not self.is_heading


@dataclass(frozen=True)
class ContextualLayout:
    """Layout hints that only apply inside grid or wrap containers."""

    column_span: int = 1
    prevent_shrinking: bool = False

    @classmethod
    def keys(cls) -> Tuple[str, ...]:
        return _field_names(cls)


# ---------------------------------------------------------------------------
# Node variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ContainerNode:
    """A node that arranges an ordered sequence of child ids."""

    id: str
    parent_id: str
    name: str = "Layout Container"
    children: Tuple[str, ...] = ()
    properties: ContainerProperties = field(default_factory=ContainerProperties)

    kind = "container"

    def with_children(self, children) -> "ContainerNode":
        return replace(self, children=tuple(children))


@dataclass(frozen=True)
class LeafNode:
    """A form field or text widget."""

    id: str
    parent_id: str
    properties: LeafProperties = field(default_factory=LeafProperties)
    origin: Optional[str] = None
    binding: Optional[Binding] = None
    contextual_layout: ContextualLayout = field(default_factory=ContextualLayout)

    kind = "leaf"


Node = Union[ContainerNode, LeafNode]


def is_container(node: Any) -> bool:
    return isinstance(node, ContainerNode)


def is_leaf(node: Any) -> bool:
    return isinstance(node, LeafNode)


def describe(node: Node) -> Dict[str, Any]:
    """Return a compact dict used in log lines and operation details."""
    if isinstance(node, ContainerNode):
        return {"id": node.id, "kind": node.kind, "children": len(node.children)}
    return {"id": node.id, "kind": node.kind, "control_type": node.properties.control_type}
