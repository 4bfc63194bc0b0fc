"""Commands accepted by the editor session.

A command is a request to mutate the document. Each command type maps to
exactly one structural operator (see
:mod:`form_designer.core.services.command_dispatcher`). Commands carry only
the data needed to perform the operation; commands that create nodes carry a
:class:`NodeSpec` instead of a pre-built node so that defaults are always
derived by the factory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from form_designer.core.models.nodes import Binding

__all__ = [
    "BindingSource",
    "NodeSpec",
    "AddNode",
    "AddNodesBulk",
    "DeleteSubtree",
    "DeleteMany",
    "Move",
    "Reorder",
    "WrapInContainer",
    "UnwrapContainer",
    "ConvertLeafKind",
    "UpdateProperties",
    "UpdateAppearance",
    "UpdateBinding",
    "UpdateContextualLayout",
    "Rename",
    "RenameNode",
    "Command",
    "COMMAND_TYPES",
    "describe_command",
]


@dataclass(frozen=True)
class BindingSource:
    """Binding descriptor resolved by the external data catalog."""

    source_node_id: str
    source_node_name: str
    field_id: str
    path: str


@dataclass(frozen=True)
class NodeSpec:
    """Description of a node to create.

    Attributes
    ----------
    kind
        ``"container"`` or ``"leaf"``.
    name
        Container name, or the initial label/content of a leaf.
    origin
        ``"data"`` when the leaf comes from a data source, ``"general"`` for
        general-purpose widgets.
    control_type
        Leaf control type; ignored for containers.
    extra_properties
        Leaf property overrides applied after defaults are derived.
    binding_source
        Binding descriptor; only used when ``origin == "data"``.
    """

    kind: str = "leaf"
    name: str = ""
    origin: Optional[str] = None
    control_type: str = "text-input"
    extra_properties: Mapping[str, Any] = field(default_factory=dict)
    binding_source: Optional[BindingSource] = None

    @classmethod
    def container(cls, name: str = "Layout Container") -> "NodeSpec":
        return cls(kind="container", name=name)

    @classmethod
    def leaf(cls, name: str, control_type: str = "text-input", **extra: Any) -> "NodeSpec":
        return cls(kind="leaf", name=name, origin="general", control_type=control_type, extra_properties=extra)

    @classmethod
    def data_field(cls, name: str, source: BindingSource, control_type: str = "text-input") -> "NodeSpec":
        return cls(kind="leaf", name=name, origin="data", control_type=control_type, binding_source=source)


@dataclass(frozen=True)
class AddNode:
    parent_id: str
    index: Optional[int]
    spec: NodeSpec


@dataclass(frozen=True)
class AddNodesBulk:
    parent_id: str
    specs: Tuple[NodeSpec, ...]
    index: Optional[int] = None


@dataclass(frozen=True)
class DeleteSubtree:
    node_id: str


@dataclass(frozen=True)
class DeleteMany:
    node_ids: Tuple[str, ...]


@dataclass(frozen=True)
class Move:
    node_id: str
    from_parent_id: str
    to_parent_id: str
    to_index: int


@dataclass(frozen=True)
class Reorder:
    node_id: str
    parent_id: str
    from_index: int
    to_index: int


@dataclass(frozen=True)
class WrapInContainer:
    node_ids: Tuple[str, ...]
    parent_id: str


@dataclass(frozen=True)
class UnwrapContainer:
    container_id: str


@dataclass(frozen=True)
class ConvertLeafKind:
    node_id: str
    target_kind: str  # "heading" | "paragraph" | "link"


@dataclass(frozen=True)
class UpdateProperties:
    node_id: str
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateAppearance:
    node_id: str
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class UpdateBinding:
    node_id: str
    binding: Optional[Binding]


@dataclass(frozen=True)
class UpdateContextualLayout:
    node_id: str
    changes: Mapping[str, Any]


@dataclass(frozen=True)
class Rename:
    new_name: str


@dataclass(frozen=True)
class RenameNode:
    node_id: str
    new_name: str


Command = Union[
    AddNode,
    AddNodesBulk,
    DeleteSubtree,
    DeleteMany,
    Move,
    Reorder,
    WrapInContainer,
    UnwrapContainer,
    ConvertLeafKind,
    UpdateProperties,
    UpdateAppearance,
    UpdateBinding,
    UpdateContextualLayout,
    Rename,
    RenameNode,
]

COMMAND_TYPES: Tuple[type, ...] = (
    AddNode,
    AddNodesBulk,
    DeleteSubtree,
    DeleteMany,
    Move,
    Reorder,
    WrapInContainer,
    UnwrapContainer,
    ConvertLeafKind,
    UpdateProperties,
    UpdateAppearance,
    UpdateBinding,
    UpdateContextualLayout,
    Rename,
    RenameNode,
)


def describe_command(command: Any) -> Dict[str, Any]:
    """Name and payload of a command, for log lines."""
    payload = dict(getattr(command, "__dict__", {}))
    return {"type": type(command).__name__, **payload}
