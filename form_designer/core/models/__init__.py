from __future__ import annotations

"""Shared data structures used across the form designer core.

This package exposes the node variants, the normalized document, commands
and interaction states. It is intentionally free of UI code so that the
contained objects can be reused in any context (unit-tests, CLI, GUI, etc.).
"""

from .nodes import (
    Appearance,
    Binding,
    ContainerNode,
    ContainerProperties,
    ContextualLayout,
    LeafNode,
    LeafProperties,
    Node,
    is_container,
    is_leaf,
)
from .document import Document, DocumentDraft
from .interaction import Editing, Idle, InteractionState, Selecting, editing_id, selected_ids
from .commands import (
    AddNode,
    AddNodesBulk,
    BindingSource,
    Command,
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

__all__ = [
    "Appearance",
    "Binding",
    "ContainerNode",
    "ContainerProperties",
    "ContextualLayout",
    "LeafNode",
    "LeafProperties",
    "Node",
    "is_container",
    "is_leaf",
    "Document",
    "DocumentDraft",
    "Idle",
    "Selecting",
    "Editing",
    "InteractionState",
    "selected_ids",
    "editing_id",
    "AddNode",
    "AddNodesBulk",
    "BindingSource",
    "Command",
    "ConvertLeafKind",
    "DeleteMany",
    "DeleteSubtree",
    "Move",
    "NodeSpec",
    "Rename",
    "RenameNode",
    "Reorder",
    "UnwrapContainer",
    "UpdateAppearance",
    "UpdateBinding",
    "UpdateContextualLayout",
    "UpdateProperties",
    "WrapInContainer",
]
