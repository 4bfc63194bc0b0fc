from __future__ import annotations

"""Editing services: structural operators, command dispatch, history.

Services are UI-agnostic and instantiated directly by the session, which
injects their dependencies.
"""

from .structure_editing_service import OperationResult, StructureEditingService  # noqa: F401
from .command_dispatcher import CommandDispatcher  # noqa: F401
from .history_service import ActionMeta, HistoryService  # noqa: F401
from .capability_service import Capabilities, get_capabilities  # noqa: F401
from .drag_service import DragSession, DropTarget  # noqa: F401

__all__: list[str] = [
    "OperationResult",
    "StructureEditingService",
    "CommandDispatcher",
    "ActionMeta",
    "HistoryService",
    "Capabilities",
    "get_capabilities",
    "DragSession",
    "DropTarget",
]
