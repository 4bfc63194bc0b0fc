from __future__ import annotations

"""Resolve commands to structural operators.

Each command type maps to exactly one :class:`StructureEditingService`
method. The dispatcher receives a document and a command and returns an
:class:`OperationResult`; it never touches history, which keeps operators
free of reentrant commits by construction.
"""

import logging
from typing import Any, Callable, Dict, Optional, Type

from form_designer.core.exceptions import UnknownCommandError
from form_designer.core.models.commands import (
    AddNode,
    AddNodesBulk,
    ConvertLeafKind,
    DeleteMany,
    DeleteSubtree,
    Move,
    Rename,
    RenameNode,
    Reorder,
    UnwrapContainer,
    UpdateAppearance,
    UpdateBinding,
    UpdateContextualLayout,
    UpdateProperties,
    WrapInContainer,
    describe_command,
)
from form_designer.core.models.document import Document
from form_designer.core.services.structure_editing_service import OperationResult, StructureEditingService

__all__ = ["CommandDispatcher"]

logger = logging.getLogger(__name__)

_Handler = Callable[[StructureEditingService, Document, Any], OperationResult]

_HANDLERS: Dict[Type[Any], _Handler] = {
    AddNode: lambda svc, doc, c: svc.add_node(doc, c.parent_id, c.index, c.spec),
    AddNodesBulk: lambda svc, doc, c: svc.add_nodes_bulk(doc, c.parent_id, c.index, c.specs),
    DeleteSubtree: lambda svc, doc, c: svc.delete_subtree(doc, c.node_id),
    DeleteMany: lambda svc, doc, c: svc.delete_many(doc, c.node_ids),
    Move: lambda svc, doc, c: svc.move(doc, c.node_id, c.from_parent_id, c.to_parent_id, c.to_index),
    Reorder: lambda svc, doc, c: svc.reorder(doc, c.node_id, c.parent_id, c.from_index, c.to_index),
    WrapInContainer: lambda svc, doc, c: svc.wrap_in_container(doc, c.node_ids, c.parent_id),
    UnwrapContainer: lambda svc, doc, c: svc.unwrap_container(doc, c.container_id),
    ConvertLeafKind: lambda svc, doc, c: svc.convert_leaf_kind(doc, c.node_id, c.target_kind),
    UpdateProperties: lambda svc, doc, c: svc.update_properties(doc, c.node_id, c.changes),
    UpdateAppearance: lambda svc, doc, c: svc.update_appearance(doc, c.node_id, c.changes),
    UpdateBinding: lambda svc, doc, c: svc.update_binding(doc, c.node_id, c.binding),
    UpdateContextualLayout: lambda svc, doc, c: svc.update_contextual_layout(doc, c.node_id, c.changes),
    Rename: lambda svc, doc, c: svc.rename(doc, c.new_name),
    RenameNode: lambda svc, doc, c: svc.rename_node(doc, c.node_id, c.new_name),
}


class CommandDispatcher:
    """Apply a command to a document through the matching operator.

    Parameters
    ----------
    editing_service
        Operators to dispatch to.
    strict
        When True an unknown command type raises :class:`UnknownCommandError`
        (development); when False it is logged and reported as a failed
        result (production).
    """

    def __init__(self, editing_service: Optional[StructureEditingService] = None, strict: bool = True) -> None:
        self._service = editing_service or StructureEditingService()
        self._strict = bool(strict)

    @property
    def editing_service(self) -> StructureEditingService:
        return self._service

    @property
    def strict(self) -> bool:
        return self._strict

    def dispatch(self, document: Document, command: Any) -> OperationResult:
        handler = _HANDLERS.get(type(command))
        if handler is None:
            if self._strict:
                raise UnknownCommandError(command)
            logger.error("Dispatch FAIL: unknown command type=%s", type(command).__name__)
            return OperationResult(
                False,
                "Unknown command.",
                {"command_type": type(command).__name__},
                document,
            )
        logger.debug("Dispatch: %s", describe_command(command))
        try:
            return handler(self._service, document, command)
        except (AttributeError, TypeError, ValueError) as exc:
            # Malformed payload shape (e.g. a field of the wrong type)
            if self._strict:
                raise
            logger.error("Dispatch FAIL: malformed %s: %s", type(command).__name__, exc, exc_info=True)
            return OperationResult(False, "Malformed command.", {"error": str(exc)}, document)
