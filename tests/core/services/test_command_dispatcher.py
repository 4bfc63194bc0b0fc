from dataclasses import dataclass

import pytest

from form_designer.core.exceptions import UnknownCommandError
from form_designer.core.models.commands import (
    COMMAND_TYPES,
    AddNode,
    DeleteSubtree,
    NodeSpec,
    Rename,
    describe_command,
)
from form_designer.core.services.command_dispatcher import CommandDispatcher


@dataclass(frozen=True)
class Teleport:
    node_id: str


def test_dispatch_routes_to_operator(service, empty_doc):
    dispatcher = CommandDispatcher(service)
    res = dispatcher.dispatch(empty_doc, AddNode(empty_doc.root_id, 0, NodeSpec.leaf("Name")))
    assert res.success
    assert res.document.get(res.details["node_id"]).properties.label == "Name"


def test_every_command_type_has_an_operator():
    from form_designer.core.services.command_dispatcher import _HANDLERS

    assert set(COMMAND_TYPES) == set(_HANDLERS)


def test_unknown_command_raises_in_strict_mode(service, empty_doc):
    dispatcher = CommandDispatcher(service, strict=True)
    with pytest.raises(UnknownCommandError) as excinfo:
        dispatcher.dispatch(empty_doc, Teleport("x"))
    assert "Teleport" in str(excinfo.value)


def test_unknown_command_is_reported_when_lenient(service, empty_doc):
    dispatcher = CommandDispatcher(service, strict=False)
    res = dispatcher.dispatch(empty_doc, Teleport("x"))
    assert res.success is False
    assert res.document is empty_doc
    assert res.details == {"command_type": "Teleport"}


def test_malformed_payload_when_lenient(service, empty_doc):
    dispatcher = CommandDispatcher(service, strict=False)
    res = dispatcher.dispatch(empty_doc, AddNode(empty_doc.root_id, "first", NodeSpec.leaf("X")))
    assert res.success is False
    assert res.document is empty_doc


def test_malformed_payload_raises_when_strict(service, empty_doc):
    dispatcher = CommandDispatcher(service, strict=True)
    with pytest.raises((TypeError, ValueError)):
        dispatcher.dispatch(empty_doc, AddNode(empty_doc.root_id, "first", NodeSpec.leaf("X")))


def test_domain_failure_is_not_an_exception(service, empty_doc):
    dispatcher = CommandDispatcher(service, strict=True)
    res = dispatcher.dispatch(empty_doc, DeleteSubtree(empty_doc.root_id))
    assert res.success is False


def test_describe_command():
    assert describe_command(Rename("Intake")) == {"type": "Rename", "new_name": "Intake"}
