"""Shared fixtures for the form designer tests.

Every test runs against a temporary user config directory so that the
developer's own overrides never leak into results, and against a
deterministic id factory so ids read ``n1``, ``n2``... in assertions.
"""

import logging

import pytest

from form_designer.config import ConfigManager
from form_designer.core.factory import NodeFactory, sequential_ids
from form_designer.core.models.commands import AddNode, NodeSpec
from form_designer.core.services.command_dispatcher import CommandDispatcher
from form_designer.core.services.structure_editing_service import StructureEditingService
from form_designer.core.session import EditorSession

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

EDITOR_CONFIG = {
    "default_form_name": "Untitled Form",
    "root_name": "Root",
    "max_history": 100,
    "strict_commands": True,
    "id_length": 8,
}


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config directory at a temp dir and drop the cached manager."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("FORM_DESIGNER_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def factory():
    return NodeFactory(id_factory=sequential_ids("n"))


@pytest.fixture
def service(factory):
    return StructureEditingService(factory)


@pytest.fixture
def empty_doc(factory):
    """Fresh document; its root gets id ``n1``."""
    return factory.create_document("Untitled Form")


@pytest.fixture
def session(service):
    dispatcher = CommandDispatcher(service, strict=True)
    return EditorSession(
        dispatcher=dispatcher,
        check_invariants_on_commit=True,
        editor_config=EDITOR_CONFIG,
    )


@pytest.fixture
def add():
    """Return a helper committing an AddNode and returning the new node id."""

    def _add(session, parent_id, spec, index=None, message=None):
        result = session.commit(AddNode(parent_id, index, spec), message or f"Add '{spec.name}'")
        assert result.success, result.message
        return result.details["node_id"]

    return _add


@pytest.fixture
def populated(session, add):
    """Session holding root > [Name, Email, Group > [Phone, Notes]].

    Returns the session and a name -> id dict. Building the tree leaves
    five entries in the history.
    """
    root = session.root_id
    ids = {"root": root}
    ids["name"] = add(session, root, NodeSpec.leaf("Name"))
    ids["email"] = add(session, root, NodeSpec.leaf("Email"))
    ids["group"] = add(session, root, NodeSpec.container("Group"))
    ids["phone"] = add(session, ids["group"], NodeSpec.leaf("Phone"))
    ids["notes"] = add(session, ids["group"], NodeSpec.leaf("Notes", "plain-text"))
    return session, ids
