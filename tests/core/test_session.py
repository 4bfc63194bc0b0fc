import random

import pytest

from form_designer.core.exceptions import ReentrantCommitError, UnknownCommandError
from form_designer.core.models.commands import (
    AddNode,
    DeleteMany,
    DeleteSubtree,
    Move,
    NodeSpec,
    Rename,
    Reorder,
    UnwrapContainer,
    WrapInContainer,
)
from form_designer.core.models.interaction import Editing, Idle, Selecting
from form_designer.core.models.nodes import ContainerNode
from form_designer.core.session import EditorSession, SessionEvent
from form_designer.core.validation import check_invariants


def _children(session, node_id):
    return list(session.nodes_by_id[node_id].children)


def test_new_session_starts_with_empty_root(session):
    assert session.form_name == "Untitled Form"
    root = session.nodes_by_id[session.root_id]
    assert isinstance(root, ContainerNode)
    assert root.name == "Root"
    assert root.children == ()
    assert session.can_undo is False and session.can_redo is False
    assert session.last_notification is None


def test_add_wrap_undo_delete_walkthrough(session):
    root = session.root_id
    name_id = session.commit(AddNode(root, 0, NodeSpec.leaf("Name")), "Add 'Name'").details["node_id"]
    assert _children(session, root) == [name_id]
    email_id = session.commit(AddNode(root, 1, NodeSpec.leaf("Email")), "Add 'Email'").details["node_id"]
    assert _children(session, root) == [name_id, email_id]

    session.interaction.select([name_id, email_id])
    res = session.commit(WrapInContainer((name_id, email_id), root), "Wrap 2 component(s)")
    box = res.details["container_id"]
    assert _children(session, root) == [box]
    assert _children(session, box) == [name_id, email_id]

    session.interaction.select([box])
    assert session.undo() is True
    assert _children(session, root) == [name_id, email_id]
    assert session.interaction.state == Selecting((name_id, email_id))
    assert session.last_notification == "Undid: Wrap 2 component(s)"

    box = session.commit(WrapInContainer((name_id, email_id), root), "Wrap 2 component(s)").details["container_id"]
    session.commit(DeleteSubtree(box), "Delete 'Layout Container'")
    assert _children(session, root) == []
    assert set(session.nodes_by_id) == {root}


def test_failed_command_leaves_history_untouched(populated):
    session, ids = populated
    before = session.document
    past = len(session.history.past)
    res = session.commit(DeleteSubtree(ids["root"]), "Delete 'Root'")
    assert res.success is False
    assert session.document is before
    assert len(session.history.past) == past


def test_unchanged_success_is_still_recorded(populated):
    session, ids = populated
    past = len(session.history.past)
    res = session.commit(Reorder(ids["name"], ids["root"], 0, 0), "Reorder component")
    assert res.success
    assert len(session.history.past) == past + 1


def test_undo_restores_interaction_snapshot(populated):
    session, ids = populated
    session.interaction.select([ids["name"]])
    session.commit(DeleteSubtree(ids["name"]), "Delete 'Name'")
    session.interaction.clear()

    assert session.undo()
    assert ids["name"] in session.nodes_by_id
    assert session.interaction.state == Selecting((ids["name"],))

    session.interaction.start_editing(ids["email"])
    assert session.redo()
    assert ids["name"] not in session.nodes_by_id
    assert session.interaction.state == Selecting((ids["name"],))
    assert session.last_notification == "Redid: Delete 'Name'"


def test_snapshot_is_taken_before_dispatch(populated):
    session, ids = populated
    session.interaction.start_editing(ids["notes"])
    session.commit(Rename("Intake"), "Renamed form to \"Intake\"")
    assert session.history.past_meta[-1].interaction_snapshot == Editing(ids["notes"])


def test_new_commit_after_undo_clears_redo(populated):
    session, ids = populated
    session.commit(Rename("First"), "Rename first")
    session.undo()
    assert session.can_redo
    session.commit(Rename("Second"), "Rename second")
    assert session.can_redo is False
    assert session.redo() is False
    assert session.form_name == "Second"


def test_undo_everything_then_redo_everything(populated):
    session, ids = populated
    history = [session.document]
    commands = [
        (Move(ids["name"], ids["root"], ids["group"], 0), "Move 'Name'"),
        (WrapInContainer((ids["phone"], ids["notes"]), ids["group"]), "Wrap 2 component(s)"),
        (DeleteMany((ids["email"], ids["name"])), "Delete 2 components"),
        (Rename("Contact details"), "Rename"),
    ]
    for command, message in commands:
        assert session.commit(command, message).success
        history.append(session.document)

    for expected in reversed(history[:-1]):
        assert session.undo()
        assert session.document == expected
    for expected in history[1:]:
        assert session.redo()
        assert session.document == expected


def test_undo_with_empty_history_is_noop(session):
    assert session.undo() is False
    assert session.redo() is False
    assert session.last_notification is None


def test_max_history_from_config(service):
    from form_designer.core.services.command_dispatcher import CommandDispatcher

    session = EditorSession(
        dispatcher=CommandDispatcher(service),
        editor_config={"max_history": 2},
    )
    for name in ("a", "b", "c"):
        session.commit(Rename(name), f"Rename {name}")
    assert len(session.history.past) == 2
    assert session.undo() and session.undo()
    assert session.undo() is False
    assert session.form_name == "a"


def test_session_reads_config_manager_when_not_given(isolated_config):
    isolated_config.mkdir(parents=True, exist_ok=True)
    (isolated_config / "editor.yml").write_text(
        "default_form_name: Intake\nroot_name: Page\nid_length: 12\n", encoding="utf-8"
    )
    session = EditorSession()
    assert session.form_name == "Intake"
    assert session.nodes_by_id[session.root_id].name == "Page"
    assert len(session.root_id) == 12


def test_unknown_command_raises_through_commit(session):
    with pytest.raises(UnknownCommandError):
        session.commit(object(), "Nothing")
    # the failed attempt did not leave the session locked
    assert session.commit(Rename("Ok"), "Rename").success


def test_subscribers_receive_events(populated):
    session, ids = populated
    events = []
    unsubscribe = session.subscribe(events.append)
    session.commit(Rename("X"), "Rename X")
    session.undo()
    session.redo()
    session.commit(DeleteSubtree(ids["root"]), "nope")
    unsubscribe()
    session.undo()
    assert events == [
        SessionEvent("commit", "Rename X"),
        SessionEvent("undo", "Rename X"),
        SessionEvent("redo", "Rename X"),
    ]


def test_commit_from_subscriber_is_rejected(populated):
    session, ids = populated

    def _reenter(event):
        session.commit(Rename("Nested"), "Nested")

    session.subscribe(_reenter)
    with pytest.raises(ReentrantCommitError):
        session.commit(Rename("Outer"), "Outer")


def test_reset_starts_over(populated):
    session, ids = populated
    session.interaction.select([ids["name"]])
    session.reset()
    assert session.can_undo is False
    assert session.interaction.state == Idle()
    assert list(session.nodes_by_id) == [session.root_id]


@pytest.mark.parametrize("seed", [1, 7, 42, 2024])
def test_random_command_sequences_keep_tree_valid(service, seed):
    from form_designer.core.services.command_dispatcher import CommandDispatcher

    rng = random.Random(seed)
    session = EditorSession(dispatcher=CommandDispatcher(service), editor_config={"max_history": 500})
    snapshots = [session.document]

    for step in range(120):
        doc = session.document
        node_ids = list(doc.nodes)
        containers = [n.id for n in doc.nodes.values() if isinstance(n, ContainerNode)]
        non_root = [i for i in node_ids if i != doc.root_id]
        choice = rng.randrange(7)
        if choice <= 1 or not non_root:
            spec = NodeSpec.container() if rng.random() < 0.3 else NodeSpec.leaf(f"F{step}")
            command = AddNode(rng.choice(containers), rng.randrange(-1, 5), spec)
        elif choice == 2:
            command = DeleteSubtree(rng.choice(non_root))
        elif choice == 3:
            node_id = rng.choice(non_root)
            command = Move(node_id, doc.get(node_id).parent_id, rng.choice(containers), rng.randrange(0, 5))
        elif choice == 4:
            parent = doc.get(rng.choice(containers))
            picks = rng.sample(list(parent.children), k=min(len(parent.children), 2))
            command = WrapInContainer(tuple(picks), parent.id)
        elif choice == 5:
            command = UnwrapContainer(rng.choice(containers))
        else:
            command = DeleteMany(tuple(rng.sample(non_root, k=min(len(non_root), 3))))

        res = session.commit(command, f"step {step}")
        assert check_invariants(session.document) == []
        if res.success:
            snapshots.append(session.document)
        else:
            assert session.document is doc

    # full undo walks back through every recorded snapshot
    for expected in reversed(snapshots[:-1]):
        assert session.undo()
        assert session.document == expected
        assert check_invariants(session.document) == []
    assert session.undo() is False
