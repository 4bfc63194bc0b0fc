import pytest

from form_designer.core.models.interaction import Editing, Idle, Selecting
from form_designer.core.services.history_service import ActionMeta, HistoryService


@pytest.fixture
def docs(service, empty_doc):
    """Four successive documents produced by renaming the form."""
    out = [empty_doc]
    for name in ("One", "Two", "Three"):
        out.append(service.rename(out[-1], name).document)
    return out


def _assert_paired(history):
    assert len(history.past) == len(history.past_meta)
    assert len(history.future) == len(history.future_meta)


def test_initial_state(docs):
    history = HistoryService(docs[0])
    assert history.present is docs[0]
    assert history.can_undo() is False
    assert history.can_redo() is False
    assert history.undo() is None
    assert history.redo() is None


def test_push_undo_redo_cycle(docs):
    history = HistoryService(docs[0])
    history.push(docs[1], ActionMeta("one", Selecting(["a"])))
    history.push(docs[2], ActionMeta("two", Editing("b")))
    _assert_paired(history)

    meta = history.undo()
    assert meta == ActionMeta("two", Editing("b"))
    assert history.present is docs[1]
    assert history.can_redo() is True
    _assert_paired(history)

    meta = history.undo()
    assert meta.message == "one"
    assert history.present is docs[0]

    assert history.redo().message == "one"
    assert history.redo().message == "two"
    assert history.present is docs[2]
    assert history.can_redo() is False
    _assert_paired(history)


def test_push_clears_future(docs):
    history = HistoryService(docs[0])
    history.push(docs[1], ActionMeta("one"))
    history.push(docs[2], ActionMeta("two"))
    history.undo()
    history.push(docs[3], ActionMeta("three"))
    assert history.future == ()
    assert history.future_meta == ()
    assert [m.message for m in history.past_meta] == ["one", "three"]


def test_max_history_trims_documents_and_meta_together(docs):
    history = HistoryService(docs[0], max_history=2)
    for i, doc in enumerate(docs[1:], start=1):
        history.push(doc, ActionMeta(f"step {i}"))
    assert history.past == (docs[1], docs[2])
    assert [m.message for m in history.past_meta] == ["step 2", "step 3"]
    assert history.undo().message == "step 3"
    assert history.undo().message == "step 2"
    assert history.undo() is None
    assert history.present is docs[1]


def test_max_history_is_at_least_one(docs):
    history = HistoryService(docs[0], max_history=0)
    assert history.max_history == 1


def test_default_meta_snapshot_is_idle():
    assert ActionMeta("x").interaction_snapshot == Idle()


def test_clear_resets_stacks_and_replaces_present(docs):
    history = HistoryService(docs[0])
    history.push(docs[1], ActionMeta("one"))
    history.undo()
    history.clear(docs[3])
    assert history.present is docs[3]
    assert history.past == () and history.future == ()
    assert history.can_undo() is False and history.can_redo() is False
