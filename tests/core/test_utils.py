from form_designer.core.models.nodes import ContainerNode, LeafNode, LeafProperties
from form_designer.core.utils import ancestors, display_name, top_level_ids
from form_designer.core.validation import check_invariants, is_valid
from form_designer.core.models.document import Document


def test_display_name_per_kind():
    assert display_name(None) == ""
    assert display_name(ContainerNode("c", "r", "Contact")) == "Contact"
    assert display_name(LeafNode("a", "r", LeafProperties(label="City"))) == "City"
    assert display_name(LeafNode("a", "r", LeafProperties())) == "Form Field"
    long_text = "x" * 40
    text = LeafNode("t", "r", LeafProperties(control_type="plain-text", content=long_text))
    assert display_name(text) == "x" * 30
    assert display_name(LeafNode("t", "r", LeafProperties(control_type="plain-text"))) == "Plain Text"
    assert display_name(LeafNode("l", "r", LeafProperties(control_type="link", content=""))) == "Link"


def test_ancestors_and_top_level_ids(populated):
    session, ids = populated
    doc = session.document
    assert ancestors(doc, ids["phone"]) == [ids["group"], ids["root"]]
    assert ancestors(doc, ids["root"]) == []
    assert top_level_ids(doc, [ids["phone"], ids["group"], ids["name"], ids["name"]]) == [ids["group"], ids["name"]]


def test_check_invariants_reports_corruption():
    root = ContainerNode("r", "", "Root", ("a", "a", "ghost"))
    a = LeafNode("a", "r")
    orphan = LeafNode("o", "nowhere")
    problems = check_invariants(Document("F", "r", {"r": root, "a": a, "o": orphan}))
    text = " | ".join(problems)
    assert "ghost" in text
    assert "'a' appears 2 times" in text
    assert "'o' has no container parent" in text
    assert not is_valid(Document("F", "missing", {"r": root}))


def test_populated_document_is_valid(populated):
    session, _ = populated
    assert is_valid(session.document)
