import logging

import pytest

from form_designer.core.factory import (
    NodeFactory,
    build_container_properties,
    random_id,
    sanitize_label_to_field_name,
    sequential_ids,
)
from form_designer.core.models.commands import NodeSpec


@pytest.mark.parametrize(
    "label,expected",
    [
        ("Arrest Date", "arrestDate"),
        ("first name", "firstName"),
        ("  first-name (legal) ", "firstNameLegal"),
        ("Email", "email"),
        ("ZIP code 2", "zIPCode2"),
        ("", ""),
    ],
)
def test_sanitize_label_to_field_name(label, expected):
    assert sanitize_label_to_field_name(label) == expected


def test_sequential_ids():
    next_id = sequential_ids("x")
    assert [next_id(), next_id(), next_id()] == ["x1", "x2", "x3"]


def test_random_id_length():
    assert len(random_id(12)) == 12
    assert random_id() != random_id()


def test_new_id_skips_taken_ids():
    ids = iter(["a", "a", "b"])
    factory = NodeFactory(id_factory=lambda: next(ids))
    assert factory.new_id({"a": object()}) == "b"


def test_plain_text_and_link_defaults():
    factory = NodeFactory(id_factory=sequential_ids())
    text = factory.create_leaf(NodeSpec.leaf("Welcome", "plain-text"), "root")
    assert text.properties.content == "Welcome"
    assert text.properties.label == ""
    assert text.properties.text_element == "p"

    link = factory.create_leaf(NodeSpec.leaf("Docs", "link"), "root")
    assert (link.properties.href, link.properties.target) == ("#", "_self")
    assert link.properties.text_element is None


def test_general_input_has_no_placeholder():
    factory = NodeFactory(id_factory=sequential_ids())
    leaf = factory.create_leaf(NodeSpec.leaf("Age", required=True, options=["1", "2"]), "root")
    assert leaf.properties.placeholder == ""
    assert leaf.properties.field_name == "age"
    assert leaf.properties.required is True
    assert leaf.properties.options == ("1", "2")
    assert leaf.binding is None


def test_unknown_extra_property_is_ignored(caplog):
    factory = NodeFactory(id_factory=sequential_ids())
    with caplog.at_level(logging.WARNING, logger="form_designer.core.factory"):
        leaf = factory.create_leaf(NodeSpec.leaf("Age", colour="red"), "root")
    assert leaf.properties.label == "Age"
    assert "colour" in caplog.text


def test_unknown_control_type_falls_back_to_text_input():
    factory = NodeFactory(id_factory=sequential_ids())
    assert factory.create_leaf(NodeSpec.leaf("X", "slider"), "root").properties.control_type == "text-input"


def test_build_container_properties_partial_and_unknown_keys(caplog):
    with caplog.at_level(logging.WARNING, logger="form_designer.core.factory"):
        props = build_container_properties({"gap": "lg", "shadow": True, "appearance": {"style": "info"}})
    assert props.gap == "lg"
    assert props.arrangement == "stack"
    assert props.appearance.style == "info"
    assert props.appearance.padding == "md"
    assert "shadow" in caplog.text
