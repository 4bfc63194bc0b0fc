from __future__ import annotations

"""Creation of new nodes with canonical defaults.

Nodes are only ever created here, on behalf of the structural operators.
UI code describes what it wants with a :class:`NodeSpec`; the factory derives
ids, default container properties and the label/field-name/placeholder
triple of data-bound leaves.
"""

import logging
import re
import uuid
from dataclasses import fields, replace
from typing import Any, Callable, Dict, Mapping, Optional

from form_designer.core.models.commands import NodeSpec
from form_designer.core.models.document import Document
from form_designer.core.models.nodes import (
    CONTROL_TYPES,
    Appearance,
    Binding,
    ContainerNode,
    ContainerProperties,
    LeafNode,
    LeafProperties,
)

__all__ = [
    "IdFactory",
    "random_id",
    "sequential_ids",
    "sanitize_label_to_field_name",
    "build_container_properties",
    "NodeFactory",
]

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]

_WORD_START = re.compile(r"^\w|[A-Z]|\b\w", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def random_id(length: int = 8) -> str:
    """Return a short opaque id."""
    return uuid.uuid4().hex[: max(4, int(length))]


def sequential_ids(prefix: str = "n") -> IdFactory:
    """Return an id factory yielding ``prefix1``, ``prefix2``... (tests, demos)."""
    counter = {"value": 0}

    def _next() -> str:
        counter["value"] += 1
        return f"{prefix}{counter['value']}"

    return _next


def sanitize_label_to_field_name(label: str) -> str:
    """Derive a camel-cased, alphanumeric-only field name from a label.

    >>> sanitize_label_to_field_name("Arrest Date")
    'arrestDate'
    >>> sanitize_label_to_field_name("  first-name (legal) ")
    'firstNameLegal'
    """
    if not label:
        return ""
    text = label.strip()

    def _case(match: "re.Match[str]") -> str:
        word = match.group(0)
        return word.lower() if match.start() == 0 else word.upper()

    text = _WORD_START.sub(_case, text)
    text = _WHITESPACE.sub("", text)
    return _NON_ALNUM.sub("", text)


def build_container_properties(defaults: Optional[Mapping[str, Any]] = None) -> ContainerProperties:
    """Build container properties from a (possibly partial) defaults mapping.

    Unknown keys are logged and ignored so a stale user config file cannot
    break node creation.
    """
    if not defaults:
        return ContainerProperties()
    data = dict(defaults)
    appearance_data = data.pop("appearance", None) or {}
    known = set(ContainerProperties.keys()) - {"appearance"}
    unknown = sorted(set(data) - known)
    if unknown:
        logger.warning("Ignoring unknown container default keys: %s", ", ".join(unknown))
    props = ContainerProperties(**{k: v for k, v in data.items() if k in known})
    if appearance_data:
        app_known = set(Appearance.keys())
        app_unknown = sorted(set(appearance_data) - app_known)
        if app_unknown:
            logger.warning("Ignoring unknown appearance default keys: %s", ", ".join(app_unknown))
        appearance = Appearance(**{k: v for k, v in appearance_data.items() if k in app_known})
        props = replace(props, appearance=appearance)
    return props


class NodeFactory:
    """Create container and leaf nodes from specs.

    Parameters
    ----------
    id_factory
        Callable returning a fresh opaque id. Defaults to :func:`random_id`.
    container_defaults
        Canonical property set given to every new container.
    """

    def __init__(
        self,
        id_factory: Optional[IdFactory] = None,
        container_defaults: Optional[ContainerProperties] = None,
    ) -> None:
        self._id_factory: IdFactory = id_factory or random_id
        self._container_defaults = container_defaults or ContainerProperties()

    @property
    def container_defaults(self) -> ContainerProperties:
        return self._container_defaults

    def new_id(self, taken: Optional[Mapping[str, Any]] = None) -> str:
        """Return an id not present in ``taken``."""
        new = self._id_factory()
        if taken is not None:
            # Retry until the id is free
            while new in taken:
                new = self._id_factory()
        return new

    def create_document(self, form_name: str, root_name: str = "Root") -> Document:
        """Return a fresh document holding only an empty root container."""
        root = ContainerNode(
            id=self.new_id(),
            parent_id="",
            name=root_name,
            children=(),
            properties=self._container_defaults,
        )
        return Document(form_name, root.id, {root.id: root})

    def create(self, spec: NodeSpec, parent_id: str, taken: Optional[Mapping[str, Any]] = None):
        if spec.kind == "container":
            return self.create_container(parent_id, spec.name or "Layout Container", taken)
        return self.create_leaf(spec, parent_id, taken)

    def create_container(
        self,
        parent_id: str,
        name: str = "Layout Container",
        taken: Optional[Mapping[str, Any]] = None,
    ) -> ContainerNode:
        return ContainerNode(
            id=self.new_id(taken),
            parent_id=parent_id,
            name=name,
            children=(),
            properties=self._container_defaults,
        )

    def create_leaf(self, spec: NodeSpec, parent_id: str, taken: Optional[Mapping[str, Any]] = None) -> LeafNode:
        control_type = spec.control_type if spec.control_type in CONTROL_TYPES else "text-input"
        name = spec.name or ""
        is_textual = control_type in ("plain-text", "link")

        binding: Optional[Binding] = None
        if spec.origin == "data" and spec.binding_source is not None:
            src = spec.binding_source
            binding = Binding(
                source_node_id=src.source_node_id,
                source_node_name=src.source_node_name,
                field_id=src.field_id,
                field_name=name,
                path=src.path,
            )

        props: Dict[str, Any] = {
            "control_type": control_type,
            "label": "" if is_textual else name,
            "content": name if is_textual else None,
            "field_name": "" if is_textual else sanitize_label_to_field_name(name),
            "required": False,
            "placeholder": f"Enter {name}" if spec.origin == "data" else "",
            "text_element": "p" if control_type == "plain-text" else None,
            "href": "#" if control_type == "link" else None,
            "target": "_self" if control_type == "link" else None,
        }
        allowed = {f.name for f in fields(LeafProperties)}
        for key, value in dict(spec.extra_properties or {}).items():
            if key not in allowed:
                logger.warning("Ignoring unknown leaf property %r in node spec", key)
                continue
            props[key] = tuple(value) if key == "options" else value

        return LeafNode(
            id=self.new_id(taken),
            parent_id=parent_id,
            properties=LeafProperties(**props),
            origin=spec.origin,
            binding=binding,
        )
