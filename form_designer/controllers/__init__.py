"""Controllers mediating between UI widgets and the editor session."""

from .editor_controller import EditorController  # noqa: F401

__all__: list[str] = ["EditorController"]
