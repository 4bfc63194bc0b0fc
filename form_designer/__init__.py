"""Top-level package for the form designer editing core.

This package hosts the GUI-agnostic document model and editing engine.
Front-ends should only depend on the public API exposed here rather than
importing internal modules directly.
"""

from .core.models import Document  # re-export for convenience
from .core.session import EditorSession

__version__ = "0.1.0"

__all__: list[str] = [
    "Document",
    "EditorSession",
]
