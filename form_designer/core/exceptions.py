from __future__ import annotations

"""Exception classes for the form designer core.

Domain failures (missing targets, structural violations) are never raised;
operators report them through ``OperationResult``. The exceptions below
signal programmer errors only.
"""

from typing import Any, Optional


class FormDesignerError(Exception):
    """Base exception for all form designer programmer errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.cause = cause


class UnknownCommandError(FormDesignerError):
    """Raised when a command object has no registered operator."""

    def __init__(self, command: Any) -> None:
        super().__init__(f"Unknown command type: {type(command).__name__}")
        self.command = command


class ReentrantCommitError(FormDesignerError):
    """Raised when ``commit`` is called while another commit is running.

    Typically a subscriber reacting to a change by committing again; doing
    so would interleave two history entries.
    """
    pass
