from __future__ import annotations

"""Editor session: the single owned store of the form being designed.

The session ties together the command dispatcher, the history and the live
interaction store. It is the only place that commits: UI collaborators hand
it commands and read derived views (``form_name``, ``root_id``,
``nodes_by_id``, ``can_undo``...), subscribing to change events instead of
keeping their own copies of the document.
"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, List, Mapping, Optional

from form_designer.core.exceptions import ReentrantCommitError
from form_designer.core.factory import NodeFactory, build_container_properties, random_id
from form_designer.core.interaction_store import InteractionStore
from form_designer.core.models.document import Document
from form_designer.core.models.nodes import Node
from form_designer.core.services.command_dispatcher import CommandDispatcher
from form_designer.core.services.history_service import ActionMeta, HistoryService
from form_designer.core.services.structure_editing_service import OperationResult, StructureEditingService
from form_designer.core.validation import check_invariants

__all__ = ["SessionEvent", "EditorSession"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionEvent:
    """Change notification sent to subscribers.

    Attributes
    ----------
    kind
        ``"commit"``, ``"undo"``, ``"redo"`` or ``"reset"``.
    message
        Message of the history entry involved, if any.
    """

    kind: str
    message: str = ""


Subscriber = Callable[[SessionEvent], None]


class EditorSession:
    """Own the document history and expose commit/undo/redo.

    Parameters
    ----------
    document
        Starting document. A fresh one with an empty root is created when
        omitted.
    dispatcher
        Command dispatcher; built from the config when omitted.
    interaction
        Live interaction store shared with UI collaborators.
    max_history
        Undo depth; defaults to the ``editor.max_history`` config value.
    check_invariants_on_commit
        Log an error whenever a committed document breaks a tree invariant.
        Meant for development and tests.
    editor_config
        Editor config section. Read from :class:`ConfigManager` when omitted.
    """

    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        dispatcher: Optional[CommandDispatcher] = None,
        interaction: Optional[InteractionStore] = None,
        max_history: Optional[int] = None,
        check_invariants_on_commit: bool = False,
        editor_config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if editor_config is None:
            from form_designer.config import ConfigManager

            editor_config = ConfigManager().get_editor_config()
        self._config = dict(editor_config)

        if dispatcher is None:
            dispatcher = self._build_dispatcher()
        self._dispatcher = dispatcher

        if document is None:
            document = dispatcher.editing_service.factory.create_document(
                self._config.get("default_form_name", "Untitled Form"),
                self._config.get("root_name", "Root"),
            )

        self._history = HistoryService(document, max_history or int(self._config.get("max_history", 100)))
        self._interaction = interaction or InteractionStore()
        self._check_invariants = bool(check_invariants_on_commit)
        self._subscribers: List[Subscriber] = []
        self._busy = False
        self._last_notification: Optional[str] = None
        self._logger = logging.getLogger(f"{__name__}.EditorSession")

    def _build_dispatcher(self) -> CommandDispatcher:
        from form_designer.config import ConfigManager

        id_length = int(self._config.get("id_length", 8))
        factory = NodeFactory(
            id_factory=lambda: random_id(id_length),
            container_defaults=build_container_properties(ConfigManager().get_container_defaults()),
        )
        return CommandDispatcher(
            StructureEditingService(factory),
            strict=bool(self._config.get("strict_commands", True)),
        )

    # -------------------------------------------------------------------------
    # Derived, read-only views
    # -------------------------------------------------------------------------

    @property
    def document(self) -> Document:
        return self._history.present

    @property
    def form_name(self) -> str:
        return self._history.present.form_name

    @property
    def root_id(self) -> str:
        return self._history.present.root_id

    @property
    def nodes_by_id(self) -> Mapping[str, Node]:
        return self._history.present.nodes

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo()

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo()

    @property
    def last_notification(self) -> Optional[str]:
        """Toast text for the most recent undo/redo, e.g. ``"Undid: Delete 'Name'"``."""
        return self._last_notification

    @property
    def interaction(self) -> InteractionStore:
        return self._interaction

    @property
    def history(self) -> HistoryService:
        return self._history

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    # -------------------------------------------------------------------------
    # Inbound API
    # -------------------------------------------------------------------------

    def commit(self, command: Any, message: str) -> OperationResult:
        """Apply ``command`` and record it in history under ``message``.

        A command the operator rejects (missing target, structural
        violation) leaves the document, the history and the interaction
        state untouched; the failed result is returned for the caller to
        surface if it wishes.
        """
        if self._busy:
            raise ReentrantCommitError("commit() called while another commit is in progress")
        self._busy = True
        try:
            # Captured before dispatch: this is the state the step is undone into
            snapshot = self._interaction.state
            result = self._dispatcher.dispatch(self._history.present, command)
            if not result.success or result.document is None:
                self._logger.info("Commit skipped: %s (%s)", message, result.message)
                return result

            self._history.push(result.document, ActionMeta(message, snapshot))
            self._logger.info("Commit OK: %s", message)
            if self._check_invariants:
                problems = check_invariants(result.document)
                if problems:
                    self._logger.error("Invariant violation after %r: %s", message, "; ".join(problems))
            self._notify(SessionEvent("commit", message))
            return result
        finally:
            self._busy = False

    def undo(self) -> bool:
        """Step back one entry and restore the interaction state it was committed from."""
        if self._busy:
            raise ReentrantCommitError("undo() called while a commit is in progress")
        meta = self._history.undo()
        if meta is None:
            return False
        self._interaction.set(meta.interaction_snapshot)
        self._last_notification = f"Undid: {meta.message}"
        self._logger.info("History: undo %r", meta.message)
        self._notify(SessionEvent("undo", meta.message))
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone entry."""
        if self._busy:
            raise ReentrantCommitError("redo() called while a commit is in progress")
        meta = self._history.redo()
        if meta is None:
            return False
        self._interaction.set(meta.interaction_snapshot)
        self._last_notification = f"Redid: {meta.message}"
        self._logger.info("History: redo %r", meta.message)
        self._notify(SessionEvent("redo", meta.message))
        return True

    def reset(self, document: Optional[Document] = None) -> None:
        """Start over with ``document`` (or a fresh one) and an empty history."""
        if document is None:
            document = self._dispatcher.editing_service.factory.create_document(
                self._config.get("default_form_name", "Untitled Form"),
                self._config.get("root_name", "Root"),
            )
        self._history.clear(document)
        self._interaction.clear()
        self._last_notification = None
        self._notify(SessionEvent("reset"))

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register ``subscriber`` for change events; returns an unsubscribe callable."""
        self._subscribers.append(subscriber)

        def _unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return _unsubscribe

    def _notify(self, event: SessionEvent) -> None:
        was_busy = self._busy
        self._busy = True
        try:
            for subscriber in list(self._subscribers):
                subscriber(event)
        finally:
            self._busy = was_busy
