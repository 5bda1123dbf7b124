"""
Editor facade.

Ties the pieces together for one document:

    extensions -> ExtensionManager -> SynthesizedSchema
                                   -> CommandManager
                                   -> lifecycle hooks on an EventEmitter
    content    -> EditorState

Usage:
    editor = Editor([StarterKit], content="<h1>Hello</h1>")
    editor.chain().select_all().toggle_mark("bold").run()
    editor.get_html()   # '<section ...><h1 ...><strong>Hello</strong></h1></section>'

The editor is headless: it has no view. Hosts that draw the document
read ``editor.state`` and call ``editor.dispatch(tr)`` with the
transactions they build.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from blockslides.commands import CoreCommands
from blockslides.commands.manager import (
    FOCUS,
    PREVENT_UPDATE,
    CanCommands,
    CommandChain,
    CommandManager,
    SingleCommands,
)
from blockslides.config.schemas import EditorSettings, load_settings
from blockslides.documents import create_document
from blockslides.errors import EditorDestroyedError
from blockslides.events import EventEmitter, EventHandler
from blockslides.extensions import Extendable, ExtensionManager
from blockslides.plugins import append_transactions, filter_transaction
from blockslides.rules import run_input_rules, run_paste_rules
from blockslides.scheduler import CancellationToken, FrameScheduler, Scheduler
from blockslides.schema import SynthesizedSchema, generate_html, get_text
from blockslides.state import EditorState, Transaction

logger = logging.getLogger(__name__)


class Editor:
    """
    Headless editor built from a list of extensions.

    Args:
        extensions: Extension descriptors (nested lists allowed)
        content: Initial content (HTML, JSON exchange shape or None)
        settings: ``EditorSettings`` or a mapping validated into one
        scheduler: Runs deferred work; defaults to a ``FrameScheduler``
        view: Optional host view handed to commands
    """

    def __init__(
        self,
        extensions: Iterable[Extendable] = (),
        content: Any = None,
        settings: EditorSettings | Mapping[str, Any] | None = None,
        scheduler: Scheduler | None = None,
        view: Any = None,
    ):
        self.settings = load_settings(settings)
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.view = view
        self.cancellation_token = CancellationToken()
        self.events = EventEmitter()

        self._destroyed = False
        self._focused = False
        self._user_extensions = list(extensions)

        self._setup(self._user_extensions)
        self.state = EditorState.create(
            self.schema.pm,
            doc=create_document(content, self.schema, mode=self.settings.validation_mode),
        )

        self.emit("before_create", editor=self)
        logger.info(f"[editor] Created | extensions={len(self.extension_manager)}")
        self.emit("create", editor=self)

        if self.settings.auto_focus:
            self.commands.focus()

    def _setup(self, extensions: list[Extendable]) -> None:
        if self.settings.enable_core_extensions:
            extensions = [CoreCommands, *extensions]

        self.extension_manager = ExtensionManager(
            extensions,
            editor=self,
            enable_input_rules=self.settings.enable_input_rules,
            enable_paste_rules=self.settings.enable_paste_rules,
        )
        self.command_manager = CommandManager(self, self.extension_manager.commands)
        self.extension_manager.bind_events(self.events)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def schema(self) -> SynthesizedSchema:
        return self.extension_manager.schema

    @property
    def extension_storage(self) -> dict[str, dict[str, Any]]:
        """Storage bags keyed by extension name."""
        return self.extension_manager.storage

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def is_focused(self) -> bool:
        return self._focused

    @property
    def is_editable(self) -> bool:
        return self.settings.editable and not self._destroyed

    @property
    def is_empty(self) -> bool:
        """True when the document equals the smallest valid document."""
        empty = self.schema.pm.top_node_type.create_and_fill()
        return self.state.doc.eq(empty)

    def set_editable(self, editable: bool) -> None:
        self.settings = self.settings.model_copy(update={"editable": editable})

    def set_focused(self, focused: bool) -> None:
        """Record a focus change and emit ``focus`` or ``blur``."""
        if focused == self._focused:
            return
        self._focused = focused
        self.emit("focus" if focused else "blur", editor=self)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    @property
    def commands(self) -> SingleCommands:
        return self.command_manager.commands

    def chain(self) -> CommandChain:
        return self.command_manager.chain()

    def can(self) -> CanCommands:
        return self.command_manager.can()

    def handle_shortcut(self, shortcut: str) -> bool:
        """Run the handlers bound to ``shortcut`` until one handles it."""
        for handler in self.extension_manager.keyboard_shortcuts.get(shortcut, ()):
            if handler():
                return True
        return False

    def handle_text_input(self, text: str, from_: int | None = None, to: int | None = None) -> bool:
        """
        Insert typed text, letting input rules rewrite it first.

        Returns:
            True if an input rule applied
        """
        selection = self.state.selection
        from_ = selection.from_ if from_ is None else from_
        to = selection.to if to is None else to

        if run_input_rules(self, from_, to, text):
            return True

        self.dispatch(self.state.tr.insert_text(text, from_, to))
        return False

    def handle_paste(self, content: Any) -> bool:
        """
        Insert pasted content (HTML, JSON or nodes) at the selection and
        run paste rules over the inserted range. One transaction.

        Returns:
            False if there was nothing to insert
        """
        self.command_manager.check_alive()

        tr = self.state.tr
        from_ = tr.selection.from_
        props = self.command_manager.create_props(tr, should_dispatch=True)
        if not props.commands.insert_content(content):
            return False

        run_paste_rules(self, tr, from_, tr.selection.head)
        self.dispatch(tr)
        return True

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def dispatch(self, tr: Transaction) -> None:
        """
        Apply a transaction and emit the matching events.

        Plugins may drop the transaction or append follow-ups; a
        ``transaction`` event is emitted for each one applied.

        Raises:
            EditorDestroyedError: If the editor was destroyed
        """
        if self._destroyed:
            raise EditorDestroyedError("Cannot dispatch to a destroyed editor")

        previous = self.state
        plugins = self.extension_manager.plugins
        if not filter_transaction(plugins, tr, previous):
            return

        self.state, applied = append_transactions(plugins, tr, previous)

        for applied_tr in applied:
            self.emit("transaction", editor=self, transaction=applied_tr)

        if self.state.selection != previous.selection:
            self.emit("selection_update", editor=self, transaction=tr)

        doc_changed = any(applied_tr.doc_changed for applied_tr in applied)
        if doc_changed and not tr.get_meta(PREVENT_UPDATE):
            self.emit("update", editor=self, transaction=tr)

        if tr.get_meta(FOCUS):
            self.set_focused(True)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def get_json(self) -> dict[str, Any]:
        return self.state.doc.to_json()

    def get_html(self) -> str:
        return generate_html(self.state.doc, self.schema)

    def get_text(self, block_separator: str = "\n\n") -> str:
        return get_text(self.state.doc, self.schema, block_separator=block_separator)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on(self, event: str, handler: EventHandler) -> EventHandler:
        return self.events.on(event, handler)

    def off(self, event: str, handler: EventHandler | None = None) -> None:
        self.events.off(event, handler)

    def emit(self, event: str, **payload: Any) -> list[Any]:
        return self.events.emit(event, **payload)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def reconfigure(self, extensions: Iterable[Extendable]) -> None:
        """
        Replace the extension list.

        A new schema is synthesized and the document is rebuilt from its
        JSON under that schema. Event handlers registered with ``on``
        are kept; extension hooks are re-bound.
        """
        if self._destroyed:
            raise EditorDestroyedError("Cannot reconfigure a destroyed editor")

        content = self.get_json()
        selection = self.state.selection

        self.extension_manager.unbind_events(self.events)

        self._user_extensions = list(extensions)
        self._setup(self._user_extensions)
        self.state = EditorState.create(
            self.schema.pm,
            doc=create_document(content, self.schema, mode=self.settings.validation_mode),
            selection=selection,
        )
        logger.info(f"[editor] Reconfigured | extensions={len(self.extension_manager)}")

    def destroy(self) -> None:
        """Emit ``destroy``, cancel deferred work and drop all handlers."""
        if self._destroyed:
            return

        self.emit("destroy", editor=self)
        self.cancellation_token.cancel()
        self._destroyed = True
        self.events.clear()
        logger.info("[editor] Destroyed")

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else "active"
        return f"<Editor {state} extensions={len(self.extension_manager)}>"
