"""
Editor events.

Handlers are registered per event name and called in registration
order with keyword arguments:

    editor.on("update", lambda *, editor, transaction: ...)

Events emitted by the editor:

    before_create, create     editor
    transaction               editor, transaction
    update                    editor, transaction (document changed)
    selection_update          editor, transaction (selection changed)
    focus, blur               editor
    destroy                   editor
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]

EDITOR_EVENTS = (
    "before_create",
    "create",
    "update",
    "selection_update",
    "transaction",
    "focus",
    "blur",
    "destroy",
)


class EventEmitter:
    """Register and emit named events."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event: str, handler: EventHandler) -> EventHandler:
        """Register a handler. Returns it, so ``on`` works as a decorator target."""
        self._handlers[event].append(handler)
        return handler

    def off(self, event: str, handler: EventHandler | None = None) -> None:
        """Remove one handler, or every handler of ``event``."""
        if handler is None:
            self._handlers.pop(event, None)
            return

        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, **payload: Any) -> list[Any]:
        """Call every handler of ``event`` and collect the results."""
        handlers = list(self._handlers.get(event, ()))
        if handlers:
            logger.debug(f"[events] Emitting '{event}' to {len(handlers)} handler(s)")
        return [handler(**payload) for handler in handlers]

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))

    def clear(self) -> None:
        self._handlers.clear()
