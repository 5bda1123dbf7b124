"""
Selection and focus commands.
"""

from __future__ import annotations

from typing import Any

from blockslides.scheduler import DeferredTask
from blockslides.state import Selection

from .manager import FOCUS, Command, CommandProps


def _resolve_focus_position(position: Any, doc: Any) -> Selection | None:
    if position is None or position is False:
        return None
    if position == "start":
        return Selection.at_start(doc)
    if position == "end":
        return Selection.at(doc.content.size)
    if position == "all":
        return Selection.all(doc)
    if isinstance(position, int):
        return Selection.at(position)
    raise ValueError(f"Unknown focus position: {position!r}")


def set_text_selection(position: int | tuple[int, int]) -> Command:
    """Select a range, or place the cursor at a position."""

    def command(props: CommandProps) -> bool:
        anchor, head = (position, position) if isinstance(position, int) else position
        if props.dispatch:
            props.tr.set_selection(Selection(anchor, head))
        return True

    return command


def select_all() -> Command:
    def command(props: CommandProps) -> bool:
        if props.dispatch:
            props.tr.set_selection(Selection.all(props.tr.doc))
        return True

    return command


def focus(position: Any = None) -> Command:
    """
    Focus the editor, optionally moving the cursor.

    Focus is applied when the transaction is dispatched, so a chain that
    raises or is probed leaves the focus state alone.

    ``position`` is None (keep the selection), "start", "end", "all" or
    a document position.
    """

    def command(props: CommandProps) -> bool:
        selection = _resolve_focus_position(position, props.tr.doc)

        if props.dispatch:
            if selection is not None:
                props.tr.set_selection(selection)
            props.tr.set_meta(FOCUS, True)
        return True

    return command


def blur() -> Command:
    """
    Remove focus on the next frame.

    The deferred task is skipped if the editor is destroyed before the
    frame runs.
    """

    def command(props: CommandProps) -> bool:
        editor = props.editor

        def release() -> None:
            if not editor.is_destroyed:
                editor.set_focused(False)

        if props.dispatch:
            editor.scheduler.schedule(
                DeferredTask(release, token=editor.cancellation_token, name="blur")
            )
        return True

    return command
