"""
Content commands: replace, insert and delete document content.
"""

from __future__ import annotations

from typing import Any

from blockslides.documents import create_document, create_nodes
from blockslides.state import Selection
from blockslides.tracker import PositionTracker

from .manager import PREVENT_UPDATE, Command, CommandProps

Range = tuple[int, int]


def _validation_mode(props: CommandProps) -> Any:
    return props.editor.settings.validation_mode


def set_content(content: Any = None, *, emit_update: bool = True) -> Command:
    """Replace the whole document."""

    def command(props: CommandProps) -> bool:
        doc = create_document(content, props.editor.schema, mode=_validation_mode(props))

        if props.dispatch:
            props.tr.replace_with(0, props.tr.doc.content.size, doc.content)
            props.tr.set_meta(PREVENT_UPDATE, not emit_update)
        return True

    return command


def clear_content(*, emit_update: bool = True) -> Command:
    """Replace the document with the smallest valid one."""

    def command(props: CommandProps) -> bool:
        return props.commands.set_content(None, emit_update=emit_update)

    return command


def insert_content_at(
    position: int | Range,
    value: Any,
    *,
    update_selection: bool = True,
) -> Command:
    """
    Insert content at a position, or replace a range with it.

    ``value`` is anything ``create_nodes`` accepts. Returns False when
    there is nothing to insert.
    """

    def command(props: CommandProps) -> bool:
        nodes = create_nodes(value, props.editor.schema, mode=_validation_mode(props))
        if not nodes:
            return False

        if props.dispatch:
            from_, to = (position, position) if isinstance(position, int) else position
            tracker = PositionTracker(props.tr)
            props.tr.replace_with(from_, to, nodes)

            if update_selection:
                end = tracker.map(to).position
                props.tr.set_selection(Selection.at(end))
        return True

    return command


def insert_content(value: Any, *, update_selection: bool = True) -> Command:
    """Insert content at the selection, replacing it."""

    def command(props: CommandProps) -> bool:
        selection = props.tr.selection
        return props.commands.insert_content_at(
            (selection.from_, selection.to), value, update_selection=update_selection
        )

    return command


def delete_range(range_: Range) -> Command:
    """Delete the content between two positions."""

    def command(props: CommandProps) -> bool:
        from_, to = range_
        if props.dispatch:
            props.tr.delete(from_, to)
        return True

    return command


def delete_selection() -> Command:
    """Delete the selected content. False on an empty selection."""

    def command(props: CommandProps) -> bool:
        if props.tr.selection.empty:
            return False
        if props.dispatch:
            props.tr.delete_selection()
        return True

    return command
