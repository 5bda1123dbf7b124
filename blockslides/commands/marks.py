"""
Mark and attribute commands.

Types can be given by name or as a substrate type.
"""

from __future__ import annotations

from typing import Any, Mapping

from .manager import Command, CommandProps


def _mark_type(props: CommandProps, type_or_name: Any) -> Any:
    if isinstance(type_or_name, str):
        return props.state.schema.marks.get(type_or_name)
    return type_or_name


def _marks_at_cursor(props: CommandProps) -> list[Any]:
    tr = props.tr
    if tr.stored_marks is not None:
        return list(tr.stored_marks)
    return list(tr.doc.resolve(tr.selection.head).marks())


def is_mark_active(props: CommandProps, type_or_name: Any) -> bool:
    """Whether the mark is set on the whole selection (or at the cursor)."""
    mark_type = _mark_type(props, type_or_name)
    if mark_type is None:
        return False

    selection = props.tr.selection
    if selection.empty:
        return any(mark.type is mark_type for mark in _marks_at_cursor(props))
    return bool(props.tr.doc.range_has_mark(selection.from_, selection.to, mark_type))


def set_mark(type_or_name: Any, attributes: Mapping[str, Any] | None = None) -> Command:
    """Add a mark to the selection, or to the stored marks at the cursor."""

    def command(props: CommandProps) -> bool:
        mark_type = _mark_type(props, type_or_name)
        if mark_type is None:
            return False

        if props.dispatch:
            selection = props.tr.selection
            if selection.empty:
                previous = next(
                    (m.attrs for m in _marks_at_cursor(props) if m.type is mark_type), {}
                )
                props.tr.add_stored_mark(mark_type.create({**previous, **(attributes or {})}))
            else:
                props.tr.add_mark(
                    selection.from_, selection.to, mark_type.create(dict(attributes or {}))
                )
        return True

    return command


def unset_mark(type_or_name: Any) -> Command:
    """Remove a mark from the selection, or from the stored marks."""

    def command(props: CommandProps) -> bool:
        mark_type = _mark_type(props, type_or_name)
        if mark_type is None:
            return False

        if props.dispatch:
            selection = props.tr.selection
            if selection.empty:
                props.tr.remove_stored_mark(mark_type)
            else:
                props.tr.remove_mark(selection.from_, selection.to, mark_type)
        return True

    return command


def toggle_mark(type_or_name: Any, attributes: Mapping[str, Any] | None = None) -> Command:
    def command(props: CommandProps) -> bool:
        if is_mark_active(props, type_or_name):
            return props.commands.unset_mark(type_or_name)
        return props.commands.set_mark(type_or_name, attributes)

    return command


def update_attributes(type_or_name: Any, attributes: Mapping[str, Any]) -> Command:
    """
    Merge ``attributes`` into every node or mark of the given type in
    the selection. Node types win when a name is both (it never is: see
    schema synthesis).
    """

    def command(props: CommandProps) -> bool:
        schema = props.state.schema
        name = type_or_name if isinstance(type_or_name, str) else type_or_name.name
        node_type = schema.nodes.get(name)
        mark_type = None if node_type is not None else schema.marks.get(name)
        if node_type is None and mark_type is None:
            return False

        tr = props.tr
        selection = tr.selection
        found: list[tuple[int, Any]] = []

        def visit(node: Any, pos: int, parent: Any, index: int) -> bool:
            if node_type is not None and node.type is node_type:
                found.append((pos, node))
            elif mark_type is not None and node.is_inline:
                for mark in node.marks:
                    if mark.type is mark_type:
                        found.append((pos, node))
            return True

        tr.doc.nodes_between(selection.from_, selection.to, visit)
        if not found:
            return False

        if props.dispatch:
            for pos, node in found:
                if node_type is not None:
                    tr.set_node_markup(pos, None, {**node.attrs, **attributes})
                    continue
                for mark in node.marks:
                    if mark.type is mark_type:
                        start = max(pos, selection.from_)
                        end = min(pos + node.node_size, selection.to)
                        tr.add_mark(start, end, mark_type.create({**mark.attrs, **attributes}))
        return True

    return command
