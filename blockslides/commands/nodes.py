"""
Block type commands.
"""

from __future__ import annotations

from typing import Any, Mapping

from .manager import Command, CommandProps


def _node_type(props: CommandProps, type_or_name: Any) -> Any:
    if isinstance(type_or_name, str):
        return props.state.schema.nodes.get(type_or_name)
    return type_or_name


def _selected_textblocks(props: CommandProps) -> list[tuple[int, Any]]:
    tr = props.tr
    selection = tr.selection

    if selection.empty:
        resolved = tr.doc.resolve(selection.head)
        if resolved.depth and resolved.parent.is_textblock:
            return [(resolved.before(), resolved.parent)]
        return []

    found: list[tuple[int, Any]] = []

    def visit(node: Any, pos: int, parent: Any, index: int) -> bool:
        if node.is_textblock:
            found.append((pos, node))
            return False
        return True

    tr.doc.nodes_between(selection.from_, selection.to, visit)
    return found


def is_node_active(
    props: CommandProps, type_or_name: Any, attributes: Mapping[str, Any] | None = None
) -> bool:
    """Whether every textblock in the selection has the type (and attributes)."""
    node_type = _node_type(props, type_or_name)
    blocks = _selected_textblocks(props)
    if node_type is None or not blocks:
        return False

    return all(
        node.type is node_type
        and all(node.attrs.get(key) == value for key, value in (attributes or {}).items())
        for _, node in blocks
    )


def set_node(type_or_name: Any, attributes: Mapping[str, Any] | None = None) -> Command:
    """Turn the selected textblocks into ``type_or_name``."""

    def command(props: CommandProps) -> bool:
        node_type = _node_type(props, type_or_name)
        if node_type is None or not node_type.is_textblock:
            return False

        blocks = _selected_textblocks(props)
        if not blocks:
            return False

        if props.dispatch:
            for pos, _ in blocks:
                props.tr.set_node_markup(pos, node_type, dict(attributes or {}))
        return True

    return command


def toggle_node(
    type_or_name: Any,
    toggle_type_or_name: Any,
    attributes: Mapping[str, Any] | None = None,
) -> Command:
    """
    Set ``type_or_name``, or ``toggle_type_or_name`` when the selection
    already is that type with those attributes.
    """

    def command(props: CommandProps) -> bool:
        if is_node_active(props, type_or_name, attributes):
            return props.commands.set_node(toggle_type_or_name)
        return props.commands.set_node(type_or_name, attributes)

    return command
