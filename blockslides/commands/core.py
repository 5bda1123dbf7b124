"""
Built-in command set.

``CoreCommands`` is prepended to every editor unless
``EditorSettings.enable_core_extensions`` is False.
"""

from __future__ import annotations

from typing import Any

from blockslides.extensions.base import Extension
from blockslides.extensions.fields import FieldContext

from . import content, marks, meta, nodes, selection
from .manager import CommandFactory


def _core_commands(ctx: FieldContext) -> dict[str, CommandFactory]:
    return {
        # Content
        "set_content": content.set_content,
        "clear_content": content.clear_content,
        "insert_content": content.insert_content,
        "insert_content_at": content.insert_content_at,
        "delete_range": content.delete_range,
        "delete_selection": content.delete_selection,
        # Selection
        "set_text_selection": selection.set_text_selection,
        "select_all": selection.select_all,
        "focus": selection.focus,
        "blur": selection.blur,
        # Marks and attributes
        "set_mark": marks.set_mark,
        "unset_mark": marks.unset_mark,
        "toggle_mark": marks.toggle_mark,
        "update_attributes": marks.update_attributes,
        # Blocks
        "set_node": nodes.set_node,
        "toggle_node": nodes.toggle_node,
        # Transaction
        "set_meta": meta.set_meta,
        "command": meta.command,
    }


CoreCommands: Any = Extension.create(
    name="core_commands",
    add_commands=_core_commands,
)
