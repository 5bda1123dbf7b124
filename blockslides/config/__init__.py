"""
Blockslides Configuration

Editor settings and the JSON document exchange shape.
"""

from .schemas import EditorSettings, JSONContent, JSONMark, ValidationMode, load_settings

__all__ = [
    "EditorSettings",
    "JSONContent",
    "JSONMark",
    "ValidationMode",
    "load_settings",
]
