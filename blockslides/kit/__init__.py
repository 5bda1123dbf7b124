"""
Blockslides Kit

Built-in nodes, marks and the StarterKit bundle.
"""

from .block_attributes import BlockAttributes
from .marks import Bold, Italic, Link, TextColor, Underline
from .nodes import Document, HardBreak, Heading, Paragraph, Slide, Text
from .starter_kit import StarterKit

__all__ = [
    "BlockAttributes",
    "Bold",
    "Document",
    "HardBreak",
    "Heading",
    "Italic",
    "Link",
    "Paragraph",
    "Slide",
    "StarterKit",
    "Text",
    "TextColor",
    "Underline",
]
