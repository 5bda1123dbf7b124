"""
StarterKit: the built-in kit in one extension.

    Editor([StarterKit])
    Editor([StarterKit.configure(heading={"levels": [1, 2]}, link=False)])

Every member is included with its default options unless its option is
False (left out) or a dict (passed to the member's ``configure``).
"""

from __future__ import annotations

import logging
from typing import Any

from blockslides.extensions.base import Extendable, Extension
from blockslides.extensions.fields import FieldContext

from .block_attributes import BlockAttributes
from .marks import Bold, Italic, Link, TextColor, Underline
from .nodes import Document, HardBreak, Heading, Paragraph, Slide, Text

logger = logging.getLogger(__name__)


MEMBERS: dict[str, Extendable] = {
    "document": Document,
    "slide": Slide,
    "paragraph": Paragraph,
    "heading": Heading,
    "text": Text,
    "hard_break": HardBreak,
    "bold": Bold,
    "italic": Italic,
    "underline": Underline,
    "link": Link,
    "text_color": TextColor,
    "block_attributes": BlockAttributes,
}


def _options(ctx: FieldContext) -> dict[str, Any]:
    return {key: {} for key in MEMBERS}


def _extensions(ctx: FieldContext) -> list[Extendable]:
    extensions: list[Extendable] = []

    for key, member in MEMBERS.items():
        options = ctx.options.get(key, {})
        if options is False:
            logger.debug(f"[extensions] StarterKit member '{key}' disabled")
            continue
        extensions.append(member.configure(**options) if options else member)

    return extensions


StarterKit = Extension.create(
    name="starter_kit",
    add_options=_options,
    add_extensions=_extensions,
)
