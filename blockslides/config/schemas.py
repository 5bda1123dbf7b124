"""
Configuration Schemas for Blockslides.

Pydantic models for editor settings and for the JSON document exchange
shape. Settings can be given as a model instance or as a plain mapping
(validated with ``model_validate``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field, model_validator


class ValidationMode(str, Enum):
    """How strictly initial and replacement content is checked."""

    OFF = "off"  # Build the document without checking it
    LENIENT = "lenient"  # Fall back to an empty document on invalid content
    STRICT = "strict"  # Raise ContentError on invalid content


class EditorSettings(BaseModel):
    """
    Editor settings.

    Used for type-safe settings access:

        settings = EditorSettings.model_validate({"validation_mode": "strict"})
    """

    editable: bool = Field(True, description="Whether the document accepts edits")
    enable_core_extensions: bool = Field(
        True, description="Prepend the built-in command extension"
    )
    enable_input_rules: bool | list[str] = Field(
        True, description="Input rules on, off, or only for the named extensions"
    )
    enable_paste_rules: bool | list[str] = Field(
        True, description="Paste rules on, off, or only for the named extensions"
    )
    validation_mode: ValidationMode = Field(ValidationMode.LENIENT)
    auto_focus: bool = Field(False, description="Focus the editor once it is created")

    class Config:
        extra = "forbid"
        use_enum_values = False


class JSONMark(BaseModel):
    """A mark in the JSON exchange shape."""

    type: str = Field(..., min_length=1)
    attrs: dict[str, Any] | None = None


class JSONContent(BaseModel):
    """
    A node in the JSON exchange shape:

        {"type": "paragraph", "attrs": {...}, "content": [...]}
        {"type": "text", "text": "Hello", "marks": [{"type": "bold"}]}
    """

    type: str = Field(..., min_length=1)
    attrs: dict[str, Any] | None = None
    content: list[JSONContent] | None = None
    text: str | None = None
    marks: list[JSONMark] | None = None

    class Config:
        extra = "forbid"

    @model_validator(mode="after")
    def _check_text(self) -> JSONContent:
        if self.type == "text":
            if not self.text:
                raise ValueError("Text nodes need non-empty 'text'")
            if self.content:
                raise ValueError("Text nodes cannot have 'content'")
        elif self.text is not None:
            raise ValueError(f"Only text nodes carry 'text' (got type '{self.type}')")
        return self

    def to_dict(self) -> dict[str, Any]:
        """Plain dict without unset keys, ready for the document substrate."""
        return self.model_dump(exclude_none=True)


def load_settings(value: EditorSettings | Mapping[str, Any] | None) -> EditorSettings:
    """Coerce ``value`` into ``EditorSettings``."""
    if value is None:
        return EditorSettings()
    if isinstance(value, EditorSettings):
        return value
    return EditorSettings.model_validate(dict(value))
