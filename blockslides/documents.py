"""
Building substrate nodes from user content.

Content reaches the editor in several shapes:

- None: an empty document
- str: an HTML fragment ("<p>Hi</p>", or plain text)
- dict: one node in the JSON exchange shape
- list: several nodes in the JSON exchange shape
- a ``prosemirror`` Node

How invalid content is handled depends on the validation mode:

- strict: ``ContentError``
- lenient: a warning is logged and empty content is used instead
- off: nodes are built without checking them against the schema
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from pydantic import ValidationError

from blockslides.config.schemas import JSONContent, ValidationMode
from blockslides.errors import ContentError
from blockslides.schema.html import DOMParser

if TYPE_CHECKING:
    from blockslides.schema.synthesizer import SynthesizedSchema

logger = logging.getLogger(__name__)


def _is_node(value: Any) -> bool:
    return hasattr(value, "to_json") and hasattr(value, "node_size")


def _build(item: Any, schema: SynthesizedSchema, mode: ValidationMode) -> Any:
    if _is_node(item):
        node = item
    else:
        if mode is not ValidationMode.OFF:
            try:
                JSONContent.model_validate(item)
            except ValidationError as exc:
                raise ContentError(f"Invalid content: {exc}", content=item) from exc

        try:
            node = schema.node_from_json(item)
        except (KeyError, ValueError, TypeError) as exc:
            raise ContentError(f"Content does not match the schema: {exc}", content=item) from exc

    if mode is not ValidationMode.OFF:
        try:
            node.check()
        except ValueError as exc:
            raise ContentError(f"Content does not match the schema: {exc}", content=item) from exc

    return node


def _json_items(content: Any, schema: SynthesizedSchema) -> list[Any]:
    if content is None:
        return []
    if isinstance(content, str):
        return DOMParser(schema).parse_fragment(content)
    if _is_node(content) or isinstance(content, dict):
        return [content]
    if isinstance(content, Iterable):
        return list(content)
    raise ContentError(f"Unsupported content type: {type(content).__name__}", content=content)


def create_document(
    content: Any,
    schema: SynthesizedSchema,
    *,
    mode: ValidationMode = ValidationMode.LENIENT,
) -> Any:
    """
    Build a top-level document node.

    Raises:
        ContentError: Invalid content in strict mode, or content the
            substrate cannot build in any mode
    """
    top_type = schema.pm.top_node_type

    if content is None:
        return top_type.create_and_fill()

    try:
        if isinstance(content, str):
            item: Any = DOMParser(schema).parse(content)
        elif isinstance(content, dict) and content.get("type") != schema.top_node:
            item = {"type": schema.top_node, "content": [content]}
        elif isinstance(content, list):
            item = {"type": schema.top_node, "content": content}
        else:
            item = content
        return _build(item, schema, mode)
    except ContentError:
        if mode is not ValidationMode.LENIENT:
            raise
        logger.warning("[editor] Invalid content, falling back to an empty document")
        return top_type.create_and_fill()


def create_nodes(
    content: Any,
    schema: SynthesizedSchema,
    *,
    mode: ValidationMode = ValidationMode.LENIENT,
) -> list[Any]:
    """
    Build the nodes to insert for ``content``.

    A top-level document contributes its children. In lenient mode,
    invalid content yields an empty list.
    """
    try:
        nodes = [_build(item, schema, mode) for item in _json_items(content, schema)]
    except ContentError:
        if mode is not ValidationMode.LENIENT:
            raise
        logger.warning("[editor] Invalid content, nothing inserted")
        return []

    if len(nodes) == 1 and nodes[0].type.name == schema.top_node:
        return list(nodes[0].content.content)
    return nodes
