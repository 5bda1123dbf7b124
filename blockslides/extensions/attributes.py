"""
Attribute registry.

Collects the attribute declarations every extension contributes, keyed by
the type that owns them:

- ``add_attributes`` on a node or mark declares attributes of that type
  (resolved through the parent chain, so ``ctx.parent()`` gives the
  inherited set)
- ``add_global_attributes`` on any extension declares attributes for a
  list of other types

A later declaration for the same (type, name) pair replaces the earlier
one entirely. Fields are never merged one by one.

Example:
    Heading = Node.create(
        name="heading",
        add_attributes=lambda ctx: {
            "level": {"default": 1, "rendered": False},
            "placeholder": {"default": None},
        },
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator, Mapping

from .base import Extendable, ExtensionKind
from .fields import FieldContext, resolve_field

if TYPE_CHECKING:
    from bs4 import Tag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attribute:
    """
    Declaration of a single attribute.

    Attributes:
        default: Value used when a node/mark is created without it
        has_default: False for required attributes without a default
        rendered: Whether the attribute is rendered to HTML
        render_html: attrs -> partial HTML attribute dict
        parse_html: element -> value extracted from parsed HTML
        is_required: Whether the attribute must be supplied
        validate: Optional validator passed through to the schema
    """

    default: Any = None
    has_default: bool = True
    rendered: bool = True
    render_html: Callable[[Mapping[str, Any]], Mapping[str, Any] | None] | None = None
    parse_html: Callable[[Tag], Any] | None = None
    is_required: bool = False
    validate: Any = None

    @classmethod
    def from_config(cls, value: Attribute | Mapping[str, Any] | None) -> Attribute:
        """Build an attribute from a declaration dict, filling in defaults."""
        if isinstance(value, Attribute):
            return value

        config = dict(value or {})
        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            logger.debug(f"[attributes] Ignoring unknown attribute keys: {sorted(unknown)}")

        has_default = "default" in config or not config.get("is_required", False)
        default = config.get("default")
        if callable(default):
            default = default()

        return cls(
            default=default,
            has_default=has_default,
            rendered=config.get("rendered", True),
            render_html=config.get("render_html"),
            parse_html=config.get("parse_html"),
            is_required=config.get("is_required", False),
            validate=config.get("validate"),
        )

    def to_spec(self) -> dict[str, Any]:
        """Attribute spec in the shape the document schema expects."""
        return {"default": self.default} if self.has_default else {}


@dataclass(frozen=True)
class ExtensionAttribute:
    """An attribute bound to the type it belongs to."""

    type: str
    name: str
    attribute: Attribute


class AttributeRegistry:
    """
    Flat, ordered table of ``ExtensionAttribute`` entries.

    Ordering follows contribution order; replacing an entry moves it to
    the end, which is the order the render pipeline merges in.
    """

    def __init__(self, items: Iterable[ExtensionAttribute] = ()) -> None:
        self._items: dict[tuple[str, str], ExtensionAttribute] = {}
        for item in items:
            self.add(item)

    def add(self, item: ExtensionAttribute) -> None:
        key = (item.type, item.name)
        if key in self._items:
            logger.debug(f"[attributes] Replacing attribute {item.type}.{item.name}")
            del self._items[key]
        self._items[key] = item

    def get(self, type_name: str, name: str) -> ExtensionAttribute | None:
        return self._items.get((type_name, name))

    def for_type(self, type_name: str) -> list[ExtensionAttribute]:
        """All attributes owned by ``type_name``, in registry order."""
        return [item for item in self._items.values() if item.type == type_name]

    def __iter__(self) -> Iterator[ExtensionAttribute]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __repr__(self) -> str:
        return f"<AttributeRegistry attributes={[f'{t}.{n}' for t, n in self._items]}>"

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        extensions: Iterable[Extendable],
        *,
        editor: Any = None,
        storage: Mapping[str, dict[str, Any]] | None = None,
    ) -> AttributeRegistry:
        """
        Collect attributes from a resolved extension sequence.

        Global attributes are collected first, then per-type attributes,
        so a type's own declaration wins over a global one.

        Args:
            extensions: Flattened and sorted descriptors
            editor: Editor passed to hook contexts
            storage: Storage side-table keyed by extension name
        """
        extensions = list(extensions)
        typed = tuple(
            e for e in extensions if e.kind in (ExtensionKind.NODE, ExtensionKind.MARK)
        )
        registry = cls()

        for extension in extensions:
            context = FieldContext(
                name=extension.name,
                options=extension.options,
                storage=(storage or {}).get(extension.name),
                editor=editor,
                extensions=typed,
            )
            groups = resolve_field(extension, "add_global_attributes", context)

            for group in groups or ():
                for type_name in group.get("types", ()):
                    for name, declaration in group.get("attributes", {}).items():
                        registry.add(
                            ExtensionAttribute(type_name, name, Attribute.from_config(declaration))
                        )

        for extension in typed:
            context = FieldContext(
                name=extension.name,
                options=extension.options,
                storage=(storage or {}).get(extension.name),
                editor=editor,
            )
            declarations = resolve_field(extension, "add_attributes", context)

            for name, declaration in (declarations or {}).items():
                registry.add(
                    ExtensionAttribute(extension.name, name, Attribute.from_config(declaration))
                )

        logger.debug(f"[attributes] Collected {len(registry)} attributes")
        return registry


def build_attribute_registry(
    extensions: Iterable[Extendable],
    **kwargs: Any,
) -> AttributeRegistry:
    """Functional alias for ``AttributeRegistry.build``."""
    return AttributeRegistry.build(extensions, **kwargs)
