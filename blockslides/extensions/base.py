"""
Extension descriptors.

Three descriptor kinds share one base class:

- ``Extension``: cross-cutting behaviour (commands, plugins, global attributes)
- ``Node``: a document node type
- ``Mark``: an inline mark type

Descriptors are immutable. ``extend()`` creates a specialization that
points at its parent; ``configure()`` creates a sibling with different
options. Neither touches the original.

Example:
    Paragraph = Node.create(
        name="paragraph",
        group="block",
        content="inline*",
        parse_html=lambda ctx: [{"tag": "p"}],
        render_html=lambda ctx, props: ["p", props.html_attributes, 0],
    )

    Centered = Paragraph.extend(
        add_attributes=lambda ctx: {"align": {"default": "center"}},
    )
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Mapping

from blockslides.utils import merge_deep

from .fields import FieldContext, get_extension_field, linearize, resolve_field

logger = logging.getLogger(__name__)


class ExtensionKind(str, Enum):
    """What a descriptor contributes to the editor."""

    BEHAVIOR = "extension"
    NODE = "node"
    MARK = "mark"


class Extendable:
    """
    Base class for all extension descriptors.

    Attributes:
        name: Type or extension name (inherited from the parent if omitted)
        config: Read-only mapping of the fields this descriptor defines
        parent: Descriptor this one specializes, or None
        lineage: Precomputed lookup chain (self, parent, grandparent, ...)
    """

    kind: ClassVar[ExtensionKind]
    default_priority: ClassVar[int] = 100

    def __init__(
        self,
        config: Mapping[str, Any] | None = None,
        *,
        parent: Extendable | None = None,
        **fields: Any,
    ):
        merged = {**(config or {}), **fields}
        self._config: Mapping[str, Any] = MappingProxyType(merged)
        self._parent = parent
        self._name: str = merged.get("name") or (parent.name if parent is not None else "")
        self._lineage = linearize(self)
        self._nested: tuple[Extendable, ...] | None = None

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> Mapping[str, Any]:
        return self._config

    @property
    def parent(self) -> Extendable | None:
        return self._parent

    @property
    def lineage(self) -> tuple[Extendable, ...]:
        return self._lineage

    def specializes(self, other: Extendable) -> bool:
        """True if ``other`` is this descriptor or one of its ancestors."""
        return any(ancestor is other for ancestor in self._lineage)

    # -------------------------------------------------------------------------
    # Resolved fields
    # -------------------------------------------------------------------------

    @property
    def priority(self) -> int:
        value = get_extension_field(self, "priority")
        return self.default_priority if value is None else value

    @property
    def options(self) -> dict[str, Any]:
        """Resolved options. A fresh dict on every access."""
        value = resolve_field(self, "add_options", FieldContext(name=self.name))
        return dict(value or {})

    def initial_storage(self) -> dict[str, Any]:
        """Initial contents of this extension's storage bag."""
        value = resolve_field(
            self,
            "add_storage",
            FieldContext(name=self.name, options=self.options),
        )
        return dict(value or {})

    def nested_extensions(self) -> tuple[Extendable, ...]:
        """
        Descriptors contributed by ``add_extensions``.

        Computed once per descriptor, so repeated flattening sees the same
        nested instances.
        """
        if self._nested is None:
            context = FieldContext(
                name=self.name,
                options=self.options,
                storage=self.initial_storage(),
            )
            value = resolve_field(self, "add_extensions", context)
            self._nested = tuple(value or ())
        return self._nested

    # -------------------------------------------------------------------------
    # Derivation
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, config: Mapping[str, Any] | None = None, **fields: Any) -> Extendable:
        """Create a descriptor from a config mapping and/or keyword fields."""
        return cls(config, **fields)

    def extend(self, config: Mapping[str, Any] | None = None, **fields: Any) -> Extendable:
        """
        Create a specialization of this descriptor.

        Fields not given here are resolved through this descriptor. Keeps
        the name unless a new one is given.
        """
        return type(self)(config, parent=self, **fields)

    def configure(self, **options: Any) -> Extendable:
        """
        Create a copy of this descriptor with options deep-merged over the
        current ones. The copy shares this descriptor's parent, so the two
        cannot both be installed in one editor.
        """
        merged = merge_deep(self.options, options)
        config = {
            **self._config,
            "name": self.name,
            "add_options": lambda ctx: merge_deep({}, merged),
        }
        logger.debug(f"[extensions] Configured '{self.name}' with {sorted(options)}")
        return type(self)(config, parent=self._parent)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class Extension(Extendable):
    """Behaviour extension: commands, plugins, global attributes."""

    kind = ExtensionKind.BEHAVIOR


class Node(Extendable):
    """Node type descriptor."""

    kind = ExtensionKind.NODE


class Mark(Extendable):
    """Mark type descriptor."""

    kind = ExtensionKind.MARK
