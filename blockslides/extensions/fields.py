"""
Field resolution for extension descriptors.

Every descriptor carries a read-only ``config`` mapping. A field that a
descriptor does not define is looked up along its parent chain, so a
specialization created with ``extend()`` only has to declare what it
changes.

Fields come in two flavours:

- Value fields (``priority``, ``content``, ``group``...) resolve to the
  raw configured value.
- Hook fields (``add_attributes``, ``add_commands``, ``render_html``...)
  resolve to a callable bound to a ``FieldContext``. The context carries
  ``parent``: the parent's bound hook for the same field, so an override
  can call ``ctx.parent()`` and layer on top of inherited behaviour.

Which fields are hooks is declared once in ``HOOK_FIELDS``; callers never
have to guess from the value.

Usage:
    def add_attributes(ctx):
        return {**(ctx.parent() if ctx.parent else {}), "color": {"default": None}}

    CustomBold = Bold.extend(add_attributes=add_attributes)
    attrs = resolve_field(CustomBold, "add_attributes", FieldContext(name="bold"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from functools import partial
from typing import TYPE_CHECKING, Any, Callable

from blockslides.errors import ExtensionCycleError

if TYPE_CHECKING:
    from .base import Extendable

logger = logging.getLogger(__name__)


HOOK_FIELDS: frozenset[str] = frozenset(
    {
        # Configuration
        "add_options",
        "add_storage",
        "add_extensions",
        "add_attributes",
        "add_global_attributes",
        "add_commands",
        "add_plugins",
        "add_input_rules",
        "add_paste_rules",
        "add_keyboard_shortcuts",
        # Schema
        "parse_html",
        "render_html",
        "render_text",
        "extend_node_schema",
        "extend_mark_schema",
        # Lifecycle
        "on_before_create",
        "on_create",
        "on_update",
        "on_selection_update",
        "on_transaction",
        "on_focus",
        "on_blur",
        "on_destroy",
    }
)


def is_hook_field(name: str) -> bool:
    """Whether ``name`` is resolved as a bound hook rather than a value."""
    return name in HOOK_FIELDS


@dataclass(frozen=True)
class FieldContext:
    """
    Execution context handed to every hook as its first argument.

    The editor is passed explicitly here; hooks never reach for a global.
    ``parent`` is filled in by the resolver for each level of the chain.
    """

    name: str = ""
    options: dict[str, Any] = field(default_factory=dict)
    storage: dict[str, Any] | None = None
    editor: Any = None
    type: Any = None
    extensions: tuple[Any, ...] = ()
    parent: Callable[..., Any] | None = None

    def with_parent(self, parent: Callable[..., Any] | None) -> FieldContext:
        return replace(self, parent=parent)


# =============================================================================
# Lineage
# =============================================================================


def linearize(descriptor: Extendable) -> tuple[Extendable, ...]:
    """
    Build the lookup chain ``(descriptor, parent, grandparent, ...)``.

    Raises:
        ExtensionCycleError: If the parent chain loops back on itself
    """
    chain: list[Extendable] = []
    seen: set[int] = set()
    current: Extendable | None = descriptor

    while current is not None:
        if id(current) in seen:
            raise ExtensionCycleError(
                [d.name or "<unnamed>" for d in chain] + [current.name or "<unnamed>"],
                f"Extension '{descriptor.name}' has a cyclic parent chain",
            )
        seen.add(id(current))
        chain.append(current)
        current = current.parent

    return tuple(chain)


# =============================================================================
# Resolution
# =============================================================================


def get_extension_field(
    extension: Extendable,
    name: str,
    context: FieldContext | None = None,
) -> Any:
    """
    Look up ``name`` on ``extension`` or the nearest ancestor defining it.

    Args:
        extension: Descriptor to resolve against
        name: Config field name
        context: Context bound to hook fields

    Returns:
        The raw value for value fields, a bound callable for hook fields,
        or None when no descriptor in the chain defines the field
    """
    definitions = [d for d in extension.lineage if name in d.config]
    if not definitions:
        return None

    if not is_hook_field(name):
        return definitions[0].config[name]

    base = context if context is not None else FieldContext(name=extension.name)
    bound: Callable[..., Any] | None = None

    # Bind from the root of the chain outwards so each level sees the
    # already-bound hook of the level below it as ``ctx.parent``.
    for definition in reversed(definitions):
        hook = definition.config[name]
        bound = None if hook is None else partial(hook, base.with_parent(bound))

    return bound


def resolve_field(
    extension: Extendable,
    name: str,
    context: FieldContext | None = None,
    *args: Any,
) -> Any:
    """
    Resolve ``name`` and, for hook fields, invoke the bound hook.

    Returns None when nothing in the chain defines the field; callers
    supply their own default (empty dict, empty list...).
    """
    value = get_extension_field(extension, name, context)
    if is_hook_field(name) and value is not None:
        return value(*args)
    return value
