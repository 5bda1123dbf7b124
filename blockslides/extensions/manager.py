"""
Extension manager.

Owns the resolved extension list of one editor and everything derived
from it: the storage side-table, the synthesized schema, the command
registry, plugins, input and paste rules, keyboard shortcuts and
lifecycle hooks.

Every hook is called with a ``FieldContext`` carrying the extension's
name, options, storage bag, the editor and the extension's schema type.

Usage:
    manager = ExtensionManager([StarterKit], editor=editor)
    manager.schema.top_node   # "doc"
    manager.commands          # {"set_content": ..., "toggle_bold": ...}
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from blockslides.schema.synthesizer import SynthesizedSchema, synthesize_schema

from .attributes import AttributeRegistry
from .base import Extendable
from .fields import FieldContext, get_extension_field, resolve_field
from .graph import flatten_extensions, resolve_extensions, sort_extensions, split_extensions

if TYPE_CHECKING:
    from blockslides.commands.manager import CommandFactory
    from blockslides.events import EventEmitter

logger = logging.getLogger(__name__)


LIFECYCLE_HOOKS: dict[str, str] = {
    "on_before_create": "before_create",
    "on_create": "create",
    "on_update": "update",
    "on_selection_update": "selection_update",
    "on_transaction": "transaction",
    "on_focus": "focus",
    "on_blur": "blur",
    "on_destroy": "destroy",
}


def is_extension_rules_enabled(extension: Extendable, enabled: bool | Sequence[Any]) -> bool:
    """
    Whether input/paste rules of ``extension`` are enabled.

    ``enabled`` is a bool, or a list of extension names (or descriptors)
    whose rules are enabled.
    """
    if isinstance(enabled, bool):
        return enabled
    names = {item if isinstance(item, str) else item.name for item in enabled}
    return extension.name in names


class ExtensionManager:
    """
    Resolved extensions of one editor.

    Args:
        extensions: Extension descriptors (nested lists allowed)
        editor: Owning editor, exposed to every hook
        enable_input_rules: True, False or a list of extension names
        enable_paste_rules: True, False or a list of extension names
    """

    resolve = staticmethod(resolve_extensions)
    flatten = staticmethod(flatten_extensions)
    sort = staticmethod(sort_extensions)

    def __init__(
        self,
        extensions: Iterable[Extendable],
        editor: Any = None,
        *,
        enable_input_rules: bool | Sequence[Any] = True,
        enable_paste_rules: bool | Sequence[Any] = True,
    ):
        self.editor = editor
        self.base_extensions = list(extensions)
        self.enable_input_rules = enable_input_rules
        self.enable_paste_rules = enable_paste_rules
        self._bound: list[tuple[str, Callable[..., Any]]] = []

        self.extensions: list[Extendable] = resolve_extensions(self.base_extensions)

        # Storage lives here, one bag per installed descriptor, never on the descriptors
        self._storage_bags: dict[int, dict[str, Any]] = {
            id(extension): extension.initial_storage() for extension in self.extensions
        }
        # Lookup by name; for duplicate behaviour names the first in resolved order
        self.storage: dict[str, dict[str, Any]] = {}
        for extension in self.extensions:
            self.storage.setdefault(extension.name, self._storage_bags[id(extension)])

        self.schema: SynthesizedSchema = synthesize_schema(
            self.extensions,
            editor=editor,
            storage=self.storage,
            resolved=True,
        )

        logger.info(
            f"[extensions] Loaded {len(self.extensions)} extensions: "
            f"{[e.name for e in self.extensions]}"
        )

    def storage_for(self, extension: Extendable) -> dict[str, Any] | None:
        """Storage bag of an installed descriptor, or by name for any other."""
        bag = self._storage_bags.get(id(extension))
        return bag if bag is not None else self.storage.get(extension.name)

    def context_for(self, extension: Extendable) -> FieldContext:
        return FieldContext(
            name=extension.name,
            options=extension.options,
            storage=self.storage_for(extension),
            editor=self.editor,
            type=self.schema.get_type(extension.name),
        )

    def get(self, name: str) -> Extendable | None:
        """First extension with ``name`` in resolved order."""
        for extension in self.extensions:
            if extension.name == name:
                return extension
        return None

    def __contains__(self, name: object) -> bool:
        return any(extension.name == name for extension in self.extensions)

    def __iter__(self):
        return iter(self.extensions)

    def __len__(self) -> int:
        return len(self.extensions)

    def __repr__(self) -> str:
        return f"<ExtensionManager extensions={[e.name for e in self.extensions]}>"

    # -------------------------------------------------------------------------
    # Derived tables
    # -------------------------------------------------------------------------

    @property
    def attributes(self) -> AttributeRegistry:
        return self.schema.attributes

    def split(self) -> tuple[list[Extendable], list[Extendable], list[Extendable]]:
        return split_extensions(self.extensions)

    @property
    def commands(self) -> dict[str, CommandFactory]:
        """
        Command factories from every ``add_commands`` hook.

        Extensions are visited in resolved order, so a name provided by a
        higher-priority extension is never replaced by a lower one.
        """
        commands: dict[str, CommandFactory] = {}

        for extension in self.extensions:
            provided = resolve_field(extension, "add_commands", self.context_for(extension))

            for name, factory in (provided or {}).items():
                if name in commands:
                    logger.debug(
                        f"[extensions] Command '{name}' from '{extension.name}' "
                        "shadowed by a higher-priority extension"
                    )
                    continue
                commands[name] = factory

        return commands

    @property
    def plugins(self) -> list[Any]:
        """Plugins from every ``add_plugins`` hook, in resolved order."""
        plugins: list[Any] = []
        for extension in self.extensions:
            plugins.extend(
                resolve_field(extension, "add_plugins", self.context_for(extension)) or ()
            )
        return plugins

    @property
    def input_rules(self) -> list[Any]:
        return self._collect_rules("add_input_rules", self.enable_input_rules)

    @property
    def paste_rules(self) -> list[Any]:
        return self._collect_rules("add_paste_rules", self.enable_paste_rules)

    def _collect_rules(self, field: str, enabled: bool | Sequence[Any]) -> list[Any]:
        rules: list[Any] = []
        for extension in self.extensions:
            if not is_extension_rules_enabled(extension, enabled):
                continue
            rules.extend(resolve_field(extension, field, self.context_for(extension)) or ())
        return rules

    @property
    def keyboard_shortcuts(self) -> dict[str, list[Callable[[], bool]]]:
        """
        Shortcut -> handlers, highest priority first.

        Each handler is called without arguments and returns True when it
        handled the key.
        """
        shortcuts: dict[str, list[Callable[[], bool]]] = {}

        for extension in self.extensions:
            bindings = resolve_field(
                extension, "add_keyboard_shortcuts", self.context_for(extension)
            )
            for shortcut, handler in (bindings or {}).items():
                shortcuts.setdefault(shortcut, []).append(
                    lambda handler=handler: bool(handler(editor=self.editor))
                )

        return shortcuts

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def bind_events(self, emitter: EventEmitter) -> None:
        """Register every extension's lifecycle hooks on ``emitter``."""
        for extension in self.extensions:
            context = self.context_for(extension)

            for field, event in LIFECYCLE_HOOKS.items():
                handler = get_extension_field(extension, field, context)
                if handler is not None:
                    emitter.on(event, handler)
                    self._bound.append((event, handler))

    def unbind_events(self, emitter: EventEmitter) -> None:
        """Remove the hooks registered by ``bind_events``."""
        for event, handler in self._bound:
            emitter.off(event, handler)
        self._bound.clear()
