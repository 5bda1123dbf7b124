"""
Error types for Blockslides.

Configuration problems (bad extension lists, broken schemas) are raised
while an editor is being built. Command misuse is raised while it is
being edited. Exceptions raised by a command body are never wrapped:
they propagate to whoever ran the command or chain.
"""

from __future__ import annotations


class BlockslidesError(Exception):
    """Base class for all Blockslides errors."""

    pass


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(BlockslidesError):
    """The extension list cannot produce a working editor."""

    pass


class ExtensionCycleError(ConfigurationError):
    """An extension specializes or re-adds itself."""

    def __init__(self, path: list[str], message: str | None = None):
        self.path = path
        super().__init__(message or f"Extension cycle detected: {' -> '.join(path)}")


class DuplicateExtensionError(ConfigurationError):
    """Two node or mark extensions claim the same type name."""

    def __init__(self, name: str, kinds: list[str]):
        self.name = name
        self.kinds = kinds
        super().__init__(
            f"Type name '{name}' is declared more than once ({', '.join(kinds)}). "
            "Use extend() to specialize an existing type instead."
        )


class SchemaError(ConfigurationError):
    """The synthesized schema is inconsistent."""

    pass


# =============================================================================
# Content
# =============================================================================


class ContentError(BlockslidesError):
    """Document content does not fit the schema."""

    def __init__(self, message: str, content: object = None):
        self.content = content
        super().__init__(message)


# =============================================================================
# Commands
# =============================================================================


class CommandError(BlockslidesError):
    """Misuse of the command surface."""

    pass


class ChainError(CommandError):
    """A command chain was used after it had already been run."""

    pass


class EditorDestroyedError(CommandError):
    """A command was issued against a destroyed editor."""

    pass
