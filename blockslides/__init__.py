"""
Blockslides - a headless, extension-driven editor kernel for slide decks.

Everything an editor knows comes from extensions:

- **Descriptors**: ``Node``, ``Mark`` and ``Extension`` declare types,
  attributes, parse/render rules, commands and lifecycle hooks
- **Specialization**: ``extend()`` overrides fields, ``configure()``
  changes options; neither touches the original
- **Schema Synthesis**: the extension list is flattened, sorted and
  turned into a document schema
- **Commands**: single commands, chains with one dispatch, and ``can()``
  probes that never dispatch
- **HTML Exchange**: render documents to HTML and parse HTML back

Quick Start:
    >>> from blockslides import Editor
    >>> from blockslides.kit import StarterKit
    >>>
    >>> editor = Editor([StarterKit], content="<h1>Hello</h1>")
    >>> editor.chain().select_all().toggle_bold().run()
    True
    >>> editor.get_text()
    'Hello'
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Core exports for convenient imports
from blockslides.editor import Editor
from blockslides.extensions import Extension, FieldContext, Mark, Node
from blockslides.plugins import Plugin
from blockslides.rules import InputRule, PasteRule
from blockslides.schema import SynthesizedSchema, synthesize_schema
from blockslides.tracker import PositionTracker

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Descriptors
    "Extension",
    "FieldContext",
    "Mark",
    "Node",
    # Editor
    "Editor",
    "PositionTracker",
    "SynthesizedSchema",
    "synthesize_schema",
    # Rules and plugins
    "InputRule",
    "PasteRule",
    "Plugin",
]
