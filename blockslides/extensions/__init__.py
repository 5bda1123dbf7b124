"""
Blockslides Extensions

Extension descriptors and the machinery that resolves them.
"""

from .attributes import Attribute, AttributeRegistry, ExtensionAttribute, build_attribute_registry
from .base import Extendable, Extension, ExtensionKind, Mark, Node
from .fields import HOOK_FIELDS, FieldContext, get_extension_field, is_hook_field, resolve_field
from .graph import (
    collapse_specializations,
    flatten_extensions,
    resolve_extensions,
    sort_extensions,
    split_extensions,
)
from .manager import ExtensionManager, is_extension_rules_enabled

__all__ = [
    # Descriptors
    "Extendable",
    "Extension",
    "ExtensionKind",
    "Mark",
    "Node",
    # Fields
    "HOOK_FIELDS",
    "FieldContext",
    "get_extension_field",
    "is_hook_field",
    "resolve_field",
    # Graph
    "collapse_specializations",
    "flatten_extensions",
    "resolve_extensions",
    "sort_extensions",
    "split_extensions",
    # Attributes
    "Attribute",
    "AttributeRegistry",
    "ExtensionAttribute",
    "build_attribute_registry",
    # Manager
    "ExtensionManager",
    "is_extension_rules_enabled",
]
