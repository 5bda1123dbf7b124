"""
Blockslides Schema

Schema synthesis, parse rule augmentation, attribute rendering and HTML
exchange.
"""

from .content import check_references, collect_groups, referenced_names
from .html import DOMParser, generate_html, generate_json, get_text, render_spec
from .parse import ParseRule, from_string, inject_extension_attributes_to_parse_rule
from .render import DOMOutputSpec, RenderProps, get_rendered_attributes, merge_attributes
from .synthesizer import SynthesizedSchema, TypeSpec, synthesize_schema

__all__ = [
    # Synthesis
    "SynthesizedSchema",
    "TypeSpec",
    "synthesize_schema",
    "check_references",
    "collect_groups",
    "referenced_names",
    # Parsing
    "ParseRule",
    "from_string",
    "inject_extension_attributes_to_parse_rule",
    # Rendering
    "DOMOutputSpec",
    "RenderProps",
    "get_rendered_attributes",
    "merge_attributes",
    # HTML
    "DOMParser",
    "generate_html",
    "generate_json",
    "get_text",
    "render_spec",
]
