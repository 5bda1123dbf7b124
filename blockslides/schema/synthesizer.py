"""
Schema synthesis.

Turns an extension list into the type table the document substrate
works with. The steps, in order:

1. Resolve the extension list (flatten, sort, collapse specializations)
2. Partition by kind and reject duplicate type names
3. Collect attributes from every extension
4. Assemble one ``TypeSpec`` per node and mark: schema fields, attribute
   table, augmented parse rules and a render function
5. Check content and mark expressions against the declared names
6. Build the ``prosemirror`` schema

Synthesis is a pure function of the extension list. Each call produces a
new, independent ``SynthesizedSchema``; a live schema is never mutated.

Usage:
    schema = synthesize_schema([Document, Paragraph, Text, Bold])
    schema["paragraph"].content   # "inline*"
    schema.pm.nodes["paragraph"]  # substrate NodeType
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Iterator, Mapping

from prosemirror.model import Schema

from blockslides.errors import DuplicateExtensionError, SchemaError
from blockslides.extensions.attributes import Attribute, AttributeRegistry, ExtensionAttribute
from blockslides.extensions.base import Extendable, ExtensionKind
from blockslides.extensions.fields import FieldContext, get_extension_field, resolve_field
from blockslides.extensions.graph import resolve_extensions, split_extensions
from blockslides.utils import find_duplicates

from .content import check_references, collect_groups
from .parse import ParseRule, inject_extension_attributes_to_parse_rule
from .render import DOMOutputSpec, RenderProps, get_rendered_attributes

logger = logging.getLogger(__name__)


NODE_SCHEMA_FIELDS = (
    "content",
    "marks",
    "group",
    "inline",
    "atom",
    "selectable",
    "draggable",
    "code",
    "whitespace",
    "defining",
    "isolating",
)

MARK_SCHEMA_FIELDS = (
    "inclusive",
    "excludes",
    "group",
    "spanning",
    "code",
)


@dataclass(frozen=True)
class TypeSpec:
    """
    Everything the editor knows about one node or mark type.

    ``spec`` holds the schema fields (content, group, inline...),
    ``attrs`` the attribute defaults, ``attributes`` the extension
    attributes used for parsing and rendering.
    """

    name: str
    kind: ExtensionKind
    extension: Extendable
    spec: Mapping[str, Any]
    attrs: Mapping[str, Attribute]
    attributes: tuple[ExtensionAttribute, ...]
    parse_rules: tuple[ParseRule, ...]
    render: Callable[[Any], DOMOutputSpec] | None = None
    render_text: Callable[[Any], str] | None = None
    top_node: bool = False

    @property
    def content(self) -> str | None:
        return self.spec.get("content")

    @property
    def group(self) -> str | None:
        return self.spec.get("group")

    @property
    def marks(self) -> str | None:
        return self.spec.get("marks")

    def to_substrate_spec(self) -> dict[str, Any]:
        """Spec dict for ``prosemirror.model.Schema``."""
        return {
            **self.spec,
            "attrs": {name: attribute.to_spec() for name, attribute in self.attrs.items()},
        }


@dataclass(frozen=True)
class SynthesizedSchema:
    """
    Immutable node/mark type table plus the substrate schema built from it.

    Supports mapping-style access by type name:

        schema["heading"].attrs["level"].default
        "bold" in schema
    """

    nodes: Mapping[str, TypeSpec]
    marks: Mapping[str, TypeSpec]
    top_node: str
    attributes: AttributeRegistry
    extensions: tuple[Extendable, ...]
    pm: Schema = field(repr=False)

    def __getitem__(self, name: str) -> TypeSpec:
        if name in self.nodes:
            return self.nodes[name]
        if name in self.marks:
            return self.marks[name]
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return name in self.nodes or name in self.marks

    def __iter__(self) -> Iterator[str]:
        yield from self.nodes
        yield from self.marks

    def get_type(self, name: str) -> Any:
        """Substrate NodeType or MarkType by name, or None."""
        if name in self.nodes:
            return self.pm.nodes[name]
        if name in self.marks:
            return self.pm.marks[name]
        return None

    def rendered_attributes(self, instance: Any) -> dict[str, Any]:
        """HTML attributes of a node or mark instance of this schema."""
        return get_rendered_attributes(instance, self.attributes)

    def node_from_json(self, content: Mapping[str, Any]) -> Any:
        """Build a substrate document node from the JSON exchange shape."""
        return self.pm.node_from_json(dict(content))


# =============================================================================
# Synthesis
# =============================================================================


def synthesize_schema(
    extensions: Iterable[Extendable],
    *,
    editor: Any = None,
    storage: Mapping[str, dict[str, Any]] | None = None,
    resolved: bool = False,
) -> SynthesizedSchema:
    """
    Build a schema from an extension list.

    Args:
        extensions: Extension descriptors (nested lists allowed)
        editor: Editor exposed to hook contexts
        storage: Storage side-table exposed to hook contexts
        resolved: Skip resolution when ``extensions`` already went
            through ``resolve_extensions``

    Raises:
        DuplicateExtensionError: Two unrelated types share a name
        SchemaError: Unknown names in expressions, or the substrate
            rejects the schema
        ExtensionCycleError: Cyclic parent chain or nesting
    """
    ordered = list(extensions) if resolved else resolve_extensions(extensions)
    behaviors, node_extensions, mark_extensions = split_extensions(ordered)

    _check_unique(behaviors, node_extensions, mark_extensions)

    registry = AttributeRegistry.build(ordered, editor=editor, storage=storage)

    nodes = {
        extension.name: _build_type(extension, registry, editor, storage)
        for extension in node_extensions
    }
    marks = {
        extension.name: _build_type(extension, registry, editor, storage)
        for extension in mark_extensions
    }

    _check_expressions(nodes, marks)
    top_node = _find_top_node(nodes)
    pm_schema = _build_substrate_schema(nodes, marks, top_node)

    logger.info(
        f"[schema] Synthesized schema | nodes={list(nodes)} | marks={list(marks)} | "
        f"top={top_node} | attributes={len(registry)}"
    )

    return SynthesizedSchema(
        nodes=MappingProxyType(nodes),
        marks=MappingProxyType(marks),
        top_node=top_node,
        attributes=registry,
        extensions=tuple(ordered),
        pm=pm_schema,
    )


def _check_unique(
    behaviors: list[Extendable],
    nodes: list[Extendable],
    marks: list[Extendable],
) -> None:
    for duplicate in find_duplicates(e.name for e in nodes):
        raise DuplicateExtensionError(duplicate, ["node", "node"])

    for duplicate in find_duplicates(e.name for e in marks):
        raise DuplicateExtensionError(duplicate, ["mark", "mark"])

    clashes = {e.name for e in nodes} & {e.name for e in marks}
    if clashes:
        raise DuplicateExtensionError(sorted(clashes)[0], ["node", "mark"])

    for duplicate in find_duplicates(e.name for e in behaviors):
        logger.warning(f"[schema] Duplicate extension name '{duplicate}'; both stay installed")


def _build_type(
    extension: Extendable,
    registry: AttributeRegistry,
    editor: Any,
    storage: Mapping[str, dict[str, Any]] | None,
) -> TypeSpec:
    name = extension.name
    kind = extension.kind
    context = FieldContext(
        name=name,
        options=extension.options,
        storage=(storage or {}).get(name),
        editor=editor,
    )

    schema_fields = NODE_SCHEMA_FIELDS if kind is ExtensionKind.NODE else MARK_SCHEMA_FIELDS
    spec: dict[str, Any] = {}
    for schema_field in schema_fields:
        value = resolve_field(extension, schema_field, context)
        if value is not None:
            spec[schema_field] = value

    extend_field = "extend_node_schema" if kind is ExtensionKind.NODE else "extend_mark_schema"
    extra = resolve_field(extension, extend_field, context, extension)
    if extra:
        spec.update(extra)

    # Defaults declared directly on the type, overlaid by extension attributes
    attributes = tuple(registry.for_type(name))
    attrs: dict[str, Attribute] = {
        attr_name: Attribute.from_config(declaration)
        for attr_name, declaration in (resolve_field(extension, "attrs", context) or {}).items()
    }
    for item in attributes:
        attrs[item.name] = item.attribute

    rules = resolve_field(extension, "parse_html", context) or ()
    parse_rules = tuple(
        inject_extension_attributes_to_parse_rule(rule, attributes) for rule in rules
    )

    return TypeSpec(
        name=name,
        kind=kind,
        extension=extension,
        spec=MappingProxyType(spec),
        attrs=MappingProxyType(attrs),
        attributes=attributes,
        parse_rules=parse_rules,
        render=_make_renderer(extension, kind, attributes, context),
        render_text=get_extension_field(extension, "render_text", context),
        top_node=bool(resolve_field(extension, "top_node", context)),
    )


def _make_renderer(
    extension: Extendable,
    kind: ExtensionKind,
    attributes: tuple[ExtensionAttribute, ...],
    context: FieldContext,
) -> Callable[[Any], DOMOutputSpec] | None:
    render_html = get_extension_field(extension, "render_html", context)
    if render_html is None:
        return None

    def render(instance: Any) -> DOMOutputSpec:
        html_attributes = get_rendered_attributes(instance, attributes)
        if kind is ExtensionKind.NODE:
            props = RenderProps(html_attributes=html_attributes, node=instance)
        else:
            props = RenderProps(html_attributes=html_attributes, mark=instance)
        return render_html(props)

    return render


def _check_expressions(nodes: Mapping[str, TypeSpec], marks: Mapping[str, TypeSpec]) -> None:
    node_names = set(nodes) | collect_groups({n: s.group for n, s in nodes.items()})
    mark_names = set(marks) | collect_groups({n: s.group for n, s in marks.items()})

    for name, type_spec in nodes.items():
        check_references(name, "content", type_spec.content, node_names)
        check_references(name, "marks", type_spec.marks, mark_names)

    for name, type_spec in marks.items():
        check_references(name, "excludes", type_spec.spec.get("excludes"), mark_names)


def _find_top_node(nodes: Mapping[str, TypeSpec]) -> str:
    if not nodes:
        raise SchemaError("Schema has no node types")

    flagged = [name for name, type_spec in nodes.items() if type_spec.top_node]
    if len(flagged) > 1:
        raise SchemaError(f"More than one top node declared: {flagged}")
    if flagged:
        return flagged[0]
    if "doc" in nodes:
        return "doc"
    return next(iter(nodes))


def _build_substrate_schema(
    nodes: Mapping[str, TypeSpec],
    marks: Mapping[str, TypeSpec],
    top_node: str,
) -> Schema:
    if "text" not in nodes:
        raise SchemaError("Schema needs a 'text' node type")

    spec = {
        "nodes": {name: type_spec.to_substrate_spec() for name, type_spec in nodes.items()},
        "marks": {name: type_spec.to_substrate_spec() for name, type_spec in marks.items()},
        "topNode": top_node,
    }

    try:
        return Schema(spec)
    except Exception as exc:
        raise SchemaError(f"Document substrate rejected the schema: {exc}") from exc
