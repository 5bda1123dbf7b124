"""
HTML exchange for synthesized schemas.

Serialization walks a document and feeds every node and mark through
its type's render function. Render functions return DOM output specs:

    "plain text"
    ["p", {"class": "lead"}, 0]          # 0 marks where children go
    ["figure", ["img", {"src": "a.png"}], ["figcaption", 0]]

Parsing goes the other way. Each type's (augmented) parse rules are
matched against the elements of an HTML fragment, tag rules through CSS
selectors and style rules through inline ``style`` declarations, and the
result is returned in the JSON exchange shape:

    {"type": "doc", "content": [{"type": "slide", "content": [...]}]}

Rule keys understood by the parser:

    tag / style   what to match ("h1", "a[href]", "font-weight", "color")
    priority      higher is tried first (default 50)
    get_attrs     element (or style value) -> attrs dict, None or False
    attrs         static attrs when there is no get_attrs
    ignore        drop the element and its content
    skip          drop the element, keep its content
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

import soupsieve
from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from blockslides.errors import SchemaError
from blockslides.extensions.base import ExtensionKind

from .content import referenced_names
from .parse import ParseRule
from .render import DOMOutputSpec

if TYPE_CHECKING:
    from .synthesizer import SynthesizedSchema

logger = logging.getLogger(__name__)

DEFAULT_RULE_PRIORITY = 50

_WHITESPACE = re.compile(r"[ \t\r\n\f]+")


# =============================================================================
# Serialization
# =============================================================================


def render_spec(soup: BeautifulSoup, spec: DOMOutputSpec) -> tuple[Any, Tag | None]:
    """
    Build a DOM fragment from a DOM output spec.

    Returns:
        (element, hole) where ``hole`` is the element children are
        appended to, or None for leaf specs

    Raises:
        SchemaError: If the output spec has more than one content hole
    """
    if isinstance(spec, str):
        return NavigableString(spec), None

    tag_name, *rest = spec
    element = soup.new_tag(tag_name)
    hole: Tag | None = None

    if rest and isinstance(rest[0], Mapping):
        for key, value in rest[0].items():
            if value is None:
                continue
            element[key] = value if isinstance(value, str) else json.dumps(value)
        rest = rest[1:]

    for child in rest:
        if isinstance(child, int) and not isinstance(child, bool) and child == 0:
            if hole is not None:
                raise SchemaError(f"Render spec for <{tag_name}> has more than one content hole")
            hole = element
            continue

        child_element, child_hole = render_spec(soup, child)
        element.append(child_element)
        if child_hole is not None:
            if hole is not None:
                raise SchemaError(f"Render spec for <{tag_name}> has more than one content hole")
            hole = child_hole

    return element, hole


def generate_html(doc: Any, schema: SynthesizedSchema) -> str:
    """
    Serialize the content of ``doc`` (not the top node itself) to HTML.

    Nodes whose type has no render function contribute only their
    children.
    """
    soup = BeautifulSoup("", "html.parser")
    _serialize_children(soup, doc, soup, schema)
    return soup.decode(formatter="minimal")


def _serialize_children(soup: BeautifulSoup, node: Any, parent: Tag, schema: SynthesizedSchema) -> None:
    for child in node.content.content:
        _serialize_node(soup, child, parent, schema)


def _serialize_node(soup: BeautifulSoup, node: Any, parent: Tag, schema: SynthesizedSchema) -> None:
    if node.is_text:
        target = parent
        for mark in node.marks:
            type_spec = schema.marks.get(mark.type.name)
            if type_spec is None or type_spec.render is None:
                continue
            element, hole = render_spec(soup, type_spec.render(mark))
            target.append(element)
            target = hole if hole is not None else element
        target.append(NavigableString(node.text))
        return

    type_spec = schema.nodes.get(node.type.name)
    if type_spec is None or type_spec.render is None:
        _serialize_children(soup, node, parent, schema)
        return

    element, hole = render_spec(soup, type_spec.render(node))
    parent.append(element)
    if hole is not None:
        _serialize_children(soup, node, hole, schema)


def get_text(
    doc: Any,
    schema: SynthesizedSchema | None = None,
    block_separator: str = "\n\n",
) -> str:
    """
    Plain-text content of a document.

    Textblocks after the first are preceded by ``block_separator``.
    Types with a ``render_text`` hook are serialized by that hook and
    their children are not visited.
    """
    serializers = {}
    if schema is not None:
        serializers = {
            name: type_spec.render_text
            for name, type_spec in schema.nodes.items()
            if type_spec.render_text is not None
        }

    parts: list[str] = []
    seen_block = False

    def visit(node: Any, pos: int, parent: Any, index: int) -> bool:
        nonlocal seen_block
        if node.is_textblock:
            if seen_block:
                parts.append(block_separator)
            seen_block = True

        serializer = serializers.get(node.type.name)
        if serializer is not None:
            parts.append(serializer(node))
            return False

        if node.is_text:
            parts.append(node.text)
        return True

    doc.nodes_between(0, doc.content.size, visit)
    return "".join(parts)


# =============================================================================
# Parsing
# =============================================================================


@dataclass(frozen=True)
class _CompiledRule:
    rule: ParseRule
    type_name: str
    kind: ExtensionKind
    priority: int
    selector: Any = None
    style: str | None = None
    style_value: str | None = None

    @property
    def ignore(self) -> bool:
        return bool(self.rule.get("ignore"))

    @property
    def skip(self) -> bool:
        return bool(self.rule.get("skip"))

    def attrs(self, subject: Any) -> dict[str, Any] | None:
        """Rule attributes for ``subject``; None means the rule rejected it."""
        get_attrs = self.rule.get("get_attrs")
        if get_attrs is None:
            return dict(self.rule.get("attrs") or {})

        result = get_attrs(subject)
        if result is False:
            return None
        return dict(result or {})


class DOMParser:
    """
    Parses HTML into the JSON exchange shape of one schema.

    Usage:
        parser = DOMParser(schema)
        content = parser.parse("<h1>Title</h1><p>Body</p>")
    """

    def __init__(self, schema: SynthesizedSchema):
        self.schema = schema
        self._tag_rules: list[_CompiledRule] = []
        self._style_rules: list[_CompiledRule] = []

        # Marks before nodes; a stable sort keeps that order among equals
        for type_specs in (schema.marks, schema.nodes):
            for name, type_spec in type_specs.items():
                for rule in type_spec.parse_rules:
                    self._add_rule(rule, name, type_spec.kind)

        self._tag_rules.sort(key=lambda r: -r.priority)
        self._style_rules.sort(key=lambda r: -r.priority)

    def _add_rule(self, rule: ParseRule, type_name: str, kind: ExtensionKind) -> None:
        priority = rule.get("priority", DEFAULT_RULE_PRIORITY)

        if "tag" in rule:
            try:
                selector = soupsieve.compile(rule["tag"])
            except soupsieve.SelectorSyntaxError as exc:
                raise SchemaError(
                    f"Invalid parse rule selector '{rule['tag']}' on '{type_name}': {exc}"
                ) from exc
            self._tag_rules.append(_CompiledRule(rule, type_name, kind, priority, selector=selector))
        elif "style" in rule:
            prop, _, value = rule["style"].partition("=")
            self._style_rules.append(
                _CompiledRule(
                    rule,
                    type_name,
                    kind,
                    priority,
                    style=prop.strip().lower(),
                    style_value=value.strip() or None,
                )
            )
        else:
            logger.debug(f"[schema] Parse rule on '{type_name}' has neither tag nor style")

    def parse(self, html: str) -> dict[str, Any]:
        """Parse an HTML fragment into a top-node JSON document."""
        soup = BeautifulSoup(html, "html.parser")
        items = self._parse_children(soup, [])
        top = self.schema.top_node
        return {"type": top, "content": self._fit(items, top, 0)}

    def parse_fragment(self, html: str) -> list[dict[str, Any]]:
        """
        Parse an HTML fragment into a list of JSON nodes, without fitting
        them into the top node. Used for inserting content.
        """
        soup = BeautifulSoup(html, "html.parser")
        items = self._parse_children(soup, [])
        if all(self._is_inline(item["type"]) for item in items):
            return _trim_inline(items)
        return [item for item in items if item["type"] != "text" or item["text"].strip()]

    # -------------------------------------------------------------------------
    # Element walk
    # -------------------------------------------------------------------------

    def _parse_children(self, element: Tag, marks: list[dict[str, Any]]) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []

        for child in element.children:
            if isinstance(child, Comment):
                continue
            if isinstance(child, NavigableString):
                text = _WHITESPACE.sub(" ", str(child))
                if text:
                    items.append(_text_item(text, marks))
            elif isinstance(child, Tag):
                items.extend(self._parse_element(child, marks))

        return items

    def _parse_element(self, element: Tag, marks: list[dict[str, Any]]) -> list[dict[str, Any]]:
        for style_mark in self._style_marks(element):
            marks = _with_mark(marks, style_mark)

        for compiled in self._tag_rules:
            if not compiled.selector.match(element):
                continue

            if compiled.ignore:
                return []
            if compiled.skip:
                return self._parse_children(element, marks)

            attrs = compiled.attrs(element)
            if attrs is None:
                continue

            if compiled.kind is ExtensionKind.MARK:
                mark = {"type": compiled.type_name}
                if attrs:
                    mark["attrs"] = attrs
                return self._parse_children(element, _with_mark(marks, mark))

            node: dict[str, Any] = {"type": compiled.type_name}
            if attrs:
                node["attrs"] = attrs
            if self.schema.nodes[compiled.type_name].content is not None:
                node["content"] = self._fit(
                    self._parse_children(element, marks), compiled.type_name, 0
                )
            elif marks and self._is_inline(compiled.type_name):
                node["marks"] = list(marks)
            return [node]

        # Unknown element: keep its content
        return self._parse_children(element, marks)

    def _style_marks(self, element: Tag) -> list[dict[str, Any]]:
        if not self._style_rules or not element.get("style"):
            return []

        marks: list[dict[str, Any]] = []
        for prop, value in _parse_style(element["style"]):
            for compiled in self._style_rules:
                if compiled.kind is not ExtensionKind.MARK or compiled.style != prop:
                    continue
                if compiled.style_value is not None and compiled.style_value != value:
                    continue

                attrs = compiled.attrs(value)
                if attrs is None:
                    continue

                mark = {"type": compiled.type_name}
                if attrs:
                    mark["attrs"] = attrs
                marks.append(mark)
                break

        return marks

    # -------------------------------------------------------------------------
    # Content fitting
    # -------------------------------------------------------------------------

    def _is_inline(self, type_name: str) -> bool:
        return type_name == "text" or bool(self.schema.nodes[type_name].spec.get("inline"))

    def _accepts(self, parent: str, child: str) -> bool:
        allowed = set(referenced_names(self.schema.nodes[parent].content))
        if child in allowed:
            return True
        group = self.schema.nodes[child].group
        return bool(group and allowed & set(group.split()))

    def _default_wrapper(self, parent: str) -> str | None:
        """First non-text, non-leaf type the parent's content can hold."""
        for name in referenced_names(self.schema.nodes[parent].content):
            candidates = [name] if name in self.schema.nodes else [
                n for n, s in self.schema.nodes.items() if s.group and name in s.group.split()
            ]
            for candidate in candidates:
                type_spec = self.schema.nodes[candidate]
                if candidate == "text" or type_spec.content is None:
                    continue
                if any(not a.has_default for a in type_spec.attrs.values()):
                    continue
                return candidate
        return None

    def _fit(self, items: list[dict[str, Any]], parent: str, depth: int) -> list[dict[str, Any]]:
        """Wrap or unwrap ``items`` until each is a valid child of ``parent``."""
        if self._is_inline_container(parent):
            return _trim_inline(self._flatten_inline(items, parent))

        result: list[dict[str, Any]] = []
        misfits: list[dict[str, Any]] = []

        def flush() -> None:
            if not misfits:
                return
            run = list(misfits)
            misfits.clear()
            if all(item["type"] == "text" and not item["text"].strip() for item in run):
                return

            wrapper = self._default_wrapper(parent)
            if wrapper is None or depth > len(self.schema.nodes):
                logger.warning(
                    f"[schema] Dropping {len(run)} parsed node(s) that do not fit in '{parent}'"
                )
                return
            result.append({"type": wrapper, "content": self._fit(run, wrapper, depth + 1)})

        for item in items:
            if self._accepts(parent, item["type"]):
                flush()
                result.append(item)
            else:
                misfits.append(item)
        flush()

        return result

    def _is_inline_container(self, type_name: str) -> bool:
        names = referenced_names(self.schema.nodes[type_name].content)
        return bool(names) and all(
            self._is_inline(candidate)
            for name in names
            for candidate in self._expand(name)
        )

    def _expand(self, name: str) -> list[str]:
        if name in self.schema.nodes:
            return [name]
        return [n for n, s in self.schema.nodes.items() if s.group and name in s.group.split()]

    def _flatten_inline(self, items: list[dict[str, Any]], parent: str) -> list[dict[str, Any]]:
        flat: list[dict[str, Any]] = []
        for item in items:
            if self._accepts(parent, item["type"]):
                flat.append(item)
            else:
                flat.extend(self._flatten_inline(item.get("content", []), parent))
        return flat


def _with_mark(marks: list[dict[str, Any]], mark: dict[str, Any]) -> list[dict[str, Any]]:
    """Add ``mark``, replacing an outer mark of the same type."""
    return [m for m in marks if m["type"] != mark["type"]] + [mark]


def _text_item(text: str, marks: list[dict[str, Any]]) -> dict[str, Any]:
    item: dict[str, Any] = {"type": "text", "text": text}
    if marks:
        item["marks"] = list(marks)
    return item


def _trim_inline(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    if items and items[0]["type"] == "text":
        items[0] = {**items[0], "text": items[0]["text"].lstrip()}
    if items and items[-1]["type"] == "text":
        items[-1] = {**items[-1], "text": items[-1]["text"].rstrip()}
    return [item for item in items if item["type"] != "text" or item["text"]]


def _parse_style(style: str) -> list[tuple[str, str]]:
    declarations = []
    for declaration in style.split(";"):
        prop, sep, value = declaration.partition(":")
        if sep and prop.strip():
            declarations.append((prop.strip().lower(), value.strip()))
    return declarations


def generate_json(html: str, schema: SynthesizedSchema) -> dict[str, Any]:
    """Parse ``html`` into the JSON exchange shape of ``schema``."""
    return DOMParser(schema).parse(html)
