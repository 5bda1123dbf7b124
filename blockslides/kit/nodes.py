"""
Built-in node types.

A slide deck is a ``doc`` holding one or more ``slide`` sections, each
holding blocks (paragraphs, headings) of inline content:

    doc
    └── slide+
        └── block+ (paragraph | heading)
            └── inline* (text | hard_break)
"""

from __future__ import annotations

from typing import Any

from blockslides.extensions.base import Node
from blockslides.extensions.fields import FieldContext
from blockslides.rules import textblock_type_input_rule
from blockslides.schema.render import DOMOutputSpec, RenderProps, merge_attributes


def _html_attributes_option(ctx: FieldContext) -> dict[str, Any]:
    return {"html_attributes": {}}


Document = Node.create(
    name="doc",
    top_node=True,
    content="slide+",
)


Slide = Node.create(
    name="slide",
    content="block+",
    group="slide",
    defining=True,
    add_options=_html_attributes_option,
    parse_html=lambda ctx: [{"tag": "section"}],
    render_html=lambda ctx, props: [
        "section",
        merge_attributes(
            {"data-node-type": "slide"}, ctx.options["html_attributes"], props.html_attributes
        ),
        0,
    ],
)


# =============================================================================
# Blocks
# =============================================================================


def _placeholder_attribute() -> dict[str, Any]:
    return {
        "default": None,
        "parse_html": lambda element: element.get("data-placeholder") or None,
        "render_html": lambda attrs: (
            {"data-placeholder": attrs["placeholder"]} if attrs.get("placeholder") else {}
        ),
    }


Paragraph = Node.create(
    name="paragraph",
    group="block",
    content="inline*",
    priority=1000,
    add_options=_html_attributes_option,
    add_attributes=lambda ctx: {"placeholder": _placeholder_attribute()},
    parse_html=lambda ctx: [{"tag": "p"}],
    render_html=lambda ctx, props: [
        "p",
        merge_attributes(ctx.options["html_attributes"], props.html_attributes),
        0,
    ],
    add_keyboard_shortcuts=lambda ctx: {
        "Mod-Alt-0": lambda editor: editor.commands.set_node(ctx.name),
    },
)


def _heading_options(ctx: FieldContext) -> dict[str, Any]:
    return {"levels": [1, 2, 3, 4, 5, 6], "html_attributes": {}}


def _heading_parse_html(ctx: FieldContext) -> list[dict[str, Any]]:
    return [{"tag": f"h{level}", "attrs": {"level": level}} for level in ctx.options["levels"]]


def _heading_render_html(ctx: FieldContext, props: RenderProps) -> DOMOutputSpec:
    levels = ctx.options["levels"]
    level = props.node.attrs.get("level")
    if level not in levels:
        level = levels[0]
    return [
        f"h{level}",
        merge_attributes(ctx.options["html_attributes"], props.html_attributes),
        0,
    ]


def _heading_commands(ctx: FieldContext) -> dict[str, Any]:
    levels = ctx.options["levels"]

    def set_heading(level: int):
        def command(props):
            if level not in levels:
                return False
            return props.commands.set_node(ctx.name, {"level": level})

        return command

    def toggle_heading(level: int):
        def command(props):
            if level not in levels:
                return False
            return props.commands.toggle_node(ctx.name, "paragraph", {"level": level})

        return command

    return {"set_heading": set_heading, "toggle_heading": toggle_heading}


def _heading_shortcuts(ctx: FieldContext) -> dict[str, Any]:
    return {
        f"Mod-Alt-{level}": (lambda editor, level=level: editor.commands.toggle_heading(level))
        for level in ctx.options["levels"]
    }


def _heading_input_rules(ctx: FieldContext) -> list[Any]:
    return [
        textblock_type_input_rule(rf"^(#{{{level}}})\s$", ctx.name, {"level": level})
        for level in ctx.options["levels"]
    ]


Heading = Node.create(
    name="heading",
    group="block",
    content="inline*",
    defining=True,
    add_options=_heading_options,
    add_attributes=lambda ctx: {
        "level": {"default": 1, "rendered": False},
        "placeholder": _placeholder_attribute(),
    },
    parse_html=_heading_parse_html,
    render_html=_heading_render_html,
    add_commands=_heading_commands,
    add_keyboard_shortcuts=_heading_shortcuts,
    add_input_rules=_heading_input_rules,
)


# =============================================================================
# Inline
# =============================================================================


Text = Node.create(
    name="text",
    group="inline",
)


HardBreak = Node.create(
    name="hard_break",
    group="inline",
    inline=True,
    selectable=False,
    add_options=_html_attributes_option,
    parse_html=lambda ctx: [{"tag": "br"}],
    render_html=lambda ctx, props: [
        "br",
        merge_attributes(ctx.options["html_attributes"], props.html_attributes),
    ],
    render_text=lambda ctx, node: "\n",
    add_keyboard_shortcuts=lambda ctx: {
        "Mod-Enter": lambda editor: editor.commands.insert_content({"type": ctx.name}),
        "Shift-Enter": lambda editor: editor.commands.insert_content({"type": ctx.name}),
    },
)
