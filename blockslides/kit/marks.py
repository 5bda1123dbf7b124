"""
Built-in mark types.

Each mark ships ``set_*`` / ``unset_*`` / ``toggle_*`` commands built on
the core mark commands, plus the usual keyboard shortcuts.
"""

from __future__ import annotations

import re
from typing import Any

from blockslides.extensions.base import Mark
from blockslides.extensions.fields import FieldContext
from blockslides.rules import mark_paste_rule
from blockslides.schema.render import merge_attributes

_BOLD_WEIGHT = re.compile(r"^(bold(er)?|[5-9]\d{2,})$")
_URL = re.compile(r"https?://[^\s<>\"]*[^\s<>\".,;:!?)\]]")


def _html_attributes_option(ctx: FieldContext) -> dict[str, Any]:
    return {"html_attributes": {}}


def _mark_commands(suffix: str):
    """``set_<suffix>``, ``unset_<suffix>`` and ``toggle_<suffix>`` for one mark."""

    def add_commands(ctx: FieldContext) -> dict[str, Any]:
        return {
            f"set_{suffix}": lambda: lambda props: props.commands.set_mark(ctx.name),
            f"unset_{suffix}": lambda: lambda props: props.commands.unset_mark(ctx.name),
            f"toggle_{suffix}": lambda: lambda props: props.commands.toggle_mark(ctx.name),
        }

    return add_commands


def _toggle_shortcuts(suffix: str, *keys: str):
    def add_keyboard_shortcuts(ctx: FieldContext) -> dict[str, Any]:
        return {key: lambda editor: getattr(editor.commands, f"toggle_{suffix}")() for key in keys}

    return add_keyboard_shortcuts


def _simple_render(tag: str):
    def render_html(ctx: FieldContext, props) -> list[Any]:
        return [tag, merge_attributes(ctx.options["html_attributes"], props.html_attributes), 0]

    return render_html


def _bold_weight(value: str) -> Any:
    # None accepts the style, False rejects it
    return None if _BOLD_WEIGHT.match(value) else False


Bold = Mark.create(
    name="bold",
    add_options=_html_attributes_option,
    parse_html=lambda ctx: [
        {"tag": "strong"},
        {"tag": "b"},
        {"style": "font-weight", "get_attrs": _bold_weight},
    ],
    render_html=_simple_render("strong"),
    add_commands=_mark_commands("bold"),
    add_keyboard_shortcuts=_toggle_shortcuts("bold", "Mod-b", "Mod-B"),
)


Italic = Mark.create(
    name="italic",
    add_options=_html_attributes_option,
    parse_html=lambda ctx: [
        {"tag": "em"},
        {"tag": "i"},
        {"style": "font-style=italic"},
    ],
    render_html=_simple_render("em"),
    add_commands=_mark_commands("italic"),
    add_keyboard_shortcuts=_toggle_shortcuts("italic", "Mod-i", "Mod-I"),
)


Underline = Mark.create(
    name="underline",
    add_options=_html_attributes_option,
    parse_html=lambda ctx: [
        {"tag": "u"},
        {"style": "text-decoration=underline"},
    ],
    render_html=_simple_render("u"),
    add_commands=_mark_commands("underline"),
    add_keyboard_shortcuts=_toggle_shortcuts("underline", "Mod-u", "Mod-U"),
)


# =============================================================================
# Marks with attributes
# =============================================================================


def _link_commands(ctx: FieldContext) -> dict[str, Any]:
    def set_link(href: str, target: str | None = None, title: str | None = None):
        attributes = {"href": href, "title": title}
        if target is not None:
            attributes["target"] = target
        return lambda props: props.commands.set_mark(ctx.name, attributes)

    def unset_link():
        return lambda props: props.commands.unset_mark(ctx.name)

    return {"set_link": set_link, "unset_link": unset_link}


def _link_paste_rules(ctx: FieldContext) -> list[Any]:
    # Bare URLs in pasted text become links
    if not ctx.options["link_on_paste"]:
        return []
    return [mark_paste_rule(_URL, ctx.name, lambda match: {"href": match.group(0)})]


Link = Mark.create(
    name="link",
    inclusive=False,
    priority=1000,
    add_options=lambda ctx: {
        "html_attributes": {"rel": "noopener noreferrer"},
        "link_on_paste": True,
    },
    add_attributes=lambda ctx: {
        "href": {"default": "", "parse_html": lambda element: element.get("href")},
        "title": {"default": None, "parse_html": lambda element: element.get("title")},
        "target": {"default": "_blank", "parse_html": lambda element: element.get("target")},
    },
    parse_html=lambda ctx: [{"tag": "a[href]"}],
    render_html=lambda ctx, props: [
        "a",
        merge_attributes(props.html_attributes, ctx.options["html_attributes"]),
        0,
    ],
    add_commands=_link_commands,
    add_paste_rules=_link_paste_rules,
)


def _text_color_commands(ctx: FieldContext) -> dict[str, Any]:
    def set_color(color: str):
        return lambda props: props.commands.set_mark(ctx.name, {"color": color})

    def unset_color():
        return lambda props: props.commands.unset_mark(ctx.name)

    return {"set_color": set_color, "unset_color": unset_color}


TextColor = Mark.create(
    name="text_color",
    add_options=_html_attributes_option,
    add_attributes=lambda ctx: {
        "color": {
            "default": "#000000",
            "render_html": lambda attrs: {"style": f"color: {attrs['color']}"},
        },
    },
    parse_html=lambda ctx: [
        {"style": "color", "get_attrs": lambda value: {"color": value}},
    ],
    render_html=lambda ctx, props: [
        "span",
        merge_attributes(ctx.options["html_attributes"], props.html_attributes),
        0,
    ],
    add_commands=_text_color_commands,
)
