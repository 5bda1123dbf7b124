"""
Layout attributes shared by block types.

``BlockAttributes`` adds alignment, spacing, background, decoration and
sizing attributes to every type listed in its ``types`` option through
``add_global_attributes``. Values are stored on the node and rendered as
``data-*`` attributes plus inline CSS:

    heading(align="center", padding="md")
    -> <h1 data-align="center" data-padding="md" style="padding: 16px">

Spacing and radius values may be tokens (``none``, ``sm``, ``md``,
``lg``) resolved through the options, or raw CSS lengths.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from blockslides.extensions.base import Extension
from blockslides.extensions.fields import FieldContext

SPACING_TOKENS = {"none": "0", "sm": "8px", "md": "16px", "lg": "32px"}
BORDER_RADIUS_TOKENS = {"none": "0", "sm": "4px", "md": "8px", "lg": "16px"}


def _options(ctx: FieldContext) -> dict[str, Any]:
    return {
        "types": ["heading", "paragraph"],
        "spacing": dict(SPACING_TOKENS),
        "border_radius": dict(BORDER_RADIUS_TOKENS),
    }


def _data_attribute(
    name: str,
    data_name: str,
    css: Callable[[Any], str | None] | None = None,
) -> dict[str, Any]:
    """Attribute stored in ``data-<data_name>``, optionally mirrored to inline CSS."""

    def render_html(attrs: Mapping[str, Any]) -> dict[str, Any]:
        value = attrs.get(name)
        if not value:
            return {}
        rendered = {f"data-{data_name}": value}
        style = css(value) if css is not None else None
        if style:
            rendered["style"] = style
        return rendered

    return {
        "default": None,
        "parse_html": lambda element: element.get(f"data-{data_name}"),
        "render_html": render_html,
    }


def _global_attributes(ctx: FieldContext) -> list[dict[str, Any]]:
    spacing = ctx.options["spacing"]
    radius = ctx.options["border_radius"]

    def css(prop: str, tokens: Mapping[str, str] | None = None) -> Callable[[Any], str]:
        return lambda value: f"{prop}: {(tokens or {}).get(value, value)}"

    def background_image(value: str) -> str:
        escaped = str(value).replace('"', '\\"')
        return (
            f'background-image: url("{escaped}"); background-size: cover; '
            "background-position: center; background-repeat: no-repeat"
        )

    fill = {
        "default": None,
        "parse_html": lambda element: True if element.get("data-fill") == "true" else None,
        "render_html": lambda attrs: {"data-fill": "true"} if attrs.get("fill") else {},
    }

    return [
        {
            "types": ctx.options["types"],
            "attributes": {
                "align": _data_attribute("align", "align"),
                "padding": _data_attribute("padding", "padding", css("padding", spacing)),
                "margin": _data_attribute("margin", "margin", css("margin", spacing)),
                "gap": _data_attribute("gap", "gap", css("gap", spacing)),
                "background_color": _data_attribute(
                    "background_color", "bg-color", css("background-color")
                ),
                "background_image": _data_attribute(
                    "background_image", "bg-image", background_image
                ),
                "border_radius": _data_attribute(
                    "border_radius", "border-radius", css("border-radius", radius)
                ),
                "border": _data_attribute("border", "border", css("border")),
                "fill": fill,
                "width": _data_attribute("width", "width", css("width")),
                "height": _data_attribute("height", "height", css("height")),
                "justify": _data_attribute("justify", "justify"),
            },
        }
    ]


def _commands(ctx: FieldContext) -> dict[str, Any]:
    types = ctx.options["types"]

    def setter(attribute: str):
        def factory(value: Any):
            def command(props) -> bool:
                # Every type is updated; the command applies if any of them did
                results = [
                    props.commands.update_attributes(type_name, {attribute: value})
                    for type_name in types
                ]
                return any(results)

            return command

        return factory

    return {
        f"set_block_{attribute}": setter(attribute)
        for attribute in (
            "align",
            "padding",
            "margin",
            "gap",
            "background_color",
            "background_image",
            "border_radius",
            "fill",
            "width",
            "height",
        )
    }


BlockAttributes = Extension.create(
    name="block_attributes",
    add_options=_options,
    add_global_attributes=_global_attributes,
    add_commands=_commands,
)
