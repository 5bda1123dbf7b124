"""
Parse rule augmentation.

A node or mark declares parse rules for its own attributes. Extensions
can declare more attributes for that type (``add_attributes`` on a
specialization, ``add_global_attributes`` elsewhere). This module wraps
each rule so those extra attributes are read from the matched element
too.

Rules are plain dicts:

    {"tag": "h1", "attrs": {"level": 1}}
    {"tag": "a[href]", "get_attrs": lambda el: {"href": el.get("href")}}
    {"style": "font-weight", "get_attrs": lambda value: None}

Style rules are returned untouched: they receive a CSS value rather than
an element, so element attributes cannot be extracted from them.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

if TYPE_CHECKING:
    from bs4 import Tag

    from blockslides.extensions.attributes import ExtensionAttribute


ParseRule = dict[str, Any]


def _reject_constant(value: str) -> Any:
    raise ValueError(f"Not a JSON value: {value}")


def from_string(value: Any) -> Any:
    """
    Decode a raw HTML attribute value.

    Strings are decoded as JSON when possible (``"3"`` -> 3,
    ``"true"`` -> True, ``'{"a": 1}'`` -> dict); otherwise the string
    itself is returned. None stays None; non-strings pass through.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value

    try:
        return json.loads(value, parse_constant=_reject_constant)
    except ValueError:
        return value


def inject_extension_attributes_to_parse_rule(
    rule: Mapping[str, Any],
    attributes: Iterable[ExtensionAttribute],
) -> ParseRule:
    """
    Wrap ``rule`` so extension attributes are extracted alongside its own.

    The wrapped ``get_attrs`` returns False as soon as the rule's own
    extraction rejects the element; otherwise it returns
    ``{**own_attributes, **extension_attributes}``.
    """
    if "style" in rule:
        return dict(rule)

    attributes = list(attributes)
    own_get_attrs: Callable[[Tag], Any] | None = rule.get("get_attrs")
    static_attrs = rule.get("attrs")

    def get_attrs(element: Tag) -> dict[str, Any] | bool:
        own = own_get_attrs(element) if own_get_attrs is not None else static_attrs

        if own is False:
            return False

        extracted: dict[str, Any] = {}
        for item in attributes:
            hook = item.attribute.parse_html
            value = hook(element) if hook is not None else from_string(element.get(item.name))
            if value is None:
                continue
            extracted[item.name] = value

        return {**(own or {}), **extracted}

    return {**rule, "get_attrs": get_attrs}
