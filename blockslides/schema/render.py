"""
Render pipeline: from node/mark attributes to HTML attributes.

Every attribute marked ``rendered`` contributes a fragment: either
``{name: value}`` or whatever its ``render_html`` hook returns. The
fragments are folded together with ``merge_attributes``, which
accumulates ``class`` and ``style`` instead of overwriting them.

Example:
    >>> merge_attributes({"class": "a"}, {"class": "b"}, {"class": "a"})
    {'class': 'a b'}
    >>> merge_attributes({"style": "color:red"}, {"style": "font-weight:bold"})
    {'style': 'color:red; font-weight:bold'}
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, Mapping, Protocol, Sequence, Union

if TYPE_CHECKING:
    from blockslides.extensions.attributes import ExtensionAttribute


# A DOM output spec is either a string (text) or a sequence
# ``[tag, attrs?, *children]`` where the integer 0 marks the content hole.
DOMOutputSpec = Union[str, Sequence[Any]]


class _NamedType(Protocol):
    name: str


class Renderable(Protocol):
    """Anything with a named type and an attrs mapping (node or mark)."""

    type: _NamedType
    attrs: Mapping[str, Any]


@dataclass
class RenderProps:
    """Second argument of a ``render_html`` hook."""

    html_attributes: dict[str, Any] = field(default_factory=dict)
    node: Any = None
    mark: Any = None


def merge_attributes(*objects: Mapping[str, Any] | None) -> dict[str, Any]:
    """
    Merge HTML attribute dicts left to right.

    ``class``: whitespace-split, concatenated, de-duplicated keeping the
    first occurrence. ``style``: non-empty fragments joined with ``"; "``.
    Any other key: the later value wins.
    """
    result: dict[str, Any] = {}

    for attributes in objects:
        if not attributes:
            continue

        for key, value in attributes.items():
            if key == "class":
                existing = str(result["class"]).split() if result.get("class") else []
                incoming = str(value).split() if value else []
                result["class"] = " ".join(dict.fromkeys(existing + incoming))
            elif key == "style":
                fragments = [result.get("style"), value]
                result["style"] = "; ".join(str(f) for f in fragments if f)
            else:
                result[key] = value

    return result


def get_rendered_attributes(
    instance: Renderable,
    attributes: Iterable[ExtensionAttribute],
) -> dict[str, Any]:
    """
    Compute the HTML attributes of a node or mark instance.

    Attributes without a ``render_html`` hook render as ``{name: value}``
    even when the value is None; callers decide how to serialize None.
    """
    type_name = instance.type.name
    fragments: list[Mapping[str, Any]] = []

    for item in attributes:
        if item.type != type_name or not item.attribute.rendered:
            continue

        hook = item.attribute.render_html
        if hook is None:
            fragments.append({item.name: instance.attrs.get(item.name)})
        else:
            fragments.append(hook(instance.attrs) or {})

    return merge_attributes({}, *fragments)
