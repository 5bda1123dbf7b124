"""
Small helpers for plain-dict configuration data.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Mapping, TypeVar

T = TypeVar("T", bound=Hashable)


def merge_deep(target: Mapping[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """
    Deep-merge ``source`` into a copy of ``target``.

    Nested dicts are merged key by key; anything else in ``source``
    replaces the value in ``target``. Neither input is modified.
    """
    output = dict(target)

    for key, value in source.items():
        existing = output.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            output[key] = merge_deep(existing, value)
        else:
            output[key] = value

    return output


def find_duplicates(items: Iterable[T]) -> list[T]:
    """Return items that occur more than once, in first-repeat order."""
    seen: set[T] = set()
    duplicates: list[T] = []

    for item in items:
        if item in seen and item not in duplicates:
            duplicates.append(item)
        seen.add(item)

    return duplicates
