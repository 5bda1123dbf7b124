"""
Extension graph: flattening, ordering and specialization collapse.

The editor receives a short, nested list (a kit that adds a dozen
extensions, each of which may add more). Before a schema can be built
the list is turned into one ordered sequence:

    flatten   → depth-first expansion of ``add_extensions``
    sort      → stable, descending priority
    collapse  → a specialization replaces the descriptor it extends

Unrelated descriptors sharing a name survive all three steps; the schema
synthesizer rejects them.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from blockslides.errors import ExtensionCycleError

from .base import Extendable, ExtensionKind

logger = logging.getLogger(__name__)


def flatten_extensions(extensions: Iterable[Extendable]) -> list[Extendable]:
    """
    Expand nested extensions depth-first into one sequence.

    Each descriptor is followed directly by the descriptors it adds.
    A descriptor instance that appears again is emitted once (first
    occurrence); without that, re-flattening a flat sequence would expand
    nested descriptors a second time. Distinct descriptors sharing a name
    are all kept.

    Raises:
        ExtensionCycleError: If a descriptor re-adds itself, directly or
            through one of the descriptors it adds
    """
    flat: list[Extendable] = []
    emitted: set[int] = set()
    _expand(extensions, (), flat, emitted)
    return flat


def _expand(
    extensions: Iterable[Extendable],
    path: tuple[tuple[ExtensionKind, str], ...],
    flat: list[Extendable],
    emitted: set[int],
) -> None:
    for extension in extensions:
        key = (extension.kind, extension.name)
        if key in path:
            names = [name for _, name in path] + [extension.name]
            raise ExtensionCycleError(names)

        if id(extension) in emitted:
            continue
        emitted.add(id(extension))
        flat.append(extension)

        nested = extension.nested_extensions()
        if nested:
            _expand(nested, path + (key,), flat, emitted)


def sort_extensions(extensions: Iterable[Extendable]) -> list[Extendable]:
    """Stable sort by descending priority; ties keep their input order."""
    return sorted(extensions, key=lambda extension: -extension.priority)


def collapse_specializations(extensions: Sequence[Extendable]) -> list[Extendable]:
    """
    Keep only the most specialized descriptor of each parent chain.

    When two descriptors of the same kind and name are related through
    ``extend()``, the more specialized one survives in the slot of the
    one that sorted first.
    """
    kept: list[Extendable] = []

    for extension in extensions:
        index = _find_related(kept, extension)

        if index is None:
            kept.append(extension)
            continue

        current = kept[index]
        if current.specializes(extension):
            logger.debug(f"[extensions] '{extension.name}' overridden by {current!r}")
        else:
            logger.debug(f"[extensions] '{current.name}' overridden by {extension!r}")
            kept[index] = extension

    return kept


def _find_related(kept: Sequence[Extendable], extension: Extendable) -> int | None:
    for index, candidate in enumerate(kept):
        if candidate.kind is not extension.kind or candidate.name != extension.name:
            continue
        if candidate.specializes(extension) or extension.specializes(candidate):
            return index
    return None


def resolve_extensions(extensions: Iterable[Extendable]) -> list[Extendable]:
    """Flatten, sort and collapse an extension list."""
    resolved = collapse_specializations(sort_extensions(flatten_extensions(extensions)))
    logger.debug(f"[extensions] Resolved order: {[e.name for e in resolved]}")
    return resolved


def split_extensions(
    extensions: Iterable[Extendable],
) -> tuple[list[Extendable], list[Extendable], list[Extendable]]:
    """
    Partition descriptors by kind, keeping order.

    Returns:
        (behaviors, nodes, marks)
    """
    behaviors: list[Extendable] = []
    nodes: list[Extendable] = []
    marks: list[Extendable] = []

    for extension in extensions:
        if extension.kind is ExtensionKind.NODE:
            nodes.append(extension)
        elif extension.kind is ExtensionKind.MARK:
            marks.append(extension)
        else:
            behaviors.append(extension)

    return behaviors, nodes, marks
