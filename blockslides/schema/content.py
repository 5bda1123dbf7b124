"""
Content expression checks.

Content expressions (``"block+"``, ``"(paragraph | heading)*"``,
``"inline{1,3}"``) and mark sets (``"bold italic"``, ``"_"``) refer to
types and groups by name. A reference to a name that no type declares is
a configuration error, reported before the schema is handed to the
document substrate.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping

from blockslides.errors import SchemaError

_NAME = re.compile(r"[A-Za-z_][\w-]*")

ALL_MARKS = "_"


def referenced_names(expression: str | None) -> list[str]:
    """Names referenced by a content or mark expression, in order."""
    if not expression:
        return []
    return [name for name in _NAME.findall(expression) if name != ALL_MARKS]


def collect_groups(specs: Mapping[str, str | None]) -> set[str]:
    """Group names declared by a ``{type_name: group}`` mapping."""
    groups: set[str] = set()
    for group in specs.values():
        if group:
            groups.update(group.split())
    return groups


def check_references(
    owner: str,
    field: str,
    expression: str | None,
    known: Iterable[str],
) -> None:
    """
    Raise if ``expression`` refers to a name not in ``known``.

    Raises:
        SchemaError: Naming the owning type, the field and the unknown name
    """
    known = set(known)
    for name in referenced_names(expression):
        if name not in known:
            raise SchemaError(
                f"Type '{owner}' refers to unknown type or group '{name}' "
                f"in {field} expression '{expression}'"
            )
