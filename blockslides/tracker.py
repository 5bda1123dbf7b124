"""
Position tracking across transaction steps.

Commands that insert or delete content often need to know where a
position ended up afterwards:

    tracker = PositionTracker(tr)
    tr.insert(0, node)
    result = tracker.map(position)
    if not result.deleted:
        tr.set_selection(Selection.at(result.position))

The tracker remembers how many steps the transaction had when it was
created and maps through every step added since, as they exist when
``map`` is called.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TrackerResult:
    """Mapped position and whether it fell inside a deleted range."""

    position: int
    deleted: bool


class PositionTracker:
    """Maps positions through the steps added after its creation."""

    def __init__(self, transaction: Any):
        self.transaction = transaction
        self.checkpoint = len(transaction.steps)

    def map(self, position: int, assoc: int = 1) -> TrackerResult:
        deleted = False

        for step in self.transaction.steps[self.checkpoint:]:
            result = step.get_map().map_result(position, assoc)
            if result.deleted:
                deleted = True
            position = result.pos

        return TrackerResult(position=position, deleted=deleted)

    def __repr__(self) -> str:
        return f"<PositionTracker checkpoint={self.checkpoint} steps={len(self.transaction.steps)}>"
