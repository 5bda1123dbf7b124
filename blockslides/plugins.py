"""
Transaction plugins.

Behaviour extensions contribute plugins through ``add_plugins``. A
plugin sees every transaction the editor dispatches:

- ``filter_transaction(tr, state)``: return False to drop the
  transaction before it is applied
- ``append_transaction(transactions, old_state, new_state)``: return a
  follow-up transaction (built from ``new_state.tr``) or None

Example:
    ReadOnlyTitle = Extension.create(
        name="read_only_title",
        add_plugins=lambda ctx: [
            Plugin(
                key="read_only_title",
                filter_transaction=lambda tr, state: not touches_title(tr),
            ),
        ],
    )
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Sequence

if TYPE_CHECKING:
    from blockslides.state import EditorState, Transaction

logger = logging.getLogger(__name__)


TransactionFilter = Callable[["Transaction", "EditorState"], bool]
TransactionAppender = Callable[
    [Sequence["Transaction"], "EditorState", "EditorState"], "Transaction | None"
]


@dataclass(frozen=True)
class Plugin:
    """
    Transaction hooks contributed by an extension.

    Attributes:
        key: Name used in logs
        filter_transaction: Veto hook, called before a transaction is applied
        append_transaction: Follow-up hook, called after it was applied
    """

    key: str
    filter_transaction: TransactionFilter | None = None
    append_transaction: TransactionAppender | None = None


def filter_transaction(plugins: Sequence[Plugin], tr: Transaction, state: EditorState) -> bool:
    """True if no plugin vetoes ``tr``."""
    for plugin in plugins:
        if plugin.filter_transaction is None:
            continue
        if plugin.filter_transaction(tr, state) is False:
            logger.debug(f"[plugins] Transaction dropped by '{plugin.key}'")
            return False
    return True


def append_transactions(
    plugins: Sequence[Plugin],
    tr: Transaction,
    state: EditorState,
) -> tuple[EditorState, list[Transaction]]:
    """
    Apply ``tr`` to ``state`` and collect follow-up transactions.

    Each plugin runs once, in order, and sees the state left by the
    transactions before it. Follow-ups vetoed by a filter are skipped.

    Returns:
        (final state, applied transactions with ``tr`` first)
    """
    applied = [tr]
    current = state.apply(tr)

    for plugin in plugins:
        if plugin.append_transaction is None:
            continue

        appended = plugin.append_transaction(list(applied), state, current)
        if appended is None or not appended.steps and not appended.selection_set:
            continue
        if not filter_transaction(plugins, appended, current):
            continue

        logger.debug(f"[plugins] '{plugin.key}' appended a transaction")
        current = current.apply(appended)
        applied.append(appended)

    return current, applied
