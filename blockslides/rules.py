"""
Input and paste rules.

An input rule watches the text typed into a textblock. When the text
before the cursor, plus the text being typed, matches the rule's
pattern at its end, the rule's handler gets to rewrite the match:

    # "## " at the start of a paragraph turns it into a heading
    textblock_type_input_rule(r"^##\\s$", "heading", {"level": 2})

Rules are contributed through ``add_input_rules`` and can be turned off
per editor (``EditorSettings.enable_input_rules``).

Paste rules work the same way over pasted content. Each match in the
pasted range is handed to the rule; ``mark_paste_rule`` marks it:

    mark_paste_rule(r"https?://\\S+", "link", lambda m: {"href": m.group(0)})

They come from ``add_paste_rules`` and follow
``EditorSettings.enable_paste_rules``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping

from blockslides.tracker import PositionTracker

if TYPE_CHECKING:
    from blockslides.commands.manager import CommandProps
    from blockslides.editor import Editor

logger = logging.getLogger(__name__)

MAX_MATCH = 500

InputRuleHandler = Callable[["CommandProps", "re.Match[str]", tuple[int, int]], Any]


@dataclass(frozen=True)
class InputRule:
    """
    Pattern plus handler.

    The handler receives command props bound to a fresh transaction, the
    match, and the document range the match covers (typed text
    included). It changes ``props.tr``; a rule that adds no steps does
    not apply.
    """

    find: re.Pattern[str] | str
    handler: InputRuleHandler

    @property
    def pattern(self) -> re.Pattern[str]:
        return self.find if isinstance(self.find, re.Pattern) else re.compile(self.find)


def textblock_type_input_rule(
    find: re.Pattern[str] | str,
    type_name: str,
    attributes: Mapping[str, Any] | Callable[[re.Match[str]], Mapping[str, Any]] | None = None,
) -> InputRule:
    """Turn the textblock into ``type_name`` and delete the matched text."""

    def handler(props: CommandProps, match: re.Match[str], range_: tuple[int, int]) -> None:
        node_type = props.state.schema.nodes.get(type_name)
        if node_type is None:
            return

        attrs = attributes(match) if callable(attributes) else dict(attributes or {})
        start, end = range_
        tr = props.tr
        tr.delete(start, min(end, tr.doc.content.size))
        tr.set_node_markup(tr.doc.resolve(start).before(), node_type, attrs)

    return InputRule(find=find, handler=handler)


def run_input_rules(editor: Editor, from_: int, to: int, text: str) -> bool:
    """
    Try every enabled input rule against ``text`` typed at ``from_``..``to``.

    Returns:
        True if a rule applied (its transaction was dispatched)
    """
    rules = editor.extension_manager.input_rules
    if not rules:
        return False

    state = editor.state
    resolved = state.doc.resolve(from_)
    parent = resolved.parent
    if not parent.is_textblock or parent.type.spec.get("code"):
        return False

    offset = resolved.parent_offset
    text_before = parent.text_between(max(0, offset - MAX_MATCH), offset, None, "￼") + text

    for rule in rules:
        match = rule.pattern.search(text_before)
        if match is None or match.end() != len(text_before):
            continue

        start = from_ - (len(match.group(0)) - len(text))
        tr = state.tr
        tr.insert_text(text, from_, to)
        checkpoint = len(tr.steps)

        props = editor.command_manager.create_props(tr, should_dispatch=True)
        rule.handler(props, match, (start, start + len(match.group(0))))

        if len(tr.steps) == checkpoint:
            continue

        logger.debug(f"[rules] Input rule {rule.pattern.pattern!r} applied")
        editor.dispatch(tr)
        return True

    return False


# =============================================================================
# Paste rules
# =============================================================================


@dataclass(frozen=True)
class PasteRule:
    """
    Pattern plus handler, run over pasted text.

    Every match inside the pasted range is handed to the handler with
    command props bound to the paste transaction and the match's
    document range.
    """

    find: re.Pattern[str] | str
    handler: InputRuleHandler

    @property
    def pattern(self) -> re.Pattern[str]:
        return self.find if isinstance(self.find, re.Pattern) else re.compile(self.find)


def mark_paste_rule(
    find: re.Pattern[str] | str,
    type_name: str,
    attributes: Mapping[str, Any] | Callable[[re.Match[str]], Mapping[str, Any]] | None = None,
) -> PasteRule:
    """Add the ``type_name`` mark over each match that does not carry it yet."""

    def handler(props: CommandProps, match: re.Match[str], range_: tuple[int, int]) -> None:
        mark_type = props.state.schema.marks.get(type_name)
        if mark_type is None:
            return

        start, end = range_
        if props.tr.doc.range_has_mark(start, end, mark_type):
            return

        attrs = attributes(match) if callable(attributes) else dict(attributes or {})
        props.tr.add_mark(start, end, mark_type.create(attrs))

    return PasteRule(find=find, handler=handler)


def run_paste_rules(editor: Editor, tr: Any, from_: int, to: int) -> bool:
    """
    Run every enabled paste rule over the textblocks between ``from_``
    and ``to`` in ``tr``. Steps are added to ``tr``; nothing is dispatched.

    Returns:
        True if a rule added steps
    """
    rules = editor.extension_manager.paste_rules
    if not rules or from_ >= to:
        return False

    matches: list[tuple[PasteRule, re.Match[str], int, int]] = []

    def visit(node: Any, pos: int, parent: Any, index: int) -> bool:
        if not node.is_textblock:
            return True
        if node.type.spec.get("code"):
            return False

        start = pos + 1
        text = node.text_between(0, node.content.size, None, "￼")
        for rule in rules:
            for match in rule.pattern.finditer(text):
                match_from, match_to = start + match.start(), start + match.end()
                if match_to > from_ and match_from < to:
                    matches.append((rule, match, match_from, match_to))
        return False

    tr.doc.nodes_between(from_, to, visit)
    if not matches:
        return False

    checkpoint = len(tr.steps)
    tracker = PositionTracker(tr)
    props = editor.command_manager.create_props(tr, should_dispatch=True)

    for rule, match, match_from, match_to in matches:
        start, end = tracker.map(match_from).position, tracker.map(match_to, -1).position
        if start < end:
            rule.handler(props, match, (start, end))

    applied = len(tr.steps) > checkpoint
    if applied:
        logger.debug(f"[rules] Paste rules added {len(tr.steps) - checkpoint} step(s)")
    return applied
