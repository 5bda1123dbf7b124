"""
Editor state on top of the ``prosemirror`` document model.

The document substrate provides documents, steps and ``Transform``.
This module adds what an editor needs around them:

- ``Selection``: a text range (anchor/head) mapped through steps
- ``Transaction``: a ``Transform`` that also tracks the selection,
  stored marks and metadata
- ``EditorState``: an immutable (doc, selection, stored marks) snapshot;
  ``state.apply(tr)`` returns the next snapshot
- ``ChainableState``: a state view whose doc and selection follow an
  in-progress transaction, handed to chained commands
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from prosemirror.transform import Transform


@dataclass(frozen=True)
class Selection:
    """
    Text selection between two document positions.

    ``anchor`` stays put when the selection is extended; ``head`` moves.
    """

    anchor: int
    head: int

    @property
    def from_(self) -> int:
        return min(self.anchor, self.head)

    @property
    def to(self) -> int:
        return max(self.anchor, self.head)

    @property
    def empty(self) -> bool:
        return self.anchor == self.head

    def map(self, mappable: Any) -> Selection:
        """Map both ends through a step map or mapping."""
        return Selection(mappable.map(self.anchor), mappable.map(self.head))

    def clamp(self, doc: Any) -> Selection:
        size = doc.content.size
        return Selection(max(0, min(self.anchor, size)), max(0, min(self.head, size)))

    @classmethod
    def at(cls, position: int) -> Selection:
        return cls(position, position)

    @classmethod
    def all(cls, doc: Any) -> Selection:
        return cls(0, doc.content.size)

    @classmethod
    def at_start(cls, doc: Any) -> Selection:
        """Cursor at the start of the first textblock, or at 0."""
        found: list[int] = []

        def visit(node: Any, pos: int, parent: Any, index: int) -> bool:
            if found:
                return False
            if node.is_textblock:
                found.append(pos + 1)
                return False
            return True

        doc.nodes_between(0, doc.content.size, visit)
        return cls.at(found[0] if found else 0)


class Transaction(Transform):
    """
    A ``Transform`` with editor bookkeeping.

    The selection is stored together with the step count at the time it
    was set and mapped through every later step on access.
    """

    def __init__(self, state: EditorState):
        super().__init__(state.doc)
        self.before_state = state
        self.schema = state.schema
        self.stored_marks = state.stored_marks
        self.selection_set = False
        self.stored_marks_set = False
        self._selection = state.selection
        self._selection_checkpoint = 0
        self._meta: dict[str, Any] = {}

    @property
    def selection(self) -> Selection:
        selection = self._selection
        for step in self.steps[self._selection_checkpoint:]:
            selection = selection.map(step.get_map())
        return selection.clamp(self.doc)

    def set_selection(self, selection: Selection) -> Transaction:
        self._selection = selection.clamp(self.doc)
        self._selection_checkpoint = len(self.steps)
        self.selection_set = True
        self.stored_marks = None
        return self

    def set_stored_marks(self, marks: list[Any] | None) -> Transaction:
        self.stored_marks = marks
        self.stored_marks_set = True
        return self

    def add_stored_mark(self, mark: Any) -> Transaction:
        return self.set_stored_marks(mark.add_to_set(self._current_marks()))

    def remove_stored_mark(self, mark_or_type: Any) -> Transaction:
        return self.set_stored_marks(mark_or_type.remove_from_set(self._current_marks()))

    def _current_marks(self) -> list[Any]:
        if self.stored_marks is not None:
            return self.stored_marks
        return self.doc.resolve(self.selection.head).marks()

    def insert_text(self, text: str, from_: int | None = None, to: int | None = None) -> Transaction:
        """Replace ``from_``..``to`` (default: the selection) with text."""
        selection = self.selection
        from_ = selection.from_ if from_ is None else from_
        to = (selection.to if from_ == selection.from_ else from_) if to is None else to

        if not text:
            return self.delete(from_, to)

        marks = self.stored_marks if self.stored_marks is not None else self.doc.resolve(from_).marks()
        self.replace_with(from_, to, self.schema.text(text, marks))
        return self

    def delete_selection(self) -> Transaction:
        selection = self.selection
        if not selection.empty:
            self.delete(selection.from_, selection.to)
        return self

    def set_meta(self, key: str, value: Any) -> Transaction:
        self._meta[key] = value
        return self

    def get_meta(self, key: str, default: Any = None) -> Any:
        return self._meta.get(key, default)

    @property
    def meta(self) -> dict[str, Any]:
        return dict(self._meta)

    @property
    def selection_changed(self) -> bool:
        return self.selection != self.before_state.selection


@dataclass(frozen=True)
class EditorState:
    """Immutable editor snapshot."""

    doc: Any
    selection: Selection
    schema: Any
    stored_marks: list[Any] | None = None

    @classmethod
    def create(cls, schema: Any, doc: Any = None, selection: Selection | None = None) -> EditorState:
        """
        Create a state for ``schema`` (a ``prosemirror`` Schema).

        Without ``doc``, the smallest valid document of the top node is
        used. Without ``selection``, the cursor is placed at the start of
        the first textblock.
        """
        if doc is None:
            doc = schema.top_node_type.create_and_fill()
        if selection is None:
            selection = Selection.at_start(doc)
        return cls(doc=doc, selection=selection.clamp(doc), schema=schema)

    @property
    def tr(self) -> Transaction:
        return Transaction(self)

    def apply(self, tr: Transaction) -> EditorState:
        return EditorState(
            doc=tr.doc,
            selection=tr.selection,
            schema=self.schema,
            stored_marks=tr.stored_marks,
        )


class ChainableState:
    """
    State view bound to an in-progress transaction.

    ``doc``, ``selection`` and ``stored_marks`` reflect the steps already
    added to the transaction, so each command in a chain sees the
    changes made by the commands before it.
    """

    def __init__(self, state: EditorState, transaction: Transaction):
        self._state = state
        self.tr = transaction

    @property
    def doc(self) -> Any:
        return self.tr.doc

    @property
    def selection(self) -> Selection:
        return self.tr.selection

    @property
    def stored_marks(self) -> list[Any] | None:
        return self.tr.stored_marks

    @property
    def schema(self) -> Any:
        return self._state.schema

    def apply(self, tr: Transaction) -> EditorState:
        return self._state.apply(tr)

    def __repr__(self) -> str:
        return f"<ChainableState steps={len(self.tr.steps)} selection={self.selection}>"
