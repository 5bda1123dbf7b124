"""
Tests for extension flattening, ordering and specialization collapse.
"""
import pytest

from blockslides.errors import ExtensionCycleError
from blockslides.extensions import (
    Extension,
    Mark,
    Node,
    collapse_specializations,
    flatten_extensions,
    resolve_extensions,
    sort_extensions,
    split_extensions,
)


def names(extensions):
    return [extension.name for extension in extensions]


class TestFlatten:
    """Tests for flatten_extensions."""

    def test_nested_extensions_follow_their_owner(self):
        """[A(adds B, C), D] flattens to A, B, C, D."""
        b = Extension.create(name="b")
        c = Extension.create(name="c")
        a = Extension.create(name="a", add_extensions=lambda ctx: [b, c])
        d = Extension.create(name="d")

        assert names(flatten_extensions([a, d])) == ["a", "b", "c", "d"]

    def test_depth_first(self):
        """Grandchildren come before the owner's later siblings."""
        leaf = Extension.create(name="leaf")
        inner = Extension.create(name="inner", add_extensions=lambda ctx: [leaf])
        sibling = Extension.create(name="sibling")
        outer = Extension.create(name="outer", add_extensions=lambda ctx: [inner, sibling])

        assert names(flatten_extensions([outer])) == ["outer", "inner", "leaf", "sibling"]

    def test_flatten_is_idempotent(self):
        """flatten(flatten(xs)) == flatten(xs)."""
        b = Extension.create(name="b")
        a = Extension.create(name="a", add_extensions=lambda ctx: [b])
        once = flatten_extensions([a, Node.create(name="n")])

        assert flatten_extensions(once) == once

    def test_nested_extensions_are_computed_once(self):
        """The add_extensions hook is not re-run on later flattens."""
        calls = []

        def add_extensions(ctx):
            calls.append(ctx.name)
            return [Extension.create(name="child")]

        owner = Extension.create(name="owner", add_extensions=add_extensions)
        flatten_extensions([owner])
        flatten_extensions([owner])

        assert calls == ["owner"]

    def test_unrelated_duplicates_are_kept(self):
        """Uniqueness is not checked while flattening."""
        first = Node.create(name="same")
        second = Node.create(name="same")

        assert len(flatten_extensions([first, second])) == 2

    def test_self_nesting_is_rejected(self):
        """A descriptor that re-adds itself raises a cycle error."""
        looping = Extension.create(name="loop", add_extensions=lambda ctx: [looping])

        with pytest.raises(ExtensionCycleError):
            flatten_extensions([looping])

    def test_indirect_nesting_cycle_is_rejected(self):
        """A adds B, B adds A."""
        a = Extension.create(name="a", add_extensions=lambda ctx: [b])
        b = Extension.create(name="b", add_extensions=lambda ctx: [a])

        with pytest.raises(ExtensionCycleError) as exc_info:
            flatten_extensions([a])

        assert exc_info.value.path == ["a", "b", "a"]


class TestSort:
    """Tests for sort_extensions."""

    def test_descending_priority(self):
        low = Extension.create(name="low", priority=10)
        high = Extension.create(name="high", priority=500)
        default = Extension.create(name="default")

        assert names(sort_extensions([low, default, high])) == ["high", "default", "low"]

    def test_ties_keep_input_order(self):
        """Sorting is stable."""
        items = [Extension.create(name=str(i)) for i in range(5)]
        assert names(sort_extensions(items)) == ["0", "1", "2", "3", "4"]

    def test_priority_is_inherited(self):
        parent = Extension.create(name="p", priority=300)
        assert parent.extend().priority == 300


class TestCollapse:
    """Tests for specialization collapse."""

    def test_custom_bold_sorts_first_and_replaces_bold(self):
        """CustomBold (200, parent Bold) wins over Bold; Italic stays."""
        bold = Mark.create(name="bold")
        italic = Mark.create(name="italic")
        custom_bold = bold.extend(priority=200)

        ordered = sort_extensions([bold, italic, custom_bold])
        assert ordered[0] is custom_bold

        resolved = collapse_specializations(ordered)
        assert resolved == [custom_bold, italic]

    def test_lower_priority_specialization_still_wins(self):
        """The most specialized descriptor wins, in the slot sorted first."""
        base = Mark.create(name="bold", priority=500)
        special = base.extend(priority=50)
        other = Mark.create(name="italic")

        resolved = resolve_extensions([special, other, base])
        assert resolved == [special, other]

    def test_unrelated_same_name_survives(self):
        """Collapse only merges descriptors related through extend()."""
        first = Node.create(name="same")
        second = Node.create(name="same")

        assert collapse_specializations([first, second]) == [first, second]

    def test_same_name_different_kind_not_collapsed(self):
        node = Node.create(name="x")
        mark = Mark.create(name="x")

        assert collapse_specializations([node, mark]) == [node, mark]


class TestSplit:
    """Tests for split_extensions."""

    def test_partition_by_kind(self):
        behavior = Extension.create(name="b")
        node = Node.create(name="n")
        mark = Mark.create(name="m")

        assert split_extensions([mark, behavior, node]) == ([behavior], [node], [mark])
