"""
Tests for field resolution along descriptor parent chains.
"""
import pytest

from blockslides.errors import ExtensionCycleError
from blockslides.extensions import Extension, FieldContext, Mark, Node
from blockslides.extensions.fields import (
    get_extension_field,
    is_hook_field,
    linearize,
    resolve_field,
)


class TestValueFields:
    """Tests for plain value fields."""

    def test_grandchild_resolves_through_chain(self):
        """G -> C -> P: a field defined only on P resolves on G."""
        parent = Node.create(name="thing", content="v")
        child = parent.extend()
        grandchild = child.extend()

        assert resolve_field(grandchild, "content") == "v"

    def test_nearest_definition_wins(self):
        """A specialization's own value shadows its parent's."""
        parent = Node.create(name="thing", group="block")
        child = parent.extend(group="inline")

        assert resolve_field(child, "group") == "inline"
        assert resolve_field(parent, "group") == "block"

    def test_missing_field_is_none(self):
        """A field nobody defines resolves to None, not an error."""
        node = Node.create(name="thing")
        assert resolve_field(node, "content") is None

    def test_name_inherited_from_parent(self):
        """extend() without a name keeps the parent's name."""
        parent = Mark.create(name="bold")
        assert parent.extend().name == "bold"
        assert parent.extend(name="strong").name == "strong"


class TestHookFields:
    """Tests for hook fields bound to a FieldContext."""

    def test_hook_receives_context(self):
        """Hooks are called with the context as first argument."""
        ext = Extension.create(name="watcher", add_storage=lambda ctx: {"name": ctx.name})
        assert resolve_field(ext, "add_storage", FieldContext(name="watcher")) == {"name": "watcher"}

    def test_parent_hook_is_bound(self):
        """ctx.parent is the parent's resolved hook, callable with no extra context."""
        base = Node.create(name="thing", add_attributes=lambda ctx: {"a": {}})
        special = base.extend(add_attributes=lambda ctx: {**ctx.parent(), "b": {}})

        assert resolve_field(special, "add_attributes", FieldContext(name="thing")) == {
            "a": {},
            "b": {},
        }

    def test_parent_chain_three_levels(self):
        """Each level layers on the one below."""
        base = Node.create(name="x", add_options=lambda ctx: {"levels": [1]})
        middle = base.extend(add_options=lambda ctx: {**ctx.parent(), "size": 2})
        top = middle.extend(add_options=lambda ctx: {**ctx.parent(), "levels": [1, 2]})

        assert top.options == {"levels": [1, 2], "size": 2}

    def test_root_hook_has_no_parent(self):
        """The first definition in the chain sees ctx.parent as None."""
        seen = []
        ext = Extension.create(name="x", add_commands=lambda ctx: seen.append(ctx.parent) or {})
        resolve_field(ext, "add_commands", FieldContext(name="x"))

        assert seen == [None]

    def test_explicit_none_removes_hook(self):
        """A specialization can switch a hook off with None."""
        base = Extension.create(name="x", add_commands=lambda ctx: {"a": None})
        disabled = base.extend(add_commands=None)

        assert get_extension_field(disabled, "add_commands") is None
        assert resolve_field(disabled, "add_commands") is None

    def test_hook_fields_are_declared(self):
        """Hook-ness comes from the field table, not the value."""
        assert is_hook_field("add_attributes")
        assert is_hook_field("render_html")
        assert not is_hook_field("priority")
        assert not is_hook_field("content")


class TestLineage:
    """Tests for precomputed lineage and cycle detection."""

    def test_lineage_order(self):
        """Lineage lists self first, then ancestors."""
        parent = Node.create(name="p")
        child = parent.extend()
        grandchild = child.extend()

        assert grandchild.lineage == (grandchild, child, parent)
        assert grandchild.specializes(parent)
        assert not parent.specializes(grandchild)

    def test_cycle_is_rejected(self):
        """A parent chain that loops back raises instead of recursing."""
        first = Node.create(name="a")
        second = first.extend()
        first._parent = second

        with pytest.raises(ExtensionCycleError) as exc_info:
            linearize(first)

        assert exc_info.value.path[0] == "a"
