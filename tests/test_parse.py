"""
Tests for parse rule augmentation.
"""
from bs4 import BeautifulSoup

from blockslides.extensions import Attribute, ExtensionAttribute
from blockslides.schema import from_string, inject_extension_attributes_to_parse_rule


def element(html):
    return BeautifulSoup(html, "html.parser").find()


class TestFromString:
    """Tests for from_string."""

    def test_json_values_are_decoded(self):
        assert from_string("3") == 3
        assert from_string("true") is True
        assert from_string('{"a": 1}') == {"a": 1}
        assert from_string("null") is None

    def test_plain_strings_pass_through(self):
        assert from_string("center") == "center"
        assert from_string("") == ""

    def test_non_json_constants_stay_strings(self):
        """NaN/Infinity are not JSON; keep the literal."""
        assert from_string("NaN") == "NaN"

    def test_none_and_non_strings(self):
        assert from_string(None) is None
        assert from_string(5) == 5


class TestInjectExtensionAttributes:
    """Tests for inject_extension_attributes_to_parse_rule."""

    def test_style_rules_are_unchanged(self):
        rule = {"style": "font-weight", "get_attrs": lambda value: None}
        augmented = inject_extension_attributes_to_parse_rule(rule, [])

        assert augmented == rule
        assert augmented is not rule

    def test_rejection_short_circuits(self):
        """get_attrs False propagates; no extension attribute is read."""
        reads = []
        attributes = [
            ExtensionAttribute(
                "heading",
                "align",
                Attribute(parse_html=lambda el: reads.append(el) or "left"),
            )
        ]
        rule = {"tag": "h1", "get_attrs": lambda el: False}

        augmented = inject_extension_attributes_to_parse_rule(rule, attributes)

        assert augmented["get_attrs"](element("<h1>x</h1>")) is False
        assert reads == []

    def test_extension_values_win_on_collision(self):
        attributes = [ExtensionAttribute("heading", "level", Attribute())]
        rule = {"tag": "h1", "attrs": {"level": 1, "kind": "title"}}

        augmented = inject_extension_attributes_to_parse_rule(rule, attributes)

        assert augmented["get_attrs"](element('<h1 level="4">x</h1>')) == {"level": 4, "kind": "title"}

    def test_missing_values_are_skipped(self):
        attributes = [
            ExtensionAttribute("paragraph", "align", Attribute()),
            ExtensionAttribute("paragraph", "color", Attribute(parse_html=lambda el: None)),
        ]
        augmented = inject_extension_attributes_to_parse_rule({"tag": "p"}, attributes)

        assert augmented["get_attrs"](element("<p>x</p>")) == {}

    def test_parse_hook_receives_element(self):
        attributes = [
            ExtensionAttribute(
                "paragraph",
                "align",
                Attribute(parse_html=lambda el: el.get("data-align")),
            )
        ]
        rule = {"tag": "p", "get_attrs": lambda el: {"placeholder": el.get("data-placeholder")}}
        augmented = inject_extension_attributes_to_parse_rule(rule, attributes)

        result = augmented["get_attrs"](element('<p data-align="right" data-placeholder="Type">x</p>'))

        assert result == {"placeholder": "Type", "align": "right"}

    def test_other_rule_keys_are_kept(self):
        augmented = inject_extension_attributes_to_parse_rule({"tag": "p", "priority": 70}, [])
        assert augmented["tag"] == "p"
        assert augmented["priority"] == 70
