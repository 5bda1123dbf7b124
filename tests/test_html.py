"""
Tests for HTML rendering and parsing.
"""
import pytest
from bs4 import BeautifulSoup

from blockslides.config import ValidationMode
from blockslides.documents import create_document
from blockslides.errors import SchemaError
from blockslides.extensions import Node
from blockslides.kit import Bold, Document, Paragraph, Slide, Text
from blockslides.schema import (
    DOMParser,
    generate_html,
    generate_json,
    get_text,
    render_spec,
    synthesize_schema,
)


class TestRenderSpec:
    """Tests for turning DOM output specs into elements."""

    def test_hole_is_returned(self):
        soup = BeautifulSoup("", "html.parser")
        element, hole = render_spec(soup, ["figure", ["figcaption", 0]])

        assert element.name == "figure"
        assert hole.name == "figcaption"

    def test_none_attributes_are_skipped(self):
        soup = BeautifulSoup("", "html.parser")
        element, _ = render_spec(soup, ["a", {"href": "/x", "title": None}, 0])

        assert str(element) == '<a href="/x"></a>'

    def test_non_string_attributes_are_json(self):
        soup = BeautifulSoup("", "html.parser")
        element, _ = render_spec(soup, ["div", {"data-level": 2, "data-on": True}])

        assert element["data-level"] == "2"
        assert element["data-on"] == "true"

    def test_leaf_has_no_hole(self):
        soup = BeautifulSoup("", "html.parser")
        _, hole = render_spec(soup, ["br"])
        assert hole is None

    def test_two_holes_are_rejected(self):
        soup = BeautifulSoup("", "html.parser")
        with pytest.raises(SchemaError):
            render_spec(soup, ["div", ["p", 0], ["p", 0]])


class TestGenerateHtml:
    """Tests for serializing documents."""

    def test_kit_document(self, kit_schema, sample_json):
        doc = kit_schema.node_from_json(sample_json)

        assert generate_html(doc, kit_schema) == (
            '<section data-node-type="slide"><h1>Title</h1></section>'
            '<section data-node-type="slide"><p>Body <strong>bold</strong></p></section>'
        )

    def test_types_without_renderer_pass_children_through(self, base_extensions):
        bare = Node.create(name="bare", group="block", content="inline*")
        schema = synthesize_schema([*base_extensions, bare])
        doc = schema.node_from_json(
            {
                "type": "doc",
                "content": [
                    {
                        "type": "slide",
                        "content": [{"type": "bare", "content": [{"type": "text", "text": "x"}]}],
                    }
                ],
            }
        )

        assert generate_html(doc, schema) == '<section data-node-type="slide">x</section>'

    def test_text_is_escaped(self, kit_schema):
        doc = kit_schema.node_from_json(
            {
                "type": "doc",
                "content": [
                    {
                        "type": "slide",
                        "content": [
                            {"type": "paragraph", "content": [{"type": "text", "text": "a < b & c"}]}
                        ],
                    }
                ],
            }
        )

        assert "<p>a &lt; b &amp; c</p>" in generate_html(doc, kit_schema)


class TestGetText:
    """Tests for plain-text extraction."""

    def test_blocks_are_separated(self, kit_schema, sample_json):
        doc = kit_schema.node_from_json(sample_json)
        assert get_text(doc, kit_schema) == "Title\n\nBody bold"

    def test_custom_separator(self, kit_schema, sample_json):
        doc = kit_schema.node_from_json(sample_json)
        assert get_text(doc, kit_schema, block_separator=" | ") == "Title | Body bold"

    def test_render_text_hook(self, kit_schema):
        doc = generate_json("<p>one<br>two</p>", kit_schema)
        assert get_text(kit_schema.node_from_json(doc), kit_schema) == "one\ntwo"


class TestParse:
    """Tests for parsing HTML into the JSON exchange shape."""

    def test_blocks_are_wrapped_in_slide(self, kit_schema):
        result = generate_json("<h2>Hi</h2><p>There</p>", kit_schema)

        assert result["type"] == "doc"
        slide = result["content"][0]
        assert slide["type"] == "slide"
        assert [node["type"] for node in slide["content"]] == ["heading", "paragraph"]
        assert slide["content"][0]["attrs"]["level"] == 2

    def test_sections_become_slides(self, kit_schema):
        result = generate_json("<section><p>a</p></section><section><p>b</p></section>", kit_schema)
        assert [node["type"] for node in result["content"]] == ["slide", "slide"]

    def test_loose_text_is_wrapped_in_paragraph(self, kit_schema):
        result = generate_json("Just text", kit_schema)
        paragraph = result["content"][0]["content"][0]

        assert paragraph["type"] == "paragraph"
        assert paragraph["content"] == [{"type": "text", "text": "Just text"}]

    def test_mark_tags(self, kit_schema):
        result = generate_json("<p><b>x</b><em>y</em></p>", kit_schema)
        inline = result["content"][0]["content"][0]["content"]

        assert inline == [
            {"type": "text", "text": "x", "marks": [{"type": "bold"}]},
            {"type": "text", "text": "y", "marks": [{"type": "italic"}]},
        ]

    def test_style_rules(self, kit_schema):
        html = '<p><span style="font-weight: 700; color: red">x</span></p>'
        inline = generate_json(html, kit_schema)["content"][0]["content"][0]["content"]

        assert inline[0]["marks"] == [
            {"type": "bold"},
            {"type": "text_color", "attrs": {"color": "red"}},
        ]

    def test_style_rule_rejection(self, kit_schema):
        html = '<p><span style="font-weight: 300">x</span></p>'
        inline = generate_json(html, kit_schema)["content"][0]["content"][0]["content"]

        assert inline == [{"type": "text", "text": "x"}]

    def test_extension_attributes_are_parsed(self, kit_schema):
        html = '<p data-align="center" data-placeholder="Type here">x</p>'
        paragraph = generate_json(html, kit_schema)["content"][0]["content"][0]

        assert paragraph["attrs"] == {"align": "center", "placeholder": "Type here"}

    def test_link_attributes(self, kit_schema):
        html = '<p><a href="https://example.com" title="Ex">x</a></p>'
        text = generate_json(html, kit_schema)["content"][0]["content"][0]["content"][0]

        assert text["marks"] == [
            {"type": "link", "attrs": {"href": "https://example.com", "title": "Ex"}}
        ]

    def test_nested_tags_for_one_mark(self, kit_schema):
        html = "<p><b><strong>x</strong></b></p>"
        text = generate_json(html, kit_schema)["content"][0]["content"][0]["content"][0]

        assert text["marks"] == [{"type": "bold"}]

    def test_inner_mark_attributes_win(self, kit_schema):
        html = '<p><a href="/outer"><a href="/inner">x</a></a></p>'
        text = generate_json(html, kit_schema)["content"][0]["content"][0]["content"][0]

        assert [m["attrs"]["href"] for m in text["marks"]] == ["/inner"]

    def test_nested_marks_build_valid_document(self, kit_schema):
        html = '<p><b><span style="font-weight: bold">x</span></b></p>'
        doc = create_document(html, kit_schema, mode=ValidationMode.STRICT)

        assert doc.text_content == "x"

    def test_whitespace_is_collapsed_and_trimmed(self, kit_schema):
        result = generate_json("<p>  a \n  b  </p>", kit_schema)
        assert result["content"][0]["content"][0]["content"] == [{"type": "text", "text": "a b"}]

    def test_unknown_elements_keep_content(self, kit_schema):
        result = generate_json("<div><p>inside</p></div>", kit_schema)
        assert result["content"][0]["content"][0]["type"] == "paragraph"

    def test_parsed_json_builds_valid_document(self, kit_schema):
        doc = kit_schema.node_from_json(
            generate_json("<h1>T</h1>text<p><strong>b</strong></p>", kit_schema)
        )
        doc.check()

    def test_round_trip_through_html(self, kit_schema, sample_json):
        html = generate_html(kit_schema.node_from_json(sample_json), kit_schema)
        doc = kit_schema.node_from_json(generate_json(html, kit_schema))

        assert generate_html(doc, kit_schema) == html


class TestParseRules:
    """Tests for rule priority, ignore, skip and rejection."""

    def make_schema(self, base_extensions, *extra):
        return synthesize_schema([*base_extensions, *extra])

    def test_priority_orders_rules(self, base_extensions):
        callout = Node.create(
            name="callout",
            group="block",
            content="inline*",
            parse_html=lambda ctx: [{"tag": "p.callout", "priority": 60}],
            render_html=lambda ctx, props: ["p", {"class": "callout"}, 0],
        )
        schema = self.make_schema(base_extensions, callout)
        result = DOMParser(schema).parse('<p class="callout">x</p><p>y</p>')

        assert [n["type"] for n in result["content"][0]["content"]] == ["callout", "paragraph"]

    def test_rejected_rule_falls_through(self, base_extensions):
        picky = Node.create(
            name="picky",
            group="block",
            content="inline*",
            parse_html=lambda ctx: [
                {"tag": "p", "priority": 60, "get_attrs": lambda el: None if el.get("id") else False}
            ],
        )
        schema = self.make_schema(base_extensions, picky)
        result = DOMParser(schema).parse('<p id="a">x</p><p>y</p>')

        assert [n["type"] for n in result["content"][0]["content"]] == ["picky", "paragraph"]

    def test_ignore_and_skip(self, base_extensions):
        rules = Node.create(
            name="rules_holder",
            group="block",
            parse_html=lambda ctx: [
                {"tag": "script", "ignore": True},
                {"tag": "article", "skip": True},
            ],
        )
        schema = self.make_schema(base_extensions, rules)
        result = DOMParser(schema).parse("<script>bad()</script><article><p>kept</p></article>")

        paragraphs = result["content"][0]["content"]
        assert [n["type"] for n in paragraphs] == ["paragraph"]
        assert paragraphs[0]["content"] == [{"type": "text", "text": "kept"}]

    def test_invalid_selector(self, base_extensions):
        broken = Node.create(
            name="broken",
            group="block",
            parse_html=lambda ctx: [{"tag": "p[["}],
        )
        schema = self.make_schema(base_extensions, broken)

        with pytest.raises(SchemaError):
            DOMParser(schema)

    def test_mark_rules_only_for_bold(self, base_extensions):
        schema = self.make_schema(base_extensions, Bold)
        result = DOMParser(schema).parse("<p><strong>a</strong><i>b</i></p>")

        assert result["content"][0]["content"][0]["content"] == [
            {"type": "text", "text": "a", "marks": [{"type": "bold"}]},
            {"type": "text", "text": "b"},
        ]

    def test_parse_fragment_inline(self, kit_schema):
        assert DOMParser(kit_schema).parse_fragment(" <b>x</b> ") == [
            {"type": "text", "text": "x", "marks": [{"type": "bold"}]}
        ]

    def test_parse_fragment_blocks(self, kit_schema):
        items = DOMParser(kit_schema).parse_fragment("<p>a</p>\n<p>b</p>")
        assert [item["type"] for item in items] == ["paragraph", "paragraph"]
