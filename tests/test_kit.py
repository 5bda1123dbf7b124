"""
Tests for the built-in kit: node and mark commands, block attributes
and StarterKit configuration.
"""
import pytest
from bs4 import BeautifulSoup

from blockslides import Editor
from blockslides.errors import SchemaError
from blockslides.kit import BlockAttributes, Bold, Heading, StarterKit
from blockslides.schema import synthesize_schema


def html_of(editor, selector):
    """First element matching ``selector`` in the editor's HTML."""
    return BeautifulSoup(editor.get_html(), "html.parser").select_one(selector)


class TestHeading:
    """Tests for heading commands and rendering."""

    def test_set_heading(self, editor):
        assert editor.commands.set_heading(3) is True
        assert editor.get_html() == '<section data-node-type="slide"><h3>Hello</h3></section>'

    def test_invalid_level(self, editor):
        assert editor.commands.set_heading(7) is False
        assert editor.can().toggle_heading(0) is False

    def test_toggle_heading_switches_level(self, editor):
        editor.commands.toggle_heading(1)
        editor.commands.toggle_heading(2)

        heading = editor.get_json()["content"][0]["content"][0]
        assert heading["type"] == "heading"
        assert heading["attrs"]["level"] == 2

    def test_configured_levels(self):
        editor = Editor(
            [StarterKit.configure(heading={"levels": [1, 2]})],
            content="<h4>Deep</h4><p>x</p>",
        )

        assert editor.commands.set_heading(3) is False
        # <h4> has no rule any more, its text lands in a paragraph
        assert [n["type"] for n in editor.get_json()["content"][0]["content"]] == [
            "paragraph",
            "paragraph",
        ]

    def test_unknown_level_renders_first_level(self):
        doc = {
            "type": "doc",
            "content": [
                {
                    "type": "slide",
                    "content": [
                        {
                            "type": "heading",
                            "attrs": {"level": 9},
                            "content": [{"type": "text", "text": "x"}],
                        }
                    ],
                }
            ],
        }
        editor = Editor([StarterKit], content=doc)

        assert html_of(editor, "h1").text == "x"

    def test_placeholder(self):
        editor = Editor([StarterKit], content='<h2 data-placeholder="Title">T</h2>')

        heading = html_of(editor, "h2")
        assert heading["data-placeholder"] == "Title"
        assert "level" not in heading.attrs

    def test_set_node_on_non_textblock_type(self, editor):
        assert editor.commands.set_node("slide") is False
        assert editor.commands.set_node("missing") is False

    def test_set_paragraph_shortcut(self):
        editor = Editor([StarterKit], content="<h1>T</h1>")

        assert editor.handle_shortcut("Mod-Alt-0") is True
        assert editor.get_html() == '<section data-node-type="slide"><p>T</p></section>'

    def test_set_node_across_blocks(self):
        editor = Editor([StarterKit], content="<p>a</p><p>b</p>")
        editor.commands.select_all()

        editor.commands.set_heading(2)

        assert editor.get_html() == '<section data-node-type="slide"><h2>a</h2><h2>b</h2></section>'


class TestMarks:
    """Tests for mark commands."""

    def test_toggle_marks(self, editor):
        editor.chain().select_all().toggle_bold().toggle_italic().toggle_underline().run()

        assert editor.get_html() == (
            '<section data-node-type="slide"><p><strong><em><u>Hello</u></em></strong></p></section>'
        )

        editor.commands.toggle_bold()
        assert "<strong>" not in editor.get_html()

    def test_unset_mark(self, editor):
        editor.chain().select_all().set_italic().run()
        editor.commands.unset_italic()

        assert editor.get_html() == '<section data-node-type="slide"><p>Hello</p></section>'

    def test_set_link(self, editor):
        editor.chain().set_text_selection((2, 7)).set_link("https://example.com").run()

        link = html_of(editor, "a")
        assert link["href"] == "https://example.com"
        assert link["target"] == "_blank"
        assert link["rel"] == ["noopener", "noreferrer"]
        assert "title" not in link.attrs

    def test_link_options(self):
        editor = Editor(
            [StarterKit.configure(link={"html_attributes": {"rel": "nofollow"}})],
            content='<p><a href="/x" target="_self">x</a></p>',
        )

        link = html_of(editor, "a")
        assert link["target"] == "_self"
        assert link["rel"] == ["nofollow"]

    def test_unset_link(self, editor):
        editor.chain().select_all().set_link("/x").run()
        editor.commands.unset_link()

        assert html_of(editor, "a") is None

    def test_link_is_not_inclusive(self, editor):
        editor.chain().set_text_selection((2, 7)).set_link("/x").set_text_selection(7).run()
        editor.handle_text_input("!")

        assert html_of(editor, "a").text == "Hello"

    def test_text_color(self, editor):
        editor.chain().select_all().set_color("#ff0000").run()

        assert html_of(editor, "span")["style"] == "color: #ff0000"

        editor.commands.unset_color()
        assert html_of(editor, "span") is None

    def test_mark_commands_missing_without_mark(self):
        editor = Editor([StarterKit.configure(italic=False)])
        assert "toggle_italic" not in editor.commands


class TestBlockAttributes:
    """Tests for the shared layout attributes."""

    def test_attributes_on_configured_types(self, kit_schema):
        paragraph = kit_schema["paragraph"].attrs
        heading = kit_schema["heading"].attrs

        for name in ("align", "padding", "background_color", "fill", "justify"):
            assert name in paragraph
            assert name in heading
        assert "align" not in kit_schema["slide"].attrs

    def test_padding_token(self, editor):
        assert editor.commands.set_block_padding("md") is True

        paragraph = html_of(editor, "p")
        assert paragraph["data-padding"] == "md"
        assert paragraph["style"] == "padding: 16px"

    def test_raw_css_value(self, editor):
        editor.commands.set_block_margin("3rem")
        assert html_of(editor, "p")["style"] == "margin: 3rem"

    def test_styles_are_merged(self, editor):
        editor.chain().set_block_padding("sm").set_block_background_color("#eee").run()

        paragraph = html_of(editor, "p")
        assert paragraph["style"] == "padding: 8px; background-color: #eee"

    def test_background_image(self, editor):
        editor.commands.set_block_background_image("/bg.png")

        style = html_of(editor, "p")["style"]
        assert 'background-image: url("/bg.png")' in style
        assert "background-size: cover" in style

    def test_fill(self, editor):
        editor.commands.set_block_fill(True)
        assert html_of(editor, "p")["data-fill"] == "true"

    def test_parse_round_trip(self):
        html = (
            '<section data-node-type="slide">'
            '<h1 data-align="center" data-padding="lg" style="padding: 32px">T</h1>'
            "</section>"
        )
        editor = Editor([StarterKit], content=html)

        heading = editor.get_json()["content"][0]["content"][0]
        assert heading["attrs"]["align"] == "center"
        assert heading["attrs"]["padding"] == "lg"
        assert editor.get_html() == html

    def test_no_matching_block(self):
        editor = Editor([StarterKit.configure(block_attributes={"types": ["heading"]})])
        assert editor.commands.set_block_align("right") is False

    def test_custom_tokens(self):
        kit = StarterKit.configure(block_attributes={"spacing": {"xl": "64px"}})
        editor = Editor([kit], content="<p>x</p>")

        editor.commands.set_block_gap("xl")
        assert html_of(editor, "p")["style"] == "gap: 64px"


class TestStarterKit:
    """Tests for StarterKit bundling."""

    def test_members(self, kit_schema):
        assert set(kit_schema.nodes) == {"doc", "paragraph", "slide", "heading", "text", "hard_break"}
        assert set(kit_schema.marks) == {"link", "bold", "italic", "underline", "text_color"}

    def test_paragraph_is_default_block(self, kit_schema):
        assert list(kit_schema.nodes).index("paragraph") < list(kit_schema.nodes).index("heading")

    def test_member_can_be_left_out(self):
        schema = synthesize_schema([StarterKit.configure(underline=False, text_color=False)])

        assert "underline" not in schema
        assert "text_color" not in schema
        assert "bold" in schema

    def test_explicit_member_replaces_kit_member(self):
        schema = synthesize_schema([StarterKit.configure(bold=False), Bold])
        assert "bold" in schema.marks

    def test_specialized_member_wins(self):
        custom = Heading.extend(
            add_options=lambda ctx: {**ctx.parent(), "levels": [1]},
        )
        editor = Editor([StarterKit, custom])

        assert editor.commands.set_heading(2) is False
        assert editor.commands.set_heading(1) is True

    def test_block_attributes_standalone(self, base_extensions):
        schema = synthesize_schema([*base_extensions, BlockAttributes])
        assert "align" in schema["paragraph"].attrs

    @pytest.mark.parametrize("member", ["slide", "text"])
    def test_structural_members_are_required(self, member):
        with pytest.raises(SchemaError):
            Editor([StarterKit.configure(**{member: False})])
