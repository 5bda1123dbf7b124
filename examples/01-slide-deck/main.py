"""
Slide Deck Example

This example demonstrates building an editor from extensions:
1. Add a custom node and a specialized mark to the StarterKit
2. Load HTML content
3. Edit it with chained commands and input rules

Run: python -m examples.01-slide-deck.main
"""

import logging

from blockslides import Editor, Mark, Node
from blockslides.kit import Bold, StarterKit
from blockslides.schema.render import merge_attributes

# =============================================================================
# Custom Extensions
# =============================================================================


Callout = Node.create(
    name="callout",
    group="block",
    content="inline*",
    add_attributes=lambda ctx: {
        "tone": {
            "default": "info",
            "parse_html": lambda element: element.get("data-tone"),
            "render_html": lambda attrs: {"data-tone": attrs["tone"]},
        },
    },
    parse_html=lambda ctx: [{"tag": "aside"}],
    render_html=lambda ctx, props: ["aside", merge_attributes({"class": "callout"}, props.html_attributes), 0],
    add_commands=lambda ctx: {
        "set_callout": lambda tone="info": lambda props: props.commands.set_node(ctx.name, {"tone": tone}),
    },
)


# Same name as the kit's bold, so it replaces it instead of clashing
EmphasisBold = Bold.extend(
    add_attributes=lambda ctx: {"weight": {"default": None, "rendered": False}},
    render_html=lambda ctx, props: [
        "strong",
        merge_attributes(props.html_attributes, {"class": "emphasis"}),
        0,
    ],
)


Highlight = Mark.create(
    name="highlight",
    parse_html=lambda ctx: [{"tag": "mark"}],
    render_html=lambda ctx, props: ["mark", props.html_attributes, 0],
    add_commands=lambda ctx: {
        "toggle_highlight": lambda: lambda props: props.commands.toggle_mark(ctx.name),
    },
    add_keyboard_shortcuts=lambda ctx: {
        "Mod-Shift-h": lambda editor: editor.commands.toggle_highlight(),
    },
)


# =============================================================================
# Main
# =============================================================================


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    editor = Editor(
        [StarterKit, Callout, EmphasisBold, Highlight],
        content="<h1>Quarterly review</h1><p>Revenue is up.</p><p>##</p>",
    )
    editor.on("update", lambda *, editor, transaction: print(f"  update: {editor.get_text(' | ')}"))

    print(f"Editor: {editor}")
    print(f"Nodes: {list(editor.schema.nodes)}")
    print(f"Marks: {list(editor.schema.marks)}")
    print()

    # Chained commands share one transaction and dispatch once
    editor.chain().set_text_selection((2, 11)).toggle_bold().toggle_highlight().run()

    # Probe first, then run (position 20 is inside the first paragraph)
    editor.commands.set_text_selection(20)
    if editor.can().set_callout("warning"):
        editor.commands.set_callout("warning")

    # "## " at the start of a paragraph turns it into a heading
    end_of_last_block = editor.state.doc.content.size - 2
    editor.commands.set_text_selection(end_of_last_block)
    applied = editor.handle_text_input(" ")
    print(f"Input rule applied: {applied}")

    print()
    print(f"HTML: {editor.get_html()}")
    print(f"Text: {editor.get_text()!r}")

    editor.destroy()


if __name__ == "__main__":
    main()
