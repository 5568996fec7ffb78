import pytest

from layout_parse.models import LeafMarker, StructNode, StructRole, TaggedPage
from layout_parse.tagged import (
    ItemCursor,
    StructureTreeError,
    TaggedTreeWalker,
    render_tagged_page,
)

LEAF = LeafMarker()


def node(role, *children):
    return StructNode(role=role, children=list(children))


def render(root, items):
    return render_tagged_page(TaggedPage(root=root, items=items))


def test_heading_and_paragraph():
    root = node("Root", node("H1", LEAF), node("P", LEAF))
    assert render(root, ["Intro", "Body text."]) == "# Intro\n\nBody text."


def test_cursor_consumes_each_item_once():
    cursor = ItemCursor(["a", "b"])
    assert cursor.take() == "a"
    assert cursor.take() == "b"
    assert cursor.remaining == 0
    with pytest.raises(StructureTreeError):
        cursor.take()


def test_more_leaves_than_items_is_an_error():
    root = node("Document", node("P", LEAF, LEAF))
    with pytest.raises(StructureTreeError):
        render(root, ["only one"])


def test_leaves_are_consumed_in_tree_order():
    root = node("Sect", node("P", LEAF), node("Div", node("P", LEAF)), node("P", LEAF))
    assert render(root, ["first", "second", "third"]) == "first\n\nsecond\n\nthird"


def test_walker_renders_a_single_node():
    walker = TaggedTreeWalker(ItemCursor(["Methods"]))
    piece = walker.visit(node("H2", LEAF))
    assert piece.text == "## Methods"
    assert piece.block


def test_list_items():
    root = node("L", node("LI", LEAF), node("LI", LEAF))
    assert render(root, ["• Apples", "Pears"]) == "- Apples\n- Pears"


def test_list_item_with_numeric_label():
    item = node("LI", node("Lbl", LEAF), node("LBody", LEAF))
    assert render(node("L", item), ["1.", "First"]) == "1. First"


def test_table_becomes_fenced_block():
    table = node(
        "Table",
        node("TR", node("TD", LEAF), node("TD", LEAF)),
        node("TR", node("TD", LEAF), node("TD", LEAF)),
    )
    assert render(table, ["a", "b", "c", "d"]) == "```\na b\nc d\n```"


def test_figure_blockquote_and_heading_levels():
    root = node(
        "Document",
        node("Figure", LEAF),
        node("BlockQuote", LEAF),
        node("H4", LEAF),
        node("H", LEAF),
    )
    assert render(root, ["A chart", "quoted", "Deep", "Top"]) == (
        "*A chart*\n\n> quoted\n\n#### Deep\n\n# Top"
    )


def test_inline_roles_stay_inside_paragraph():
    paragraph = node("P", LEAF, node("Code", LEAF), LEAF, node("Link", LEAF))
    assert render(paragraph, ["Run", "make", "then see", "docs"]) == "Run `make` then see docs"


def test_spans_inside_paragraph_do_not_split_it():
    paragraph = node("P", node("Span", LEAF), node("Span", LEAF))
    assert render(paragraph, ["Hello", "world"]) == "Hello world"


def test_top_level_span_is_a_block():
    root = node("Root", node("Span", LEAF), node("Span", LEAF))
    assert render(root, ["Hello", "world"]) == "Hello\n\nworld"


def test_empty_nodes_render_nothing():
    root = node("Sect", node("P", LEAF), node("H1", LEAF), node("P", LEAF))
    assert render(root, ["   ", "", "Text"]) == "Text"


def test_unknown_roles_pass_text_through():
    root = node("Root", node("Custom", LEAF), node("P", LEAF))
    assert render(root, ["loose", "para"]) == "loose\n\npara"


def test_unreferenced_items_are_ignored():
    assert render(node("P", LEAF), ["used", "spare"]) == "used"


def test_role_labels_map_to_closed_enumeration():
    assert StructRole.from_label("/H2") is StructRole.H2
    assert StructRole.from_label("sect") is StructRole.SECT
    assert StructRole.from_label("NonStruct") is StructRole.NONSTRUCT
    assert StructRole.from_label("Weird") is StructRole.UNKNOWN
    assert StructRole.from_label(None) is StructRole.UNKNOWN
    assert StructRole.H.heading_level == 1
    assert StructRole.H6.heading_level == 6
    assert StructRole.P.heading_level == 0


def test_item_whitespace_is_kept_instead_of_adding_spaces():
    paragraph = node("P", LEAF, node("Span", LEAF), LEAF)
    assert render(paragraph, ["split ", "across", " leaves"]) == "split across leaves"
