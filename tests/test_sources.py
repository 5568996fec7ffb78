import pytest
from tests.helpers import build_pdf, make_fragment

from layout_parse.models import LeafMarker, PageContent, StructNode
from layout_parse.normalize import normalize_fragments
from layout_parse.sources import (
    DocumentReadError,
    InMemoryDocument,
    PdfDocument,
    UnsupportedFileError,
    open_document,
    tagged_page_from_elements,
)
from layout_parse.tagged import render_tagged_page


def test_structure_elements_become_tree_and_item_stream():
    elements = [
        {"type": "H1", "mcids": [0]},
        {"type": "P", "mcids": [1], "children": [{"type": "Span", "mcids": [2]}]},
    ]
    chars = [
        {"text": "I", "mcid": 0},
        {"text": "n", "mcid": 0},
        {"text": "Body", "mcid": 1},
        {"text": " more", "mcid": 2},
        {"text": "artifact"},
    ]
    tagged = tagged_page_from_elements(elements, chars)

    assert tagged.items == ["In", "Body", " more"]
    assert tagged.root.role == "Root"
    heading, paragraph = tagged.root.children
    assert heading.role == "H1"
    assert isinstance(paragraph.children[0], LeafMarker)
    assert isinstance(paragraph.children[1], StructNode)
    assert render_tagged_page(tagged) == "# In\n\nBody more"


def test_in_memory_document():
    page = PageContent(fragments=[make_fragment("hello")])
    with InMemoryDocument([page, PageContent()]) as source:
        assert source.page_count == 2
        assert [f.text for f in source.get_fragments(0)] == ["hello"]
        assert source.get_fragments(1) == []
        assert source.get_structure(0) is None


def test_open_document_passes_sources_through():
    source = InMemoryDocument([])
    assert open_document(source) is source


@pytest.mark.integration
def test_pdf_fragments_carry_size_position_and_style(report_pdf_bytes):
    with PdfDocument(report_pdf_bytes) as source:
        assert source.page_count == 1
        items = normalize_fragments(source.get_fragments(0))
        assert source.get_structure(0) is None

    title = next(item for item in items if "Report" in item.text)
    assert title.font_size == 24.0
    assert title.is_bold
    assert title.x == pytest.approx(72.0)
    assert title.y == pytest.approx(720.0)

    body = [item for item in items if item.font_size == 12.0]
    assert len(body) == 3
    assert not any(item.is_bold for item in body)
    assert body[0].text.strip() == "The quick brown fox jumps"


@pytest.mark.integration
def test_pdf_document_accepts_paths(report_pdf_path):
    with PdfDocument(report_pdf_path) as source:
        assert source.page_count == 1


def test_pdf_document_rejects_missing_and_non_pdf_paths(tmp_path):
    with pytest.raises(FileNotFoundError):
        PdfDocument(tmp_path / "missing.pdf")
    text_file = tmp_path / "notes.txt"
    text_file.write_text("hello", encoding="utf-8")
    with pytest.raises(UnsupportedFileError):
        PdfDocument(text_file)


def test_unreadable_bytes_raise_document_read_error():
    with pytest.raises(DocumentReadError):
        PdfDocument(b"this is not a pdf")


@pytest.mark.integration
def test_multi_page_pdf(tmp_path):
    data = build_pdf(
        [
            [("F1", "First page", 12, 72, 700)],
            [("F1", "Second page", 12, 72, 700)],
        ]
    )
    with PdfDocument(data) as source:
        assert source.page_count == 2
        texts = [
            [fragment.text.strip() for fragment in source.get_fragments(index)]
            for index in range(2)
        ]
    assert texts == [["First page"], ["Second page"]]
