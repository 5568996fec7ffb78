import io
import logging
import math
from abc import ABC, abstractmethod
from collections import defaultdict
from contextlib import suppress
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, Iterator, List, Optional, Sequence, Union

import pdfplumber
from pdfminer.layout import LTAnno, LTChar, LTContainer, LTTextLineHorizontal

from .models import LeafMarker, PageContent, RawFragment, StructNode, TaggedPage

_logger = logging.getLogger(__name__)

LAYOUT_PARAMS: Dict[str, Any] = {
    "all_texts": True,
    "line_overlap": 0.5,
    "char_margin": 2.0,
    "line_margin": 0.5,
    "word_margin": 0.1,
    "detect_vertical": False,
}

DocumentInput = Union[bytes, bytearray, str, Path, BinaryIO]


class DocumentReadError(Exception):
    """Raised when the document cannot be parsed into page data at all."""

    pass


class UnsupportedFileError(Exception):
    """Raised when a path does not point to a PDF file."""

    pass


class DocumentSource(ABC):
    """Per-page provider of raw text fragments and optional structure trees."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        """Number of pages in the document."""

    @abstractmethod
    def get_fragments(self, page_index: int) -> List[RawFragment]:
        """Raw positioned text fragments of one page."""

    def get_structure(self, page_index: int) -> Optional[TaggedPage]:
        """Structure tree and item stream of one page, None when untagged."""
        return None

    def close(self) -> None:
        pass

    def __enter__(self) -> "DocumentSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class InMemoryDocument(DocumentSource):
    """Document assembled from already-extracted page payloads."""

    def __init__(self, pages: Sequence[PageContent]) -> None:
        self.pages = list(pages)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def get_fragments(self, page_index: int) -> List[RawFragment]:
        return list(self.pages[page_index].fragments)

    def get_structure(self, page_index: int) -> Optional[TaggedPage]:
        return self.pages[page_index].tagged


def _iter_text_lines(container: Iterable[Any]) -> Iterator[LTTextLineHorizontal]:
    """Yield horizontal text lines nested anywhere inside a pdfminer layout container."""
    for obj in container:
        if isinstance(obj, LTTextLineHorizontal):
            yield obj
        elif isinstance(obj, LTContainer):
            yield from _iter_text_lines(obj)


def _same_run(previous: LTChar, char: LTChar) -> bool:
    return (
        previous.fontname == char.fontname
        and abs(previous.size - char.size) < 0.05
        and abs(previous.matrix[5] - char.matrix[5]) < 0.5
    )


def _make_fragment(chars: List[LTChar], text: List[str]) -> RawFragment:
    """Build a fragment whose transform carries the run's font size and baseline origin."""
    first = chars[0]
    a, b, c, d, e, f = first.matrix
    scale = math.hypot(a, b) or 1.0
    k = first.size / scale
    x0 = min(ch.x0 for ch in chars)
    x1 = max(ch.x1 for ch in chars)
    return RawFragment(
        text="".join(text),
        transform=(a * k, b * k, c * k, d * k, e, f),
        font_name=str(first.fontname or ""),
        width=x1 - x0,
        height=max(ch.height for ch in chars),
    )


def _line_fragments(line: LTTextLineHorizontal) -> Iterator[RawFragment]:
    """Split a pdfminer text line into runs of chars sharing font and size."""
    run_chars: List[LTChar] = []
    run_text: List[str] = []
    for obj in line:
        if isinstance(obj, LTChar):
            if run_chars and not _same_run(run_chars[-1], obj):
                yield _make_fragment(run_chars, run_text)
                run_chars, run_text = [], []
            run_chars.append(obj)
            run_text.append(obj.get_text())
        elif isinstance(obj, LTAnno):
            virtual = obj.get_text()
            if run_chars and virtual and virtual != "\n":
                run_text.append(virtual)
    if run_chars:
        yield _make_fragment(run_chars, run_text)


def layout_fragments(layout: Iterable[Any]) -> List[RawFragment]:
    """Collect raw fragments from a pdfminer page layout."""
    fragments: List[RawFragment] = []
    for text_line in _iter_text_lines(layout):
        fragments.extend(_line_fragments(text_line))
    return fragments


def tagged_page_from_elements(
    elements: Sequence[Dict[str, Any]], chars: Iterable[Dict[str, Any]]
) -> TaggedPage:
    """Convert pdfplumber structure-element dicts into a tree plus its item stream.

    Every marked-content id of an element becomes a leaf marker, listed before the
    element's child elements. The item stream holds the text of the chars tagged
    with each mcid, in the order the leaves appear in a depth-first traversal.
    """
    texts_by_mcid: Dict[int, List[str]] = defaultdict(list)
    for char in chars:
        mcid = char.get("mcid")
        if mcid is not None:
            texts_by_mcid[mcid].append(char.get("text") or "")

    items: List[str] = []

    def convert(element: Dict[str, Any]) -> StructNode:
        children: List[Union[StructNode, LeafMarker]] = []
        for mcid in element.get("mcids") or []:
            children.append(LeafMarker(mcid=mcid))
            items.append("".join(texts_by_mcid.get(mcid, [])))
        for child in element.get("children") or []:
            children.append(convert(child))
        return StructNode(role=str(element.get("type") or ""), children=children)

    root = StructNode(role="Root", children=[convert(element) for element in elements])
    return TaggedPage(root=root, items=items)


class PdfDocument(DocumentSource):
    """PDF document read with pdfplumber (structure) over pdfminer layouts (text)."""

    def __init__(self, document: DocumentInput) -> None:
        self._pdf = None
        stream = self._resolve_input(document)
        try:
            self._pdf = pdfplumber.open(stream, laparams=LAYOUT_PARAMS)
            self._pages = list(self._pdf.pages)
        except Exception as exc:
            self.close()
            raise DocumentReadError(f"Unable to read PDF document: {exc}") from exc
        _logger.info("Loaded %d pages", len(self._pages))

    @staticmethod
    def _resolve_input(document: DocumentInput) -> Union[Path, BinaryIO]:
        if isinstance(document, (bytes, bytearray)):
            return io.BytesIO(bytes(document))
        if isinstance(document, (str, Path)):
            pdf_path = Path(document)
            if not pdf_path.exists() or not pdf_path.is_file():
                raise FileNotFoundError(f"PDF file not found: {pdf_path}")
            if pdf_path.suffix.lower() != ".pdf":
                raise UnsupportedFileError(f"File is not a PDF: {pdf_path}")
            return pdf_path
        return document

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def get_fragments(self, page_index: int) -> List[RawFragment]:
        page = self._pages[page_index]
        try:
            layout = page.layout
        except Exception as exc:
            raise DocumentReadError(
                f"Unable to read text of page {page_index + 1}: {exc}"
            ) from exc
        return layout_fragments(layout)

    def get_structure(self, page_index: int) -> Optional[TaggedPage]:
        page = self._pages[page_index]
        elements = page.structure_tree
        if not elements:
            return None
        return tagged_page_from_elements(elements, page.chars)

    def close(self) -> None:
        if self._pdf is not None:
            with suppress(Exception):
                self._pdf.close()
            self._pdf = None


def open_document(document: Union[DocumentSource, DocumentInput]) -> DocumentSource:
    """Wrap raw input in a PdfDocument; DocumentSource instances pass through."""
    if isinstance(document, DocumentSource):
        return document
    return PdfDocument(document)
