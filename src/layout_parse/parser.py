import argparse
import logging
import sys
from itertools import chain
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Union

from tqdm import tqdm

from .classify import classify_paragraphs
from .config import HeuristicConfig
from .fonts import estimate_sizes
from .lines import assemble_lines
from .models import TextItem
from .normalize import normalize_fragments
from .render import join_pages, render_blocks
from .segment import segment_paragraphs
from .sources import DocumentInput, DocumentReadError, DocumentSource, open_document
from .tagged import render_tagged_page

_logger = logging.getLogger(__name__)

StopCallback = Callable[[], bool]


class ConversionCancelled(Exception):
    """Raised when the caller asks to stop between two pages."""

    pass


class MarkdownConverter:
    """Convert a document to Markdown, preferring its structure tree over layout heuristics."""

    def __init__(
        self,
        config: Optional[HeuristicConfig] = None,
        prefer_tagged: bool = True,
        show_progress: bool = False,
    ) -> None:
        self.config = config or HeuristicConfig()
        self.prefer_tagged = prefer_tagged
        self.show_progress = show_progress

    def convert(
        self, source: DocumentSource, should_stop: Optional[StopCallback] = None
    ) -> str:
        """Return the whole document as one Markdown string ('' when it has no text)."""
        return join_pages(self.convert_pages(source, should_stop))

    def convert_pages(
        self, source: DocumentSource, should_stop: Optional[StopCallback] = None
    ) -> List[str]:
        """Return Markdown per page; every page comes from the same strategy."""
        page_items = self._collect_items(source, should_stop)
        if not any(page_items):
            _logger.info("No extractable text found in document")
            return ["" for _ in page_items]

        if self.prefer_tagged:
            tagged_pages = self._render_tagged(source, page_items, should_stop)
            if tagged_pages is not None:
                _logger.info("Rendered %d pages from the structure tree", len(tagged_pages))
                return tagged_pages

        pages = self._render_heuristic(page_items, should_stop)
        _logger.info("Rendered %d pages from layout heuristics", len(pages))
        return pages

    @staticmethod
    def _check_stop(should_stop: Optional[StopCallback]) -> None:
        if should_stop is not None and should_stop():
            raise ConversionCancelled("Conversion cancelled by caller")

    def _pages(self, count: int, desc: str) -> Iterable[int]:
        """Page indices, wrapped in a tqdm bar when progress is enabled."""
        return tqdm(range(count), desc=desc, disable=not self.show_progress)

    def _collect_items(
        self, source: DocumentSource, should_stop: Optional[StopCallback]
    ) -> List[List[TextItem]]:
        try:
            total_pages = source.page_count
        except Exception as exc:
            raise DocumentReadError(f"Unable to read document pages: {exc}") from exc

        page_items: List[List[TextItem]] = []
        for page_index in self._pages(total_pages, "Extracting text from pages"):
            self._check_stop(should_stop)
            try:
                fragments = source.get_fragments(page_index)
            except DocumentReadError:
                raise
            except Exception as exc:
                raise DocumentReadError(
                    f"Unable to read text of page {page_index + 1}: {exc}"
                ) from exc
            items = normalize_fragments(fragments)
            _logger.debug("Page %d: %d text items", page_index + 1, len(items))
            page_items.append(items)
        return page_items

    def _render_tagged(
        self,
        source: DocumentSource,
        page_items: Sequence[List[TextItem]],
        should_stop: Optional[StopCallback],
    ) -> Optional[List[str]]:
        """Render every page from its structure tree, or None to fall back for the whole document."""
        pages: List[str] = []
        for page_index in self._pages(len(page_items), "Rendering tagged pages"):
            self._check_stop(should_stop)
            try:
                tagged = source.get_structure(page_index)
            except Exception as exc:
                _logger.warning(
                    "Structure tree of page %d unavailable (%s); using layout heuristics",
                    page_index + 1,
                    exc,
                )
                return None

            if tagged is None:
                if page_items[page_index]:
                    _logger.debug("Page %d has no structure tree", page_index + 1)
                    return None
                pages.append("")
                continue

            try:
                markdown = render_tagged_page(tagged)
            except Exception as exc:
                _logger.warning(
                    "Structure tree of page %d could not be rendered (%s); using layout heuristics",
                    page_index + 1,
                    exc,
                )
                return None

            if page_items[page_index] and not markdown.strip():
                _logger.debug("Structure tree of page %d produced no text", page_index + 1)
                return None
            pages.append(markdown)
        return pages

    def _render_heuristic(
        self,
        page_items: Sequence[List[TextItem]],
        should_stop: Optional[StopCallback],
    ) -> List[str]:
        page_lines = [assemble_lines(items, self.config) for items in page_items]
        # sizes are global: every page's lines are collected before any page is rendered
        context = estimate_sizes(chain.from_iterable(page_lines), self.config)

        pages: List[str] = []
        for page_index in self._pages(len(page_lines), "Rendering pages"):
            self._check_stop(should_stop)
            paragraphs = segment_paragraphs(page_lines[page_index], context, self.config)
            blocks = classify_paragraphs(paragraphs, context, self.config)
            pages.append(render_blocks(blocks))
        return pages


def pdf_to_markdown(
    document: Union[DocumentSource, DocumentInput],
    config: Optional[HeuristicConfig] = None,
    prefer_tagged: bool = True,
    should_stop: Optional[StopCallback] = None,
) -> str:
    """Convert a whole document (bytes, path, file object or DocumentSource) to Markdown."""
    source = open_document(document)
    try:
        converter = MarkdownConverter(config=config, prefer_tagged=prefer_tagged)
        return converter.convert(source, should_stop)
    finally:
        if source is not document:
            source.close()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Convert a PDF's text layer into structured Markdown."
    )
    parser.add_argument("--pdf_path", required=True, help="Path to the input PDF file")
    parser.add_argument("--output", help="Write Markdown here instead of stdout")
    parser.add_argument(
        "--no-tagged",
        action="store_true",
        help="Ignore the structure tree and always use layout heuristics",
    )
    parser.add_argument(
        "--heading-ratio",
        type=float,
        default=HeuristicConfig().heading_ratio,
        help="Font size ratio over body text above which lines are headings",
    )
    parser.add_argument("--progress", action="store_true", help="Show page progress")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    # Minimal logging setup when running as a script
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    pdf_path = Path(args.pdf_path).resolve()
    config = HeuristicConfig(heading_ratio=args.heading_ratio)
    with open_document(pdf_path) as source:
        converter = MarkdownConverter(
            config=config,
            prefer_tagged=not args.no_tagged,
            show_progress=args.progress,
        )
        markdown = converter.convert(source)

    if not markdown:
        _logger.warning(
            "No text content found in %s; it is likely a scanned (image-only) document",
            pdf_path.name,
        )

    if args.output:
        Path(args.output).write_text(markdown + "\n" if markdown else "", encoding="utf-8")
        _logger.info("Markdown written to %s", args.output)
    else:
        sys.stdout.write(markdown + "\n" if markdown else "")
    return 0


if __name__ == "__main__":
    sys.exit(main())
