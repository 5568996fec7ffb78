import re
from typing import Iterable, List, Optional

from .constants import PAGE_SEPARATOR
from .models import Block

_BLANK_RUN = re.compile(r"\n{3,}")


def collapse_blank_lines(text: str) -> str:
    """Collapse any run of three or more newlines into a single blank line."""
    return _BLANK_RUN.sub("\n\n", text)


def _ensure_blank(markdown_lines: List[str]) -> None:
    """Append a blank line unless the output is empty or already ends in one."""
    if markdown_lines and markdown_lines[-1] != "":
        markdown_lines.append("")


def _decorate(block: Block) -> str:
    """Block text wrapped in its emphasis markers."""
    if block.emphasis == "bold":
        return f"**{block.text}**"
    if block.emphasis == "italic":
        return f"*{block.text}*"
    return block.text


def render_blocks(blocks: Iterable[Block]) -> str:
    """Render one page of classified blocks to Markdown."""
    markdown_lines: List[str] = []
    previous: Optional[Block] = None

    for block in blocks:
        if not block.text:
            continue

        if block.kind == "heading":
            _ensure_blank(markdown_lines)
            markdown_lines.append(f"{'#' * block.level} {block.text}")
            markdown_lines.append("")
        elif block.kind == "list_item":
            if previous is not None and (
                previous.kind != "list_item" or previous.ordered != block.ordered
            ):
                _ensure_blank(markdown_lines)
            marker = block.marker if block.ordered else "-"
            markdown_lines.append(f"{marker} {block.text}")
            markdown_lines.extend(f"  {line}" for line in block.continuation)
        else:
            _ensure_blank(markdown_lines)
            markdown_lines.append(_decorate(block))

        previous = block

    return collapse_blank_lines("\n".join(markdown_lines)).strip()


def join_pages(pages: Iterable[str]) -> str:
    """Join per-page Markdown with a horizontal rule between non-empty pages."""
    non_empty = [page.strip() for page in pages if page and page.strip()]
    separator = f"\n\n{PAGE_SEPARATOR}\n\n"
    return collapse_blank_lines(separator.join(non_empty)).strip()
