import re
from typing import List, Optional

from .config import HeuristicConfig
from .constants import LIST_MARKER_PATTERN, ORDERED_MARKER_PATTERN
from .fonts import heading_level
from .models import Block, Line, Paragraph, SizeContext
from .normalize import clean_text


def match_list_marker(text: str) -> Optional["re.Match[str]"]:
    """Return the leading bullet/number marker match of a line, if any."""
    return LIST_MARKER_PATTERN.match(text or "")


def is_list_line(line: Line) -> bool:
    """True when a line starts with a bullet or list number."""
    return match_list_marker(line.text) is not None


def paragraph_heading_level(
    paragraph: Paragraph, context: SizeContext, config: HeuristicConfig
) -> Optional[int]:
    """Heading level 1-3 for a paragraph, or None when it reads as body text."""
    first = paragraph.first_line
    text = clean_text(paragraph.text)
    if not text:
        return None

    if context.is_heading_sized(first.font_size):
        if (
            len(paragraph.lines) <= config.max_heading_lines
            and len(text) <= config.max_heading_chars
        ):
            return heading_level(first.font_size, context)
        return None

    # bold body-weight headings
    if (
        len(paragraph.lines) == 1
        and first.is_bold
        and first.font_size >= context.body_font_size
        and len(text) < config.bold_heading_max_chars
        and not text.endswith((".", ",", ";"))
    ):
        return 3
    return None


def _list_block(paragraph: Paragraph, match: "re.Match[str]") -> Block:
    """List item block with the marker stripped and wrapped lines kept as continuation."""
    first = paragraph.first_line
    marker_text = match.group(0).strip()
    content = clean_text(first.text[match.end():]) or clean_text(first.text)
    ordered_match = ORDERED_MARKER_PATTERN.match(marker_text)
    continuation: List[str] = []
    for line in paragraph.lines[1:]:
        cleaned = clean_text(line.text)
        if cleaned:
            continuation.append(cleaned)
    if ordered_match:
        return Block(
            kind="list_item",
            text=content,
            ordered=True,
            marker=ordered_match.group(0)[:-1] + ".",
            continuation=continuation,
        )
    return Block(kind="list_item", text=content, continuation=continuation)


def classify_paragraph(
    paragraph: Paragraph,
    context: SizeContext,
    config: Optional[HeuristicConfig] = None,
) -> Block:
    """Assign a paragraph its structural role: heading, list item or body text."""
    config = config or HeuristicConfig()
    text = clean_text(paragraph.text)

    level = paragraph_heading_level(paragraph, context, config)
    if level is not None:
        return Block(kind="heading", text=text, level=level)

    match = match_list_marker(paragraph.first_line.text)
    if match is not None:
        return _list_block(paragraph, match)

    lines = paragraph.lines
    if (
        len(lines) == 1
        and lines[0].is_bold
        and len(text) < config.emphasis_max_chars
    ):
        return Block(text=text, emphasis="bold")
    if len(lines) <= config.max_italic_lines and all(line.is_italic for line in lines):
        return Block(text=text, emphasis="italic")
    return Block(text=text)


def classify_paragraphs(
    paragraphs: List[Paragraph],
    context: SizeContext,
    config: Optional[HeuristicConfig] = None,
) -> List[Block]:
    """Classify every paragraph of a page in order."""
    config = config or HeuristicConfig()
    return [classify_paragraph(paragraph, context, config) for paragraph in paragraphs]
