from typing import List, Optional

from .classify import is_list_line
from .config import HeuristicConfig
from .models import Line, Paragraph, SizeContext


def starts_new_paragraph(
    previous: Line, line: Line, context: SizeContext, config: HeuristicConfig
) -> bool:
    """Return True if `line` cannot continue the paragraph that ends with `previous`."""
    if abs(line.font_size - previous.font_size) > config.font_change_threshold:
        return True
    gap = abs(line.y - previous.y)
    if gap > config.paragraph_gap_ratio * max(line.font_size, previous.font_size):
        return True
    if is_list_line(line) or is_list_line(previous):
        return True
    # headings never absorb the lines that follow them
    return context.is_heading_sized(line.font_size)


def segment_paragraphs(
    lines: List[Line],
    context: SizeContext,
    config: Optional[HeuristicConfig] = None,
) -> List[Paragraph]:
    """Merge consecutive lines into paragraphs in a single forward pass."""
    config = config or HeuristicConfig()
    if not lines:
        return []

    paragraphs: List[Paragraph] = []
    current: List[Line] = [lines[0]]
    for previous, line in zip(lines, lines[1:]):
        if starts_new_paragraph(previous, line, context, config):
            paragraphs.append(Paragraph(lines=current))
            current = [line]
        else:
            current.append(line)
    paragraphs.append(Paragraph(lines=current))
    return paragraphs
