from functools import cmp_to_key
from typing import Callable, List, Optional, Sequence

from .config import HeuristicConfig
from .fonts import dominant_size
from .models import Line, TextItem


def _sign(value: float) -> int:
    """-1, 0 or 1 by the sign of `value`."""
    return (value > 0) - (value < 0)


def _row_comparator(tolerance: float) -> Callable[[TextItem, TextItem], int]:
    """Top-to-bottom order; items within `tolerance` of each other in y are ordered left-to-right."""

    def compare(a: TextItem, b: TextItem) -> int:
        dy = b.y - a.y
        if abs(dy) > tolerance:
            return _sign(dy)
        return _sign(a.x - b.x)

    return compare


def sort_reading_order(
    items: Sequence[TextItem], config: Optional[HeuristicConfig] = None
) -> List[TextItem]:
    """Items in reading order: top to bottom, then left to right within a row."""
    config = config or HeuristicConfig()
    return sorted(items, key=cmp_to_key(_row_comparator(config.row_tie_tolerance)))


def _needs_space(left: TextItem, right: TextItem, config: HeuristicConfig) -> bool:
    """True when the horizontal gap between two runs reads as a word break."""
    if left.text[-1:].isspace() or right.text[:1].isspace():
        return False
    gap = right.x - (left.x + left.width)
    return gap > right.font_size * config.space_gap_ratio


def join_items(items: Sequence[TextItem], config: Optional[HeuristicConfig] = None) -> str:
    """Concatenate x-ordered items, recovering word spacing from gaps."""
    config = config or HeuristicConfig()
    parts: List[str] = []
    previous: Optional[TextItem] = None
    for item in items:
        if previous is not None and _needs_space(previous, item, config):
            parts.append(" ")
        parts.append(item.text)
        previous = item
    return "".join(parts)


def build_line(
    items: Sequence[TextItem],
    anchor_y: Optional[float] = None,
    config: Optional[HeuristicConfig] = None,
) -> Line:
    """Build a Line from items on one row; italic only if every item is italic."""
    config = config or HeuristicConfig()
    ordered = sorted(items, key=lambda item: item.x)
    return Line(
        items=ordered,
        y=items[0].y if anchor_y is None else anchor_y,
        text=join_items(ordered, config),
        font_size=dominant_size(ordered),
        is_bold=any(item.is_bold for item in ordered),
        is_italic=all(item.is_italic for item in ordered),
    )


def assemble_lines(
    items: Sequence[TextItem], config: Optional[HeuristicConfig] = None
) -> List[Line]:
    """Group a page's items into lines, top to bottom."""
    config = config or HeuristicConfig()
    if not items:
        return []

    ordered = sort_reading_order(items, config)
    lines: List[Line] = []
    current: List[TextItem] = [ordered[0]]
    anchor_y = ordered[0].y

    for item in ordered[1:]:
        if abs(item.y - anchor_y) < item.font_size * config.line_join_ratio:
            current.append(item)
            continue
        lines.append(build_line(current, anchor_y, config))
        current = [item]
        anchor_y = item.y

    lines.append(build_line(current, anchor_y, config))
    return lines
