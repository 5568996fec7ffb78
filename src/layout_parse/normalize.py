import math
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import BOLD_FONT_MARKS, ITALIC_FONT_MARKS, LIGATURES, STRIPPED_CHARS
from .models import RawFragment, TextItem

_STRIP_TABLE = {ord(ch): None for ch in STRIPPED_CHARS}
_WS_RUN = re.compile(r"\s+")


def _round1(value: float) -> float:
    """Round half-up to one decimal place."""
    return math.floor(value * 10.0 + 0.5) / 10.0


def _is_bold_font(name: str) -> bool:
    """Heuristic to detect bold fonts from a font name string."""
    name_low = name.lower()
    return any(mark in name_low for mark in BOLD_FONT_MARKS)


def _is_italic_font(name: str) -> bool:
    """Heuristic to detect italic fonts from a font name string."""
    name_low = name.lower()
    return any(mark in name_low for mark in ITALIC_FONT_MARKS)


def font_size_from_transform(transform: Sequence[float]) -> float:
    """Return the rendered font size encoded in a text transform, 0.0 if malformed."""
    try:
        a, b = float(transform[0]), float(transform[1])
    except (TypeError, ValueError, IndexError):
        return 0.0
    size = math.hypot(a, b)
    if not math.isfinite(size):
        return 0.0
    return _round1(size)


def _origin(transform: Sequence[float]) -> Tuple[float, float]:
    """Translation part (e, f) of a transform, or the page origin if malformed."""
    try:
        x, y = float(transform[4]), float(transform[5])
    except (TypeError, ValueError, IndexError):
        return 0.0, 0.0
    if not (math.isfinite(x) and math.isfinite(y)):
        return 0.0, 0.0
    return x, y


def normalize_fragment(fragment: RawFragment) -> Optional[TextItem]:
    """Convert one raw fragment into a TextItem; None for whitespace-only text."""
    if not fragment.text or not fragment.text.strip():
        return None
    x, y = _origin(fragment.transform)
    font_name = fragment.font_name or ""
    return TextItem(
        text=fragment.text,
        font_size=font_size_from_transform(fragment.transform),
        font_name=font_name,
        x=x,
        y=y,
        width=max(0.0, float(fragment.width or 0.0)),
        height=max(0.0, float(fragment.height or 0.0)),
        is_bold=_is_bold_font(font_name),
        is_italic=_is_italic_font(font_name),
    )


def normalize_fragments(fragments: Iterable[RawFragment]) -> List[TextItem]:
    """Normalize a page of fragments, dropping whitespace-only ones."""
    items: List[TextItem] = []
    for fragment in fragments:
        item = normalize_fragment(fragment)
        if item is not None:
            items.append(item)
    return items


def clean_text(text: str) -> str:
    """Collapse whitespace, drop soft hyphens and replacement chars, expand ligatures."""
    if not text:
        return ""
    cleaned = text.translate(_STRIP_TABLE)
    for ligature, letters in LIGATURES.items():
        if ligature in cleaned:
            cleaned = cleaned.replace(ligature, letters)
    return _WS_RUN.sub(" ", cleaned).strip()
