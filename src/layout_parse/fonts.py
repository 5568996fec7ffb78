import logging
from collections import defaultdict
from typing import Dict, Iterable, Optional, Tuple

from .config import HeuristicConfig
from .models import Line, SizeContext, TextItem

_logger = logging.getLogger(__name__)


def _heaviest(weights: Dict[float, int]) -> float:
    """Key with the largest weight; the larger size wins ties."""
    return max(weights.items(), key=lambda kv: (kv[1], kv[0]))[0]


def dominant_size(items: Iterable[TextItem]) -> float:
    """Font size carrying the most characters among the given items."""
    weights: Dict[float, int] = defaultdict(int)
    for item in items:
        weights[item.font_size] += len(item.text)
    if not weights:
        return 0.0
    return _heaviest(weights)


def size_weights(lines: Iterable[Line]) -> Dict[float, int]:
    """Character-count weighted frequency table of line font sizes, zero sizes skipped."""
    weights: Dict[float, int] = defaultdict(int)
    for line in lines:
        if line.font_size <= 0:
            continue
        weights[line.font_size] += len(line.text.strip())
    return dict(weights)


def estimate_sizes(
    lines: Iterable[Line], config: Optional[HeuristicConfig] = None
) -> SizeContext:
    """Derive the body font size and the ranked heading sizes for a document."""
    config = config or HeuristicConfig()
    weights = {size: w for size, w in size_weights(lines).items() if w > 0}
    if not weights:
        return SizeContext(heading_ratio=config.heading_ratio)

    body = _heaviest(weights)
    threshold = body * config.heading_ratio
    heading_sizes: Tuple[float, ...] = tuple(
        sorted((size for size in weights if size > threshold), reverse=True)
    )
    _logger.debug("Body font size %.1f, heading sizes %s", body, heading_sizes)
    return SizeContext(
        body_font_size=body,
        heading_sizes=heading_sizes,
        heading_ratio=config.heading_ratio,
    )


def heading_level(size: float, context: SizeContext) -> Optional[int]:
    """Map a heading-sized font size to level 1-3 by its rank among heading sizes."""
    if not context.is_heading_sized(size):
        return None
    # rank = number of distinct heading sizes strictly larger than this one
    rank = sum(1 for candidate in context.heading_sizes if candidate > size)
    if rank == 0:
        return 1
    if rank == 1:
        return 2
    return 3
