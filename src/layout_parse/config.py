from pydantic import BaseModel, Field


class HeuristicConfig(BaseModel):
    """Tunable thresholds for the geometry/typography heuristics."""

    row_tie_tolerance: float = Field(default=3.0, ge=0)  # y window treated as one row when sorting
    line_join_ratio: float = Field(default=0.5, gt=0)  # join when |dy| < ratio * font size
    space_gap_ratio: float = Field(default=0.2, ge=0)  # insert a space when gap > ratio * font size
    heading_ratio: float = Field(default=1.15, gt=1.0)  # heading-sized when size > body * ratio
    font_change_threshold: float = Field(default=0.5, ge=0)
    paragraph_gap_ratio: float = Field(default=1.8, gt=0)
    max_heading_lines: int = Field(default=2, ge=1)
    max_heading_chars: int = Field(default=200, ge=1)
    bold_heading_max_chars: int = Field(default=80, ge=1)
    emphasis_max_chars: int = Field(default=200, ge=1)
    max_italic_lines: int = Field(default=2, ge=1)
