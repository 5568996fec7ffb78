from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .constants import SOFT_HYPHEN


class RawFragment(BaseModel):
    """One positioned text run as delivered by the document collaborator."""

    text: str
    transform: Tuple[float, ...] = (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    font_name: str = ""
    width: float = 0.0
    height: float = 0.0


class TextItem(BaseModel):
    """Normalized text run with font metadata in page space (origin bottom-left)."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    font_size: float = Field(default=0.0, ge=0)
    font_name: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    is_bold: bool = False
    is_italic: bool = False


class Line(BaseModel):
    """Text items sharing one visual row, left to right."""

    items: List[TextItem] = Field(min_length=1)
    y: float
    text: str
    font_size: float
    is_bold: bool = False
    is_italic: bool = False


class Paragraph(BaseModel):
    lines: List[Line] = Field(min_length=1)
    role: Optional[str] = None  # tagged-tree provenance only

    @property
    def first_line(self) -> Line:
        return self.lines[0]

    @property
    def text(self) -> str:
        """Lines joined with spaces; a line ending in a soft hyphen runs into the next."""
        text = ""
        for line in self.lines:
            if text.rstrip().endswith(SOFT_HYPHEN):
                text = text.rstrip() + line.text.lstrip()
            elif text:
                text = f"{text} {line.text}"
            else:
                text = line.text
        return text


class SizeContext(BaseModel):
    """Document-level font statistics, computed once and read-only afterwards."""

    model_config = ConfigDict(frozen=True)

    body_font_size: float = 0.0
    heading_sizes: Tuple[float, ...] = ()
    heading_ratio: float = 1.15

    @property
    def heading_threshold(self) -> float:
        return self.body_font_size * self.heading_ratio

    def is_heading_sized(self, size: float) -> bool:
        return self.body_font_size > 0 and size > self.heading_threshold


class Block(BaseModel):
    """A classified unit ready for Markdown rendering."""

    kind: Literal["heading", "list_item", "paragraph"] = "paragraph"
    text: str
    level: int = 0
    ordered: bool = False
    marker: str = "-"
    emphasis: Literal["none", "bold", "italic"] = "none"
    continuation: List[str] = Field(default_factory=list)  # wrapped lines of a multi-line list paragraph


class StructRole(str, Enum):
    """Closed set of structure-tree roles the walker knows how to render."""

    H = "H"
    H1 = "H1"
    H2 = "H2"
    H3 = "H3"
    H4 = "H4"
    H5 = "H5"
    H6 = "H6"
    P = "P"
    SPAN = "SPAN"
    L = "L"
    LI = "LI"
    LBODY = "LBODY"
    TABLE = "TABLE"
    TR = "TR"
    FIGURE = "FIGURE"
    CAPTION = "CAPTION"
    BLOCKQUOTE = "BLOCKQUOTE"
    CODE = "CODE"
    LINK = "LINK"
    ANNOT = "ANNOT"
    ROOT = "ROOT"
    DOCUMENT = "DOCUMENT"
    PART = "PART"
    SECT = "SECT"
    DIV = "DIV"
    ART = "ART"
    NONSTRUCT = "NONSTRUCT"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_label(cls, label: Optional[str]) -> "StructRole":
        """Map a raw tag label such as '/H1' or 'Sect' to a role, UNKNOWN if unrecognized."""
        key = (label or "").strip().lstrip("/").upper()
        try:
            return cls(key)
        except ValueError:
            return cls.UNKNOWN

    @property
    def heading_level(self) -> int:
        if self is StructRole.H:
            return 1
        if self.value.startswith("H") and self.value[1:].isdigit():
            return int(self.value[1:])
        return 0


class LeafMarker(BaseModel):
    """Placeholder that consumes exactly one raw item from the page stream."""

    mcid: Optional[int] = None


class StructNode(BaseModel):
    role: str
    children: List[Union[StructNode, LeafMarker]] = Field(default_factory=list)

    @property
    def struct_role(self) -> StructRole:
        return StructRole.from_label(self.role)


class TaggedPage(BaseModel):
    """A page's structure tree plus its raw item strings in traversal order."""

    root: StructNode
    items: List[str] = Field(default_factory=list)


class PageContent(BaseModel):
    """In-memory page payload: raw fragments and an optional tagged tree."""

    fragments: List[RawFragment] = Field(default_factory=list)
    tagged: Optional[TaggedPage] = None


StructNode.model_rebuild()
