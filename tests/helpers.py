from typing import List, Optional, Sequence, Tuple

from layout_parse.lines import build_line
from layout_parse.models import Line, RawFragment, TextItem

# approximate advance per character, as a fraction of the font size
CHAR_WIDTH = 0.5


def make_item(
    text: str,
    size: float = 12.0,
    x: float = 72.0,
    y: float = 700.0,
    font_name: str = "Helvetica",
    width: Optional[float] = None,
    bold: bool = False,
    italic: bool = False,
) -> TextItem:
    return TextItem(
        text=text,
        font_size=size,
        font_name=font_name,
        x=x,
        y=y,
        width=len(text) * size * CHAR_WIDTH if width is None else width,
        height=size,
        is_bold=bold,
        is_italic=italic,
    )


def make_line(
    text: str,
    size: float = 12.0,
    y: float = 700.0,
    bold: bool = False,
    italic: bool = False,
) -> Line:
    return build_line([make_item(text, size=size, y=y, bold=bold, italic=italic)])


def make_fragment(
    text: str,
    size: float = 12.0,
    x: float = 72.0,
    y: float = 700.0,
    font_name: str = "Helvetica",
) -> RawFragment:
    return RawFragment(
        text=text,
        transform=(size, 0.0, 0.0, size, x, y),
        font_name=font_name,
        width=len(text) * size * CHAR_WIDTH,
        height=size,
    )


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def build_pdf(pages: Sequence[Sequence[Tuple[str, str, float, float, float]]]) -> bytes:
    """Write a minimal untagged PDF.

    Each page is a list of (font, text, size, x, y) where font is "F1"
    (Helvetica) or "F2" (Helvetica-Bold).
    """
    page_count = len(pages)
    font_regular = 3 + 2 * page_count
    font_bold = font_regular + 1
    kids = " ".join(f"{3 + 2 * i} 0 R" for i in range(page_count))

    objects: List[bytes] = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode("latin-1"),
    ]
    for index, runs in enumerate(pages):
        page_obj = 3 + 2 * index
        content = "".join(
            f"BT /{font} {size} Tf {x} {y} Td ({_pdf_escape(text)}) Tj ET\n"
            for font, text, size, x, y in runs
        ).encode("latin-1")
        objects.append(
            (
                "<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
                f"/Resources << /Font << /F1 {font_regular} 0 R /F2 {font_bold} 0 R >> >> "
                f"/Contents {page_obj + 1} 0 R >>"
            ).encode("latin-1")
        )
        objects.append(
            f"<< /Length {len(content)} >>\nstream\n".encode("latin-1")
            + content
            + b"\nendstream"
        )
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>")
    objects.append(b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica-Bold >>")

    out = bytearray(b"%PDF-1.4\n")
    offsets: List[int] = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode("latin-1") + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode("latin-1")
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode("latin-1")
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_at}\n%%EOF\n"
    ).encode("latin-1")
    return bytes(out)


REPORT_PAGE = [
    ("F2", "Report Title", 24, 72, 720),
    ("F1", "The quick brown fox jumps", 12, 72, 690),
    ("F1", "over the lazy dog and keeps", 12, 72, 676),
    ("F1", "running through the field.", 12, 72, 662),
]
