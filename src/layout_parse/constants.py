import re
from typing import Dict, Tuple

BULLET_CHARS = "•●○▪▸►-‐–—*"

LIST_MARKER_PATTERN = re.compile(
    r"^\s*([" + re.escape(BULLET_CHARS) + r"]|\d+[.)]\s|[a-z][.)]\s)",
    re.IGNORECASE,
)
ORDERED_MARKER_PATTERN = re.compile(r"^\d+[.)]")

BOLD_FONT_MARKS: Tuple[str, ...] = ("bold", "black")
ITALIC_FONT_MARKS: Tuple[str, ...] = ("italic", "oblique")

LIGATURES: Dict[str, str] = {
    "\ufb00": "ff",
    "\ufb01": "fi",
    "\ufb02": "fl",
    "\ufb03": "ffi",
    "\ufb04": "ffl",
}

SOFT_HYPHEN = "\u00ad"

# soft hyphen and the replacement character
STRIPPED_CHARS = SOFT_HYPHEN + "\ufffd"

PAGE_SEPARATOR = "---"
