"""Render a page's semantic structure tree to Markdown.

Structure elements and raw text items share one document-order sequence: every
leaf marker in the tree consumes the next item of the page's item stream. The
stream is held by an explicit :class:`ItemCursor` passed through the recursion,
so each node can be rendered (and tested) on its own.
"""

import logging
from typing import List, NamedTuple, Optional, Sequence, Union

from .classify import match_list_marker
from .constants import BULLET_CHARS, ORDERED_MARKER_PATTERN
from .models import LeafMarker, StructNode, StructRole, TaggedPage
from .normalize import clean_text
from .render import collapse_blank_lines

_logger = logging.getLogger(__name__)

_CONTAINER_ROLES = frozenset(
    {
        StructRole.ROOT,
        StructRole.DOCUMENT,
        StructRole.PART,
        StructRole.SECT,
        StructRole.DIV,
        StructRole.ART,
        StructRole.NONSTRUCT,
        StructRole.TR,
        StructRole.UNKNOWN,
    }
)


class StructureTreeError(Exception):
    """Raised when a structure tree cannot be walked against its item stream."""

    pass


class ItemCursor:
    """Forward-only cursor over a page's raw item strings."""

    def __init__(self, items: Sequence[str]) -> None:
        self._items = list(items)
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self._items) - self.position

    def take(self) -> str:
        """Consume and return the next item; raises once the stream is exhausted."""
        if self.position >= len(self._items):
            raise StructureTreeError(
                f"Structure tree references more leaves than the {len(self._items)} items on the page"
            )
        item = self._items[self.position]
        self.position += 1
        return item


class Piece(NamedTuple):
    text: str
    block: bool


def _join_inline(left: str, right: str) -> str:
    if not left:
        return right
    if not right:
        return left
    if left[-1].isspace() or right[0].isspace():
        return left + right
    return f"{left} {right}"


def _combine(pieces: Sequence[Optional[Piece]]) -> Optional[Piece]:
    """Blocks are separated by blank lines; runs of inline pieces are joined with spaces."""
    text = ""
    has_block = False
    previous_block = False
    for piece in pieces:
        if piece is None or not piece.text.strip():
            continue
        if not text:
            text = piece.text
        elif piece.block or previous_block:
            text = f"{text}\n\n{piece.text}"
        else:
            text = _join_inline(text, piece.text)
        previous_block = piece.block
        has_block = has_block or piece.block
    text = text.strip()
    if not text:
        return None
    return Piece(text, has_block)


def _bullet(text: str) -> str:
    """Render list-item text as a Markdown item, dropping a bullet-glyph label."""
    match = match_list_marker(text)
    if match is not None:
        label = match.group(0).strip()
        content = text[match.end():].strip()
        if content:
            ordered = ORDERED_MARKER_PATTERN.match(label)
            if ordered:
                return f"{ordered.group(0)[:-1]}. {content}"
            if label in BULLET_CHARS:
                return f"- {content}"
    return f"- {text}"


class TaggedTreeWalker:
    """Recursive renderer for one page's structure tree."""

    def __init__(self, cursor: ItemCursor) -> None:
        self.cursor = cursor

    def render(self, root: StructNode) -> str:
        piece = self.visit(root)
        return piece.text if piece is not None else ""

    def visit(self, node: StructNode) -> Optional[Piece]:
        """Render a node in block context."""
        role = node.struct_role

        if role.heading_level:
            text = self.inline_text(node)
            if not text:
                return None
            return Piece(f"{'#' * role.heading_level} {text}", True)
        if role in (StructRole.P, StructRole.SPAN):
            return self._block(self.inline_text(node))
        if role is StructRole.L:
            items = [piece.text for piece in self._visit_children(node) if piece]
            return self._block("\n".join(items))
        if role in (StructRole.LI, StructRole.LBODY):
            text = self.inline_text(node)
            return self._block(_bullet(text) if text else "")
        if role is StructRole.TABLE:
            rows = [row for row in self._table_rows(node) if row]
            if not rows:
                return None
            body = "\n".join(rows)
            return Piece(f"```\n{body}\n```", True)
        if role in (StructRole.FIGURE, StructRole.CAPTION):
            text = self.inline_text(node)
            return self._block(f"*{text}*" if text else "")
        if role is StructRole.BLOCKQUOTE:
            text = self.inline_text(node)
            return self._block(f"> {text}" if text else "")
        if role is StructRole.CODE:
            text = self.inline_text(node)
            return Piece(f"`{text}`", False) if text else None
        if role in (StructRole.LINK, StructRole.ANNOT):
            text = self.inline_text(node)
            return Piece(text, False) if text else None
        if role in _CONTAINER_ROLES:
            return _combine(self._visit_children(node))
        raise StructureTreeError(f"Unhandled structure role {role!r}")

    def inline_text(self, node: StructNode) -> str:
        """Flatten a subtree into one cleaned line of inline text."""
        return clean_text(self._flatten(node))

    @staticmethod
    def _block(text: str) -> Optional[Piece]:
        text = text.strip()
        return Piece(text, True) if text else None

    def _visit_children(self, node: StructNode) -> List[Optional[Piece]]:
        pieces: List[Optional[Piece]] = []
        for child in node.children:
            pieces.append(self._visit_child(child))
        return pieces

    def _visit_child(self, child: Union[StructNode, LeafMarker]) -> Optional[Piece]:
        if isinstance(child, LeafMarker):
            return Piece(clean_text(self.cursor.take()), False)
        return self.visit(child)

    def _flatten(self, node: StructNode) -> str:
        text = ""
        for child in node.children:
            if isinstance(child, LeafMarker):
                part = self.cursor.take()
            else:
                part = self._flatten(child)
                if child.struct_role is StructRole.CODE and part.strip():
                    part = f"`{part.strip()}`"
            text = _join_inline(text, part)
        return text

    def _table_rows(self, node: StructNode) -> List[str]:
        rows: List[str] = []
        for child in node.children:
            if isinstance(child, LeafMarker):
                rows.append(clean_text(self.cursor.take()))
            elif child.struct_role is StructRole.TR:
                rows.append(self.inline_text(child))
            else:
                rows.extend(self._table_rows(child))
        return rows


def render_tagged_page(page: TaggedPage) -> str:
    """Render one tagged page; raises StructureTreeError on an inconsistent tree."""
    cursor = ItemCursor(page.items)
    markdown = TaggedTreeWalker(cursor).render(page.root)
    if cursor.remaining:
        _logger.debug("%d tagged items were not referenced by the structure tree", cursor.remaining)
    return collapse_blank_lines(markdown).strip()
