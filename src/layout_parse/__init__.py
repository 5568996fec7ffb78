from .config import HeuristicConfig
from .models import (
    Block,
    LeafMarker,
    Line,
    PageContent,
    Paragraph,
    RawFragment,
    SizeContext,
    StructNode,
    StructRole,
    TaggedPage,
    TextItem,
)
from .parser import ConversionCancelled, MarkdownConverter, pdf_to_markdown
from .sources import (
    DocumentReadError,
    DocumentSource,
    InMemoryDocument,
    PdfDocument,
    UnsupportedFileError,
)
from .tagged import StructureTreeError

__version__ = "0.1.0"

__all__ = [
    "pdf_to_markdown",
    "MarkdownConverter",
    "HeuristicConfig",
    "DocumentSource",
    "InMemoryDocument",
    "PdfDocument",
    "PageContent",
    "RawFragment",
    "TextItem",
    "Line",
    "Paragraph",
    "SizeContext",
    "Block",
    "StructNode",
    "StructRole",
    "LeafMarker",
    "TaggedPage",
    "ConversionCancelled",
    "DocumentReadError",
    "UnsupportedFileError",
    "StructureTreeError",
]
