"""
Document model for the export pipeline.

Provides:
- TextSpan: an authored run of text sharing one set of style attributes
- ParagraphBlock / TableBlock: the two block variants (``Block`` union)
- TableRow / TableCell: table structure with spans and per-cell overrides
- Document: ordered sequence of blocks

The model is pure data. The pipeline reads it and never mutates it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union


# ============================================================================
# Enumerations
# ============================================================================

class Language(Enum):
    """Predominant language/script of a block or cell."""
    EN = "en"
    BN = "bn"
    AR = "ar"
    UNKNOWN = "unknown"


class Alignment(Enum):
    """Paragraph or cell alignment."""
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    JUSTIFY = "justify"


class TextDecoration(Enum):
    """Line decoration of a span."""
    NONE = "none"
    UNDERLINE = "underline"
    LINE_THROUGH = "line-through"


class BlockType(Enum):
    """Types of paragraph-like blocks."""
    PARAGRAPH = "paragraph"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    HEADING4 = "heading4"
    HEADING5 = "heading5"
    HEADING6 = "heading6"
    LIST_ITEM = "listItem"

    @property
    def heading_level(self) -> Optional[int]:
        if self.value.startswith("heading"):
            return int(self.value[len("heading"):])
        return None


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class TextSpan:
    """A contiguous run of text with one set of authored style attributes."""
    text: str
    is_bold: bool = False
    is_italic: bool = False
    font_family: Optional[str] = None
    font_weight: Optional[int] = None
    color: Optional[str] = None
    text_decoration: TextDecoration = TextDecoration.NONE
    font_style_attributes: List[str] = field(default_factory=list)
    # Display convention: uncertain text carries a marker prefix in ``text``.
    is_uncertain: bool = False


@dataclass
class ParagraphBlock:
    """A paragraph, heading or list item."""
    id: str
    block_type: BlockType = BlockType.PARAGRAPH
    language: Language = Language.UNKNOWN
    alignment: Alignment = Alignment.LEFT
    font_size_category: str = "pt11"
    font_family_suggestion: str = "default"
    line_height: Optional[str] = None
    space_after: Optional[str] = None
    spans: List[TextSpan] = field(default_factory=list)


@dataclass
class TableCell:
    """A single table cell with optional per-cell overrides."""
    id: str
    content: List[TextSpan] = field(default_factory=list)
    col_span: int = 1
    row_span: int = 1
    is_header: bool = False
    alignment: Optional[Alignment] = None
    background_color: Optional[str] = None
    border_color: Optional[str] = None
    border_width: Optional[str] = None
    font_size_category: Optional[str] = None
    font_family_suggestion: Optional[str] = None
    language: Optional[Language] = None


@dataclass
class TableRow:
    """An ordered row of cells."""
    id: str
    cells: List[TableCell] = field(default_factory=list)


@dataclass
class TableBlock:
    """A table with optional caption and table-wide hints."""
    id: str
    rows: List[TableRow] = field(default_factory=list)
    language: Language = Language.UNKNOWN
    caption: Optional[List[TextSpan]] = None
    table_width: Optional[str] = None
    cell_padding: Optional[str] = None
    cell_spacing: Optional[str] = None
    border_color: Optional[str] = None
    border_width: Optional[str] = None

    @property
    def num_rows(self) -> int:
        return len(self.rows)


Block = Union[ParagraphBlock, TableBlock]


@dataclass
class Document:
    """Ordered sequence of blocks in presentation order."""
    blocks: List[Block] = field(default_factory=list)

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)
