"""
Table layout builder for the export pipeline.

Provides:
- Grid placement of cells with row/column spans (merge origins)
- Per-cell border, shading and padding resolution with fallbacks
- Cell content assembly through the style assembler

The builder only records which grid positions belong to which merge-origin;
the packager turns that into DOCX merges.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .errors import StructureError
from .fonts import TargetProfile
from .model import Alignment, TableBlock, TableCell
from .styles import RunContext, StyledParagraph, StyledRun, build_runs, normalize_hex_color
from .units import parse_length_to_twips, parse_width, twips_to_eighth_points

logger = logging.getLogger(__name__)

DEFAULT_BORDER_COLOR = "#000000"
DEFAULT_BORDER_WIDTH = "1pt"
DEFAULT_BORDER_TWIPS = 20
DEFAULT_CELL_PADDING_TWIPS = 80

Position = Tuple[int, int]


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class BorderSpec:
    """Border applied to all four edges of a cell."""
    color: str  # RRGGBB
    size: int  # eighth-points

    @property
    def style(self) -> str:
        return "single" if self.size > 0 else "nil"


@dataclass
class CellLayout:
    """A logical cell placed on the table grid."""
    cell_id: str
    row: int
    col: int
    paragraph: StyledParagraph
    borders: BorderSpec
    row_span: int = 1
    col_span: int = 1
    shading: Optional[str] = None  # RRGGBB
    margins: int = DEFAULT_CELL_PADDING_TWIPS
    is_header: bool = False

    @property
    def is_merge_origin(self) -> bool:
        return self.row_span > 1 or self.col_span > 1

    @property
    def origin(self) -> Position:
        return (self.row, self.col)

    def positions(self) -> Iterator[Position]:
        """All grid positions covered by this cell, origin first."""
        for row in range(self.row, self.row + self.row_span):
            for col in range(self.col, self.col + self.col_span):
                yield (row, col)


@dataclass
class TableLayout:
    """Grid layout of a table block."""
    table_id: str
    num_rows: int
    num_cols: int
    cells: List[CellLayout] = field(default_factory=list)
    # Every occupied position mapped to its cell's origin position
    grid: Dict[Position, Position] = field(default_factory=dict)
    width: Tuple[str, float] = ("pct", 100.0)

    def cell_at(self, row: int, col: int) -> Optional[CellLayout]:
        """Logical cell covering a grid position, or None if the slot is empty."""
        origin = self.grid.get((row, col))
        if origin is None:
            return None
        for cell in self.cells:
            if cell.origin == origin:
                return cell
        return None

    @property
    def header_rows(self) -> int:
        """Number of leading rows made only of header cells."""
        count = 0
        for row in range(self.num_rows):
            starting = [c for c in self.cells if c.row == row]
            if not starting or not all(c.is_header for c in starting):
                break
            count += 1
        return count


# ============================================================================
# Fallback Resolution
# ============================================================================

def first_present(
    candidates: List[Optional[str]],
    default: str,
    accept: Callable[[str], bool] = bool,
) -> str:
    """Return the first candidate accepted by ``accept``, else ``default``."""
    for candidate in candidates:
        if candidate and accept(candidate):
            return candidate
    return default


def resolve_borders(cell: TableCell, table: TableBlock) -> BorderSpec:
    """Resolve cell borders: cell -> table -> document default."""
    color = first_present(
        [cell.border_color, table.border_color],
        DEFAULT_BORDER_COLOR,
        accept=lambda value: normalize_hex_color(value) is not None,
    )
    width = first_present([cell.border_width, table.border_width], DEFAULT_BORDER_WIDTH)
    twips = parse_length_to_twips(width, DEFAULT_BORDER_TWIPS)
    return BorderSpec(color=normalize_hex_color(color), size=twips_to_eighth_points(twips))


def _span_value(value, cell_id: str, name: str) -> int:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
        return value
    if value is not None:
        logger.debug(f"Cell {cell_id}: invalid {name} {value!r}, using 1")
    return 1


# ============================================================================
# Builder
# ============================================================================

def _cell_paragraph(cell: TableCell, table: TableBlock, profile: TargetProfile) -> StyledParagraph:
    context = RunContext(
        font_size_category=cell.font_size_category,
        font_family_suggestion=cell.font_family_suggestion,
        language=cell.language or table.language,
    )
    runs = build_runs(cell.content, context, profile, block_id=table.id)
    if not runs:
        runs = [StyledRun(text="", size=context.size)]
    return StyledParagraph(runs=runs, alignment=cell.alignment or Alignment.LEFT)


def build_table_layout(table: TableBlock, profile: TargetProfile) -> TableLayout:
    """
    Place a table block's cells on a grid and resolve their styling.

    Cells fill the next free column of their row, skipping positions already
    covered by a row span from above. Spans reaching past the last row, or
    into an occupied position, are clipped.

    Args:
        table: Table block
        profile: Target application profile

    Returns:
        TableLayout with one CellLayout per logical cell

    Raises:
        StructureError: If rows or cells are malformed
    """
    if not isinstance(table.rows, list):
        raise StructureError("Table rows must be a list", table.id)

    num_rows = table.num_rows
    grid: Dict[Position, Position] = {}
    cells: List[CellLayout] = []
    margins = parse_length_to_twips(table.cell_padding, DEFAULT_CELL_PADDING_TWIPS)

    for r, row in enumerate(table.rows):
        if not isinstance(getattr(row, "cells", None), list):
            raise StructureError(f"Row {r} has no cell list", table.id)
        col = 0
        for cell in row.cells:
            if not isinstance(cell, TableCell) or not isinstance(cell.content, list):
                raise StructureError(f"Cell in row {r} is missing its content", table.id)

            while (r, col) in grid:
                col += 1

            row_span = min(_span_value(cell.row_span, cell.id, "rowSpan"), num_rows - r)
            col_span = _span_value(cell.col_span, cell.id, "colSpan")
            for offset in range(1, col_span):
                if (r, col + offset) in grid:
                    logger.debug(f"Cell {cell.id}: colSpan clipped to {offset}")
                    col_span = offset
                    break

            layout = CellLayout(
                cell_id=cell.id,
                row=r,
                col=col,
                row_span=row_span,
                col_span=col_span,
                paragraph=_cell_paragraph(cell, table, profile),
                borders=resolve_borders(cell, table),
                shading=normalize_hex_color(cell.background_color, allow_alpha=False),
                margins=margins,
                is_header=bool(cell.is_header),
            )
            for position in layout.positions():
                grid[position] = layout.origin
            cells.append(layout)
            col += col_span

    num_cols = max((c for _, c in grid), default=-1) + 1
    logger.debug(f"Table {table.id}: {num_rows}x{num_cols} grid, {len(cells)} cells")

    return TableLayout(
        table_id=table.id,
        num_rows=num_rows,
        num_cols=num_cols,
        cells=cells,
        grid=grid,
        width=parse_width(table.table_width),
    )
