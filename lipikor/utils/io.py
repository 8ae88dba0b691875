"""
I/O utilities for the export pipeline.

Handles:
- JSON serialization
- Conversion between the recognition layer's JSON payload and the document model
- Structural validation of incoming payloads
"""

import json
import logging
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, Union

from .errors import StructureError
from .model import (
    Alignment,
    BlockType,
    Document,
    Language,
    ParagraphBlock,
    TableBlock,
    TableCell,
    TableRow,
    TextDecoration,
    TextSpan,
)

logger = logging.getLogger(__name__)


# ============================================================================
# JSON Serialization
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles enums, dataclasses and paths."""

    def default(self, obj):
        if isinstance(obj, Enum):
            return obj.value
        if hasattr(obj, '__dataclass_fields__'):
            return asdict(obj)
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def save_json(
    data: Any,
    output_path: Union[str, Path],
    indent: int = 2,
    ensure_ascii: bool = False
) -> Path:
    """
    Save data to a JSON file.

    Args:
        data: Data to serialize (dict, list, dataclass, etc.)
        output_path: Path to save the JSON file
        indent: Indentation level for pretty printing
        ensure_ascii: If True, escape non-ASCII characters

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=ensure_ascii, cls=EnhancedJSONEncoder)

    logger.debug(f"Saved JSON: {output_path}")
    return output_path


def load_json(json_path: Union[str, Path]) -> Any:
    """
    Load data from a JSON file.

    Args:
        json_path: Path to the JSON file

    Returns:
        Parsed JSON data
    """
    json_path = Path(json_path)
    if not json_path.exists():
        raise FileNotFoundError(f"JSON file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        return json.load(f)


# ============================================================================
# Payload -> Model
# ============================================================================

def _enum(enum_cls: Type[Enum], value: Any, default: Optional[Enum]) -> Optional[Enum]:
    """Parse an enum value, degrading to ``default`` for unknown values."""
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug(f"Unknown {enum_cls.__name__} value {value!r}, using {default}")
        return default


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _span_from_dict(data: Any, block_id: str) -> TextSpan:
    if not isinstance(data, dict) or not isinstance(data.get("text"), str):
        raise StructureError("Text span must be an object with a string 'text'", block_id)

    weight = data.get("fontWeight")
    if not isinstance(weight, int) or isinstance(weight, bool):
        weight = None
    attributes = data.get("fontStyleAttributes") or []

    return TextSpan(
        text=data["text"],
        is_bold=bool(data.get("isBold", False)),
        is_italic=bool(data.get("isItalic", False)),
        font_family=_optional_str(data.get("fontFamily")),
        font_weight=weight,
        color=_optional_str(data.get("color")),
        text_decoration=_enum(TextDecoration, data.get("textDecoration"), TextDecoration.NONE),
        font_style_attributes=[str(a) for a in attributes] if isinstance(attributes, list) else [],
        is_uncertain=bool(data.get("isUncertain", False)),
    )


def _spans_from_list(data: Any, block_id: str, what: str) -> List[TextSpan]:
    if not isinstance(data, list):
        raise StructureError(f"{what} must be a list of text spans", block_id)
    return [_span_from_dict(span, block_id) for span in data]


def _cell_from_dict(data: Any, block_id: str) -> TableCell:
    if not isinstance(data, dict):
        raise StructureError("Table cell must be an object", block_id)
    cell_id = str(data.get("id", ""))
    if "content" not in data:
        raise StructureError(f"Cell '{cell_id}' is missing its content array", block_id)

    return TableCell(
        id=cell_id,
        content=_spans_from_list(data["content"], block_id, f"Cell '{cell_id}' content"),
        col_span=data.get("colSpan", 1),
        row_span=data.get("rowSpan", 1),
        is_header=bool(data.get("isHeader", False)),
        alignment=_enum(Alignment, data.get("alignment"), None),
        background_color=_optional_str(data.get("backgroundColor")),
        border_color=_optional_str(data.get("borderColor")),
        border_width=_optional_str(data.get("borderWidth")),
        font_size_category=_optional_str(data.get("fontSizeCategory")),
        font_family_suggestion=_optional_str(data.get("fontFamilySuggestion")),
        language=_enum(Language, data.get("language"), None),
    )


def _row_from_dict(data: Any, block_id: str) -> TableRow:
    if not isinstance(data, dict) or not isinstance(data.get("cells"), list):
        raise StructureError("Table row must be an object with a 'cells' array", block_id)
    return TableRow(
        id=str(data.get("id", "")),
        cells=[_cell_from_dict(cell, block_id) for cell in data["cells"]],
    )


def block_from_dict(data: Any, index: int = 0):
    """
    Convert one JSON block into a ParagraphBlock or TableBlock.

    Raises:
        StructureError: If the block's structure is invalid
    """
    if not isinstance(data, dict):
        raise StructureError(f"Block #{index} must be an object")
    block_id = data.get("id")
    if not isinstance(block_id, str) or not block_id:
        raise StructureError(f"Block #{index} is missing its 'id'")

    block_type = data.get("blockType")
    language = _enum(Language, data.get("language"), Language.UNKNOWN)

    if block_type == "table":
        if not isinstance(data.get("rows"), list):
            raise StructureError("Table block must have a 'rows' array", block_id)
        caption = data.get("caption")
        return TableBlock(
            id=block_id,
            rows=[_row_from_dict(row, block_id) for row in data["rows"]],
            language=language,
            caption=_spans_from_list(caption, block_id, "Caption") if caption is not None else None,
            table_width=_optional_str(data.get("tableWidth")),
            cell_padding=_optional_str(data.get("cellPadding")),
            cell_spacing=_optional_str(data.get("cellSpacing")),
            border_color=_optional_str(data.get("borderColor")),
            border_width=_optional_str(data.get("borderWidth")),
        )

    try:
        paragraph_type = BlockType(block_type)
    except ValueError:
        raise StructureError(f"Unknown block type {block_type!r}", block_id)
    if "spans" not in data:
        raise StructureError("Paragraph block is missing its 'spans' array", block_id)

    return ParagraphBlock(
        id=block_id,
        block_type=paragraph_type,
        language=language,
        alignment=_enum(Alignment, data.get("alignment"), Alignment.LEFT),
        font_size_category=_optional_str(data.get("fontSizeCategory")) or "pt11",
        font_family_suggestion=_optional_str(data.get("fontFamilySuggestion")) or "default",
        line_height=_optional_str(data.get("lineHeight")),
        space_after=_optional_str(data.get("spaceAfter")),
        spans=_spans_from_list(data["spans"], block_id, "Spans"),
    )


def document_from_dict(data: Any) -> Document:
    """
    Build a Document from the recognition layer's JSON payload.

    Accepts either ``{"blocks": [...]}`` or a bare list of blocks. Unknown
    formatting values degrade to defaults; structural problems raise.

    Raises:
        StructureError: If the payload is not a valid document
    """
    blocks = data.get("blocks") if isinstance(data, dict) else data
    if not isinstance(blocks, list):
        raise StructureError("Document must be a list of blocks")
    return Document(blocks=[block_from_dict(block, i) for i, block in enumerate(blocks)])


def load_document(json_path: Union[str, Path]) -> Document:
    """Load and validate a document JSON file."""
    document = document_from_dict(load_json(json_path))
    logger.info(f"Loaded document with {len(document)} blocks from {json_path}")
    return document


# ============================================================================
# Model -> Payload
# ============================================================================

def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def _span_to_dict(span: TextSpan) -> Dict[str, Any]:
    return _drop_none({
        "text": span.text,
        "isBold": span.is_bold or None,
        "isItalic": span.is_italic or None,
        "fontFamily": span.font_family,
        "fontWeight": span.font_weight,
        "color": span.color,
        "textDecoration": span.text_decoration.value if span.text_decoration != TextDecoration.NONE else None,
        "fontStyleAttributes": list(span.font_style_attributes) or None,
        "isUncertain": span.is_uncertain or None,
    })


def _cell_to_dict(cell: TableCell) -> Dict[str, Any]:
    return _drop_none({
        "id": cell.id,
        "content": [_span_to_dict(span) for span in cell.content],
        "colSpan": cell.col_span if cell.col_span != 1 else None,
        "rowSpan": cell.row_span if cell.row_span != 1 else None,
        "isHeader": cell.is_header or None,
        "alignment": cell.alignment.value if cell.alignment else None,
        "backgroundColor": cell.background_color,
        "borderColor": cell.border_color,
        "borderWidth": cell.border_width,
        "fontSizeCategory": cell.font_size_category,
        "fontFamilySuggestion": cell.font_family_suggestion,
        "language": cell.language.value if cell.language else None,
    })


def block_to_dict(block) -> Dict[str, Any]:
    """Convert a block back into the camelCase payload shape."""
    if isinstance(block, TableBlock):
        return _drop_none({
            "id": block.id,
            "blockType": "table",
            "language": block.language.value,
            "rows": [
                {"id": row.id, "cells": [_cell_to_dict(cell) for cell in row.cells]}
                for row in block.rows
            ],
            "caption": [_span_to_dict(s) for s in block.caption] if block.caption is not None else None,
            "tableWidth": block.table_width,
            "cellPadding": block.cell_padding,
            "cellSpacing": block.cell_spacing,
            "borderColor": block.border_color,
            "borderWidth": block.border_width,
        })
    if isinstance(block, ParagraphBlock):
        return _drop_none({
            "id": block.id,
            "blockType": block.block_type.value,
            "language": block.language.value,
            "alignment": block.alignment.value,
            "fontSizeCategory": block.font_size_category,
            "fontFamilySuggestion": block.font_family_suggestion,
            "lineHeight": block.line_height,
            "spaceAfter": block.space_after,
            "spans": [_span_to_dict(span) for span in block.spans],
        })
    raise StructureError(f"Unsupported block type {type(block).__name__}", getattr(block, "id", None))


def document_to_dict(document: Document) -> Dict[str, Any]:
    """Convert a Document into ``{"blocks": [...]}``."""
    return {"blocks": [block_to_dict(block) for block in document]}
