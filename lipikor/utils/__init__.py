"""
Utility modules for the DOCX export pipeline.
"""

from .errors import LipikorError, StructureError, PackagingError
from .model import (
    Document, ParagraphBlock, TableBlock, TableRow, TableCell, TextSpan,
    BlockType, Language, Alignment, TextDecoration,
)
from .units import parse_point_size, parse_length_to_twips, resolve_line_spacing, LineSpacing
from .scripts import ScriptClass, classify_char, segment_text
from .fonts import TargetProfile, resolve_font
from .styles import StyledRun, StyledParagraph, RunContext, build_runs, build_paragraph
from .tables import TableLayout, CellLayout, build_table_layout
from .export import DocxExporter, assemble_document, generate_docx_bytes, generate_docx_async
from .io import load_json, save_json, load_document, document_from_dict, document_to_dict

__all__ = [
    # Errors
    "LipikorError", "StructureError", "PackagingError",
    # Model
    "Document", "ParagraphBlock", "TableBlock", "TableRow", "TableCell", "TextSpan",
    "BlockType", "Language", "Alignment", "TextDecoration",
    # Units
    "parse_point_size", "parse_length_to_twips", "resolve_line_spacing", "LineSpacing",
    # Scripts and fonts
    "ScriptClass", "classify_char", "segment_text", "TargetProfile", "resolve_font",
    # Assembly
    "StyledRun", "StyledParagraph", "RunContext", "build_runs", "build_paragraph",
    "TableLayout", "CellLayout", "build_table_layout",
    # Export
    "DocxExporter", "assemble_document", "generate_docx_bytes", "generate_docx_async",
    # IO
    "load_json", "save_json", "load_document", "document_from_dict", "document_to_dict",
]
