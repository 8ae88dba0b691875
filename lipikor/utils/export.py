"""
DOCX packager for the export pipeline.

Provides:
- assemble_document: Document -> ordered tree of styled paragraphs and table layouts
- DocxExporter: style registry, python-docx tree construction, serialization
- generate_docx_bytes / generate_docx_async: one-call entry points

Serialization is deterministic: two exports of the same document with the
same profile produce byte-identical payloads.
"""

import asyncio
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from docx import Document as DocxDocument
from docx.enum.style import WD_STYLE_TYPE
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_LINE_SPACING, WD_UNDERLINE
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor, Twips

from .errors import PackagingError, StructureError
from .fonts import TargetProfile, get_profile
from .model import Alignment, Document, ParagraphBlock, TableBlock
from .scripts import ScriptClass
from .styles import (
    BODY_STYLE,
    CAPTION_STYLE,
    StyledParagraph,
    StyledRun,
    build_caption,
    build_paragraph,
)
from .tables import CellLayout, TableLayout, build_table_layout
from .units import (
    DEFAULT_FONT_SIZE_PT,
    resolve_line_spacing,
    round_half_up,
)

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Extracted Document Content"
DEFAULT_CREATOR = "Smart Lipikor"
# Earliest timestamp a ZIP entry can carry
DEFAULT_TIMESTAMP = datetime(1980, 1, 1)

CAPTION_SIZE_PT = 9
CAPTION_SPACE_AFTER_TWIPS = 120

DocumentItem = Union[StyledParagraph, TableLayout]

_ALIGNMENTS = {
    Alignment.LEFT: WD_ALIGN_PARAGRAPH.LEFT,
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
    Alignment.JUSTIFY: WD_ALIGN_PARAGRAPH.JUSTIFY,
}

_THEME_FONT_ATTRS = ("w:asciiTheme", "w:hAnsiTheme", "w:eastAsiaTheme", "w:cstheme")
_FONT_SLOTS = ("w:ascii", "w:hAnsi", "w:eastAsia", "w:cs")
_COMPLEX_SCRIPTS = (ScriptClass.BENGALI, ScriptClass.ARABIC)
_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")

# Elements that must follow w:szCs / w:tblW inside their property blocks
_SZCS_SUCCESSORS = (
    "w:highlight", "w:u", "w:effect", "w:bdr", "w:shd", "w:fitText",
    "w:vertAlign", "w:rtl", "w:cs", "w:em", "w:lang", "w:eastAsianLayout",
    "w:specVanish", "w:oMath",
)
_TBLW_SUCCESSORS = (
    "w:jc", "w:tblCellSpacing", "w:tblInd", "w:tblBorders", "w:shd",
    "w:tblLayout", "w:tblCellMar", "w:tblLook", "w:tblCaption",
    "w:tblDescription",
)


# ============================================================================
# Style Registry
# ============================================================================

@dataclass(frozen=True)
class HeadingStyleSpec:
    """Run and paragraph formatting of one heading level."""
    level: int
    size_pt: int
    space_twips: int
    line_height: str


HEADING_STYLES = (
    HeadingStyleSpec(1, 22, 240, "1.2"),
    HeadingStyleSpec(2, 16, 220, "1.2"),
    HeadingStyleSpec(3, 13, 200, "1.3"),
    HeadingStyleSpec(4, 11, 180, "1.4"),
    HeadingStyleSpec(5, 10, 160, "1.4"),
    HeadingStyleSpec(6, 9, 140, "1.5"),
)


def _set_fonts(rPr: Any, font_name: str) -> Any:
    """Point every rFonts slot at ``font_name``, dropping theme fonts."""
    rFonts = rPr.get_or_add_rFonts()
    for attr in _THEME_FONT_ATTRS:
        rFonts.attrib.pop(qn(attr), None)
    for attr in _FONT_SLOTS:
        rFonts.set(qn(attr), font_name)
    return rFonts


def _set_complex_size(rPr: Any, half_points: int) -> None:
    szCs = rPr.find(qn("w:szCs"))
    if szCs is None:
        szCs = OxmlElement("w:szCs")
        rPr.insert_element_before(szCs, *_SZCS_SUCCESSORS)
    szCs.set(qn("w:val"), str(half_points))


def _apply_line_spacing(paragraph_format: Any, spacing) -> None:
    paragraph_format.line_spacing = Twips(spacing.value)
    if spacing.mode == "auto":
        paragraph_format.line_spacing_rule = WD_LINE_SPACING.MULTIPLE
    else:
        paragraph_format.line_spacing_rule = WD_LINE_SPACING.EXACTLY


def _get_or_add_style(styles: Any, name: str) -> Any:
    try:
        return styles[name]
    except KeyError:
        style = styles.add_style(name, WD_STYLE_TYPE.PARAGRAPH)
        style.base_style = styles["Normal"]
        style.quick_style = True
        return style


def register_styles(docx_document: Any, profile: TargetProfile) -> Dict[str, Any]:
    """
    Build the style registry: default run style, body, caption and headings.

    Returns:
        Mapping of style name to python-docx style
    """
    styles = docx_document.styles
    base_font = get_profile(profile).base_font
    registry: Dict[str, Any] = {}

    normal = styles["Normal"]
    normal.font.size = Pt(DEFAULT_FONT_SIZE_PT)
    _set_fonts(normal.element.get_or_add_rPr(), base_font)
    registry["Normal"] = normal

    body = _get_or_add_style(styles, BODY_STYLE)
    body.font.size = Pt(DEFAULT_FONT_SIZE_PT)
    _set_fonts(body.element.get_or_add_rPr(), base_font)
    registry[BODY_STYLE] = body

    caption = _get_or_add_style(styles, CAPTION_STYLE)
    caption.font.size = Pt(CAPTION_SIZE_PT)
    caption.font.italic = True
    caption.font.bold = False
    caption.font.color.rgb = RGBColor(0, 0, 0)
    _set_fonts(caption.element.get_or_add_rPr(), base_font)
    caption.paragraph_format.alignment = WD_ALIGN_PARAGRAPH.CENTER
    caption.paragraph_format.space_after = Twips(CAPTION_SPACE_AFTER_TWIPS)
    registry[CAPTION_STYLE] = caption

    for spec in HEADING_STYLES:
        name = f"Heading {spec.level}"
        heading = _get_or_add_style(styles, name)
        heading.font.size = Pt(spec.size_pt)
        heading.font.bold = True
        heading.font.italic = False
        heading.font.color.rgb = RGBColor(0, 0, 0)
        _set_fonts(heading.element.get_or_add_rPr(), base_font)
        pf = heading.paragraph_format
        pf.space_before = Twips(spec.space_twips)
        pf.space_after = Twips(spec.space_twips)
        _apply_line_spacing(pf, resolve_line_spacing(spec.line_height, spec.size_pt))
        registry[name] = heading

    return registry


# ============================================================================
# Assembly
# ============================================================================

def assemble_document(document: Document, profile: TargetProfile) -> List[DocumentItem]:
    """
    Assemble a document into the ordered tree the packager serializes.

    A table caption becomes its own paragraph immediately before the table.

    Raises:
        StructureError: If a block is neither a paragraph-like block nor a table
    """
    items: List[DocumentItem] = []
    for block in document:
        if isinstance(block, ParagraphBlock):
            items.append(build_paragraph(block, profile))
        elif isinstance(block, TableBlock):
            caption = build_caption(block, profile)
            if caption is not None:
                items.append(caption)
            items.append(build_table_layout(block, profile))
        else:
            raise StructureError(
                f"Unsupported block type {type(block).__name__}",
                getattr(block, "id", None),
            )
    return items


# ============================================================================
# DOCX Exporter
# ============================================================================

class DocxExporter:
    """Export a structured document to DOCX using python-docx."""

    def __init__(
        self,
        profile: TargetProfile = TargetProfile.GDOCS,
        title: str = DEFAULT_TITLE,
        creator: str = DEFAULT_CREATOR,
        timestamp: Optional[datetime] = None,
    ):
        self.profile = profile
        self.title = title
        self.creator = creator
        self.timestamp = timestamp or DEFAULT_TIMESTAMP

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------

    def build(self, document: Document) -> Any:
        """
        Build the python-docx document for ``document``.

        Raises:
            StructureError: If the input document is malformed
            PackagingError: If python-docx rejects the assembled content
        """
        items = assemble_document(document, self.profile)

        try:
            docx_document = DocxDocument()
            registry = register_styles(docx_document, self.profile)
            self._set_core_properties(docx_document)

            for item in items:
                if isinstance(item, StyledParagraph):
                    paragraph = docx_document.add_paragraph(style=registry[item.style_name])
                    self._write_paragraph(paragraph, item)
                elif isinstance(item, TableLayout):
                    self._write_table(docx_document, item, registry)
                else:
                    raise StructureError(f"Unsupported item {type(item).__name__}")
        except StructureError:
            raise
        except Exception as e:
            raise PackagingError("Failed to build DOCX tree", e) from e

        logger.debug(f"Built DOCX tree with {len(items)} top-level items")
        return docx_document

    def _set_core_properties(self, docx_document: Any) -> None:
        props = docx_document.core_properties
        props.title = self.title
        props.author = self.creator
        props.last_modified_by = self.creator
        props.revision = 1
        props.created = self.timestamp
        props.modified = self.timestamp

    def _write_paragraph(self, paragraph: Any, styled: StyledParagraph) -> None:
        paragraph.alignment = _ALIGNMENTS.get(styled.alignment, WD_ALIGN_PARAGRAPH.LEFT)
        pf = paragraph.paragraph_format
        if styled.space_after is not None:
            pf.space_after = Twips(styled.space_after)
        if styled.line_spacing is not None:
            _apply_line_spacing(pf, styled.line_spacing)
        for run in styled.runs:
            self._write_run(paragraph, run)

    def _write_run(self, paragraph: Any, styled: StyledRun) -> None:
        run = paragraph.add_run()
        if styled.is_break:
            run.add_break()
            return

        run.text = _XML_ILLEGAL_RE.sub("", styled.text)
        font = run.font
        font.bold = styled.bold
        if styled.italic:
            font.italic = True
        if styled.underline:
            font.underline = WD_UNDERLINE.SINGLE
        if styled.strike:
            font.strike = True
        if styled.color:
            font.color.rgb = RGBColor.from_string(styled.color)

        rPr = run._r.get_or_add_rPr()
        if styled.font:
            rFonts = _set_fonts(rPr, styled.font)
            if styled.script in _COMPLEX_SCRIPTS:
                rFonts.set(qn("w:hint"), "cs")
        if styled.script in _COMPLEX_SCRIPTS:
            font.complex_script = True
            if styled.bold:
                font.cs_bold = True
            if styled.italic:
                font.cs_italic = True
            if styled.script == ScriptClass.ARABIC:
                font.rtl = True
        if styled.size:
            font.size = Pt(styled.size / 2)
            _set_complex_size(rPr, styled.size)

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def _write_table(self, docx_document: Any, layout: TableLayout, registry: Dict[str, Any]) -> None:
        if layout.num_rows == 0 or layout.num_cols == 0:
            logger.warning(f"Table {layout.table_id} has no cells, skipping")
            return

        table = docx_document.add_table(rows=layout.num_rows, cols=layout.num_cols)
        table.style = "Table Grid"
        self._set_table_width(table, layout.width)

        for cell_layout in layout.cells:
            docx_cell = table.cell(cell_layout.row, cell_layout.col)
            if cell_layout.is_merge_origin:
                last_row = cell_layout.row + cell_layout.row_span - 1
                last_col = cell_layout.col + cell_layout.col_span - 1
                docx_cell = docx_cell.merge(table.cell(last_row, last_col))
            paragraph = docx_cell.paragraphs[0]
            paragraph.style = registry[cell_layout.paragraph.style_name]
            self._write_paragraph(paragraph, cell_layout.paragraph)

        tcs = self._grid_tcs(table)
        for cell_layout in layout.cells:
            for position in cell_layout.positions():
                tc = tcs.get(position)
                if tc is not None:
                    self._style_tc(tc, cell_layout)

        for row_index in range(layout.header_rows):
            trPr = table.rows[row_index]._tr.get_or_add_trPr()
            trPr.append(OxmlElement("w:tblHeader"))

    @staticmethod
    def _grid_tcs(table: Any) -> Dict[Tuple[int, int], Any]:
        """Map the grid position where each ``w:tc`` starts to the element."""
        tcs = {}
        for row_index, tr in enumerate(table._tbl.tr_lst):
            col = 0
            for tc in tr.tc_lst:
                tcs[(row_index, col)] = tc
                col += tc.grid_span
        return tcs

    @staticmethod
    def _style_tc(tc: Any, cell_layout: CellLayout) -> None:
        tcPr = tc.get_or_add_tcPr()

        borders = OxmlElement("w:tcBorders")
        for edge in ("top", "left", "bottom", "right"):
            el = OxmlElement(f"w:{edge}")
            el.set(qn("w:val"), cell_layout.borders.style)
            el.set(qn("w:sz"), str(cell_layout.borders.size))
            el.set(qn("w:space"), "0")
            el.set(qn("w:color"), cell_layout.borders.color)
            borders.append(el)
        tcPr.append(borders)

        if cell_layout.shading:
            shd = OxmlElement("w:shd")
            shd.set(qn("w:val"), "clear")
            shd.set(qn("w:color"), "auto")
            shd.set(qn("w:fill"), cell_layout.shading)
            tcPr.append(shd)

        margins = OxmlElement("w:tcMar")
        for side in ("top", "left", "bottom", "right"):
            el = OxmlElement(f"w:{side}")
            el.set(qn("w:w"), str(cell_layout.margins))
            el.set(qn("w:type"), "dxa")
            margins.append(el)
        tcPr.append(margins)

    @staticmethod
    def _set_table_width(table: Any, width: Tuple[str, float]) -> None:
        kind, value = width
        tblPr = table._tbl.tblPr
        tblW = tblPr.find(qn("w:tblW"))
        if tblW is None:
            tblW = OxmlElement("w:tblW")
            tblPr.insert_element_before(tblW, *_TBLW_SUCCESSORS)
        if kind == "pct":
            # fiftieths of a percent
            tblW.set(qn("w:w"), str(round_half_up(value * 50)))
        else:
            tblW.set(qn("w:w"), str(int(value)))
        tblW.set(qn("w:type"), kind)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_bytes(self, document: Document) -> bytes:
        """
        Serialize ``document`` to a DOCX payload.

        Raises:
            StructureError: If the input document is malformed
            PackagingError: If serialization fails
        """
        docx_document = self.build(document)
        try:
            stream = io.BytesIO()
            docx_document.save(stream)
            return self._normalize_container(stream.getvalue())
        except Exception as e:
            raise PackagingError("Failed to package DOCX", e) from e

    def _normalize_container(self, payload: bytes) -> bytes:
        """Rewrite the ZIP with fixed entry timestamps."""
        date_time = self.timestamp.timetuple()[:6]
        if date_time[0] < 1980:
            date_time = DEFAULT_TIMESTAMP.timetuple()[:6]

        output = io.BytesIO()
        with zipfile.ZipFile(io.BytesIO(payload)) as source, \
                zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as target:
            for info in source.infolist():
                entry = zipfile.ZipInfo(info.filename, date_time=date_time)
                entry.compress_type = zipfile.ZIP_DEFLATED
                entry.create_system = 0
                target.writestr(entry, source.read(info.filename))
        return output.getvalue()

    def export(self, document: Document, output_path: Union[str, Path]) -> Path:
        """
        Export document to a DOCX file.

        Args:
            document: Document to export
            output_path: Output file path

        Returns:
            Path to the generated DOCX file
        """
        payload = self.to_bytes(document)
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(payload)
        except OSError as e:
            raise PackagingError(f"Failed to write {output_path}", e) from e

        logger.info(f"Exported DOCX to: {output_path} ({len(payload)} bytes)")
        return output_path


# ============================================================================
# Convenience Functions
# ============================================================================

def generate_docx_bytes(
    document: Document,
    profile: TargetProfile = TargetProfile.GDOCS,
    **kwargs,
) -> bytes:
    """Export ``document`` for ``profile`` and return the DOCX payload."""
    return DocxExporter(profile=profile, **kwargs).to_bytes(document)


async def generate_docx_async(
    document: Document,
    profile: TargetProfile = TargetProfile.GDOCS,
    **kwargs,
) -> bytes:
    """Awaitable export; resolves with the payload or raises PackagingError."""
    return await asyncio.to_thread(generate_docx_bytes, document, profile, **kwargs)
