"""
Style assembler for the export pipeline.

Provides:
- StyledRun / StyledParagraph: format-ready runs and paragraphs
- build_runs: spans -> script-homogeneous styled runs
- build_paragraph: paragraph-like block -> styled paragraph
- build_caption: table caption -> standalone centered paragraph

Nothing here depends on python-docx; the packager maps these objects onto
the DOCX tree.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import StructureError
from .fonts import TargetProfile, resolve_font
from .model import Alignment, Language, ParagraphBlock, TableBlock, TextDecoration, TextSpan
from .scripts import ScriptClass, segment_text
from .units import (
    LineSpacing,
    font_size_half_points,
    parse_length_to_twips,
    parse_point_size,
    resolve_line_spacing,
)

logger = logging.getLogger(__name__)

BODY_STYLE = "Body Text"
CAPTION_STYLE = "Caption"

HEADING_SPACE_AFTER_TWIPS = 200
PARAGRAPH_SPACE_AFTER_TWIPS = 100

CAPTION_FONT_SIZE = "pt10"
CAPTION_FONT_FAMILY = "sans-serif"

_NEWLINE_RE = re.compile(r"\\n|\n")
_HEX_COLOR_RE = re.compile(r"^#([0-9A-Fa-f]{3,8})$")


# ============================================================================
# Data Classes
# ============================================================================

@dataclass
class StyledRun:
    """A script-homogeneous run ready for the DOCX writer."""
    text: str = ""
    script: Optional[ScriptClass] = None
    bold: bool = False
    italic: bool = False
    font: Optional[str] = None
    size: Optional[int] = None  # half-points
    color: Optional[str] = None  # RRGGBB
    underline: bool = False
    strike: bool = False
    is_break: bool = False

    @classmethod
    def line_break(cls) -> "StyledRun":
        return cls(is_break=True)


@dataclass
class StyledParagraph:
    """A paragraph ready for the DOCX writer."""
    runs: List[StyledRun] = field(default_factory=list)
    alignment: Alignment = Alignment.LEFT
    heading_level: Optional[int] = None
    style_name: str = BODY_STYLE
    space_after: Optional[int] = None  # twips
    line_spacing: Optional[LineSpacing] = None

    @property
    def text(self) -> str:
        return "".join("\n" if run.is_break else run.text for run in self.runs)


@dataclass
class RunContext:
    """Formatting inherited by spans from their block or cell."""
    font_size_category: Optional[str] = None
    font_family_suggestion: Optional[str] = None
    language: Language = Language.UNKNOWN
    heading_level: Optional[int] = None

    @property
    def size(self) -> int:
        return font_size_half_points(self.font_size_category, self.heading_level)


# ============================================================================
# Helpers
# ============================================================================

def normalize_hex_color(value: Optional[str], allow_alpha: bool = True) -> Optional[str]:
    """
    Normalize ``#RGB``/``#RRGGBB`` (and with ``allow_alpha`` ``#RGBA``/
    ``#RRGGBBAA``) to an upper-case ``RRGGBB`` string.

    Returns None for anything else, including "default" and "inherit".
    """
    if not value:
        return None
    match = _HEX_COLOR_RE.match(value.strip())
    if not match:
        return None
    digits = match.group(1)
    lengths = (3, 4, 6, 8) if allow_alpha else (3, 6)
    if len(digits) not in lengths:
        return None
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits[:3])
    return digits[:6].upper()


def _is_bold(span: TextSpan) -> bool:
    if span.font_weight is not None:
        return span.font_weight >= 600
    return bool(span.is_bold)


def _span_runs(span: TextSpan, context: RunContext, profile: TargetProfile) -> List[StyledRun]:
    if not isinstance(span.text, str):
        raise StructureError("Span text must be a string")

    runs: List[StyledRun] = []
    lines = _NEWLINE_RE.split(span.text.replace("\\t", "\t"))
    color = normalize_hex_color(span.color)
    hint = span.font_family or context.font_family_suggestion
    size = context.size

    for index, line in enumerate(lines):
        is_last = index == len(lines) - 1
        if line == "" and len(lines) > 1:
            if not is_last:
                runs.append(StyledRun.line_break())
            continue

        for text, script in segment_text(line, context.language):
            runs.append(StyledRun(
                text=text,
                script=script,
                bold=_is_bold(span),
                italic=bool(span.is_italic),
                font=resolve_font(script, hint, profile),
                size=size,
                color=color,
                underline=span.text_decoration == TextDecoration.UNDERLINE,
                strike=span.text_decoration == TextDecoration.LINE_THROUGH,
            ))

        if not is_last:
            runs.append(StyledRun.line_break())

    return runs


# ============================================================================
# Assembly
# ============================================================================

def build_runs(
    spans: List[TextSpan],
    context: RunContext,
    profile: TargetProfile,
    block_id: Optional[str] = None,
) -> List[StyledRun]:
    """
    Turn spans into styled runs.

    Each span is split on newline markers; every line is segmented by script
    and every segment becomes one run. Size comes from the context only, so
    script segments of one span differ in font face alone.

    Args:
        spans: Authored spans
        context: Formatting of the owning block or cell
        profile: Target application profile
        block_id: Owning block id, used in error messages

    Returns:
        Ordered list of runs (line breaks included)

    Raises:
        StructureError: If ``spans`` is not a list of spans
    """
    if not isinstance(spans, list):
        raise StructureError("Expected a list of text spans", block_id)

    runs: List[StyledRun] = []
    for span in spans:
        if not isinstance(span, TextSpan):
            raise StructureError(f"Expected TextSpan, got {type(span).__name__}", block_id)
        try:
            runs.extend(_span_runs(span, context, profile))
        except StructureError as e:
            raise StructureError(str(e), block_id) from e
    return runs


def build_paragraph(block: ParagraphBlock, profile: TargetProfile) -> StyledParagraph:
    """Assemble a paragraph, heading or list item block."""
    heading_level = block.block_type.heading_level
    context = RunContext(
        font_size_category=block.font_size_category,
        font_family_suggestion=block.font_family_suggestion,
        language=block.language,
        heading_level=heading_level,
    )
    runs = build_runs(block.spans, context, profile, block_id=block.id)
    if not runs:
        runs = [StyledRun(text="", size=context.size)]

    default_after = HEADING_SPACE_AFTER_TWIPS if heading_level else PARAGRAPH_SPACE_AFTER_TWIPS
    font_size_pt = parse_point_size(block.font_size_category)

    return StyledParagraph(
        runs=runs,
        alignment=block.alignment,
        heading_level=heading_level,
        style_name=f"Heading {heading_level}" if heading_level else BODY_STYLE,
        space_after=parse_length_to_twips(block.space_after, default_after),
        line_spacing=resolve_line_spacing(block.line_height, font_size_pt),
    )


def build_caption(table: TableBlock, profile: TargetProfile) -> Optional[StyledParagraph]:
    """Assemble a table caption as a centered paragraph, or None."""
    if not table.caption:
        return None
    context = RunContext(
        font_size_category=CAPTION_FONT_SIZE,
        font_family_suggestion=CAPTION_FONT_FAMILY,
        language=table.language,
    )
    runs = build_runs(table.caption, context, profile, block_id=table.id)
    return StyledParagraph(runs=runs, alignment=Alignment.CENTER, style_name=CAPTION_STYLE)
