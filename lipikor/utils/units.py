"""
Unit and token parsing for DOCX measurements.

Provides:
- Semantic size tokens ("pt12") to points and half-points
- Length tokens ("6pt", "0") to twips (1/20th of a point)
- Line spacing resolution from CSS-like line-height tokens
- Table width hints (percentage or points)

Every conversion here is pure and total: malformed tokens resolve to the
supplied default instead of raising.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

TWIPS_PER_POINT = 20
HALF_POINTS_PER_POINT = 2
EIGHTH_POINTS_PER_POINT = 8
DEFAULT_FONT_SIZE_PT = 11
AUTO_LINE_HEIGHT = 1.15

# Fallback sizes for heading blocks whose size token is unusable
HEADING_FALLBACK_SIZES_PT = {
    1: 22,
    2: 16,
    3: 13,
}

_POINT_SIZE_RE = re.compile(r"^pt(\d+)$")
_POINT_LENGTH_RE = re.compile(r"^(\d+(?:\.\d+)?)pt$")
_PERCENT_RE = re.compile(r"^(\d+(?:\.\d+)?)%$")


# ============================================================================
# Rounding and Basic Conversions
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def points_to_twips(points: float) -> int:
    """Convert points to twips."""
    return round_half_up(points * TWIPS_PER_POINT)


def to_half_points(points: float) -> int:
    """Convert points to half-points (the unit of ``w:sz``)."""
    return round_half_up(points * HALF_POINTS_PER_POINT)


def twips_to_eighth_points(twips: int) -> int:
    """Convert twips to eighth-points (the unit of border ``w:sz``)."""
    return round_half_up(twips * EIGHTH_POINTS_PER_POINT / TWIPS_PER_POINT)


# ============================================================================
# Token Parsing
# ============================================================================

def parse_point_size(token: Optional[str], default: int = DEFAULT_FONT_SIZE_PT) -> int:
    """
    Parse a font size category token.

    Args:
        token: Token of the form ``pt<N>``
        default: Value returned when the token is absent or malformed

    Returns:
        Size in whole points
    """
    if not token:
        return default
    match = _POINT_SIZE_RE.match(token)
    if match:
        return int(match.group(1))
    logger.debug(f"Unparsable font size token {token!r}, using {default}pt")
    return default


def parse_length_to_twips(token: Optional[str], default_twips: int = 0) -> int:
    """
    Parse a length token such as ``"6pt"`` into twips.

    Args:
        token: ``"<number>pt"``, ``"0"`` or ``"0pt"``
        default_twips: Value returned when the token is absent or unparsable

    Returns:
        Length in twips
    """
    if not token:
        return default_twips
    if token in ("0", "0pt"):
        return 0
    match = _POINT_LENGTH_RE.match(token)
    if match:
        return points_to_twips(float(match.group(1)))
    logger.debug(f"Unparsable length token {token!r}, using {default_twips} twips")
    return default_twips


@dataclass(frozen=True)
class LineSpacing:
    """Paragraph line spacing expressed in twips."""
    mode: str  # "auto" or "exact"
    value: int


def resolve_line_spacing(line_height: Optional[str], font_size_pt: int) -> LineSpacing:
    """
    Resolve a line-height token against a font size.

    ``"normal"`` or an absent token gives auto spacing at 1.15x the font size;
    a bare positive multiplier gives exact spacing at multiplier x font size.
    """
    if line_height and line_height != "normal":
        try:
            multiplier = float(line_height)
        except ValueError:
            multiplier = 0.0
        if multiplier > 0 and math.isfinite(multiplier):
            return LineSpacing("exact", points_to_twips(font_size_pt * multiplier))
        logger.debug(f"Unparsable line height {line_height!r}, using auto spacing")
    return LineSpacing("auto", points_to_twips(font_size_pt * AUTO_LINE_HEIGHT))


def font_size_half_points(category: Optional[str], heading_level: Optional[int] = None) -> int:
    """
    Resolve a font size category to half-points.

    A malformed (present but unparsable) category on a heading block falls
    back to the heading's conventional size instead of the body default.
    """
    points = parse_point_size(category)
    if category and not _POINT_SIZE_RE.match(category) and heading_level is not None:
        points = HEADING_FALLBACK_SIZES_PT.get(heading_level, DEFAULT_FONT_SIZE_PT)
    return to_half_points(points)


def parse_width(token: Optional[str], default_percent: float = 100.0) -> Tuple[str, float]:
    """
    Parse a table width hint.

    Returns:
        ``("pct", percent)`` or ``("dxa", twips)``
    """
    if token:
        match = _PERCENT_RE.match(token)
        if match:
            return "pct", float(match.group(1))
        twips = parse_length_to_twips(token, default_twips=-1)
        if twips > 0:
            return "dxa", float(twips)
    return "pct", default_percent
