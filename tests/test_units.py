"""
Tests for unit and token parsing.
"""

import pytest
import sys
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent / "lipikor"))

from utils.units import (
    LineSpacing,
    font_size_half_points,
    parse_length_to_twips,
    parse_point_size,
    parse_width,
    resolve_line_spacing,
    round_half_up,
    to_half_points,
    twips_to_eighth_points,
)


class TestParsePointSize:
    """Tests for pt<N> size tokens."""

    @pytest.mark.parametrize("size", [8, 11, 12, 22, 72, 100])
    def test_valid_tokens(self, size):
        """Valid tokens return their number."""
        assert parse_point_size(f"pt{size}") == size

    @pytest.mark.parametrize("token", ["12", "pt", "PT12", "pt12.5", "12pt", "pt-3", "", None])
    def test_invalid_tokens_use_default(self, token):
        """Anything else falls back to the supplied default."""
        assert parse_point_size(token, 14) == 14

    def test_default_is_eleven(self):
        assert parse_point_size("bogus") == 11


class TestParseLength:
    """Tests for point lengths converted to twips."""

    def test_points_to_twips(self):
        assert parse_length_to_twips("6pt") == 120
        assert parse_length_to_twips("1.5pt") == 30

    def test_zero_literals(self):
        """Explicit zero tokens are zero regardless of default."""
        assert parse_length_to_twips("0", 200) == 0
        assert parse_length_to_twips("0pt", 200) == 0

    @pytest.mark.parametrize("token", [None, "", "5px", "abc", "pt5", "-2pt"])
    def test_unparsable_uses_default(self, token):
        assert parse_length_to_twips(token, 80) == 80


class TestLineSpacing:
    """Tests for line-height resolution."""

    def test_absent_is_auto(self):
        """No token gives auto spacing at 1.15x font size."""
        assert resolve_line_spacing(None, 11) == LineSpacing("auto", 253)

    def test_normal_is_auto(self):
        assert resolve_line_spacing("normal", 12) == LineSpacing("auto", 276)

    def test_multiplier_is_exact(self):
        assert resolve_line_spacing("1.5", 12) == LineSpacing("exact", 360)
        assert resolve_line_spacing("2", 10) == LineSpacing("exact", 400)

    @pytest.mark.parametrize("token", ["abc", "0", "-1", "nan", "inf"])
    def test_invalid_multiplier_is_auto(self, token):
        assert resolve_line_spacing(token, 11).mode == "auto"


class TestConversions:
    """Tests for derived conversions."""

    def test_half_points(self):
        assert to_half_points(22) == 44
        assert to_half_points(10.5) == 21

    def test_font_size_half_points(self):
        assert font_size_half_points("pt22") == 44
        assert font_size_half_points(None) == 22

    def test_heading_fallback_for_malformed_category(self):
        """A present but malformed category on a heading uses the heading size."""
        assert font_size_half_points("huge", heading_level=1) == 44
        assert font_size_half_points("huge", heading_level=2) == 32
        assert font_size_half_points("huge", heading_level=3) == 26
        assert font_size_half_points("huge", heading_level=5) == 22
        assert font_size_half_points("huge") == 22

    def test_border_units(self):
        assert twips_to_eighth_points(20) == 8
        assert twips_to_eighth_points(30) == 12

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(252.99999999999997) == 253

    def test_parse_width(self):
        assert parse_width("80%") == ("pct", 80.0)
        assert parse_width("400pt") == ("dxa", 8000.0)
        assert parse_width("500px") == ("pct", 100.0)
        assert parse_width(None) == ("pct", 100.0)
