"""
Tests for font resolution.
"""

import pytest
import sys
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent / "lipikor"))

from utils.fonts import (
    CURATED_ARABIC_FONTS,
    CURATED_BENGALI_FONTS,
    TargetProfile,
    get_profile,
    parse_profile,
    resolve_font,
)
from utils.scripts import ScriptClass


class TestProfileDefaults:
    """Tests for the per-profile font tables."""

    @pytest.mark.parametrize("script,expected", [
        (ScriptClass.BENGALI, "SutonnyOMJ"),
        (ScriptClass.ARABIC, "Traditional Arabic"),
        (ScriptClass.LATIN, "Times New Roman"),
        (ScriptClass.DIGIT, "Times New Roman"),
        (ScriptClass.NEUTRAL, "Times New Roman"),
        (ScriptClass.OTHER, "Calibri"),
    ])
    def test_word_profile(self, script, expected):
        assert resolve_font(script, None, TargetProfile.WORD) == expected

    @pytest.mark.parametrize("script,expected", [
        (ScriptClass.BENGALI, "Tiro Bangla"),
        (ScriptClass.ARABIC, "Noto Naskh Arabic"),
        (ScriptClass.LATIN, "Open Sans"),
        (ScriptClass.OTHER, "Open Sans"),
    ])
    def test_gdocs_profile(self, script, expected):
        assert resolve_font(script, None, TargetProfile.GDOCS) == expected

    def test_base_fonts(self):
        assert get_profile(TargetProfile.WORD).base_font == "Calibri"
        assert get_profile(TargetProfile.GDOCS).base_font == "Open Sans"


class TestFontHints:
    """Tests for author font hints."""

    @pytest.mark.parametrize("profile", list(TargetProfile))
    @pytest.mark.parametrize("font", sorted(CURATED_BENGALI_FONTS))
    def test_curated_bengali_hint_is_verbatim(self, font, profile):
        assert resolve_font(ScriptClass.BENGALI, font, profile) == font

    @pytest.mark.parametrize("profile", list(TargetProfile))
    @pytest.mark.parametrize("font", sorted(CURATED_ARABIC_FONTS))
    def test_curated_arabic_hint_is_verbatim(self, font, profile):
        assert resolve_font(ScriptClass.ARABIC, font, profile) == font

    def test_curated_hint_for_other_script_ignored(self):
        """A Bengali font hint does not leak onto Latin runs."""
        assert resolve_font(ScriptClass.LATIN, "Kalpurush", TargetProfile.WORD) == "Times New Roman"
        assert resolve_font(ScriptClass.ARABIC, "Kalpurush", TargetProfile.GDOCS) == "Noto Naskh Arabic"

    @pytest.mark.parametrize("hint,expected", [
        ("arabic", "Traditional Arabic"),
        ("arabic-naskh", "Traditional Arabic"),
        ("arabic-kufi", "Traditional Arabic"),
        ("arabic-modern-sans", "Arial"),
    ])
    def test_word_arabic_aliases(self, hint, expected):
        assert resolve_font(ScriptClass.ARABIC, hint, TargetProfile.WORD) == expected

    def test_gdocs_ignores_generic_hints(self):
        assert resolve_font(ScriptClass.ARABIC, "arabic-modern-sans", TargetProfile.GDOCS) == "Noto Naskh Arabic"
        assert resolve_font(ScriptClass.LATIN, "serif", TargetProfile.GDOCS) == "Open Sans"

    def test_unknown_hint_uses_default(self):
        assert resolve_font(ScriptClass.BENGALI, "Comic Sans", TargetProfile.WORD) == "SutonnyOMJ"

    def test_resolution_is_pure(self):
        """Same inputs always give the same font."""
        for profile in TargetProfile:
            for script in ScriptClass:
                for hint in (None, "default", "Cairo", "arabic", "Kalpurush"):
                    first = resolve_font(script, hint, profile)
                    assert all(resolve_font(script, hint, profile) == first for _ in range(3))


class TestParseProfile:
    """Tests for profile name parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("word", TargetProfile.WORD),
        ("WORD", TargetProfile.WORD),
        ("A", TargetProfile.WORD),
        ("gdocs", TargetProfile.GDOCS),
        ("b", TargetProfile.GDOCS),
        (None, TargetProfile.GDOCS),
        ("", TargetProfile.GDOCS),
        ("libreoffice", TargetProfile.GDOCS),
    ])
    def test_parse(self, value, expected):
        assert parse_profile(value) == expected

    def test_custom_default(self):
        assert parse_profile("nope", default=TargetProfile.WORD) == TargetProfile.WORD
