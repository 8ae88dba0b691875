"""
Tests for script segmentation.
"""

import types

import pytest
import sys
from pathlib import Path

# Add package to path
sys.path.insert(0, str(Path(__file__).parent.parent / "lipikor"))

from utils.model import Language
from utils.scripts import ScriptClass, classify_char, initial_script, segment_text


SAMPLES = [
    "",
    " ",
    "Hello, world!",
    "Price: 100Tk ৫০০",
    "আমার সোনার বাংলা",
    "১২৩ টাকা (মাত্র)",
    "مرحبا بالعالم 2024",
    "(مرحبا) hello",
    "mixed বাংলা and عربي text.",
    "中文 text",
    "123 ... !!!",
    "café crème",
    "a\tb",
]


class TestClassifyChar:
    """Tests for per-character classification."""

    @pytest.mark.parametrize("char,expected", [
        ("a", ScriptClass.LATIN),
        ("Z", ScriptClass.LATIN),
        ("é", ScriptClass.LATIN),
        ("আ", ScriptClass.BENGALI),
        ("৫", ScriptClass.BENGALI),
        ("ب", ScriptClass.ARABIC),
        ("٣", ScriptClass.ARABIC),
        ("7", ScriptClass.DIGIT),
        (" ", ScriptClass.NEUTRAL),
        ("\t", ScriptClass.NEUTRAL),
        (",", ScriptClass.NEUTRAL),
        ("-", ScriptClass.NEUTRAL),
        ("中", ScriptClass.OTHER),
        ("×", ScriptClass.OTHER),
    ])
    def test_classes(self, char, expected):
        assert classify_char(char) == expected


class TestSegmentText:
    """Tests for run segmentation."""

    def test_is_lazy(self):
        """Segmentation returns a generator."""
        assert isinstance(segment_text("abc", Language.EN), types.GeneratorType)

    def test_empty_line(self):
        assert list(segment_text("", Language.BN)) == []

    @pytest.mark.parametrize("language", list(Language))
    @pytest.mark.parametrize("line", SAMPLES)
    def test_lossless_partition(self, line, language):
        """Runs concatenate back to the input."""
        runs = list(segment_text(line, language))
        assert "".join(text for text, _ in runs) == line
        assert all(text for text, _ in runs)

    @pytest.mark.parametrize("language", list(Language))
    @pytest.mark.parametrize("line", SAMPLES)
    def test_runs_are_minimal(self, line, language):
        """No two adjacent runs share a script."""
        scripts = [script for _, script in segment_text(line, language)]
        assert all(a != b for a, b in zip(scripts, scripts[1:]))

    def test_neutral_line_follows_bengali_context(self):
        """A line of digits and punctuation under bn is one Bengali run."""
        assert list(segment_text("123 ... !!!", Language.BN)) == [("123 ... !!!", ScriptClass.BENGALI)]

    def test_neutral_line_follows_arabic_context(self):
        assert list(segment_text("42, 7", Language.AR)) == [("42, 7", ScriptClass.ARABIC)]

    def test_neutral_line_defaults_to_latin(self):
        assert list(segment_text("42, 7", Language.EN)) == [("42, 7", ScriptClass.LATIN)]
        assert list(segment_text("42, 7", Language.UNKNOWN)) == [("42, 7", ScriptClass.LATIN)]

    def test_latin_start_ignores_declared_language(self):
        """
        A line starting with a Latin letter opens a Latin run even under bn.

        Two runs, not three: the space and ASCII digits are absorbed into the
        open Latin run, and minimal runs forbid splitting them off.
        """
        runs = list(segment_text("Price: 100Tk ৫০০", Language.BN))
        assert runs == [
            ("Price: 100Tk ", ScriptClass.LATIN),
            ("৫০০", ScriptClass.BENGALI),
        ]

    def test_competing_script_blocks_context_inference(self):
        """Leading punctuation is Latin when the line also holds Latin text."""
        runs = list(segment_text("(মাত্র) ok", Language.BN))
        assert runs == [
            ("(", ScriptClass.LATIN),
            ("মাত্র) ", ScriptClass.BENGALI),
            ("ok", ScriptClass.LATIN),
        ]

    def test_other_script_opens_its_own_run(self):
        runs = list(segment_text("中文 text", Language.EN))
        assert runs == [("中文 ", ScriptClass.OTHER), ("text", ScriptClass.LATIN)]

    def test_digits_absorbed_into_arabic(self):
        runs = list(segment_text("abc مرحبا 2024", Language.AR))
        assert runs == [("abc ", ScriptClass.LATIN), ("مرحبا 2024", ScriptClass.ARABIC)]

    def test_initial_script(self):
        assert initial_script("১২৩", Language.BN) == ScriptClass.BENGALI
        assert initial_script("1 a", Language.BN) == ScriptClass.LATIN
        assert initial_script("ب", Language.EN) == ScriptClass.ARABIC
