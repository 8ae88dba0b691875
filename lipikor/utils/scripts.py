"""
Script segmentation for multi-script text.

Splits a line into minimal runs of one script class so each run can be
given a font suited to its script. Digits, whitespace and punctuation never
start a run of their own; they join whichever run is open.
"""

import logging
import re
from enum import Enum
from typing import Iterator, Tuple

from .model import Language

logger = logging.getLogger(__name__)


class ScriptClass(Enum):
    """Coarse character classification used for font selection."""
    BENGALI = "bengali"
    ARABIC = "arabic"
    LATIN = "latin"
    DIGIT = "digit"
    NEUTRAL = "neutral"
    OTHER = "other"


BENGALI_RE = re.compile(r"[\u0980-\u09FF]")
ARABIC_RE = re.compile(r"[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF]")
# ASCII letters plus accented Latin letters (U+00D7 and U+00F7 are signs)
LATIN_RE = re.compile(r"[a-zA-Z\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u024F]")
DIGIT_RE = re.compile(r"[0-9]")
NEUTRAL_RE = re.compile(r"[\s.,!?;:'\"(){}\[\]\-@#$%^&*+=_<>/\\|~`]")

_ABSORBED = (ScriptClass.DIGIT, ScriptClass.NEUTRAL)


def classify_char(char: str) -> ScriptClass:
    """Classify a single character."""
    if BENGALI_RE.match(char):
        return ScriptClass.BENGALI
    if ARABIC_RE.match(char):
        return ScriptClass.ARABIC
    if LATIN_RE.match(char):
        return ScriptClass.LATIN
    if DIGIT_RE.match(char):
        return ScriptClass.DIGIT
    if NEUTRAL_RE.match(char):
        return ScriptClass.NEUTRAL
    return ScriptClass.OTHER


def initial_script(line: str, language: Language) -> ScriptClass:
    """
    Script of the run opened at the start of ``line``.

    When the first character carries no script of its own, the declared
    language decides, as long as the line contains no competing script.
    """
    first = classify_char(line[0])
    if first not in (ScriptClass.DIGIT, ScriptClass.NEUTRAL, ScriptClass.OTHER):
        return first
    if language == Language.BN and not (LATIN_RE.search(line) or ARABIC_RE.search(line)):
        return ScriptClass.BENGALI
    if language == Language.AR and not (LATIN_RE.search(line) or BENGALI_RE.search(line)):
        return ScriptClass.ARABIC
    return ScriptClass.LATIN


def segment_text(line: str, language: Language = Language.UNKNOWN) -> Iterator[Tuple[str, ScriptClass]]:
    """
    Partition ``line`` into ``(substring, script)`` runs.

    The runs concatenate back to ``line`` exactly, none is empty, and no two
    adjacent runs share a script. An empty line yields nothing.

    Args:
        line: Text without line breaks
        language: Declared language of the owning block or cell

    Yields:
        ``(text, ScriptClass)`` pairs in order
    """
    if not line:
        return

    current_script = initial_script(line, language)
    start = 0
    for index, char in enumerate(line):
        script = classify_char(char)
        if script in _ABSORBED or script == current_script:
            continue
        if index > start:
            yield line[start:index], current_script
        start = index
        current_script = script
    yield line[start:], current_script
