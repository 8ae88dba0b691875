"""
Font resolution per target application.

Fonts are chosen from the script class of a run, the author's font hint and
the target profile. Run text never influences the choice beyond its script
class, so a script always renders with one font within a profile.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .scripts import ScriptClass


class TargetProfile(Enum):
    """Consumer application the document is tuned for."""
    WORD = "word"
    GDOCS = "gdocs"


CURATED_BENGALI_FONTS = frozenset([
    "SutonnyOMJ", "Kalpurush", "SolaimanLipi", "Nikosh", "Vrinda",
    "Tiro Bangla", "Hind Siliguri", "Noto Sans Bengali", "Noto Serif Bengali",
])

CURATED_ARABIC_FONTS = frozenset([
    "Noto Naskh Arabic", "Noto Sans Arabic", "Cairo", "Lateef",
    "Noto Kufi Arabic", "Traditional Arabic", "Arial Unicode MS",
])


@dataclass(frozen=True)
class FontProfile:
    """Font table for one target profile."""
    base_font: str
    bengali: str
    arabic: str
    latin: str
    other: str
    # Generic hint keys mapped to concrete fonts, per script
    aliases: Dict[ScriptClass, Dict[str, str]] = field(default_factory=dict)

    def default_for(self, script: ScriptClass) -> str:
        if script == ScriptClass.BENGALI:
            return self.bengali
        if script == ScriptClass.ARABIC:
            return self.arabic
        if script in (ScriptClass.LATIN, ScriptClass.DIGIT, ScriptClass.NEUTRAL):
            return self.latin
        return self.other


FONT_PROFILES: Dict[TargetProfile, FontProfile] = {
    TargetProfile.WORD: FontProfile(
        base_font="Calibri",
        bengali="SutonnyOMJ",
        arabic="Traditional Arabic",
        latin="Times New Roman",
        other="Calibri",
        aliases={
            ScriptClass.ARABIC: {
                "arabic": "Traditional Arabic",
                "arabic-naskh": "Traditional Arabic",
                "arabic-kufi": "Traditional Arabic",
                "arabic-modern-sans": "Arial",
            },
        },
    ),
    TargetProfile.GDOCS: FontProfile(
        base_font="Open Sans",
        bengali="Tiro Bangla",
        arabic="Noto Naskh Arabic",
        latin="Open Sans",
        other="Open Sans",
    ),
}

CURATED_FONTS: Dict[ScriptClass, FrozenSet[str]] = {
    ScriptClass.BENGALI: CURATED_BENGALI_FONTS,
    ScriptClass.ARABIC: CURATED_ARABIC_FONTS,
}


def get_profile(profile: TargetProfile) -> FontProfile:
    return FONT_PROFILES[profile]


def parse_profile(value: Optional[str], default: TargetProfile = TargetProfile.GDOCS) -> TargetProfile:
    """Parse a profile name ("word"/"gdocs", or "A"/"B")."""
    if not value:
        return default
    key = value.strip().lower()
    if key == "a":
        return TargetProfile.WORD
    if key == "b":
        return TargetProfile.GDOCS
    try:
        return TargetProfile(key)
    except ValueError:
        return default


def resolve_font(script: ScriptClass, font_hint: Optional[str], profile: TargetProfile) -> str:
    """
    Resolve the concrete font for a run.

    Args:
        script: Script class of the run
        font_hint: Author-supplied font family hint (may be a generic key)
        profile: Target application profile

    Returns:
        Font name
    """
    table = FONT_PROFILES[profile]
    if font_hint:
        if font_hint in CURATED_FONTS.get(script, ()):
            return font_hint
        alias = table.aliases.get(script, {}).get(font_hint)
        if alias:
            return alias
    return table.default_for(script)
