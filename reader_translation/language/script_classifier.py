"""
Heuristic script/language classification.

Pure and synchronous: Unicode block counts decide between the CJK scripts,
diacritic signatures decide between the Latin-script languages.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..models import LanguageCode

CJK_RATIO_THRESHOLD = 0.3

# Checked in order; first match wins.
DIACRITIC_SIGNATURES: tuple[tuple[str, re.Pattern], ...] = (
    (LanguageCode.ES.value, re.compile(r"[àáâãäåæçèéêëìíîïðñòóôõöøùúûüýþÿ]", re.IGNORECASE)),
    (LanguageCode.FR.value, re.compile(r"[àâæçéèêëïîôœùûüÿ]", re.IGNORECASE)),
    (LanguageCode.DE.value, re.compile(r"[äöüß]", re.IGNORECASE)),
    (LanguageCode.PT.value, re.compile(r"[àáâãçéêíóôõú]", re.IGNORECASE)),
    (LanguageCode.IT.value, re.compile(r"[àáéèíìóòúù]", re.IGNORECASE)),
)


@dataclass
class ScriptCounts:
    han: int = 0
    hiragana: int = 0
    katakana: int = 0
    hangul: int = 0
    latin: int = 0

    @property
    def cjk(self) -> int:
        return self.han + self.hiragana + self.katakana + self.hangul


def _is_hangul(code: int) -> bool:
    return 0xAC00 <= code <= 0xD7AF or 0x1100 <= code <= 0x11FF or 0x3130 <= code <= 0x318F


def _is_ascii_letter(ch: str) -> bool:
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def is_cjk_char(ch: str) -> bool:
    """True for han, kana and hangul (incl. jamo) code points."""
    code = ord(ch)
    return (
        0x4E00 <= code <= 0x9FFF
        or 0x3040 <= code <= 0x30FF
        or _is_hangul(code)
    )


def contains_latin(text: str) -> bool:
    return any(_is_ascii_letter(ch) for ch in text or "")


def count_scripts(text: str) -> ScriptCounts:
    counts = ScriptCounts()
    for ch in text:
        code = ord(ch)
        if 0x4E00 <= code <= 0x9FFF:
            counts.han += 1
        elif 0x3040 <= code <= 0x309F:
            counts.hiragana += 1
        elif 0x30A0 <= code <= 0x30FF:
            counts.katakana += 1
        elif _is_hangul(code):
            counts.hangul += 1
        elif _is_ascii_letter(ch):
            counts.latin += 1
    return counts


def classify(text: str) -> str:
    """Return the heuristic language code for ``text``; never raises."""
    clean = (text or "").strip()
    if not clean:
        return LanguageCode.EN.value

    counts = count_scripts(clean)
    if counts.cjk / len(clean) > CJK_RATIO_THRESHOLD:
        # hangul > kana > han is a tie-break, not a frequency ranking
        if counts.hangul > 0:
            return LanguageCode.KO.value
        if counts.hiragana > 0 or counts.katakana > 0:
            return LanguageCode.JA.value
        return LanguageCode.ZH.value

    for code, pattern in DIACRITIC_SIGNATURES:
        if pattern.search(clean):
            return code
    return LanguageCode.EN.value


__all__ = ["classify", "contains_latin", "count_scripts", "is_cjk_char", "ScriptCounts"]
