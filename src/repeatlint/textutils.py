from __future__ import annotations

import unicodedata

NORMALIZATION_MODES = ("none", "casefold", "nfkc", "nfkc_casefold")

# Scripts whose runs are extended by the iteration and prolonged-sound marks.
JAPANESE_SCRIPTS = frozenset({"hiragana", "katakana", "han"})

_CONTINUATION_MARKS = frozenset(
    {
        "ー",  # prolonged sound mark
        "々",  # kanji iteration mark
        "ゝ",
        "ゞ",
        "ヽ",
        "ヾ",
    }
)


def normalize_text(value: str, mode: str = "nfkc_casefold") -> str:
    """Normalize a token so rules compare surface forms consistently."""
    if mode == "none":
        return value
    if mode in ("nfkc", "nfkc_casefold"):
        value = unicodedata.normalize("NFKC", value)
    if mode in ("casefold", "nfkc_casefold"):
        value = value.casefold()
    return value


def script_class(char: str) -> str:
    """Return the coarse script class used to segment text into tokens."""
    if char.isspace():
        return "whitespace"
    code = ord(char)
    if 0x3041 <= code <= 0x309F:
        return "hiragana"
    if 0x30A0 <= code <= 0x30FF or 0x31F0 <= code <= 0x31FF or 0xFF66 <= code <= 0xFF9F:
        return "katakana"
    if (
        0x4E00 <= code <= 0x9FFF
        or 0x3400 <= code <= 0x4DBF
        or 0xF900 <= code <= 0xFAFF
        or 0x20000 <= code <= 0x3FFFF
        or 0x3005 <= code <= 0x3007
    ):
        return "han"
    if char.isalnum():
        return "alnum"
    return "punct"


def is_run_continuation(char: str) -> bool:
    """True for kana/kanji marks that extend the preceding Japanese run."""
    return char in _CONTINUATION_MARKS


def is_combining(char: str) -> bool:
    """True for marks that attach to the preceding character (combining, VS, ZWJ)."""
    return unicodedata.category(char) in ("Mn", "Me", "Mc") or char == "\u200d"
