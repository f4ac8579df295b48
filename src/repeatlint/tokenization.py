from __future__ import annotations

import re
from typing import Iterable, List

from .models import Token, TokenKind
from .textutils import (
    JAPANESE_SCRIPTS,
    is_combining,
    is_run_continuation,
    script_class,
)

# Characters allowed inside an alphanumeric run when surrounded by alphanumerics.
WORD_JOINERS = frozenset("'’-")


class InvalidInputError(ValueError):
    """Raised when the input cannot be interpreted as text."""


def ensure_text(value: object) -> str:
    """Return ``value`` as a well-formed ``str`` or raise InvalidInputError."""
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidInputError(f"Input is not valid UTF-8: {exc}") from exc
    if not isinstance(value, str):
        raise InvalidInputError(f"Expected text, got {type(value).__name__}.")
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise InvalidInputError(f"Input contains malformed characters: {exc}") from exc
    return value


def tokenize(text: str | bytes, lexicon: Iterable[str] = ()) -> List[Token]:
    """
    Split text into content and whitespace tokens with character offsets.

    Content tokens are runs of one script class (hiragana, katakana, han,
    alnum); every punctuation mark is a token of its own. This is a
    heuristic for unsegmented scripts, not morphological analysis: particles
    glued to a hiragana run stay in that run. Entries of ``lexicon`` are
    always emitted as single tokens and may not contain whitespace
    (ValueError). Joining the token texts reproduces the
    input exactly.
    """
    text = ensure_text(text)
    if not text:
        return []

    matcher = _compile_lexicon(lexicon)
    tokens: List[Token] = []
    length = len(text)
    start = 0
    current: str | None = None
    idx = 0

    while idx < length:
        char = text[idx]
        if matcher is not None and not char.isspace():
            match = matcher.match(text, idx)
            if match is not None:
                _flush(tokens, text, start, idx, current)
                start, idx, current = idx, match.end(), "name"
                continue

        if _extends_run(text, idx, current):
            idx += 1
            continue

        _flush(tokens, text, start, idx, current)
        start = idx
        current = script_class(char)
        idx += 1

    _flush(tokens, text, start, length, current)
    return tokens


def _extends_run(text: str, idx: int, current: str | None) -> bool:
    if current is None:
        return False
    char = text[idx]
    if current != "whitespace" and is_combining(char):
        return True
    if current in JAPANESE_SCRIPTS and is_run_continuation(char):
        return True
    cls = script_class(char)
    if cls == current:
        return cls not in ("punct", "name")
    if current == "alnum" and char in WORD_JOINERS:
        return (
            idx + 1 < len(text)
            and script_class(text[idx + 1]) == "alnum"
            and text[idx - 1] not in WORD_JOINERS
        )
    return False


def _flush(
    tokens: List[Token], text: str, start: int, end: int, script: str | None
) -> None:
    if script is None or end <= start:
        return
    kind = TokenKind.WHITESPACE if script == "whitespace" else TokenKind.CONTENT
    tokens.append(
        Token(
            text=text[start:end],
            start_char=start,
            end_char=end,
            kind=kind,
            script=script,
        )
    )


def _compile_lexicon(lexicon: Iterable[str]) -> re.Pattern[str] | None:
    entries = {entry for entry in lexicon if entry}
    spaced = sorted(entry for entry in entries if any(c.isspace() for c in entry))
    if spaced:
        # Whitespace must stay a token of its own.
        raise ValueError(f"Lexicon entries may not contain whitespace: {spaced!r}")
    entries = sorted(entries, key=lambda entry: (-len(entry), entry))
    if not entries:
        return None
    return re.compile("|".join(re.escape(entry) for entry in entries))
