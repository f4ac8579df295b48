from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import Sentence, Token, TokenKind

# Closing brackets and quotes that stay with the sentence they close.
SENTENCE_CLOSERS = frozenset("」』）)】〕〉》］]”’\"'")

# Paired brackets whose contents never end the enclosing sentence.
BRACKET_OPENERS = frozenset("「『（(【〔〈《［[“")
BRACKET_CLOSERS = frozenset("」』）)】〕〉》］]”")


def word_tokens(tokens: Sequence[Token]) -> List[Token]:
    """Return the content tokens rules compare, in order."""
    return [token for token in tokens if token.is_word]


def cluster_occurrences(
    positions: Iterable[int], window: int, length: int = 1
) -> List[List[int]]:
    """
    Group occurrence positions whose gaps fit inside ``window``.

    Positions index the word sequence; each occurrence covers ``length``
    words. An occurrence overlapping the previously accepted one is skipped,
    so chained occurrences never share a word. Gaps count the words between
    the end of one occurrence and the start of the next.
    """
    clusters: List[List[int]] = []
    current: List[int] = []
    last_end: int | None = None
    for pos in sorted(positions):
        if last_end is not None and pos < last_end:
            continue
        if current and last_end is not None and pos - last_end <= window:
            current.append(pos)
        else:
            if current:
                clusters.append(current)
            current = [pos]
        last_end = pos + length
    if current:
        clusters.append(current)
    return clusters


def split_sentences(tokens: Sequence[Token], terminators: str) -> List[Sentence]:
    """
    Split the token stream into sentences at terminal punctuation.

    Terminators inside brackets (``「行くぞ！」と言った。``) do not end the
    sentence. A line break resets the bracket depth and closes a sentence
    whose last mark was a closing bracket, so dialogue lines stand alone.
    """
    sentences: List[Sentence] = []
    terminator_set = frozenset(terminators)
    start_char: int | None = None
    last_end = 0
    words: List[Token] = []
    depth = 0
    after_closer = False
    idx = 0
    count = len(tokens)

    while idx < count:
        token = tokens[idx]
        idx += 1
        if token.kind is TokenKind.WHITESPACE:
            if "\n" in token.text:
                depth = 0
                if after_closer and start_char is not None:
                    sentences.append(
                        Sentence(start_char=start_char, end_char=last_end, words=words)
                    )
                    start_char, words = None, []
            continue
        after_closer = False
        if start_char is None:
            start_char = token.start_char
        last_end = token.end_char
        if token.is_word:
            words.append(token)
            continue
        if token.text in BRACKET_OPENERS:
            depth += 1
            continue
        if token.text in BRACKET_CLOSERS:
            depth = max(0, depth - 1)
            after_closer = depth == 0
            continue
        if depth or token.text not in terminator_set:
            continue
        if not _is_boundary(tokens, idx - 1):
            continue
        # Runs like "！？」" close a single sentence.
        while idx < count and (
            tokens[idx].text in terminator_set or tokens[idx].text in SENTENCE_CLOSERS
        ):
            last_end = tokens[idx].end_char
            idx += 1
        sentences.append(Sentence(start_char=start_char, end_char=last_end, words=words))
        start_char, words = None, []

    if start_char is not None:
        sentences.append(Sentence(start_char=start_char, end_char=last_end, words=words))
    return sentences


def _is_boundary(tokens: Sequence[Token], idx: int) -> bool:
    # "3.14" and "e.g" keep their period inside the sentence.
    if idx == 0 or idx + 1 >= len(tokens):
        return True
    before, after = tokens[idx - 1], tokens[idx + 1]
    return not (before.script == "alnum" and after.script == "alnum")
