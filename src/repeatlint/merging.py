from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from typing import Iterable, List, Sequence, Tuple

from .models import Category, Flag, Severity, Span, Token

logger = logging.getLogger(__name__)


def merge(flags: Iterable[Flag], tokens: Sequence[Token] | None = None) -> List[Span]:
    """
    Combine overlapping flags into sorted, disjoint spans.

    Flags are sorted by start, then longest first, and swept once; a flag
    that shares at least one character with the current span joins it.
    Spans that merely touch stay separate. When ``tokens`` are given every
    flag is first widened to the enclosing token boundaries, so no span
    ever splits a token. Zero-length flags are dropped.
    """
    aligned: List[Tuple[int, int, Flag]] = []
    starts: List[int] = [token.start_char for token in tokens] if tokens else []
    ends: List[int] = [token.end_char for token in tokens] if tokens else []
    for flag in flags:
        start, end = flag.start_char, flag.end_char
        if end <= start:
            continue
        if starts:
            start, end = _snap(starts, ends, start, end)
        aligned.append((start, end, flag))

    aligned.sort(
        key=lambda item: (
            item[0],
            item[0] - item[1],
            item[2].category.value,
            int(item[2].severity),
        )
    )

    spans: List[Span] = []
    current_start = current_end = 0
    categories: set[Category] = set()
    severity = Severity.INFO
    for start, end, flag in aligned:
        if categories and start < current_end:
            current_end = max(current_end, end)
            categories.add(flag.category)
            severity = max(severity, flag.severity)
            continue
        if categories:
            spans.append(Span(current_start, current_end, frozenset(categories), severity))
        current_start, current_end = start, end
        categories = {flag.category}
        severity = flag.severity
    if categories:
        spans.append(Span(current_start, current_end, frozenset(categories), severity))

    logger.debug("Merged %d flag(s) into %d span(s)", len(aligned), len(spans))
    return spans


def _snap(starts: List[int], ends: List[int], start: int, end: int) -> Tuple[int, int]:
    """Widen ``[start, end)`` outward to token boundaries, clamped to the text."""
    start_idx = max(0, bisect_right(starts, start) - 1)
    end_idx = min(len(ends) - 1, bisect_left(ends, end))
    return starts[start_idx], ends[end_idx]
