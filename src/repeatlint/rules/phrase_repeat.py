from __future__ import annotations

import logging
from collections import defaultdict
from itertools import accumulate
from typing import TYPE_CHECKING, Dict, List, Sequence, Tuple

from ..models import Category, Flag, Severity, Token
from ..textutils import normalize_text
from ..windowing import cluster_occurrences, word_tokens
from .base import RepetitionRule

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import RepeatLintConfig

logger = logging.getLogger(__name__)


class PhraseRepeatRule(RepetitionRule):
    """
    Flag runs of words that are repeated nearby.

    Phrase lengths run from ``max_phrase_length`` down to
    ``min_phrase_length`` so that a longer match claims its words first; a
    shorter phrase occurrence that sits entirely inside an already flagged
    occurrence is not flagged again.
    """

    name = "phrase_repeat"
    category = Category.PHRASE_REPEAT

    def detect(
        self, tokens: Sequence[Token], config: "RepeatLintConfig"
    ) -> List[Flag]:
        words = word_tokens(tokens)
        keys = [normalize_text(word.text, config.normalization) for word in words]
        count = len(keys)
        longest = min(config.max_phrase_length, count // config.min_repeat_count)

        flags: List[Flag] = []
        covered: List[Tuple[int, int]] = []
        for length in range(longest, config.min_phrase_length - 1, -1):
            # reach[i]: furthest end of a longer flagged phrase starting at or before i.
            reach = _prefix_reach(covered, count)
            occurrences: Dict[Tuple[str, ...], List[int]] = defaultdict(list)
            for start in range(count - length + 1):
                occurrences[tuple(keys[start : start + length])].append(start)

            for starts in occurrences.values():
                if len(starts) < config.min_repeat_count:
                    continue
                for cluster in cluster_occurrences(starts, config.window, length):
                    if len(cluster) < config.min_repeat_count:
                        continue
                    for start in cluster:
                        end = start + length
                        if reach[start] >= end:
                            continue
                        covered.append((start, end))
                        flags.append(
                            Flag(
                                start_char=words[start].start_char,
                                end_char=words[end - 1].end_char,
                                category=self.category,
                                severity=Severity.WARNING,
                            )
                        )

        flags.sort(key=lambda flag: (flag.start_char, flag.end_char))
        logger.debug("%s: %d flag(s) over %d word(s)", self.name, len(flags), count)
        return flags


def _prefix_reach(intervals: List[Tuple[int, int]], count: int) -> List[int]:
    reach = [0] * count
    for start, end in intervals:
        reach[start] = max(reach[start], end)
    return list(accumulate(reach, max))
