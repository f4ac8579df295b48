from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING, Dict, List, Sequence

from ..models import Category, Flag, Severity, Token
from ..textutils import normalize_text
from ..windowing import cluster_occurrences, word_tokens
from .base import RepetitionRule

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import RepeatLintConfig

logger = logging.getLogger(__name__)


class WordRepeatRule(RepetitionRule):
    """
    Flag words that recur within ``window`` words of each other.

    Every occurrence in a cluster of at least ``min_repeat_count`` equal
    words is flagged over its own extent. A word whose nearest repeat is
    directly adjacent ("のの", "the the") is an error; anything further away
    is a warning.
    """

    name = "word_repeat"
    category = Category.WORD_REPEAT

    def detect(
        self, tokens: Sequence[Token], config: "RepeatLintConfig"
    ) -> List[Flag]:
        words = word_tokens(tokens)
        mode = config.normalization
        ignored = {normalize_text(word, mode) for word in config.ignore_words}
        positions: Dict[str, List[int]] = defaultdict(list)

        for idx, token in enumerate(words):
            if token.script in config.ignore_scripts:
                continue
            if len(token.text) < config.min_word_length:
                continue
            key = normalize_text(token.text, mode)
            if key in ignored:
                continue
            positions[key].append(idx)

        flags: List[Flag] = []
        for occurrences in positions.values():
            if len(occurrences) < config.min_repeat_count:
                continue
            for cluster in cluster_occurrences(occurrences, config.window):
                if len(cluster) < config.min_repeat_count:
                    continue
                for pos, gap in zip(cluster, _nearest_gaps(cluster)):
                    token = words[pos]
                    flags.append(
                        Flag(
                            start_char=token.start_char,
                            end_char=token.end_char,
                            category=self.category,
                            severity=Severity.ERROR if gap == 0 else Severity.WARNING,
                        )
                    )

        flags.sort(key=lambda flag: (flag.start_char, flag.end_char))
        logger.debug("%s: %d flag(s) over %d word(s)", self.name, len(flags), len(words))
        return flags


def _nearest_gaps(cluster: List[int]) -> List[int]:
    """Words between each occurrence and its closest neighbour in the cluster."""
    gaps: List[int] = []
    for idx, pos in enumerate(cluster):
        candidates = []
        if idx > 0:
            candidates.append(pos - cluster[idx - 1] - 1)
        if idx + 1 < len(cluster):
            candidates.append(cluster[idx + 1] - pos - 1)
        gaps.append(min(candidates))
    return gaps
