from __future__ import annotations

import logging
from itertools import groupby
from typing import TYPE_CHECKING, List, Sequence, Tuple

from ..models import Category, Flag, Sentence, Severity, Token
from ..textutils import normalize_text
from ..windowing import split_sentences
from .base import RepetitionRule

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import RepeatLintConfig

logger = logging.getLogger(__name__)


class EndingRepeatRule(RepetitionRule):
    """
    Flag monotonous sentence endings.

    The ending of a sentence is its last ``ending_length`` words before the
    terminator. A final hiragana word contributes only its last
    ``ending_kana_chars`` characters, so "晴れだ" and "雨だ" both end in "だ".
    ``min_ending_run`` or more consecutive sentences sharing an
    ending are flagged sentence by sentence. Sentences without words are
    skipped and do not interrupt a run.
    """

    name = "ending_repeat"
    category = Category.ENDING_REPEAT

    def detect(
        self, tokens: Sequence[Token], config: "RepeatLintConfig"
    ) -> List[Flag]:
        sentences = [
            sentence
            for sentence in split_sentences(tokens, config.sentence_terminators)
            if sentence.words
        ]
        flags: List[Flag] = []
        keyed = ((_ending(s, config), s) for s in sentences)
        for _, group in groupby(keyed, key=lambda item: item[0]):
            run = [sentence for _, sentence in group]
            if len(run) < config.min_ending_run:
                continue
            flags.extend(
                Flag(
                    start_char=sentence.start_char,
                    end_char=sentence.end_char,
                    category=self.category,
                    severity=Severity.INFO,
                )
                for sentence in run
            )

        logger.debug(
            "%s: %d flag(s) over %d sentence(s)", self.name, len(flags), len(sentences)
        )
        return flags


def _ending(sentence: Sentence, config: "RepeatLintConfig") -> Tuple[str, ...]:
    tail = [
        normalize_text(word.text, config.normalization)
        for word in sentence.words[-config.ending_length :]
    ]
    if sentence.words[-1].script == "hiragana":
        # Okurigana and the closing particle share one run ("晴れだ" -> "れだ").
        tail[-1] = tail[-1][-config.ending_kana_chars :]
    return tuple(tail)
