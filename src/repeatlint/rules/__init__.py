from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Type

from .base import RepetitionRule
from .ending_repeat import EndingRepeatRule
from .phrase_repeat import PhraseRepeatRule
from .word_repeat import WordRepeatRule

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import RepeatLintConfig

__all__ = [
    "RepetitionRule",
    "WordRepeatRule",
    "PhraseRepeatRule",
    "EndingRepeatRule",
    "RULES",
    "create_rule",
    "build_rules_from_config",
]

# The closed set of rules, in evaluation order. Add a rule by adding an entry.
RULES: Dict[str, Type[RepetitionRule]] = {
    WordRepeatRule.name: WordRepeatRule,
    PhraseRepeatRule.name: PhraseRepeatRule,
    EndingRepeatRule.name: EndingRepeatRule,
}


def create_rule(name: str) -> RepetitionRule:
    """Factory for building rules by name ("word_repeat" or "word-repeat")."""
    normalized = name.lower().strip().replace("-", "_")
    rule_cls = RULES.get(normalized)
    if rule_cls is None:
        raise ValueError(f"Unknown rule '{name}'.")
    return rule_cls()


def build_rules_from_config(config: "RepeatLintConfig") -> List[RepetitionRule]:
    """Instantiate the enabled rules in their fixed order."""
    enabled = set(config.rules.enabled())
    return [rule_cls() for name, rule_cls in RULES.items() if name in enabled]
