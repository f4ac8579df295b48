from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Sequence

from ..models import Category, Flag, Token

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from ..config import RepeatLintConfig


class RepetitionRule(ABC):
    """Abstract detector that flags repetitive ranges in a token stream."""

    name: str
    category: Category

    @abstractmethod
    def detect(
        self, tokens: Sequence[Token], config: "RepeatLintConfig"
    ) -> List[Flag]:
        """Return the flags this rule raises for ``tokens``."""
        raise NotImplementedError
