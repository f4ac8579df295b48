from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class TokenKind(str, Enum):
    CONTENT = "content"
    WHITESPACE = "whitespace"


class Category(str, Enum):
    """Repetition class reported by a rule."""

    WORD_REPEAT = "word-repeat"
    PHRASE_REPEAT = "phrase-repeat"
    ENDING_REPEAT = "ending-repeat"


class Severity(IntEnum):
    INFO = 1
    WARNING = 2
    ERROR = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(slots=True)
class Document:
    """Represents an input document."""

    doc_id: str
    text: str


@dataclass(frozen=True, slots=True)
class Token:
    """Represents a token and its inclusive-exclusive character offsets."""

    text: str
    start_char: int
    end_char: int
    kind: TokenKind = TokenKind.CONTENT
    script: str = "alnum"

    @property
    def is_word(self) -> bool:
        """True for content tokens that rules compare (everything but punctuation)."""
        return self.kind is TokenKind.CONTENT and self.script != "punct"


@dataclass(frozen=True, slots=True)
class Flag:
    """A single rule's claim that a character range is repetitive."""

    start_char: int
    end_char: int
    category: Category
    severity: Severity = Severity.WARNING


@dataclass(frozen=True, slots=True)
class Span:
    """A merged, non-overlapping highlight region."""

    start_char: int
    end_char: int
    categories: frozenset[Category]
    severity: Severity

    def sorted_categories(self) -> list[Category]:
        return sorted(self.categories, key=lambda category: category.value)


@dataclass(slots=True)
class LintResult:
    """Everything produced by one analysis call."""

    text: str
    tokens: list[Token] = field(default_factory=list)
    flags: list[Flag] = field(default_factory=list)
    spans: list[Span] = field(default_factory=list)
    markup: str = ""


@dataclass(slots=True)
class Sentence:
    """A run of tokens closed by terminal punctuation (or the end of text)."""

    start_char: int
    end_char: int
    words: list[Token] = field(default_factory=list)
