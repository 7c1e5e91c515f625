# proofing/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Source(str, Enum):
    ENGINE = "engine"
    PATTERN = "pattern"
    CLAUSE = "clause"
    AI = "ai"


# Lower wins when two lints start at the same offset
SOURCE_PRIORITY = {
    Source.ENGINE: 0,
    Source.PATTERN: 1,
    Source.CLAUSE: 2,
    Source.AI: 3,
}


class Category(str, Enum):
    SPELLING = "spelling"
    GRAMMAR = "grammar"
    STYLE = "style"


class SuggestionKind(str, Enum):
    REPLACE_WITH = "ReplaceWith"
    REMOVE = "Remove"


_SPELLING_KINDS = {"Spelling", "Typo"}
_STYLE_KINDS = {
    "Enhancement",
    "Readability",
    "Style",
    "Redundancy",
    "WordChoice",
    "Repetition",
}


def categorize(kind: str) -> Category:
    """
    Map a lint kind onto one of the three visual buckets.

    Agreement, Grammar, Punctuation, Capitalization and anything unknown
    land in grammar.
    """
    if kind in _SPELLING_KINDS:
        return Category.SPELLING
    if kind in _STYLE_KINDS:
        return Category.STYLE
    return Category.GRAMMAR


@dataclass(frozen=True)
class Span:
    start: int
    end: int

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and self.end > other.start

    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Suggestion:
    text: str
    kind: SuggestionKind = SuggestionKind.REPLACE_WITH

    @classmethod
    def of(cls, text: str) -> "Suggestion":
        if text == "":
            return cls("", SuggestionKind.REMOVE)
        return cls(text, SuggestionKind.REPLACE_WITH)


@dataclass
class Lint:
    span: Span
    message: str
    kind: str
    category: Category
    problem_text: str
    source: Source
    suggestions: List[Suggestion] = field(default_factory=list)
    kind_pretty: str = ""
    rule_id: str = ""

    @classmethod
    def from_text(
        cls,
        text: str,
        start: int,
        end: int,
        message: str,
        kind: str,
        source: Source,
        suggestions: Optional[List[str]] = None,
        category: Optional[Category] = None,
        kind_pretty: str = "",
        rule_id: str = "",
    ) -> "Lint":
        # problem_text is a snapshot of the text at creation time
        return cls(
            span=Span(start, end),
            message=message,
            kind=kind,
            category=category if category is not None else categorize(kind),
            problem_text=text[start:end],
            source=source,
            suggestions=[Suggestion.of(s) for s in (suggestions or [])],
            kind_pretty=kind_pretty or kind,
            rule_id=rule_id,
        )

    @property
    def fixable(self) -> bool:
        return bool(self.suggestions)


@dataclass
class Segment:
    start: int
    end: int
    node: Optional[object] = None
    synthetic: bool = False
    char: Optional[str] = None
