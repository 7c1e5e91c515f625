# proofing/reviewer.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Protocol, Tuple

import spacy

from proofing.errors import AIUnavailable
from proofing.llm import TONES, LiteLLMRewriter
from proofing.models import Category, Lint, Source

logger = logging.getLogger(__name__)

Rewrite = Callable[[str, Optional[str]], Awaitable[Optional[str]]]

# Lazy-loaded sentence splitter; a blank pipeline needs no model download
_NLP = None


def _get_nlp() -> "spacy.language.Language":
    global _NLP
    if _NLP is None:
        nlp = spacy.blank("en")
        nlp.add_pipe("sentencizer")
        _NLP = nlp
    return _NLP


def split_sentences(text: str) -> List[Tuple[int, int]]:
    """[start, end) offsets of each sentence, trimmed of surrounding whitespace."""
    doc = _get_nlp()(text)
    spans: List[Tuple[int, int]] = []
    for sent in doc.sents:
        start, end = sent.start_char, sent.end_char
        while start < end and text[start].isspace():
            start += 1
        while end > start and text[end - 1].isspace():
            end -= 1
        if start < end:
            spans.append((start, end))
    return spans


def clean_output(raw: Optional[str]) -> Optional[str]:
    """Trim model output and strip one pair of wrapping quotes."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in "\"'":
        cleaned = cleaned[1:-1]
    return cleaned or None


@dataclass
class ReviewResult:
    available: bool
    lints: List[Lint] = field(default_factory=list)


@dataclass
class RewriteResult:
    available: bool
    text: Optional[str] = None


class AIReviewer(Protocol):
    async def proofread(self, text: str) -> ReviewResult:
        ...

    async def improve(self, text: str, tone: Optional[str] = None) -> RewriteResult:
        ...


def _check_tone(tone: Optional[str]) -> None:
    if tone is not None and tone not in TONES:
        raise ValueError(f"Unknown tone {tone!r}; expected one of {TONES}")


class UnavailableReviewer:
    async def proofread(self, text: str) -> ReviewResult:
        return ReviewResult(available=False)

    async def improve(self, text: str, tone: Optional[str] = None) -> RewriteResult:
        _check_tone(tone)
        return RewriteResult(available=False)


class SentenceReviewer:
    """
    Proofreads sentence by sentence through a rewrite callable.

    Every sentence the model changes becomes one style lint whose single
    suggestion is the rewritten sentence.
    """

    def __init__(self, rewrite: Rewrite):
        self.rewrite = rewrite

    async def proofread(self, text: str) -> ReviewResult:
        lints: List[Lint] = []
        try:
            for start, end in split_sentences(text):
                sentence = text[start:end]
                improved = clean_output(await self.rewrite(sentence, None))
                if improved is None or improved == sentence:
                    continue
                lints.append(
                    Lint.from_text(
                        text,
                        start,
                        end,
                        message="AI-improved version",
                        kind="Enhancement",
                        source=Source.AI,
                        suggestions=[improved],
                        category=Category.STYLE,
                        kind_pretty="AI Improvement",
                    )
                )
        except AIUnavailable as exc:
            logger.debug("AI proofreading unavailable: %s", exc)
            return ReviewResult(available=False)
        return ReviewResult(available=True, lints=lints)

    async def improve(self, text: str, tone: Optional[str] = None) -> RewriteResult:
        _check_tone(tone)
        try:
            improved = clean_output(await self.rewrite(text, tone))
        except AIUnavailable as exc:
            logger.debug("AI rewrite unavailable: %s", exc)
            return RewriteResult(available=False)
        return RewriteResult(available=True, text=improved if improved is not None else text)


def build_reviewer(settings) -> AIReviewer:
    if not settings.ai.enabled or not settings.ai.model:
        return UnavailableReviewer()
    return SentenceReviewer(LiteLLMRewriter(settings.ai.model, timeout=settings.ai.timeout_s))
