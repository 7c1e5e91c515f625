# proofing/engine.py

from __future__ import annotations

import asyncio
import logging
import threading
from typing import List, Protocol

import language_tool_python

from proofing.errors import EngineUnavailable
from proofing.models import Lint, Source

logger = logging.getLogger(__name__)

# LanguageTool category id -> lint kind
CATEGORY_TO_KIND = {
    "TYPOS": "Spelling",
    "GRAMMAR": "Grammar",
    "PUNCTUATION": "Punctuation",
    "CASING": "Capitalization",
    "STYLE": "Style",
    "REDUNDANCY": "Redundancy",
    "CONFUSED_WORDS": "WordChoice",
}

# One LanguageTool server per process and language, started on first use
_TOOLS = {}
_TOOLS_LOCK = threading.Lock()


def _get_tool(language: str) -> "language_tool_python.LanguageTool":
    with _TOOLS_LOCK:
        tool = _TOOLS.get(language)
        if tool is None:
            tool = language_tool_python.LanguageTool(language)
            _TOOLS[language] = tool
        return tool


class GrammarEngine(Protocol):
    async def lint(self, text: str) -> List[Lint]:
        ...


class NullEngine:
    """Engine used when no grammar backend is configured."""

    async def lint(self, text: str) -> List[Lint]:
        return []


def _attr(match, *names, default=None):
    # attribute names differ between language_tool_python releases
    for name in names:
        value = getattr(match, name, None)
        if value is not None:
            return value
    return default


class LanguageToolEngine:
    def __init__(self, language: str = "en-US", max_suggestions: int = 5):
        self.language = language
        self.max_suggestions = max_suggestions

    async def lint(self, text: str) -> List[Lint]:
        try:
            matches = await asyncio.to_thread(self._check, text)
            return self.to_lints(text, matches)
        except Exception as exc:
            raise EngineUnavailable(f"LanguageTool check failed: {exc}") from exc

    def _check(self, text: str):
        return _get_tool(self.language).check(text)

    def to_lints(self, text: str, matches) -> List[Lint]:
        lints: List[Lint] = []
        for match in matches:
            offset = int(_attr(match, "offset", default=0))
            length = int(_attr(match, "errorLength", "error_length", default=0))
            if length <= 0 or offset < 0 or offset + length > len(text):
                continue

            category = str(_attr(match, "category", default="MISC"))
            replacements = list(_attr(match, "replacements", default=[]))
            lints.append(
                Lint.from_text(
                    text,
                    offset,
                    offset + length,
                    message=str(_attr(match, "message", default="")),
                    kind=CATEGORY_TO_KIND.get(category, "Miscellaneous"),
                    source=Source.ENGINE,
                    suggestions=replacements[: self.max_suggestions],
                    rule_id=str(_attr(match, "ruleId", "rule_id", default="")),
                )
            )
        return lints


async def run_engine(engine: GrammarEngine, text: str, timeout: float) -> List[Lint]:
    """Engine lints, or [] when the engine is unavailable or too slow."""
    try:
        return await asyncio.wait_for(engine.lint(text), timeout)
    except EngineUnavailable as exc:
        logger.warning("Grammar engine unavailable, using pattern rules only: %s", exc)
    except asyncio.TimeoutError:
        logger.warning("Grammar engine timed out after %.1fs, using pattern rules only", timeout)
    except Exception:
        logger.exception("Grammar engine failed, using pattern rules only")
    return []


def build_engine(settings) -> GrammarEngine:
    if settings.engine.backend == "none":
        return NullEngine()
    return LanguageToolEngine(
        language=settings.engine.language,
        max_suggestions=settings.engine.max_suggestions,
    )
