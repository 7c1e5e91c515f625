# proofing/postprocess.py

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional

import regex as re

from proofing.models import Lint, Suggestion

DOUBLED_CONSONANT_RE = re.compile(r"([bcdfghjklmnpqrstvwxyz])\1")
SPELLING_KINDS = ("Spelling", "Typo")


def match_case(fixed: str, original: str) -> str:
    """Carry the case pattern of `original` over to `fixed`."""
    if not original or not fixed:
        return fixed
    if original == original.upper():
        return fixed.upper()
    if original[0] == original[0].upper():
        return fixed[0].upper() + fixed[1:]
    return fixed


def collapse_doubled(word: str) -> Optional[str]:
    """
    Collapse doubled consonants in one pass: "writting" -> "writing".

    Returns None when nothing changed.
    """
    collapsed = DOUBLED_CONSONANT_RE.sub(r"\1", word)
    if collapsed != word:
        return collapsed
    return None


def _is_bad_split(problem: str, suggestion: str) -> bool:
    if " " not in suggestion:
        return False
    parts = suggestion.split()
    if not all(len(p) >= 3 for p in parts):
        return True
    # a split that keeps the word's length is a tokenization artifact
    return abs(len("".join(parts)) - len(problem)) <= 1


def fix_engine_suggestions(lints: List[Lint], misspellings: Dict[str, str]) -> List[Lint]:
    """
    Repair grammar-engine suggestions before they are merged.

    - a known misspelling replaces the suggestion list with its correction
    - suggestions that split a single token into fragments are dropped
    - a spelling lint left with nothing gets a doubled-letter repair, if any

    Lints left without suggestions are kept so the problem is still shown.
    """
    fixed: List[Lint] = []
    for lint in lints:
        problem = lint.problem_text.lower()
        if not problem:
            fixed.append(lint)
            continue

        known = misspellings.get(problem)
        if known:
            correction = match_case(known, lint.problem_text)
            fixed.append(
                replace(
                    lint,
                    suggestions=[Suggestion.of(correction)],
                    message=f'Did you mean "{correction}"?',
                )
            )
            continue

        if " " in problem:
            fixed.append(lint)
            continue

        suggestions = [s for s in lint.suggestions if not _is_bad_split(problem, s.text)]
        message = lint.message

        if not suggestions and lint.kind in SPELLING_KINDS:
            collapsed = collapse_doubled(problem)
            if collapsed:
                correction = match_case(collapsed, lint.problem_text)
                suggestions = [Suggestion.of(correction)]
                message = f'Did you mean "{correction}"?'

        fixed.append(replace(lint, suggestions=suggestions, message=message))
    return fixed
