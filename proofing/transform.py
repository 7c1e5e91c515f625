# proofing/transform.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from proofing.errors import StructuralEditFailure
from proofing.models import Lint, Span, Suggestion
from proofing.tree import Node, TextMap, find_segment_at, flatten

logger = logging.getLogger(__name__)

DEFAULT_RELOCATE_WINDOW = 64

Chooser = Callable[[Lint], Suggestion]


def first_suggestion(lint: Lint) -> Suggestion:
    return lint.suggestions[0]


@dataclass
class BatchResult:
    applied: int = 0
    failed: int = 0
    skipped: int = 0


def relocate(text: str, lint: Lint, window: int = DEFAULT_RELOCATE_WINDOW) -> Optional[Span]:
    """
    Find where `lint.problem_text` sits in `text` now.

    Tries the recorded offset, then the occurrence closest to it within
    `window` characters either side, then the closest occurrence anywhere.
    """
    needle = lint.problem_text
    start = lint.span.start
    if not needle:
        return None
    if text[start:start + len(needle)] == needle:
        return Span(start, start + len(needle))

    lo = max(0, start - window)
    hi = min(len(text), start + len(needle) + window)
    found = _nearest(text, needle, start, lo, hi)
    if found is None:
        found = _nearest(text, needle, start, 0, len(text))
    if found is None:
        return None
    return Span(found, found + len(needle))


def _nearest(text: str, needle: str, origin: int, lo: int, hi: int) -> Optional[int]:
    best = None
    ix = text.find(needle, lo, hi)
    while ix >= 0:
        if best is None or abs(ix - origin) < abs(best - origin):
            best = ix
        ix = text.find(needle, ix + 1, hi)
    return best


# ---------------------------------------------------------------------
# Structured documents
# ---------------------------------------------------------------------
def apply_one(
    root: Node,
    span: Span,
    replacement: str,
    text_map: Optional[TextMap] = None,
) -> None:
    """
    Replace the text under `span` with `replacement`, touching only the text
    leaves the span covers. Raises StructuralEditFailure when the span cannot
    be resolved or would merge two blocks.
    """
    tm = text_map if text_map is not None else flatten(root)
    if span.end > len(tm.text):
        raise StructuralEditFailure(f"span [{span.start}, {span.end}) is past the end of the text")

    for seg in tm.segments:
        if seg.synthetic and span.start <= seg.start and seg.end <= span.end:
            raise StructuralEditFailure(
                f"span [{span.start}, {span.end}) crosses a block boundary at {seg.start}"
            )

    start_seg = find_segment_at(tm.segments, span.start)
    end_seg = find_segment_at(tm.segments, span.end)
    if start_seg is None or end_seg is None:
        raise StructuralEditFailure(f"no text under span [{span.start}, {span.end})")

    real = [seg for seg in tm.segments if not seg.synthetic]
    first = _index_of(real, start_seg)
    last = _index_of(real, end_seg)
    if first > last:
        raise StructuralEditFailure(f"span [{span.start}, {span.end}) resolves backwards")

    start_node: Node = start_seg.node
    end_node: Node = end_seg.node
    local_start = _clamp(span.start - start_seg.start, len(start_node.text))
    local_end = _clamp(span.end - end_seg.start, len(end_node.text))

    touched: List[Node] = [start_node]
    if start_node is end_node:
        start_node.text = start_node.text[:local_start] + replacement + start_node.text[local_end:]
    else:
        start_node.text = start_node.text[:local_start] + replacement
        for seg in real[first + 1:last]:
            seg.node.text = ""
            touched.append(seg.node)
        end_node.text = end_node.text[local_end:]
        touched.append(end_node)

    for node in touched:
        if not node.text:
            node.detach()


def _index_of(segments, target) -> int:
    for ix, seg in enumerate(segments):
        if seg is target:
            return ix
    raise StructuralEditFailure("segment is not part of the current map")


def _clamp(value: int, upper: int) -> int:
    return max(0, min(value, upper))


def apply_batch(
    root: Node,
    lints: List[Lint],
    choose: Chooser = first_suggestion,
    window: int = DEFAULT_RELOCATE_WINDOW,
) -> BatchResult:
    """
    Apply one suggestion per lint, last span first.

    The map is rebuilt before every fix and each fix is relocated by its
    problem text, so edits that reshape the tree do not misplace later ones.
    Failures are counted and the batch continues.
    """
    result = BatchResult()
    fixable = [l for l in lints if l.suggestions]
    result.skipped = len(lints) - len(fixable)

    for lint in sorted(fixable, key=lambda l: l.span.start, reverse=True):
        tm = flatten(root)
        span = relocate(tm.text, lint, window)
        if span is None:
            logger.debug("Could not locate %r for rule %s", lint.problem_text, lint.rule_id)
            result.failed += 1
            continue
        try:
            apply_one(root, span, choose(lint).text, tm)
        except StructuralEditFailure as exc:
            logger.debug("Skipping fix: %s", exc)
            result.failed += 1
            continue
        result.applied += 1
    return result


# ---------------------------------------------------------------------
# Plain text fields
# ---------------------------------------------------------------------
def apply_text_fix(text: str, span: Span, replacement: str) -> str:
    if span.end > len(text):
        raise StructuralEditFailure(f"span [{span.start}, {span.end}) is past the end of the text")
    return text[:span.start] + replacement + text[span.end:]


def apply_text_fixes(
    text: str,
    lints: List[Lint],
    choose: Chooser = first_suggestion,
    window: int = DEFAULT_RELOCATE_WINDOW,
) -> Tuple[str, BatchResult]:
    """Apply fixes to flat text from the end backwards; overlapping fixes are skipped."""
    result = BatchResult()
    fixable = [l for l in lints if l.suggestions]
    result.skipped = len(lints) - len(fixable)

    floor = None  # start of the lowest edit so far
    for lint in sorted(fixable, key=lambda l: l.span.start, reverse=True):
        if floor is not None and lint.span.end > floor:
            result.failed += 1
            continue
        span = relocate(text, lint, window)
        if span is None or (floor is not None and span.end > floor):
            result.failed += 1
            continue
        text = apply_text_fix(text, span, choose(lint).text)
        floor = span.start
        result.applied += 1
    return text, result


def fix_all_text(text: str, lints: List[Lint]) -> str:
    fixed, _ = apply_text_fixes(text, lints)
    return fixed
