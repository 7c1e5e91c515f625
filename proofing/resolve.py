# proofing/resolve.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from proofing.errors import StaleResult
from proofing.models import SOURCE_PRIORITY, Lint
from proofing.session import SessionStore
from proofing.spans import SpanSet

logger = logging.getLogger(__name__)


def _order(lint: Lint):
    return (lint.span.start, SOURCE_PRIORITY[lint.source])


def _accept(lints: List[Lint], occupied: SpanSet) -> List[Lint]:
    accepted: List[Lint] = []
    for lint in sorted(lints, key=_order):
        if occupied.overlaps(lint.span.start, lint.span.end):
            continue
        occupied.insert(lint.span.start, lint.span.end)
        accepted.append(lint)
    return accepted


def merge_lints(
    engine: List[Lint],
    pattern: List[Lint],
    ai: Optional[List[Lint]] = None,
) -> List[Lint]:
    """
    Merge lints from all sources into one list sorted by span start.

    Ties on start go to the higher-priority source. A lint overlapping any
    already accepted lint is dropped, whatever its exact bounds.
    """
    lints = list(engine) + list(pattern)
    if ai:
        lints.extend(ai)
    return _accept(lints, SpanSet())


def splice_lints(accepted: List[Lint], ai: List[Lint]) -> List[Lint]:
    """Insert late AI lints into an already merged list, dropping overlaps."""
    occupied = SpanSet((l.span.start, l.span.end) for l in accepted)
    spliced = _accept(ai, occupied)
    return sorted(list(accepted) + spliced, key=_order)


@dataclass
class LintUpdate:
    session_id: str
    text: str
    lints: List[Lint] = field(default_factory=list)
    event: str = "lints"  # "lints" for the fast pass, "ai" for a late splice


Subscriber = Callable[[LintUpdate], None]


class LintAggregator:
    """Publishes per-session lint lists into a SessionStore and notifies subscribers."""

    def __init__(self, store: SessionStore):
        self.store = store
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        self._subscribers.append(callback)

    def _check_current(self, session_id: str, text: str) -> None:
        if self.store.current_text(session_id) != text:
            raise StaleResult(f"session {session_id!r} has moved past this snapshot")

    def publish(self, session_id: str, text: str, lints: List[Lint]) -> List[Lint]:
        self._check_current(session_id, text)
        self.store.set_lints(session_id, lints)
        self._notify(LintUpdate(session_id, text, list(lints), "lints"))
        return lints

    def splice_ai(self, session_id: str, text: str, ai_lints: List[Lint]) -> List[Lint]:
        self._check_current(session_id, text)
        merged = splice_lints(self.store.get_lints(session_id), ai_lints)
        self.store.set_lints(session_id, merged)
        self._notify(LintUpdate(session_id, text, list(merged), "ai"))
        return merged

    def _notify(self, update: LintUpdate) -> None:
        for callback in self._subscribers:
            callback(update)
