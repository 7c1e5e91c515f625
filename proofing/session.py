# proofing/session.py

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from proofing.models import Lint


@dataclass
class SessionState:
    text: Optional[str] = None
    lints: List[Lint] = field(default_factory=list)
    enabled: bool = True


class SessionStore:
    """Per-session text snapshot, lint list and enable flag, keyed by opaque ids."""

    def __init__(self, enabled_by_default: bool = True):
        self.enabled_by_default = enabled_by_default
        self._sessions: Dict[str, SessionState] = {}

    def _state(self, session_id: str) -> SessionState:
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionState(enabled=self.enabled_by_default)
            self._sessions[session_id] = state
        return state

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def update_text(self, session_id: str, text: str) -> None:
        self._state(session_id).text = text

    def current_text(self, session_id: str) -> Optional[str]:
        state = self._sessions.get(session_id)
        return state.text if state else None

    def set_lints(self, session_id: str, lints: List[Lint]) -> None:
        self._state(session_id).lints = list(lints)

    def get_lints(self, session_id: str) -> List[Lint]:
        state = self._sessions.get(session_id)
        return list(state.lints) if state else []

    def set_enabled(self, session_id: str, enabled: bool) -> None:
        state = self._state(session_id)
        state.enabled = enabled
        if not enabled:
            state.lints = []

    def is_enabled(self, session_id: str) -> bool:
        state = self._sessions.get(session_id)
        return state.enabled if state else self.enabled_by_default

    def discard(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)


class LintCache:
    """
    Bounded memo of fast-pass results keyed by exact text.

    When full, the oldest inserted entry is evicted. Reads do not refresh
    an entry's position.
    """

    def __init__(self, capacity: int = 50):
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._entries: "OrderedDict[str, List[Lint]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: str) -> bool:
        return text in self._entries

    def get(self, text: str) -> Optional[List[Lint]]:
        lints = self._entries.get(text)
        return list(lints) if lints is not None else None

    def put(self, text: str, lints: List[Lint]) -> None:
        if text not in self._entries and len(self._entries) >= self.capacity:
            self._entries.popitem(last=False)
        self._entries[text] = list(lints)

    def clear(self) -> None:
        self._entries.clear()
