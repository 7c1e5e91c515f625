# proofing/detect_rules.py

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from proofing.errors import MalformedRule
from proofing.models import Lint, Source
from proofing.rules import Rule, rule_table
from proofing.spans import SpanSet


class RuleEngine:
    """
    Evaluates the ordered rule table against plain text.

    A candidate is accepted only when it does not overlap anything already in
    `occupied`; accepted spans are claimed immediately, so earlier rules win
    contested regions and no rule fires twice on the same text.
    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None):
        self.rules: List[Rule] = list(rules) if rules is not None else rule_table()

    def evaluate(
        self,
        text: str,
        occupied: SpanSet,
        on_error: Optional[Callable[[MalformedRule], None]] = None,
    ) -> List[Lint]:
        lints: List[Lint] = []
        for rule in self.rules:
            if not rule.enabled:
                continue
            try:
                found = self._run_rule(rule, text, occupied)
            except Exception as exc:  # noqa: BLE001
                if on_error is not None:
                    on_error(MalformedRule(rule.id, exc))
                continue
            for lint in found:
                occupied.insert(lint.span.start, lint.span.end)
            lints.extend(found)
        return lints

    def _run_rule(self, rule: Rule, text: str, occupied: SpanSet) -> List[Lint]:
        pattern = rule.compile()
        # spans claimed by this rule stay local until the rule finishes cleanly
        claimed = SpanSet()
        found: List[Lint] = []

        for m in pattern.finditer(text):
            start, end = _match_bounds(m, rule.capture)
            if start >= end:
                continue
            if occupied.overlaps(start, end) or claimed.overlaps(start, end):
                continue

            message = rule.message.render(m)
            suggest = rule.suggest.render(m)
            if isinstance(suggest, str):
                suggest = [suggest]

            found.append(
                Lint.from_text(
                    text,
                    start,
                    end,
                    message=str(message),
                    kind=rule.kind,
                    source=Source.PATTERN,
                    suggestions=[str(s) for s in suggest],
                    category=rule.category,
                    kind_pretty=rule.pretty,
                    rule_id=rule.id,
                )
            )
            claimed.insert(start, end)
        return found


def _match_bounds(m, capture: int):
    if not capture:
        return m.start(), m.end()

    group_text = m.group(capture)
    if not group_text:
        return m.start(), m.end()
    full = m.group(0)
    # first occurrence of the group inside the whole match
    ix = full.find(group_text)
    if ix < 0:
        return m.start(), m.end()
    start = m.start() + ix
    return start, start + len(group_text)
