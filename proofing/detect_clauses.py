# proofing/detect_clauses.py

from __future__ import annotations

from typing import FrozenSet, List

import regex as re

from proofing.models import Category, Lint, Source
from proofing.spans import SpanSet

SUBJECTS = (
    "I|he|she|it|we|they|you|this|that|there|don't|doesn't|didn't|won't|can't|"
    "couldn't|shouldn't|isn't|aren't|wasn't|weren't"
)

FINITE_VERBS = (
    "am|is|are|was|were|have|has|had|do|does|did|will|would|can|could|should|might|"
    "may|don't|doesn't|didn't|won't|can't|couldn't|shouldn't|went|go|goes|know|knew|"
    "knows|think|thought|thinks|want|wants|wanted|need|needs|needed|like|likes|liked|"
    "said|told|tell|tells|see|saw|sees|come|came|comes|make|made|makes|take|took|"
    "takes|give|gave|gives|find|found|finds|get|got|gets|let|lets|run|ran|runs|eat|"
    "ate|eats|keep|kept|keeps|buy|bought|buys|feel|felt|feels|hear|heard|hears|leave|"
    "left|leaves|put|read|show|showed|shows|sit|sat|sits|stand|stood|stands|start|"
    "started|starts|stop|stopped|stops|try|tried|tries|turn|turned|turns|use|used|"
    "uses|work|worked|works|write|wrote|writes|call|called|calls|pay|paid|pays|play|"
    "played|plays|seem|seemed|seems|help|helped|helps|talk|talked|talks|begin|began|"
    "begins|move|moved|moves|live|lived|lives|believe|believed|believes|bring|"
    "brought|brings|happen|happened|happens|must|shall|look|looked|looks|set|hold|"
    "held|holds|learn|learned|learns|change|changed|changes|follow|followed|follows|"
    "ask|asked|asks|miss|missed|just"
)

IMPERATIVE_VERBS = (
    "keep|eat|take|make|give|get|put|let|try|go|come|run|stop|start|open|close|turn|"
    "pick|hold|bring|send|tell|ask|look|watch|check|read|write|call|find|set|cut|buy|"
    "sell|show|help|leave|move|use|play|pay|add|fix|clean|break|push|pull|throw|catch|"
    "drop|wait|sit|stand|walk|talk|listen|remember|forget|consider|imagine|think|see|"
    "feel|note|mark|follow|save|grab|pass|hand|build|draw|learn|teach|meet|join|"
    "choose|decide|plan|avoid|allow|accept|enjoy|finish|handle|manage|count|measure|"
    "sort|fill|share|post|sign|press|click|type|log|enter|remove|delete|create|"
    "update|select|change|replace"
)

OBJECTS = (
    "a|an|the|my|your|his|her|its|our|their|some|any|this|that|these|those|each|"
    "every|all|no|more|up|down|out|in|off|on|over|back|away|it|me|him|her|us|them|"
    "yourself|himself|herself|itself|ourselves|themselves"
)

# Words after which a subject legitimately continues the same clause
CONNECTORS: FrozenSet[str] = frozenset(
    """
    that which who whom whose where when while because since although though
    unless until if whether before after as once so and but or nor for yet than
    like the a an of in on at to by with from into about between through during
    without within think know believe say said told tell hope wish feel see saw
    mean meant ensure assume suppose guess realize notice understand imagine
    suggest recommend ask wonder decide how what why
    i he she it we they you
    """.split()
)

# Temporal, positional and generic words that can close a clause before an imperative
CLAUSE_ENDINGS: FrozenSet[str] = frozenset(
    """
    day days time times night nights week weeks month months year years hour hours
    minute minutes morning evening afternoon today tomorrow yesterday now then here
    there home work school well too also again already always never ever away back
    out up down off together apart right wrong good bad fine sure ready done
    finished over possible true false way place thing things people world life end
    start point part side lot bit while long much far it that this them him her me us
    """.split()
)

PUNCTUATION_BEFORE = frozenset(",;.!?:")

JUNCTION_RE = re.compile(
    rf"(?<![\w'])([a-z]+)\s+({SUBJECTS})\s+({FINITE_VERBS})\b",
    re.IGNORECASE,
)
IMPERATIVE_RE = re.compile(
    rf"(?<![\w'])([a-z]+)\s+({IMPERATIVE_VERBS})\s+({OBJECTS})\b",
    re.IGNORECASE,
)


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


class ClauseBoundaryDetector:
    """Heuristic run-on detection for independent and imperative clause junctions."""

    def detect(self, text: str, occupied: SpanSet) -> List[Lint]:
        lints = self._independent_clauses(text, occupied)
        lints += self._imperative_clauses(text, occupied)
        return lints

    def _candidates(self, pattern, text: str):
        # overlapped so a rejected candidate cannot hide a junction that starts
        # inside it
        for m in pattern.finditer(text, overlapped=True):
            if m.start() > 0 and text[m.start() - 1] in PUNCTUATION_BEFORE:
                continue
            yield m

    def _independent_clauses(self, text: str, occupied: SpanSet) -> List[Lint]:
        lints: List[Lint] = []
        for m in self._candidates(JUNCTION_RE, text):
            word, subject, verb = m.group(1), m.group(2), m.group(3)
            if word.lower() in CONNECTORS:
                continue
            if occupied.overlaps(m.start(), m.end()):
                continue

            lints.append(
                Lint.from_text(
                    text,
                    m.start(),
                    m.end(),
                    message=(
                        "Possible run-on sentence. Add a comma, semicolon, or period "
                        "between these clauses."
                    ),
                    kind="Punctuation",
                    source=Source.CLAUSE,
                    suggestions=[
                        f"{word}, {subject} {verb}",
                        f"{word}; {subject} {verb}",
                        f"{word}. {_capitalize(subject)} {verb}",
                    ],
                    category=Category.GRAMMAR,
                    kind_pretty="Run-on Sentence",
                    rule_id="run-on-clause",
                )
            )
            occupied.insert(m.start(), m.end())
        return lints

    def _imperative_clauses(self, text: str, occupied: SpanSet) -> List[Lint]:
        lints: List[Lint] = []
        for m in self._candidates(IMPERATIVE_RE, text):
            word, verb, obj = m.group(1), m.group(2), m.group(3)
            lowered = word.lower()
            if lowered not in CLAUSE_ENDINGS or lowered in CONNECTORS:
                continue
            if occupied.overlaps(m.start(), m.end()):
                continue

            lints.append(
                Lint.from_text(
                    text,
                    m.start(),
                    m.end(),
                    message=f'Possible run-on sentence. Add a comma or period before "{verb}".',
                    kind="Punctuation",
                    source=Source.CLAUSE,
                    suggestions=[
                        f"{word}, {verb} {obj}",
                        f"{word}. {_capitalize(verb)} {obj}",
                    ],
                    category=Category.GRAMMAR,
                    kind_pretty="Run-on Sentence",
                    rule_id="run-on-imperative",
                )
            )
            occupied.insert(m.start(), m.end())
        return lints
