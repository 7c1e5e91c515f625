# tests/test_clauses.py

from proofing.detect_clauses import ClauseBoundaryDetector
from proofing.models import Source
from proofing.spans import SpanSet
from proofing.transform import apply_text_fix


def _detect(text, occupied=None):
    return ClauseBoundaryDetector().detect(text, occupied if occupied is not None else SpanSet())


def test_imperative_junction():
    text = "a day keep an eye"
    lints = _detect(text)
    assert len(lints) == 1
    lint = lints[0]
    assert lint.problem_text == "day keep an"
    assert lint.source is Source.CLAUSE
    assert [s.text for s in lint.suggestions] == ["day, keep an", "day. Keep an"]
    assert apply_text_fix(text, lint.span, lint.suggestions[0].text) == "a day, keep an eye"


def test_independent_clause_junction():
    text = "I went home he said it was fine"
    lints = _detect(text)
    assert len(lints) == 1
    lint = lints[0]
    assert lint.problem_text == "home he said"
    assert [s.text for s in lint.suggestions] == [
        "home, he said",
        "home; he said",
        "home. He said",
    ]
    assert lint.kind_pretty == "Run-on Sentence"


def test_connectors_are_not_junctions():
    assert _detect("the book that I read is good") == []
    assert _detect("I don't know") == []
    assert _detect("I think you should go") == []


def test_punctuation_before_candidate_skips_it():
    assert _detect("yes,home he said") == []
    assert len(_detect("yes home he said")) == 1


def test_imperative_needs_clause_ending_word():
    assert _detect("I will keep an eye on it") == []


def test_occupied_spans_block_candidates():
    occupied = SpanSet([(2, 5)])
    assert _detect("a day keep an eye", occupied) == []


def test_accepted_junctions_are_claimed():
    occupied = SpanSet()
    lints = _detect("I went home he said it was fine", occupied)
    span = lints[0].span
    assert occupied.overlaps(span.start, span.end)


def test_flags_never_overlap():
    text = "we stayed home they left today keep it there he went home we left"
    lints = _detect(text)
    assert lints
    spans = sorted((l.span.start, l.span.end) for l in lints)
    for (s1, e1), (s2, e2) in zip(spans, spans[1:]):
        assert e1 <= s2
