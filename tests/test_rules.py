# tests/test_rules.py

from dataclasses import replace

import pytest

from proofing.detect_rules import RuleEngine
from proofing.models import Category, Source, SuggestionKind
from proofing.policy import Settings
from proofing.rules import Computed, Literal, Rule, Template, build_rule, load_custom_rules, rule_table
from proofing.errors import MalformedRule
from proofing.spans import SpanSet


def _evaluate(text, rules=None):
    return RuleEngine(rules).evaluate(text, SpanSet())


def _by_rule(lints, rule_id):
    return [l for l in lints if l.rule_id == rule_id]


def test_third_person_dont():
    lints = _by_rule(_evaluate("he don't like it"), "third-person-dont")
    assert len(lints) == 1
    lint = lints[0]
    assert lint.problem_text == "he don't"
    assert (lint.span.start, lint.span.end) == (0, 8)
    assert lint.suggestions[0].text == "he doesn't"
    assert lint.source is Source.PATTERN
    assert lint.kind_pretty == "Subject-Verb Agreement"


def test_evaluate_is_idempotent():
    text = "Irregardless, he don't know where we would of gone in order to win."
    first = _evaluate(text)
    second = _evaluate(text)
    assert first == second
    assert len(first) >= 3


def test_accepted_spans_never_overlap():
    text = "I seen a apple and he don't care, we went there everyday in order to eat."
    lints = _evaluate(text)
    spans = sorted((l.span.start, l.span.end) for l in lints)
    for (s1, e1), (s2, e2) in zip(spans, spans[1:]):
        assert e1 <= s2


def test_occupied_spans_are_respected_and_extended():
    occupied = SpanSet([(0, 4)])
    lints = RuleEngine().evaluate("he don't like it", occupied)
    assert _by_rule(lints, "third-person-dont") == []

    occupied = SpanSet()
    lints = RuleEngine().evaluate("he don't like it", occupied)
    assert occupied.overlaps(0, 8)
    assert len(occupied) == len(lints)


def test_earlier_rule_wins_overlap():
    first = Rule("first", r"\bquick brown\b", "first", ["x"], "Style", "First", Category.STYLE)
    second = Rule("second", r"\bbrown fox\b", "second", ["y"], "Style", "Second", Category.STYLE)
    lints = _evaluate("the quick brown fox", [first, second])
    assert [l.rule_id for l in lints] == ["first"]

    lints = _evaluate("the quick brown fox", [second, first])
    assert [l.rule_id for l in lints] == ["second"]


def test_rule_order_irrelevant_for_unrelated_regions():
    a = Rule("a", r"\bfoo\b", "a", ["A"], "Style", "A", Category.STYLE)
    b = Rule("b", r"\bbar\b", "b", ["B"], "Style", "B", Category.STYLE)
    spans_ab = sorted((l.span.start, l.rule_id) for l in _evaluate("foo and bar", [a, b]))
    spans_ba = sorted((l.span.start, l.rule_id) for l in _evaluate("foo and bar", [b, a]))
    assert spans_ab == spans_ba


def test_all_matches_are_found():
    lints = _by_rule(_evaluate("Irregardless of cost, irregardless of time."), "irregardless")
    assert [l.problem_text for l in lints] == ["Irregardless", "irregardless"]


def test_word_boundaries_prevent_partial_matches():
    assert _by_rule(_evaluate("supposablyness"), "supposably") == []
    assert len(_by_rule(_evaluate("supposably"), "supposably")) == 1


def test_capture_group_locates_span_inside_match():
    text = "hello. i think so"
    lints = _by_rule(_evaluate(text), "capitalize-i")
    assert len(lints) == 1
    assert (lints[0].span.start, lints[0].span.end) == (7, 8)
    assert lints[0].suggestions[0].text == "I"


def test_lowercase_i_rule_is_case_sensitive():
    assert _by_rule(_evaluate("Hello. I think so"), "capitalize-i") == []


def test_empty_suggestion_becomes_removal():
    lints = _by_rule(_evaluate("It is important to note that we won."), "filler-important-to-note")
    assert len(lints) == 1
    assert lints[0].suggestions[0].kind is SuggestionKind.REMOVE


def test_disabled_rules_are_skipped():
    disabled = Rule("off", r"\bfoo\b", "off", ["x"], "Style", "Off", Category.STYLE, enabled=False)
    assert _evaluate("foo", [disabled]) == []
    assert all(not r.enabled for r in rule_table() if r.id in ("missing-end-punctuation", "run-on-naive"))


def test_naive_run_on_rule_documents_its_false_positive():
    naive = next(r for r in rule_table() if r.id == "run-on-naive")
    assert _evaluate("the book that I read is good", [naive]) == []

    enabled = replace(naive, enabled=True)
    lints = _evaluate("the book that I read is good", [enabled])
    assert [l.problem_text for l in lints] == ["that I read"]
    assert lints[0].suggestions[0].text == "that, I read"


def test_malformed_rule_does_not_abort_pass():
    bad_pattern = Rule("bad-pattern", r"(unclosed", "x", ["x"], "Style", "Bad", Category.STYLE)

    def boom(m):
        raise RuntimeError("callback failed")

    bad_callback = Rule("bad-callback", r"\bfoo\b", Computed(boom), ["x"], "Style", "Bad", Category.STYLE)
    good = Rule("good", r"\bfoo\b", "good", ["bar"], "Style", "Good", Category.STYLE)

    errors = []
    lints = RuleEngine([bad_pattern, bad_callback, good]).evaluate("foo", SpanSet(), on_error=errors.append)
    assert [l.rule_id for l in lints] == ["good"]
    assert [e.rule_id for e in errors] == ["bad-pattern", "bad-callback"]
    assert all(isinstance(e, MalformedRule) for e in errors)


def test_failed_rule_claims_no_spans():
    calls = []

    def second_fails(m):
        calls.append(m.start())
        if len(calls) == 2:
            raise ValueError("second match breaks")
        return ["x"]

    flaky = Rule("flaky", r"\bfoo\b", "flaky", Computed(second_fails), "Style", "Flaky", Category.STYLE)
    fallback = Rule("fallback", r"\bfoo\b", "fallback", ["y"], "Style", "Fallback", Category.STYLE)
    lints = RuleEngine([flaky, fallback]).evaluate("foo foo", SpanSet())
    assert [l.rule_id for l in lints] == ["fallback", "fallback"]


def test_field_variants():
    import regex

    m = regex.match(r"(\w+) (\w+)(x)?", "hello world")
    assert Literal("fixed").render(m) == "fixed"
    assert Template("{2} {1}{3}").render(m) == "world hello"
    assert Template(["{0}!", "{1}"]).render(m) == ["hello world!", "hello"]
    assert Computed(lambda mm: mm.group(1).upper()).render(m) == "HELLO"


@pytest.mark.parametrize(
    "text, expected",
    [
        ("I'm going to lay down", "lie down"),
        ("I laid down yesterday", "lay down"),
        ("the sun raises in the east", "rises"),
        ("contact John or myself", "me"),
        ("between you and I", "you and me"),
        ("he did good on the test", "did well"),
        ("I feel badly about it", "feel bad"),
        ("the food tastes well", "tastes good"),
        ("I go there everyday", "every day"),
        ("an every day occurrence", "everyday"),
        ("I don't need no help", "any"),
        ("the amount of students", "number"),
        ("can you borrow me a pen", "lend"),
        ("the end result was good", "result"),
        ("this is very unique", "unique"),
        ("try and fix it", "try to"),
        ("the person that is here", "who"),
        ("this is different than that", "different from"),
        ("5 apple", "apples"),
        ("three dog", "dogs"),
        ("we would of gone", "would have"),
        ("a elephant", "an elephant"),
        ("less mistakes", "fewer mistakes"),
    ],
)
def test_rule_table_flags(text, expected):
    lints = _evaluate(text)
    suggestions = " | ".join(s.text for l in lints for s in l.suggestions).lower()
    assert expected.lower() in suggestions


@pytest.mark.parametrize(
    "text",
    [
        "I need to lie down.",
        "She laid the book on the table.",
        "Between you and me, this is bad.",
        "He did well on the test.",
        "I feel bad about it.",
        "This is an everyday occurrence.",
        "I exercise every day.",
        "I don't need any help.",
        "The number of students is growing.",
        "This is unique.",
        "Try to fix it.",
        "The person who is here.",
        "This is different from that.",
        "5 apples on the table.",
        "Three dogs in the park.",
        "Contact John or me.",
        "He can lend me a pen.",
    ],
)
def test_rule_table_false_positives(text):
    assert _evaluate(text) == []


def test_rule_table_applies_disabled_and_custom_rules():
    settings = Settings(
        disabled_rules=["irregardless"],
        custom_rules=[
            {
                "id": "utilize",
                "pattern": r"\butilize\b",
                "message": 'Use "use".',
                "suggest": ["use"],
                "kind": "Style",
                "category": "style",
            },
            {"id": "broken", "pattern": "(", "message": "x", "kind": "Style"},
        ],
    )
    table = rule_table(settings)
    assert table[-1].id == "utilize"
    assert not [r for r in table if r.id == "irregardless"][0].enabled
    assert all(r.id != "broken" for r in table)

    lints = RuleEngine(table).evaluate("Irregardless, utilize it.", SpanSet())
    assert [l.rule_id for l in lints] == ["utilize"]
    assert lints[0].category is Category.STYLE


def test_build_rule_reports_missing_keys():
    with pytest.raises(MalformedRule) as exc:
        build_rule({"id": "partial", "pattern": "x"})
    assert exc.value.rule_id == "partial"
    assert load_custom_rules([{"id": "partial"}]) == []
