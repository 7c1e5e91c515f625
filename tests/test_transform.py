# tests/test_transform.py

import pytest

from proofing.errors import StructuralEditFailure
from proofing.models import Lint, Source, Span
from proofing.transform import (
    apply_batch,
    apply_one,
    apply_text_fix,
    apply_text_fixes,
    fix_all_text,
    relocate,
)
from proofing.tree import element, flatten, line_break, text_node


def _doc():
    return element(
        "root",
        element("p", text_node("He "), element("b", text_node("don't")), text_node(" like it.")),
        element("p", text_node("I seen "), element("em", text_node("him")), text_node(" there.")),
    )


def _lint(text, start, end, suggestion, source=Source.PATTERN):
    suggestions = [suggestion] if suggestion is not None else []
    return Lint.from_text(text, start, end, message="m", kind="Grammar", source=source, suggestions=suggestions)


def _check_round_trip(root, start, end, replacement):
    before = flatten(root).text
    apply_one(root, Span(start, end), replacement)
    assert flatten(root).text == before[:start] + replacement + before[end:]


def test_replace_inside_one_node():
    root = _doc()
    text = flatten(root).text
    start = text.index("like")
    _check_round_trip(root, start, start + 4, "love")


def test_replace_across_inline_nodes():
    root = _doc()
    assert flatten(root).text == "He don't like it.\nI seen him there."
    _check_round_trip(root, 0, 8, "He doesn't")
    assert flatten(root).text == "He doesn't like it.\nI seen him there."


def test_replace_covering_whole_inline_node_removes_it():
    root = _doc()
    text = flatten(root).text
    start = text.index("him")
    _check_round_trip(root, start - 1, start + 3, "")
    assert "em" not in [c.kind for c in root.children[1].children if c.children]


def test_span_crossing_block_boundary_is_refused():
    root = _doc()
    text = flatten(root).text
    nl = text.index("\n")
    with pytest.raises(StructuralEditFailure):
        apply_one(root, Span(nl - 3, nl + 2), "x")
    assert flatten(root).text == text


def test_span_past_end_is_refused():
    root = _doc()
    with pytest.raises(StructuralEditFailure):
        apply_one(root, Span(0, 500), "x")


@pytest.mark.parametrize("start, end", [(0, 1), (3, 8), (2, 4), (9, 17), (18, 20), (25, 35)])
def test_round_trip_for_many_spans(start, end):
    _check_round_trip(_doc(), start, end, "<fix>")


def test_batch_applies_descending():
    root = _doc()
    text = flatten(root).text
    lints = [
        _lint(text, 0, 8, "He doesn't"),
        _lint(text, text.index("seen"), text.index("seen") + 4, "saw"),
        _lint(text, text.index("it."), text.index("it.") + 2, "them"),
    ]
    result = apply_batch(root, lints)
    assert (result.applied, result.failed, result.skipped) == (3, 0, 0)
    assert flatten(root).text == "He doesn't like them.\nI saw him there."


def test_batch_matches_one_at_a_time():
    lints_text = flatten(_doc()).text
    lints = [
        _lint(lints_text, 0, 2, "She"),
        _lint(lints_text, 9, 13, "love"),
        _lint(lints_text, 20, 24, "saw"),
    ]

    batched = _doc()
    apply_batch(batched, lints)

    stepwise = _doc()
    for lint in sorted(lints, key=lambda l: l.span.start, reverse=True):
        apply_one(stepwise, lint.span, lint.suggestions[0].text)

    assert flatten(batched).text == flatten(stepwise).text


def test_batch_counts_skips_and_failures():
    root = _doc()
    text = flatten(root).text
    nl = text.index("\n")
    lints = [
        _lint(text, 0, 2, None),
        _lint(text, nl - 3, nl + 2, "x"),
        Lint.from_text("zzzzzzzz", 0, 3, message="m", kind="Grammar", source=Source.PATTERN, suggestions=["q"]),
    ]
    result = apply_batch(root, lints)
    assert (result.applied, result.failed, result.skipped) == (0, 2, 1)
    assert flatten(root).text == text


def test_batch_relocates_after_drift():
    original = "He don't like it.\nI seen him there."
    root = element(
        "root",
        element("p", text_node("Hey! He don't like it.")),
        element("p", text_node("I seen him there.")),
    )
    lint = _lint(original, 0, 8, "He doesn't")
    result = apply_batch(root, [lint])
    assert result.applied == 1
    assert flatten(root).text == "Hey! He doesn't like it.\nI seen him there."


def test_relocate_prefers_nearest_occurrence():
    text = "cat dog cat dog cat"
    lint = _lint("xxxxxxxxxxxxxx cat", 15, 18, "cow")
    assert relocate(text, lint) == Span(16, 19)
    assert relocate(text, lint, window=0) == Span(16, 19)
    assert relocate("no match", lint) is None


def test_relocate_exact_hit():
    text = "a cat"
    assert relocate(text, _lint(text, 2, 5, "cow")) == Span(2, 5)


def test_plain_text_fix():
    assert apply_text_fix("a day keep an eye", Span(2, 13), "day, keep an") == "a day, keep an eye"
    with pytest.raises(StructuralEditFailure):
        apply_text_fix("short", Span(2, 10), "x")


def test_plain_text_batch_skips_overlaps():
    text = "he don't like it"
    lints = [
        _lint(text, 0, 8, "he doesn't"),
        _lint(text, 3, 13, "do not like"),
        _lint(text, 14, 16, "them"),
        _lint(text, 9, 13, None),
    ]
    fixed, result = apply_text_fixes(text, lints)
    assert fixed == "he do not like them"
    assert (result.applied, result.failed, result.skipped) == (2, 1, 1)


def test_fix_all_text():
    text = "he don't like it"
    assert fix_all_text(text, [_lint(text, 0, 8, "he doesn't")]) == "he doesn't like it"


def test_emptying_a_whole_block_drops_its_boundary():
    root = element("root", element("p", text_node("Hello.")), element("p", text_node("Bye.")))
    assert flatten(root).text == "Hello.\nBye."

    apply_one(root, Span(0, 6), "")
    # the empty paragraph no longer produces a break before the next block
    assert flatten(root).text == "Bye."
    assert root.children[0].children == []
