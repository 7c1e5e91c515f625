# tests/test_spans.py

import pytest

from proofing.spans import SpanSet


def test_overlap_is_half_open():
    spans = SpanSet([(5, 10)])
    assert spans.overlaps(9, 12)
    assert spans.overlaps(0, 6)
    assert spans.overlaps(6, 8)
    assert not spans.overlaps(10, 12)
    assert not spans.overlaps(0, 5)


def test_adjacent_spans_coexist():
    spans = SpanSet()
    spans.insert(0, 5)
    spans.insert(5, 8)
    assert len(spans) == 2
    assert list(spans) == [(0, 5), (5, 8)]
    assert not spans.overlaps(8, 9)


def test_zero_length_insert_rejected():
    spans = SpanSet()
    with pytest.raises(ValueError):
        spans.insert(3, 3)
    with pytest.raises(ValueError):
        spans.insert(4, 2)


def test_zero_length_query_never_overlaps():
    spans = SpanSet([(0, 10)])
    assert not spans.overlaps(5, 5)


def test_overlapping_inserts_merge_into_union():
    spans = SpanSet([(10, 20), (0, 3), (15, 30), (2, 11)])
    assert list(spans) == [(0, 30)]
    assert len(spans) == 4
    assert spans.overlaps(29, 40)
    assert not spans.overlaps(30, 40)


def test_many_disjoint_spans():
    spans = SpanSet((i * 10, i * 10 + 5) for i in range(500))
    assert spans.overlaps(4994, 4996)
    assert not spans.overlaps(4995, 5000)
    assert not spans.overlaps(5, 10)
    assert spans.overlaps(5, 11)
