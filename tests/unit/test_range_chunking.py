from datetime import date, timedelta

import pytest

from alertmap.harvest.alerts_harvest import chunk_date_range, span_days


def test_single_day_range_is_one_chunk():
    chunks = chunk_date_range(date(2024, 1, 1), date(2024, 1, 1))
    assert [(c.start, c.end) for c in chunks] == [(date(2024, 1, 1), date(2024, 1, 1))]


def test_thirty_day_range_is_one_chunk():
    start = date(2024, 1, 1)
    chunks = chunk_date_range(start, start + timedelta(days=29))
    assert len(chunks) == 1
    assert chunks[0].days == 30


def test_thirty_one_day_range_is_two_chunks():
    start = date(2024, 1, 1)
    chunks = chunk_date_range(start, start + timedelta(days=30))
    assert [(c.start, c.end) for c in chunks] == [
        (date(2024, 1, 1), date(2024, 1, 30)),
        (date(2024, 1, 31), date(2024, 1, 31)),
    ]


def test_seventy_four_day_range_is_three_contiguous_chunks():
    chunks = chunk_date_range(date(2024, 1, 1), date(2024, 3, 15))

    assert [(c.start, c.end) for c in chunks] == [
        (date(2024, 1, 1), date(2024, 1, 30)),
        (date(2024, 1, 31), date(2024, 2, 29)),
        (date(2024, 3, 1), date(2024, 3, 15)),
    ]


@pytest.mark.parametrize("days", [1, 29, 30, 31, 59, 60, 61, 365])
def test_chunk_count_is_ceil_of_span(days):
    start = date(2023, 12, 20)
    end = start + timedelta(days=days - 1)
    chunks = chunk_date_range(start, end)

    assert len(chunks) == -(-days // 30)
    assert all(c.days <= 30 for c in chunks)
    assert chunks[0].start == start
    assert chunks[-1].end == end
    for prev, nxt in zip(chunks, chunks[1:]):
        assert nxt.start == prev.end + timedelta(days=1)


def test_reversed_range_has_no_chunks():
    assert chunk_date_range(date(2024, 3, 15), date(2024, 1, 1)) == []
    assert span_days(date(2024, 3, 15), date(2024, 1, 1)) == 0


def test_span_days_is_inclusive():
    assert span_days(date(2024, 1, 1), date(2024, 1, 1)) == 1
    assert span_days(date(2024, 1, 1), date(2024, 3, 15)) == 75


def test_custom_span_and_invalid_span():
    chunks = chunk_date_range(date(2024, 1, 1), date(2024, 1, 10), max_span_days=3)
    assert len(chunks) == 4
    with pytest.raises(ValueError):
        chunk_date_range(date(2024, 1, 1), date(2024, 1, 10), max_span_days=0)
