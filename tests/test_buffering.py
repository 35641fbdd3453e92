"""Tests for the transforms that need to buffer: slice, take_last, drop_last, reverse and sort."""

import random

import pytest

import polyiter as pl

LENGTHS = (5, 7, 9, 12, 15, 20)


@pytest.mark.parametrize("length", LENGTHS)
def test_slice_matches_list_slicing(length: int) -> None:
    """Every combination of signs behaves like `list[start:end]`."""
    data = list(range(length))
    it = pl.Iter.from_(data)
    for start in range(-length - 2, length + 3):
        for end in range(-length - 2, length + 3):
            assert it.slice(start, end).to_list() == data[start:end], (start, end)


def test_slice_on_infinite_source() -> None:
    naturals = pl.Iter.iterate(lambda n: (n or 0) + 1)
    assert naturals.slice(2, 5).to_list() == [3, 4, 5]
    assert naturals.slice(3, 1).to_list() == []


@pytest.mark.parametrize(
    ("start", "end"),
    [(0.5, 0), ("foo", 0), (None, 0), (0, 0.5), (0, "bar"), (0, None), (True, 2)],
)
def test_slice_rejects_non_integers(start: object, end: object) -> None:
    with pytest.raises(TypeError):
        pl.Iter.from_([]).slice(start, end)  # type: ignore[arg-type]


def test_slice_requires_both_bounds() -> None:
    with pytest.raises(TypeError):
        pl.Iter.from_([]).slice(0)  # type: ignore[call-arg]


def test_take_last() -> None:
    data = pl.Iter.from_([1, 2, 3, 4, 5])
    assert data.take_last(3).to_list() == [3, 4, 5]
    assert data.take_last().to_list() == []
    assert data.take_last(9).to_list() == [1, 2, 3, 4, 5]


def test_drop_last() -> None:
    data = pl.Iter.from_([1, 2, 3, 4, 5])
    assert data.drop_last(3).to_list() == [1, 2]
    assert data.drop_last().to_list() == [1, 2, 3, 4, 5]
    assert pl.Iter.from_([1, 2]).drop_last(3).to_list() == []


def test_drop_last_streams() -> None:
    """`drop_last` only holds back a window, so it works on infinite sources."""
    naturals = pl.Iter.iterate(lambda n: (n or 0) + 1)
    assert naturals.drop_last(2).take(3).to_list() == [1, 2, 3]


def test_reverse() -> None:
    assert pl.Iter.from_([]).reverse().to_list() == []
    assert pl.Iter.from_([1, 2, 3]).reverse().to_list() == [3, 2, 1]
    assert (
        pl.Iter.from_range(1000).reverse().to_list()
        == pl.Iter.from_range(999, -1, -1).to_list()
    )


def test_reverse_buffers_per_iteration() -> None:
    it = pl.Iter.from_range(3).reverse()
    assert it.to_list() == it.to_list() == [2, 1, 0]


@pytest.mark.parametrize("size", [0, 5, 1000])
def test_sort_default_orders_by_string(size: int) -> None:
    rng = random.Random(size)
    data = [rng.randint(-500, 500) for _ in range(size)]
    assert pl.Iter.from_(data).sort().to_list() == sorted(data, key=str)


def test_sort_default_examples() -> None:
    assert pl.Iter.from_([10, 9, 1, 100]).sort().to_list() == [1, 10, 100, 9]
    assert pl.Iter.from_(["b", "a", "c"]).sort().to_list() == ["a", "b", "c"]


@pytest.mark.parametrize("size", [0, 5, 1000])
def test_sort_with_comparator(size: int) -> None:
    rng = random.Random(size)
    data = [rng.randint(-500, 500) for _ in range(size)]
    assert pl.Iter.from_(data).sort(lambda a, b: a - b).to_list() == sorted(data)
    assert pl.Iter.from_(data).sort(lambda a, b: b - a).to_list() == sorted(
        data, reverse=True
    )


def test_sort_is_stable() -> None:
    words = ["bb", "a", "cc", "d", "eee", "ff"]
    by_length = pl.Iter.from_(words).sort(lambda a, b: len(a) - len(b))
    assert by_length.to_list() == ["a", "d", "bb", "cc", "ff", "eee"]


def test_sort_leaves_source_untouched() -> None:
    data = [3, 1, 2]
    assert pl.Iter.from_(data).sort(lambda a, b: a - b).to_list() == [1, 2, 3]
    assert data == [3, 1, 2]


def test_buffered_transforms_log_their_size(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("DEBUG", logger="polyiter")
    pl.Iter.from_range(4).reverse().drain()
    pl.Iter.from_range(6).sort().drain()
    pl.Iter.from_range(8).take_last(3).drain()
    assert "reverse buffered 4 element(s)" in caplog.text
    assert "sort buffered 6 element(s)" in caplog.text
    assert "take_last buffered 3 element(s)" in caplog.text


@pytest.mark.parametrize("length", LENGTHS)
def test_split_operations_reconstruct_the_source(length: int) -> None:
    data = list(range(length))
    it = pl.Iter.from_(data)
    for n in range(length + 2):
        assert it.take(n).to_list() + it.drop(n).to_list() == data
        assert it.take(n).to_list() == data[:n]
        if n <= length:
            assert it.drop_last(n).concat(it.take_last(n)).to_list() == data


def test_reverse_twice_is_identity() -> None:
    data = ["b", 3, None, "a", 1.5]
    assert pl.Iter.from_(data).reverse().reverse().to_list() == data


def test_sort_is_idempotent() -> None:
    rng = random.Random(7)
    data = [rng.randint(-50, 50) for _ in range(200)]
    once = pl.Iter.from_(data).sort(lambda a, b: abs(a) - abs(b))
    assert once.sort(lambda a, b: abs(a) - abs(b)).to_list() == once.to_list()
    assert pl.Iter.from_(data).sort().sort().to_list() == pl.Iter.from_(data).sort().to_list()


def test_unique_is_an_ordered_subsequence() -> None:
    rng = random.Random(3)
    data = [rng.randint(0, 30) for _ in range(200)]
    result = pl.Iter.from_(data).unique(lambda n: n % 7).to_list()
    keys = [n % 7 for n in result]
    assert len(keys) == len(set(keys))
    positions = iter(data)
    assert all(any(item == candidate for candidate in positions) for item in result)


def test_sort_default_puts_none_last() -> None:
    data = ["b", None, "a", "Z", None]
    assert pl.Iter.from_(data).sort().to_list() == ["Z", "a", "b", None, None]
    assert pl.Iter.from_([None, 2, 10]).sort().to_list() == [10, 2, None]
