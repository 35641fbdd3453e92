"""Tests for the sequence factories: from_, from_range and iterate."""

import math
from collections.abc import Iterator

import pytest

import polyiter as pl


def _gen() -> Iterator[int]:
    yield from (1, 2, 3)


def test_from_collection() -> None:
    """Collections are wrapped without being copied or consumed."""
    data = [1, 2, 3]
    it = pl.Iter.from_(data)
    assert it.to_list() == [1, 2, 3]
    data.append(4)
    assert it.to_list() == [1, 2, 3, 4]


def test_from_generator_callable_replays() -> None:
    """A generator callable is called again for every iteration request."""
    calls: list[None] = []

    def gen() -> Iterator[int]:
        calls.append(None)
        yield from (1, 2, 3)

    it = pl.Iter.from_(gen)
    assert calls == []
    assert it.to_list() == [1, 2, 3]
    assert list(it) == [1, 2, 3]
    assert len(calls) == 2


def test_from_other_iter() -> None:
    assert pl.Iter.from_(pl.Iter.from_(_gen)).to_list() == [1, 2, 3]


def test_from_one_shot_iterator() -> None:
    """A bare iterator can only be consumed once."""
    it = pl.Iter.from_(iter([1, 2]))
    assert it.to_list() == [1, 2]
    assert it.to_list() == []


def test_from_rejects_non_iterables() -> None:
    with pytest.raises(pl.NotIterableError):
        pl.Iter.from_(42)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        pl.Iter.from_(None)  # type: ignore[arg-type]


def test_from_rejects_async_callables() -> None:
    async def agen():  # noqa: ANN202
        yield 1

    with pytest.raises(TypeError, match="AsyncIter"):
        pl.Iter.from_(agen)


def test_from_callable_returning_non_iterable() -> None:
    """The produced value is only checked once iteration starts."""
    it = pl.Iter.from_(lambda: 3)  # type: ignore[arg-type, return-value]
    with pytest.raises(pl.NotIterableError):
        it.to_list()


def test_module_level_from_dispatch() -> None:
    async def agen():  # noqa: ANN202
        yield 1

    assert isinstance(pl.from_([1]), pl.Iter)
    assert isinstance(pl.from_(_gen), pl.Iter)
    assert isinstance(pl.from_(agen), pl.AsyncIter)
    assert isinstance(pl.from_(agen()), pl.AsyncIter)


@pytest.mark.parametrize(
    ("args", "expected"),
    [
        ((3,), [0, 1, 2]),
        ((0,), []),
        ((4, 7), [4, 5, 6]),
        ((2, 8, 3), [2, 5]),
        ((3, -1, -1), [3, 2, 1, 0]),
        ((5, 0), []),
        ((0, 5, -1), []),
        ((0, 1, 0.25), [0.0, 0.25, 0.5, 0.75]),
        ((1, 0, -0.5), [1.0, 0.5]),
        ((0, 1, -0.5), []),
    ],
)
def test_from_range(args: tuple[float, ...], expected: list[float]) -> None:
    assert pl.Iter.from_range(*args).to_list() == expected


def test_from_range_infinite() -> None:
    assert pl.Iter.from_range(0, math.inf).take(3).to_list() == [0, 1, 2]
    assert pl.Iter.from_range(0, -math.inf, -2).take(3).to_list() == [0, -2, -4]
    assert pl.Iter.from_range(0, math.inf, -1).to_list() == []


def test_from_range_is_reiterable() -> None:
    it = pl.from_range(4)
    assert it.to_list() == it.to_list() == [0, 1, 2, 3]


def test_from_range_errors() -> None:
    with pytest.raises(TypeError):
        pl.Iter.from_range("3")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        pl.Iter.from_range(0, 3, True)
    with pytest.raises(TypeError):
        pl.Iter.from_range(0, None, "1")  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="zero"):
        pl.Iter.from_range(0, 3, 0)


def test_iterate() -> None:
    """The first element is `func(None)`, each next one `func(previous)`."""
    seen: list[int | None] = []

    def step(n: int | None) -> int:
        seen.append(n)
        return (n or 0) + 1

    assert pl.iterate(step).take(4).to_list() == [1, 2, 3, 4]
    assert seen[0] is None
    assert seen[1:] == [1, 2, 3]


def test_iterate_is_lazy() -> None:
    calls: list[object] = []
    it = pl.Iter.iterate(lambda n: calls.append(n) or 1)
    assert calls == []
    assert it.take(0).to_list() == []
    assert calls == []


def test_iterate_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        pl.Iter.iterate(42)  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "args",
    [
        (0, math.nan),
        (math.nan,),
        (math.nan, 3),
        (0, 3, math.nan),
        (math.inf, 3),
        (0, 3, math.inf),
    ],
)
def test_from_range_rejects_non_finite_arguments_eagerly(args: tuple[float, ...]) -> None:
    with pytest.raises(ValueError, match="from_range"):
        pl.Iter.from_range(*args)
