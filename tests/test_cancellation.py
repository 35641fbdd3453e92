"""Tests that early exits and errors release upstream resources."""

import itertools
from collections.abc import AsyncIterator, Iterator

import pytest

import polyiter as pl


class Source:
    """Infinite generator source recording when it gets closed."""

    def __init__(self) -> None:
        self.closed = 0

    def __call__(self) -> Iterator[int]:
        try:
            yield from itertools.count()
        finally:
            self.closed += 1


class AsyncSource:
    """Async counterpart of `Source`."""

    def __init__(self) -> None:
        self.closed = 0

    async def __call__(self) -> AsyncIterator[int]:
        try:
            for n in itertools.count():
                yield n
        finally:
            self.closed += 1


def test_take_closes_source() -> None:
    source = Source()
    assert pl.Iter.from_(source).map(lambda n: n * 2).take(3).to_list() == [0, 2, 4]
    assert source.closed == 1


@pytest.mark.parametrize(
    "terminal",
    [
        lambda it: it.find(lambda n: n == 3),
        lambda it: it.includes(3),
        lambda it: it.some(lambda n: n == 3),
        lambda it: it.every(lambda n: n < 3),
        lambda it: it.take_while(lambda n: n < 3).to_list(),
        lambda it: it.slice(1, 3).to_list(),
        lambda it: it.group(2).take(1).to_list(),
        lambda it: it.drop_last(2).take(1).to_list(),
    ],
)
def test_short_circuits_close_source(terminal) -> None:  # noqa: ANN001
    source = Source()
    terminal(pl.Iter.from_(source).filter(lambda _: True))
    assert source.closed == 1


def test_closing_a_partially_consumed_iterator() -> None:
    source = Source()
    it = iter(pl.Iter.from_(source).map(lambda n: n + 1))
    assert next(it) == 1
    assert source.closed == 0
    it.close()  # type: ignore[attr-defined]
    assert source.closed == 1


def test_error_closes_source() -> None:
    source = Source()

    def boom(n: int) -> int:
        if n == 2:
            msg = "boom"
            raise RuntimeError(msg)
        return n

    with pytest.raises(RuntimeError, match="boom"):
        pl.Iter.from_(source).map(boom).to_list()
    assert source.closed == 1


def test_each_iteration_gets_its_own_source() -> None:
    source = Source()
    it = pl.Iter.from_(source).take(1)
    it.to_list()
    it.to_list()
    assert source.closed == 2


@pytest.mark.asyncio
async def test_async_take_closes_source() -> None:
    source = AsyncSource()
    assert await pl.AsyncIter.from_(source).take(3).to_list() == [0, 1, 2]
    assert source.closed == 1


@pytest.mark.asyncio
async def test_async_find_closes_source() -> None:
    source = AsyncSource()
    found = await pl.AsyncIter.from_(source).map(lambda n: n * 3).find(lambda n: n > 10)
    assert found == pl.Some(12)
    assert source.closed == 1


@pytest.mark.asyncio
async def test_async_error_closes_source() -> None:
    source = AsyncSource()

    async def boom(n: int) -> int:
        if n == 2:
            msg = "boom"
            raise RuntimeError(msg)
        return n

    with pytest.raises(RuntimeError, match="boom"):
        await pl.AsyncIter.from_(source).map(boom).to_list()
    assert source.closed == 1


@pytest.mark.asyncio
async def test_async_bridge_closes_sync_source() -> None:
    source = Source()
    assert await pl.Iter.from_(source).async_().slice(2, 4).to_list() == [2, 3]
    assert source.closed == 1
