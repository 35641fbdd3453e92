"""Benchmarks for polyiter package - benchs.py."""

import asyncio
from collections.abc import AsyncIterator

import polyiter as pl

from ._registery import bench

# Helper functions
# ------------------------------------------------------------


def _is_even(x: int) -> bool:
    return x % 2 == 0


def _square(x: int) -> int:
    return x * x


async def _async_square(x: int) -> int:
    return x * x


def _by_value(a: int, b: int) -> int:
    return a - b


async def _async_by_value(a: int, b: int) -> int:
    return a - b


def _shuffled(size: int) -> list[int]:
    return [(i * 7919) % size for i in range(size)]


# Benchmark classes
# ------------------------------------------------------------


class MapFilter:
    """Benchmark a lazy map/filter pipeline against its plain python equivalent."""

    @bench()
    @staticmethod
    def comprehension(data: list[int]) -> object:
        """Baseline list comprehension."""
        return [_square(x) for x in data if _is_even(x)]

    @bench()
    @staticmethod
    def sync(data: list[int]) -> object:
        """Sync pipeline."""
        return pl.Iter.from_(data).filter(_is_even).map(_square).to_list()

    @bench()
    @staticmethod
    def async_plain_callbacks(data: list[int]) -> object:
        """Async pipeline with plain callbacks."""
        it = pl.Iter.from_(data).async_().filter(_is_even).map(_square)
        return asyncio.run(it.to_list())

    @bench()
    @staticmethod
    def async_coroutine_callbacks(data: list[int]) -> object:
        """Async pipeline awaiting a coroutine for every element."""
        it = pl.Iter.from_(data).async_().filter(_is_even).map(_async_square)
        return asyncio.run(it.to_list())


class EarlyExit:
    """Benchmark pipelines that stop pulling before the source is exhausted."""

    @bench()
    @staticmethod
    def take(data: list[int]) -> object:
        return pl.Iter.from_(data).map(_square).take(10).to_list()

    @bench()
    @staticmethod
    def find(data: list[int]) -> object:
        target = len(data) // 2
        return pl.Iter.from_(data).find(lambda x: x == target)

    @bench(gen=lambda size: size)
    @staticmethod
    def iterate_take_while(size: int) -> object:
        """Unbounded source cut by a predicate."""
        return (
            pl.Iter.iterate(lambda n: (n or 0) + 1)
            .take_while(lambda n: n <= size)
            .drain()
        )


class Slicing:
    """Benchmark slices needing more or less buffering."""

    @bench()
    @staticmethod
    def positive(data: list[int]) -> object:
        return pl.Iter.from_(data).slice(10, 100).to_list()

    @bench()
    @staticmethod
    def negative(data: list[int]) -> object:
        """Buffers only the requested tail."""
        return pl.Iter.from_(data).slice(-100, -10).to_list()

    @bench()
    @staticmethod
    def async_negative(data: list[int]) -> object:
        return asyncio.run(pl.Iter.from_(data).async_().slice(-100, -10).to_list())

    @bench()
    @staticmethod
    def take_last(data: list[int]) -> object:
        return pl.Iter.from_(data).take_last(100).to_list()


class Sorting:
    """Benchmark default, comparator and async comparator sorts."""

    @bench(gen=_shuffled)
    @staticmethod
    def default_order(data: list[int]) -> object:
        """Sorts by string value."""
        return pl.Iter.from_(data).sort().to_list()

    @bench(gen=_shuffled)
    @staticmethod
    def comparator(data: list[int]) -> object:
        return pl.Iter.from_(data).sort(_by_value).to_list()

    @bench(gen=_shuffled)
    @staticmethod
    def async_comparator(data: list[int]) -> object:
        return asyncio.run(pl.Iter.from_(data).async_().sort(_async_by_value).to_list())


class Grouping:
    """Benchmark grouping and deduplication."""

    @bench()
    @staticmethod
    def group(data: list[int]) -> object:
        return pl.Iter.from_(data).group(8).to_list()

    @bench()
    @staticmethod
    def group_while(data: list[int]) -> object:
        return pl.Iter.from_(data).group_while(lambda x: x % 16 != 0).to_list()

    @bench(gen=lambda size: [i % 32 for i in range(size)])
    @staticmethod
    def unique(data: list[int]) -> object:
        return pl.Iter.from_(data).unique().to_list()

    @bench(gen=lambda size: [[i, i + 1] for i in range(size)])
    @staticmethod
    def flatten(data: list[list[int]]) -> object:
        return pl.Iter.from_(data).flatten().to_list()


class AsyncSources:
    """Benchmark async generator sources."""

    @bench(gen=lambda size: size)
    @staticmethod
    def async_generator(size: int) -> object:
        async def _source() -> AsyncIterator[int]:
            for i in range(size):
                yield i

        return asyncio.run(pl.AsyncIter.from_(_source).reduce(lambda a, b: a + b, 0))
