"""Synchronous stage generators.

Each stage takes the upstream iterator as first argument and returns a new iterator.
Stages are only ever called from `run_stage`, once per iteration request, so no state is shared between iterations.
"""

from __future__ import annotations

import itertools
import logging
import math
from collections import deque
from collections.abc import Callable, Generator, Iterable, Iterator
from contextlib import contextmanager
from functools import cmp_to_key
from typing import Any, Concatenate

import cytoolz as cz
import more_itertools as mit

from .._core import SeenKeys, default_sort_key, not_iterable

logger = logging.getLogger(__name__)


@contextmanager
def scoped[T](iterator: Iterator[T]) -> Generator[Iterator[T]]:
    """Close **iterator** on exit, if it supports closing."""
    try:
        yield iterator
    finally:
        close = getattr(iterator, "close", None)
        if close is not None:
            close()


def run_stage[**P, U](
    source: Iterator[Any],
    factory: Callable[Concatenate[Iterator[Any], P], Iterable[U]],
    *args: P.args,
    **kwargs: P.kwargs,
) -> Generator[U]:
    with scoped(source):
        yield from factory(source, *args, **kwargs)


def from_callable[T](factory: Callable[[], Iterable[T]]) -> Generator[T]:
    produced = factory()
    if not isinstance(produced, Iterable):
        raise not_iterable(produced, "from_")
    with scoped(iter(produced)) as it:
        yield from it


def arithmetic(start: float, end: float, step: float) -> Iterator[float]:
    span = (end - start) / step
    if math.isinf(span):
        indices = itertools.count() if span > 0 else iter(())
    else:
        indices = iter(range(max(0, math.ceil(span))))
    return (start + i * step for i in indices)


def iterate[T](func: Callable[[T | None], T]) -> Generator[T]:
    yield from cz.itertoolz.iterate(func, func(None))


def concat[T](data: Iterator[T], other: Iterable[T]) -> Iterator[T]:
    return cz.itertoolz.concat((data, other))


def prepend[T](data: Iterator[T], other: Iterable[T]) -> Iterator[T]:
    return cz.itertoolz.concat((other, data))


def take[T](data: Iterator[T], n: int) -> Iterator[T]:
    return cz.itertoolz.take(n, data)


def drop[T](data: Iterator[T], n: int) -> Iterator[T]:
    return cz.itertoolz.drop(n, data)


def drop_while[T](data: Iterator[T], func: Callable[[T], object]) -> Iterator[T]:
    return itertools.dropwhile(func, data)


def take_while[T](data: Iterator[T], func: Callable[[T], object]) -> Iterator[T]:
    return itertools.takewhile(func, data)


def filter_[T](data: Iterator[T], func: Callable[[T], object]) -> Iterator[T]:
    return filter(func, data)


def map_[T, R](data: Iterator[T], func: Callable[[T], R]) -> Iterator[R]:
    return map(func, data)


def tap[T](data: Iterator[T], func: Callable[[T], object]) -> Iterator[T]:
    return mit.side_effect(func, data)


def take_last[T](data: Iterator[T], n: int) -> Generator[T]:
    window = deque(data, maxlen=n)
    logger.debug("take_last buffered %d element(s)", len(window))
    yield from window


def drop_last[T](data: Iterator[T], n: int) -> Iterator[T]:
    if n == 0:
        return data
    return mit.islice_extended(data, None, -n)


def slice_[T](data: Iterator[T], start: int, end: int) -> Iterator[T]:
    return mit.islice_extended(data, start, end)


def flatten(data: Iterator[Any]) -> Generator[Any]:
    for item in data:
        if not isinstance(item, Iterable):
            logger.debug("flatten met a non-iterable %s", type(item).__name__)
            raise not_iterable(item, "flatten")
        yield from item


def flat_map[T](data: Iterator[T], func: Callable[[T], Any]) -> Generator[Any]:
    return flatten(map(func, data))


def group[T](data: Iterator[T], n: int) -> Iterator[list[T]]:
    return mit.chunked(data, n)


def group_while[T](data: Iterator[T], func: Callable[[T], object]) -> Iterator[list[T]]:
    return mit.split_before(data, lambda item: not func(item))


def unique[T](data: Iterator[T], func: Callable[[T], Any]) -> Iterator[T]:
    seen = SeenKeys()
    return (item for item in data if seen.add(func(item)))


def reverse[T](data: Iterator[T]) -> Generator[T]:
    buffer = list(data)
    logger.debug("reverse buffered %d element(s)", len(buffer))
    yield from reversed(buffer)


def sort[T](data: Iterator[T], compare: Callable[[T, T], float] | None) -> Generator[T]:
    key = default_sort_key if compare is None else cmp_to_key(compare)
    buffer = sorted(data, key=key)
    logger.debug("sort buffered %d element(s)", len(buffer))
    yield from buffer
