"""Asynchronous stage generators.

Mirrors `polyiter._iter._stages`, stage for stage.
User callbacks may return awaitables, which are awaited before their result is used.
Every stage that pulls from another async iterator closes it when done, so early exits release upstream resources.
"""

from __future__ import annotations

import inspect
import logging
from collections import deque
from collections.abc import (
    AsyncGenerator,
    AsyncIterable,
    AsyncIterator,
    Awaitable,
    Callable,
    Iterable,
)
from contextlib import aclosing, asynccontextmanager
from typing import Any, Concatenate

from .._core import SeenKeys, default_sort_key, not_iterable
from .._iter import _stages as sync_stages

logger = logging.getLogger(__name__)


async def resolve[T](value: T | Awaitable[T]) -> T:
    if inspect.isawaitable(value):
        return await value
    return value


@asynccontextmanager
async def scoped[T](iterator: AsyncIterator[T]) -> AsyncGenerator[AsyncIterator[T]]:
    """Close **iterator** on exit, if it supports closing."""
    try:
        yield iterator
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()


async def run_stage[**P, U](
    source: AsyncIterator[Any],
    factory: Callable[Concatenate[AsyncIterator[Any], P], AsyncGenerator[U]],
    *args: P.args,
    **kwargs: P.kwargs,
) -> AsyncGenerator[U]:
    async with scoped(source), aclosing(factory(source, *args, **kwargs)) as stage:
        async for item in stage:
            yield item


async def each(source: Iterable[Any] | AsyncIterable[Any]) -> AsyncGenerator[Any]:
    """Iterate a sync or async iterable through the async protocol."""
    if isinstance(source, AsyncIterable):
        async with scoped(aiter(source)) as it:
            async for item in it:
                yield item
    else:
        with sync_stages.scoped(iter(source)) as it:
            for item in it:
                yield item


async def from_sync[T](source: Iterable[T]) -> AsyncGenerator[T]:
    with sync_stages.scoped(iter(source)) as it:
        for item in it:
            yield item


async def from_callable(factory: Callable[[], Any]) -> AsyncGenerator[Any]:
    produced = await resolve(factory())
    if not isinstance(produced, (Iterable, AsyncIterable)):
        raise not_iterable(produced, "from_")
    async with aclosing(each(produced)) as it:
        async for item in it:
            yield item


async def iterate[T](func: Callable[[T | None], T | Awaitable[T]]) -> AsyncGenerator[T]:
    value: T | None = None
    while True:
        value = await resolve(func(value))
        yield value


async def concat[T](data: AsyncIterator[T], other: Iterable[T] | AsyncIterable[T]) -> AsyncGenerator[T]:
    async for item in data:
        yield item
    async with aclosing(each(other)) as it:
        async for item in it:
            yield item


async def prepend[T](data: AsyncIterator[T], other: Iterable[T] | AsyncIterable[T]) -> AsyncGenerator[T]:
    async with aclosing(each(other)) as it:
        async for item in it:
            yield item
    async for item in data:
        yield item


async def take[T](data: AsyncIterator[T], n: int) -> AsyncGenerator[T]:
    if n == 0:
        return
    taken = 0
    async for item in data:
        yield item
        taken += 1
        if taken == n:
            return


async def drop[T](data: AsyncIterator[T], n: int) -> AsyncGenerator[T]:
    skipped = 0
    async for item in data:
        if skipped < n:
            skipped += 1
            continue
        yield item


async def take_last[T](data: AsyncIterator[T], n: int) -> AsyncGenerator[T]:
    window: deque[T] = deque(maxlen=n)
    async for item in data:
        window.append(item)
    logger.debug("take_last buffered %d element(s)", len(window))
    for item in window:
        yield item


async def drop_last[T](data: AsyncIterator[T], n: int) -> AsyncGenerator[T]:
    window: deque[T] = deque()
    async for item in data:
        window.append(item)
        if len(window) > n:
            yield window.popleft()


async def drop_while[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[T]:
    dropping = True
    async for item in data:
        if dropping and await resolve(func(item)):
            continue
        dropping = False
        yield item


async def take_while[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[T]:
    async for item in data:
        if not await resolve(func(item)):
            return
        yield item


async def slice_[T](data: AsyncIterator[T], start: int, end: int) -> AsyncGenerator[T]:
    if start >= 0:
        async with aclosing(drop(data, start)) as rest:
            bounded = take(rest, max(0, end - start)) if end >= 0 else drop_last(rest, -end)
            async with aclosing(bounded) as it:
                async for item in it:
                    yield item
    else:
        # the true length is only known once the source is exhausted
        window: deque[T] = deque(maxlen=-start)
        length = 0
        async for item in data:
            window.append(item)
            length += 1
        stop = end if end >= 0 else length + end
        first = length - len(window)
        for index, item in enumerate(window, first):
            if index >= stop:
                return
            if index >= length + start:
                yield item


async def filter_[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[T]:
    async for item in data:
        if await resolve(func(item)):
            yield item


async def map_[T, R](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[R]:
    async for item in data:
        yield await resolve(func(item))


async def tap[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[T]:
    async for item in data:
        await resolve(func(item))
        yield item


async def flatten(data: AsyncIterator[Any]) -> AsyncGenerator[Any]:
    async for item in data:
        if not isinstance(item, (Iterable, AsyncIterable)):
            logger.debug("flatten met a non-iterable %s", type(item).__name__)
            raise not_iterable(item, "flatten")
        async with aclosing(each(item)) as it:
            async for inner in it:
                yield inner


async def flat_map[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[Any]:
    async with aclosing(map_(data, func)) as mapped, aclosing(flatten(mapped)) as it:
        async for item in it:
            yield item


async def group[T](data: AsyncIterator[T], n: int) -> AsyncGenerator[list[T]]:
    chunk: list[T] = []
    async for item in data:
        chunk.append(item)
        if len(chunk) == n:
            yield chunk
            chunk = []
    if chunk:
        yield chunk


async def group_while[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[list[T]]:
    chunk: list[T] = []
    async for item in data:
        if not await resolve(func(item)) and chunk:
            yield chunk
            chunk = []
        chunk.append(item)
    if chunk:
        yield chunk


async def unique[T](data: AsyncIterator[T], func: Callable[[T], Any]) -> AsyncGenerator[T]:
    seen = SeenKeys()
    async for item in data:
        if seen.add(await resolve(func(item))):
            yield item


async def reverse[T](data: AsyncIterator[T]) -> AsyncGenerator[T]:
    buffer = [item async for item in data]
    logger.debug("reverse buffered %d element(s)", len(buffer))
    for item in reversed(buffer):
        yield item


async def sort[T](
    data: AsyncIterator[T], compare: Callable[[T, T], Any] | None
) -> AsyncGenerator[T]:
    buffer = [item async for item in data]
    logger.debug("sort buffered %d element(s)", len(buffer))
    if compare is None:
        ordered = sorted(buffer, key=default_sort_key)
    else:
        ordered = await _merge_sort(buffer, compare)
    for item in ordered:
        yield item


async def _merge_sort[T](items: list[T], compare: Callable[[T, T], Any]) -> list[T]:
    """Stable merge sort, awaiting each comparison."""
    if len(items) <= 1:
        return items
    middle = len(items) // 2
    left = await _merge_sort(items[:middle], compare)
    right = await _merge_sort(items[middle:], compare)
    merged: list[T] = []
    i = j = 0
    while i < len(left) and j < len(right):
        # ties keep the left element first
        if await resolve(compare(right[j], left[i])) < 0:
            merged.append(right[j])
            j += 1
        else:
            merged.append(left[i])
            i += 1
    merged.extend(left[i:])
    merged.extend(right[j:])
    return merged
