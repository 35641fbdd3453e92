from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterable, AsyncIterator, Callable, Iterable
from functools import partial
from typing import TYPE_CHECKING, Any, Concatenate

from .._core import (
    NotIterableError,
    Wrapper,
    always,
    check_any_source,
    check_callable,
    check_count,
    check_int,
    check_positive,
    identity,
    noop,
    same_value_zero,
    truthy,
)
from .._iter import Iter
from .._results import NONE, Option, Some
from . import _stages as stages
from ._stages import resolve

if TYPE_CHECKING:
    from .._types import (
        AnyIterable,
        AsyncComparator,
        AsyncPredicate,
        IntoAsyncIter,
        MaybeAwaitable,
        Options,
    )

_MISSING: Any = object()


class AsyncIter[T](Wrapper[AsyncIterator[T]], AsyncIterable[T]):
    """The asynchronous counterpart of `Iter`.

    Same recipe semantics, same transforms, same terminals, but iterated with `async for`,
    and every terminal operation is a coroutine.

    Every callback may be a plain function or a coroutine function; awaitable results are awaited before use.

    Obtain one with `Iter.async_()`, or directly from an async source with `AsyncIter.from_`.

    Args:
        recipe (Callable[[], AsyncIterator[T]]): Callable producing a new async iterator over the sequence.
        options (Options | None): Opaque configuration bag.

    Example:
    ```python
    >>> import asyncio
    >>> import polyiter as pl
    >>> async def double(n: int) -> int:
    ...     await asyncio.sleep(0)
    ...     return n * 2
    >>> it = pl.Iter.from_range(5).async_().map(double).filter(lambda n: n > 2)
    >>> asyncio.run(it.to_list())
    [4, 6, 8]

    ```
    """

    __slots__ = ()

    def __aiter__(self) -> AsyncIterator[T]:
        return self._recipe()

    def _stage[**P, U](
        self,
        options: Options | None,
        factory: Callable[Concatenate[AsyncIterator[T], P], AsyncGenerator[U]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> AsyncIter[U]:
        recipe = self._recipe

        def _run() -> AsyncIterator[U]:
            return stages.run_stage(recipe(), factory, *args, **kwargs)

        return AsyncIter(_run, options)

    # factories ------------------------------------------------------------
    @staticmethod
    def from_[U](source: IntoAsyncIter[U], options: Options | None = None) -> AsyncIter[U]:
        """Wrap a sync or async iterable, or a callable producing one, without consuming it.

        Callables (plain, generator, async generator or coroutine functions) are called with no arguments on every iteration request.

        Raises:
            NotIterableError: If **source** is neither iterable, async iterable, nor callable.

        Example:
        ```python
        >>> import asyncio
        >>> import polyiter as pl
        >>> async def ticks():
        ...     for n in range(3):
        ...         await asyncio.sleep(0)
        ...         yield n
        >>> asyncio.run(pl.AsyncIter.from_(ticks).map(str).join("-"))
        '0-1-2'

        ```
        """
        match source:
            case AsyncIterable():
                return AsyncIter(partial(aiter, source), options)
            case Iterable():
                return AsyncIter(partial(stages.from_sync, source), options)
            case _ if callable(source):
                return AsyncIter(partial(stages.from_callable, source), options)
            case _:
                msg = f"from_() expects an iterable, an async iterable or a callable, got {type(source).__name__}"
                raise NotIterableError(msg)

    @staticmethod
    def from_range(
        start: float,
        end: float | None = None,
        step: float = 1,
        options: Options | None = None,
    ) -> AsyncIter[Any]:
        """Async version of `Iter.from_range`."""
        return Iter.from_range(start, end, step).async_(options)

    @staticmethod
    def iterate[U](
        func: Callable[[U | None], MaybeAwaitable[U]], options: Options | None = None
    ) -> AsyncIter[U]:
        """Async version of `Iter.iterate`. **func** may be a coroutine function.

        Example:
        ```python
        >>> import asyncio
        >>> import polyiter as pl
        >>> async def step(n):
        ...     return (n or 0) + 1
        >>> asyncio.run(pl.AsyncIter.iterate(step).find(lambda n: n % 15 == 0))
        Some(value=15)

        ```
        """
        check_callable(func, "iterate")
        return AsyncIter(partial(stages.iterate, func), options)

    # transforms ------------------------------------------------------------
    def concat(self, other: AnyIterable[T], options: Options | None = None) -> AsyncIter[T]:
        """Yield all elements of `Self`, then all elements of **other**, which may be sync or async."""
        return self._stage(options, stages.concat, check_any_source(other, "concat"))

    def append(self, other: AnyIterable[T], options: Options | None = None) -> AsyncIter[T]:
        """Alias of `concat`."""
        return self._stage(options, stages.concat, check_any_source(other, "append"))

    def prepend(self, other: AnyIterable[T], options: Options | None = None) -> AsyncIter[T]:
        """Yield all elements of **other**, which may be sync or async, then all elements of `Self`."""
        return self._stage(options, stages.prepend, check_any_source(other, "prepend"))

    def drop(self, n: int = 0, options: Options | None = None) -> AsyncIter[T]:
        return self._stage(options, stages.drop, check_count(n, "drop"))

    def drop_last(self, n: int = 0, options: Options | None = None) -> AsyncIter[T]:
        return self._stage(options, stages.drop_last, check_count(n, "drop_last"))

    def take(self, n: int = 0, options: Options | None = None) -> AsyncIter[T]:
        return self._stage(options, stages.take, check_count(n, "take"))

    def take_last(self, n: int = 0, options: Options | None = None) -> AsyncIter[T]:
        return self._stage(options, stages.take_last, check_count(n, "take_last"))

    def drop_while(
        self, func: AsyncPredicate[T] = truthy, options: Options | None = None
    ) -> AsyncIter[T]:
        func = check_callable(func, "drop_while")
        return self._stage(options, stages.drop_while, func)

    def take_while(
        self, func: AsyncPredicate[T] = truthy, options: Options | None = None
    ) -> AsyncIter[T]:
        func = check_callable(func, "take_while")
        return self._stage(options, stages.take_while, func)

    def slice(self, start: int, end: int, options: Options | None = None) -> AsyncIter[T]:
        """Yield the elements between **start** (inclusive) and **end** (exclusive), like `list[start:end]`.

        Example:
        ```python
        >>> import asyncio
        >>> import polyiter as pl
        >>> asyncio.run(pl.AsyncIter.from_range(10).slice(-4, -1).to_list())
        [6, 7, 8]

        ```
        """
        start = check_int(start, "slice")
        end = check_int(end, "slice")
        return self._stage(options, stages.slice_, start, end)

    def filter(
        self, func: AsyncPredicate[T] = truthy, options: Options | None = None
    ) -> AsyncIter[T]:
        func = check_callable(func, "filter")
        return self._stage(options, stages.filter_, func)

    def map[R](
        self,
        func: Callable[[T], MaybeAwaitable[R]] = identity,
        options: Options | None = None,
    ) -> AsyncIter[R]:
        func = check_callable(func, "map")
        return self._stage(options, stages.map_, func)

    def tap(
        self, func: Callable[[T], object] = noop, options: Options | None = None
    ) -> AsyncIter[T]:
        func = check_callable(func, "tap")
        return self._stage(options, stages.tap, func)

    def flatten(self, options: Options | None = None) -> AsyncIter[Any]:
        """Yield the elements of each element, one level deep. Elements may be sync or async iterables.

        Raises:
            NotIterableError: During iteration, on the first element that is not iterable.
        """
        return self._stage(options, stages.flatten)

    def flat(self, options: Options | None = None) -> AsyncIter[Any]:
        """Alias of `flatten`."""
        return self._stage(options, stages.flatten)

    def flat_map(
        self,
        func: Callable[[T], MaybeAwaitable[AnyIterable[Any]]] = identity,
        options: Options | None = None,
    ) -> AsyncIter[Any]:
        func = check_callable(func, "flat_map")
        return self._stage(options, stages.flat_map, func)

    def group(self, n: int, options: Options | None = None) -> AsyncIter[list[T]]:
        return self._stage(options, stages.group, check_positive(n, "group"))

    def group_while(
        self, func: AsyncPredicate[T] = always, options: Options | None = None
    ) -> AsyncIter[list[T]]:
        """See `Iter.group_while`."""
        func = check_callable(func, "group_while")
        return self._stage(options, stages.group_while, func)

    def unique(
        self,
        key: Callable[[T], Any] | None = None,
        options: Options | None = None,
    ) -> AsyncIter[T]:
        key = identity if key is None else check_callable(key, "unique")
        return self._stage(options, stages.unique, key)

    def reverse(self, options: Options | None = None) -> AsyncIter[T]:
        return self._stage(options, stages.reverse)

    def sort(
        self,
        compare: AsyncComparator[T] | None = None,
        options: Options | None = None,
    ) -> AsyncIter[T]:
        """Yield the elements in sorted order, stably.

        **compare** may be a coroutine function; the sort then awaits each comparison.

        Example:
        ```python
        >>> import asyncio
        >>> import polyiter as pl
        >>> async def by_length(a: str, b: str) -> int:
        ...     return len(a) - len(b)
        >>> words = pl.Iter.from_(["ccc", "a", "bb", "d"]).async_()
        >>> asyncio.run(words.sort(by_length).to_list())
        ['a', 'd', 'bb', 'ccc']

        ```
        """
        if compare is not None:
            check_callable(compare, "sort")
        return self._stage(options, stages.sort, compare)

    # terminals ------------------------------------------------------------
    async def to_list(self) -> list[T]:
        async with stages.scoped(aiter(self)) as it:
            return [item async for item in it]

    async def find(self, func: AsyncPredicate[T] = truthy) -> Option[T]:
        """Return `Some(element)` for the first element where **func** is truthy, or `NONE`."""
        check_callable(func, "find")
        async with stages.scoped(aiter(self)) as it:
            async for item in it:
                if await resolve(func(item)):
                    return Some(item)
        return NONE

    async def includes(self, value: object) -> bool:
        async with stages.scoped(aiter(self)) as it:
            async for item in it:
                if same_value_zero(item, value):
                    return True
        return False

    async def some(self, func: AsyncPredicate[T] = truthy) -> bool:
        check_callable(func, "some")
        async with stages.scoped(aiter(self)) as it:
            async for item in it:
                if await resolve(func(item)):
                    return True
        return False

    async def every(self, func: AsyncPredicate[T] = truthy) -> bool:
        check_callable(func, "every")
        async with stages.scoped(aiter(self)) as it:
            async for item in it:
                if not await resolve(func(item)):
                    return False
        return True

    async def reduce[U](
        self, func: Callable[[U, T], MaybeAwaitable[U]], initial: U = _MISSING
    ) -> U:
        """Left-fold the elements with **func**, which may be a coroutine function.

        Raises:
            TypeError: If the sequence is empty and no **initial** is given.
        """
        check_callable(func, "reduce")
        async with stages.scoped(aiter(self)) as it:
            accumulator = initial
            if accumulator is _MISSING:
                accumulator = await anext(it, _MISSING)
                if accumulator is _MISSING:
                    msg = "reduce() of empty iterable with no initial value"
                    raise TypeError(msg)
            async for item in it:
                accumulator = await resolve(func(accumulator, item))
            return accumulator

    async def for_each(self, func: Callable[[T], object]) -> None:
        check_callable(func, "for_each")
        async with stages.scoped(aiter(self)) as it:
            async for item in it:
                await resolve(func(item))

    async def join(self, glue: str = ",") -> str:
        if not isinstance(glue, str):
            msg = f"join() expects a string glue, got {type(glue).__name__}"
            raise TypeError(msg)
        parts = await self.map(lambda item: "" if item is None else str(item)).to_list()
        return glue.join(parts)

    async def drain(self) -> None:
        async with stages.scoped(aiter(self)) as it:
            async for _ in it:
                pass
