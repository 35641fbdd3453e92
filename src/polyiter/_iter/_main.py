from __future__ import annotations

import functools
import math
from collections.abc import Callable, Iterable, Iterator
from functools import partial
from typing import TYPE_CHECKING, Any, Concatenate

import more_itertools as mit

from .._core import (
    NotIterableError,
    Wrapper,
    always,
    check_callable,
    check_count,
    check_int,
    check_positive,
    check_real,
    check_sync_source,
    identity,
    is_async_callable,
    is_generator_callable,
    noop,
    same_value_zero,
    truthy,
)
from .._results import NONE, Option, Some
from . import _stages as stages

if TYPE_CHECKING:
    from .._aiter import AsyncIter
    from .._types import Comparator, IntoIter, Options, Predicate

_MISSING: Any = object()


class Iter[T](Wrapper[Iterator[T]], Iterable[T]):
    """A lazy, re-iterable sequence with a chainable set of transformations.

    An `Iter` is a *recipe*, not a cursor: every call to `iter()` replays the whole pipeline from the original source,
    with fresh buffers for every stage.

    Nothing is evaluated until a terminal operation (`to_list`, `find`, `reduce`, ...) or a `for` loop pulls from it,
    so infinite sources are fine as long as something downstream stops pulling.

    - To instantiate from a collection, a generator callable or another `Iter`, use `Iter.from_`.
    - To instantiate an arithmetic progression, use `Iter.from_range`.
    - To instantiate an infinite sequence of repeated applications, use `Iter.iterate`.

    Every factory and transform accepts a trailing, optional **options** mapping.

    It is stored as-is on the new `Iter` and never changes the elements produced.

    Collections and generator callables replay from scratch, but a one-shot iterator given as source can only be consumed once.

    Args:
        recipe (Callable[[], Iterator[T]]): Callable producing a new iterator over the sequence.
        options (Options | None): Opaque configuration bag.

    Example:
    ```python
    >>> import polyiter as pl
    >>> evens = pl.Iter.from_range(10).filter(lambda x: x % 2 == 0)
    >>> evens.to_list()
    [0, 2, 4, 6, 8]
    >>> evens.map(lambda x: x * 10).take(2).to_list()
    [0, 20]
    >>> # Re-iterating replays the recipe
    >>> list(evens) == list(evens)
    True

    ```
    """

    __slots__ = ()

    def __iter__(self) -> Iterator[T]:
        return self._recipe()

    def _stage[**P, U](
        self,
        options: Options | None,
        factory: Callable[Concatenate[Iterator[T], P], Iterable[U]],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Iter[U]:
        recipe = self._recipe

        def _run() -> Iterator[U]:
            return stages.run_stage(recipe(), factory, *args, **kwargs)

        return Iter(_run, options)

    # factories ------------------------------------------------------------
    @staticmethod
    def from_[U](source: IntoIter[U], options: Options | None = None) -> Iter[U]:
        """Wrap a collection, a generator callable, or another `Iter`, without consuming it.

        A generator callable is called with no arguments on every iteration request, so each iteration gets a fresh generator.

        Args:
            source (IntoIter[U]): The source to wrap.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[U]: A new `Iter` over the source.

        Raises:
            NotIterableError: If **source** is neither iterable nor callable.
            TypeError: If **source** is an async generator function or coroutine function. Use `AsyncIter.from_` instead.

        Example:
        ```python
        >>> import polyiter as pl
        >>> def gen():
        ...     yield from (1, 2, 3)
        >>> it = pl.Iter.from_(gen)
        >>> it.to_list()
        [1, 2, 3]
        >>> it.to_list()
        [1, 2, 3]
        >>> pl.Iter.from_(42)
        Traceback (most recent call last):
            ...
        polyiter._core._checks.NotIterableError: from_() expects an iterable or a generator callable, got int

        ```
        """
        match source:
            case Iterable():
                return Iter(partial(iter, source), options)
            case _ if is_async_callable(source):
                msg = "Iter.from_() got an async callable, use AsyncIter.from_() instead"
                raise TypeError(msg)
            case _ if is_generator_callable(source):
                return Iter(partial(stages.from_callable, source), options)
            case _:
                msg = f"from_() expects an iterable or a generator callable, got {type(source).__name__}"
                raise NotIterableError(msg)

    @staticmethod
    def from_range(
        start: float,
        end: float | None = None,
        step: float = 1,
        options: Options | None = None,
    ) -> Iter[Any]:
        """Create an arithmetic progression over `[start, end)`, stepped by **step**.

        With a single argument, the progression is `[0, start)`.

        A negative **step** gives a descending progression.

        If the **step** points away from **end**, the sequence is empty.

        Floats are accepted; the n-th element is computed as `start + n * step`.

        Args:
            start (float): First element, or the exclusive end if **end** is omitted.
            end (float | None): Exclusive end of the progression.
            step (float): Difference between consecutive elements. Defaults to 1.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[Any]: The progression.

        Raises:
            TypeError: If an argument is not a number.
            ValueError: If **step** is zero, if **start** or **step** is not finite, or if **end** is NaN.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(3).to_list()
        [0, 1, 2]
        >>> pl.Iter.from_range(2, 8, 3).to_list()
        [2, 5]
        >>> pl.Iter.from_range(3, -1, -1).to_list()
        [3, 2, 1, 0]
        >>> pl.Iter.from_range(0, 1, 0.25).to_list()
        [0.0, 0.25, 0.5, 0.75]

        ```
        """
        check_real(start, "from_range")
        check_real(step, "from_range")
        if end is None:
            start, end = 0, start
        else:
            check_real(end, "from_range")
        if step == 0:
            msg = "from_range() step must not be zero"
            raise ValueError(msg)
        if any(isinstance(x, float) and not math.isfinite(x) for x in (start, step)) or (
            isinstance(end, float) and math.isnan(end)
        ):
            msg = "from_range() start and step must be finite, and end must not be NaN"
            raise ValueError(msg)
        match (start, end, step):
            case (int(), int(), int()):
                return Iter(lambda: iter(range(start, end, step)), options)  # type: ignore[arg-type]
            case _:
                return Iter(partial(stages.arithmetic, start, end, step), options)

    @staticmethod
    def iterate[U](
        func: Callable[[U | None], U], options: Options | None = None
    ) -> Iter[U]:
        """Create an infinite sequence where the first element is `func(None)` and each next one is `func(previous)`.

        **Warning** ⚠️
            This creates an infinite sequence.
            Be sure to use `take()`, `take_while()` or a short-circuiting terminal such as `find()`.

        Args:
            func (Callable[[U | None], U]): Step function.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[U]: The infinite sequence.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.iterate(lambda n: (n or 0) + 1).take(4).to_list()
        [1, 2, 3, 4]

        ```
        """
        check_callable(func, "iterate")
        return Iter(partial(stages.iterate, func), options)

    # bridge ------------------------------------------------------------
    def async_(self, options: Options | None = None) -> AsyncIter[T]:
        """Expose this sequence through the async iteration protocol.

        Elements and their order are unchanged. The new wrapper only carries **options**, not the current ones.

        Args:
            options (Options | None): Opaque configuration bag for the new wrapper.

        Returns:
            AsyncIter[T]: An async view of the same recipe.

        Example:
        ```python
        >>> import asyncio
        >>> import polyiter as pl
        >>> it = pl.Iter.from_range(3).async_({"opt": 1})
        >>> asyncio.run(it.to_list())
        [0, 1, 2]
        >>> it.options
        {'opt': 1}

        ```
        """
        from .._aiter import AsyncIter, _stages as astages

        return AsyncIter(partial(astages.from_sync, self), options)

    # transforms ------------------------------------------------------------
    def concat(self, other: Iterable[T], options: Options | None = None) -> Iter[T]:
        """Yield all elements of `Self`, then all elements of **other**.

        Args:
            other (Iterable[T]): Elements to append.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[T]: The concatenated sequence.

        Raises:
            NotIterableError: If **other** is not iterable.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2]).concat([3]).concat(pl.Iter.from_range(4, 6)).to_list()
        [1, 2, 3, 4, 5]

        ```
        """
        return self._stage(options, stages.concat, check_sync_source(other, "concat"))

    def append(self, other: Iterable[T], options: Options | None = None) -> Iter[T]:
        """Alias of `concat`."""
        return self._stage(options, stages.concat, check_sync_source(other, "append"))

    def prepend(self, other: Iterable[T], options: Options | None = None) -> Iter[T]:
        """Yield all elements of **other**, then all elements of `Self`.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2]).prepend([3]).prepend([4, 5]).to_list()
        [4, 5, 3, 1, 2]

        ```
        """
        return self._stage(options, stages.prepend, check_sync_source(other, "prepend"))

    def drop(self, n: int = 0, options: Options | None = None) -> Iter[T]:
        """Skip the first **n** elements, and yield the rest.

        Args:
            n (int): Number of elements to skip. Defaults to 0.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[T]: The remaining elements.

        Raises:
            TypeError: If **n** is not an integer.
            ValueError: If **n** is negative.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4, 5]).drop(3).to_list()
        [4, 5]

        ```
        """
        return self._stage(options, stages.drop, check_count(n, "drop"))

    def drop_last(self, n: int = 0, options: Options | None = None) -> Iter[T]:
        """Yield all but the last **n** elements.

        Keeps a window of **n** elements; an element is only yielded once a newer one pushes it out of the window.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4, 5]).drop_last(3).to_list()
        [1, 2]
        >>> pl.Iter.iterate(lambda n: (n or 0) + 1).drop_last(2).take(3).to_list()
        [1, 2, 3]

        ```
        """
        return self._stage(options, stages.drop_last, check_count(n, "drop_last"))

    def take(self, n: int = 0, options: Options | None = None) -> Iter[T]:
        """Yield the first **n** elements, then stop pulling from the source.

        Note:
            Omitting **n** takes nothing, not everything.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4, 5]).take(3).to_list()
        [1, 2, 3]
        >>> pl.Iter.from_([1, 2]).take(3).to_list()
        [1, 2]

        ```
        """
        return self._stage(options, stages.take, check_count(n, "take"))

    def take_last(self, n: int = 0, options: Options | None = None) -> Iter[T]:
        """Yield the last **n** elements, in their original order.

        The source is fully consumed before anything is yielded.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4, 5]).take_last(3).to_list()
        [3, 4, 5]

        ```
        """
        return self._stage(options, stages.take_last, check_count(n, "take_last"))

    def drop_while(
        self, func: Predicate[T] = truthy, options: Options | None = None
    ) -> Iter[T]:
        """Skip elements while **func** is truthy, then yield that element and everything after it.

        **func** is not called again after its first falsy result.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4, 5]).drop_while(lambda n: n != 3).to_list()
        [3, 4, 5]
        >>> pl.Iter.from_([1, 2, 0, 4, 5]).drop_while().to_list()
        [0, 4, 5]

        ```
        """
        func = check_callable(func, "drop_while")
        return self._stage(options, stages.drop_while, func)

    def take_while(
        self, func: Predicate[T] = truthy, options: Options | None = None
    ) -> Iter[T]:
        """Yield elements while **func** is truthy.

        The first failing element is consumed, but not yielded.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 0, 4, 5]).take_while().to_list()
        [1, 2]

        ```
        """
        func = check_callable(func, "take_while")
        return self._stage(options, stages.take_while, func)

    def slice(self, start: int, end: int, options: Options | None = None) -> Iter[T]:
        """Yield the elements between **start** (inclusive) and **end** (exclusive).

        Same semantics as `list[start:end]`, negative indices included.

        Non-negative bounds are resolved by counting, so they work on infinite sources.

        A negative bound needs a window of the trailing elements, since the end is unknown until the source is exhausted.

        Args:
            start (int): Start index.
            end (int): End index.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[T]: The sliced sequence.

        Raises:
            TypeError: If **start** or **end** is not an integer.

        Example:
        ```python
        >>> import polyiter as pl
        >>> data = pl.Iter.from_range(10)
        >>> data.slice(1, 4).to_list()
        [1, 2, 3]
        >>> data.slice(-3, -1).to_list()
        [7, 8]
        >>> data.slice(3, -5).to_list()
        [3, 4]
        >>> pl.Iter.iterate(lambda n: (n or 0) + 1).slice(2, 4).to_list()
        [3, 4]

        ```
        """
        start = check_int(start, "slice")
        end = check_int(end, "slice")
        return self._stage(options, stages.slice_, start, end)

    def filter(
        self, func: Predicate[T] = truthy, options: Options | None = None
    ) -> Iter[T]:
        """Yield the elements for which **func** is truthy.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 0, 3, None, 5, False, 7, ""]).filter().to_list()
        [1, 3, 5, 7]

        ```
        """
        func = check_callable(func, "filter")
        return self._stage(options, stages.filter_, func)

    def map[R](
        self, func: Callable[[T], R] = identity, options: Options | None = None
    ) -> Iter[R]:
        """Yield `func(element)` for each element.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3]).map(lambda n: n * n).to_list()
        [1, 4, 9]

        ```
        """
        func = check_callable(func, "map")
        return self._stage(options, stages.map_, func)

    def tap(
        self, func: Callable[[T], object] = noop, options: Options | None = None
    ) -> Iter[T]:
        """Call **func** on each element for its side effects, and yield the element unchanged.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2]).tap(print).map(lambda n: n * 10).to_list()
        1
        2
        [10, 20]

        ```
        """
        func = check_callable(func, "tap")
        return self._stage(options, stages.tap, func)

    def flatten(self: Iter[Iterable[Any]], options: Options | None = None) -> Iter[Any]:
        """Yield the elements of each element, one level deep.

        Raises:
            NotIterableError: During iteration, on the first element that is not iterable.

        Example:
        ```python
        >>> import polyiter as pl
        >>> ranges = pl.Iter.from_([pl.Iter.from_range(1), pl.Iter.from_range(2), [7]])
        >>> ranges.flatten().to_list()
        [0, 0, 1, 7]
        >>> pl.Iter.from_([[1], 2]).flatten().to_list()
        Traceback (most recent call last):
            ...
        polyiter._core._checks.NotIterableError: flatten() expects iterable elements, got int

        ```
        """
        return self._stage(options, stages.flatten)

    def flat(self: Iter[Iterable[Any]], options: Options | None = None) -> Iter[Any]:
        """Alias of `flatten`."""
        return self._stage(options, stages.flatten)

    def flat_map[R](
        self,
        func: Callable[[T], Iterable[R]] = identity,
        options: Options | None = None,
    ) -> Iter[R]:
        """Equivalent to `map(func).flatten()`.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3]).flat_map(lambda n: [10 * n + i for i in range(n)]).to_list()
        [10, 20, 21, 30, 31, 32]

        ```
        """
        func = check_callable(func, "flat_map")
        return self._stage(options, stages.flat_map, func)

    def group(self, n: int, options: Options | None = None) -> Iter[list[T]]:
        """Partition the sequence into lists of **n** elements. The last list may be shorter.

        Raises:
            TypeError: If **n** is not an integer.
            ValueError: If **n** is not positive.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4, 5]).group(2).to_list()
        [[1, 2], [3, 4], [5]]

        ```
        """
        return self._stage(options, stages.group, check_positive(n, "group"))

    def group_while(
        self, func: Predicate[T] = always, options: Options | None = None
    ) -> Iter[list[T]]:
        """Partition the sequence into consecutive groups.

        The first element always opens the first group.

        Each later element joins the open group if **func** is truthy for it, and opens a new group otherwise.

        Without **func**, everything lands in a single group.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(10).group_while(lambda n: n % 4 != 0 and n % 5 != 0).to_list()
        [[0, 1, 2, 3], [4], [5, 6, 7], [8, 9]]

        ```
        """
        func = check_callable(func, "group_while")
        return self._stage(options, stages.group_while, func)

    def unique(
        self,
        key: Callable[[T], Any] | None = None,
        options: Options | None = None,
    ) -> Iter[T]:
        """Yield the first element for each distinct `key(element)`, in original order.

        Keys are compared like `includes` does: by equality, with all NaN keys counting as one.

        Unhashable keys are supported, but slower.

        Args:
            key (Callable[[T], Any] | None): Function computing the key. Defaults to the element itself.
            options (Options | None): Opaque configuration bag.

        Returns:
            Iter[T]: The deduplicated sequence.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 1, 2, 1, 2, 3]).unique().to_list()
        [1, 2, 3]
        >>> pl.Iter.from_range(6).unique(lambda n: n // 2).to_list()
        [0, 2, 4]

        ```
        """
        key = identity if key is None else check_callable(key, "unique")
        return self._stage(options, stages.unique, key)

    def reverse(self, options: Options | None = None) -> Iter[T]:
        """Yield the elements in reverse order.

        The whole source is buffered first, so it must be finite.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3]).reverse().to_list()
        [3, 2, 1]

        ```
        """
        return self._stage(options, stages.reverse)

    def sort(
        self,
        compare: Comparator[T] | None = None,
        options: Options | None = None,
    ) -> Iter[T]:
        """Yield the elements in sorted order.

        The sort is stable. **compare** follows the usual comparator contract:
        negative if the first argument comes first, positive if the second one does, zero to keep their order.

        Without **compare**, elements are ordered by their `str()` form, and `None` elements go last.

        The whole source is buffered first, so it must be finite.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([10, 9, 1, 100]).sort().to_list()
        [1, 10, 100, 9]
        >>> pl.Iter.from_(["b", None, "a", "Z"]).sort().to_list()
        ['Z', 'a', 'b', None]
        >>> pl.Iter.from_([5, 2, 8, 4]).sort(lambda a, b: b - a).to_list()
        [8, 5, 4, 2]

        ```
        """
        if compare is not None:
            check_callable(compare, "sort")
        return self._stage(options, stages.sort, compare)

    # terminals ------------------------------------------------------------
    def to_list(self) -> list[T]:
        """Collect all elements into a `list`.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(3).to_list()
        [0, 1, 2]

        ```
        """
        with stages.scoped(iter(self)) as it:
            return list(it)

    def find(self, func: Predicate[T] = truthy) -> Option[T]:
        """Return the first element for which **func** is truthy.

        Stops pulling as soon as a match is found, so this works on infinite sources that contain a match.

        Returns:
            Option[T]: `Some(element)`, or `NONE` if nothing matched.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.iterate(lambda n: (n or 0) + 1).find(lambda n: n % 15 == 0)
        Some(value=15)
        >>> pl.Iter.from_([0, None, "", False]).find()
        NONE

        ```
        """
        check_callable(func, "find")
        with stages.scoped(iter(self)) as it:
            for item in it:
                if func(item):
                    return Some(item)
        return NONE

    def includes(self, value: object) -> bool:
        """Check whether any element equals **value**.

        `0` and `-0.0` are equal, and a NaN query matches a NaN element. Stops at the first match.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(1).includes(-0.0)
        True
        >>> pl.Iter.from_range(15).includes(17)
        False

        ```
        """
        with stages.scoped(iter(self)) as it:
            return any(same_value_zero(item, value) for item in it)

    def some(self, func: Predicate[T] = truthy) -> bool:
        """Check whether **func** is truthy for any element. Stops at the first truthy result."""
        check_callable(func, "some")
        with stages.scoped(iter(self)) as it:
            return any(func(item) for item in it)

    def every(self, func: Predicate[T] = truthy) -> bool:
        """Check whether **func** is truthy for all elements. Stops at the first falsy result.

        Never returns on an infinite source where **func** never fails.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, True, "foo"]).every()
        True
        >>> pl.Iter.iterate(lambda n: (n or 0) + 1).every(lambda n: n != 42)
        False

        ```
        """
        check_callable(func, "every")
        with stages.scoped(iter(self)) as it:
            return all(func(item) for item in it)

    def reduce[U](self, func: Callable[[U, T], U], initial: U = _MISSING) -> U:
        """Left-fold the elements with **func**.

        Without **initial**, the first element seeds the accumulator and folding starts from the second one.

        Raises:
            TypeError: If the sequence is empty and no **initial** is given.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, 3, 4]).reduce(lambda acc, n: acc + n)
        10
        >>> pl.Iter.from_([1, 2, 3, 4]).reduce(lambda acc, _: acc, "i")
        'i'

        ```
        """
        check_callable(func, "reduce")
        with stages.scoped(iter(self)) as it:
            if initial is _MISSING:
                return functools.reduce(func, it)  # type: ignore[arg-type]
            return functools.reduce(func, it, initial)

    def for_each(self, func: Callable[[T], object]) -> None:
        """Call **func** on each element, in order."""
        check_callable(func, "for_each")
        with stages.scoped(iter(self)) as it:
            for item in it:
                func(item)

    def join(self, glue: str = ",") -> str:
        """Concatenate the `str()` of each element, separated by **glue**. `None` becomes an empty string.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2, None, 3]).join()
        '1,2,,3'
        >>> pl.Iter.from_([1, 2, None, 3]).join("|")
        '1|2||3'

        ```
        """
        if not isinstance(glue, str):
            msg = f"join() expects a string glue, got {type(glue).__name__}"
            raise TypeError(msg)
        with stages.scoped(iter(self)) as it:
            return glue.join("" if item is None else str(item) for item in it)

    def drain(self) -> None:
        """Consume the whole sequence for its side effects, discarding the elements."""
        with stages.scoped(iter(self)) as it:
            mit.consume(it)
