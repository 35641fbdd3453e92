"""Module-level factories, picking the sync or async wrapper from the source's shape."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ._aiter import AsyncIter
from ._core import is_async_callable, is_async_source
from ._iter import Iter

if TYPE_CHECKING:
    from ._types import IntoAsyncIter, Options


def from_[T](
    source: IntoAsyncIter[T], options: Options | None = None
) -> Iter[T] | AsyncIter[T]:
    """Wrap **source** in an `AsyncIter` if it is async-shaped, in an `Iter` otherwise.

    Async-shaped means an async iterable, an async generator function or a coroutine function.

    Example:
    ```python
    >>> import polyiter as pl
    >>> pl.from_([1, 2, 3])
    Iter({})
    >>> async def agen():
    ...     yield 1
    >>> pl.from_(agen, {"source": "agen"})
    AsyncIter({'source': 'agen'})

    ```
    """
    if is_async_source(source) or is_async_callable(source):
        return AsyncIter.from_(source, options)
    return Iter.from_(source, options)  # type: ignore[arg-type]


def from_range(
    start: float,
    end: float | None = None,
    step: float = 1,
    options: Options | None = None,
) -> Iter[Any]:
    """Shortcut for `Iter.from_range`."""
    return Iter.from_range(start, end, step, options)


def iterate[T](func: Callable[[T | None], T], options: Options | None = None) -> Iter[T]:
    """Shortcut for `Iter.iterate`."""
    return Iter.iterate(func, options)
