from __future__ import annotations

from collections.abc import AsyncIterable, Awaitable, Callable, Iterable, Mapping
from typing import Any

type Options = Mapping[str, Any]
"""The opaque configuration bag accepted by every factory and transform."""
type Predicate[T] = Callable[[T], object]
"""A callback whose result is tested for truthiness."""
type Comparator[T] = Callable[[T, T], float]
"""A comparator returning a negative number, zero, or a positive number."""
type MaybeAwaitable[T] = T | Awaitable[T]
"""A value that may need to be awaited before use."""
type AsyncPredicate[T] = Callable[[T], MaybeAwaitable[object]]
type AsyncComparator[T] = Callable[[T, T], MaybeAwaitable[float]]
type IntoIter[T] = Iterable[T] | Callable[[], Iterable[T]]
"""Anything `Iter.from_` accepts."""
type IntoAsyncIter[T] = (
    IntoIter[T]
    | AsyncIterable[T]
    | Callable[[], AsyncIterable[T]]
    | Callable[[], Awaitable[Iterable[T]]]
)
"""Anything `AsyncIter.from_` accepts."""
type AnyIterable[T] = Iterable[T] | AsyncIterable[T]
