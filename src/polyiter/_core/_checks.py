"""Eager argument validation and sequence-shape capability checks.

Every transform and factory validates its arguments through these helpers before building a new wrapper,
so malformed calls fail at the call site rather than during iteration.
"""

from __future__ import annotations

import inspect
from collections.abc import AsyncIterable, Callable, Iterable, Mapping
from numbers import Real
from types import MappingProxyType
from typing import Any, TypeIs

EMPTY_OPTIONS: Mapping[str, Any] = MappingProxyType({})


class NotIterableError(TypeError):
    """Raised when a value that should be sequence-shaped is not."""


def is_sync_source(obj: object) -> TypeIs[Iterable[Any]]:
    return isinstance(obj, Iterable)


def is_async_source(obj: object) -> TypeIs[AsyncIterable[Any]]:
    return isinstance(obj, AsyncIterable)


def is_generator_callable(obj: object) -> TypeIs[Callable[[], Any]]:
    """A zero-argument callable producing a fresh sequence on each call."""
    return callable(obj) and not is_sync_source(obj) and not is_async_source(obj)


def is_async_callable(obj: object) -> bool:
    return inspect.isasyncgenfunction(obj) or inspect.iscoroutinefunction(obj)


def _type_name(value: object) -> str:
    return type(value).__name__


def check_options(options: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if options is None:
        return EMPTY_OPTIONS
    if not isinstance(options, Mapping):
        msg = f"options must be a mapping, got {_type_name(options)}"
        raise TypeError(msg)
    return options


def check_callable[F: Callable[..., Any]](func: F, method: str) -> F:
    if not callable(func):
        msg = f"{method}() expects a callable, got {_type_name(func)}"
        raise TypeError(msg)
    return func


def check_int(n: object, method: str) -> int:
    # bool is an int subclass, but never a meaningful count or index
    if isinstance(n, bool) or not isinstance(n, int):
        msg = f"{method}() expects an integer, got {_type_name(n)}"
        raise TypeError(msg)
    return n


def check_count(n: object, method: str) -> int:
    count = check_int(n, method)
    if count < 0:
        msg = f"{method}() expects a non-negative integer, got {count}"
        raise ValueError(msg)
    return count


def check_positive(n: object, method: str) -> int:
    count = check_int(n, method)
    if count <= 0:
        msg = f"{method}() expects a positive integer, got {count}"
        raise ValueError(msg)
    return count


def check_real(x: object, method: str) -> float | int:
    if isinstance(x, bool) or not isinstance(x, Real):
        msg = f"{method}() expects a number, got {_type_name(x)}"
        raise TypeError(msg)
    return x  # type: ignore[return-value]


def check_sync_source[T](source: Iterable[T] | object, method: str) -> Iterable[T]:
    if not is_sync_source(source):
        msg = f"{method}() expects an iterable, got {_type_name(source)}"
        raise NotIterableError(msg)
    return source  # type: ignore[return-value]


def check_any_source(source: object, method: str) -> Iterable[Any] | AsyncIterable[Any]:
    if not (is_sync_source(source) or is_async_source(source)):
        msg = f"{method}() expects an iterable or async iterable, got {_type_name(source)}"
        raise NotIterableError(msg)
    return source


def not_iterable(value: object, method: str) -> NotIterableError:
    return NotIterableError(
        f"{method}() expects iterable elements, got {_type_name(value)}"
    )
