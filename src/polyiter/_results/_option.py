from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Never, TypeIs


class OptionUnwrapError(RuntimeError): ...


class Option[T](ABC):
    """An optional value: either `Some(value)` or `NONE`.

    Returned by `find`, where `NONE` is the "not found" sentinel.
    This keeps "found `None`" and "found nothing" apart.
    """

    __slots__ = ()

    @abstractmethod
    def is_some(self) -> TypeIs[Some[T]]:  # type: ignore[misc]
        """Returns `True` if the option is a `Some` value.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([None]).find(lambda x: x is None).is_some()
        True
        >>> pl.NONE.is_some()
        False

        ```
        """
        ...

    @abstractmethod
    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        """Returns `True` if the option is `NONE`."""
        ...

    @abstractmethod
    def unwrap(self) -> T:
        """Returns the contained `Some` value.

        Raises:
            OptionUnwrapError: If the option is `NONE`.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Some("car").unwrap()
        'car'
        >>> pl.NONE.unwrap()
        Traceback (most recent call last):
            ...
        polyiter._results._option.OptionUnwrapError: called `unwrap` on a `NONE`

        ```
        """
        ...

    def expect(self, msg: str) -> T:
        """Returns the contained `Some` value, or raises with **msg** if `NONE`.

        Args:
            msg (str): The message to include in the exception if the option is `NONE`.

        Returns:
            T: The contained `Some` value.

        Raises:
            OptionUnwrapError: If the option is `NONE`.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(10).find(lambda x: x > 20).expect("no big value")
        Traceback (most recent call last):
            ...
        polyiter._results._option.OptionUnwrapError: no big value (called `expect` on a `NONE`)

        ```
        """
        if self.is_some():
            return self.unwrap()
        msg = f"{msg} (called `expect` on a `NONE`)"
        raise OptionUnwrapError(msg)

    def unwrap_or(self, default: T) -> T:
        """Returns the contained `Some` value or a provided default.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(15).find(lambda n: n % 6 == 5).unwrap_or(-1)
        5
        >>> pl.Iter.from_range(15).find(lambda n: n > 100).unwrap_or(-1)
        -1

        ```
        """
        return self.unwrap() if self.is_some() else default

    def unwrap_or_else(self, f: Callable[[], T]) -> T:
        """Returns the contained `Some` value or computes it from **f**."""
        return self.unwrap() if self.is_some() else f()

    def map[U](self, f: Callable[[T], U]) -> Option[U]:
        """Maps an `Option[T]` to `Option[U]`, leaving `NONE` untouched.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Some("Hello, World!").map(len)
        Some(value=13)
        >>> pl.NONE.map(len)
        NONE

        ```
        """
        if self.is_some():
            return Some(f(self.unwrap()))
        return NONE

    def and_then[U](self, f: Callable[[T], Option[U]]) -> Option[U]:
        """Calls **f** with the contained value if `Some`, otherwise returns `NONE`."""
        if self.is_some():
            return f(self.unwrap())
        return NONE

    def or_else(self, f: Callable[[], Option[T]]) -> Option[T]:
        """Returns the option if it contains a value, otherwise the result of **f**."""
        return self if self.is_some() else f()


@dataclass(slots=True)
class Some[T](Option[T]):
    value: T

    def is_some(self) -> TypeIs[Some[T]]:  # type: ignore[misc]
        return True

    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(slots=True)
class NoneOption(Option[Any]):
    def is_some(self) -> TypeIs[Some[Any]]:  # type: ignore[misc]
        return False

    def is_none(self) -> TypeIs[NoneOption]:  # type: ignore[misc]
        return True

    def unwrap(self) -> Never:
        raise OptionUnwrapError("called `unwrap` on a `NONE`")

    def __repr__(self) -> str:
        return "NONE"


NONE: Option[Any] = NoneOption()
