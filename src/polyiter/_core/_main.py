from __future__ import annotations

from abc import ABC
from collections.abc import Callable, Mapping
from typing import Any, Concatenate, Self

from ._checks import check_options
from ._config import get_config


class Pipeable:
    """Mixin providing `into` and `inspect` for fluent chaining."""

    __slots__ = ()

    def into[**P, R](
        self,
        func: Callable[Concatenate[Self, P], R],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        """Call `func(self, *args, **kwargs)` and return its result.

        Lets a pipeline end in any function, e.g. `it.into(sum)` rather than `sum(it)`, without breaking the chain.

        Args:
            func (Callable[Concatenate[Self, P], R]): Receives the wrapper as first argument.
            *args (P.args): Extra positional arguments for **func**.
            **kwargs (P.kwargs): Extra keyword arguments for **func**.

        Returns:
            R: Whatever **func** returns.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_range(4).map(lambda x: x * 2).into(sum)
        12

        ```
        """
        return func(self, *args, **kwargs)

    def inspect[**P](
        self,
        func: Callable[Concatenate[Self, P], object],
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> Self:
        """Call **func** on the wrapper itself, ignore the result, and return the wrapper.

        Useful to log or assert on a pipeline halfway through building it. Nothing is iterated.

        Args:
            func (Callable[Concatenate[Self, P], object]): Receives the wrapper as first argument.
            *args (P.args): Extra positional arguments for **func**.
            **kwargs (P.kwargs): Extra keyword arguments for **func**.

        Returns:
            Self: This same wrapper.

        Example:
        ```python
        >>> import polyiter as pl
        >>> pl.Iter.from_([1, 2], {"tag": "x"}).inspect(print).to_list()
        Iter({'tag': 'x'})
        [1, 2]

        ```
        """
        func(self, *args, **kwargs)
        return self


class Wrapper[I](ABC, Pipeable):
    """Base class for the sync and async sequence wrappers.

    A wrapper stores a *recipe*, a zero-argument callable producing a fresh iterator each time it is called,
    and an immutable options bag.

    Constructing a wrapper never calls the recipe; only requesting iteration does.

    Args:
        recipe (Callable[[], I]): Callable producing a new iterator over the sequence.
        options (Mapping[str, Any] | None): Opaque configuration bag, exposed verbatim through `options`.
    """

    _recipe: Callable[[], I]
    _options: Mapping[str, Any]

    __slots__ = ("_options", "_recipe")

    def __init__(
        self, recipe: Callable[[], I], options: Mapping[str, Any] | None = None
    ) -> None:
        self._recipe = recipe
        self._options = check_options(options)

    @property
    def options(self) -> Mapping[str, Any]:
        """The options bag given when this wrapper was created, or an empty read-only mapping.

        Example:
        ```python
        >>> import polyiter as pl
        >>> opts = {"opt": 1}
        >>> pl.Iter.from_([3, 1, 2]).sort(None, opts).options is opts
        True
        >>> dict(pl.Iter.from_([3, 1, 2]).options)
        {}

        ```
        """
        return self._options

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({get_config().options_repr(self._options)})"
