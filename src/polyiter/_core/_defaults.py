"""Named default callbacks.

These replace implicit coercions: a missing predicate means `truthy`, a missing mapper means `identity`.
"""

from typing import Any

from cytoolz.functoolz import identity


def truthy(value: object) -> bool:
    """Python's standard truth test, as a named predicate."""
    return bool(value)


def always(_value: object) -> bool:
    """Predicate that accepts everything."""
    return True


def noop(_value: object) -> None:
    """Callback that does nothing."""


def same_value_zero(left: Any, right: Any) -> bool:  # noqa: ANN401
    """Equality where `0 == -0.0` and NaN matches NaN.

    Example:
    ```python
    >>> from polyiter._core import same_value_zero
    >>> same_value_zero(0, -0.0)
    True
    >>> same_value_zero(float("nan"), float("nan"))
    True
    >>> same_value_zero(1, "1")
    False

    ```
    """
    if left == right:
        return True
    return (
        isinstance(left, float)
        and isinstance(right, float)
        and left != left  # noqa: PLR0124
        and right != right  # noqa: PLR0124
    )


__all__ = ["always", "identity", "noop", "same_value_zero", "truthy"]
