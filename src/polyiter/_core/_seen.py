"""Membership tracking for `unique`, and the default sort key.

Both follow `same_value_zero`, the equality used by `includes`.
"""

from __future__ import annotations

import math
from typing import Any

from ._defaults import same_value_zero

_NAN: Any = object()


class SeenKeys:
    """Keys met so far by one `unique` iteration.

    Hashable keys are kept in a set, unhashable ones in a list scanned by equality.
    All NaN floats count as one key.

    Example:
    ```python
    >>> from polyiter._core import SeenKeys
    >>> seen = SeenKeys()
    >>> [seen.add(key) for key in (1, [1], float("nan"), 1.0, [1], float("nan"))]
    [True, True, True, False, False, False]

    ```
    """

    __slots__ = ("_hashable", "_unhashable")

    def __init__(self) -> None:
        self._hashable: set[Any] = set()
        self._unhashable: list[Any] = []

    def add(self, key: object) -> bool:
        """Record **key**, and tell whether it was new."""
        if isinstance(key, float) and math.isnan(key):
            key = _NAN
        try:
            if key in self._hashable:
                return False
            self._hashable.add(key)
        except TypeError:
            if any(same_value_zero(key, seen) for seen in self._unhashable):
                return False
            self._unhashable.append(key)
        return True


def default_sort_key(value: object) -> tuple[bool, str]:
    """Order by `str(value)`, with `None` after everything else.

    Example:
    ```python
    >>> from polyiter._core import default_sort_key
    >>> sorted(["b", None, "a", "Z"], key=default_sort_key)
    ['Z', 'a', 'b', None]

    ```
    """
    if value is None:
        return (True, "")
    return (False, str(value))
