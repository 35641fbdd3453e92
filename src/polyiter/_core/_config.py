from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pprint import pformat
from typing import Any


@dataclass(slots=True)
class PolyConfig:
    """Library-wide presentation settings.

    Only affects how wrappers are rendered, never the elements they produce.

    Attributes:
        repr_max_items (int): Maximum number of options entries shown before truncating with `...`.
        repr_depth (int): Nesting depth passed to `pprint.pformat`.
        repr_width (int): Line width passed to `pprint.pformat`.

    Example:
    ```python
    >>> import polyiter as pl
    >>> pl.Iter.from_([], {"a": 1, "b": 2})
    Iter({'a': 1, 'b': 2})
    >>> pl.get_config().repr_max_items = 1
    >>> pl.Iter.from_([], {"a": 1, "b": 2})
    Iter({'a': 1}...)
    >>> pl.get_config().repr_max_items = 20

    ```
    """

    repr_max_items: int = 20
    repr_depth: int = 3
    repr_width: int = 80

    def options_repr(self, options: Mapping[Any, Any]) -> str:
        """Render an options bag, truncated to `repr_max_items` entries."""
        shown = dict(list(options.items())[: self.repr_max_items])
        suffix = "..." if len(options) > self.repr_max_items else ""
        return (
            pformat(shown, depth=self.repr_depth, width=self.repr_width, compact=True)
            + suffix
        )


_CONFIG = PolyConfig()


def get_config() -> PolyConfig:
    """Return the global, mutable `PolyConfig` instance."""
    return _CONFIG
