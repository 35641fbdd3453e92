"""Public base classes, for custom wrappers.

`Pipeable` only depends on `Self`, so it can be mixed into any existing class to provide `into` and `inspect`.

`Wrapper` is the shared base of `Iter` and `AsyncIter`: it holds the recipe and the options bag.

Example:
```python
>>> from collections.abc import Iterator
>>> from polyiter import traits
>>> class Countdown(traits.Wrapper[Iterator[int]]):
...     def __iter__(self) -> Iterator[int]:
...         return self._recipe()
>>> list(Countdown(lambda: iter(range(3, 0, -1))))
[3, 2, 1]
>>> Countdown(lambda: iter(()), {"label": "empty"})
Countdown({'label': 'empty'})

```
"""

from ._core import Pipeable, Wrapper

__all__ = ["Pipeable", "Wrapper"]
