"""Lazy, chainable sequence transformations over sync and async iterables."""

import logging

from . import traits
from ._aiter import AsyncIter
from ._core import NotIterableError, PolyConfig, get_config
from ._factories import from_, from_range, iterate
from ._iter import Iter
from ._results import NONE, NoneOption, Option, OptionUnwrapError, Some

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "NONE",
    "AsyncIter",
    "Iter",
    "NoneOption",
    "NotIterableError",
    "Option",
    "OptionUnwrapError",
    "PolyConfig",
    "Some",
    "from_",
    "from_range",
    "get_config",
    "iterate",
    "traits",
]
