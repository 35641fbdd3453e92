from ._checks import (
    EMPTY_OPTIONS,
    NotIterableError,
    check_any_source,
    check_callable,
    check_count,
    check_int,
    check_positive,
    check_real,
    check_sync_source,
    is_async_callable,
    is_async_source,
    is_generator_callable,
    is_sync_source,
    not_iterable,
)
from ._config import PolyConfig, get_config
from ._defaults import always, identity, noop, same_value_zero, truthy
from ._main import Pipeable, Wrapper
from ._seen import SeenKeys, default_sort_key

__all__ = [
    "EMPTY_OPTIONS",
    "NotIterableError",
    "Pipeable",
    "PolyConfig",
    "SeenKeys",
    "Wrapper",
    "always",
    "check_any_source",
    "check_callable",
    "check_count",
    "check_int",
    "check_positive",
    "check_real",
    "check_sync_source",
    "default_sort_key",
    "get_config",
    "identity",
    "is_async_callable",
    "is_async_source",
    "is_generator_callable",
    "is_sync_source",
    "noop",
    "not_iterable",
    "same_value_zero",
    "truthy",
]
