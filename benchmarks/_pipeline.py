"""Aggregation and rendering of benchmark timings."""

import statistics
from collections.abc import Callable, Sequence
from typing import NamedTuple

from rich.table import Table

import polyiter as pl

from ._registery import (
    BENCHMARKS,
    MIN_RUNS,
    SIZES,
    TARGET_BENCH_SEC,
    Benchmark,
    Row,
    collect_raw_timings,
)


class Summary(NamedTuple):
    """Median timing of one benchmark at one size."""

    category: str
    name: str
    size: int
    runs: int
    median: float


def summarize(rows: Sequence[Row]) -> list[Summary]:
    """Compute median stats from raw timings, one `Summary` per (category, name, size)."""

    def _key(row: Row) -> tuple[str, str, int]:
        return (row.category, row.name, row.size)

    def _compare(a: Row, b: Row) -> int:
        return (_key(a) > _key(b)) - (_key(a) < _key(b))

    groups = (
        pl.Iter.from_(rows)
        .sort(_compare)
        .group_while(_SameKey(_key))
        .map(
            lambda group: Summary(
                *_key(group[0]),
                runs=len(group),
                median=statistics.median(row.time for row in group),
            )
        )
    )
    return groups.to_list()


class _SameKey:
    """Stateful `group_while` predicate: true while the key matches the previous element's."""

    __slots__ = ("_key", "_last")

    def __init__(self, key: Callable[[Row], object]) -> None:
        self._key = key
        self._last: object = None

    def __call__(self, row: Row) -> bool:
        key = self._key(row)
        same = key == self._last
        self._last = key
        return same


def render(summaries: Sequence[Summary]) -> Table:
    table = Table(title="polyiter benchmarks")
    for column in ("category", "name", "size", "runs", "median (ms / 10 calls)"):
        table.add_column(column)
    for summary in summaries:
        table.add_row(
            summary.category,
            summary.name,
            str(summary.size),
            str(summary.runs),
            f"{summary.median * 1000:.3f}",
        )
    return table


def run_pipeline(
    benchmarks: Sequence[Benchmark] = BENCHMARKS,
    sizes: Sequence[int] = SIZES,
    *,
    target_sec: float = TARGET_BENCH_SEC,
    min_runs: int = MIN_RUNS,
) -> list[Summary]:
    """Time every registered benchmark, and summarize the results."""
    if not benchmarks:
        msg = "No benchmarks registered!"
        raise ValueError(msg)
    return summarize(
        collect_raw_timings(
            benchmarks, sizes, target_sec=target_sec, min_runs=min_runs
        )
    )
