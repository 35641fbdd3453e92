"""Benchmark registry and timing loop."""

import timeit
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from typing import Any, Final, NamedTuple, Self

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
)

import polyiter as pl

type BenchFn = Callable[[], object]


WARMUP_RUNS: Final = 5
CALLS_BY_RUN: Final = 10
TARGET_BENCH_SEC: Final = 1.0
MIN_RUNS: Final = 20
MAX_RUNS: Final = 500
SIZES: Final = (256, 1024, 4096)

CONSOLE: Final = Console()


class Variant(NamedTuple):
    """One input size of a benchmark, with how many timed runs it gets."""

    size: int
    n_runs: int
    fn: BenchFn

    @classmethod
    def from_fn(
        cls,
        fn: BenchFn,
        size: int,
        *,
        target_sec: float = TARGET_BENCH_SEC,
        min_runs: int = MIN_RUNS,
    ) -> Self:
        """Size the run count from a short warmup so the variant takes about **target_sec**."""
        warmup_time = timeit.timeit(fn, number=WARMUP_RUNS) / WARMUP_RUNS
        est = int(target_sec / 2 / max(warmup_time, 1e-9) / CALLS_BY_RUN)
        return cls(size, min(MAX_RUNS, max(min_runs, est)), fn)


class Benchmark(NamedTuple):
    """A registered pipeline, and how to build its input for a given size."""

    category: str
    name: str
    func: Callable[[Any], object]
    gen: Callable[[int], Any]

    def variants(
        self, sizes: Sequence[int], *, target_sec: float, min_runs: int
    ) -> list[Variant]:
        return [
            Variant.from_fn(
                partial(self.func, self.gen(size)),
                size,
                target_sec=target_sec,
                min_runs=min_runs,
            )
            for size in sizes
        ]


@dataclass(slots=True)
class Row:
    """One timed run, made of `CALLS_BY_RUN` calls."""

    category: str
    name: str
    size: int
    run_idx: int
    time: float


BENCHMARKS: list[Benchmark] = []


def bench[P](
    *,
    gen: Callable[[int], P] = lambda size: list(range(size)),
    registry: list[Benchmark] = BENCHMARKS,
) -> Callable[[Callable[[P], object]], Callable[[P], object]]:
    """Decorator registering a benchmark. Inputs are only built when the benchmark runs."""

    def decorator(func: Callable[[P], object]) -> Callable[[P], object]:
        owner, _, name = func.__qualname__.rpartition(".")
        category = owner.rpartition(".")[2] or "ungrouped"
        registry.append(Benchmark(category, name, func, gen))
        return func

    return decorator


def collect_raw_timings(
    benchmarks: Sequence[Benchmark],
    sizes: Sequence[int] = SIZES,
    *,
    target_sec: float = TARGET_BENCH_SEC,
    min_runs: int = MIN_RUNS,
) -> list[Row]:
    """Time every (benchmark, size) pair. One `Row` per run, medians are computed downstream."""
    planned = (
        pl.Iter.from_(benchmarks)
        .flat_map(
            lambda b: [
                (b, v)
                for v in b.variants(sizes, target_sec=target_sec, min_runs=min_runs)
            ]
        )
        .to_list()
    )
    total_runs = pl.Iter.from_(planned).reduce(lambda acc, pair: acc + pair[1].n_runs, 0)
    CONSOLE.print(
        f"{len(benchmarks)} benchmark(s) x {len(sizes)} size(s): {total_runs} runs",
        style="bold white",
    )

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        console=CONSOLE,
    ) as progress:
        task = progress.add_task("warming up", total=total_runs)
        timed = partial(_timed_runs, progress, task)
        return pl.Iter.from_(planned).flat_map(lambda pair: timed(*pair)).to_list()


def _timed_runs(
    progress: Progress,
    task: TaskID,
    benchmark: Benchmark,
    variant: Variant,
) -> pl.Iter[Row]:
    label = f"[cyan]{benchmark.category}.{benchmark.name} (n={variant.size})"

    def _run(run_idx: int) -> Row:
        elapsed = timeit.timeit(variant.fn, number=CALLS_BY_RUN)
        progress.update(task, description=label, advance=1)
        return Row(benchmark.category, benchmark.name, variant.size, run_idx, elapsed)

    return pl.Iter.from_range(variant.n_runs).map(_run)
