"""Entry point for benchmarks CLI."""

from typing import Annotated

import typer

import polyiter as pl

from . import benchs  # pyright: ignore[reportUnusedImport] # noqa: F401
from ._pipeline import render, run_pipeline
from ._registery import BENCHMARKS, CONSOLE, MIN_RUNS, SIZES, TARGET_BENCH_SEC

app = typer.Typer(help="Benchmarks for polyiter developments.")


@app.command(name="list")
def list_() -> None:
    """List all registered benchmarks."""
    for benchmark in BENCHMARKS:
        CONSOLE.print(f"{benchmark.category}: {benchmark.name}")


@app.command()
def run(
    *,
    size: Annotated[
        list[int] | None,
        typer.Option("--size", "-s", help="Input size to run; repeat for several."),
    ] = None,
    only: Annotated[
        str | None,
        typer.Option("--only", help="Only run benchmarks of this category."),
    ] = None,
    target_sec: Annotated[
        float, typer.Option(help="Approximate time budget per variant.")
    ] = TARGET_BENCH_SEC,
    min_runs: Annotated[int, typer.Option(help="Minimum runs per variant.")] = MIN_RUNS,
) -> None:
    """Run benchmarks and print a table of median timings."""
    selected = (
        BENCHMARKS
        if only is None
        else pl.Iter.from_(BENCHMARKS).filter(lambda b: b.category == only).to_list()
    )
    CONSOLE.print("Running benchmarks...", style="bold blue")
    summaries = run_pipeline(
        selected, size or SIZES, target_sec=target_sec, min_runs=min_runs
    )
    CONSOLE.print()
    CONSOLE.print(render(summaries))


if __name__ == "__main__":
    app()
