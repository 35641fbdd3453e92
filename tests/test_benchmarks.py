"""Tests for the benchmark registry and its summary pipeline."""

from typer.testing import CliRunner

from benchmarks._pipeline import Summary, render, summarize
from benchmarks._registery import Benchmark, Row, bench, collect_raw_timings


def test_bench_registers_by_class() -> None:
    registry: list[Benchmark] = []

    class Tiny:
        @bench(gen=lambda size: list(range(size)), registry=registry)
        @staticmethod
        def total(data: list[int]) -> object:
            return sum(data)

    assert [(b.category, b.name) for b in registry] == [("Tiny", "total")]
    assert Tiny.total([1, 2]) == 3


def test_collect_raw_timings() -> None:
    registry: list[Benchmark] = []

    class Tiny:
        @bench(registry=registry)
        @staticmethod
        def doubled(data: list[int]) -> object:
            return [n * 2 for n in data]

    rows = collect_raw_timings(registry, (2, 4), target_sec=0.0, min_runs=2)
    assert [(row.size, row.run_idx) for row in rows] == [(2, 0), (2, 1), (4, 0), (4, 1)]
    assert all(row.category == "Tiny" and row.time >= 0 for row in rows)


def test_summarize_takes_medians() -> None:
    rows = [
        Row("B", "y", 8, 0, 5.0),
        Row("A", "x", 8, 0, 3.0),
        Row("A", "x", 8, 1, 1.0),
        Row("A", "x", 4, 0, 9.0),
        Row("A", "x", 8, 2, 2.0),
    ]
    assert summarize(rows) == [
        Summary("A", "x", 4, 1, 9.0),
        Summary("A", "x", 8, 3, 2.0),
        Summary("B", "y", 8, 1, 5.0),
    ]


def test_render() -> None:
    table = render([Summary("A", "x", 8, 3, 0.002)])
    assert table.row_count == 1
    assert len(table.columns) == 5


def test_cli_lists_benchmarks() -> None:
    from benchmarks.__main__ import app

    result = CliRunner().invoke(app, ["list"])
    assert result.exit_code == 0
    assert "MapFilter: sync" in result.output
