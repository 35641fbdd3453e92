"""Benchmarks for polyiter, run with `python -m benchmarks run`."""
