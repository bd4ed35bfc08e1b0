"""Benchmark driver and deterministic key source."""

from .rng import JavaRandom, keys
from .runner import (
    BenchmarkRunner,
    CellResult,
    StrategyReport,
    TrialResult,
    run_cell,
    run_trial,
)

__all__ = [
    "BenchmarkRunner",
    "CellResult",
    "JavaRandom",
    "StrategyReport",
    "TrialResult",
    "keys",
    "run_cell",
    "run_trial",
]
