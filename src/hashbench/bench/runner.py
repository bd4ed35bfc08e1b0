"""Benchmark driver: sweeps table sizes x element counts per hash function."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal

from hashbench.config import BenchmarkPolicy
from hashbench.contracts.error import InvariantError
from hashbench.core.strategies import HashFunction
from hashbench.core.table import ChainedHashTable, RegistryIdGenerator

from .rng import JavaRandom

logger = logging.getLogger("hashbench")

Metric = Literal["insert", "collisions", "search"]
MATRIX_CORNER = "Table Size x Number of Elements"
SUMMARY_HEADER = (
    "Table Size",
    "Number of Elements",
    "Total Insertion Time",
    "Total Collisions",
    "Total Search Time",
)


def round_half_up(value: float, digits: int = 3) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def format_seconds(value: float) -> str:
    return f"{value}s"


@dataclass(frozen=True)
class TrialResult:
    insert_seconds: float
    collisions: int
    search_seconds: float


@dataclass(frozen=True)
class CellResult:
    table_size: int
    element_count: int
    runs: int
    insert_seconds: float
    collisions: int
    search_seconds: float

    @property
    def load_factor(self) -> float:
        return self.element_count / self.table_size

    @classmethod
    def from_trials(cls, table_size: int, element_count: int, trials: Sequence[TrialResult]) -> CellResult:
        if not trials:
            raise ValueError("at least one trial is required")
        runs = len(trials)
        return cls(
            table_size=table_size,
            element_count=element_count,
            runs=runs,
            insert_seconds=round_half_up(sum(t.insert_seconds for t in trials) / runs),
            collisions=math.floor(sum(t.collisions for t in trials) / runs + 0.5),
            search_seconds=round_half_up(sum(t.search_seconds for t in trials) / runs),
        )


@dataclass
class StrategyReport:
    strategy: HashFunction
    table_sizes: list[int]
    element_counts: list[int]
    cells: list[CellResult] = field(default_factory=list)

    def cell(self, table_size: int, element_count: int) -> CellResult | None:
        for cell in self.cells:
            if cell.table_size == table_size and cell.element_count == element_count:
                return cell
        return None

    def summary_rows(self) -> list[list[str]]:
        rows = [list(SUMMARY_HEADER)]
        for cell in self.cells:
            rows.append(
                [
                    str(cell.table_size),
                    str(cell.element_count),
                    format_seconds(cell.insert_seconds),
                    str(cell.collisions),
                    format_seconds(cell.search_seconds),
                ]
            )
        return rows

    def matrix(self, metric: Metric) -> list[list[str]]:
        """Table sizes down the first column, element counts across the first row."""

        rows = [[MATRIX_CORNER, *(str(count) for count in self.element_counts)]]
        for size in self.table_sizes:
            row = [str(size)]
            for count in self.element_counts:
                cell = self.cell(size, count)
                row.append("" if cell is None else _format_metric(cell, metric))
            rows.append(row)
        return rows


def _format_metric(cell: CellResult, metric: Metric) -> str:
    if metric == "insert":
        return format_seconds(cell.insert_seconds)
    if metric == "search":
        return format_seconds(cell.search_seconds)
    if metric == "collisions":
        return str(cell.collisions)
    raise ValueError(f"Unknown metric: {metric}")


def run_trial(
    capacity: int,
    element_count: int,
    strategy: HashFunction,
    *,
    seed: int,
    numbers_size: int,
    ids: RegistryIdGenerator | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> TrialResult:
    table = ChainedHashTable(capacity, strategy, ids=ids)

    insert_rng = JavaRandom(seed)
    start = clock()
    for _ in range(element_count):
        table.insert(insert_rng.next_int(numbers_size))
    insert_seconds = round_half_up(clock() - start)
    collisions = table.collisions
    logger.debug("Insert %.3fs, %d collisions", insert_seconds, collisions)

    search_rng = JavaRandom(seed)
    start = clock()
    for _ in range(element_count):
        key = search_rng.next_int(numbers_size)
        if table.search(key) is None:
            raise InvariantError(
                f"Key {key} inserted into {strategy.value} table (capacity={capacity}) was not found",
                hint="The search sequence must replay the insert seed exactly.",
            )
    search_seconds = round_half_up(clock() - start)
    logger.debug("Search %.3fs", search_seconds)

    return TrialResult(insert_seconds=insert_seconds, collisions=collisions, search_seconds=search_seconds)


def run_cell(
    capacity: int,
    element_count: int,
    strategy: HashFunction,
    *,
    runs: int,
    seed: int,
    numbers_size: int,
    ids: RegistryIdGenerator | None = None,
    clock: Callable[[], float] = time.perf_counter,
) -> CellResult:
    if runs <= 0:
        raise ValueError("runs must be > 0")
    trials: list[TrialResult] = []
    for n in range(runs):
        trial = run_trial(
            capacity,
            element_count,
            strategy,
            seed=seed,
            numbers_size=numbers_size,
            ids=ids,
            clock=clock,
        )
        logger.info(
            "  run %d/%d: insert=%.3fs collisions=%d search=%.3fs",
            n + 1,
            runs,
            trial.insert_seconds,
            trial.collisions,
            trial.search_seconds,
        )
        trials.append(trial)
    return CellResult.from_trials(capacity, element_count, trials)


class BenchmarkRunner:
    def __init__(
        self,
        policy: BenchmarkPolicy,
        *,
        ids: RegistryIdGenerator | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.policy = policy
        self.ids = ids if ids is not None else RegistryIdGenerator()
        self.clock = clock

    def run(self, strategies: Iterable[HashFunction] | None = None) -> list[StrategyReport]:
        selected = list(strategies) if strategies is not None else self.policy.hash_functions()
        return [self.run_strategy(strategy) for strategy in selected]

    def run_strategy(self, strategy: HashFunction) -> StrategyReport:
        policy = self.policy
        report = StrategyReport(
            strategy=strategy,
            table_sizes=list(policy.table_sizes),
            element_counts=list(policy.element_counts),
        )
        logger.info("Hash function: %s", strategy.value)
        for size in policy.table_sizes:
            for count in policy.element_counts:
                logger.info("Table size: %d | Number of elements: %d", size, count)
                cell = run_cell(
                    size,
                    count,
                    strategy,
                    runs=policy.runs,
                    seed=policy.seed,
                    numbers_size=policy.numbers_size,
                    ids=self.ids,
                    clock=self.clock,
                )
                report.cells.append(cell)
        return report


__all__ = [
    "BenchmarkRunner",
    "CellResult",
    "MATRIX_CORNER",
    "Metric",
    "SUMMARY_HEADER",
    "StrategyReport",
    "TrialResult",
    "format_seconds",
    "round_half_up",
    "run_cell",
    "run_trial",
]
