from __future__ import annotations

import itertools
from typing import Callable

import pytest

from hashbench.bench.rng import keys
from hashbench.bench.runner import (
    MATRIX_CORNER,
    BenchmarkRunner,
    CellResult,
    StrategyReport,
    TrialResult,
    round_half_up,
    run_cell,
    run_trial,
)
from hashbench.config import BenchmarkPolicy
from hashbench.contracts.error import InvariantError
from hashbench.core.strategies import HashFunction
from hashbench.core.table import ChainedHashTable, RegistryIdGenerator


def _stepping_clock(step: float = 0.25) -> Callable[[], float]:
    counter = itertools.count()
    return lambda: next(counter) * step


def _expected_collisions(capacity: int, count: int, strategy: HashFunction, seed: int, size: int) -> int:
    table = ChainedHashTable(capacity, strategy)
    for key in keys(seed, count, size):
        table.insert(key)
    return table.collisions


@pytest.mark.parametrize("strategy", list(HashFunction))
def test_run_trial_counts_collisions_and_times(strategy: HashFunction) -> None:
    result = run_trial(
        37,
        200,
        strategy,
        seed=2023,
        numbers_size=10_000,
        clock=_stepping_clock(),
    )
    assert result == TrialResult(
        insert_seconds=0.25,
        collisions=_expected_collisions(37, 200, strategy, 2023, 10_000),
        search_seconds=0.25,
    )


def test_run_trial_shares_id_generator() -> None:
    ids = RegistryIdGenerator()
    run_trial(10, 30, HashFunction.MODULO, seed=1, numbers_size=100, ids=ids)
    run_trial(10, 30, HashFunction.MODULO, seed=1, numbers_size=100, ids=ids)
    assert ids.issued == 60


def test_run_trial_raises_when_key_goes_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(ChainedHashTable, "search", lambda self, key: None)
    with pytest.raises(InvariantError, match="was not found"):
        run_trial(10, 5, HashFunction.MODULO, seed=7, numbers_size=100)


def test_run_trial_rejects_bad_capacity() -> None:
    with pytest.raises(ValueError):
        run_trial(0, 5, HashFunction.MODULO, seed=7, numbers_size=100)


def test_round_half_up() -> None:
    assert round_half_up(2.5, 0) == 3.0
    assert round_half_up(1.2346) == pytest.approx(1.235)
    assert round_half_up(0.5004) == pytest.approx(0.5)


def test_cell_averages_round_half_up() -> None:
    trials = [
        TrialResult(insert_seconds=0.1, collisions=2, search_seconds=0.2),
        TrialResult(insert_seconds=0.3, collisions=3, search_seconds=0.4),
    ]
    cell = CellResult.from_trials(100, 50, trials)
    assert cell.runs == 2
    assert cell.collisions == 3
    assert cell.insert_seconds == pytest.approx(0.2)
    assert cell.search_seconds == pytest.approx(0.3)
    assert cell.load_factor == pytest.approx(0.5)
    with pytest.raises(ValueError):
        CellResult.from_trials(100, 50, [])


def test_run_cell_is_deterministic_in_collisions() -> None:
    a = run_cell(13, 80, HashFunction.FOLDING, runs=3, seed=5, numbers_size=5000)
    b = run_cell(13, 80, HashFunction.FOLDING, runs=3, seed=5, numbers_size=5000)
    assert a.collisions == b.collisions == _expected_collisions(13, 80, HashFunction.FOLDING, 5, 5000)
    with pytest.raises(ValueError):
        run_cell(13, 80, HashFunction.FOLDING, runs=0, seed=5, numbers_size=5000)


def test_strategy_report_layout() -> None:
    report = StrategyReport(
        strategy=HashFunction.MODULO,
        table_sizes=[100, 10],
        element_counts=[5, 50],
        cells=[
            CellResult(100, 5, 1, 0.001, 0, 0.0),
            CellResult(100, 50, 1, 0.002, 11, 0.001),
            CellResult(10, 5, 1, 0.0, 1, 0.0),
            CellResult(10, 50, 1, 0.003, 40, 0.002),
        ],
    )
    assert report.summary_rows()[0] == [
        "Table Size",
        "Number of Elements",
        "Total Insertion Time",
        "Total Collisions",
        "Total Search Time",
    ]
    assert report.summary_rows()[2] == ["100", "50", "0.002s", "11", "0.001s"]
    assert report.matrix("collisions") == [
        [MATRIX_CORNER, "5", "50"],
        ["100", "0", "11"],
        ["10", "1", "40"],
    ]
    assert report.matrix("insert")[2] == ["10", "0.0s", "0.003s"]
    assert report.matrix("search")[1] == ["100", "0.0s", "0.001s"]


def test_benchmark_runner_sweeps_matrix(small_policy: BenchmarkPolicy) -> None:
    runner = BenchmarkRunner(small_policy, clock=_stepping_clock(0.001))
    reports = runner.run()

    assert [report.strategy for report in reports] == list(HashFunction)
    for report in reports:
        assert len(report.cells) == 4
        cell = report.cell(7, 40)
        assert cell is not None
        assert cell.collisions == _expected_collisions(7, 40, report.strategy, 2023, 1000)
        assert cell.insert_seconds == pytest.approx(0.001)
    # 3 strategies x 2 runs x 2 sizes x (10 + 40) elements
    assert runner.ids.issued == 3 * 2 * 2 * 50


def test_benchmark_runner_subset(small_policy: BenchmarkPolicy) -> None:
    reports = BenchmarkRunner(small_policy).run([HashFunction.FOLDING])
    assert [report.strategy for report in reports] == [HashFunction.FOLDING]
