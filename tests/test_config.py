from __future__ import annotations

from pathlib import Path

import pytest

from hashbench.config import MAX_NUMBERS_SIZE, AppConfig, load_app_config
from hashbench.contracts.error import BadInputError
from hashbench.core.strategies import HashFunction


def test_default_config_validates() -> None:
    cfg = load_app_config(None)
    bench = cfg.benchmark
    assert bench.strategies == ["modulo", "multiplicative", "folding"]
    assert bench.table_sizes == [1_000_000, 100_000, 10_000, 1_000, 100]
    assert bench.element_counts == [10_000, 20_000, 100_000, 500_000, 1_000_000]
    assert bench.runs == 5
    assert bench.seed == 2023
    assert bench.numbers_size == 1_000_000
    assert bench.output_dir == "results"
    assert bench.hash_functions() == list(HashFunction)


def test_load_from_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_text(
        """
[benchmark]
strategies = ["folding", "MODULE"]
table_sizes = [500, 50]
element_counts = [100]
runs = 2
seed = 7
numbers_size = 10000
output_dir = "out"
""",
        encoding="utf-8",
    )
    cfg = load_app_config(str(cfg_path))
    bench = cfg.benchmark
    assert bench.hash_functions() == [HashFunction.FOLDING, HashFunction.MODULO]
    assert bench.table_sizes == [500, 50]
    assert bench.element_counts == [100]
    assert bench.runs == 2
    assert bench.seed == 7
    assert bench.output_dir == "out"

    # env override takes precedence
    monkeypatch.setenv("HASHBENCH_RUNS", "9")
    monkeypatch.setenv("HASHBENCH_TABLE_SIZES", "10, 20,30")
    monkeypatch.setenv("HASHBENCH_STRATEGIES", "multiplicative")
    cfg_env = AppConfig.load(cfg_path)
    assert cfg_env.benchmark.runs == 9
    assert cfg_env.benchmark.table_sizes == [10, 20, 30]
    assert cfg_env.benchmark.hash_functions() == [HashFunction.MULTIPLICATIVE]


@pytest.mark.parametrize(
    "body",
    [
        "[benchmark]\nruns = 0\n",
        "[benchmark]\ntable_sizes = [100, 0]\n",
        "[benchmark]\nelement_counts = []\n",
        "[benchmark]\ntable_sizes = [10, 10]\n",
        "[benchmark]\nstrategies = [\"sha1\"]\n",
        "[benchmark]\nstrategies = [\"modulo\", \"module\"]\n",
        "[benchmark]\nnumbers_size = -5\n",
        "[benchmark]\nnumbers_size = 3000000000\n",
        "[benchmark]\nruns = \"three\"\n",
        "[benchmark]\ntable_sizes = 100\n",
        "[benchmark]\nbucket_count = 3\n",
        "benchmark = 3\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    bad_path = tmp_path / "bad.toml"
    bad_path.write_text(body, encoding="utf-8")
    with pytest.raises(BadInputError):
        load_app_config(str(bad_path))


def test_missing_and_malformed_files(tmp_path: Path) -> None:
    with pytest.raises(BadInputError, match="not found"):
        load_app_config(str(tmp_path / "missing.toml"))
    broken = tmp_path / "broken.toml"
    broken.write_text("[benchmark\n", encoding="utf-8")
    with pytest.raises(BadInputError, match="Invalid TOML"):
        load_app_config(str(broken))


def test_invalid_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HASHBENCH_SEED", "abc")
    with pytest.raises(BadInputError, match="HASHBENCH_SEED"):
        load_app_config(None)


def test_numbers_size_capped_at_int_range(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HASHBENCH_NUMBERS_SIZE", str(MAX_NUMBERS_SIZE + 1))
    with pytest.raises(BadInputError, match="numbers_size"):
        load_app_config(None)
    monkeypatch.setenv("HASHBENCH_NUMBERS_SIZE", str(MAX_NUMBERS_SIZE))
    assert load_app_config(None).benchmark.numbers_size == MAX_NUMBERS_SIZE
