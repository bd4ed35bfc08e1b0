import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
if SRC.exists():
    sys.path.insert(0, str(SRC))

# Register shared Hypothesis profiles for deterministic CI runs and fast local loops.
from tests.util import hypothesis_profiles  # noqa: E402,F401  pylint: disable=unused-import

from hashbench.config import BenchmarkPolicy  # noqa: E402


@pytest.fixture()
def small_policy(tmp_path: Path) -> BenchmarkPolicy:
    """Tiny matrix that runs in milliseconds."""

    return BenchmarkPolicy(
        strategies=["modulo", "multiplicative", "folding"],
        table_sizes=[50, 7],
        element_counts=[10, 40],
        runs=2,
        seed=2023,
        numbers_size=1000,
        output_dir=str(tmp_path / "results"),
    )


@pytest.fixture(autouse=True)
def _clear_hashbench_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "HASHBENCH_CONFIG",
        "HASHBENCH_STRATEGIES",
        "HASHBENCH_TABLE_SIZES",
        "HASHBENCH_ELEMENT_COUNTS",
        "HASHBENCH_RUNS",
        "HASHBENCH_SEED",
        "HASHBENCH_NUMBERS_SIZE",
        "HASHBENCH_OUTPUT_DIR",
    ):
        monkeypatch.delenv(key, raising=False)
