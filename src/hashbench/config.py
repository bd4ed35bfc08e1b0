"""Typed configuration loader for the hashbench CLI."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .contracts.error import BadInputError
from .core.strategies import HashFunction

DEFAULT_STRATEGIES: tuple[str, ...] = ("modulo", "multiplicative", "folding")
DEFAULT_TABLE_SIZES: tuple[int, ...] = (1_000_000, 100_000, 10_000, 1_000, 100)
DEFAULT_ELEMENT_COUNTS: tuple[int, ...] = (10_000, 20_000, 100_000, 500_000, 1_000_000)
# Upper bound of a 32-bit signed key draw.
MAX_NUMBERS_SIZE = 2**31 - 1


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _int_list(raw: str) -> list[int]:
    return [int(part) for part in _split_csv(raw)]


@dataclass
class BenchmarkPolicy:
    strategies: list[str] = field(default_factory=lambda: list(DEFAULT_STRATEGIES))
    table_sizes: list[int] = field(default_factory=lambda: list(DEFAULT_TABLE_SIZES))
    element_counts: list[int] = field(default_factory=lambda: list(DEFAULT_ELEMENT_COUNTS))
    runs: int = 5
    seed: int = 2023
    numbers_size: int = 1_000_000
    output_dir: str = "results"

    def hash_functions(self) -> list[HashFunction]:
        return [HashFunction.parse(name) for name in self.strategies]

    def validate(self) -> None:
        if not self.strategies:
            raise BadInputError("benchmark.strategies must not be empty")
        try:
            parsed = self.hash_functions()
        except ValueError as exc:
            raise BadInputError(f"benchmark.strategies: {exc}") from exc
        if len(set(parsed)) != len(parsed):
            raise BadInputError("benchmark.strategies must not repeat a hash function")
        for name in ("table_sizes", "element_counts"):
            values = getattr(self, name)
            if not values:
                raise BadInputError(f"benchmark.{name} must not be empty")
            if any(isinstance(v, bool) or not isinstance(v, int) or v <= 0 for v in values):
                raise BadInputError(f"benchmark.{name} must contain integers > 0")
            if len(set(values)) != len(values):
                raise BadInputError(f"benchmark.{name} must not contain duplicates")
        if self.runs <= 0:
            raise BadInputError("benchmark.runs must be > 0")
        if not 0 < self.numbers_size <= MAX_NUMBERS_SIZE:
            raise BadInputError(f"benchmark.numbers_size must be within [1, {MAX_NUMBERS_SIZE}]")
        if not str(self.output_dir).strip():
            raise BadInputError("benchmark.output_dir must not be empty")


@dataclass
class AppConfig:
    benchmark: BenchmarkPolicy = field(default_factory=BenchmarkPolicy)

    @classmethod
    def load(cls, path: Path | None) -> AppConfig:
        if path is None:
            cfg = cls()
        else:
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except FileNotFoundError as exc:
                raise BadInputError(f"Config file not found: {path}") from exc
            except tomllib.TOMLDecodeError as exc:
                raise BadInputError(f"Invalid TOML: {exc}") from exc
            cfg = cls.from_dict(data)
        cfg.apply_env_overrides(os.environ)
        cfg.validate()
        return cfg

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        bench_data = data.get("benchmark", {})
        if not isinstance(bench_data, dict):
            raise BadInputError("[benchmark] section must be a table")
        known = set(BenchmarkPolicy.__dataclass_fields__)
        unknown = sorted(set(bench_data) - known)
        if unknown:
            raise BadInputError(f"Unknown [benchmark] keys: {', '.join(unknown)}")
        kwargs: dict[str, Any] = dict(bench_data)
        for key in ("strategies", "table_sizes", "element_counts"):
            if key in kwargs and not isinstance(kwargs[key], list):
                raise BadInputError(f"benchmark.{key} must be an array")
        if "strategies" in kwargs:
            kwargs["strategies"] = [str(name) for name in kwargs["strategies"]]
        for key in ("runs", "seed", "numbers_size"):
            if key in kwargs and (isinstance(kwargs[key], bool) or not isinstance(kwargs[key], int)):
                raise BadInputError(f"benchmark.{key} must be an integer")
        if "output_dir" in kwargs:
            kwargs["output_dir"] = str(kwargs["output_dir"])
        return cls(benchmark=BenchmarkPolicy(**kwargs))

    def apply_env_overrides(self, env: Mapping[str, str]) -> None:
        mapping: dict[str, tuple[str, Callable[[str], Any]]] = {
            "HASHBENCH_STRATEGIES": ("strategies", _split_csv),
            "HASHBENCH_TABLE_SIZES": ("table_sizes", _int_list),
            "HASHBENCH_ELEMENT_COUNTS": ("element_counts", _int_list),
            "HASHBENCH_RUNS": ("runs", int),
            "HASHBENCH_SEED": ("seed", int),
            "HASHBENCH_NUMBERS_SIZE": ("numbers_size", int),
            "HASHBENCH_OUTPUT_DIR": ("output_dir", str),
        }
        for key, (attr, caster) in mapping.items():
            raw_value = env.get(key)
            if raw_value is None:
                continue
            try:
                value = caster(raw_value)
            except ValueError as exc:
                raise BadInputError(f"Invalid env override {key}={raw_value!r}") from exc
            setattr(self.benchmark, attr, value)

    def validate(self) -> None:
        self.benchmark.validate()


def load_app_config(path: str | None) -> AppConfig:
    config_path = Path(path) if path else None
    return AppConfig.load(config_path)
