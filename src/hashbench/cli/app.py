"""
hashbench command-line toolkit.

Benchmarks a fixed-capacity separate-chaining hash table under the modulo,
multiplicative (Fibonacci) and folding hash functions:
- `run` sweeps table sizes x element counts, averages repeated trials and
  exports CSV tables (plus an optional JSON summary)
- `trial` runs one (capacity, elements, hash function) trial
- `index` prints slot indexes for keys
- `chains` reports the chain length histogram after a trial's inserts
- `validate-summary` checks a JSON summary against the bundled schema
"""

from __future__ import annotations

import argparse
import contextlib
import json
import logging
import os
import sys
from collections.abc import Sequence
from dataclasses import replace
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from hashbench.bench.rng import JavaRandom
from hashbench.bench.runner import BenchmarkRunner, run_trial
from hashbench.cli.commands import CLIContext, register_subcommands
from hashbench.config import AppConfig, load_app_config
from hashbench.contracts.error import BadInputError, guard_cli
from hashbench.core.strategies import HashFunction
from hashbench.core.table import ChainedHashTable, RegistryIdGenerator, chain_length_histogram
from hashbench.io.export import export_reports
from hashbench.io.summary import build_summary, load_summary, write_summary

# --------------------------------------------------------------------
# Logging
# --------------------------------------------------------------------
logger = logging.getLogger("hashbench")
logger.setLevel(logging.INFO)
logger.propagate = False

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"
DEFAULT_LOG_MAX_BYTES = 5_000_000
DEFAULT_LOG_BACKUP_COUNT = 5


class JsonFormatter(logging.Formatter):
    """Render log records as JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, DEFAULT_LOG_DATEFMT),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False)


def configure_logging(
    use_json: bool = False,
    log_file: str | None = None,
    *,
    max_bytes: int = DEFAULT_LOG_MAX_BYTES,
    backup_count: int = DEFAULT_LOG_BACKUP_COUNT,
) -> None:
    """Configure console (and optional rotating file) logging."""

    formatter: logging.Formatter
    if use_json:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(DEFAULT_LOG_FORMAT, DEFAULT_LOG_DATEFMT)

    for handler in list(logger.handlers):
        with contextlib.suppress(Exception):
            handler.close()
        logger.removeHandler(handler)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        handler.setFormatter(formatter)
        logger.addHandler(handler)


configure_logging()

APP_CONFIG: AppConfig = AppConfig()
OUTPUT_JSON: bool = False


def set_app_config(cfg: AppConfig) -> None:
    global APP_CONFIG
    APP_CONFIG = cfg


def get_app_config() -> AppConfig:
    return APP_CONFIG


def emit_success(
    command: str, *, text: str | None = None, data: dict[str, Any] | None = None
) -> None:
    if OUTPUT_JSON:
        payload: dict[str, Any] = {"ok": True, "command": command}
        if data:
            payload.update(data)
        if text is not None and "result" not in payload:
            payload["result"] = text
        print(json.dumps(payload, ensure_ascii=False))
    else:
        if text is not None:
            print(text)


def _parse_strategy(name: str) -> HashFunction:
    try:
        return HashFunction.parse(name)
    except ValueError as exc:
        raise BadInputError(str(exc)) from exc


def _parse_strategies(names: Sequence[str] | None) -> list[HashFunction] | None:
    if not names:
        return None
    # dict.fromkeys keeps first-seen order
    return list(dict.fromkeys(_parse_strategy(name) for name in names))


# --------------------------------------------------------------------
# Commands
# --------------------------------------------------------------------
def run_benchmark(
    *,
    out_dir: str | None = None,
    strategies: Sequence[str] | None = None,
    runs: int | None = None,
    summary_out: str | None = None,
) -> dict[str, Any]:
    policy = APP_CONFIG.benchmark
    if runs is not None:
        if runs <= 0:
            raise BadInputError("--runs must be > 0")
        policy = replace(policy, runs=runs)
    selected = _parse_strategies(strategies)
    target_dir = Path(out_dir or policy.output_dir)

    runner = BenchmarkRunner(policy)
    reports = runner.run(selected)
    written = export_reports(reports, target_dir)

    result: dict[str, Any] = {
        "out_dir": str(target_dir),
        "files": [str(path) for path in written],
        "strategies": [report.strategy.value for report in reports],
        "cells": sum(len(report.cells) for report in reports),
    }
    if summary_out:
        summary = build_summary(reports, policy)
        result["summary"] = str(write_summary(summary, summary_out))
        logger.info("Wrote JSON summary to %s", summary_out)
    return result


def run_single_trial(
    capacity: int,
    elements: int,
    strategy: str,
    *,
    seed: int | None = None,
    numbers_size: int | None = None,
) -> dict[str, Any]:
    policy = APP_CONFIG.benchmark
    hash_function = _parse_strategy(strategy)
    if elements <= 0:
        raise BadInputError("--elements must be > 0")
    try:
        trial = run_trial(
            capacity,
            elements,
            hash_function,
            seed=policy.seed if seed is None else seed,
            numbers_size=policy.numbers_size if numbers_size is None else numbers_size,
            ids=RegistryIdGenerator(),
        )
    except ValueError as exc:
        raise BadInputError(str(exc)) from exc
    return {
        "strategy": hash_function.value,
        "capacity": capacity,
        "elements": elements,
        "insert_seconds": trial.insert_seconds,
        "collisions": trial.collisions,
        "search_seconds": trial.search_seconds,
    }


def compute_indexes(keys: Sequence[int], capacity: int, strategies: Sequence[str] | None) -> dict[str, Any]:
    selected = _parse_strategies(strategies) or list(HashFunction)
    indexes: dict[str, list[int]] = {}
    try:
        for strategy in selected:
            indexes[strategy.value] = [strategy.slot_index(key, capacity) for key in keys]
    except ValueError as exc:
        raise BadInputError(str(exc)) from exc
    return {"capacity": capacity, "keys": list(keys), "indexes": indexes}


def chain_histogram(
    capacity: int,
    elements: int,
    strategy: str,
    *,
    seed: int | None = None,
    numbers_size: int | None = None,
) -> dict[str, Any]:
    policy = APP_CONFIG.benchmark
    hash_function = _parse_strategy(strategy)
    if elements < 0:
        raise BadInputError("--elements must be >= 0")
    try:
        table = ChainedHashTable(capacity, hash_function)
        rng = JavaRandom(policy.seed if seed is None else seed)
        bound = policy.numbers_size if numbers_size is None else numbers_size
        for _ in range(elements):
            table.insert(rng.next_int(bound))
    except ValueError as exc:
        raise BadInputError(str(exc)) from exc
    return {
        "strategy": hash_function.value,
        "capacity": capacity,
        "elements": elements,
        "collisions": table.collisions,
        "occupied_slots": table.occupied_slots(),
        "max_chain_len": table.max_chain_len(),
        "load_factor": table.load_factor(),
        "histogram": chain_length_histogram(table),
    }


def validate_summary_file(path: str) -> dict[str, Any]:
    summary = load_summary(path)
    return {
        "path": path,
        "strategies": [entry["strategy"] for entry in summary["strategies"]],
    }


# --------------------------------------------------------------------
# CLI
# --------------------------------------------------------------------
def main(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        description=(
            "Benchmark a separate-chaining hash table under modulo, multiplicative "
            "and folding hash functions."
        )
    )
    p.add_argument("--log-json", action="store_true", help="Emit logs in JSON format")
    p.add_argument(
        "--log-file",
        default=None,
        help="Optional log file path (rotates at 5MB, keeps 5 backups by default)",
    )
    p.add_argument(
        "--log-max-bytes",
        type=int,
        default=DEFAULT_LOG_MAX_BYTES,
        help="Max bytes per log file before rotation (default: %(default)s)",
    )
    p.add_argument(
        "--log-backup-count",
        type=int,
        default=DEFAULT_LOG_BACKUP_COUNT,
        help="Number of rotated log files to keep (default: %(default)s)",
    )
    p.add_argument(
        "--json", action="store_true", help="Emit machine-readable success output to stdout"
    )
    p.add_argument(
        "--config",
        default=None,
        help="Path to TOML config file (env overrides still apply)",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    ctx = CLIContext(
        emit_success=emit_success,
        run_benchmark=run_benchmark,
        run_trial=run_single_trial,
        compute_indexes=compute_indexes,
        chain_histogram=chain_histogram,
        validate_summary=validate_summary_file,
        logger=logger,
        json_enabled=lambda: OUTPUT_JSON,
        guard=guard_cli,
        strategy_choices=[strategy.value for strategy in HashFunction],
    )

    handlers = register_subcommands(sub, ctx)

    args = p.parse_args(argv)

    global OUTPUT_JSON
    OUTPUT_JSON = bool(args.json)

    configure_logging(
        args.log_json,
        args.log_file,
        max_bytes=args.log_max_bytes,
        backup_count=args.log_backup_count,
    )

    cfg_path = args.config or os.getenv("HASHBENCH_CONFIG")
    cfg = guard_cli(load_app_config)(cfg_path)
    set_app_config(cfg)
    if cfg_path:
        logger.info("Loaded config from %s", cfg_path)

    return handlers[args.cmd](args)


def console_main() -> None:
    """Entry point for console_scripts."""

    try:
        raise SystemExit(main(sys.argv[1:]))
    except SystemExit:
        raise
    except Exception as e:  # noqa: BLE001
        logger.exception("Fatal error: %s", e)
        raise SystemExit(2) from e


if __name__ == "__main__":
    console_main()
