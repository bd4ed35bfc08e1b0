"""JSON run summary and its schema validation."""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import UTC, datetime
from importlib import resources
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from hashbench.bench.runner import StrategyReport
from hashbench.config import BenchmarkPolicy
from hashbench.contracts.error import BadInputError, IOErrorEnvelope

SUMMARY_SCHEMA_ID = "hashbench.summary.v1"


def load_summary_schema() -> dict[str, Any]:
    schema_resource = resources.files("hashbench.contracts") / "summary_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        return json.load(stream)


def build_summary(reports: Iterable[StrategyReport], policy: BenchmarkPolicy) -> dict[str, Any]:
    strategies = []
    for report in reports:
        strategies.append(
            {
                "strategy": report.strategy.value,
                "cells": [
                    {
                        "table_size": cell.table_size,
                        "element_count": cell.element_count,
                        "runs": cell.runs,
                        "insert_seconds": cell.insert_seconds,
                        "collisions": cell.collisions,
                        "search_seconds": cell.search_seconds,
                        "load_factor": cell.load_factor,
                    }
                    for cell in report.cells
                ],
            }
        )
    return {
        "schema": SUMMARY_SCHEMA_ID,
        "generated_at": datetime.now(UTC).isoformat(),
        "config": {
            "runs": policy.runs,
            "seed": policy.seed,
            "numbers_size": policy.numbers_size,
            "table_sizes": list(policy.table_sizes),
            "element_counts": list(policy.element_counts),
        },
        "strategies": strategies,
    }


def validate_summary(obj: Any) -> None:
    validator = Draft202012Validator(load_summary_schema())
    errors = sorted(validator.iter_errors(obj), key=lambda err: list(err.path))
    if errors:
        details = "; ".join(f"{err.message} @ {list(err.path)}" for err in errors)
        raise BadInputError(f"Summary does not match {SUMMARY_SCHEMA_ID}: {details}")


def write_summary(summary: dict[str, Any], path: str | Path) -> Path:
    validate_summary(summary)
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(summary, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise IOErrorEnvelope(
            f"Cannot write summary {out_path}: {exc}",
            hint="Check that --summary-out names a writable file path.",
        ) from exc
    return out_path


def load_summary(path: str | Path) -> dict[str, Any]:
    """Read and validate a summary file."""

    target = Path(path)
    try:
        obj = json.loads(target.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise BadInputError(f"Invalid JSON in {target}: {exc}") from exc
    except FileNotFoundError:
        raise
    except OSError as exc:
        raise IOErrorEnvelope(f"Cannot read summary {target}: {exc}") from exc
    validate_summary(obj)
    return obj


__all__ = [
    "SUMMARY_SCHEMA_ID",
    "build_summary",
    "load_summary",
    "load_summary_schema",
    "validate_summary",
    "write_summary",
]
