"""CSV export of benchmark reports."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from types import TracebackType
from typing import IO, Optional, Type

from hashbench.bench.runner import Metric, StrategyReport
from hashbench.contracts.error import IOErrorEnvelope

logger = logging.getLogger("hashbench")

MATRIX_SUFFIXES: tuple[tuple[Metric, str], ...] = (
    ("insert", "_insert"),
    ("collisions", "_collisions"),
    ("search", "_search"),
)


class CSVExporter:
    """Thin row writer around ``csv.writer`` that owns its file handle."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh: Optional[IO[str]] = open(self.path, "w", newline="", encoding="utf-8")
        except OSError as exc:
            raise IOErrorEnvelope(
                f"Cannot write CSV {self.path}: {exc}",
                hint="Check --out-dir or benchmark.output_dir points at a writable directory.",
            ) from exc
        self._writer = csv.writer(self._fh, lineterminator="\n")

    def add_row(self, row: Sequence[object]) -> None:
        if self._fh is None:
            raise ValueError(f"CSV exporter for {self.path} is closed")
        self._writer.writerow(row)

    def add_rows(self, rows: Iterable[Sequence[object]]) -> None:
        for row in rows:
            self.add_row(row)

    def close(self) -> None:
        if self._fh is None:
            return
        self._fh.flush()
        self._fh.close()
        self._fh = None

    def __enter__(self) -> "CSVExporter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()


def write_rows(path: str | Path, rows: Iterable[Sequence[object]]) -> Path:
    with CSVExporter(path) as exporter:
        exporter.add_rows(rows)
        return exporter.path


def export_strategy_report(report: StrategyReport, out_dir: str | Path) -> list[Path]:
    """Write ``<name>.csv`` plus the insert/collisions/search matrices."""

    base = Path(out_dir)
    name = report.strategy.value
    written = [write_rows(base / f"{name}.csv", report.summary_rows())]
    for metric, suffix in MATRIX_SUFFIXES:
        written.append(write_rows(base / f"{name}{suffix}.csv", report.matrix(metric)))
    logger.info("Wrote %d CSV files for %s to %s", len(written), name, base)
    return written


def export_reports(reports: Iterable[StrategyReport], out_dir: str | Path) -> list[Path]:
    written: list[Path] = []
    for report in reports:
        written.extend(export_strategy_report(report, out_dir))
    return written


__all__ = ["CSVExporter", "export_reports", "export_strategy_report", "write_rows"]
