"""Result export helpers (CSV tables and JSON summaries)."""

from .export import CSVExporter, export_reports, export_strategy_report, write_rows
from .summary import (
    SUMMARY_SCHEMA_ID,
    build_summary,
    load_summary,
    load_summary_schema,
    validate_summary,
    write_summary,
)

__all__ = [
    "CSVExporter",
    "SUMMARY_SCHEMA_ID",
    "build_summary",
    "export_reports",
    "export_strategy_report",
    "load_summary",
    "load_summary_schema",
    "validate_summary",
    "write_rows",
    "write_summary",
]
