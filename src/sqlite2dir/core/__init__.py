"""Core sqlite2dir functionality."""

from sqlite2dir.core.reader import Database, DatabaseError, SchemaError, TableReadError
from sqlite2dir.core.exporter import (
    export_to_sink,
    run_export,
    ExportError,
    ExportResult,
)

__all__ = [
    "Database",
    "DatabaseError",
    "SchemaError",
    "TableReadError",
    "export_to_sink",
    "run_export",
    "ExportError",
    "ExportResult",
]
