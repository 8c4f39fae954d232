"""Relative paths of exported objects.

Both backends share the same layout below their root; the filesystem
backend additionally nests table data under ``data/``.
"""

from pathlib import PurePosixPath

from sqlite2dir.utils.name_validator import validate_path_segment

SCHEMA_DIR = "schema"
TABLE_DIR = "table"
DATA_DIR = "data"

SCHEMA_SUFFIX = ".sql"
TABLE_SUFFIX = ".json"


def schema_file_name(name: str) -> str:
    """File name of a schema object's SQL."""
    return validate_path_segment(name + SCHEMA_SUFFIX, "schema object")


def table_file_name(name: str) -> str:
    """File name of a table's row data."""
    return validate_path_segment(name + TABLE_SUFFIX, "table")


def schema_file_path(kind: str, name: str) -> PurePosixPath:
    """Get ``schema/<kind>/<name>.sql``.

    Args:
        kind: Schema object type (table, index, view, trigger)
        name: Schema object name

    Returns:
        Path relative to the export root
    """
    validate_path_segment(kind, "schema kind")
    return PurePosixPath(SCHEMA_DIR, kind, schema_file_name(name))


def table_file_path(name: str) -> PurePosixPath:
    """Get ``table/<name>.json``, relative to the data root."""
    return PurePosixPath(TABLE_DIR, table_file_name(name))
