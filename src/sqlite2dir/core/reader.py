"""Schema and table reading for SQLite databases."""

import logging
import sqlite3
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from sqlite2dir.core.connection import DatabaseConnection
from sqlite2dir.models import RawText, SchemaEntry, Value

logger = logging.getLogger(__name__)


class DatabaseError(Exception):
    """Raised when the source database cannot be read."""

    pass


class SchemaError(DatabaseError):
    """Raised when the database catalog cannot be read."""

    pass


class TableReadError(DatabaseError):
    """Raised when a table's rows cannot be read."""

    def __init__(self, table: str, detail: str):
        super().__init__(f"could not read table '{table}': {detail}")
        self.table = table


def quote_identifier(name: str) -> str:
    """Quote an SQL identifier, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def _decode(value: Optional[bytes], what: str) -> Optional[str]:
    if value is None:
        return None
    try:
        return bytes(value).decode("utf-8")
    except UnicodeDecodeError as e:
        raise SchemaError(f"invalid UTF-8 in {what}: {e.reason}") from e


class Database:
    """Read-only view of a SQLite database's catalog and tables."""

    def __init__(self, conn: DatabaseConnection):
        self.conn = conn

    @classmethod
    def open(cls, path: Path) -> "Database":
        """Open the database file at ``path`` read-only.

        Raises:
            DatabaseError: If the file does not exist or is not a database
        """
        try:
            return cls(DatabaseConnection(path))
        except (OSError, sqlite3.Error) as e:
            raise DatabaseError(f"could not open database {path}: {e}") from e

    def read_schema(self) -> List[SchemaEntry]:
        """Read every entry of ``sqlite_master``, in catalog order.

        Returns:
            List of SchemaEntry objects

        Raises:
            SchemaError: If the catalog cannot be read
        """
        try:
            cursor = self.conn.execute(
                "SELECT type, name, tbl_name, sql FROM sqlite_master"
            )
            rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise SchemaError(f"could not read schema: {e}") from e

        entries = [self._read_schema_entry(row) for row in rows]
        logger.debug(f"Read {len(entries)} schema entries from {self.conn.path}")
        return entries

    def _read_schema_entry(self, row: Tuple[RawText, ...]) -> SchemaEntry:
        kind, name, tbl_name, sql = row
        name = _decode(name, "schema object name")
        return SchemaEntry(
            kind=_decode(kind, f"type of '{name}'"),
            name=name,
            tbl_name=_decode(tbl_name, f"table name of '{name}'"),
            column_names=self.read_column_names(name),
            sql=_decode(sql, f"SQL of '{name}'"),
        )

    def read_column_names(self, name: str) -> List[str]:
        """Get the ordered column names of a table or view.

        Objects without columns (indexes, triggers) yield an empty list.
        """
        try:
            cursor = self.conn.execute(f"PRAGMA table_info({quote_identifier(name)})")
            return [_decode(row[1], f"column of '{name}'") for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise SchemaError(f"could not read columns of '{name}': {e}") from e

    def read_table(self, entry: SchemaEntry) -> Iterator[Tuple[Value, ...]]:
        """Yield the rows of the table described by ``entry``.

        Values are in ``entry.column_names`` order.

        Raises:
            TableReadError: If the table cannot be queried
        """
        try:
            cursor = self.conn.execute(f"SELECT * FROM {quote_identifier(entry.name)}")
            for row in cursor:
                yield row
        except sqlite3.Error as e:
            raise TableReadError(entry.name, str(e)) from e

    def close(self) -> None:
        """Close the underlying connection."""
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
