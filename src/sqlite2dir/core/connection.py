"""SQLite connection management for sqlite2dir."""

import sqlite3
from pathlib import Path
from typing import Optional

from sqlite2dir.models import RawText


class DatabaseConnection:
    """Manages a read-only SQLite connection.

    Text values are returned undecoded as :class:`RawText` so that exports
    can validate their encoding and tell them apart from blobs.
    """

    def __init__(self, path: Path):
        """Initialize database connection.

        Args:
            path: Path to SQLite database file

        Raises:
            FileNotFoundError: If the database file does not exist
            sqlite3.Error: If the file cannot be opened
        """
        self.path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None
        self._connect()

    def _connect(self) -> None:
        """Open the database file without write access."""
        # sqlite would create a missing file, even with mode=ro on some builds
        if not self.path.is_file():
            raise FileNotFoundError(f"Database file not found: {self.path}")

        uri = f"{self.path.resolve().as_uri()}?mode=ro"
        self._conn = sqlite3.connect(uri, uri=True)
        self._conn.text_factory = RawText

    def execute(self, sql: str, params: Optional[tuple] = None) -> sqlite3.Cursor:
        """Execute a SQL statement.

        Args:
            sql: SQL statement to execute
            params: Optional parameters for parameterized queries

        Returns:
            Cursor with results
        """
        if not self._conn:
            raise RuntimeError("Connection is closed")

        if params:
            return self._conn.execute(sql, params)
        return self._conn.execute(sql)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
