"""Sink interface shared by the export backends.

A sink receives the schema entries of one export and, table by table, the
rows of every table. Each backend decides how that content is persisted.
The lifecycle is strict:

- schema entries may be written at any time before ``close()``
- only one table sink is open at a time, and it must be handed back
  through ``close_table()`` (or ``abort()``-ed) before the next one opens
- ``close()`` is called exactly once, after which the sink is spent
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from sqlite2dir.models import Row, SchemaEntry
from sqlite2dir.utils.row_codec import RowEncodingError, encode_row


class SinkError(Exception):
    """Raised when a sink operation fails.

    Carries the operation and the object (table or schema entry) it was
    applied to. The underlying error is available as ``__cause__``.
    """

    def __init__(self, operation: str, name: Optional[str] = None, detail: str = ""):
        message = f"could not {operation}"
        if name is not None:
            message += f" '{name}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)
        self.operation = operation
        self.name = name


class TableWriteError(SinkError):
    """Raised when a row cannot be written to a table sink."""

    def __init__(self, table: str, detail: str = ""):
        super().__init__("write row of table", table, detail)
        self.table = table


class TableSink(ABC):
    """Accumulates the rows of a single table."""

    def __init__(self, name: str):
        self.name = name
        self.rows_written = 0
        self.closed = False

    def write_row(self, row: Row) -> None:
        """Encode and append one row.

        Raises:
            TableWriteError: If the row cannot be encoded or stored
        """
        if self.closed:
            raise SinkError("write to closed table", self.name)
        try:
            line = encode_row(row)
        except RowEncodingError as e:
            raise TableWriteError(self.name, str(e)) from e
        self._append(line.encode("utf-8"))
        self.rows_written += 1

    @abstractmethod
    def _append(self, data: bytes) -> None:
        """Store one encoded row line."""

    def abort(self) -> None:
        """Discard everything written so far."""
        self.closed = True


class Sink(ABC):
    """Destination for one export run."""

    def __init__(self):
        self._open_table: Optional[TableSink] = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_usable(self) -> None:
        if self._closed:
            raise SinkError("use sink after close")

    def write_schema(self, entries: Iterable[SchemaEntry]) -> None:
        """Write every schema entry, in the order given."""
        for entry in entries:
            self.write_schema_entry(entry)

    def write_schema_entry(self, entry: SchemaEntry) -> None:
        """Persist the SQL of a schema entry under ``(kind, name)``.

        Entries without SQL (implicit indexes and the like) are skipped.
        """
        self._check_usable()
        if entry.sql is None:
            return
        self._write_schema_sql(entry.kind, entry.name, entry.sql)

    def open_table(self, name: str) -> TableSink:
        """Start accumulating rows for the table called ``name``."""
        self._check_usable()
        if self._open_table is not None and not self._open_table.closed:
            raise SinkError(
                "open table", name, f"table '{self._open_table.name}' is still open"
            )
        table = self._create_table_sink(name)
        self._open_table = table
        return table

    def close_table(self, table: TableSink) -> None:
        """Persist a table's rows, keyed by the table's name."""
        self._check_usable()
        if table is not self._open_table or table.closed:
            raise SinkError("close table", table.name, "table is not open on this sink")
        self._persist_table(table)
        table.closed = True
        self._open_table = None

    def close(self) -> None:
        """Finalize the export. Must be called exactly once."""
        self._check_usable()
        if self._open_table is not None and not self._open_table.closed:
            raise SinkError(
                "close sink", None, f"table '{self._open_table.name}' is still open"
            )
        self._finalize()
        self._closed = True

    @abstractmethod
    def _write_schema_sql(self, kind: str, name: str, sql: str) -> None:
        """Store schema SQL text for ``kind``/``name``."""

    @abstractmethod
    def _create_table_sink(self, name: str) -> TableSink:
        """Create the backend's table sink."""

    @abstractmethod
    def _persist_table(self, table: TableSink) -> None:
        """Move a finished table's content into the sink."""

    def _finalize(self) -> None:
        """Backend-specific finalization, nothing by default."""
