"""Filesystem export backend."""

import logging
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

from sqlite2dir.sinks.base import Sink, SinkError, TableSink
from sqlite2dir.utils.path_utils import DATA_DIR, schema_file_path, table_file_path
from sqlite2dir.utils.name_validator import InvalidNameError

logger = logging.getLogger(__name__)


class FileTable(TableSink):
    """Streams rows into a temporary file next to the final table file.

    The temporary file only replaces ``data/table/<name>.json`` when the table
    is closed, so a failed table never leaves a truncated file behind.
    """

    def __init__(self, name: str, target: Path):
        super().__init__(name)
        self.target = target
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=target.parent
        )
        self.tmp_path = Path(tmp_name)
        self._file: BinaryIO = os.fdopen(fd, "wb")

    def _append(self, data: bytes) -> None:
        try:
            self._file.write(data)
        except OSError as e:
            raise SinkError("write table file", self.name, str(e)) from e

    def commit(self) -> None:
        """Flush the rows and move them into place."""
        try:
            self._file.close()
            os.replace(self.tmp_path, self.target)
        except OSError as e:
            self._discard()
            raise SinkError("write table file", self.name, str(e)) from e

    def abort(self) -> None:
        self._discard()
        super().abort()

    def _discard(self) -> None:
        self._file.close()
        self.tmp_path.unlink(missing_ok=True)


class DirSink(Sink):
    """Writes the export as a plain directory tree.

    Layout under the root directory:

    - ``schema/<kind>/<name>.sql`` for every schema entry with SQL
    - ``data/table/<table_name>.json`` with one JSON array per row

    Files are recreated on every export. There is no diffing here, the last
    writer wins.
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    @classmethod
    def open(cls, path: Path) -> "DirSink":
        """Open a directory sink rooted at ``path``."""
        return cls(path)

    def _prepare(self, relative: Path) -> Path:
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def _write_schema_sql(self, kind: str, name: str, sql: str) -> None:
        try:
            target = self._prepare(schema_file_path(kind, name))
            target.write_bytes(sql.encode("utf-8"))
        except (OSError, InvalidNameError) as e:
            raise SinkError(f"write schema {kind}", name, str(e)) from e
        logger.debug(f"Wrote schema {kind} '{name}' to {target}")

    def _create_table_sink(self, name: str) -> FileTable:
        try:
            target = self._prepare(Path(DATA_DIR) / table_file_path(name))
            return FileTable(name, target)
        except (OSError, InvalidNameError) as e:
            raise SinkError("create table file", name, str(e)) from e

    def _persist_table(self, table: TableSink) -> None:
        assert isinstance(table, FileTable)
        table.commit()
        logger.debug(f"Wrote {table.rows_written} rows of table '{table.name}'")
