"""Git export backend.

Content is written as blobs into the object store of a bare repository and
arranged in an in-memory staging tree. ``close()`` flushes the staging tree
into git tree objects and records the id of the root tree; the repository
manager decides whether that tree becomes a commit.

Tree layout::

    schema/<kind>/<name>.sql
    table/<table_name>.json
"""

import logging
from pathlib import PurePosixPath
from typing import Dict, Iterator, List, Optional, Tuple, Union

import pygit2

from sqlite2dir.sinks.base import Sink, SinkError, TableSink
from sqlite2dir.utils.path_utils import schema_file_path, table_file_path
from sqlite2dir.utils.name_validator import InvalidNameError

logger = logging.getLogger(__name__)

# Octal git file modes for regular files and directories
FILEMODE_BLOB = 0o100644
FILEMODE_TREE = 0o040000


class StagingTree:
    """Mutable tree of path segments being assembled for one export.

    Each node owns its children outright: a child is either the id of a blob
    already in the object store, or a nested ``StagingTree``.
    """

    def __init__(self):
        self.entries: Dict[str, Union[pygit2.Oid, "StagingTree"]] = {}

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: str) -> bool:
        return name in self.entries

    def subtree(self, name: str) -> "StagingTree":
        """Get the child tree ``name``, creating it if needed."""
        entry = self.entries.get(name)
        if entry is None:
            entry = self.entries[name] = StagingTree()
        elif not isinstance(entry, StagingTree):
            raise ValueError(f"'{name}' is a file, not a directory")
        return entry

    def insert(self, path: PurePosixPath, oid: pygit2.Oid) -> None:
        """Record blob ``oid`` at ``path``, replacing any previous blob."""
        *parents, leaf = path.parts
        node = self
        for part in parents:
            node = node.subtree(part)
        if isinstance(node.entries.get(leaf), StagingTree):
            raise ValueError(f"'{path}' is a directory, not a file")
        node.entries[leaf] = oid

    def walk(self, prefix: PurePosixPath = PurePosixPath()) -> Iterator[Tuple[PurePosixPath, pygit2.Oid]]:
        """Yield ``(path, blob id)`` for every file, in name order."""
        for name in sorted(self.entries):
            entry = self.entries[name]
            if isinstance(entry, StagingTree):
                yield from entry.walk(prefix / name)
            else:
                yield prefix / name, entry

    def write(self, repo: pygit2.Repository) -> pygit2.Oid:
        """Write this tree and all subtrees to the object store.

        The tree builder sorts entries the way git requires, so the same set
        of paths and contents always yields the same tree id.
        """
        builder = repo.TreeBuilder()
        for name, entry in self.entries.items():
            if isinstance(entry, StagingTree):
                builder.insert(name, entry.write(repo), FILEMODE_TREE)
            else:
                builder.insert(name, entry, FILEMODE_BLOB)
        return builder.write()


class GitTable(TableSink):
    """Buffers a table's row lines until the table is closed.

    The whole table is held in memory and becomes a single blob.
    """

    def __init__(self, name: str):
        super().__init__(name)
        self._chunks: List[bytes] = []

    def _append(self, data: bytes) -> None:
        self._chunks.append(data)

    @property
    def content(self) -> bytes:
        return b"".join(self._chunks)

    def abort(self) -> None:
        self._chunks.clear()
        super().abort()


class TreeSink(Sink):
    """Stages an export as a git tree inside a repository's object store."""

    def __init__(self, repo: pygit2.Repository):
        super().__init__()
        self.repo = repo
        self._tree = StagingTree()
        self.tree_id: Optional[pygit2.Oid] = None

    def _create_blob(self, data: bytes, operation: str, name: str) -> pygit2.Oid:
        try:
            return self.repo.create_blob(data)
        except pygit2.GitError as e:
            raise SinkError(operation, name, str(e)) from e

    def _stage(self, path: PurePosixPath, oid: pygit2.Oid, operation: str, name: str) -> None:
        try:
            self._tree.insert(path, oid)
        except ValueError as e:
            raise SinkError(operation, name, str(e)) from e

    def _write_schema_sql(self, kind: str, name: str, sql: str) -> None:
        operation = f"write schema {kind}"
        try:
            path = schema_file_path(kind, name)
        except InvalidNameError as e:
            raise SinkError(operation, name, str(e)) from e
        oid = self._create_blob(sql.encode("utf-8"), operation, name)
        self._stage(path, oid, operation, name)
        logger.debug(f"Staged schema {kind} '{name}' as {oid}")

    def _create_table_sink(self, name: str) -> GitTable:
        try:
            table_file_path(name)
        except InvalidNameError as e:
            raise SinkError("create table blob", name, str(e)) from e
        return GitTable(name)

    def _persist_table(self, table: TableSink) -> None:
        assert isinstance(table, GitTable)
        oid = self._create_blob(table.content, "create table blob", table.name)
        self._stage(table_file_path(table.name), oid, "create table blob", table.name)
        logger.debug(
            f"Staged {table.rows_written} rows of table '{table.name}' as {oid}"
        )

    def _finalize(self) -> None:
        try:
            self.tree_id = self._tree.write(self.repo)
        except pygit2.GitError as e:
            raise SinkError("write tree", None, str(e)) from e
        logger.info(f"Wrote export tree {self.tree_id} ({len(list(self.paths()))} files)")

    def paths(self) -> Iterator[PurePosixPath]:
        """Yield the paths staged so far, sorted."""
        for path, _ in self._tree.walk():
            yield path
