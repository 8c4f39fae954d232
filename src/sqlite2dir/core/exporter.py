"""Export driver: feeds a database's schema and rows into a sink."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from sqlite2dir.config import ExportConfig
from sqlite2dir.core.author import AuthorResolver
from sqlite2dir.core.reader import Database
from sqlite2dir.managers.repository import CommitResult, GitRepository
from sqlite2dir.sinks import DirSink, Sink

logger = logging.getLogger(__name__)

BACKEND_DIR = "dir"
BACKEND_GIT = "git"


class ExportError(Exception):
    """Raised when an export fails. The cause is chained."""

    pass


@dataclass
class ExportResult:
    """Outcome of one export run.

    Attributes:
        backend: "dir" or "git"
        destination: Directory or repository that was written
        commit: Commit outcome, only for the git backend
    """

    backend: str
    destination: Path
    commit: Optional[CommitResult] = None

    @property
    def changed(self) -> Optional[bool]:
        """Whether the git export produced a commit, None for directories."""
        if self.commit is None:
            return None
        return self.commit.changed


def export_to_sink(database: Database, sink: Sink) -> None:
    """Export every schema entry and table of ``database`` into ``sink``.

    Schema entries are written in catalog order, then the rows of each table
    entry are streamed under the entry's ``tbl_name``. The first failure
    aborts the export; the failing table is discarded. ``sink`` is closed on
    success.
    """
    schema = database.read_schema()
    sink.write_schema(schema)

    for entry in schema:
        if not entry.is_table:
            continue
        table = sink.open_table(entry.tbl_name)
        try:
            for row in database.read_table(entry):
                table.write_row(row)
        except Exception:
            table.abort()
            raise
        sink.close_table(table)
        logger.info(f"Exported {table.rows_written} rows from table '{entry.tbl_name}'")

    sink.close()


def run_export(
    database_path: Path,
    destination: Path,
    require_git: bool = False,
    config: Optional[ExportConfig] = None,
) -> ExportResult:
    """Export a database file into a directory or a git repository.

    An existing bare repository at ``destination`` selects the git backend.
    Without one, a repository is created if ``require_git`` is set, and the
    plain directory backend is used otherwise.

    Args:
        database_path: SQLite database file
        destination: Target directory or bare repository
        require_git: Always export into a git repository
        config: Commit author and message settings

    Returns:
        ExportResult describing what was written

    Raises:
        ExportError: On any failure, with the cause chained
        ConfigurationError: If a commit author cannot be determined
    """
    config = config or ExportConfig()
    database_path = Path(database_path)
    destination = Path(destination)

    try:
        repo = GitRepository.open_or_create(destination, create=require_git)
    except Exception as e:
        raise ExportError(f"could not open destination {destination}") from e

    # resolved before exporting so that a missing author fails fast
    signature = None
    if repo is not None:
        signature = AuthorResolver(
            config.author_name, config.author_email, repo.config
        ).resolve()

    try:
        with Database.open(database_path) as database:
            if repo is None:
                logger.info(f"Exporting {database_path} to directory {destination}")
                export_to_sink(database, DirSink.open(destination))
                return ExportResult(backend=BACKEND_DIR, destination=destination)

            logger.info(f"Exporting {database_path} to repository {destination}")
            sink = repo.tree_sink()
            export_to_sink(database, sink)
            commit = repo.commit(config.message, signature, sink)
            return ExportResult(
                backend=BACKEND_GIT, destination=destination, commit=commit
            )
    except Exception as e:
        raise ExportError(f"could not export {database_path} to {destination}") from e
