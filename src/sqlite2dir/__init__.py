"""sqlite2dir - Export SQLite databases as directory trees or git commits."""

from importlib.metadata import PackageNotFoundError, version

from sqlite2dir.core import Database, export_to_sink, run_export
from sqlite2dir.sinks import DirSink, TreeSink
from sqlite2dir.managers import GitRepository

try:
    __version__ = version("sqlite2dir")
except PackageNotFoundError:
    # Package metadata is not available when running from a source checkout
    __version__ = "0.1.0"

__all__ = [
    "Database",
    "DirSink",
    "TreeSink",
    "GitRepository",
    "export_to_sink",
    "run_export",
]
