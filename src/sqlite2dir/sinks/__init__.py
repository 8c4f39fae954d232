"""Export backends."""

from sqlite2dir.sinks.base import Sink, TableSink, SinkError, TableWriteError
from sqlite2dir.sinks.directory import DirSink, FileTable
from sqlite2dir.sinks.git import TreeSink, GitTable, StagingTree

__all__ = [
    "Sink",
    "TableSink",
    "SinkError",
    "TableWriteError",
    "DirSink",
    "FileTable",
    "TreeSink",
    "GitTable",
    "StagingTree",
]
