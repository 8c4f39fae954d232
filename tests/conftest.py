"""Pytest configuration and shared fixtures."""

import shutil
import sqlite3
import tempfile
from pathlib import Path
from typing import Dict, List, Sequence

import pygit2
import pytest

from sqlite2dir.models import SchemaEntry


SAMPLE_SCHEMA = """
CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT NOT NULL, score REAL);
CREATE INDEX users_name_idx ON users (name);
CREATE TABLE tags (tag TEXT UNIQUE);
CREATE VIEW user_names AS SELECT name FROM users;
INSERT INTO users VALUES (1, 'alice', 1.5);
INSERT INTO users VALUES (2, 'bob', NULL);
INSERT INTO tags VALUES ('red');
"""


class FakeDatabase:
    """Stands in for a Database, serving fixed schema entries and rows."""

    def __init__(self, entries: List[SchemaEntry], rows: Dict[str, Sequence]):
        self.entries = entries
        self.rows = rows
        self.tables_read: List[str] = []

    def read_schema(self) -> List[SchemaEntry]:
        return list(self.entries)

    def read_table(self, entry: SchemaEntry):
        self.tables_read.append(entry.name)
        for row in self.rows.get(entry.name, []):
            yield row


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp)


def create_database(path: Path, script: str = SAMPLE_SCHEMA) -> Path:
    """Create a SQLite database file from an SQL script."""
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(script)
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def sample_db(temp_dir):
    """A small database with tables, an index, an implicit index and a view."""
    return create_database(temp_dir / "sample.db")


@pytest.fixture
def bare_repo(temp_dir):
    """An empty bare repository."""
    path = temp_dir / "export.git"
    pygit2.init_repository(str(path), bare=True)
    return path


@pytest.fixture
def signature():
    """Fixed commit identity."""
    return pygit2.Signature("Export Bot", "export@example.com")


def read_blob(repo: pygit2.Repository, tree: pygit2.Tree, path: str) -> bytes:
    """Get the content of the file at ``path`` in ``tree``."""
    return repo[tree[path].id].data


def tree_paths(repo: pygit2.Repository, tree: pygit2.Tree, prefix: str = "") -> List[str]:
    """List every file path in ``tree``, sorted."""
    paths = []
    for entry in tree:
        path = f"{prefix}{entry.name}"
        obj = repo[entry.id]
        if isinstance(obj, pygit2.Tree):
            paths.extend(tree_paths(repo, obj, path + "/"))
        else:
            paths.append(path)
    return sorted(paths)


@pytest.fixture
def make_database():
    """Factory for databases built from an SQL script."""
    return create_database


@pytest.fixture
def fake_database():
    """Factory for FakeDatabase instances."""
    return FakeDatabase


@pytest.fixture
def git_files():
    """Helpers to inspect exported git trees."""

    class GitFiles:
        read = staticmethod(read_blob)
        paths = staticmethod(tree_paths)

    return GitFiles
