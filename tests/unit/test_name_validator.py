"""Tests for path segment validation and export paths."""

from pathlib import PurePosixPath

import pytest

from sqlite2dir.utils.name_validator import (
    InvalidNameError,
    is_valid_path_segment,
    validate_path_segment,
)
from sqlite2dir.utils.path_utils import schema_file_path, table_file_path


class TestValidatePathSegment:
    """Test path segment validation."""

    @pytest.mark.parametrize(
        "name", ["users", "Users Table", "sqlite_autoindex_tags_1", "a.b", "naïve"]
    )
    def test_valid_names(self, name):
        assert validate_path_segment(name) == name
        assert is_valid_path_segment(name)

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b", "nul\0byte"])
    def test_invalid_names(self, name):
        with pytest.raises(InvalidNameError):
            validate_path_segment(name, "table")
        assert not is_valid_path_segment(name)

    def test_error_names_entity(self):
        with pytest.raises(InvalidNameError, match="table"):
            validate_path_segment("../etc", "table")


class TestExportPaths:
    """Test the shared export layout."""

    def test_schema_path(self):
        assert schema_file_path("index", "users_idx") == PurePosixPath(
            "schema/index/users_idx.sql"
        )

    def test_table_path(self):
        assert table_file_path("users") == PurePosixPath("table/users.json")

    def test_traversal_in_kind_rejected(self):
        with pytest.raises(InvalidNameError):
            schema_file_path("..", "x")

    def test_separator_in_name_rejected(self):
        with pytest.raises(InvalidNameError):
            table_file_path("a/b")
