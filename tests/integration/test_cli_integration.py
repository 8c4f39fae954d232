"""CLI integration tests using CliRunner."""

import sqlite3

import pygit2
import pytest
from typer.testing import CliRunner

from sqlite2dir.cli.main import app
from sqlite2dir.cli.utils import EXIT_CHANGED, EXIT_ERROR, error_chain

runner = CliRunner()

AUTHOR_ARGS = ["--author-name", "Export Bot", "--author-email", "export@example.com"]


@pytest.fixture(autouse=True)
def isolated_cwd(temp_dir, monkeypatch):
    """Run every command where no stray sqlite2dir.toml can be picked up."""
    for name in ("SQLITE2DIR_CONFIG", "SQLITE2DIR_AUTHOR_NAME", "SQLITE2DIR_AUTHOR_EMAIL", "SQLITE2DIR_MESSAGE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(temp_dir)


class TestCLIIntegration:
    """Test the export command end to end."""

    def test_no_command_shows_help(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert "export" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "sqlite2dir version" in result.output

    def test_export_to_directory(self, sample_db, temp_dir):
        out = temp_dir / "out"
        result = runner.invoke(app, ["export", str(sample_db), str(out)])

        assert result.exit_code == 0, result.output
        assert "Exported" in result.output
        assert (out / "schema" / "table" / "users.sql").exists()
        assert (out / "data" / "table" / "users.json").exists()

    def test_git_export_and_no_op(self, sample_db, temp_dir):
        dest = temp_dir / "export.git"
        args = ["export", str(sample_db), str(dest), "--git", "-m", "nightly", *AUTHOR_ARGS]

        first = runner.invoke(app, args)
        assert first.exit_code == 0, first.output
        assert "Committed" in first.output

        second = runner.invoke(app, args)
        assert second.exit_code == 0, second.output
        assert "No changes" in second.output

        repo = pygit2.Repository(str(dest))
        head = repo.head.peel(pygit2.Commit)
        assert head.message == "nightly"
        assert head.author.email == "export@example.com"
        assert len(list(repo.walk(head.id))) == 1

    def test_exit_code_contract(self, sample_db, temp_dir):
        """Status 1 when something changed, 0 when nothing did."""
        dest = temp_dir / "export.git"
        args = ["export", str(sample_db), str(dest), "--exit-code", *AUTHOR_ARGS]

        first = runner.invoke(app, args)
        assert first.exit_code == EXIT_CHANGED, first.output

        second = runner.invoke(app, args)
        assert second.exit_code == 0, second.output

        conn = sqlite3.connect(str(sample_db))
        conn.execute("UPDATE users SET score = 2.5 WHERE id = 2")
        conn.commit()
        conn.close()

        third = runner.invoke(app, args)
        assert third.exit_code == EXIT_CHANGED, third.output

    def test_diff_output(self, sample_db, temp_dir):
        dest = temp_dir / "export.git"
        result = runner.invoke(app, ["export", str(sample_db), str(dest), "--diff", *AUTHOR_ARGS])

        assert result.exit_code == 0, result.output
        assert "diff --git a/table/users.json b/table/users.json" in result.output
        assert "--- /dev/null" in result.output
        assert '+[1,"alice",1.5]' in result.output
        assert '+[2,"bob",null]' in result.output

    def test_diff_shows_removed_and_context_lines(self, sample_db, temp_dir):
        dest = temp_dir / "export.git"
        args = ["export", str(sample_db), str(dest), "--diff", *AUTHOR_ARGS]
        runner.invoke(app, args)

        conn = sqlite3.connect(str(sample_db))
        conn.execute("UPDATE users SET name = 'robert' WHERE id = 2")
        conn.commit()
        conn.close()

        result = runner.invoke(app, args)
        assert result.exit_code == 0, result.output
        assert ' [1,"alice",1.5]' in result.output
        assert '-[2,"bob",null]' in result.output
        assert '+[2,"robert",null]' in result.output
        assert "@@" in result.output

    def test_author_from_config_file(self, sample_db, temp_dir):
        config = temp_dir / "export.toml"
        config.write_text(
            'author_name = "File Author"\n'
            'author_email = "file@example.com"\n'
            'message = "from file"\n'
        )
        dest = temp_dir / "export.git"
        result = runner.invoke(
            app, ["export", str(sample_db), str(dest), "--git", "--config", str(config)]
        )

        assert result.exit_code == 0, result.output
        head = pygit2.Repository(str(dest)).head.peel(pygit2.Commit)
        assert head.author.name == "File Author"
        assert head.message == "from file"

    def test_missing_database_reports_chain(self, temp_dir):
        result = runner.invoke(app, ["export", str(temp_dir / "missing.db"), str(temp_dir / "out")])

        assert result.exit_code == EXIT_ERROR
        assert "Error: could not export" in result.output
        assert "caused by: could not open database" in result.output

    def test_blob_column_reports_table(self, temp_dir, make_database):
        db = make_database(
            temp_dir / "blob.db",
            "CREATE TABLE files (data BLOB); INSERT INTO files VALUES (x'00');",
        )
        result = runner.invoke(app, ["export", str(db), str(temp_dir / "out")])

        assert result.exit_code == EXIT_ERROR
        assert "could not write row of table 'files'" in result.output
        assert "blobs not yet supported" in result.output

    def test_git_required_into_non_empty_directory(self, sample_db, temp_dir):
        out = temp_dir / "out"
        out.mkdir()
        (out / "notes.txt").write_text("keep me")
        result = runner.invoke(app, ["export", str(sample_db), str(out), "--git", *AUTHOR_ARGS])

        assert result.exit_code == EXIT_ERROR
        assert "not an empty directory" in result.output


class TestErrorChain:
    """Test error chain flattening."""

    def test_explicit_causes(self):
        try:
            try:
                raise ValueError("inner")
            except ValueError as e:
                raise RuntimeError("outer") from e
        except RuntimeError as e:
            assert error_chain(e) == ["outer", "inner"]

    def test_empty_message_uses_type_name(self):
        assert error_chain(KeyError()) == ["KeyError"]
