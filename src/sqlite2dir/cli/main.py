"""Main CLI entry point for sqlite2dir."""

from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from sqlite2dir.cli.utils import (
    EXIT_CHANGED,
    EXIT_ERROR,
    console,
    err_console,
    print_diff,
    print_error,
    setup_logging,
)
from sqlite2dir.config import Config
from sqlite2dir.core.exporter import BACKEND_DIR, run_export

app = typer.Typer(
    name="sqlite2dir",
    help="Export a SQLite database as a directory tree or a git commit",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """
    Export a SQLite database as a directory tree or a git commit
    """
    if ctx.invoked_subcommand is None:
        # No subcommand was invoked, show help
        print(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def export(
    database: Path = typer.Argument(..., help="SQLite database file to export"),
    destination: Path = typer.Argument(
        ..., help="Output directory, or bare git repository"
    ),
    git: bool = typer.Option(
        False, "--git", "-g", help="Export into a git repository, creating it if needed"
    ),
    diff: bool = typer.Option(
        False, "--diff", "-d", help="Print the changes made by the export (implies --git)"
    ),
    exit_code: bool = typer.Option(
        False,
        "--exit-code",
        help="Exit with status 1 if the export changed anything (implies --git)",
    ),
    message: Optional[str] = typer.Option(
        None, "--message", "-m", help="Commit message"
    ),
    author_name: Optional[str] = typer.Option(
        None, "--author-name", help="Commit author name (default: git user.name)"
    ),
    author_email: Optional[str] = typer.Option(
        None, "--author-email", help="Commit author email (default: git user.email)"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Config file (default: ./sqlite2dir.toml)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress"),
):
    """Export DATABASE into DESTINATION.

    An existing bare git repository at DESTINATION receives a new commit if
    the exported content changed. Otherwise the export is written as plain
    files, unless a git option asks for a repository to be created.

    Examples:
        sqlite2dir export app.db out/
        sqlite2dir export app.db app.git --git -m "nightly export"
        sqlite2dir export app.db app.git --diff --exit-code
    """
    setup_logging(verbose)
    # keep stdout clean for the diff
    status = err_console if diff else console

    try:
        config = (
            Config(config_file)
            .load()
            .merged(author_name=author_name, author_email=author_email, message=message)
        )
        result = run_export(
            database, destination, require_git=git or diff or exit_code, config=config
        )
    except Exception as e:
        print_error(e)
        raise typer.Exit(EXIT_ERROR)

    if result.backend == BACKEND_DIR:
        status.print(
            f"[green]✅ Exported {escape(str(database))} to directory "
            f"{escape(str(destination))}[/green]"
        )
        return

    commit = result.commit
    if commit.changed:
        status.print(
            f"[green]✅ Committed {str(commit.commit_id)[:10]} to "
            f"{escape(str(destination))} ({len(commit.diff)} files changed)[/green]"
        )
    else:
        status.print("[yellow]No changes, nothing committed[/yellow]")

    if diff:
        print_diff(commit.diff)

    if exit_code and commit.changed:
        raise typer.Exit(EXIT_CHANGED)


@app.command()
def version():
    """Show sqlite2dir version."""
    from sqlite2dir import __version__

    typer.echo(f"sqlite2dir version {__version__}")


if __name__ == "__main__":
    app()
