"""Utility functions for CLI commands."""

import logging
from typing import Iterator, List, Optional, Tuple

import pygit2
from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)

# Exit statuses
EXIT_OK = 0
EXIT_CHANGED = 1
EXIT_ERROR = 2

# Styles per diff line origin
DIFF_STYLES = {
    "F": "bold",
    "H": "cyan",
    "+": "green",
    "-": "red",
    " ": None,
    "\\": "dim",
}


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def error_chain(error: BaseException) -> List[str]:
    """Get the messages of ``error`` and each of its causes, outermost first."""
    messages = []
    seen = set()
    current: Optional[BaseException] = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        messages.append(str(current) or type(current).__name__)
        current = current.__cause__ or (
            None if current.__suppress_context__ else current.__context__
        )
    return messages


def print_error(error: BaseException) -> None:
    """Print an error as one line followed by its causes."""
    first, *causes = error_chain(error)
    err_console.print(
        f"❌ Error: {first}", style="red", markup=False, highlight=False, soft_wrap=True
    )
    for cause in causes:
        err_console.print(
            f"  caused by: {cause}", markup=False, highlight=False, soft_wrap=True
        )


def iter_diff_lines(diff: pygit2.Diff) -> Iterator[Tuple[str, str]]:
    """Render a diff as ``(origin, line)`` pairs in unified format.

    Origins are ``F`` for file headers, ``H`` for hunk headers, ``\\`` for
    the missing-newline marker, and otherwise the line's own marker: space
    for context, ``+`` for additions and ``-`` for deletions.
    """
    for patch in diff:
        delta = patch.delta
        old_path = delta.old_file.path
        new_path = delta.new_file.path
        status = delta.status_char()
        yield "F", f"diff --git a/{old_path} b/{new_path}\n"
        yield "F", "--- " + ("/dev/null" if status == "A" else f"a/{old_path}") + "\n"
        yield "F", "+++ " + ("/dev/null" if status == "D" else f"b/{new_path}") + "\n"
        for hunk in patch.hunks:
            header = hunk.header
            yield "H", header if header.endswith("\n") else header + "\n"
            for line in hunk.lines:
                if line.origin in (" ", "+", "-"):
                    content = line.content
                    if not content.endswith("\n"):
                        content += "\n"
                    yield line.origin, line.origin + content
                else:
                    yield "\\", "\\ No newline at end of file\n"


def print_diff(diff: pygit2.Diff, target: Optional[Console] = None) -> None:
    """Print a diff, colored when the console supports it."""
    target = target or console
    for origin, line in iter_diff_lines(diff):
        target.print(
            line,
            style=DIFF_STYLES.get(origin),
            end="",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
