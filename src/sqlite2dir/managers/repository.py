"""Git repository management for sqlite2dir exports."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import pygit2

from sqlite2dir.sinks.git import TreeSink

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when a repository cannot be opened, created or updated."""

    pass


class RepositoryNotFoundError(RepositoryError):
    """Raised when there is no bare repository at the destination.

    This is the signal to export into a plain directory instead, unless git
    output was explicitly requested.
    """

    def __init__(self, path: Path):
        super().__init__(f"no git repository at {path}")
        self.path = path


@dataclass
class CommitResult:
    """Outcome of committing an export tree.

    Attributes:
        diff: Changes between the previous head tree and the new tree
        tree_id: Id of the exported tree
        commit_id: Id of the new commit, None when nothing changed
        parent_id: Id of the previous head commit, None on an unborn branch
    """

    diff: pygit2.Diff
    tree_id: pygit2.Oid
    commit_id: Optional[pygit2.Oid] = None
    parent_id: Optional[pygit2.Oid] = None

    @property
    def changed(self) -> bool:
        """Whether a commit was created."""
        return self.commit_id is not None


def is_bare_repository(path: Path) -> bool:
    """Check whether ``path`` has the layout of a bare git repository."""
    path = Path(path)
    return (path / "HEAD").is_file() and (path / "objects").is_dir()


class GitRepository:
    """A bare repository that exports are committed to."""

    def __init__(self, repo: pygit2.Repository, path: Path):
        """Wrap an opened repository.

        Args:
            repo: The pygit2 repository
            path: Path the repository was opened from
        """
        self.repo = repo
        self.path = Path(path)

    @classmethod
    def open(cls, path: Path) -> "GitRepository":
        """Open an existing bare repository.

        Raises:
            RepositoryNotFoundError: If ``path`` does not exist or is not a
                bare repository
            RepositoryError: If the repository exists but cannot be opened
        """
        path = Path(path)
        if not is_bare_repository(path):
            raise RepositoryNotFoundError(path)
        try:
            repo = pygit2.Repository(str(path))
        except pygit2.GitError as e:
            raise RepositoryError(f"could not open repository at {path}: {e}") from e
        if not repo.is_bare:
            raise RepositoryError(f"repository at {path} is not bare")
        return cls(repo, path)

    @classmethod
    def create(cls, path: Path) -> "GitRepository":
        """Create a new bare repository at ``path``.

        Raises:
            RepositoryError: If ``path`` is a file or a non-empty directory, or
                the repository cannot be initialised
        """
        path = Path(path)
        if path.exists() and (not path.is_dir() or any(path.iterdir())):
            raise RepositoryError(
                f"cannot create repository at {path}: not an empty directory"
            )
        try:
            path.mkdir(parents=True, exist_ok=True)
            repo = pygit2.init_repository(str(path), bare=True)
        except (OSError, pygit2.GitError) as e:
            raise RepositoryError(f"could not create repository at {path}: {e}") from e
        logger.info(f"Created bare repository at {path}")
        return cls(repo, path)

    @classmethod
    def open_or_create(cls, path: Path, create: bool = False) -> Optional["GitRepository"]:
        """Open the repository at ``path``, creating it when asked to.

        Args:
            path: Destination path
            create: Create a bare repository if none exists

        Returns:
            The repository, or None if there is none and ``create`` is False
        """
        try:
            return cls.open(path)
        except RepositoryNotFoundError:
            if not create:
                logger.debug(f"No repository at {path}, not creating one")
                return None
        return cls.create(path)

    def config(self) -> pygit2.Config:
        """Get the repository's config, layered over global and system config."""
        return self.repo.config

    def head_commit(self) -> Optional[pygit2.Commit]:
        """Get the commit the current branch points to.

        Returns:
            The head commit, or None if the branch is unborn
        """
        try:
            if self.repo.head_is_unborn:
                return None
            return self.repo.head.peel(pygit2.Commit)
        except pygit2.GitError as e:
            raise RepositoryError(f"could not resolve HEAD: {e}") from e

    def tree_sink(self) -> TreeSink:
        """Create a sink that stages an export in this repository."""
        return TreeSink(self.repo)

    def diff_trees(
        self, old_tree: Optional[pygit2.Tree], new_tree: pygit2.Tree
    ) -> pygit2.Diff:
        """Diff two trees, treating a missing old tree as empty."""
        if old_tree is None:
            # swap diffs from the empty tree to new_tree
            return new_tree.diff_to_tree(swap=True)
        return old_tree.diff_to_tree(new_tree)

    def commit(
        self, message: str, signature: pygit2.Signature, sink: TreeSink
    ) -> CommitResult:
        """Commit the tree written by ``sink`` if it differs from HEAD.

        A commit is only created when the diff against the previous head tree
        is non-empty. It has the previous head as its only parent, or no
        parent on an unborn branch, and the branch is advanced to it.

        Args:
            message: Commit message
            signature: Author and committer identity
            sink: A closed TreeSink of this repository

        Returns:
            CommitResult with the diff and, if created, the commit id

        Raises:
            RepositoryError: If the sink has not been closed or git fails
        """
        if not sink.closed or sink.tree_id is None:
            raise RepositoryError("export tree has not been written yet")

        parent = self.head_commit()
        try:
            new_tree = self.repo[sink.tree_id].peel(pygit2.Tree)
            old_tree = parent.tree if parent is not None else None
            diff = self.diff_trees(old_tree, new_tree)
        except (pygit2.GitError, KeyError) as e:
            raise RepositoryError(f"could not diff export tree: {e}") from e

        parent_id = parent.id if parent is not None else None
        same_tree = old_tree is not None and old_tree.id == new_tree.id
        if same_tree or len(diff) == 0:
            logger.info("Export unchanged, not committing")
            return CommitResult(diff=diff, tree_id=new_tree.id, parent_id=parent_id)

        parents = [parent_id] if parent_id is not None else []
        try:
            commit_id = self.repo.create_commit(
                "HEAD", signature, signature, message, new_tree.id, parents
            )
        except pygit2.GitError as e:
            raise RepositoryError(f"could not create commit: {e}") from e

        logger.info(f"Committed {len(diff)} changed files as {commit_id}")
        return CommitResult(
            diff=diff, tree_id=new_tree.id, commit_id=commit_id, parent_id=parent_id
        )
