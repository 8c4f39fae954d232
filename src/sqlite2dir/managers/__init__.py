"""sqlite2dir managers."""

from sqlite2dir.managers.repository import (
    GitRepository,
    CommitResult,
    RepositoryError,
    RepositoryNotFoundError,
    is_bare_repository,
)

__all__ = [
    "GitRepository",
    "CommitResult",
    "RepositoryError",
    "RepositoryNotFoundError",
    "is_bare_repository",
]
