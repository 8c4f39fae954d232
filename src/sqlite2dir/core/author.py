"""Commit author resolution."""

import logging
from typing import Callable, Optional

import pygit2

from sqlite2dir.config import ConfigurationError

logger = logging.getLogger(__name__)


class AuthorResolver:
    """Builds the commit signature from explicit settings and git config.

    The git config is only consulted when the name or email was not given,
    and is loaded at most once.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        email: Optional[str] = None,
        config_loader: Optional[Callable[[], pygit2.Config]] = None,
    ):
        """Initialize the resolver.

        Args:
            name: Author name, if configured
            email: Author email, if configured
            config_loader: Returns the git config to fall back on
        """
        self.name = name
        self.email = email
        self.config_loader = config_loader
        self._git_config: Optional[pygit2.Config] = None
        self._git_config_loaded = False

    @property
    def git_config(self) -> Optional[pygit2.Config]:
        """Git config, loaded on first access."""
        if not self._git_config_loaded:
            self._git_config_loaded = True
            if self.config_loader is not None:
                try:
                    self._git_config = self.config_loader()
                except pygit2.GitError as e:
                    raise ConfigurationError(f"could not read git config: {e}") from e
        return self._git_config

    def _lookup(self, key: str) -> Optional[str]:
        config = self.git_config
        if config is None:
            return None
        try:
            value = config[key]
        except KeyError:
            return None
        logger.debug(f"Using {key} from git config")
        return value

    def resolve(self) -> pygit2.Signature:
        """Get the signature to author and commit with.

        Raises:
            ConfigurationError: If no name or email can be found
        """
        name = self.name or self._lookup("user.name")
        if not name:
            raise ConfigurationError(
                "no author name configured: pass --author-name or set user.name"
            )
        email = self.email or self._lookup("user.email")
        if not email:
            raise ConfigurationError(
                "no author email configured: pass --author-email or set user.email"
            )
        return pygit2.Signature(name, email)
