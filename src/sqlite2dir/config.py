"""Configuration management for sqlite2dir exports."""

import os
from pathlib import Path
from typing import Optional, Dict, Any

import toml
from pydantic import BaseModel, Field, ConfigDict, ValidationError

CONFIG_FILE_NAME = "sqlite2dir.toml"
DEFAULT_MESSAGE = "sqlite2dir export"

# Environment variables and the config fields they override
ENV_OVERRIDES = {
    "SQLITE2DIR_AUTHOR_NAME": "author_name",
    "SQLITE2DIR_AUTHOR_EMAIL": "author_email",
    "SQLITE2DIR_MESSAGE": "message",
}


class ConfigurationError(Exception):
    """Raised for missing or invalid user configuration."""

    pass


class ExportConfig(BaseModel):
    """Settings for git exports, stored in sqlite2dir.toml."""

    model_config = ConfigDict(extra="forbid")

    author_name: Optional[str] = Field(
        default=None, description="Commit author name (falls back to git user.name)"
    )
    author_email: Optional[str] = Field(
        default=None, description="Commit author email (falls back to git user.email)"
    )
    message: str = Field(default=DEFAULT_MESSAGE, description="Commit message")

    def merged(self, **overrides: Optional[str]) -> "ExportConfig":
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return self.model_copy(update=values)


class Config:
    """Locates and loads the export configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager.

        Args:
            config_path: Path to the config file. If None, uses the
                SQLITE2DIR_CONFIG env var or sqlite2dir.toml in the current
                directory, and a missing file is not an error.
        """
        self.explicit = config_path is not None
        if config_path is None:
            env_path = os.environ.get("SQLITE2DIR_CONFIG")
            if env_path:
                config_path = Path(env_path)
                self.explicit = True

        self.config_path = Path(config_path) if config_path else Path.cwd() / CONFIG_FILE_NAME
        self._config: Optional[ExportConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.is_file()

    def load(self) -> ExportConfig:
        """Load configuration from disk, with environment variable overrides.

        Raises:
            ConfigurationError: If an explicitly requested file is missing, or
                the file cannot be parsed
        """
        data: Dict[str, Any] = {}
        if self.exists:
            try:
                with open(self.config_path, "r") as f:
                    data = toml.load(f)
            except (OSError, toml.TomlDecodeError) as e:
                raise ConfigurationError(
                    f"could not read config file {self.config_path}: {e}"
                ) from e
        elif self.explicit:
            raise ConfigurationError(f"config file not found at {self.config_path}")

        self._apply_env_overrides(data)

        try:
            self._config = ExportConfig(**data)
        except ValidationError as e:
            raise ConfigurationError(
                f"invalid config file {self.config_path}: {e}"
            ) from e
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        for env_name, field in ENV_OVERRIDES.items():
            if value := os.environ.get(env_name):
                data[field] = value
