"""Configuration management for Pile workspaces."""

import os
from pathlib import Path
from typing import Optional, Dict, Any
import toml
from pydantic import BaseModel, Field, ConfigDict, ValidationError

from pile.core.errors import ConfigError

DEFAULT_DOCUMENTATION_URL = "https://github.com/adelhult/pile"

# Environment variables that override values from config.toml
ENV_OVERRIDES = {
    "PILE_DATABASE_FILE": "database_file",
    "PILE_GIT": "git_executable",
}


class PileConfig(BaseModel):
    """Configuration for a workspace stored in .pile/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    database_file: str = Field(
        default="pile.db", description="Catalog file, relative to the workspace"
    )
    git_executable: str = Field(
        default="git", description="Program used to clone into new projects"
    )
    readme: bool = Field(
        default=False, description="Write a README.md for every new project"
    )
    documentation_url: str = Field(
        default=DEFAULT_DOCUMENTATION_URL, description="URL opened by 'pile doc'"
    )


class Config:
    """Manages Pile workspace configuration."""

    def __init__(self, workspace: Optional[Path] = None):
        """Initialize config manager.

        Args:
            workspace: Path to the workspace root. If None, uses PILE_WORKSPACE env var or current directory.
        """
        if workspace is None:
            env_dir = os.environ.get("PILE_WORKSPACE")
            if env_dir:
                workspace = Path(env_dir)

        self.workspace = Path(workspace) if workspace else Path.cwd()
        self.config_dir = self.workspace / ".pile"
        self.config_path = self.config_dir / "config.toml"
        self._config: Optional[PileConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    @property
    def database_path(self) -> Path:
        """Location of the catalog file for this workspace."""
        return self.workspace / self.load().database_file

    def load(self) -> PileConfig:
        """Load configuration from disk, with environment variable overrides.

        A workspace without a config file gets the defaults.

        Raises:
            ConfigError: If the file is not valid TOML or holds a bad value
        """
        data: Dict[str, Any] = {}
        if self.exists:
            try:
                with open(self.config_path, "r") as f:
                    data = toml.load(f)
            except toml.TomlDecodeError as e:
                raise ConfigError(f"Cannot parse {self.config_path}: {e}") from e

        self._apply_env_overrides(data)

        try:
            self._config = PileConfig(**data)
        except ValidationError as e:
            fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
            raise ConfigError(f"Invalid value for {fields} in {self.config_path}") from e
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        for env_var, key in ENV_OVERRIDES.items():
            if value := os.environ.get(env_var):
                data[key] = value

    def save(self, config: Optional[PileConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            toml.dump(self._config.model_dump(), f)


def active_env_overrides() -> Dict[str, str]:
    """Return the Pile environment variables that are currently set."""
    names = ["PILE_WORKSPACE", *ENV_OVERRIDES]
    return {name: os.environ[name] for name in names if os.environ.get(name)}
