"""Configuration handling for git-worktree-keeper"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from git_worktree_keeper.constants import (
    APP_DIR_NAME,
    CONFIG_FIX_COMMAND,
    DEFAULT_COMMAND_TIMEOUT,
    DEFAULT_DEADLINE,
    DEFAULT_REMOTE,
    GITHUB_TOKEN_ENV,
    ROOT_DIR_ENV,
    ROOT_DIR_KEY,
)
from git_worktree_keeper.exceptions import ConfigurationError
from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class Config:
    """Configuration for git-worktree-keeper with validation."""

    # Folder holding the repository containers
    root_dir: Optional[str] = None
    remote_name: str = DEFAULT_REMOTE

    # Command budgets in seconds
    command_timeout: float = DEFAULT_COMMAND_TIMEOUT
    deadline: float = DEFAULT_DEADLINE

    # Number of repositories scanned in parallel (None = one per repository)
    workers: Optional[int] = None

    # GitHub integration (default branch lookup)
    github_token: Optional[str] = None

    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_remote_name()
        self._validate_timeouts()
        self._validate_workers()

    def _validate_remote_name(self):
        """Validate remote_name is not empty."""
        if not self.remote_name or not self.remote_name.strip():
            raise ValueError("remote_name cannot be empty")
        self.remote_name = self.remote_name.strip()

    def _validate_timeouts(self):
        """Validate command_timeout and deadline are positive."""
        if self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be positive, got {self.command_timeout}")
        if self.deadline <= 0:
            raise ValueError(f"deadline must be positive, got {self.deadline}")

    def _validate_workers(self):
        """Validate workers is positive when given."""
        if self.workers is not None and self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def require_root_dir(self) -> Path:
        """Return the absolute root directory or raise a ConfigurationError."""
        if not self.root_dir or not self.root_dir.strip():
            raise ConfigurationError(f"{ROOT_DIR_KEY} not configured", fix=CONFIG_FIX_COMMAND)
        return expand_path(self.root_dir)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "root_dir": self.root_dir,
            "remote_name": self.remote_name,
            "command_timeout": self.command_timeout,
            "deadline": self.deadline,
            "workers": self.workers,
            "github_token": "***" if self.github_token else None,
            "verbose": self.verbose,
            "debug": self.debug,
        }

    def get(self, key: str, default=None):
        """Get config value by key."""
        return getattr(self, key, default)

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Create Config from dictionary."""
        known_fields = {
            "root_dir",
            "remote_name",
            "command_timeout",
            "deadline",
            "workers",
            "github_token",
            "verbose",
            "debug",
        }

        filtered = {k: v for k, v in config_dict.items() if k in known_fields}
        return cls(**filtered)


def expand_path(path: Union[str, Path]) -> Path:
    """Expand ~ and resolve a path to an absolute one."""
    return Path(os.path.expanduser(str(path))).absolute()


class ConfigStore:
    """Small JSON key/value store backing the `config` command."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else Path.home() / APP_DIR_NAME / "config.json"

    def as_dict(self) -> dict:
        """Return all stored values. A missing file is an empty store."""
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read config file {self.path}: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {self.path} must contain a JSON object")
        return data

    def get_string(self, key: str) -> str:
        """Return a value as a string, or an empty string when unset."""
        value = self.as_dict().get(key)
        return "" if value is None else str(value)

    def set_value(self, key: str, value: str) -> None:
        """Store a value and write the file."""
        data = self.as_dict()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        logger.debug(f"Saved {key} to {self.path}")


def load_config(store: ConfigStore, overrides: Optional[dict] = None) -> Config:
    """Build a Config from the store, the environment and CLI overrides.

    Precedence for each value: CLI override, config file, environment.
    """
    values = {k: v for k, v in store.as_dict().items() if v not in (None, "")}

    if not values.get(ROOT_DIR_KEY) and os.environ.get(ROOT_DIR_ENV):
        values[ROOT_DIR_KEY] = os.environ[ROOT_DIR_ENV]
    if not values.get("github_token") and os.environ.get(GITHUB_TOKEN_ENV):
        values["github_token"] = os.environ[GITHUB_TOKEN_ENV]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    for key in ("command_timeout", "deadline"):
        if key in values:
            values[key] = float(values[key])
    if values.get("workers") is not None:
        values["workers"] = int(values["workers"])

    return Config.from_dict(values)
