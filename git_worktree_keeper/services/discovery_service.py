"""Discovery of repository containers under the configured root directory."""

import os
from pathlib import Path
from typing import List, Optional, Union

from git_worktree_keeper.constants import CANONICAL_CHECKOUT, PROG_NAME, ROOT_DIR_KEY
from git_worktree_keeper.exceptions import ConfigurationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import RepositoryContainer

logger = get_logger(__name__)


class RepositoryDiscovery:
    """Finds the repository containers adopted under a root directory.

    A subdirectory is a container iff it holds a canonical checkout, that is
    `<root>/<name>/main/.git` exists.
    """

    def __init__(self, root_dir: Union[str, Path]):
        self.root_dir = Path(root_dir)

    def discover(self) -> List[RepositoryContainer]:
        """Return the containers under the root directory, sorted by name.

        Raises:
            ConfigurationError: if the root directory is missing or unreadable
        """
        try:
            entries = sorted(os.scandir(self.root_dir), key=lambda e: e.name)
        except FileNotFoundError:
            raise ConfigurationError(
                f"Git folder does not exist: {self.root_dir}",
                fix=f"{PROG_NAME} config set {ROOT_DIR_KEY} <path>",
            )
        except OSError as e:
            raise ConfigurationError(
                f"Error reading git folder {self.root_dir}: {e}",
                fix=f"{PROG_NAME} config set {ROOT_DIR_KEY} <path>",
            )

        containers = []
        for entry in entries:
            try:
                if not entry.is_dir():
                    continue
            except OSError:
                continue

            git_marker = os.path.join(entry.path, CANONICAL_CHECKOUT, ".git")
            if os.path.exists(git_marker):
                containers.append(RepositoryContainer.from_path(entry.path))
            else:
                logger.debug(f"Skipping {entry.path}: no {CANONICAL_CHECKOUT}/.git")

        logger.debug(f"Discovered {len(containers)} repositories in {self.root_dir}")
        return containers

    @staticmethod
    def filter(
        containers: List[RepositoryContainer], repo_filter: Optional[str]
    ) -> List[RepositoryContainer]:
        """Keep only the container named repo_filter (all when no filter)."""
        if not repo_filter:
            return list(containers)
        return [c for c in containers if c.name == repo_filter]
