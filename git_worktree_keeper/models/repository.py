"""Repository container and scan report models."""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from git_worktree_keeper.constants import CANONICAL_CHECKOUT
from git_worktree_keeper.models.worktree import WorktreeRecord


@dataclass(frozen=True)
class RepositoryContainer:
    """A directory holding the canonical `main` checkout plus its worktrees."""

    path: str
    name: str

    @classmethod
    def from_path(cls, path: str) -> "RepositoryContainer":
        path = os.path.abspath(path)
        return cls(path=path, name=os.path.basename(path))

    @property
    def main_path(self) -> str:
        """Path of the canonical checkout."""
        return os.path.join(self.path, CANONICAL_CHECKOUT)


@dataclass
class RepositoryScanResult:
    """Outcome of scanning one repository container."""

    container: RepositoryContainer
    worktrees: List[WorktreeRecord] = field(default_factory=list)
    error: Optional[Exception] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def repo_name(self) -> str:
        return self.container.name

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class CleanupReport:
    """Scan results for every repository, in discovery order."""

    results: List[RepositoryScanResult] = field(default_factory=list)

    def all_worktrees(self) -> List[WorktreeRecord]:
        return [wt for result in self.results if result.ok for wt in result.worktrees]

    def errors(self) -> List[RepositoryScanResult]:
        return [result for result in self.results if not result.ok]

    @property
    def has_errors(self) -> bool:
        return any(not result.ok for result in self.results)

    @property
    def all_failed(self) -> bool:
        """True when there were repositories to scan and every one failed."""
        return bool(self.results) and all(not result.ok for result in self.results)
