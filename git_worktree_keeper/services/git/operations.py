"""Branch and remote queries run against a repository's canonical checkout."""

from typing import Optional

from git_worktree_keeper.constants import DEFAULT_REMOTE
from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.services.git.runner import CommandRunner

logger = get_logger(__name__)


class GitOperations:
    """Service for the git queries the scanner needs."""

    def __init__(self, runner: CommandRunner, remote_name: str = DEFAULT_REMOTE):
        self.runner = runner
        self.remote_name = remote_name

    def get_remote_url(self, repo_path: str) -> Optional[str]:
        """URL of the configured remote, or None if there is no such remote."""
        result = self.runner.run(repo_path, "remote", "get-url", self.remote_name)
        if not result.ok or not result.stdout:
            return None
        return result.stdout

    def get_remote_head_branch(self, repo_path: str) -> str:
        """Default branch recorded locally in refs/remotes/<remote>/HEAD.

        Raises:
            GitOperationError: if the symbolic ref is not set
        """
        ref = self.runner.run_checked(
            repo_path, "symbolic-ref", "--short", f"refs/remotes/{self.remote_name}/HEAD"
        )
        prefix = f"{self.remote_name}/"
        branch = ref[len(prefix):] if ref.startswith(prefix) else ref
        if not branch:
            raise GitOperationError("symbolic-ref", repo_path, "remote HEAD is empty")
        return branch

    def fetch_prune(self, repo_path: str) -> None:
        """Refresh remote-tracking refs, dropping ones deleted on the remote.

        Raises:
            GitOperationError: if the fetch fails
        """
        self.runner.run_checked(repo_path, "fetch", "--prune", self.remote_name)
        logger.debug(f"Fetched and pruned {self.remote_name} in {repo_path}")

    def get_merge_target(self, repo_path: str, default_branch: str) -> str:
        """Ref to test merges against: <remote>/<default> if fetched, else the local branch.

        The remote-tracking ref is what `fetch --prune` refreshes; the local
        default branch may lag behind it until someone pulls.
        """
        remote_ref = f"{self.remote_name}/{default_branch}"
        result = self.runner.run(
            repo_path, "rev-parse", "--verify", "--quiet", f"refs/remotes/{remote_ref}"
        )
        if result.ok:
            return remote_ref
        logger.debug(f"No {remote_ref} in {repo_path}, using local {default_branch}")
        return default_branch

    def get_merged_branches(self, repo_path: str, target_branch: str) -> set[str]:
        """Local branches whose tips are reachable from target_branch.

        Raises:
            GitOperationError: if the merged list cannot be computed
        """
        output = self.runner.run_checked(
            repo_path, "branch", "--merged", target_branch, "--format=%(refname:short)"
        )
        merged = {line.strip() for line in output.split("\n") if line.strip()}
        logger.debug(f"{len(merged)} branches merged into {target_branch} in {repo_path}")
        return merged

    def remote_branch_exists(self, repo_path: str, branch_name: str) -> bool:
        """Ask the remote whether refs/heads/<branch_name> still exists.

        Raises:
            GitOperationError: if the remote cannot be queried
        """
        output = self.runner.run_checked(
            repo_path, "ls-remote", "--heads", self.remote_name, f"refs/heads/{branch_name}"
        )
        return bool(output.strip())
