"""GitHub API integration service"""

from typing import Optional, TYPE_CHECKING, Union
from urllib.parse import urlparse

from github import Auth, Github

from git_worktree_keeper.exceptions import GitHubAPIError
from git_worktree_keeper.logging_config import get_logger

if TYPE_CHECKING:
    from git_worktree_keeper.config import Config

logger = get_logger(__name__)


def parse_github_repo(remote_url: str) -> Optional[str]:
    """Return "org/repo" for a GitHub remote URL, or None for other hosts."""
    if not remote_url or "github.com" not in remote_url:
        return None

    if remote_url.startswith("git@"):
        # Handle SSH URL format (git@github.com:org/repo.git)
        path = remote_url.split("github.com:", 1)[1]
    else:
        # Handle HTTPS URL format (https://github.com/org/repo.git)
        path = urlparse(remote_url).path.strip("/")

    if path.endswith(".git"):
        path = path[:-4]

    return path or None


class GitHubService:
    """Looks up repository metadata on GitHub."""

    def __init__(self, config: Union["Config", dict]):
        self.github_token = config.get("github_token")
        self.timeout = int(config.get("command_timeout", 30))

    @property
    def enabled(self) -> bool:
        return bool(self.github_token)

    def get_default_branch(self, remote_url: str) -> str:
        """Return the default branch of the GitHub repository behind remote_url.

        Raises:
            GitHubAPIError: if the remote is not on GitHub, no token is set,
                or the API call fails
        """
        github_repo = parse_github_repo(remote_url)
        if not github_repo:
            raise GitHubAPIError("get_default_branch", f"not a GitHub remote: {remote_url}")
        if not self.github_token:
            raise GitHubAPIError("get_default_branch", "no GitHub token configured")

        github = Github(auth=Auth.Token(self.github_token), timeout=self.timeout)
        try:
            branch = github.get_repo(github_repo).default_branch
        except Exception as e:
            logger.debug(f"[GitHub] Error getting default branch for {github_repo}: {e}")
            raise GitHubAPIError("get_default_branch", str(e)) from e
        finally:
            try:
                github.close()
            except Exception as e:
                logger.debug(f"[GitHub] Error closing GitHub API connection: {e}")

        if not branch:
            raise GitHubAPIError("get_default_branch", "could not determine default branch")

        logger.debug(f"[GitHub] Default branch of {github_repo} is {branch}")
        return branch
