"""Pytest fixtures for git-worktree-keeper tests"""
import io
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

import git
import pytest
from rich.console import Console

from git_worktree_keeper.models.repository import RepositoryContainer
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git.runner import CommandResult, CommandRunner


@dataclass
class Rule:
    args: tuple
    cwd: Optional[str]
    stdout: Union[str, Callable[[], str]]
    stderr: str
    exit_code: int
    raises: Optional[Exception]


class FakeRunner(CommandRunner):
    """Command runner returning scripted results instead of running git.

    Rules match on an argument prefix and, optionally, the working directory.
    The most recently added matching rule wins. Unscripted commands fail with
    exit code 1, so a test never gets a convenient answer by accident.
    """

    def __init__(self):
        super().__init__(timeout=5)
        self.rules: list[Rule] = []
        self.calls: list[tuple] = []

    def on(self, *args, cwd=None, stdout="", stderr="", exit_code=0, raises=None):
        self.rules.append(Rule(tuple(args), str(cwd) if cwd else None, stdout, stderr, exit_code, raises))
        return self

    def run(self, working_dir, *args):
        self.calls.append((working_dir, tuple(args)))
        for rule in reversed(self.rules):
            if tuple(args[: len(rule.args)]) != rule.args:
                continue
            if rule.cwd is not None and rule.cwd != str(working_dir):
                continue
            if rule.raises is not None:
                raise rule.raises
            stdout = rule.stdout() if callable(rule.stdout) else rule.stdout
            return CommandResult(tuple(args), stdout, rule.stderr, rule.exit_code)
        return CommandResult(tuple(args), "", f"unscripted command: git {' '.join(args)}", 1)

    def called(self, *args, cwd=None) -> list:
        """Calls whose arguments start with args (and ran in cwd, if given)."""
        return [
            call for call in self.calls
            if call[1][: len(args)] == tuple(args) and (cwd is None or str(call[0]) == str(cwd))
        ]


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def git_root(tmp_path):
    """Root folder holding repository containers."""
    root = tmp_path / "git"
    root.mkdir()
    return root


def make_container(root: Path, name: str, worktrees=()) -> RepositoryContainer:
    """Create <root>/<name>/main/.git plus a directory for each worktree name."""
    repo_path = root / name
    (repo_path / "main" / ".git").mkdir(parents=True)
    for wt in worktrees:
        wt_path = repo_path / wt
        wt_path.mkdir()
        (wt_path / ".git").write_text(f"gitdir: {repo_path}/main/.git/worktrees/{wt}\n")
        (wt_path / "README.md").write_text("x" * 100)
    return RepositoryContainer.from_path(str(repo_path))


def porcelain_list(container: RepositoryContainer, branches: dict) -> str:
    """`git worktree list --porcelain` output for main plus the given worktrees."""
    blocks = [f"worktree {container.main_path}\nHEAD {'a' * 40}\nbranch refs/heads/main\n"]
    for name, branch in branches.items():
        head = f"worktree {os.path.join(container.path, name)}\nHEAD {'b' * 40}\n"
        if branch:
            head += f"branch refs/heads/{branch}\n"
        else:
            head += "detached\n"
        blocks.append(head)
    return "\n".join(blocks)


def script_repository(
    runner: FakeRunner,
    container: RepositoryContainer,
    worktrees: dict,
    default_branch: str = "main",
    merged=(),
    fetch_ok: bool = True,
):
    """Script every command a scan of container issues.

    worktrees maps directory name to a dict with keys:
        branch (str), status (porcelain output), remote (bool, branch still on remote)

    Merges are checked against origin/<default_branch>, which is scripted as fetched.
    """
    main = container.main_path
    runner.on("remote", "get-url", cwd=main, stdout="git@example.com:org/repo.git")
    runner.on("symbolic-ref", cwd=main, stdout=f"origin/{default_branch}")
    if fetch_ok:
        runner.on("fetch", cwd=main)
    else:
        runner.on("fetch", cwd=main, stderr="fatal: unable to access remote", exit_code=128)

    runner.on(
        "worktree", "list", cwd=main,
        stdout=porcelain_list(container, {name: wt.get("branch", name) for name, wt in worktrees.items()}),
    )
    # Like git, the merged list always contains the target branch itself
    runner.on("rev-parse", "--verify", cwd=main, stdout="d" * 40)
    runner.on(
        "branch", "--merged", f"origin/{default_branch}", cwd=main,
        stdout="\n".join([default_branch, *merged]),
    )
    runner.on("worktree", "remove", cwd=main)
    runner.on("worktree", "prune", cwd=main)

    for name, wt in worktrees.items():
        path = os.path.join(container.path, name)
        runner.on("status", "--porcelain", cwd=path, stdout=wt.get("status", ""))
        branch = wt.get("branch", name)
        remote_out = f"{'c' * 40}\trefs/heads/{branch}" if wt.get("remote", True) else ""
        runner.on("ls-remote", cwd=path, stdout=remote_out)


def make_console() -> Console:
    return Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)


def console_text(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture
def display():
    """DisplayService writing into string buffers."""
    return DisplayService(out=make_console(), err=make_console())


@pytest.fixture
def mock_config(git_root):
    """Configuration dictionary pointing at the temporary root."""
    return {
        "root_dir": str(git_root),
        "remote_name": "origin",
        "command_timeout": 30,
        "deadline": 300,
        "workers": None,
        "github_token": None,
        "verbose": False,
        "debug": False,
    }


def init_repo(path: Path) -> git.Repo:
    """Create a real repository with one commit on `main`."""
    path.mkdir(parents=True)
    repo = git.Repo.init(path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    (path / "README.md").write_text("# Test Repository\n")
    repo.index.add(["README.md"])
    repo.index.commit("Initial commit")
    repo.git.branch("-M", "main")
    return repo


@pytest.fixture
def real_container(git_root):
    """A real container: <root>/svc/main with a merged worktree feat-x and an active feat-z."""
    main_path = git_root / "svc" / "main"
    repo = init_repo(main_path)

    # feat-x: committed and merged back into main
    repo.git.worktree("add", "-b", "feat-x", str(git_root / "svc" / "feat-x"))
    feat_x = git.Repo(git_root / "svc" / "feat-x")
    (git_root / "svc" / "feat-x" / "x.txt").write_text("feature x\n")
    feat_x.index.add(["x.txt"])
    feat_x.index.commit("Add feature x")
    repo.git.merge("feat-x", "--no-ff", "-m", "Merge feat-x")

    # feat-z: has a commit that main does not
    repo.git.worktree("add", "-b", "feat-z", str(git_root / "svc" / "feat-z"))
    feat_z = git.Repo(git_root / "svc" / "feat-z")
    (git_root / "svc" / "feat-z" / "z.txt").write_text("feature z\n")
    feat_z.index.add(["z.txt"])
    feat_z.index.commit("Add feature z")

    yield repo

    feat_x.close()
    feat_z.close()
    repo.close()
