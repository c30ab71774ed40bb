"""Tests for worktree listing, status and removal"""
import pytest

from conftest import make_container, porcelain_list
from git_worktree_keeper.exceptions import GitOperationError
from git_worktree_keeper.services.git.worktrees import WorktreeService, parse_worktree_list


class TestParseWorktreeList:
    """Test parsing of `git worktree list --porcelain` output."""

    def test_main_and_branches(self, git_root):
        container = make_container(git_root, "svc", ["feat-a", "feat-b"])
        output = porcelain_list(container, {"feat-a": "feat-a", "feat-b": "fix/b"})

        worktrees = parse_worktree_list(output)

        assert len(worktrees) == 3
        assert worktrees[0].is_main
        assert worktrees[0].path == container.main_path
        assert worktrees[0].branch_name == "main"
        assert [wt.branch_name for wt in worktrees[1:]] == ["feat-a", "fix/b"]
        assert not any(wt.is_main for wt in worktrees[1:])
        assert worktrees[1].commit_sha == "b" * 40

    def test_detached_head(self):
        output = (
            "worktree /git/svc/main\nHEAD abc\nbranch refs/heads/main\n\n"
            "worktree /git/svc/probe\nHEAD def\ndetached\n"
        )

        worktrees = parse_worktree_list(output)

        assert worktrees[1].path == "/git/svc/probe"
        assert worktrees[1].branch_name == ""

    def test_no_trailing_blank_line(self):
        output = "worktree /git/svc/main\nHEAD abc\nbranch refs/heads/main"
        worktrees = parse_worktree_list(output)
        assert len(worktrees) == 1

    def test_orphaned_directory(self, git_root):
        container = make_container(git_root, "svc")
        output = porcelain_list(container, {"gone": "gone"})

        worktrees = parse_worktree_list(output)

        assert not worktrees[0].is_orphaned
        assert worktrees[1].is_orphaned

    def test_bare_and_locked_lines_are_ignored(self):
        output = (
            "worktree /git/svc/main\nHEAD abc\nbranch refs/heads/main\n\n"
            "worktree /git/svc/feat\nHEAD def\nbranch refs/heads/feat\nlocked reason\n\n"
        )
        worktrees = parse_worktree_list(output)
        assert [wt.branch_name for wt in worktrees] == ["main", "feat"]

    def test_empty_output(self):
        assert parse_worktree_list("") == []


class TestWorktreeService:
    """Test worktree commands against a scripted runner."""

    def test_list_worktrees(self, fake_runner, git_root):
        container = make_container(git_root, "svc", ["feat"])
        fake_runner.on("worktree", "list", cwd=container.main_path,
                       stdout=porcelain_list(container, {"feat": "feat"}))

        worktrees = WorktreeService(fake_runner).list_worktrees(container.main_path)

        assert [wt.branch_name for wt in worktrees] == ["main", "feat"]

    def test_list_worktrees_failure_raises(self, fake_runner):
        fake_runner.on("worktree", "list", stderr="fatal: not a git repository", exit_code=128)

        with pytest.raises(GitOperationError) as exc_info:
            WorktreeService(fake_runner).list_worktrees("/git/svc/main")

        assert "not a git repository" in str(exc_info.value)

    def test_get_status_clean_and_dirty(self, fake_runner):
        fake_runner.on("status", "--porcelain", cwd="/clean", stdout="")
        fake_runner.on("status", "--porcelain", cwd="/dirty", stdout=" M file.txt")
        service = WorktreeService(fake_runner)

        assert service.get_status("/clean") == ""
        assert service.get_status("/dirty") == " M file.txt"

    def test_get_status_failure_raises(self, fake_runner):
        with pytest.raises(GitOperationError):
            WorktreeService(fake_runner).get_status("/unscripted")

    def test_remove_worktree_runs_from_main_without_force(self, fake_runner):
        fake_runner.on("worktree", "remove")

        WorktreeService(fake_runner).remove_worktree("/git/svc/main", "/git/svc/feat")

        assert fake_runner.calls == [("/git/svc/main", ("worktree", "remove", "/git/svc/feat"))]

    def test_remove_worktree_failure(self, fake_runner):
        fake_runner.on("worktree", "remove", stderr="fatal: '/git/svc/feat' is locked", exit_code=128)

        with pytest.raises(GitOperationError) as exc_info:
            WorktreeService(fake_runner).remove_worktree("/git/svc/main", "/git/svc/feat")

        assert exc_info.value.operation == "worktree remove"
        assert "is locked" in exc_info.value.message

    def test_prune_failure(self, fake_runner):
        fake_runner.on("worktree", "prune", stderr="boom", exit_code=1)

        with pytest.raises(GitOperationError):
            WorktreeService(fake_runner).prune_worktrees("/git/svc/main")
