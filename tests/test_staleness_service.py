"""Tests for StalenessClassifier"""
import itertools

import pytest

from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.staleness_service import StalenessClassifier


def make_record(changes=False, merged=False, deleted=False, reason=""):
    return WorktreeRecord(
        path="/git/svc/feat",
        branch="feat",
        repo_name="svc",
        repo_path="/git/svc",
        default_branch="main",
        has_uncommitted_changes=changes,
        is_merged_to_default=merged,
        is_remote_deleted=deleted,
        reason=reason,
    )


ALL_FLAGS = list(itertools.product([False, True], repeat=3))


class TestIsStale:
    """Test the disposability predicate."""

    @pytest.mark.parametrize("merged,deleted", [(False, False), (True, False), (False, True), (True, True)])
    def test_changes_always_win(self, merged, deleted):
        """A worktree with uncommitted changes is never stale."""
        record = make_record(changes=True, merged=merged, deleted=deleted)
        assert StalenessClassifier.is_stale(record) is False

    @pytest.mark.parametrize("merged,deleted", [(False, False), (True, False), (False, True), (True, True)])
    def test_clean_worktree_stale_iff_merged_or_deleted(self, merged, deleted):
        record = make_record(changes=False, merged=merged, deleted=deleted)
        assert StalenessClassifier.is_stale(record) is (merged or deleted)

    @pytest.mark.parametrize("changes,merged,deleted", ALL_FLAGS)
    def test_classify_is_idempotent(self, changes, merged, deleted):
        record = make_record(changes, merged, deleted, reason="some reason")
        first = StalenessClassifier.classify(record)
        second = StalenessClassifier.classify(record)
        assert first == second
        assert first == (StalenessClassifier.is_stale(record), "some reason")


class TestStatusTag:
    """Test status tag priority."""

    def test_active(self):
        assert StalenessClassifier.status_tag(make_record()) == "[active]"

    def test_merged(self):
        assert StalenessClassifier.status_tag(make_record(merged=True)) == "[merged]"

    def test_deleted(self):
        assert StalenessClassifier.status_tag(make_record(deleted=True)) == "[deleted]"

    def test_changes_take_priority(self):
        record = make_record(changes=True, merged=True, deleted=True)
        assert StalenessClassifier.status_tag(record) == "[changes]"

    def test_merged_before_deleted(self):
        record = make_record(merged=True, deleted=True)
        assert StalenessClassifier.status_tag(record) == "[merged]"
