"""Core functionality for git-worktree-keeper"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import nullcontext
from typing import Callable, List, Optional, Union

from rich.progress import Progress

from git_worktree_keeper.config import Config
from git_worktree_keeper.constants import ExitCode
from git_worktree_keeper.exceptions import RemovalRefusedError, WorktreeRemovalError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.cleanup import CleanupSummary, RemovalOutcome, RemovalResult
from git_worktree_keeper.models.repository import (
    CleanupReport,
    RepositoryContainer,
    RepositoryScanResult,
)
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.discovery_service import RepositoryDiscovery
from git_worktree_keeper.services.display_service import DisplayService
from git_worktree_keeper.services.git import (
    CommandRunner,
    Deadline,
    GitHubService,
    GitOperations,
    WorktreeService,
)
from git_worktree_keeper.services.removal_service import RemovalExecutor
from git_worktree_keeper.services.scanner_service import WorktreeScanner
from git_worktree_keeper.services.staleness_service import StalenessClassifier
from git_worktree_keeper.utils.threading import get_worker_count

logger = get_logger(__name__)


class WorktreeKeeper:
    """Main class for finding and cleaning up stale worktrees."""

    def __init__(
        self,
        config: Union[Config, dict],
        runner: Optional[CommandRunner] = None,
        display_service: Optional[DisplayService] = None,
        github_service: Optional[GitHubService] = None,
    ):
        """Initialize WorktreeKeeper.

        Args:
            config: Configuration dict or Config object
            runner: Command runner; built from the config when omitted
            display_service: Output sink for the list/scan/run reports
            github_service: Remote hosting client for default-branch lookup
        """
        if isinstance(config, dict):
            self.config = Config.from_dict(config)
        else:
            self.config = config

        if runner is None:
            runner = CommandRunner(
                timeout=self.config.command_timeout, deadline=Deadline(self.config.deadline)
            )
        self.runner = runner
        self.deadline = runner.deadline

        self.git_operations = GitOperations(self.runner, self.config.remote_name)
        self.worktree_service = WorktreeService(self.runner)
        self.github_service = github_service or GitHubService(self.config)
        self.scanner = WorktreeScanner(
            self.git_operations, self.worktree_service, self.github_service
        )
        self.executor = RemovalExecutor(self.worktree_service)
        self.display_service = display_service or DisplayService()

    def discover(self, repo_filter: Optional[str] = None) -> List[RepositoryContainer]:
        """Discover repository containers, optionally keeping only one by name.

        Raises:
            ConfigurationError: if the root directory is not configured or unreadable
        """
        discovery = RepositoryDiscovery(self.config.require_root_dir())
        return discovery.filter(discovery.discover(), repo_filter)

    def _scan_one(self, container: RepositoryContainer) -> RepositoryScanResult:
        """Scan a repository, turning any failure into an error entry."""
        try:
            return self.scanner.scan(container)
        except Exception as e:
            logger.debug(f"Scan of {container.name} failed: {e}")
            return RepositoryScanResult(container=container, error=e)

    def scan_all(self, containers: List[RepositoryContainer]) -> CleanupReport:
        """Scan every container concurrently, one task per repository.

        Waits for all tasks and returns results in discovery order, whatever
        order they completed in.
        """
        if not containers:
            return CleanupReport()

        max_workers = get_worker_count(len(containers), self.config.workers)
        logger.debug(f"Scanning {len(containers)} repositories using {max_workers} workers")

        # Progress bar only on a terminal; it is cleared once the scan finishes
        console = self.display_service.console
        progress_context = (
            Progress(console=console, transient=True) if console.is_terminal else nullcontext()
        )

        results: List[Optional[RepositoryScanResult]] = [None] * len(containers)
        with progress_context as progress, ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="scan"
        ) as executor:
            task = (
                progress.add_task(
                    f"Scanning repositories ({max_workers} workers)...", total=len(containers)
                )
                if progress is not None
                else None
            )
            future_to_index = {
                executor.submit(self._scan_one, container): index
                for index, container in enumerate(containers)
            }
            try:
                for future in as_completed(future_to_index):
                    results[future_to_index[future]] = future.result()
                    if progress is not None:
                        progress.advance(task)
            except KeyboardInterrupt:
                # Stop queued scans and keep running ones from starting new commands
                self.deadline.cancel()
                for future in future_to_index:
                    future.cancel()
                raise

        return CleanupReport(results=[r for r in results if r is not None])

    def stale_worktrees(self, report: CleanupReport) -> List[WorktreeRecord]:
        """Disposable worktrees of a report, grouped by repository."""
        return [wt for wt in report.all_worktrees() if StalenessClassifier.is_stale(wt)]

    def _prepare(self, repo_filter: Optional[str]) -> Optional[List[RepositoryContainer]]:
        """Discover containers and report when there is nothing to scan."""
        containers = self.discover(repo_filter)
        if containers:
            return containers

        if repo_filter:
            self.display_service.print_error(
                f"No repository named '{repo_filter}' found in git folder"
            )
        else:
            self.display_service.print_message("No repositories found in git folder")
        return None

    @staticmethod
    def _report_exit_code(report: CleanupReport) -> ExitCode:
        if report.all_failed:
            return ExitCode.FAILURE
        if report.has_errors:
            return ExitCode.PARTIAL
        return ExitCode.SUCCESS

    def list_worktrees(self, repo_filter: Optional[str] = None) -> ExitCode:
        """Print every worktree with its status tag."""
        containers = self._prepare(repo_filter)
        if containers is None:
            return ExitCode.FAILURE if repo_filter else ExitCode.SUCCESS

        report = self.scan_all(containers)
        self.display_service.display_worktree_list(report)
        return self._report_exit_code(report)

    def scan(self, repo_filter: Optional[str] = None) -> ExitCode:
        """Dry run: print the worktrees `run` would offer to remove."""
        containers = self._prepare(repo_filter)
        if containers is None:
            return ExitCode.FAILURE if repo_filter else ExitCode.SUCCESS

        self.display_service.print_message("Scanning for stale worktrees...")
        report = self.scan_all(containers)
        self.display_service.print_scan_problems(report)
        if not report.all_failed:
            self.display_service.display_stale_worktrees(self.stale_worktrees(report))
        return self._report_exit_code(report)

    def run(
        self,
        repo_filter: Optional[str] = None,
        force: bool = False,
        confirm: Optional[Callable[[WorktreeRecord], bool]] = None,
    ) -> ExitCode:
        """Scan, then remove stale worktrees one at a time.

        Args:
            repo_filter: Only clean the repository with this name
            force: Remove without asking
            confirm: Prompt used when not forced; defaults to a y/N console prompt
        """
        containers = self._prepare(repo_filter)
        if containers is None:
            return ExitCode.FAILURE if repo_filter else ExitCode.SUCCESS

        self.display_service.print_message("Scanning for stale worktrees...")
        report = self.scan_all(containers)
        self.display_service.print_scan_problems(report)
        exit_code = self._report_exit_code(report)

        stale = self.stale_worktrees(report)
        if not stale:
            if not report.all_failed:
                self.display_service.print_message("\nNo stale worktrees found. Everything is clean!")
            return exit_code

        self.display_service.print_message(f"\nFound {len(stale)} stale worktrees to clean up\n")
        summary = self.remove_stale(stale, force=force, confirm=confirm)
        self.display_service.display_cleanup_summary(summary)

        touched = summary.touched_repositories()
        if touched:
            self.display_service.print_message("\nCleaning up git metadata...")
            summary.prune_warnings = self.executor.prune(touched)
            self.display_service.display_prune_result(summary.prune_warnings)

        if exit_code == ExitCode.SUCCESS and (summary.refused or summary.failed):
            exit_code = ExitCode.PARTIAL
        return exit_code

    def remove_stale(
        self,
        stale: List[WorktreeRecord],
        force: bool = False,
        confirm: Optional[Callable[[WorktreeRecord], bool]] = None,
    ) -> CleanupSummary:
        """Remove stale worktrees sequentially; one failure never stops the batch."""
        confirm = confirm or self.display_service.confirm_removal
        summary = CleanupSummary()

        for record in stale:
            if not StalenessClassifier.is_stale(record):
                continue

            if force or confirm(record):
                result = self._remove_one(record)
            else:
                result = RemovalResult(record, RemovalOutcome.SKIPPED)

            summary.results.append(result)
            self.display_service.display_removal_result(result)
            if not force:
                self.display_service.print_message("")

        return summary

    def _remove_one(self, record: WorktreeRecord) -> RemovalResult:
        # Time spent at the prompt does not count against the removal
        self.deadline.restart()
        try:
            self.executor.remove(record)
        except RemovalRefusedError as e:
            return RemovalResult(record, RemovalOutcome.REFUSED, e.message)
        except WorktreeRemovalError as e:
            return RemovalResult(record, RemovalOutcome.FAILED, str(e))
        return RemovalResult(record, RemovalOutcome.REMOVED)
