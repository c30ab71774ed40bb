"""Display and formatting service for worktree cleanup output"""
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.constants import PROG_NAME, SYMBOL_FAIL, SYMBOL_OK
from git_worktree_keeper.formatters import (
    format_bytes,
    format_status_tag,
    format_timestamp,
    format_worktree_label,
)
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.cleanup import CleanupSummary, RemovalOutcome, RemovalResult
from git_worktree_keeper.models.repository import CleanupReport
from git_worktree_keeper.models.worktree import WorktreeRecord
from git_worktree_keeper.services.staleness_service import StalenessClassifier

console = Console()
err_console = Console(stderr=True)
logger = get_logger(__name__)


class DisplayService:
    """Prints reports for list, scan and run. Holds no decision logic."""

    def __init__(self, out: Optional[Console] = None, err: Optional[Console] = None):
        self.console = out or console
        self.err_console = err or err_console

    def print_message(self, message: str) -> None:
        self.console.print(message)

    def print_error(self, message: str) -> None:
        self.err_console.print(f"[red]Error: {escape(message)}[/red]")

    def print_scan_problems(self, report: CleanupReport) -> None:
        """Print fetch warnings and per-repository scan errors, in discovery order."""
        for result in report.results:
            for warning in result.warnings:
                self.err_console.print(f"  [yellow]Warning: {escape(warning)}[/yellow]")
            if result.error is not None:
                self.err_console.print(
                    f"[red]Error scanning {escape(result.repo_name)}: {escape(str(result.error))}[/red]"
                )

    def display_worktree_list(self, report: CleanupReport) -> None:
        """Every worktree grouped by repository, with its status tag."""
        self.print_scan_problems(report)

        total = 0
        stale = 0
        for result in report.results:
            if not result.ok or not result.worktrees:
                continue

            self.console.print(f"\nRepository: [bold]{escape(result.repo_name)}[/bold]")
            for wt in result.worktrees:
                total += 1
                if StalenessClassifier.is_stale(wt):
                    stale += 1

                line = f"  {escape(wt.name + '/'):<30} {format_status_tag(wt)}"
                if wt.reason:
                    line += f" - {escape(wt.reason)}"
                self.console.print(line, highlight=False)

        if total == 0:
            if not report.all_failed:
                self.console.print("\nNo worktrees found")
            return

        if stale > 0:
            self.console.print(f"\nTotal: {total} worktrees ({stale} can be cleaned up)")
            self.console.print(f"Run '{PROG_NAME} scan' to see details")
        else:
            self.console.print(f"\nTotal: {total} worktrees (all up-to-date)")

    def display_stale_worktrees(self, stale: List[WorktreeRecord]) -> None:
        """Dry-run listing of disposable worktrees with reason, age and size."""
        if not stale:
            self.console.print("\nNo stale worktrees found. Everything is clean!")
            return

        self.console.print()
        total_size = 0
        current_repo = None
        for wt in stale:
            if wt.repo_name != current_repo:
                current_repo = wt.repo_name
                self.console.print(f"[bold]{escape(wt.repo_name)}:[/bold]")

            total_size += wt.size_bytes
            self.console.print(f"  {escape(wt.name)}/", highlight=False)
            self.console.print(f"    Reason: {escape(wt.reason)}", highlight=False)
            self.console.print(f"    Last modified: {format_timestamp(wt.last_modified)}", highlight=False)
            if wt.size_bytes > 0:
                self.console.print(f"    Size: {format_bytes(wt.size_bytes)}", highlight=False)
            self.console.print(f"    Safe to remove: [green]{SYMBOL_OK}[/green]")
            self.console.print()

        summary = f"Total: {len(stale)} worktrees"
        if total_size > 0:
            summary += f" ({format_bytes(total_size)})"
        self.console.print(summary, highlight=False)
        self.console.print(f"Run '{PROG_NAME} run' to remove them")

    def confirm_removal(self, record: WorktreeRecord) -> bool:
        """Ask y/N before removing a worktree. Anything but y/yes declines."""
        prompt = (
            f"Remove worktree '{escape(format_worktree_label(record))}' "
            f"({escape(record.reason)})? \\[y/N] "
        )
        try:
            response = self.console.input(prompt)
        except EOFError:
            logger.debug("No input available, declining removal")
            return False
        return response.strip().lower() in ("y", "yes")

    def display_removal_result(self, result: RemovalResult) -> None:
        label = escape(format_worktree_label(result.record))
        if result.outcome == RemovalOutcome.REMOVED:
            self.console.print(f"  [green]{SYMBOL_OK}[/green] Removed {label}/")
        elif result.outcome == RemovalOutcome.SKIPPED:
            self.console.print("  Skipped")
        elif result.outcome == RemovalOutcome.REFUSED:
            self.err_console.print(
                f"  [yellow]{SYMBOL_FAIL} Refused to remove {label}/: "
                f"{escape(result.message or '')}[/yellow]"
            )
        else:
            self.err_console.print(
                f"  [red]{SYMBOL_FAIL} Error removing worktree: {escape(result.message or '')}[/red]"
            )

    def display_cleanup_summary(self, summary: CleanupSummary) -> None:
        self.console.print("Cleanup complete!")

        removed = f"  Removed: {summary.removed} worktrees"
        if summary.freed_bytes > 0:
            removed += f" ({format_bytes(summary.freed_bytes)} freed)"
        self.console.print(removed, highlight=False)

        if summary.skipped > 0:
            skipped = f"  Skipped: {summary.skipped} worktrees"
            details = []
            if summary.refused:
                details.append(f"{summary.refused} had new changes")
            if summary.failed:
                details.append(f"{summary.failed} failed")
            if details:
                skipped += f" ({', '.join(details)})"
            self.console.print(skipped, highlight=False)

    def display_prune_result(self, warnings: List[str]) -> None:
        for warning in warnings:
            self.err_console.print(f"  [yellow]Warning: {escape(warning)}[/yellow]")
        self.console.print(f"  [green]{SYMBOL_OK}[/green] Metadata cleaned")
