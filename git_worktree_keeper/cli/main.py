"""Command-line interface for git-worktree-keeper"""

import sys
from typing import Optional

from rich.console import Console
from rich.markup import escape

from git_worktree_keeper.cli.args import parse_args
from git_worktree_keeper.config import ConfigStore, load_config
from git_worktree_keeper.constants import ExitCode
from git_worktree_keeper.core import WorktreeKeeper
from git_worktree_keeper.exceptions import ConfigurationError
from git_worktree_keeper.logging_config import setup_logging
from git_worktree_keeper.utils.threading import get_threading_info

console = Console()
err_console = Console(stderr=True)

CONFIG_KEYS = ("root_dir", "remote_name", "command_timeout", "deadline", "workers", "github_token")


def run_config_command(parsed_args, store: ConfigStore) -> int:
    """Handle `config get|set|path`."""
    if parsed_args.config_command == "path":
        console.print(str(store.path), highlight=False)
        return ExitCode.SUCCESS

    if parsed_args.key not in CONFIG_KEYS:
        err_console.print(
            f"[red]Error: unknown setting '{escape(parsed_args.key)}'. "
            f"Known settings: {', '.join(CONFIG_KEYS)}[/red]"
        )
        return ExitCode.FAILURE

    if parsed_args.config_command == "get":
        console.print(escape(store.get_string(parsed_args.key)), highlight=False)
        return ExitCode.SUCCESS

    store.set_value(parsed_args.key, parsed_args.value)
    console.print(f"Set {parsed_args.key} = {escape(parsed_args.value)}", highlight=False)
    return ExitCode.SUCCESS


def main(argv=None, store: Optional[ConfigStore] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)
    store = store or ConfigStore()

    try:
        if parsed_args.command == "config":
            return run_config_command(parsed_args, store)

        config = load_config(
            store,
            overrides={
                "root_dir": parsed_args.root,
                "command_timeout": parsed_args.timeout,
                "deadline": parsed_args.deadline,
                "workers": parsed_args.workers,
                "verbose": parsed_args.verbose,
                "debug": parsed_args.debug,
            },
        )

        if parsed_args.debug:
            console.print("[yellow]Debug mode enabled[/yellow]")
            threading_info = get_threading_info()
            console.print("[yellow]Threading Information:[/yellow]")
            console.print(f"  Python version: {threading_info['python_version']}")
            console.print(f"  Threading mode: {threading_info['mode']}")
            console.print(f"  CPU count: {threading_info['cpu_count']}")
            console.print(f"  Free-threading enabled: {threading_info['free_threading']}")
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {escape(str(value))}")

        keeper = WorktreeKeeper(config)

        if parsed_args.command == "list":
            return keeper.list_worktrees(parsed_args.repo)
        if parsed_args.command == "scan":
            return keeper.scan(parsed_args.repo)
        return keeper.run(parsed_args.repo, force=parsed_args.force)

    except ConfigurationError as e:
        err_console.print(f"[red]Error: {escape(e.message)}[/red]")
        if e.fix:
            err_console.print(f"Run: {escape(e.fix)}", highlight=False)
        return ExitCode.FAILURE
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return ExitCode.FAILURE
    except Exception as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args.debug:
            err_console.print_exception()
        return ExitCode.FAILURE


if __name__ == "__main__":
    sys.exit(main())
