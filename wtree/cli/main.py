"""Command-line entry point for wtree."""

import sys

from rich.console import Console
from rich.markup import escape

from wtree.cli.args import parse_args
from wtree.config import Config
from wtree.core import WorktreeManager
from wtree.exceptions import WtreeError
from wtree.formatters import (
    format_add_worktree,
    format_create_root,
    format_remove_worktree,
    format_worktree_list,
)
from wtree.models.results import AddMode
from wtree.models.root import RepositoryRoot
from wtree.utils.logging import setup_logging

console = Console()
err_console = Console(stderr=True)


def _print_lines(lines, target=None):
    for line in lines:
        (target or console).print(line)


def run(parsed_args, manager: WorktreeManager) -> int:
    """Dispatch one parsed command. Returns the exit status."""
    if parsed_args.command == "clone":
        console.print(f"📁 Creating '{parsed_args.name}' from {parsed_args.repository}...")
        result = manager.create_root(parsed_args.repository, parsed_args.name)
        _print_lines(format_create_root(result))
        return 0

    if parsed_args.root:
        root = RepositoryRoot(parsed_args.root).require_valid()
    else:
        root = RepositoryRoot.discover()

    if parsed_args.command == "add":
        mode = AddMode.from_flags(parsed_args.from_remote, parsed_args.start_fresh)
        result = manager.add_worktree(root, parsed_args.name, mode)
        _print_lines(format_add_worktree(result))
        return 0

    if parsed_args.command == "remove":
        result = manager.remove_worktree(root, parsed_args.name, force=parsed_args.force)
        if result.ok:
            _print_lines(format_remove_worktree(result))
            return 0
        _print_lines(format_remove_worktree(result), err_console)
        return 1

    if parsed_args.command == "list":
        _print_lines(format_worktree_list(manager.list_worktrees(root)))
        return 0

    err_console.print(f"[red]Error: Unknown command '{parsed_args.command}'[/red]")
    return 1


def main(argv=None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)
    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        interactive = not parsed_args.no_interactive
        config = Config(
            backend_timeout=parsed_args.timeout,
            interactive=interactive,
            force=getattr(parsed_args, "force", False),
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )
        manager = WorktreeManager(config)
        return run(parsed_args, manager)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (WtreeError, ValueError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        if parsed_args.debug:
            err_console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
