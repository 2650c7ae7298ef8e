"""Command-line argument parsing for wtree."""

import argparse
import os

from wtree.__version__ import __version__


def _default_timeout() -> str:
    # argparse runs type=float on string defaults too
    return os.environ.get("WTREE_TIMEOUT") or "300"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wtree",
        description="Manage a bare repository with one directory per worktree",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show verbose output")
    parser.add_argument("--version", action="version", version=f"wtree {__version__}")
    parser.add_argument(
        "--debug", action="store_true", help="Show debug information for troubleshooting"
    )
    parser.add_argument(
        "--root",
        metavar="PATH",
        help="Repository root to operate on (default: nearest parent holding .bare-store)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=_default_timeout(),
        metavar="SECS",
        help="Seconds before a git call is abandoned (default: $WTREE_TIMEOUT or 300)",
    )
    parser.add_argument(
        "--no-interactive",
        action="store_true",
        help="Never prompt; fail where an answer would be needed (for scripts/automation)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")
    subparsers.required = True

    clone = subparsers.add_parser("clone", help="Clone a repository into a new wtree root")
    clone.add_argument("repository", help="Repository URL to clone")
    clone.add_argument("name", help="Directory to create")

    add = subparsers.add_parser("add", help="Create a worktree on a new branch")
    add.add_argument("name", help="Worktree directory and branch name")
    base = add.add_mutually_exclusive_group()
    base.add_argument(
        "--from-remote", action="store_true", help="Base the worktree on the remote branch of the same name"
    )
    base.add_argument(
        "--start-fresh", action="store_true", help="Base the worktree on origin/main (or origin/master)"
    )

    remove = subparsers.add_parser("remove", help="Remove a worktree and its branch")
    remove.add_argument("name", help="Worktree to remove")
    remove.add_argument(
        "--force", action="store_true", help="Skip confirmations, even for unmerged branches"
    )

    subparsers.add_parser("list", help="List worktrees of the root")

    return parser


def parse_args(argv=None):
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)
