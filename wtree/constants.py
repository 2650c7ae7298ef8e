"""Shared constants for wtree.

These names make up the on-disk convention other tooling relies on, so
changing any of them breaks existing roots.
"""

# Persisted layout under a repository root
BARE_STORE_DIR = ".bare-store"
TEMPLATE_DIR = "worktree-config"
INIT_SCRIPT_NAME = "worktree-Init.sh"
TEMPLATE_README_NAME = "README.md"
LOCK_FILE_NAME = "wtree.lock"

# Entries of the template directory that are never copied into a worktree
RESERVED_TEMPLATE_ENTRIES = frozenset({INIT_SCRIPT_NAME, TEMPLATE_README_NAME})

# Entries of the root that can never be used as a worktree name
RESERVED_ROOT_ENTRIES = frozenset({BARE_STORE_DIR, TEMPLATE_DIR})

DEFAULT_REMOTE = "origin"

# Probed in order; no other naming conventions are considered
DEFAULT_BRANCH_CANDIDATES = ("main", "master")


def remote_fetch_refspec(remote_name: str = DEFAULT_REMOTE) -> str:
    """Refspec that mirrors every remote head into remote-tracking refs."""
    return f"+refs/heads/*:refs/remotes/{remote_name}/*"


DEFAULT_INIT_SCRIPT = """#!/bin/bash
# Worktree initialization script
# Add any setup commands that should run when creating new worktrees.
# It runs from inside the new worktree directory.

"""

DEFAULT_TEMPLATE_README = """# worktree-config

Everything in this directory is copied into each new worktree created with
`wtree add`, except this README and `worktree-Init.sh`.

Files that already exist in the new worktree are never overwritten.

`worktree-Init.sh` is executed (not copied) from inside the new worktree
after the files are in place. A failing script only produces a warning.
"""
