"""Git-related services for wtree."""

from .store import RepositoryStore
from .worktrees import WorktreeService, parse_worktree_porcelain

__all__ = [
    "RepositoryStore",
    "WorktreeService",
    "parse_worktree_porcelain",
]
