"""Core functionality for wtree."""

from .worktree_manager import WorktreeManager

__all__ = ["WorktreeManager"]
