"""Worktree data models."""

from dataclasses import dataclass


@dataclass
class WorktreeInfo:
    """Information about a git worktree."""

    path: str
    branch_name: str  # Empty for detached HEAD
    commit_sha: str
    is_bare: bool = False  # The bare store's own entry
    is_prunable: bool = False  # Registered but directory missing

    @property
    def is_detached(self) -> bool:
        return not self.is_bare and not self.branch_name

    def __str__(self) -> str:
        """String representation of worktree."""
        if self.is_bare:
            return f"(bare) @ {self.path}"
        branch = self.branch_name or "(detached)"
        status = "prunable" if self.is_prunable else "active"
        return f"{branch} @ {self.path} [{status}]"
