"""Worktree operations service for wtree."""

import os
from typing import Any, Dict, List, Optional

import git

from wtree.exceptions import BackendError, WorktreeCreateFailed, WorktreeRemoveFailed
from wtree.models.worktree import WorktreeInfo
from wtree.services.git.errors import describe_git_error, is_timeout, translate_git_error
from wtree.utils.logging import get_logger

logger = get_logger(__name__)


def parse_worktree_porcelain(output: str) -> List[WorktreeInfo]:
    """Parse ``git worktree list --porcelain`` into typed records.

    Format:
        worktree /path/to/worktree
        HEAD commit_sha
        branch refs/heads/branch-name      (or "detached", or "bare")
        (blank line between worktrees)
    """
    worktree_list = []
    current: Dict[str, Any] = {}

    def flush():
        if current.get("path"):
            worktree_list.append(
                WorktreeInfo(
                    path=current["path"],
                    branch_name=current.get("branch", ""),
                    commit_sha=current.get("HEAD", ""),
                    is_bare=current.get("bare", False),
                    is_prunable=current.get("prunable", False),
                )
            )

    for line in output.split("\n"):
        line = line.strip()

        if not line:
            flush()
            current = {}
            continue

        if line.startswith("worktree "):
            current["path"] = line.split(" ", 1)[1]
        elif line.startswith("HEAD "):
            current["HEAD"] = line.split(" ", 1)[1]
        elif line.startswith("branch "):
            branch_ref = line.split(" ", 1)[1]
            if branch_ref.startswith("refs/heads/"):
                current["branch"] = branch_ref[len("refs/heads/"):]
            else:
                current["branch"] = ""
        elif line == "detached":
            current["branch"] = ""
        elif line == "bare":
            current["bare"] = True
        elif line.startswith("prunable"):
            current["prunable"] = True

    # Last entry if there was no trailing blank line
    flush()
    return worktree_list


class WorktreeService:
    """Service for managing git worktrees of a bare store."""

    def __init__(self, repo_path: str, timeout: Optional[float] = None):
        """Initialize the worktree service.

        Args:
            repo_path: Path to the bare store
            timeout: Seconds before a git call is killed (None = no limit)
        """
        self.repo_path = repo_path
        self.timeout = timeout

    def _get_repo(self):
        return git.Repo(self.repo_path)

    def list_worktrees(self) -> List[WorktreeInfo]:
        """Get detailed information about all worktrees, bare entry included."""
        try:
            output = self._get_repo().git.worktree(
                "list", "--porcelain", kill_after_timeout=self.timeout
            )
        except git.exc.GitCommandError as e:
            raise translate_git_error(
                e, "worktree list", self.timeout, lambda msg: BackendError("worktree list", msg)
            )

        worktree_list = parse_worktree_porcelain(output)
        logger.debug(f"Found {len(worktree_list)} worktrees")
        for wt in worktree_list:
            logger.debug(f"  {wt}")
        return worktree_list

    def find_worktree(self, path: str) -> Optional[WorktreeInfo]:
        """Return the registered worktree at ``path``, if any."""
        target = os.path.realpath(path)
        for wt in self.list_worktrees():
            if not wt.is_bare and os.path.realpath(wt.path) == target:
                return wt
        return None

    def add_worktree(self, path: str, branch: str, base_ref: str, reset_branch: bool = False) -> None:
        """Create ``branch`` at ``base_ref`` and check it out at ``path``.

        Args:
            reset_branch: Use -B so an existing local branch is moved to base_ref
        """
        flag = "-B" if reset_branch else "-b"
        try:
            self._get_repo().git.worktree(
                "add", flag, branch, path, base_ref, kill_after_timeout=self.timeout
            )
        except git.exc.GitCommandError as e:
            raise translate_git_error(
                e, "worktree add", self.timeout, lambda msg: WorktreeCreateFailed(path, msg), path
            )
        logger.info(f"Created worktree at {path} on branch {branch} from {base_ref}")

    def remove_worktree(self, path: str, force: bool = False) -> None:
        """Remove a worktree, retrying once with --force if the plain removal fails.

        A registration whose directory has already vanished is pruned instead.
        """
        attempts = [True] if force else [False, True]
        last_error = None

        for forced in attempts:
            args = ["remove", path]
            if forced:
                args.append("--force")
            try:
                self._get_repo().git.worktree(*args, kill_after_timeout=self.timeout)
                logger.info(f"Removed worktree at {path}")
                return
            except git.exc.GitCommandError as e:
                if self.timeout is not None and is_timeout(e):
                    raise translate_git_error(
                        e, "worktree remove", self.timeout, lambda msg: WorktreeRemoveFailed(path, msg), path
                    )
                last_error = e
                logger.debug(f"git worktree {' '.join(args)} failed: {describe_git_error(e)}")

        if not os.path.exists(path):
            logger.info(f"Worktree directory {path} is gone, pruning its registration")
            self.prune_worktrees()
            return

        raise WorktreeRemoveFailed(path, describe_git_error(last_error))

    def prune_worktrees(self) -> None:
        """Prune orphaned worktree metadata."""
        try:
            self._get_repo().git.worktree("prune", kill_after_timeout=self.timeout)
            logger.info("Pruned orphaned worktree metadata")
        except git.exc.GitCommandError as e:
            raise translate_git_error(
                e, "worktree prune", self.timeout, lambda msg: BackendError("worktree prune", msg)
            )
