"""Repository Store: the bare object store of a root and its remote tracking."""

from typing import List, Optional, Union, TYPE_CHECKING

import git

from wtree.constants import DEFAULT_BRANCH_CANDIDATES, remote_fetch_refspec
from wtree.exceptions import (
    BackendError,
    BranchDeleteFailed,
    CloneFailed,
    ConfigFailed,
    FetchFailed,
    NoDefaultBranch,
)
from wtree.models.root import RepositoryRoot
from wtree.models.worktree import WorktreeInfo
from wtree.services.git.errors import describe_git_error, translate_git_error
from wtree.services.git.worktrees import WorktreeService
from wtree.utils.logging import get_logger

if TYPE_CHECKING:
    from wtree.config import Config

logger = get_logger(__name__)


class RepositoryStore:
    """Wraps backend calls against the bare store of one repository root.

    Every git call is bounded by ``backend_timeout``; a call that exceeds it
    is killed and surfaces as BackendTimeout.
    """

    def __init__(self, root: RepositoryRoot, config: Union["Config", dict]):
        self.root = root
        self.config = config
        self.remote_name = config.get("remote_name", "origin")
        self.timeout = config.get("backend_timeout", None)
        self.repo_path = str(root.bare_store_path)
        self.worktree_service = WorktreeService(self.repo_path, self.timeout)

    def _get_repo(self):
        """Open the bare store. GitPython repos are cheap to open."""
        return git.Repo(self.repo_path)

    @classmethod
    def initialize(cls, source_url: str, root: RepositoryRoot, config: Union["Config", dict]) -> "RepositoryStore":
        """Clone ``source_url`` as a bare store under ``root``."""
        timeout = config.get("backend_timeout", None)
        logger.info(f"Cloning {source_url} into {root.bare_store_path}")
        try:
            git.Git(str(root.path)).clone(
                "--bare", "--", source_url, str(root.bare_store_path),
                kill_after_timeout=timeout,
            )
        except git.exc.GitCommandError as e:
            raise translate_git_error(
                e, "clone", timeout, lambda msg: CloneFailed(source_url, msg), source_url
            )
        return cls(root, config)

    def remote_ref(self, branch: str) -> str:
        """Short name of the remote-tracking ref for ``branch``."""
        return f"{self.remote_name}/{branch}"

    def configure_remote_tracking(self) -> None:
        """Mirror all remote heads into remote-tracking refs.

        A bare clone does not set a fetch refspec, which makes every
        remote branch lookup silently come back empty.
        """
        refspec = remote_fetch_refspec(self.remote_name)
        try:
            self._get_repo().git.config(
                f"remote.{self.remote_name}.fetch", refspec, kill_after_timeout=self.timeout
            )
        except git.exc.GitCommandError as e:
            raise translate_git_error(e, "config", self.timeout, ConfigFailed)
        logger.debug(f"Set remote.{self.remote_name}.fetch to {refspec}")

    def fetch(self, remote_name: Optional[str] = None) -> None:
        """Refresh remote-tracking refs."""
        remote = remote_name or self.remote_name
        logger.info(f"Fetching latest from {remote}")
        try:
            self._get_repo().git.fetch(remote, kill_after_timeout=self.timeout)
        except git.exc.GitCommandError as e:
            raise translate_git_error(
                e, "fetch", self.timeout, lambda msg: FetchFailed(remote, msg), remote
            )

    def ref_exists(self, ref: str) -> bool:
        """Check whether a fully qualified ref (refs/...) exists."""
        try:
            self._get_repo().git.show_ref("--verify", "--quiet", ref, kill_after_timeout=self.timeout)
            return True
        except git.exc.GitCommandError as e:
            if e.status == 1 or "not a valid ref" in str(e.stderr):
                return False
            raise translate_git_error(
                e, "show-ref", self.timeout, lambda msg: BackendError("show-ref", msg, ref), ref
            )

    def remote_branch_exists(self, branch: str) -> bool:
        return self.ref_exists(f"refs/remotes/{self.remote_name}/{branch}")

    def local_branch_exists(self, branch: str) -> bool:
        return self.ref_exists(f"refs/heads/{branch}")

    def resolve_default_branch(self) -> str:
        """Return the first of origin/main, origin/master that exists."""
        for candidate in DEFAULT_BRANCH_CANDIDATES:
            if self.remote_branch_exists(candidate):
                return self.remote_ref(candidate)
        raise NoDefaultBranch(self.remote_name)

    def resolve_commit(self, ref: str) -> Optional[str]:
        """SHA of the commit ``ref`` points at, or None if it does not resolve."""
        try:
            return self._get_repo().git.rev_parse(
                "--verify", "--quiet", f"{ref}^{{commit}}", kill_after_timeout=self.timeout
            ).strip()
        except git.exc.GitCommandError as e:
            logger.debug(f"Could not resolve {ref}: {describe_git_error(e)}")
            return None

    def is_ancestor(self, commit_or_ref: str, ref: str) -> bool:
        """True iff the history of ``commit_or_ref`` is fully contained in ``ref``."""
        try:
            self._get_repo().git.merge_base(
                "--is-ancestor", commit_or_ref, ref, kill_after_timeout=self.timeout
            )
            return True
        except git.exc.GitCommandError as e:
            # Exit 1 is the "no" answer; anything else is a real failure
            if e.status == 1:
                return False
            raise translate_git_error(
                e, "merge-base", self.timeout,
                lambda msg: BackendError("merge-base", msg, commit_or_ref), commit_or_ref,
            )

    def add_worktree(self, path: str, new_branch: str, base_ref: str, reset_branch: bool = False) -> None:
        self.worktree_service.add_worktree(path, new_branch, base_ref, reset_branch=reset_branch)

    def remove_worktree(self, path: str, force: bool = False) -> None:
        self.worktree_service.remove_worktree(path, force=force)

    def list_worktrees(self) -> List[WorktreeInfo]:
        return self.worktree_service.list_worktrees()

    def find_worktree(self, path: str) -> Optional[WorktreeInfo]:
        return self.worktree_service.find_worktree(path)

    def delete_branch(self, branch_name: str, force: bool = False) -> bool:
        """Delete a local branch.

        Returns:
            True if deleted. False if an unforced delete was refused because
            the branch is not merged, which the caller may escalate.
        """
        flag = "-D" if force else "-d"
        try:
            self._get_repo().git.branch(flag, branch_name, kill_after_timeout=self.timeout)
        except git.exc.GitCommandError as e:
            if not force and "not fully merged" in str(e.stderr).lower():
                logger.info(f"Branch {branch_name} is not fully merged, not deleted")
                return False
            raise translate_git_error(
                e, "branch delete", self.timeout,
                lambda msg: BranchDeleteFailed(branch_name, msg), branch_name,
            )
        logger.info(f"Deleted branch {branch_name}")
        return True
