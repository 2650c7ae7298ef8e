"""Worktree lifecycle engine: create-root, add-worktree, remove-worktree."""

import os
import shutil
from pathlib import Path
from typing import List, Optional, Union

from wtree.config import Config
from wtree.exceptions import (
    BackendError,
    ConfirmationUnavailable,
    InvalidName,
    LocalBranchDiverged,
    NoDefaultBranch,
    NotAWorktree,
    ProvisioningError,
    TargetExists,
)
from wtree.models.results import (
    AddMode,
    AddWorktreeResult,
    CreateRootResult,
    MergeStatus,
    OperationStatus,
    PropagationResult,
    RemoveWorktreeResult,
)
from wtree.models.root import RepositoryRoot
from wtree.models.worktree import WorktreeInfo
from wtree.services.branch_policy import apply_choice, removal_needs_confirmation, resolve_base_branch
from wtree.services.config_propagator import ConfigPropagator
from wtree.services.confirmation import (
    ConfirmationProvider,
    ConsoleConfirmation,
    NonInteractiveConfirmation,
)
from wtree.services.git import RepositoryStore
from wtree.services.root_lock import root_lock
from wtree.utils.logging import get_logger

logger = get_logger(__name__)

NON_INTERACTIVE_HINT = "pass --force, --from-remote or --start-fresh"


class WorktreeManager:
    """Runs the worktree lifecycle against explicit repository roots.

    The backend and the confirmation prompt are both injectable: tests pass
    a fake ``store_factory`` and a canned ``confirmation`` provider.
    """

    def __init__(
        self,
        config: Union[Config, dict, None] = None,
        confirmation: Optional[ConfirmationProvider] = None,
        store_factory=RepositoryStore,
        propagator_factory=ConfigPropagator,
    ):
        if config is None:
            config = Config()
        elif isinstance(config, dict):
            config = Config.from_dict(config)
        self.config = config

        if confirmation is None:
            if config.interactive:
                confirmation = ConsoleConfirmation(hint=NON_INTERACTIVE_HINT)
            else:
                confirmation = NonInteractiveConfirmation(NON_INTERACTIVE_HINT)
        self.confirmation = confirmation
        self.store_factory = store_factory
        self.propagator_factory = propagator_factory

    def _open(self, root: RepositoryRoot):
        root.require_valid()
        return (
            self.store_factory(root, self.config),
            self.propagator_factory(root, self.config),
        )

    # create-root

    def create_root(
        self, source_url: str, name: str, parent: Optional[Union[str, Path]] = None
    ) -> CreateRootResult:
        """Clone ``source_url`` into a new root ``<parent>/<name>``.

        All or nothing: if any step fails the partially built root is
        deleted before the error propagates.
        """
        if not source_url or not source_url.strip():
            raise InvalidName(source_url or "", "repository URL is required")
        if not name or not name.strip():
            raise InvalidName(name or "", "directory name is required")

        root = RepositoryRoot(Path(parent or os.getcwd()) / name)
        if root.path.exists() or root.path.is_symlink():
            raise TargetExists(str(root.path))

        logger.info(f"Creating directory structure for '{name}'")
        try:
            root.path.mkdir()
        except OSError as e:
            raise ProvisioningError(f"Failed to create directory '{root.path}': {e}")

        completed = False
        try:
            store = self.store_factory.initialize(source_url, root, self.config)
            store.configure_remote_tracking()
            propagator = self.propagator_factory(root, self.config)
            template = propagator.materialize_template()
            completed = True
        finally:
            if not completed:
                self._rollback_root(root)

        result = CreateRootResult(root=root.path, bare_store=root.bare_store_path, template=template)

        readme_warning = propagator.write_readme()
        if readme_warning:
            result.warnings.append(readme_warning)

        try:
            store.fetch()
        except BackendError as e:
            warning = f"Initial fetch failed, remote branches are not known yet: {e}"
            logger.warning(warning)
            result.warnings.append(warning)

        logger.info(f"Repository cloned to '{root.bare_store_path}'")
        return result

    def _rollback_root(self, root: RepositoryRoot) -> None:
        logger.info(f"Rolling back partially created '{root.path}'")
        shutil.rmtree(root.path, ignore_errors=True)
        if root.path.exists():
            logger.error(f"Could not fully remove '{root.path}', please delete it manually")

    # add-worktree

    def add_worktree(
        self, root: RepositoryRoot, name: str, mode: AddMode = AddMode.INTERACTIVE
    ) -> AddWorktreeResult:
        """Create worktree ``name`` on a new branch ``name``.

        Once the backend has created the worktree, problems while copying the
        template or running the init script only produce warnings.
        """
        path = root.worktree_path(name)
        store, propagator = self._open(root)
        if path.exists() or path.is_symlink():
            raise TargetExists(str(path))

        with root_lock(root, self.config.lock_timeout):
            store.fetch()
            default_ref = store.resolve_default_branch()
            remote_ref = store.remote_ref(name)
            remote_exists = store.remote_branch_exists(name)

            resolution = resolve_base_branch(mode, remote_exists, remote_ref, default_ref)
            if resolution.interactive_choice_required:
                use_remote = self.confirmation.confirm(
                    f"Remote branch '{remote_ref}' exists. Base your worktree off the remote branch?"
                )
                apply_choice(resolution, use_remote)
            base_ref = resolution.chosen_base
            logger.info(f"Creating worktree '{name}' from {base_ref}")

            # A bare clone already has a local head for every remote branch
            reset_branch = False
            if store.local_branch_exists(name):
                if not self._branch_is_disposable(store, name, base_ref, resolution):
                    raise LocalBranchDiverged(name, base_ref)
                logger.info(f"Moving existing local branch '{name}' to {base_ref}")
                reset_branch = True

            store.add_worktree(str(path), name, base_ref, reset_branch=reset_branch)

        result = AddWorktreeResult(
            name=name, path=path, branch=name, base_ref=base_ref, resolution=resolution
        )

        try:
            result.propagation = propagator.propagate(path)
        except OSError as e:
            warning = f"Could not copy worktree configuration: {e}"
            logger.warning(warning)
            result.warnings.append(warning)
            result.propagation = PropagationResult()
        for entry, error in sorted(result.propagation.failed.items()):
            result.warnings.append(f"Could not copy {entry}: {error}")

        result.init = propagator.run_init(path)
        if not result.init.ok and result.init.message:
            result.warnings.append(result.init.message)

        return result

    @staticmethod
    def _branch_is_disposable(store: RepositoryStore, name: str, base_ref: str, resolution) -> bool:
        """True if every commit of local branch ``name`` is on the base or on the remote."""
        local_ref = f"refs/heads/{name}"
        if store.is_ancestor(local_ref, base_ref):
            return True
        return resolution.exists_on_remote and store.is_ancestor(local_ref, resolution.remote_ref)

    # remove-worktree

    def remove_worktree(
        self, root: RepositoryRoot, name: str, force: Optional[bool] = None
    ) -> RemoveWorktreeResult:
        """Remove worktree ``name`` and its branch.

        An unmerged branch needs confirmation unless ``force`` is set;
        declining leaves everything untouched. Worktree removal and branch
        deletion are reported separately and never rolled back.
        ``force`` defaults to ``config.force``.
        """
        if force is None:
            force = self.config.force
        path = root.worktree_path(name)
        store, _ = self._open(root)

        with root_lock(root, self.config.lock_timeout):
            worktree = store.find_worktree(str(path))
            if worktree is None:
                raise NotAWorktree(str(path))

            branch = worktree.branch_name or None
            result = RemoveWorktreeResult(name=name, path=path, branch=branch)

            if branch is None:
                self._warn(result, f"Worktree '{name}' has a detached HEAD, skipping merge check")
            else:
                result.merge_status = self._check_merged(store, worktree, result)

            if removal_needs_confirmation(result.merge_status, force):
                prompt = (
                    f"Branch '{branch}' is not merged into {result.merge_status.default_ref}. "
                    "Remove the worktree and branch anyway?"
                )
                if not self.confirmation.confirm(prompt):
                    logger.info("Removal cancelled")
                    result.status = OperationStatus.DECLINED
                    return result

            store.remove_worktree(str(path))
            result.worktree_removed = True

            if branch is not None:
                self._delete_branch(store, branch, force, result)

        return result

    def _check_merged(
        self, store: RepositoryStore, worktree: WorktreeInfo, result: RemoveWorktreeResult
    ) -> Optional[MergeStatus]:
        """Best-effort merge check. Returns None when it could not be done."""
        branch = worktree.branch_name
        try:
            store.fetch()
            default_ref = store.resolve_default_branch()
        except (BackendError, NoDefaultBranch) as e:
            self._warn(result, f"Skipping merge check for '{branch}': {e}")
            return None

        commit = store.resolve_commit(f"refs/heads/{branch}") or worktree.commit_sha
        try:
            merged = store.is_ancestor(commit, default_ref)
        except BackendError as e:
            self._warn(result, f"Skipping merge check for '{branch}': {e}")
            return None

        logger.info(f"Branch '{branch}' is {'merged' if merged else 'not merged'} into {default_ref}")
        return MergeStatus(branch_commit=commit, is_ancestor_of_default=merged, default_ref=default_ref)

    def _delete_branch(
        self, store: RepositoryStore, branch: str, force: bool, result: RemoveWorktreeResult
    ) -> None:
        try:
            if not store.local_branch_exists(branch):
                self._warn(result, f"Branch '{branch}' no longer exists, nothing to delete")
                return

            if store.delete_branch(branch, force=False):
                result.branch_deleted = True
                return

            # Merged into the default branch already, so nothing can be lost
            merged = result.merge_status is not None and result.merge_status.is_ancestor_of_default
            if force or merged or self._confirm_force_delete(branch, result):
                store.delete_branch(branch, force=True)
                result.branch_deleted = True
            else:
                logger.info(f"Keeping branch '{branch}'")
                result.branch_kept = True
        except BackendError as e:
            logger.error(str(e))
            result.branch_error = str(e)

    def _confirm_force_delete(self, branch: str, result: RemoveWorktreeResult) -> bool:
        try:
            return self.confirmation.confirm(f"Branch '{branch}' is not fully merged. Force delete it?")
        except ConfirmationUnavailable as e:
            self._warn(result, f"Keeping branch '{branch}': {e}")
            return False

    @staticmethod
    def _warn(result, message: str) -> None:
        logger.warning(message)
        result.warnings.append(message)

    # queries

    def list_worktrees(self, root: RepositoryRoot) -> List[WorktreeInfo]:
        """Registered worktrees of ``root``, without the bare store entry."""
        store, _ = self._open(root)
        return [wt for wt in store.list_worktrees() if not wt.is_bare]
