"""Branch Resolution Policy.

Pure decisions: nothing here touches the backend. The lifecycle engine
gathers the facts (does the remote branch exist, is the branch merged)
and asks these functions what to do with them.
"""

from typing import Optional

from wtree.exceptions import RemoteBranchNotFound
from wtree.models.results import AddMode, BranchResolution, MergeStatus


def resolve_base_branch(
    mode: AddMode, remote_exists: bool, remote_ref: str, default_ref: str
) -> BranchResolution:
    """Pick the base of a new worktree branch.

    | mode        | remote exists | result                          |
    |-------------|---------------|---------------------------------|
    | FROM_REMOTE | yes           | remote branch                   |
    | FROM_REMOTE | no            | RemoteBranchNotFound            |
    | START_FRESH | any           | default branch                  |
    | INTERACTIVE | yes           | ask: yes -> remote, no -> default |
    | INTERACTIVE | no            | default branch, no prompt       |
    """
    resolution = BranchResolution(
        exists_on_remote=remote_exists,
        chosen_base=None,
        remote_ref=remote_ref,
        default_ref=default_ref,
    )

    if mode is AddMode.FROM_REMOTE:
        if not remote_exists:
            raise RemoteBranchNotFound(remote_ref)
        resolution.chosen_base = remote_ref
    elif mode is AddMode.START_FRESH or not remote_exists:
        resolution.chosen_base = default_ref
    else:
        resolution.interactive_choice_required = True

    return resolution


def apply_choice(resolution: BranchResolution, use_remote: bool) -> BranchResolution:
    """Settle an interactive resolution with the user's answer."""
    if not resolution.interactive_choice_required:
        return resolution
    resolution.chosen_base = resolution.remote_ref if use_remote else resolution.default_ref
    return resolution


def removal_needs_confirmation(merge_status: Optional[MergeStatus], force: bool) -> bool:
    """Whether removing a worktree must be confirmed first.

    A skipped merge check (``merge_status`` is None) never asks: the check
    is best-effort and must not block removal.
    """
    if force or merge_status is None:
        return False
    return not merge_status.is_ancestor_of_default
