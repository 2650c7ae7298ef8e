"""Rendering of lifecycle results for the terminal.

Functions return Rich markup strings; printing is left to the caller.
"""

from typing import List

from rich.markup import escape

from wtree.models.results import (
    AddWorktreeResult,
    CreateRootResult,
    InitStatus,
    OperationStatus,
    RemoveWorktreeResult,
)
from wtree.models.worktree import WorktreeInfo


def _format_names(names) -> str:
    return escape(", ".join(sorted(names)))


def format_warnings(warnings: List[str]) -> List[str]:
    return [f"[yellow]⚠️  Warning: {escape(warning)}[/yellow]" for warning in warnings]


def format_create_root(result: CreateRootResult) -> List[str]:
    lines = format_warnings(result.warnings)
    lines += [
        f"[green]✅ Success! Repository cloned to '{result.bare_store}'[/green]",
        f"💡 Use 'wtree add <branch-name>' from within '{result.root}' to create worktrees",
        f"📂 Configuration stored in '{result.template.path}'",
    ]
    return lines


def format_add_worktree(result: AddWorktreeResult) -> List[str]:
    lines = []
    resolution = result.resolution
    if resolution is not None:
        if result.base_ref == resolution.remote_ref:
            lines.append(f"✓ Created from remote branch '{result.base_ref}'")
        elif resolution.exists_on_remote:
            lines.append(f"✓ Created from {result.base_ref}")
        else:
            lines.append(
                f"ℹ️  Branch does not exist on remote. Created new branch from {result.base_ref}."
            )

    propagation = result.propagation
    if propagation is not None:
        if propagation.copied:
            lines.append(f"📝 Copied from worktree-config: {_format_names(propagation.copied)}")
        if propagation.skipped:
            lines.append(f"[dim]Already present, not copied: {_format_names(propagation.skipped)}[/dim]")

    if result.init is not None and result.init.status is InitStatus.SUCCEEDED:
        lines.append("⚙️  Initialization script completed")

    lines += format_warnings(result.warnings)
    lines += [
        f"[green]✅ Success! Worktree created at '{result.path}'[/green]",
        f"💡 Use 'cd {result.name}' to switch to the new worktree",
    ]
    return lines


def format_remove_worktree(result: RemoveWorktreeResult) -> List[str]:
    if result.status is OperationStatus.DECLINED:
        return [f"[yellow]Cancelled, '{result.name}' was left untouched[/yellow]"]

    lines = format_warnings(result.warnings)
    if result.worktree_removed:
        lines.append(f"[green]✅ Removed worktree '{result.path}'[/green]")
    if result.branch_deleted:
        lines.append(f"[green]✅ Deleted branch '{result.branch}'[/green]")
    elif result.branch_kept:
        lines.append(f"[yellow]Branch '{result.branch}' was kept[/yellow]")
    if result.branch_error:
        lines.append(f"[red]Error: {escape(result.branch_error)}[/red]")
    return lines


def format_worktree_list(worktrees: List[WorktreeInfo]) -> List[str]:
    if not worktrees:
        return ["[dim]No worktrees yet[/dim]"]
    lines = []
    for wt in worktrees:
        branch = wt.branch_name or "(detached)"
        marker = " [yellow]\\[prunable][/yellow]" if wt.is_prunable else ""
        lines.append(f"{escape(branch):<30} {wt.commit_sha[:7]}  {escape(wt.path)}{marker}")
    return lines
