"""Decision records and operation results."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set

from wtree.exceptions import ConflictingFlags


class AddMode(Enum):
    """How the base branch of a new worktree is chosen."""
    INTERACTIVE = "interactive"
    FROM_REMOTE = "from-remote"
    START_FRESH = "start-fresh"

    @classmethod
    def from_flags(cls, from_remote: bool = False, start_fresh: bool = False) -> "AddMode":
        if from_remote and start_fresh:
            raise ConflictingFlags()
        if from_remote:
            return cls.FROM_REMOTE
        if start_fresh:
            return cls.START_FRESH
        return cls.INTERACTIVE


class OperationStatus(Enum):
    SUCCESS = "success"
    DECLINED = "declined"  # User answered no; clean, not an error


class InitStatus(Enum):
    NOT_PRESENT = "not-present"
    NOT_EXECUTABLE = "not-executable"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed-out"


@dataclass
class BranchResolution:
    """Which ref a new worktree branch is forked from."""
    exists_on_remote: bool
    chosen_base: Optional[str]  # None until an interactive choice is made
    interactive_choice_required: bool = False
    remote_ref: Optional[str] = None
    default_ref: Optional[str] = None


@dataclass
class MergeStatus:
    """Whether a branch is already contained in the default branch."""
    branch_commit: str
    is_ancestor_of_default: bool
    default_ref: str


@dataclass
class ConfigTemplate:
    path: Path
    init_script: Path
    readme: Path


@dataclass
class PropagationResult:
    copied: Set[str] = field(default_factory=set)
    skipped: Set[str] = field(default_factory=set)
    failed: Dict[str, str] = field(default_factory=dict)


@dataclass
class InitResult:
    status: InitStatus
    returncode: Optional[int] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (InitStatus.NOT_PRESENT, InitStatus.SUCCEEDED)


@dataclass
class CreateRootResult:
    root: Path
    bare_store: Path
    template: ConfigTemplate
    warnings: List[str] = field(default_factory=list)
    status: OperationStatus = OperationStatus.SUCCESS


@dataclass
class AddWorktreeResult:
    name: str
    status: OperationStatus = OperationStatus.SUCCESS
    path: Optional[Path] = None
    branch: Optional[str] = None
    base_ref: Optional[str] = None
    resolution: Optional[BranchResolution] = None
    propagation: Optional[PropagationResult] = None
    init: Optional[InitResult] = None
    warnings: List[str] = field(default_factory=list)


@dataclass
class RemoveWorktreeResult:
    name: str
    status: OperationStatus = OperationStatus.SUCCESS
    path: Optional[Path] = None
    branch: Optional[str] = None
    merge_status: Optional[MergeStatus] = None
    worktree_removed: bool = False
    branch_deleted: bool = False
    branch_kept: bool = False  # User declined forced deletion
    branch_error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.branch_error is None
