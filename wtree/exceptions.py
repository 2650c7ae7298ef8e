"""Custom exceptions for wtree"""

from typing import Optional


class WtreeError(Exception):
    """Base exception for all wtree errors."""
    pass


class ValidationError(WtreeError):
    """Missing, malformed or conflicting input. Raised before any mutation."""
    pass


class InvalidName(ValidationError):
    """Exception raised when a worktree or root name is unusable."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid name '{name}': {reason}")


class TargetExists(ValidationError):
    """Exception raised when the target directory already exists."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory '{path}' already exists")


class ConflictingFlags(ValidationError):
    """Exception raised when --from-remote and --start-fresh are combined."""

    def __init__(self):
        super().__init__("--from-remote and --start-fresh cannot be used together")


class ConfirmationUnavailable(ValidationError):
    """Exception raised when a prompt is needed but nobody can answer it."""

    def __init__(self, prompt: str, hint: Optional[str] = None):
        self.prompt = prompt
        message = f"Confirmation required but running non-interactively: {prompt}"
        if hint:
            message += f" ({hint})"
        super().__init__(message)


class BackendError(WtreeError):
    """Exception raised for errors in git backend operations."""

    def __init__(self, operation: str, message: Optional[str] = None, ref: Optional[str] = None):
        self.operation = operation
        self.message = message
        self.ref = ref

        error_msg = f"Git operation '{operation}' failed"
        if ref:
            error_msg += f" for '{ref}'"
        if message:
            error_msg += f": {message}"

        super().__init__(error_msg)


class CloneFailed(BackendError):
    def __init__(self, url: str, message: Optional[str] = None):
        super().__init__("clone", message, url)


class ConfigFailed(BackendError):
    def __init__(self, message: Optional[str] = None):
        super().__init__("config", message)


class FetchFailed(BackendError):
    def __init__(self, remote: str, message: Optional[str] = None):
        super().__init__("fetch", message, remote)


class WorktreeCreateFailed(BackendError):
    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__("worktree add", message, path)


class WorktreeRemoveFailed(BackendError):
    def __init__(self, path: str, message: Optional[str] = None):
        super().__init__("worktree remove", message, path)


class BranchDeleteFailed(BackendError):
    def __init__(self, branch: str, message: Optional[str] = None):
        super().__init__("branch delete", message, branch)


class BackendTimeout(BackendError):
    """Exception raised when a backend call exceeds its time limit."""

    def __init__(self, operation: str, timeout: float, ref: Optional[str] = None):
        self.timeout = timeout
        super().__init__(operation, f"timed out after {timeout:g}s", ref)


class StateError(WtreeError):
    """The on-disk or repository state does not allow the operation."""
    pass


class NotARoot(StateError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"Not in a wtree repository: '{path}' (no .bare-store found). "
            "Run this command from the repository root or pass --root"
        )


class NotAWorktree(StateError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"'{path}' is not a registered worktree")


class NoDefaultBranch(StateError):
    def __init__(self, remote: str):
        self.remote = remote
        super().__init__(f"Could not find {remote}/main or {remote}/master branch")


class RemoteBranchNotFound(StateError):
    def __init__(self, ref: str):
        self.ref = ref
        super().__init__(f"Remote branch '{ref}' does not exist")


class LocalBranchDiverged(StateError):
    """Exception raised when a local branch would lose commits if reset."""

    def __init__(self, branch: str, base: str):
        self.branch = branch
        self.base = base
        super().__init__(
            f"Local branch '{branch}' already exists and has commits not in '{base}'"
        )


class RootLocked(StateError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Another wtree command is operating on '{path}'")


class ProvisioningError(WtreeError):
    """Exception raised while laying out files on disk."""
    pass


class TemplateInitFailed(ProvisioningError):
    def __init__(self, path: str, message: Optional[str] = None):
        self.path = path
        error_msg = f"Failed to create worktree configuration at '{path}'"
        if message:
            error_msg += f": {message}"
        super().__init__(error_msg)
