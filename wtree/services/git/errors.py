"""Translation of GitPython command failures into wtree errors."""

from typing import Callable, Optional

import git

from wtree.exceptions import BackendError, BackendTimeout

# GitPython rewrites stderr of a command killed by its watchdog to this prefix
_TIMEOUT_MARKER = "Timeout:"


def describe_git_error(error: git.exc.GitCommandError) -> str:
    """Short human readable summary of a failed git command."""
    stderr = (error.stderr if hasattr(error, "stderr") else str(error)) or ""
    stderr = stderr.strip()
    if stderr.startswith("stderr:"):
        stderr = stderr[len("stderr:"):].strip().strip("'").strip()
    status = error.status if hasattr(error, "status") else "unknown"

    if stderr:
        return f"exit {status}: {stderr}"
    return f"exit code {status}"


def is_timeout(error: git.exc.GitCommandError) -> bool:
    return _TIMEOUT_MARKER in str(getattr(error, "stderr", "") or "")


def translate_git_error(
    error: git.exc.GitCommandError,
    operation: str,
    timeout: Optional[float],
    factory: Callable[[str], BackendError],
    ref: Optional[str] = None,
) -> BackendError:
    """Map a GitCommandError onto the error taxonomy.

    A command killed by the timeout watchdog always becomes BackendTimeout,
    whatever operation it was part of.
    """
    if timeout is not None and is_timeout(error):
        return BackendTimeout(operation, timeout, ref)
    return factory(describe_git_error(error))
