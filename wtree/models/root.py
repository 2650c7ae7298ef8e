"""Repository root handle."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from wtree.constants import (
    BARE_STORE_DIR,
    INIT_SCRIPT_NAME,
    LOCK_FILE_NAME,
    RESERVED_ROOT_ENTRIES,
    TEMPLATE_DIR,
    TEMPLATE_README_NAME,
)
from wtree.exceptions import InvalidName, NotARoot


@dataclass(frozen=True)
class RepositoryRoot:
    """A directory holding one bare store, one config template and worktrees.

    The path is always absolute so nothing downstream depends on the
    process working directory.
    """

    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(os.path.abspath(self.path)))

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def bare_store_path(self) -> Path:
        return self.path / BARE_STORE_DIR

    @property
    def template_path(self) -> Path:
        return self.path / TEMPLATE_DIR

    @property
    def init_script_path(self) -> Path:
        return self.template_path / INIT_SCRIPT_NAME

    @property
    def readme_path(self) -> Path:
        return self.template_path / TEMPLATE_README_NAME

    @property
    def lock_path(self) -> Path:
        return self.bare_store_path / LOCK_FILE_NAME

    def worktree_path(self, name: str) -> Path:
        """Location of the worktree called ``name``."""
        validate_worktree_name(name)
        return self.path / name

    def is_valid(self) -> bool:
        return self.bare_store_path.is_dir()

    def require_valid(self) -> "RepositoryRoot":
        if not self.is_valid():
            raise NotARoot(str(self.path))
        return self

    @classmethod
    def discover(cls, start: Optional[Union[str, Path]] = None) -> "RepositoryRoot":
        """Find the nearest root at or above ``start`` (defaults to cwd)."""
        start_path = Path(os.path.abspath(start or os.getcwd()))
        for candidate in (start_path, *start_path.parents):
            if (candidate / BARE_STORE_DIR).is_dir():
                return cls(candidate)
        raise NotARoot(str(start_path))


def validate_worktree_name(name: str) -> str:
    """Reject names that would escape the root or shadow reserved entries."""
    if not name or not name.strip():
        raise InvalidName(name, "name cannot be empty")
    if name != name.strip():
        raise InvalidName(name, "name cannot start or end with whitespace")
    if name.startswith("-"):
        raise InvalidName(name, "name cannot start with '-'")
    if os.path.isabs(name) or name.startswith("/"):
        raise InvalidName(name, "name must be relative")

    parts = name.split("/")
    if any(part in ("", ".", "..") for part in parts):
        raise InvalidName(name, "name cannot contain empty, '.' or '..' path components")
    if parts[0] in RESERVED_ROOT_ENTRIES:
        raise InvalidName(name, f"'{parts[0]}' is reserved")
    return name
