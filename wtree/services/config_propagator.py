"""Config Propagator: the worktree-config template and its delivery into worktrees."""

import os
import shutil
import stat
import subprocess
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from wtree.constants import (
    DEFAULT_INIT_SCRIPT,
    DEFAULT_TEMPLATE_README,
    RESERVED_TEMPLATE_ENTRIES,
)
from wtree.exceptions import TemplateInitFailed
from wtree.models.results import ConfigTemplate, InitResult, InitStatus, PropagationResult
from wtree.models.root import RepositoryRoot
from wtree.utils.logging import get_logger

if TYPE_CHECKING:
    from wtree.config import Config

logger = get_logger(__name__)


class ConfigPropagator:
    """Owns ``<root>/worktree-config`` and copies it into new worktrees."""

    def __init__(self, root: RepositoryRoot, config: Union["Config", dict]):
        self.root = root
        self.config = config
        self.init_timeout = config.get("init_timeout", None)

    @property
    def template(self) -> ConfigTemplate:
        return ConfigTemplate(
            path=self.root.template_path,
            init_script=self.root.init_script_path,
            readme=self.root.readme_path,
        )

    def materialize_template(self) -> ConfigTemplate:
        """Create the template directory with an executable placeholder init script.

        Existing content is left alone. The README is written separately by
        write_readme since it is not essential.
        """
        template = self.template
        try:
            template.path.mkdir(parents=True, exist_ok=True)
            if not template.init_script.exists():
                template.init_script.write_text(DEFAULT_INIT_SCRIPT)
            mode = template.init_script.stat().st_mode
            template.init_script.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        except OSError as e:
            raise TemplateInitFailed(str(template.path), str(e))

        logger.debug(f"Template ready at {template.path}")
        return template

    def write_readme(self) -> Optional[str]:
        """Write the template README. Returns a warning message on failure."""
        readme = self.template.readme
        if readme.exists():
            return None
        try:
            readme.write_text(DEFAULT_TEMPLATE_README)
        except OSError as e:
            warning = f"Could not write {readme}: {e}"
            logger.warning(warning)
            return warning
        return None

    def propagate(self, worktree_path: Union[str, Path]) -> PropagationResult:
        """Copy every non-reserved template entry into ``worktree_path``.

        Entries that already exist in the worktree are skipped, never overwritten.
        """
        worktree_path = Path(worktree_path)
        result = PropagationResult()
        template_dir = self.template.path

        if not template_dir.is_dir():
            logger.debug(f"No template directory at {template_dir}, nothing to copy")
            return result

        for entry in sorted(template_dir.iterdir()):
            name = entry.name
            if name in RESERVED_TEMPLATE_ENTRIES:
                continue

            target = worktree_path / name
            if target.exists() or target.is_symlink():
                logger.debug(f"Skipping {name}: already present in worktree")
                result.skipped.add(name)
                continue

            try:
                if entry.is_dir() and not entry.is_symlink():
                    shutil.copytree(entry, target, symlinks=True)
                else:
                    shutil.copy2(entry, target, follow_symlinks=False)
                result.copied.add(name)
                logger.debug(f"Copied {name} into {worktree_path}")
            except OSError as e:
                logger.warning(f"Could not copy {name} into {worktree_path}: {e}")
                result.failed[name] = str(e)

        return result

    def run_init(self, worktree_path: Union[str, Path]) -> InitResult:
        """Run the init script from inside ``worktree_path``.

        Failures are reported in the result, never raised.
        """
        script = self.template.init_script
        if not script.is_file():
            return InitResult(InitStatus.NOT_PRESENT)
        if not os.access(script, os.X_OK):
            message = f"{script} is not executable, skipping"
            logger.warning(message)
            return InitResult(InitStatus.NOT_EXECUTABLE, message=message)

        logger.info(f"Running initialization script in {worktree_path}")
        try:
            completed = subprocess.run(
                [str(script)], cwd=str(worktree_path), timeout=self.init_timeout
            )
        except subprocess.TimeoutExpired:
            message = f"Initialization script timed out after {self.init_timeout:g}s"
            logger.warning(message)
            return InitResult(InitStatus.TIMED_OUT, message=message)
        except OSError as e:
            message = f"Initialization script could not be started: {e}"
            logger.warning(message)
            return InitResult(InitStatus.FAILED, message=message)

        if completed.returncode != 0:
            message = f"Initialization script failed (exit {completed.returncode})"
            logger.warning(message)
            return InitResult(InitStatus.FAILED, returncode=completed.returncode, message=message)

        return InitResult(InitStatus.SUCCEEDED, returncode=0)
