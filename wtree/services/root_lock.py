"""Advisory lock on a repository root."""

import time
from contextlib import contextmanager

from wtree.exceptions import RootLocked
from wtree.models.root import RepositoryRoot
from wtree.utils.logging import get_logger

# Import fcntl for POSIX file locking (Unix/Linux/macOS)
try:
    import fcntl
    HAS_FCNTL = True
except ImportError:
    HAS_FCNTL = False

logger = get_logger(__name__)

_POLL_INTERVAL = 0.1


@contextmanager
def root_lock(root: RepositoryRoot, timeout: float = 10.0):
    """Hold an exclusive lock on ``root`` for the duration of the block.

    Waits up to ``timeout`` seconds for another invocation to finish, then
    raises RootLocked.
    """
    if not HAS_FCNTL:
        logger.debug("File locking not available on this platform")
        yield
        return

    with open(root.lock_path, "a") as lock_file:
        deadline = time.monotonic() + timeout
        while True:
            try:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise RootLocked(str(root.path))
                time.sleep(_POLL_INTERVAL)

        logger.debug(f"Acquired lock on {root.lock_path}")
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            logger.debug(f"Released lock on {root.lock_path}")
