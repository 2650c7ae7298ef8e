"""Logging configuration for wtree"""
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_DIR = Path.home() / ".wtree"
LOG_FILE_NAME = "wtree.log"

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _console_level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.INFO if verbose else logging.WARNING


def _file_handler(log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    # One log per run
    handler = logging.FileHandler(log_dir / LOG_FILE_NAME, mode="w")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(
    verbose: bool = False, debug: bool = False, log_dir: Optional[Path] = None
) -> None:
    """
    Configure logging for the application.

    Diagnostics go to stderr through rich so they never mix with command
    output on stdout.

    Args:
        verbose: Show INFO messages
        debug: Show DEBUG messages with timestamps and source locations, and
            also write everything to ``<log_dir>/wtree.log``
        log_dir: Directory for the debug log file, ``~/.wtree`` by default
    """
    level = _console_level(verbose, debug)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_time=debug,
        show_path=debug,
        markup=False,
    )
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("[%(name)s] %(message)s"))
    root_logger.addHandler(console_handler)

    if debug:
        root_logger.addHandler(_file_handler(log_dir or LOG_DIR))

    # GitPython logs every command it runs at DEBUG
    logging.getLogger("git").setLevel(logging.DEBUG if debug else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Logger named after the module, without the ``wtree.`` prefix."""
    if name.startswith("wtree."):
        name = name[len("wtree."):]
    return logging.getLogger(name)
