"""Tests for logging configuration"""
import logging

import pytest
from rich.logging import RichHandler

from wtree.utils.logging import LOG_FILE_NAME, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers, level = list(root_logger.handlers), root_logger.level
    git_level = logging.getLogger("git").level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logging.getLogger("git").setLevel(git_level)


class TestSetupLogging:
    """Test logging setup."""

    def test_default_level_is_warning(self):
        setup_logging()
        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], RichHandler)

    def test_verbose(self):
        setup_logging(verbose=True)
        assert logging.getLogger().level == logging.INFO

    def test_repeated_setup_does_not_stack_handlers(self):
        setup_logging()
        setup_logging(verbose=True)
        assert len(logging.getLogger().handlers) == 1

    def test_debug_writes_log_file(self, temp_dir):
        setup_logging(debug=True, log_dir=temp_dir / "logs")

        get_logger("wtree.core.worktree_manager").debug("hello from the engine")
        for handler in logging.getLogger().handlers:
            handler.flush()

        log_text = (temp_dir / "logs" / LOG_FILE_NAME).read_text()
        assert "core.worktree_manager: hello from the engine" in log_text
        assert logging.getLogger("git").level == logging.DEBUG

    def test_git_logger_quiet_by_default(self):
        setup_logging(verbose=True)
        assert logging.getLogger("git").level == logging.WARNING


def test_get_logger_strips_package_prefix():
    assert get_logger("wtree.services.git.store").name == "services.git.store"
    assert get_logger("other.module").name == "other.module"
