"""Pytest fixtures for wtree tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock

import git
import pytest

from wtree.config import Config
from wtree.core import WorktreeManager
from wtree.models.root import RepositoryRoot
from wtree.models.worktree import WorktreeInfo
from wtree.services.confirmation import ConfirmationProvider
from wtree.services.git import RepositoryStore


class ScriptedConfirmation(ConfirmationProvider):
    """Answers prompts from a list and records what was asked."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def confirm(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {prompt}")
        return self.answers.pop(0)


def _configure_identity(repo):
    with repo.config_writer() as writer:
        writer.set_value("user", "name", "Test User")
        writer.set_value("user", "email", "test@example.com")


def commit_file(repo, name: str, content: str, message: str):
    """Write a file in the repo's working tree and commit it."""
    path = Path(repo.working_tree_dir) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    repo.git.add(name)
    repo.git.commit("-m", message)
    return repo.git.rev_parse("HEAD")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def config():
    return Config(backend_timeout=60, init_timeout=30, lock_timeout=1)


@pytest.fixture
def origin_repo(temp_dir):
    """A regular repository playing the remote, with main and a feature branch."""
    repo_path = temp_dir / "origin"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure_identity(repo)

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")
    repo.git.branch("-M", "main")

    # A branch only the remote has, one commit ahead of main
    repo.git.checkout("-b", "feat-remote")
    commit_file(repo, "remote.txt", "remote work\n", "Remote feature")
    repo.git.checkout("main")

    yield repo

    repo.close()


@pytest.fixture
def trunk_only_origin(temp_dir):
    """A remote whose only branch is neither main nor master."""
    repo_path = temp_dir / "trunk-origin"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)
    _configure_identity(repo)
    commit_file(repo, "README.md", "# Trunk\n", "Initial commit")
    repo.git.branch("-M", "trunk")

    yield repo

    repo.close()


@pytest.fixture
def manager_factory(config):
    def make(*answers):
        confirmation = ScriptedConfirmation(*answers)
        return WorktreeManager(config, confirmation=confirmation), confirmation
    return make


@pytest.fixture
def wtree_root(temp_dir, origin_repo, config):
    """A fully created root cloned from origin_repo."""
    manager = WorktreeManager(config, confirmation=ScriptedConfirmation())
    manager.create_root(origin_repo.working_tree_dir, "project", parent=temp_dir)
    root = RepositoryRoot(temp_dir / "project")

    # Commits made inside worktrees need an identity; worktrees share this config
    with git.Repo(root.bare_store_path) as bare:
        _configure_identity(bare)

    return root


@pytest.fixture
def fake_root(temp_dir):
    """A root that passes validation without any git behind it."""
    root = RepositoryRoot(temp_dir / "fake")
    root.bare_store_path.mkdir(parents=True)
    root.template_path.mkdir()
    return root


@pytest.fixture
def mock_store():
    """A RepositoryStore double with a healthy remote that has origin/main."""
    store = Mock(spec=RepositoryStore)
    store.remote_ref.side_effect = lambda branch: f"origin/{branch}"
    store.resolve_default_branch.return_value = "origin/main"
    store.remote_branch_exists.return_value = False
    store.local_branch_exists.return_value = False
    store.is_ancestor.return_value = True
    store.resolve_commit.return_value = "abc1234def"
    store.delete_branch.return_value = True
    store.list_worktrees.return_value = []
    store.find_worktree.return_value = None

    def add_worktree(path, new_branch, base_ref, reset_branch=False):
        Path(path).mkdir(parents=True)
    store.add_worktree.side_effect = add_worktree

    return store


@pytest.fixture
def store_factory(mock_store):
    factory = Mock(return_value=mock_store)
    factory.initialize = Mock(return_value=mock_store)
    return factory


@pytest.fixture
def make_worktree_info():
    def make(path, branch="feat-x", sha="abc1234def"):
        return WorktreeInfo(path=str(path), branch_name=branch, commit_sha=sha)
    return make
