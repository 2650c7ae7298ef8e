"""Tests for the repository root handle and name validation"""
import pytest

from wtree.exceptions import InvalidName, NotARoot
from wtree.models.root import RepositoryRoot, validate_worktree_name
from wtree.models.worktree import WorktreeInfo


class TestValidateWorktreeName:
    """Test worktree name validation."""

    @pytest.mark.parametrize("name", ["feat-x", "feature/login", "v1.2", "main"])
    def test_accepts_branch_like_names(self, name):
        assert validate_worktree_name(name) == name

    @pytest.mark.parametrize(
        "name",
        ["", "   ", "-rf", "/abs/path", "../escape", "a/../b", "a//b", ".", ".bare-store", "worktree-config/x"],
    )
    def test_rejects_unusable_names(self, name):
        with pytest.raises(InvalidName):
            validate_worktree_name(name)


class TestRepositoryRoot:
    """Test the root handle."""

    def test_layout_paths(self, temp_dir):
        root = RepositoryRoot(temp_dir / "proj")
        assert root.bare_store_path == temp_dir / "proj" / ".bare-store"
        assert root.template_path == temp_dir / "proj" / "worktree-config"
        assert root.init_script_path == root.template_path / "worktree-Init.sh"
        assert root.readme_path == root.template_path / "README.md"
        assert root.worktree_path("feat-x") == temp_dir / "proj" / "feat-x"

    def test_path_is_made_absolute(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        root = RepositoryRoot("proj")
        assert root.path == temp_dir / "proj"

    def test_require_valid_without_bare_store(self, temp_dir):
        with pytest.raises(NotARoot):
            RepositoryRoot(temp_dir).require_valid()

    def test_discover_walks_up(self, fake_root):
        nested = fake_root.path / "feat-x" / "src"
        nested.mkdir(parents=True)
        assert RepositoryRoot.discover(nested) == fake_root

    def test_discover_outside_root(self, temp_dir):
        with pytest.raises(NotARoot):
            RepositoryRoot.discover(temp_dir)


class TestWorktreeInfo:
    """Test the worktree record."""

    def test_detached(self):
        assert WorktreeInfo(path="/r/x", branch_name="", commit_sha="abc").is_detached is True

    def test_bare_entry_is_not_detached(self):
        assert WorktreeInfo(path="/r/.bare-store", branch_name="", commit_sha="", is_bare=True).is_detached is False

    def test_str(self):
        info = WorktreeInfo(path="/r/x", branch_name="x", commit_sha="abc")
        assert str(info) == "x @ /r/x [active]"
