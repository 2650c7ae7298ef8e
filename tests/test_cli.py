"""Tests for the command-line interface"""
import io
from unittest.mock import Mock, patch

import pytest

from wtree.cli.args import parse_args
from wtree.cli.main import main, run
from wtree.exceptions import NotAWorktree
from wtree.models.results import AddMode, AddWorktreeResult, OperationStatus, RemoveWorktreeResult


class TestParseArgs:
    """Test argument parsing."""

    def test_clone(self):
        args = parse_args(["clone", "https://example.com/r.git", "proj"])
        assert args.command == "clone"
        assert args.repository == "https://example.com/r.git"
        assert args.name == "proj"

    def test_add_flags_are_mutually_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["add", "feat-x", "--from-remote", "--start-fresh"])

    def test_remove_force(self):
        args = parse_args(["remove", "feat-x", "--force"])
        assert args.force is True

    def test_timeout_from_environment(self, monkeypatch):
        monkeypatch.setenv("WTREE_TIMEOUT", "12.5")
        assert parse_args(["list"]).timeout == 12.5

    def test_command_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestRun:
    """Test dispatching to the manager."""

    def test_add_passes_mode(self, fake_root):
        manager = Mock()
        manager.add_worktree.return_value = AddWorktreeResult(name="feat-x", path=fake_root.path / "feat-x")
        args = parse_args(["--root", str(fake_root.path), "add", "feat-x", "--start-fresh"])

        assert run(args, manager) == 0
        root, name, mode = manager.add_worktree.call_args[0]
        assert root == fake_root
        assert name == "feat-x"
        assert mode is AddMode.START_FRESH

    def test_declined_removal_exits_zero(self, fake_root):
        manager = Mock()
        manager.remove_worktree.return_value = RemoveWorktreeResult(
            name="feat-x", status=OperationStatus.DECLINED
        )
        args = parse_args(["--root", str(fake_root.path), "remove", "feat-x"])

        assert run(args, manager) == 0

    def test_branch_error_exits_one(self, fake_root):
        manager = Mock()
        manager.remove_worktree.return_value = RemoveWorktreeResult(
            name="feat-x", worktree_removed=True, branch_error="Git operation 'branch delete' failed"
        )
        args = parse_args(["--root", str(fake_root.path), "remove", "feat-x"])

        assert run(args, manager) == 1

    def test_root_is_discovered(self, fake_root, monkeypatch):
        monkeypatch.chdir(fake_root.path)
        manager = Mock()
        manager.list_worktrees.return_value = []

        assert run(parse_args(["list"]), manager) == 0
        assert manager.list_worktrees.call_args[0][0] == fake_root


class TestMain:
    """Test exit status mapping."""

    def test_error_exits_one(self, fake_root, capsys):
        with patch("wtree.cli.main.WorktreeManager") as manager_cls:
            manager_cls.return_value.remove_worktree.side_effect = NotAWorktree("/x/ghost")
            status = main(["--root", str(fake_root.path), "--no-interactive", "remove", "ghost"])

        assert status == 1
        assert "not a registered worktree" in capsys.readouterr().err

    def test_outside_root_exits_one(self, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        assert main(["list"]) == 1

    def test_end_to_end_clone_and_list(self, temp_dir, origin_repo, monkeypatch, capsys):
        monkeypatch.chdir(temp_dir)

        assert main(["--no-interactive", "clone", origin_repo.working_tree_dir, "proj"]) == 0
        assert (temp_dir / "proj" / ".bare-store").is_dir()

        monkeypatch.chdir(temp_dir / "proj")
        assert main(["--no-interactive", "add", "feat-x"]) == 0
        assert (temp_dir / "proj" / "feat-x" / "README.md").exists()

        assert main(["list"]) == 0
        assert "feat-x" in capsys.readouterr().out

    def test_closed_stdin_at_prompt_exits_one(self, wtree_root, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO(""))

        status = main(["--root", str(wtree_root.path), "add", "feat-remote"])

        assert status == 1
        assert "non-interactively" in capsys.readouterr().err
        assert not (wtree_root.path / "feat-remote").exists()
