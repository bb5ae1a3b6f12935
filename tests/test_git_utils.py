"""
Tests for the git subprocess helpers.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

from hq.utils.git import (
    get_branch,
    get_recent_commits,
    get_working_tree_changes,
)
from hq.utils.project import expand_path, resolve_data_file


def _completed(stdout: str = "", returncode: int = 0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr="")


class TestGitHelpers:
    """Tests for output parsing and failure handling."""

    def test_recent_commits(self):
        output = (
            "abc123\x1f2026-02-20T07:00:00+00:00\x1fAdd parser\n"
            "def456\x1f2026-02-19T07:00:00+00:00\x1fFix tempo\n"
        )
        with patch("hq.utils.git.subprocess.run", return_value=_completed(output)) as run:
            commits = get_recent_commits(Path("."), count=2)

        assert run.call_args.args[0][:3] == ["git", "log", "--max-count=2"]
        assert commits[0] == {
            "hash": "abc123",
            "message": "Add parser",
            "date": "2026-02-20T07:00:00+00:00",
        }
        assert len(commits) == 2

    def test_subject_with_separators(self):
        output = "abc123\x1f2026-02-20T07:00:00+00:00\x1fParser | renderer: split | merge\n"
        with patch("hq.utils.git.subprocess.run", return_value=_completed(output)):
            (commit,) = get_recent_commits(Path("."), count=1)

        assert commit["message"] == "Parser | renderer: split | merge"
        assert commit["date"] == "2026-02-20T07:00:00+00:00"

    def test_no_commits_outside_repo(self):
        with patch("hq.utils.git.subprocess.run", return_value=_completed(returncode=128)):
            assert get_recent_commits(Path(".")) == []

    def test_git_not_installed(self):
        with patch("hq.utils.git.subprocess.run", side_effect=FileNotFoundError("git")):
            assert get_branch(Path(".")) is None
            assert get_working_tree_changes(Path(".")) is None
            assert get_recent_commits(Path(".")) == []

    def test_branch(self):
        with patch("hq.utils.git.subprocess.run", return_value=_completed("main\n")):
            assert get_branch(Path(".")) == "main"

    def test_detached_head_has_no_branch(self):
        with patch("hq.utils.git.subprocess.run", return_value=_completed("\n")):
            assert get_branch(Path(".")) is None

    def test_working_tree_changes(self):
        output = " M src/app.py\n?? notes.md\n"
        with patch("hq.utils.git.subprocess.run", return_value=_completed(output)):
            assert get_working_tree_changes(Path(".")) == 2


class TestPaths:
    """Tests for path helpers."""

    def test_expand_home(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_path("~/Projects/x") == tmp_path / "Projects" / "x"

    def test_resolve_relative(self, tmp_path):
        assert resolve_data_file("public/data.json", tmp_path) == tmp_path / "public" / "data.json"

    def test_resolve_absolute(self, tmp_path):
        assert resolve_data_file(tmp_path / "d.json", Path("/elsewhere")) == tmp_path / "d.json"
