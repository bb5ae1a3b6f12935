"""
Tests for the hq CLI commands.

Commands run through typer.testing.CliRunner against documents in tmp_path.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from hq import __version__
from hq.cli import app
from hq.core.exceptions import MigrationError
from hq.core.migrate import MigrationPlan, TaskFile
from hq.core.store import DocumentStore

runner = CliRunner()


def _invoke(data_file, *args):
    return runner.invoke(app, ["--data-file", str(data_file), *args])


class TestVersionAndHelp:
    """Tests for top-level options."""

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize("flag", ["--help", "-h"])
    def test_help(self, flag):
        result = runner.invoke(app, [flag])
        assert result.exit_code == 0
        for command in ("scan", "status", "done", "current", "migrate", "serve"):
            assert command in result.output


class TestDone:
    """Tests for hq done."""

    def test_marks_done_and_persists(self, data_file):
        result = _invoke(data_file, "done", "loomiverse-s1")
        assert result.exit_code == 0
        assert "Renderer" in result.output

        document = DocumentStore(data_file).load()
        assert document.meta.last_updated != "2026-01-01T00:00:00.000Z"
        task = document.projects[0].milestones[0].tasks[1]
        assert task.subtasks[0].done is True
        assert task.subtasks[0].completed_at is not None
        assert task.subtasks[1].current is True

    def test_not_found(self, data_file):
        before = data_file.read_text()
        result = _invoke(data_file, "done", "nope")
        assert result.exit_code == 1
        assert "Task not found: nope" in result.output
        assert data_file.read_text() == before

    def test_missing_argument(self, data_file):
        result = _invoke(data_file, "done")
        assert result.exit_code == 2

    def test_missing_store(self, tmp_path):
        result = _invoke(tmp_path / "missing.json", "done", "x")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_malformed_store(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{broken")
        result = _invoke(path, "done", "x")
        assert result.exit_code == 1


class TestCurrent:
    """Tests for hq current."""

    def test_sets_single_focus(self, data_file):
        result = _invoke(data_file, "current", "loomiverse-t3")
        assert result.exit_code == 0

        data = json.loads(data_file.read_text())
        assert data["meta"]["focus"] == {
            "project": "loomiverse",
            "milestone": "loomiverse-phase-2",
            "task": "loomiverse-t3",
        }
        flags = [
            node["id"]
            for project in data["projects"]
            for milestone in project["milestones"]
            for node in [milestone, *milestone["tasks"]]
            if node.get("current")
        ]
        assert flags == ["loomiverse-phase-2", "loomiverse-t3"]

    def test_not_found(self, data_file):
        result = _invoke(data_file, "current", "nope")
        assert result.exit_code == 1


class TestStatus:
    """Tests for hq status."""

    def test_table(self, data_file):
        result = _invoke(data_file, "status")
        assert result.exit_code == 0
        assert "Loomiverse" in result.output
        assert "33% overall" in result.output

    def test_json(self, data_file):
        result = _invoke(data_file, "status", "--json")
        assert result.exit_code == 0
        report = json.loads(result.output)
        assert report["progress"] == 33
        loomiverse = report["projects"][0]
        assert (loomiverse["done"], loomiverse["total"]) == (1, 5)
        assert loomiverse["current"] == ["loomiverse-phase-1", "loomiverse-t2", "loomiverse-s1"]

    def test_json_lists_every_id(self, data_file):
        report = json.loads(_invoke(data_file, "status", "--json").output)
        nodes = report["projects"][0]["nodes"]
        assert [n["id"] for n in nodes] == [
            "loomiverse-phase-1",
            "loomiverse-t1",
            "loomiverse-t2",
            "loomiverse-s1",
            "loomiverse-s2",
            "loomiverse-s3",
            "loomiverse-phase-2",
            "loomiverse-t3",
        ]
        assert nodes[3] == {"id": "loomiverse-s1", "kind": "subtask", "name": "Parser", "done": False}

    def test_missing_store(self, tmp_path):
        result = _invoke(tmp_path / "missing.json", "status")
        assert result.exit_code == 1

    def test_data_file_from_env(self, data_file, monkeypatch):
        monkeypatch.setenv("HQ_DATA_FILE", str(data_file))
        result = runner.invoke(app, ["status", "--json"])
        assert result.exit_code == 0


class TestScan:
    """Tests for hq scan against local checkouts."""

    @pytest.fixture
    def project_config(self, isolated_env, roadmap_repo):
        config = {"local": {"project_paths": {"genesis": str(roadmap_repo)}}}
        (isolated_env / ".hq.json").write_text(json.dumps(config))

    def test_scan_all(self, project_config, tmp_path):
        out = tmp_path / "out" / "data.json"
        result = _invoke(out, "scan")
        assert result.exit_code == 0, result.output

        data = json.loads(out.read_text())
        assert data["meta"]["lastScanType"] == "auto"
        assert data["meta"]["projectCount"] == 1
        milestones = data["projects"][0]["milestones"]
        assert [m["name"] for m in milestones] == ["Phase 1", "Phase 2"]

    def test_scan_single_project_keeps_others(self, project_config, data_file):
        result = _invoke(data_file, "scan", "--project", "genesis")
        assert result.exit_code == 0, result.output

        data = json.loads(data_file.read_text())
        # more checklist files sort first among active projects
        assert [p["id"] for p in data["projects"]] == ["genesis", "loomiverse", "dj-loop"]

    def test_unknown_project(self, project_config, data_file):
        result = _invoke(data_file, "scan", "--project", "nope")
        assert result.exit_code == 1
        assert "Project not found" in result.output

    def test_invalid_config(self, isolated_env, tmp_path):
        config = {"projects": {"genesis": {"status": "sleeping"}}}
        (isolated_env / ".hq.json").write_text(json.dumps(config))

        result = _invoke(tmp_path / "data.json", "scan")
        assert result.exit_code == 1
        assert "Configuration is invalid" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)


class TestMigrate:
    """Tests for hq migrate."""

    def test_requires_repo_or_all(self):
        result = runner.invoke(app, ["migrate"])
        assert result.exit_code == 2

    def test_rejects_both(self):
        result = runner.invoke(app, ["migrate", "--repo", "o/r", "--all"])
        assert result.exit_code == 2

    def test_invalid_repo(self):
        result = runner.invoke(app, ["migrate", "--repo", "just-a-name"])
        assert result.exit_code == 2

    def test_all_without_configured_repos(self):
        result = runner.invoke(app, ["migrate", "--all"])
        assert result.exit_code == 2

    def test_dry_run(self):
        plan = MigrationPlan(
            repo="octocat/genesis",
            candidates=["PRD.md"],
            files=[TaskFile(file_name="01-audio.md", content="# Audio\n", done=1, total=2)],
        )

        async def fake_plan(source, repo):
            return plan

        with (
            patch("hq.cli.migrate.plan_migration", side_effect=fake_plan),
            patch("hq.core.migrate.publisher.subprocess.run") as run,
        ):
            result = runner.invoke(app, ["migrate", "--repo", "octocat/genesis", "--dry-run"])

        assert result.exit_code == 0, result.output
        assert "DRY RUN" in result.output
        assert "tasks/01-audio.md (1/2 done)" in result.output
        run.assert_not_called()

    def test_publish_failure_exit_code(self):
        plan = MigrationPlan(
            repo="octocat/genesis",
            candidates=["PRD.md"],
            files=[TaskFile(file_name="01-audio.md", content="# Audio\n", done=0, total=1)],
        )

        async def fake_plan(source, repo):
            return plan

        with (
            patch("hq.cli.migrate.plan_migration", side_effect=fake_plan),
            patch(
                "hq.cli.migrate.publish_task_files",
                side_effect=MigrationError("octocat/genesis", "git push failed: rejected"),
            ),
        ):
            result = runner.invoke(app, ["migrate", "--repo", "octocat/genesis"])

        assert result.exit_code == 1
        assert "rejected" in result.output
