"""
Pytest configuration and shared fixtures.

Provides fixtures for an isolated config environment, sample documents,
checklist repositories on disk, and an in-memory content source.
"""

import json
from datetime import datetime, timezone

import pytest

from hq.core.config import HQConfig, clear_cache
from hq.core.sources.models import CommitInfo, RepoActivity, RepoRef
from hq.core.store.models import Document, Meta, Milestone, Project, TaskNode

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """
    Keep every test away from the real user config, .env files and tokens.

    Runs each test from an empty working directory.
    """
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    # Registered with monkeypatch so values loaded from .env files are removed afterwards
    for name in ("HQ_DATA_FILE", "HQ_BATCH_SIZE", "HQ_GITHUB_ACCOUNTS", "GITHUB_TOKEN"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    clear_cache()
    yield workdir
    clear_cache()


@pytest.fixture
def config():
    """Default configuration."""
    return HQConfig()


# ==============================================================================
# Repository Fixtures
# ==============================================================================


@pytest.fixture
def roadmap_repo(tmp_path):
    """A local checkout holding a single ROADMAP.md (no git)."""
    repo = tmp_path / "repos" / "genesis"
    repo.mkdir(parents=True)
    (repo / "ROADMAP.md").write_text("## Phase 1\n- [x] A\n- [ ] B\n## Phase 2\n- [ ] C\n")
    return repo


# ==============================================================================
# Document Fixtures
# ==============================================================================


@pytest.fixture
def sample_document():
    """
    Two projects; the first has a task with three subtasks.

    loomiverse
      loomiverse-phase-1 (current)
        loomiverse-t1 (done)
        loomiverse-t2 (current)
          loomiverse-s1 (current), loomiverse-s2, loomiverse-s3
      loomiverse-phase-2
        loomiverse-t3
    dj-loop
      dj-loop-activity (current)
        dj-loop-commit-abc1234 (done)
    """
    return Document(
        meta=Meta(last_updated="2026-01-01T00:00:00.000Z", version="2.0.0"),
        projects=[
            Project(
                id="loomiverse",
                name="Loomiverse",
                status="active",
                milestones=[
                    Milestone(
                        id="loomiverse-phase-1",
                        name="Phase 1",
                        current=True,
                        tasks=[
                            TaskNode(id="loomiverse-t1", name="Setup", done=True),
                            TaskNode(
                                id="loomiverse-t2",
                                name="Story engine",
                                current=True,
                                subtasks=[
                                    TaskNode(id="loomiverse-s1", name="Parser", current=True),
                                    TaskNode(id="loomiverse-s2", name="Renderer"),
                                    TaskNode(id="loomiverse-s3", name="Exporter"),
                                ],
                            ),
                        ],
                    ),
                    Milestone(
                        id="loomiverse-phase-2",
                        name="Phase 2",
                        tasks=[TaskNode(id="loomiverse-t3", name="Launch")],
                    ),
                ],
            ),
            Project(
                id="dj-loop",
                name="DJ Loop",
                status="idle",
                milestones=[
                    Milestone(
                        id="dj-loop-activity",
                        name="Recent Activity",
                        current=True,
                        tasks=[
                            TaskNode(id="dj-loop-commit-abc1234", name="Fix tempo", done=True)
                        ],
                    )
                ],
            ),
        ],
    )


@pytest.fixture
def data_file(tmp_path, sample_document):
    """The sample document written to disk in on-disk (camelCase) form."""
    path = tmp_path / "data.json"
    path.write_text(json.dumps(sample_document.to_json_dict(), indent=2))
    return path


# ==============================================================================
# Fake Content Source
# ==============================================================================


class FakeSource:
    """
    In-memory content source.

    Args:
        repos: repo name -> {path: text} (a None text simulates a fetch failure)
        activity: repo name -> RepoActivity (defaults to an available, empty one)
        name: source name reported to the aggregator
    """

    def __init__(
        self,
        repos: dict[str, dict[str, str | None]],
        activity: dict[str, RepoActivity] | None = None,
        name: str = "fake",
    ) -> None:
        self.repos = repos
        self.activity = activity or {}
        self._name = name
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    async def discover(self) -> list[RepoRef]:
        return [RepoRef(name=name, owner="octocat") for name in self.repos]

    async def list_candidates(self, repo: RepoRef) -> list[str]:
        return list(self.repos.get(repo.name, {}))

    async def fetch_text(self, repo: RepoRef, path: str) -> str | None:
        return self.repos.get(repo.name, {}).get(path)

    async def probe_activity(self, repo: RepoRef) -> RepoActivity:
        return self.activity.get(repo.name, RepoActivity())

    async def aclose(self) -> None:
        self.closed = True


def make_activity(days_ago: float | None = None, commits: list[str] | None = None) -> RepoActivity:
    """Build a RepoActivity pushed `days_ago` days before NOW."""
    pushed = None
    if days_ago is not None:
        pushed = datetime.fromtimestamp(NOW.timestamp() - days_ago * 86400, tz=timezone.utc)
    return RepoActivity(
        pushed_at=pushed,
        commits=[
            CommitInfo(sha=f"{i:07x}abcdef", message=message, date=pushed)
            for i, message in enumerate(commits or [])
        ],
    )


@pytest.fixture
def fake_source():
    """The FakeSource class, for building sources inline."""
    return FakeSource


@pytest.fixture
def activity():
    """The make_activity helper."""
    return make_activity


@pytest.fixture
def now():
    """Fixed reference time matching make_activity."""
    return NOW
